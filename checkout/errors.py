from typing import Optional


class CheckoutError(Exception):
    """Base class for everything that can end a checkout attempt early."""

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class UserCancelled(CheckoutError):
    """The payer dismissed a widget. Nothing changed remotely."""


class WidgetError(CheckoutError):
    """A widget rejected the payer's input (invalid card, expired wallet session)."""


class GatewayRejected(CheckoutError):
    """The remote side answered with a failure status."""


class TransportFault(CheckoutError):
    """
    Network error, non-2xx response or a body we could not understand.
    The message is for logs only; `original` keeps the underlying exception.
    """

    def __init__(self, message: str, original: Optional[BaseException] = None):
        super().__init__(message)
        self.original = original
