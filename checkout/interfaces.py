"""Collaborators the orchestrator is handed at construction time."""
from typing import Optional, Protocol

from .schemas import CardToken, PaypalApproval, UIDescription


class Notifier(Protocol):
    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


class Navigator(Protocol):
    def go_to_order_confirmation(self, identifier: str) -> None: ...


class CardTokenWidget(Protocol):
    async def open(self, ui: UIDescription) -> Optional[CardToken]:
        """Return the issued token, None when dismissed; raise WidgetError on bad input."""


class WalletWidget(Protocol):
    async def approve(self, ui: UIDescription) -> Optional[PaypalApproval]:
        """Return the payer/payment ids, None when dismissed."""


class HostedCheckoutWidget(Protocol):
    async def launch(self, ui: UIDescription) -> None:
        """Hand the browser over to the hosted form at `ui.form_action`."""
