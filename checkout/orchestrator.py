"""
Checkout state machine.

    Idle -> Authorizing -> Charging -> Succeeded | Failed

Adapters that settle the charge remotely (Omise, AliPay) go straight from
Authorizing to a terminal state. A dismissed widget or a hand-off to a hosted
page puts the attempt back in Idle with no notification.
"""
from dataclasses import dataclass
from enum import Enum
from gettext import gettext
from typing import Callable, Optional

import structlog

from .config import settings as default_settings, Settings
from .errors import GatewayRejected, TransportFault, UserCancelled, WidgetError
from .interfaces import CardTokenWidget, HostedCheckoutWidget, Navigator, Notifier, WalletWidget
from .models import Order, PaymentMode
from .schemas import ChargeResult, UIDescription
from .services.api import ApiClient, create_charge
from .services.gateways import GatewayAdapter, adapter_for

logger = structlog.get_logger(__name__)

GENERIC_ERROR = "An unexpected error has occurred"
PAYMENT_SUCCEEDED = "Payment has succeeded"
PAYMENT_FAILED = "Payment has failed"


class CheckoutState(str, Enum):
    IDLE = "idle"
    AUTHORIZING = "authorizing"
    CHARGING = "charging"
    SUCCEEDED = "succeeded"
    FAILED = "failed"

    @property
    def terminal(self) -> bool:
        return self in (CheckoutState.SUCCEEDED, CheckoutState.FAILED)


class CheckoutOutcome(str, Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELLED = "cancelled"
    HANDED_OFF = "handed_off"


_TRANSITIONS = {
    CheckoutState.IDLE: {CheckoutState.AUTHORIZING},
    CheckoutState.AUTHORIZING: {
        CheckoutState.CHARGING,
        CheckoutState.SUCCEEDED,
        CheckoutState.FAILED,
        CheckoutState.IDLE,
    },
    CheckoutState.CHARGING: {CheckoutState.SUCCEEDED, CheckoutState.FAILED},
    CheckoutState.SUCCEEDED: set(),
    CheckoutState.FAILED: set(),
}


class InvalidTransition(RuntimeError):
    pass


@dataclass
class CheckoutAttempt:
    order: Order
    mode: PaymentMode
    state: CheckoutState = CheckoutState.IDLE
    error: Optional[str] = None
    outcome: Optional[CheckoutOutcome] = None

    @property
    def finished(self) -> bool:
        return self.outcome is not None

    def advance(self, new_state: CheckoutState) -> None:
        if self.finished or new_state not in _TRANSITIONS[self.state]:
            raise InvalidTransition(f"{self.state.value} -> {new_state.value}")
        self.state = new_state

    def finish(self, state: CheckoutState, outcome: CheckoutOutcome, error: Optional[str] = None) -> None:
        self.advance(state)
        self.outcome = outcome
        self.error = error


class CheckoutOrchestrator:
    """
    Drives one checkout attempt at a time.

    `is_loading` is the busy flag the UI binds to. It is raised when an attempt
    enters Authorizing and lowered as soon as the attempt settles, before any
    notification or navigation fires. `checkout()` lowers it again on exit.
    """

    def __init__(self,
                 api: ApiClient,
                 notifier: Notifier,
                 navigator: Navigator,
                 card_widget: CardTokenWidget,
                 wallet_widget: WalletWidget,
                 hosted_widget: HostedCheckoutWidget,
                 settings: Settings = default_settings,
                 translate: Callable[[str], str] = gettext,
                 ):
        self.api = api
        self.notifier = notifier
        self.navigator = navigator
        self.card_widget = card_widget
        self.wallet_widget = wallet_widget
        self.hosted_widget = hosted_widget
        self.settings = settings
        self.translate = translate

        self.is_loading = False
        self.attempt: Optional[CheckoutAttempt] = None

    @property
    def state(self) -> CheckoutState:
        return self.attempt.state if self.attempt else CheckoutState.IDLE

    def adapter_for(self, order: Order) -> GatewayAdapter:
        return adapter_for(
            order,
            self.settings,
            self.api,
            card_widget=self.card_widget,
            wallet_widget=self.wallet_widget,
            hosted_widget=self.hosted_widget,
        )

    def describe_ui(self, order: Order) -> UIDescription:
        return self.adapter_for(order).describe_ui()

    def checkout_opened(self) -> None:
        logger.debug("card_widget.opened")

    def checkout_closed(self) -> None:
        logger.debug("card_widget.closed")

    async def checkout(self, order: Order) -> CheckoutAttempt:
        """Run a full attempt for `order`. Never raises."""
        log = logger.bind(order=order.identifier, mode=order.payment_mode.value)
        if self.is_loading:
            log.warning("checkout.ignored_busy", in_flight=self.attempt.order.identifier)
            return self.attempt

        attempt = CheckoutAttempt(order=order, mode=order.payment_mode)
        self.attempt = attempt
        self.is_loading = True
        try:
            await self._run(attempt, log)
        except UserCancelled as e:
            log.info("checkout.cancelled", reason=e.message)
            self._finish(attempt, CheckoutState.IDLE, CheckoutOutcome.CANCELLED)
        except (WidgetError, GatewayRejected) as e:
            self._fail(attempt, e.message, log)
        except TransportFault as e:
            log.warning("checkout.transport_fault", error=e.message, exc_info=e.original or e)
            self._fail(attempt, self.translate(GENERIC_ERROR), log)
        except Exception:
            log.exception("checkout.unexpected_error")
            self._fail(attempt, self.translate(GENERIC_ERROR), log)
        finally:
            self.is_loading = False
        return attempt

    async def _run(self, attempt: CheckoutAttempt, log) -> None:
        attempt.advance(CheckoutState.AUTHORIZING)
        log.info("checkout.authorizing")
        adapter = self.adapter_for(attempt.order)
        authorization = await adapter.obtain_authorization()

        if adapter.finalizes_charge:
            if authorization is None:
                log.info("checkout.handed_off")
                self._finish(attempt, CheckoutState.IDLE, CheckoutOutcome.HANDED_OFF)
                return
            result = authorization
        else:
            request = adapter.build_charge_request(authorization)
            attempt.advance(CheckoutState.CHARGING)
            log.info("checkout.charging")
            result = await create_charge(self.api, attempt.order.identifier, request)

        self._settle(attempt, result, log)

    def _finish(self, attempt: CheckoutAttempt, state: CheckoutState, outcome: CheckoutOutcome, error: Optional[str] = None) -> None:
        attempt.finish(state, outcome, error)
        # lowered before any notification or navigation runs; checkout() lowers it again in finally
        self.is_loading = False

    def _settle(self, attempt: CheckoutAttempt, result: ChargeResult, log) -> None:
        if not result.succeeded:
            raise GatewayRejected(result.message or self.translate(PAYMENT_FAILED))

        self._finish(attempt, CheckoutState.SUCCEEDED, CheckoutOutcome.SUCCEEDED)
        log.info("checkout.succeeded")
        self.notifier.success(result.message or self.translate(PAYMENT_SUCCEEDED))
        self.navigator.go_to_order_confirmation(attempt.order.identifier)

    def _fail(self, attempt: CheckoutAttempt, message: str, log) -> None:
        if attempt.finished:
            # a collaborator blew up after the verdict; the attempt is already settled
            log.warning("checkout.error_after_terminal", state=attempt.state.value)
            return
        self._finish(attempt, CheckoutState.FAILED, CheckoutOutcome.FAILED, error=message)
        log.info("checkout.failed", error=message)
        try:
            self.notifier.error(message)
        except Exception:
            log.exception("checkout.notifier_failed")
