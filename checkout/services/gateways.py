from abc import ABC, abstractmethod
from typing import Any, Optional

import structlog

from ..config import Settings
from ..errors import UserCancelled
from ..interfaces import CardTokenWidget, HostedCheckoutWidget, WalletWidget
from ..models import Order, PaymentMode, amount_in_minor_units, omise_checkout_url, omise_public_key
from ..schemas import CardToken, ChargeRequest, ChargeResult, PaypalApproval, UIDescription, WidgetKind
from .api import ApiClient, create_source

logger = structlog.get_logger(__name__)

CARD_PROMPT = "Please fill your card details to proceed"


class GatewayAdapter(ABC):
    """
    One payment provider's way of proving the payer approved the order.

    Adapters with `finalizes_charge = False` return an authorization artifact
    that the orchestrator turns into a charge call. Adapters with
    `finalizes_charge = True` return the remote verdict themselves, or None when
    the outcome is decided outside this process (hosted page).
    """

    mode: PaymentMode
    finalizes_charge: bool = False

    def __init__(self, order: Order, settings: Settings):
        self.order = order
        self.settings = settings

    def _ui(self, widget: WidgetKind, **extra) -> UIDescription:
        return UIDescription(
            mode=self.mode,
            widget=widget,
            amount_minor_units=amount_in_minor_units(self.order),
            currency=self.order.currency,
            **extra,
        )

    @abstractmethod
    def describe_ui(self) -> UIDescription:
        raise NotImplementedError

    @abstractmethod
    async def obtain_authorization(self) -> Any:
        raise NotImplementedError

    def build_charge_request(self, authorization: Any) -> ChargeRequest:
        # only reachable for adapters with finalizes_charge = True
        raise TypeError(f"{self.mode.value} settles the charge remotely, there is no charge request to build")


class StripeAdapter(GatewayAdapter):
    mode = PaymentMode.STRIPE

    def __init__(self, order: Order, settings: Settings, widget: CardTokenWidget):
        super().__init__(order, settings)
        self.widget = widget

    def describe_ui(self) -> UIDescription:
        return self._ui(
            WidgetKind.CARD_FORM,
            description=CARD_PROMPT,
            public_key=self.settings.stripe_publishable_key,
        )

    async def obtain_authorization(self) -> CardToken:
        token = await self.widget.open(self.describe_ui())
        if token is None:
            raise UserCancelled("card form closed without a token")
        return token

    def build_charge_request(self, authorization: CardToken) -> ChargeRequest:
        return ChargeRequest(stripe=authorization.id)


class PaypalAdapter(GatewayAdapter):
    mode = PaymentMode.PAYPAL

    def __init__(self, order: Order, settings: Settings, widget: WalletWidget):
        super().__init__(order, settings)
        self.widget = widget

    def describe_ui(self) -> UIDescription:
        return self._ui(WidgetKind.WALLET_BUTTON)

    async def obtain_authorization(self) -> PaypalApproval:
        approval = await self.widget.approve(self.describe_ui())
        if approval is None:
            raise UserCancelled("wallet flow abandoned")
        return approval

    def build_charge_request(self, authorization: PaypalApproval) -> ChargeRequest:
        return ChargeRequest(
            paypal_payer_id=authorization.payer_id,
            paypal_payment_id=authorization.payment_id,
        )


class OmiseAdapter(GatewayAdapter):
    mode = PaymentMode.OMISE
    finalizes_charge = True

    def __init__(self, order: Order, settings: Settings, widget: HostedCheckoutWidget):
        super().__init__(order, settings)
        self.widget = widget

    def describe_ui(self) -> UIDescription:
        return self._ui(
            WidgetKind.HOSTED_FORM,
            public_key=omise_public_key(self.settings),
            form_action=omise_checkout_url(self.order, self.settings),
        )

    async def obtain_authorization(self) -> Optional[ChargeResult]:
        ui = self.describe_ui()
        await self.widget.launch(ui)
        logger.info("omise.handed_off", order=self.order.identifier, form_action=ui.form_action)
        # the hosted page charges server-side; no verdict reaches us
        return None


class AliPayAdapter(GatewayAdapter):
    mode = PaymentMode.ALIPAY
    finalizes_charge = True

    def __init__(self, order: Order, settings: Settings, api: ApiClient):
        super().__init__(order, settings)
        self.api = api

    def describe_ui(self) -> UIDescription:
        return self._ui(WidgetKind.SOURCE_BUTTON)

    async def obtain_authorization(self) -> ChargeResult:
        source = await create_source(self.api, self.order.identifier)
        return ChargeResult(succeeded=source.status, message=source.message or "")


def adapter_for(order: Order,
                settings: Settings,
                api: ApiClient,
                card_widget: CardTokenWidget,
                wallet_widget: WalletWidget,
                hosted_widget: HostedCheckoutWidget,
                ) -> GatewayAdapter:
    mode = order.payment_mode
    if mode == PaymentMode.STRIPE:
        return StripeAdapter(order, settings, card_widget)
    if mode == PaymentMode.PAYPAL:
        return PaypalAdapter(order, settings, wallet_widget)
    if mode == PaymentMode.OMISE:
        return OmiseAdapter(order, settings, hosted_widget)
    if mode == PaymentMode.ALIPAY:
        return AliPayAdapter(order, settings, api)
    raise ValueError(f"Unknown payment mode: {mode!r}")
