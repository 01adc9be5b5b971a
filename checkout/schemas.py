import json
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from .models import PaymentMode


class CardToken(BaseModel):
    id: str = Field(..., description="Token id issued by the card widget e.g. 'tok_...'")


class PaypalApproval(BaseModel):
    payer_id: str
    payment_id: str


class ChargeRequest(BaseModel):
    stripe: Optional[str] = None
    paypal_payer_id: Optional[str] = None
    paypal_payment_id: Optional[str] = None

    def to_body(self) -> str:
        """Serialize to the literal JSON document the charge endpoint expects."""
        return json.dumps({
            "data": {
                "attributes": self.model_dump(),
                "type": "charge",
            }
        })


class ChargeResult(BaseModel):
    succeeded: bool
    message: str = ""


class ChargeAttributes(BaseModel):
    status: bool
    message: Optional[str] = None


class ChargeData(BaseModel):
    attributes: ChargeAttributes


class ChargeResponse(BaseModel):
    data: ChargeData


class SourceResponse(BaseModel):
    status: bool
    message: Optional[str] = None


class WidgetKind(str, Enum):
    CARD_FORM = "card_form"
    WALLET_BUTTON = "wallet_button"
    HOSTED_FORM = "hosted_form"
    SOURCE_BUTTON = "source_button"


class UIDescription(BaseModel):
    mode: PaymentMode
    widget: WidgetKind
    amount_minor_units: int
    currency: str
    description: Optional[str] = None
    public_key: Optional[str] = None
    form_action: Optional[str] = None  # hosted checkout only
