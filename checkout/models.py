from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .config import Settings


class PaymentMode(str, Enum):
    STRIPE = "stripe"
    PAYPAL = "paypal"
    OMISE = "omise"
    ALIPAY = "alipay"


class Order(BaseModel):
    """Read-only view of the order being paid for."""

    model_config = ConfigDict(frozen=True)

    identifier: str = Field(..., min_length=1)
    amount: Decimal = Field(..., ge=0)
    currency: str = Field(default="USD", min_length=3, max_length=3)
    payment_mode: PaymentMode

    @field_validator("currency")
    @classmethod
    def upper_currency(cls, v: str) -> str:
        return v.upper()


def amount_in_minor_units(order: Order) -> int:
    return int((order.amount * 100).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def omise_public_key(settings: Settings) -> Optional[str]:
    # live key wins when both are configured
    return settings.omise_live_public or settings.omise_test_public


def omise_checkout_url(order: Order, settings: Settings) -> str:
    return f"{settings.api_host.rstrip('/')}/v1/orders/{order.identifier}/omise-checkout"
