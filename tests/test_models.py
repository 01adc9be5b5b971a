from decimal import Decimal

import pytest
from pydantic import ValidationError

from checkout.config import Settings
from checkout.models import (
    Order,
    PaymentMode,
    amount_in_minor_units,
    omise_checkout_url,
    omise_public_key,
)


def test_order_parses_mode_and_normalizes_currency():
    order = Order(identifier="abc", amount="10", currency="thb", payment_mode="omise")
    assert order.payment_mode is PaymentMode.OMISE
    assert order.currency == "THB"


def test_order_rejects_negative_amount():
    with pytest.raises(ValidationError):
        Order(identifier="abc", amount=Decimal("-1"), payment_mode=PaymentMode.STRIPE)


def test_order_rejects_unknown_mode():
    with pytest.raises(ValidationError):
        Order(identifier="abc", amount=Decimal("1"), payment_mode="bitcoin")


def test_order_is_frozen(make_order):
    order = make_order()
    with pytest.raises(ValidationError):
        order.payment_mode = PaymentMode.PAYPAL


@pytest.mark.parametrize(
    "amount, expected",
    [("25.50", 2550), ("0", 0), ("19.999", 2000), ("0.01", 1)],
)
def test_amount_in_minor_units(make_order, amount, expected):
    assert amount_in_minor_units(make_order(amount=Decimal(amount))) == expected


def test_omise_public_key_prefers_live_key():
    assert omise_public_key(Settings(omise_live_public="live", omise_test_public="test")) == "live"
    assert omise_public_key(Settings(omise_live_public=None, omise_test_public="test")) == "test"
    assert omise_public_key(Settings(omise_live_public=None, omise_test_public=None)) is None


def test_omise_checkout_url_uses_api_host(make_order):
    settings = Settings(api_host="https://api.example.com/", api_namespace="v2")
    url = omise_checkout_url(make_order(PaymentMode.OMISE), settings)
    assert url == "https://api.example.com/v1/orders/ord-7f3a/omise-checkout"


def test_settings_api_base_joins_host_and_namespace():
    assert Settings(api_host="https://api.example.com/", api_namespace="/v1/").api_base == "https://api.example.com/v1"
