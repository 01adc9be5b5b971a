"""
Pytest configuration and fixtures.
"""
from decimal import Decimal
from typing import Any, Callable, List, Optional, Tuple
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from checkout.config import Settings
from checkout.models import Order, PaymentMode
from checkout.orchestrator import CheckoutOrchestrator
from checkout.schemas import CardToken, PaypalApproval
from checkout.services.api import ApiClient


class RemoteApi:
    """In-process stand-in for the ticketing API's payment endpoints."""

    def __init__(self) -> None:
        self.charge_response: Any = {"data": {"attributes": {"status": True, "message": "ok"}}}
        self.source_response: Any = {"status": True}
        self.status_code = 200
        self.calls: List[Tuple[str, str, Optional[str], bytes]] = []
        self.on_request: Optional[Callable[[], None]] = None
        self.app = FastAPI()

        @self.app.post("/v1/orders/{identifier}/charge")
        async def charge(identifier: str, request: Request):
            return await self._record("charge", identifier, request, self.charge_response)

        @self.app.post("/v1/create_source/{identifier}")
        async def create_source(identifier: str, request: Request):
            return await self._record("create_source", identifier, request, self.source_response)

    async def _record(self, kind: str, identifier: str, request: Request, payload: Any) -> JSONResponse:
        self.calls.append((kind, identifier, request.headers.get("content-type"), await request.body()))
        if self.on_request:
            self.on_request()
        return JSONResponse(status_code=self.status_code, content=payload)

    def calls_to(self, kind: str) -> list:
        return [c for c in self.calls if c[0] == kind]


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        env="test",
        log_level="DEBUG",
        api_host="http://testserver",
        api_namespace="v1",
        stripe_publishable_key="pk_test_123",
        omise_live_public="pkey_live_abc",
        omise_test_public="pkey_test_abc",
    )


@pytest.fixture
def remote_api() -> RemoteApi:
    return RemoteApi()


@pytest.fixture
def api(remote_api: RemoteApi, test_settings: Settings) -> ApiClient:
    return ApiClient.from_settings(test_settings, transport=httpx.ASGITransport(app=remote_api.app))


@pytest.fixture
def notifier() -> MagicMock:
    return MagicMock()


@pytest.fixture
def navigator() -> MagicMock:
    return MagicMock()


@pytest.fixture
def card_widget() -> MagicMock:
    widget = MagicMock()
    widget.open = AsyncMock(return_value=CardToken(id="tok_visa"))
    return widget


@pytest.fixture
def wallet_widget() -> MagicMock:
    widget = MagicMock()
    widget.approve = AsyncMock(return_value=PaypalApproval(payer_id="PAYER1", payment_id="PAY-1"))
    return widget


@pytest.fixture
def hosted_widget() -> MagicMock:
    widget = MagicMock()
    widget.launch = AsyncMock(return_value=None)
    return widget


@pytest.fixture
def make_order() -> Callable[..., Order]:
    def _make(mode: PaymentMode = PaymentMode.STRIPE, **kwargs) -> Order:
        data = {"identifier": "ord-7f3a", "amount": Decimal("25.50"), "currency": "usd", "payment_mode": mode}
        data.update(kwargs)
        return Order(**data)

    return _make


@pytest.fixture
def orchestrator(
    api: ApiClient,
    notifier: MagicMock,
    navigator: MagicMock,
    card_widget: MagicMock,
    wallet_widget: MagicMock,
    hosted_widget: MagicMock,
    test_settings: Settings,
) -> CheckoutOrchestrator:
    return CheckoutOrchestrator(
        api,
        notifier,
        navigator,
        card_widget=card_widget,
        wallet_widget=wallet_widget,
        hosted_widget=hosted_widget,
        settings=test_settings,
    )
