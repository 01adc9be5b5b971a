from typing import Any, Optional, Union

import httpx
import structlog
from pydantic import ValidationError

from ..config import settings as default_settings, Settings
from ..errors import TransportFault
from ..schemas import ChargeRequest, ChargeResponse, ChargeResult, SourceResponse

logger = structlog.get_logger(__name__)

HEADERS = {
    "Accept": "application/json",
    "Content-Type": "application/json",
}


class ApiClient:
    """
    Thin POST-only client for the ticketing API.
    One request, one response: no retries here.
    """

    def __init__(self,
                 base_url: str,
                 auth_token: Optional[str] = None,
                 timeout: float = 30.0,
                 transport: Optional[httpx.AsyncBaseTransport] = None,
                 ):
        self.base_url = base_url.rstrip("/")
        self.auth_token = auth_token
        self.timeout = timeout
        self.transport = transport

    @classmethod
    def from_settings(cls, settings: Settings = default_settings, **kwargs) -> "ApiClient":
        return cls(
            settings.api_base,
            auth_token=settings.auth_token,
            timeout=settings.request_timeout,
            **kwargs,
        )

    def _headers(self) -> dict:
        headers = HEADERS.copy()
        if self.auth_token:
            headers["Authorization"] = f"JWT {self.auth_token}"
        return headers

    def url_for(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    async def post(self,
                   path: str,
                   payload: Union[str, dict, None] = None,
                   skip_data_transform: bool = False,
                   ) -> Any:
        """
        POST to `path` and return the decoded JSON body.

        With `skip_data_transform` the payload must already be a JSON string and
        goes out byte for byte; otherwise a dict payload is encoded by httpx.
        """
        url = self.url_for(path)
        if skip_data_transform:
            if payload is not None and not isinstance(payload, str):
                raise TypeError("skip_data_transform expects a pre-serialized string payload")
            kwargs = {"content": payload}
        else:
            kwargs = {"json": payload} if payload is not None else {}

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                resp = await client.post(url, headers=self._headers(), **kwargs)
                resp.raise_for_status()
                return resp.json()
        except httpx.HTTPError as e:
            raise TransportFault(f"POST {url} failed: {e}", original=e) from e
        except ValueError as e:
            # JSONDecodeError and UnicodeDecodeError both land here
            raise TransportFault(f"POST {url} returned a non-JSON body", original=e) from e


async def create_charge(api: ApiClient, identifier: str, request: ChargeRequest) -> ChargeResult:
    """Submit proof of authorization for an order and return the remote verdict."""
    body = await api.post(f"orders/{identifier}/charge", request.to_body(), skip_data_transform=True)
    try:
        charge = ChargeResponse.model_validate(body)
    except ValidationError as e:
        raise TransportFault(f"unexpected charge response for order {identifier}", original=e) from e

    attrs = charge.data.attributes
    logger.debug("charge.response", order=identifier, status=attrs.status)
    return ChargeResult(succeeded=attrs.status, message=attrs.message or "")


async def create_source(api: ApiClient, identifier: str) -> SourceResponse:
    """Create and settle an AliPay source for an order."""
    body = await api.post(f"create_source/{identifier}")
    try:
        return SourceResponse.model_validate(body)
    except ValidationError as e:
        raise TransportFault(f"unexpected source response for order {identifier}", original=e) from e
