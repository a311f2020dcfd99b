"""
Async client for the Razorpay REST API.

Resources are exposed as namespaces mirroring the official SDKs
(``client.customer.fetch(...)``, ``client.settlement.all(...)``). Every call
opens a short-lived httpx client, authenticates with the key pair and returns
the decoded JSON body.

The client used by a tool is resolved at call time: an explicitly configured
client wins, otherwise the one bound to the current request context by the
HTTP transport.
"""

import contextvars
import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

import httpx

from .config import create_http_client, get_user_agent

logger = logging.getLogger(__name__)

API_VERSION = "v1"


class RazorpayAPIError(Exception):
    """Non-2xx response from the Razorpay API."""

    def __init__(self, status_code: int, code: str, description: str):
        super().__init__(f"{code}: {description}")
        self.status_code = status_code
        self.code = code
        self.description = description

    @classmethod
    def from_response(cls, response: httpx.Response) -> "RazorpayAPIError":
        code = "SERVER_ERROR"
        description = response.text or response.reason_phrase
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and isinstance(body.get("error"), dict):
            error = body["error"]
            code = error.get("code") or code
            description = error.get("description") or description
        return cls(response.status_code, code, description)


class ClientResolutionError(Exception):
    """No Razorpay client is available for the current request."""


class _Resource:
    def __init__(self, client: "RazorpayClient"):
        self._client = client


class CustomerResource(_Resource):
    async def create(self, data: Dict[str, Any]) -> Any:
        return await self._client.post("/customers", json=data)

    async def fetch(self, customer_id: str) -> Any:
        return await self._client.get(f"/customers/{customer_id}")

    async def edit(self, customer_id: str, data: Dict[str, Any]) -> Any:
        return await self._client.put(f"/customers/{customer_id}", json=data)

    async def all(self, options: Optional[Dict[str, Any]] = None) -> Any:
        return await self._client.get("/customers", params=options)

    async def fetch_tokens(self, customer_id: str) -> Any:
        return await self._client.get(f"/customers/{customer_id}/tokens")


class PayoutResource(_Resource):
    async def fetch(self, payout_id: str) -> Any:
        return await self._client.get(f"/payouts/{payout_id}")

    async def all(self, options: Optional[Dict[str, Any]] = None) -> Any:
        return await self._client.get("/payouts", params=options)


class PaymentResource(_Resource):
    async def refund(self, payment_id: str, data: Dict[str, Any]) -> Any:
        return await self._client.post(f"/payments/{payment_id}/refund", json=data)

    async def fetch_multiple_refund(self, payment_id: str, options: Optional[Dict[str, Any]] = None) -> Any:
        return await self._client.get(f"/payments/{payment_id}/refunds", params=options)

    async def fetch_refund(self, payment_id: str, refund_id: str) -> Any:
        return await self._client.get(f"/payments/{payment_id}/refunds/{refund_id}")


class RefundResource(_Resource):
    async def fetch(self, refund_id: str) -> Any:
        return await self._client.get(f"/refunds/{refund_id}")

    async def all(self, options: Optional[Dict[str, Any]] = None) -> Any:
        return await self._client.get("/refunds", params=options)

    async def edit(self, refund_id: str, data: Dict[str, Any]) -> Any:
        return await self._client.patch(f"/refunds/{refund_id}", json=data)


class SettlementResource(_Resource):
    async def fetch(self, settlement_id: str) -> Any:
        return await self._client.get(f"/settlements/{settlement_id}")

    async def all(self, options: Optional[Dict[str, Any]] = None) -> Any:
        return await self._client.get("/settlements", params=options)

    async def reports(self, options: Dict[str, Any]) -> Any:
        return await self._client.get("/settlements/recon/combined", params=options)

    async def create_ondemand(self, data: Dict[str, Any]) -> Any:
        return await self._client.post("/settlements/ondemand", json=data)

    async def fetch_all_ondemand(self, options: Optional[Dict[str, Any]] = None) -> Any:
        return await self._client.get("/settlements/ondemand", params=options)

    async def fetch_ondemand(self, settlement_id: str) -> Any:
        return await self._client.get(f"/settlements/ondemand/{settlement_id}")


class QrCodeResource(_Resource):
    async def create(self, data: Dict[str, Any]) -> Any:
        return await self._client.post("/payments/qr_codes", json=data)

    async def fetch(self, qr_code_id: str) -> Any:
        return await self._client.get(f"/payments/qr_codes/{qr_code_id}")

    async def all(self, options: Optional[Dict[str, Any]] = None) -> Any:
        return await self._client.get("/payments/qr_codes", params=options)

    async def fetch_payments(self, qr_code_id: str, options: Optional[Dict[str, Any]] = None) -> Any:
        return await self._client.get(f"/payments/qr_codes/{qr_code_id}/payments", params=options)

    async def close(self, qr_code_id: str) -> Any:
        return await self._client.post(f"/payments/qr_codes/{qr_code_id}/close")


class RazorpayClient:
    """Thin async wrapper over the Razorpay REST API."""

    def __init__(
        self,
        key_id: str,
        key_secret: str,
        base_url: str = "https://api.razorpay.com",
        timeout: Optional[httpx.Timeout] = None,
        user_agent: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.key_id = key_id
        self._key_secret = key_secret
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.user_agent = user_agent or get_user_agent()
        self._transport = transport

        self.customer = CustomerResource(self)
        self.payout = PayoutResource(self)
        self.payment = PaymentResource(self)
        self.refund = RefundResource(self)
        self.settlement = SettlementResource(self)
        self.qr_code = QrCodeResource(self)

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{API_VERSION}{path}"

    async def request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Send one API request and decode the JSON response.

        Raises:
            RazorpayAPIError: The API answered with a non-2xx status
            httpx.HTTPError: Transport-level failures (timeouts, network)
        """
        url = self._url(path)
        headers = {"User-Agent": self.user_agent}
        logger.debug(f"Razorpay API {method} {url}")
        async with create_http_client(self.timeout, transport=self._transport) as http:
            response = await http.request(
                method,
                url,
                params=params or None,
                json=json,
                headers=headers,
                auth=(self.key_id, self._key_secret),
            )
        if response.status_code >= 400:
            error = RazorpayAPIError.from_response(response)
            logger.warning(f"Razorpay API {method} {path} returned {response.status_code}: {error}")
            raise error
        if not response.content:
            return {}
        return response.json()

    async def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, json: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("POST", path, json=json)

    async def put(self, path: str, json: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("PUT", path, json=json)

    async def patch(self, path: str, json: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("PATCH", path, json=json)


_current_client: contextvars.ContextVar[Optional[RazorpayClient]] = contextvars.ContextVar(
    "razorpay_client", default=None
)


def client_from_context() -> Optional[RazorpayClient]:
    return _current_client.get()


@contextmanager
def bind_client(client: RazorpayClient) -> Iterator[RazorpayClient]:
    """Bind a client to the current context for the duration of the block."""
    token = _current_client.set(client)
    try:
        yield client
    finally:
        _current_client.reset(token)


def resolve_client(default: Optional[RazorpayClient]) -> RazorpayClient:
    """
    Return the default client, or the one bound to the current request.

    Raises:
        ClientResolutionError: Neither is available
    """
    if default is not None:
        return default
    client = client_from_context()
    if client is None:
        raise ClientResolutionError("no client found in context")
    return client
