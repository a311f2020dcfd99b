"""
Plain JSON-RPC 2.0 over HTTP for the Razorpay MCP Server.

Clients POST ``tools/list`` and ``tools/call`` requests to ``/`` and
authenticate every request with ``Authorization: Bearer <base64(key:secret)>``.
The Razorpay client built from those credentials is bound to the request
context while the tool runs.
"""

import base64
import binascii
import logging
from typing import Any, Callable, Dict, Optional, Tuple

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.requests import Request
from starlette.responses import JSONResponse, PlainTextResponse, Response
from starlette.routing import Route

from .client import RazorpayClient, bind_client
from .metrics import get_metrics_collector
from .middleware import RequestLoggingMiddleware
from .toolsets import ToolsetGroup

logger = logging.getLogger(__name__)

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

ClientFactory = Callable[[str, str], RazorpayClient]


class AuthenticationError(Exception):
    """The Authorization header does not carry usable credentials."""


def parse_credentials(auth_header: Optional[str]) -> Tuple[str, str]:
    """
    Decode ``Bearer base64(key_id:key_secret)``.

    Raises:
        AuthenticationError: With the precise reason the header was rejected
    """
    if not auth_header:
        raise AuthenticationError("authorization header required")

    parts = auth_header.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise AuthenticationError("invalid authorization header format")

    try:
        decoded = base64.b64decode(parts[1], validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        raise AuthenticationError("invalid token encoding")

    key_id, sep, key_secret = decoded.partition(":")
    if not sep:
        raise AuthenticationError("invalid credentials format")
    return key_id, key_secret


def _rpc_result(request_id: Any, result: Any) -> JSONResponse:
    return JSONResponse({"jsonrpc": "2.0", "id": request_id, "result": result})


def _rpc_error(request_id: Any, code: int, message: str, data: Optional[str] = None) -> JSONResponse:
    error: Dict[str, Any] = {"code": code, "message": message}
    if data:
        error["data"] = data
    return JSONResponse({"jsonrpc": "2.0", "id": request_id, "error": error})


def create_http_app(
    group: ToolsetGroup,
    client_factory: Optional[ClientFactory] = None,
) -> Starlette:
    """
    Create the JSON-RPC Starlette application.

    Args:
        group: Toolsets whose enabled tools are served
        client_factory: Builds a Razorpay client from the request credentials
    """
    client_factory = client_factory or (lambda key_id, key_secret: RazorpayClient(key_id, key_secret))
    tools = {tool.name: tool for tool in group.get_enabled_tools()}

    async def live(request: Request) -> Response:
        return PlainTextResponse("OK")

    async def ready(request: Request) -> Response:
        return PlainTextResponse("OK")

    async def metrics(request: Request) -> Response:
        return PlainTextResponse(get_metrics_collector().get_prometheus_metrics())

    async def tools_list(request_id: Any) -> Response:
        return _rpc_result(request_id, {
            "tools": [
                {"name": t.name, "description": t.description, "inputSchema": t.input_schema()}
                for t in tools.values()
            ]
        })

    async def tools_call(request_id: Any, params: Any, client: RazorpayClient) -> Response:
        if params is None:
            params = {}
        if not isinstance(params, dict):
            return _rpc_error(request_id, INVALID_PARAMS, "Invalid params", "params must be an object")

        name = params.get("name")
        tool = tools.get(name) if isinstance(name, str) else None
        if tool is None:
            return _rpc_error(request_id, INTERNAL_ERROR, "Tool execution failed", f"tool {name} not found")

        arguments = params.get("arguments")
        if arguments is None:
            arguments = {}
        with bind_client(client):
            response = await tool.invoke(arguments)
        return _rpc_result(request_id, response.to_content())

    async def rpc(request: Request) -> Response:
        try:
            payload = await request.json()
        except ValueError as e:
            return _rpc_error(None, PARSE_ERROR, "Parse error", str(e))

        if not isinstance(payload, dict):
            return _rpc_error(None, INVALID_REQUEST, "Invalid Request", "request must be an object")

        request_id = payload.get("id")
        if payload.get("jsonrpc") != "2.0":
            return _rpc_error(request_id, INVALID_REQUEST, "Invalid Request", "JSON-RPC version must be 2.0")

        try:
            key_id, key_secret = parse_credentials(request.headers.get("authorization"))
        except AuthenticationError as e:
            logger.warning(f"Rejected JSON-RPC request: {e}")
            return _rpc_error(request_id, INTERNAL_ERROR, "Authentication failed", str(e))
        client = client_factory(key_id, key_secret)

        method = payload.get("method")
        if method == "tools/list":
            return await tools_list(request_id)
        if method == "tools/call":
            return await tools_call(request_id, payload.get("params"), client)
        return _rpc_error(request_id, METHOD_NOT_FOUND, "Method not found", f"Method {method} not found")

    routes = [
        Route("/live", live, methods=["GET"]),
        Route("/ready", ready, methods=["GET"]),
        Route("/metrics", metrics, methods=["GET"]),
        Route("/", rpc, methods=["POST"]),
    ]
    middleware = [Middleware(RequestLoggingMiddleware, exclude_paths=["/live", "/ready"])]
    return Starlette(routes=routes, middleware=middleware)
