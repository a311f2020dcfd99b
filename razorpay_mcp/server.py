"""
Razorpay MCP Server

A FastMCP server that provides:
- Health endpoint (non-MCP REST endpoint)
- Customer, payout, refund, settlement and QR code tools backed by the
  Razorpay API
- Documentation search and retrieval tools

Tools are grouped into toolsets that can be enabled selectively, and the
whole server can be limited to read-only tools.
"""
from __future__ import annotations

import logging
from typing import Annotated, Any, Dict, List, Optional

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from fastmcp.server.dependencies import get_http_headers
from fastmcp.server.middleware import Middleware, MiddlewareContext
from fastmcp.tools import Tool, ToolResult
from pydantic import Field
from pydantic.json_schema import SkipJsonSchema
from starlette.responses import JSONResponse

from . import __version__, tool_registry
from .client import RazorpayClient, bind_client
from .config_manager import DocsConfig
from .http_transport import AuthenticationError, ClientFactory, parse_credentials
from .tool import ToolDefinition
from .toolsets import ToolsetGroup

logger = logging.getLogger(__name__)

SERVER_NAME = "razorpay-mcp-server"


class RazorpayTool(Tool):
    """Exposes a ``ToolDefinition`` through FastMCP with its explicit schema."""

    definition: Annotated[SkipJsonSchema[Any], Field(exclude=True)] = None

    @classmethod
    def from_definition(cls, definition: ToolDefinition) -> "RazorpayTool":
        return cls(
            name=definition.name,
            description=definition.description,
            parameters=definition.input_schema(),
            definition=definition,
        )

    async def run(self, arguments: Dict[str, Any]) -> ToolResult:
        response = await self.definition.invoke(arguments)
        if response.is_error:
            raise ToolError(response.text)
        return ToolResult(content=response.text)


class CredentialsMiddleware(Middleware):
    """
    Binds a Razorpay client built from the caller's bearer token.

    Used by the network transports when the server has no client of its own.
    """

    def __init__(self, client_factory: Optional[ClientFactory] = None):
        self.client_factory = client_factory or (lambda key_id, key_secret: RazorpayClient(key_id, key_secret))

    async def on_call_tool(self, context: MiddlewareContext, call_next):
        headers = get_http_headers(include_all=True)
        try:
            key_id, key_secret = parse_credentials(headers.get("authorization"))
        except AuthenticationError as e:
            raise ToolError(f"unauthorized: {e}")
        with bind_client(self.client_factory(key_id, key_secret)):
            return await call_next(context)


class FastMCPToolServer:
    """Registers tool definitions on a FastMCP instance."""

    def __init__(self, mcp: FastMCP):
        self.mcp = mcp
        self.tools: List[ToolDefinition] = []

    def add_tools(self, *tools: ToolDefinition) -> None:
        for definition in tools:
            self.mcp.add_tool(RazorpayTool.from_definition(definition))
            self.tools.append(definition)


def create_app(
    client: Optional[RazorpayClient] = None,
    enabled_toolsets: Optional[List[str]] = None,
    read_only: bool = False,
    docs: Optional[DocsConfig] = None,
    group: Optional[ToolsetGroup] = None,
    authenticate_requests: bool = False,
    client_factory: Optional[ClientFactory] = None,
) -> FastMCP:
    """
    Create and configure the FastMCP server application.

    Args:
        client: Razorpay client shared by every API tool
        enabled_toolsets: Toolsets to expose; empty or ``None`` exposes all
        read_only: Expose read tools only
        docs: Documentation site endpoints
        group: Prebuilt toolset group, overrides the other toolset arguments
        authenticate_requests: Without a client, build one per tool call from
            the request's ``Authorization: Bearer`` header (SSE transport)
        client_factory: Builds those per-request clients

    Raises:
        ToolsetNotFoundError: An unknown toolset name was requested
    """
    mcp = FastMCP(name=SERVER_NAME)
    if client is None and authenticate_requests:
        mcp.add_middleware(CredentialsMiddleware(client_factory))

    if group is None:
        group = tool_registry.build_toolsets(client, enabled_toolsets, read_only, docs)
    group.register_tools(FastMCPToolServer(mcp))

    @mcp.custom_route("/health", methods=["GET"])
    async def health_check(request):
        """Health check endpoint for monitoring server status."""
        return JSONResponse({
            "status": "healthy",
            "service": SERVER_NAME,
            "version": __version__,
        })

    return mcp
