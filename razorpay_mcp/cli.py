"""
Command line entry point for the Razorpay MCP Server.

Three transports are available:
- ``stdio``: MCP over stdin/stdout with the credentials given at startup
- ``sse``: MCP over Server-Sent Events; without credentials every call
  authenticates with its own bearer token
- ``http``: plain JSON-RPC over HTTP, authenticated per request

Options left unset fall back to the configuration file and environment.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, List, Optional

import typer
import uvicorn

from . import __version__
from .client import RazorpayClient
from .config import get_user_agent, parse_toolsets
from .config_manager import ConfigManager, ConfigurationModel, get_config_manager, set_config_manager
from .http_transport import create_http_app
from .logging_config import get_logger, setup_logging
from .server import create_app
from .tool_registry import build_toolsets
from .toolsets import ToolsetNotFoundError

app = typer.Typer(help="Razorpay MCP Server", no_args_is_help=True)
logger = get_logger(__name__)

KeyOption = Annotated[Optional[str], typer.Option("--key", "-k", help="Your Razorpay API key")]
SecretOption = Annotated[Optional[str], typer.Option("--secret", "-s", help="Your Razorpay API secret")]
LogFileOption = Annotated[Optional[str], typer.Option("--log-file", "-l", help="Path to the log file")]
ToolsetsOption = Annotated[
    Optional[List[str]],
    typer.Option("--toolsets", "-t", help="Comma-separated list of toolsets to enable (default: all)"),
]
ReadOnlyOption = Annotated[bool, typer.Option("--read-only", help="Run server in read-only mode")]
AddressOption = Annotated[Optional[str], typer.Option("--address", "-a", help="Address to bind the server to")]
PortOption = Annotated[Optional[int], typer.Option("--port", "-p", help="Port to bind the server to")]
ConfigOption = Annotated[Optional[Path], typer.Option("--config", help="Path to a YAML or JSON config file")]


@dataclass
class Settings:
    config: ConfigurationModel
    config_manager: ConfigManager
    key: str
    secret: str
    toolsets: List[str]
    read_only: bool
    address: str
    port: int


def _load_settings(
    config_path: Optional[Path],
    key: Optional[str],
    secret: Optional[str],
    log_file: Optional[str],
    toolsets: Optional[List[str]],
    read_only: bool,
    address: Optional[str] = None,
    port: Optional[int] = None,
) -> Settings:
    try:
        if config_path is not None:
            manager = ConfigManager(config_path, enable_hot_reload=False)
            set_config_manager(manager)
        else:
            manager = get_config_manager()
    except ValueError as e:
        typer.echo(f"error: {e}", err=True)
        raise typer.Exit(1)

    config = manager.config
    setup_logging(
        log_level=config.logging.level,
        service_name=config.server.name,
        version=__version__,
        log_file_path=log_file or config.logging.file_path,
    )
    return Settings(
        config=config,
        config_manager=manager,
        key=key or config.razorpay.key_id,
        secret=secret or config.razorpay.key_secret,
        toolsets=parse_toolsets(toolsets) or list(config.toolsets.enabled),
        read_only=read_only or config.toolsets.read_only,
        address=address or config.server.address,
        port=port or config.server.port,
    )


def _build_client(settings: Settings, key_id: str, key_secret: str, transport: str) -> RazorpayClient:
    return RazorpayClient(
        key_id,
        key_secret,
        base_url=settings.config.razorpay.base_url,
        timeout=settings.config_manager.get_http_timeout(),
        user_agent=get_user_agent(transport),
    )


def _fail(message: str) -> None:
    logger.error(message)
    typer.echo(f"error: {message}", err=True)
    raise typer.Exit(1)


@app.command()
def stdio(
    key: KeyOption = None,
    secret: SecretOption = None,
    log_file: LogFileOption = None,
    toolsets: ToolsetsOption = None,
    read_only: ReadOnlyOption = False,
    config: ConfigOption = None,
) -> None:
    """Start the MCP server on stdin/stdout."""
    settings = _load_settings(config, key, secret, log_file, toolsets, read_only)
    if not settings.key or not settings.secret:
        _fail("razorpay key and secret are required for the stdio server")

    client = _build_client(settings, settings.key, settings.secret, "stdio")
    try:
        mcp = create_app(client, settings.toolsets, settings.read_only, settings.config.docs)
    except ToolsetNotFoundError as e:
        _fail(str(e))

    typer.echo("Razorpay MCP Server running on stdio", err=True)
    mcp.run(transport="stdio", show_banner=False)


@app.command()
def sse(
    key: KeyOption = None,
    secret: SecretOption = None,
    log_file: LogFileOption = None,
    toolsets: ToolsetsOption = None,
    read_only: ReadOnlyOption = False,
    address: AddressOption = None,
    port: PortOption = None,
    config: ConfigOption = None,
) -> None:
    """Start the MCP server over Server-Sent Events."""
    settings = _load_settings(config, key, secret, log_file, toolsets, read_only, address, port)

    client = None
    if settings.key and settings.secret:
        client = _build_client(settings, settings.key, settings.secret, "sse")
    try:
        mcp = create_app(
            client,
            settings.toolsets,
            settings.read_only,
            settings.config.docs,
            authenticate_requests=True,
            client_factory=lambda key_id, key_secret: _build_client(settings, key_id, key_secret, "sse"),
        )
    except ToolsetNotFoundError as e:
        _fail(str(e))

    logger.info(f"Razorpay MCP Server running on sse at {settings.address}:{settings.port}")
    mcp.run(transport="sse", host=settings.address, port=settings.port, show_banner=False)


@app.command()
def http(
    log_file: LogFileOption = None,
    toolsets: ToolsetsOption = None,
    read_only: ReadOnlyOption = False,
    address: AddressOption = None,
    port: PortOption = None,
    config: ConfigOption = None,
) -> None:
    """Start the JSON-RPC HTTP server. Every request carries its own credentials."""
    settings = _load_settings(config, None, None, log_file, toolsets, read_only, address, port)
    try:
        group = build_toolsets(None, settings.toolsets, settings.read_only, settings.config.docs)
    except ToolsetNotFoundError as e:
        _fail(str(e))

    http_app = create_http_app(
        group,
        client_factory=lambda key_id, key_secret: _build_client(settings, key_id, key_secret, "http"),
    )
    logger.info(f"Razorpay MCP Server running on http at {settings.address}:{settings.port}")
    uvicorn.run(http_app, host=settings.address, port=settings.port, log_config=None)


@app.command()
def version() -> None:
    """Print the server version."""
    typer.echo(__version__)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
