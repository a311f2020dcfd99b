"""
Shared HTTP settings and small helpers for the Razorpay MCP Server.

Values are read from the ConfigManager when it is available, with hardcoded
fallbacks so tools keep working if configuration loading fails.
"""

from typing import Dict, List, Optional, Union

import httpx

from .config_manager import get_config_manager


def get_default_timeout() -> httpx.Timeout:
    """Get timeout configuration from ConfigManager."""
    try:
        return get_config_manager().get_http_timeout()
    except Exception:
        return httpx.Timeout(30.0, connect=10.0)


def get_user_agent(transport: Optional[str] = None) -> str:
    """
    Build the User-Agent sent to the Razorpay API.

    Args:
        transport: Transport name appended as a suffix (e.g. "stdio")

    Returns:
        User-Agent string such as ``razorpay-mcp/1.0.0/stdio``
    """
    try:
        base = get_config_manager().config.server.user_agent
    except Exception:
        base = "razorpay-mcp/1.0.0"
    return f"{base}/{transport}" if transport else base


# Browser-like headers expected by the public documentation endpoints
DOCS_HEADERS: Dict[str, str] = {
    "sec-ch-ua-platform": "macOS",
    "x-country-code": "IN",
    "Referer": "https://razorpay.com/",
    "User-Agent": (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/136.0.0.0 Safari/537.36"
    ),
    "sec-ch-ua": "\"Chromium\";v=\"136\", \"Google Chrome\";v=\"136\", \"Not.A/Brand\";v=\"99\"",
    "sec-ch-ua-mobile": "?0",
}

DOCS_SEARCH_HEADERS: Dict[str, str] = {
    **DOCS_HEADERS,
    "content-type": "text/plain; charset=utf-8",
}

DOCS_PAGE_HEADERS: Dict[str, str] = {
    **DOCS_HEADERS,
    "Accept": (
        "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,"
        "image/webp,image/apng,*/*;q=0.8,application/signed-exchange;v=b3;q=0.7"
    ),
}


def create_http_client(
    timeout: Optional[httpx.Timeout] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    **kwargs,
) -> httpx.AsyncClient:
    """
    Create a configured HTTP client with standard settings.

    Args:
        timeout: Optional custom timeout, uses the configured timeout if not provided
        transport: Optional transport (tests pass an ``httpx.MockTransport``)
        **kwargs: Extra arguments forwarded to ``httpx.AsyncClient``

    Returns:
        Configured httpx.AsyncClient
    """
    if transport is not None:
        kwargs["transport"] = transport
    return httpx.AsyncClient(
        timeout=timeout or get_default_timeout(),
        follow_redirects=True,
        **kwargs,
    )


def parse_toolsets(value: Union[None, str, List[str]]) -> List[str]:
    """
    Normalize a toolset selection.

    Accepts a comma-separated string or a list whose items may themselves be
    comma-separated (as produced by repeated CLI options).
    """
    if not value:
        return []
    items = [value] if isinstance(value, str) else value
    names: List[str] = []
    for item in items:
        names.extend(part.strip() for part in item.split(",") if part.strip())
    return names
