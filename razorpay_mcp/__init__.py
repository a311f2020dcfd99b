"""
Razorpay MCP Server Package

An MCP server exposing Razorpay customers, payouts, refunds, settlements,
QR codes and documentation search as tools.
"""

__version__ = "1.0.0"

from .server import create_app  # noqa: E402
from .http_transport import create_http_app  # noqa: E402

__all__ = ["create_app", "create_http_app", "__version__"]
