"""
Request/response logging middleware for the Razorpay MCP Server.

Logs every HTTP request of the JSON-RPC transport with timing information
and records request metrics.
"""

import time
from typing import Callable, List, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from .logging_config import get_logger, log_with_context
from .metrics import get_metrics_collector


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to log HTTP requests and responses with metrics."""

    def __init__(self, app, exclude_paths: Optional[List[str]] = None):
        super().__init__(app)
        self.request_logger = get_logger("razorpay_mcp.requests")
        self.metrics = get_metrics_collector()
        self.exclude_paths = exclude_paths or []

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.time()
        method = request.method
        path = request.url.path
        should_log = path not in self.exclude_paths

        try:
            response = await call_next(request)
        except Exception as e:
            response_time_ms = (time.time() - start_time) * 1000
            if should_log:
                self._log_request(request, 500, response_time_ms, error=str(e))
            self._record_metrics(method, path, 500, response_time_ms)
            raise

        response_time_ms = (time.time() - start_time) * 1000
        if should_log:
            self._log_request(request, response.status_code, response_time_ms)
        self._record_metrics(method, path, response.status_code, response_time_ms)
        return response

    def _get_client_ip(self, request: Request) -> str:
        forwarded_for = request.headers.get("x-forwarded-for")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()

        real_ip = request.headers.get("x-real-ip")
        if real_ip:
            return real_ip

        if request.client:
            return request.client.host
        return "unknown"

    def _log_request(
        self,
        request: Request,
        status_code: int,
        response_time_ms: float,
        error: Optional[str] = None,
    ) -> None:
        method = request.method
        path = request.url.path
        message = f"{method} {path} - {status_code} - {response_time_ms:.2f}ms"
        level = "info"
        context = {
            "method": method,
            "path": path,
            "status_code": status_code,
            "response_time_ms": round(response_time_ms, 2),
            "user_agent": request.headers.get("user-agent", ""),
            "client_ip": self._get_client_ip(request),
        }
        if error:
            message = f"{message} - ERROR: {error}"
            level = "error"
            context["error"] = error
        # Credentials travel in the Authorization header; it is never logged.
        log_with_context(self.request_logger, level, message, **context)

    def _record_metrics(self, method: str, path: str, status_code: int, response_time_ms: float) -> None:
        metric_path = self._normalize_path_for_metrics(path)
        self.metrics.increment_counter(
            "http_requests_total",
            method=method,
            path=metric_path,
            status_code=str(status_code),
        )
        self.metrics.record_timing(
            "http_request_duration",
            response_time_ms,
            method=method,
            path=metric_path,
        )
        if status_code >= 400:
            self.metrics.increment_counter(
                "http_errors_total",
                method=method,
                path=metric_path,
                status_code=str(status_code),
            )

    def _normalize_path_for_metrics(self, path: str) -> str:
        """Collapse paths to a small fixed set to keep label cardinality low."""
        if path in ("/live", "/ready", "/metrics"):
            return path
        return "/rpc"
