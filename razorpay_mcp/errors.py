"""
Error handling utilities for the Razorpay MCP Server.

This module provides standardized error results and a decorator that turns
exceptions raised while calling the Razorpay API into error tool results, so
no exception ever escapes a tool handler.
"""

import logging
import httpx
from functools import wraps
from typing import Any, Callable

from .client import ClientResolutionError, RazorpayAPIError
from .tool import ToolResponse


logger = logging.getLogger(__name__)


class ErrorType:
    """Standard error type constants."""
    VALIDATION = "validation_error"
    API = "api_error"
    TIMEOUT = "timeout_error"
    HTTP = "http_error"
    NETWORK = "network_error"
    CLIENT_RESOLUTION = "client_resolution_error"
    UNEXPECTED = "unexpected_error"


def create_error_result(
    error_message: str,
    error_type: str = ErrorType.UNEXPECTED,
) -> ToolResponse:
    """
    Create a standardized error tool result.

    Args:
        error_message: Human-readable error description
        error_type: Type of error (see ErrorType constants)

    Returns:
        Error ToolResponse carrying the message verbatim
    """
    logger.error(f"Error ({error_type}): {error_message}")
    return ToolResponse.error(error_message)


def create_success_result(data: Any) -> ToolResponse:
    """
    Create a standardized success tool result.

    Args:
        data: JSON-serializable payload returned by the API

    Returns:
        ToolResponse with the payload encoded as JSON
    """
    return ToolResponse.json(data)


def handle_api_errors(operation_name: str) -> Callable:
    """
    Decorator for standardizing Razorpay API error handling.

    Args:
        operation_name: Gerund describing the call, e.g. "fetching customer";
            failures render as "<operation_name> failed: <error>"

    Returns:
        Decorator function
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def wrapper(*args, **kwargs) -> ToolResponse:
            try:
                return await func(*args, **kwargs)

            except ClientResolutionError as e:
                return create_error_result(str(e), ErrorType.CLIENT_RESOLUTION)

            except RazorpayAPIError as e:
                return create_error_result(f"{operation_name} failed: {e}", ErrorType.API)

            except httpx.TimeoutException:
                return create_error_result(
                    f"{operation_name} failed: request timed out",
                    ErrorType.TIMEOUT,
                )

            except httpx.HTTPStatusError as e:
                return create_error_result(
                    f"{operation_name} failed: HTTP {e.response.status_code}: {e.response.reason_phrase}",
                    ErrorType.HTTP,
                )

            except httpx.NetworkError as e:
                return create_error_result(f"{operation_name} failed: {e}", ErrorType.NETWORK)

            except Exception as e:
                logger.exception(f"Unexpected error during {operation_name}")
                return create_error_result(f"{operation_name} failed: {e}", ErrorType.UNEXPECTED)

        return wrapper
    return decorator
