"""
Tests for the error handling utilities.

This module tests the standardized error results and the API error decorator.
"""

import json

import pytest
import httpx

from razorpay_mcp.client import ClientResolutionError, RazorpayAPIError
from razorpay_mcp.errors import (
    ErrorType, create_error_result, create_success_result, handle_api_errors,
)
from razorpay_mcp.tool import ToolResponse


class TestResultCreation:
    """Test error and success result creation utilities."""

    def test_create_error_result(self):
        """Test create_error_result keeps the message verbatim."""
        result = create_error_result("Test error message", ErrorType.VALIDATION)

        assert result.is_error is True
        assert result.text == "Test error message"

    def test_create_success_result(self):
        """Test create_success_result encodes the payload as JSON."""
        result = create_success_result({"id": "cust_1", "count": 5})

        assert result.is_error is False
        assert json.loads(result.text) == {"id": "cust_1", "count": 5}

    def test_success_result_of_list(self):
        result = create_success_result([{"id": "a"}])
        assert json.loads(result.text) == [{"id": "a"}]


class TestApiErrorDecorator:
    """Test the API error handling decorator."""

    @pytest.mark.asyncio
    async def test_successful_function(self):
        """Test decorator with successful function."""
        @handle_api_errors("fetching customer")
        async def test_func():
            return create_success_result({"id": "cust_1"})

        result = await test_func()
        assert result == ToolResponse.json({"id": "cust_1"})

    @pytest.mark.asyncio
    async def test_api_error(self):
        """Test decorator with an error returned by the API."""
        @handle_api_errors("fetching customer")
        async def test_func():
            raise RazorpayAPIError(400, "BAD_REQUEST_ERROR", "The id provided does not exist")

        result = await test_func()
        assert result.is_error
        assert result.text == "fetching customer failed: BAD_REQUEST_ERROR: The id provided does not exist"

    @pytest.mark.asyncio
    async def test_client_resolution_error(self):
        """Test that a missing client is reported without the operation prefix."""
        @handle_api_errors("fetching customer")
        async def test_func():
            raise ClientResolutionError("no client found in context")

        result = await test_func()
        assert result.is_error
        assert result.text == "no client found in context"

    @pytest.mark.asyncio
    async def test_timeout_error(self):
        """Test decorator with timeout error."""
        @handle_api_errors("fetching payouts")
        async def test_func():
            raise httpx.TimeoutException("Request timed out")

        result = await test_func()
        assert result.is_error
        assert result.text == "fetching payouts failed: request timed out"

    @pytest.mark.asyncio
    async def test_http_status_error(self):
        """Test decorator with HTTP status error."""
        @handle_api_errors("fetching refund")
        async def test_func():
            request = httpx.Request("GET", "https://api.razorpay.com/v1/refunds/rfnd_1")
            response = httpx.Response(404, request=request)
            raise httpx.HTTPStatusError("Not Found", request=request, response=response)

        result = await test_func()
        assert result.is_error
        assert result.text == "fetching refund failed: HTTP 404: Not Found"

    @pytest.mark.asyncio
    async def test_network_error(self):
        """Test decorator with network error."""
        @handle_api_errors("creating refund")
        async def test_func():
            raise httpx.ConnectError("Connection refused")

        result = await test_func()
        assert result.is_error
        assert result.text == "creating refund failed: Connection refused"

    @pytest.mark.asyncio
    async def test_unexpected_error(self):
        """Test decorator with unexpected error."""
        @handle_api_errors("closing QR code")
        async def test_func():
            raise ValueError("Unexpected error")

        result = await test_func()
        assert result.is_error
        assert result.text == "closing QR code failed: Unexpected error"

    def test_preserves_function_name(self):
        @handle_api_errors("fetching settlement")
        async def fetch_settlement():
            return None

        assert fetch_settlement.__name__ == "fetch_settlement"
