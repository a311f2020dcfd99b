"""
Tests for the refund tools.
"""

import pytest

from razorpay_mcp.refund_tools import (
    create_refund, fetch_all_refunds, fetch_multiple_refunds_for_payment,
    fetch_refund, fetch_specific_refund_for_payment, update_refund,
)


class TestCreateRefund:
    """Test create_refund."""

    @pytest.mark.asyncio
    async def test_full_refund(self, client, api):
        response = await create_refund(client).invoke({"payment_id": "pay_1"})

        assert not response.is_error
        assert api.last.method == "POST"
        assert api.last.url.path == "/v1/payments/pay_1/refund"
        assert api.last_json() == {}

    @pytest.mark.asyncio
    async def test_partial_refund(self, client, api):
        await create_refund(client).invoke({
            "payment_id": "pay_1",
            "amount": 500,
            "speed": "optimum",
            "receipt": "rcpt_1",
            "notes": {"reason": "damaged"},
        })
        assert api.last_json() == {
            "amount": 500,
            "speed": "optimum",
            "receipt": "rcpt_1",
            "notes": {"reason": "damaged"},
        }

    @pytest.mark.asyncio
    async def test_fractional_amount(self, client, api):
        response = await create_refund(client).invoke({"payment_id": "pay_1", "amount": 10.5})
        assert response.text == "Validation errors:\n- invalid parameter type: amount"
        assert api.requests == []

    @pytest.mark.asyncio
    async def test_api_error(self, make_client, recording_handler):
        handler = recording_handler(400, {"error": {"code": "BAD_REQUEST_ERROR", "description": "The payment has been fully refunded already"}})
        response = await create_refund(make_client(handler)).invoke({"payment_id": "pay_1"})
        assert response.text == "creating refund failed: BAD_REQUEST_ERROR: The payment has been fully refunded already"


class TestFetchAndUpdateRefund:
    """Test fetch_refund and update_refund."""

    @pytest.mark.asyncio
    async def test_fetch_refund(self, client, api):
        response = await fetch_refund(client).invoke({"refund_id": "rfnd_1"})
        assert not response.is_error
        assert api.last.url.path == "/v1/refunds/rfnd_1"

    @pytest.mark.asyncio
    async def test_fetch_refund_empty_id(self, client, api):
        response = await fetch_refund(client).invoke({"refund_id": ""})
        assert response.text == "Validation errors:\n- missing required parameter: refund_id"

    @pytest.mark.asyncio
    async def test_update_refund(self, client, api):
        response = await update_refund(client).invoke({"refund_id": "rfnd_1", "notes": {"note": "updated"}})

        assert not response.is_error
        assert api.last.method == "PATCH"
        assert api.last.url.path == "/v1/refunds/rfnd_1"
        assert api.last_json() == {"notes": {"note": "updated"}}

    @pytest.mark.asyncio
    async def test_update_refund_requires_notes(self, client, api):
        response = await update_refund(client).invoke({"refund_id": "rfnd_1"})
        assert response.text == "Validation errors:\n- missing required parameter: notes"
        assert api.requests == []


class TestRefundsForPayment:
    """Test the per-payment refund tools."""

    @pytest.mark.asyncio
    async def test_fetch_multiple_refunds(self, client, api):
        response = await fetch_multiple_refunds_for_payment(client).invoke({
            "payment_id": "pay_1", "count": 2, "from": 1700000000, "to": 1700086400,
        })

        assert not response.is_error
        assert api.last.url.path == "/v1/payments/pay_1/refunds"
        assert dict(api.last.url.params) == {"count": "2", "from": "1700000000", "to": "1700086400"}

    @pytest.mark.asyncio
    async def test_fetch_specific_refund(self, client, api):
        response = await fetch_specific_refund_for_payment(client).invoke({"payment_id": "pay_1", "refund_id": "rfnd_1"})
        assert not response.is_error
        assert api.last.url.path == "/v1/payments/pay_1/refunds/rfnd_1"

    @pytest.mark.asyncio
    async def test_fetch_specific_refund_missing_both(self, client, api):
        response = await fetch_specific_refund_for_payment(client).invoke({})
        assert response.text == (
            "Validation errors:\n"
            "- missing required parameter: payment_id\n"
            "- missing required parameter: refund_id"
        )

    @pytest.mark.asyncio
    async def test_fetch_all_refunds(self, client, api):
        response = await fetch_all_refunds(client).invoke({"skip": 20})
        assert not response.is_error
        assert api.last.url.path == "/v1/refunds"
        assert dict(api.last.url.params) == {"skip": "20"}

    @pytest.mark.asyncio
    async def test_fetch_all_refunds_bad_window(self, client, api):
        response = await fetch_all_refunds(client).invoke({"from": "yesterday"})
        assert response.text == "Validation errors:\n- invalid parameter type: from"
