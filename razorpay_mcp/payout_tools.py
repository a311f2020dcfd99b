"""
Payout MCP tools for the Razorpay MCP Server.
"""

from typing import Optional

from .client import RazorpayClient, resolve_client
from .errors import create_success_result, handle_api_errors
from .params import Validator
from .tool import ToolDefinition, ToolRequest, ToolResponse, number_param, string_param


def fetch_payout_by_id(client: Optional[RazorpayClient] = None) -> ToolDefinition:
    parameters = [
        string_param("payout_id", "The unique identifier of the payout to fetch", required=True),
    ]

    @handle_api_errors("fetching payout")
    async def handler(request: ToolRequest) -> ToolResponse:
        params = {}
        validator = Validator(request).required_string(params, "payout_id")
        if (error := validator.handle_errors_if_any()) is not None:
            return error

        payout = await resolve_client(client).payout.fetch(params["payout_id"])
        return create_success_result(payout)

    return ToolDefinition(
        "fetch_payout_by_id",
        "Fetch a payout's details using its ID",
        parameters,
        handler,
    )


def fetch_all_payouts(client: Optional[RazorpayClient] = None) -> ToolDefinition:
    parameters = [
        string_param("account_number", "The account number to fetch payouts for", required=True),
        number_param("count", "Number of payouts to fetch (default: 10)", minimum=1),
        number_param("skip", "Number of payouts to skip (for pagination)", minimum=0),
    ]

    @handle_api_errors("fetching payouts")
    async def handler(request: ToolRequest) -> ToolResponse:
        params = {}
        validator = (
            Validator(request)
            .required_string(params, "account_number")
            .pagination(params)
        )
        if (error := validator.handle_errors_if_any()) is not None:
            return error

        payouts = await resolve_client(client).payout.all(params)
        return create_success_result(payouts)

    return ToolDefinition(
        "fetch_all_payouts",
        "Fetch all payouts for an account",
        parameters,
        handler,
    )
