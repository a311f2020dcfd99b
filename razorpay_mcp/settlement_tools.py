"""
Settlement MCP tools for the Razorpay MCP Server.

This module contains tools for regular settlements, the reconciliation
report and instant (on-demand) settlements.
"""

from typing import Optional

from .client import RazorpayClient, resolve_client
from .errors import create_success_result, handle_api_errors
from .params import Validator
from .tool import (
    ToolDefinition, ToolRequest, ToolResponse,
    array_param, boolean_param, number_param, object_param, string_param,
)


def _window_parameters(subject: str):
    return [
        number_param("count", f"Number of {subject} records to fetch (default: 10, max: 100)", minimum=1, maximum=100),
        number_param("skip", f"Number of {subject} records to skip (default: 0)", minimum=0),
        number_param("from", f"Unix timestamp (in seconds) from when {subject}s are to be fetched", minimum=0),
        number_param("to", f"Unix timestamp (in seconds) up till when {subject}s are to be fetched", minimum=0),
    ]


def fetch_settlement_with_id(client: Optional[RazorpayClient] = None) -> ToolDefinition:
    parameters = [
        string_param("settlement_id", "The ID of the settlement to fetch. ID starts with the 'setl_'", required=True),
    ]

    @handle_api_errors("fetching settlement")
    async def handler(request: ToolRequest) -> ToolResponse:
        params = {}
        validator = Validator(request).required_string(params, "settlement_id")
        if (error := validator.handle_errors_if_any()) is not None:
            return error

        settlement = await resolve_client(client).settlement.fetch(params["settlement_id"])
        return create_success_result(settlement)

    return ToolDefinition(
        "fetch_settlement_with_id",
        "Fetch details of a specific settlement using its ID",
        parameters,
        handler,
    )


def fetch_settlement_recon_details(client: Optional[RazorpayClient] = None) -> ToolDefinition:
    """Reconciliation report. Date parts and paging are passed through as strings."""
    parameters = [
        string_param("year", "Year for which the settlement report is requested (YYYY format)",
                     required=True, pattern="^[0-9]{4}$"),
        string_param("month", "Month for which the settlement report is requested (MM format)",
                     required=True, pattern="^[0-9]{1,2}$"),
        string_param("day", "Optional: Day for which the settlement report is requested (DD format)",
                     pattern="^[0-9]{1,2}$"),
        string_param("count", "Optional: Number of records to fetch (default: 10, max: 100)"),
        string_param("skip", "Optional: Number of records to skip for pagination"),
    ]

    @handle_api_errors("fetching settlement reconciliation report")
    async def handler(request: ToolRequest) -> ToolResponse:
        options = {}
        validator = (
            Validator(request)
            .required_string(options, "year")
            .required_string(options, "month")
            .optional_string(options, "day")
            .optional_string(options, "count")
            .optional_string(options, "skip")
        )
        if (error := validator.handle_errors_if_any()) is not None:
            return error

        report = await resolve_client(client).settlement.reports(options)
        return create_success_result(report)

    return ToolDefinition(
        "fetch_settlement_recon_details",
        "Fetch settlement reconciliation report for a specific time period",
        parameters,
        handler,
    )


def fetch_all_settlements(client: Optional[RazorpayClient] = None) -> ToolDefinition:
    parameters = _window_parameters("settlement")

    @handle_api_errors("fetching settlements")
    async def handler(request: ToolRequest) -> ToolResponse:
        options = {}
        validator = (
            Validator(request)
            .pagination(options)
            .optional_int(options, "from")
            .optional_int(options, "to")
        )
        if (error := validator.handle_errors_if_any()) is not None:
            return error

        settlements = await resolve_client(client).settlement.all(options)
        return create_success_result(settlements)

    return ToolDefinition(
        "fetch_all_settlements",
        "Fetch all settlements with optional filtering and pagination",
        parameters,
        handler,
    )


def create_instant_settlement(client: Optional[RazorpayClient] = None) -> ToolDefinition:
    parameters = [
        number_param(
            "amount",
            "The amount you want to get settled instantly in the smallest currency "
            "sub-unit (e.g., for ₹295, use 29500)",
            required=True,
            minimum=200,
        ),
        boolean_param(
            "settle_full_balance",
            "If true, Razorpay will settle the maximum amount possible and ignore amount parameter",
            default=False,
        ),
        string_param("description", "Custom note for the instant settlement.",
                     max_length=30, pattern="^[a-zA-Z0-9 ]*$"),
        object_param("notes", "Key-value pairs for additional information. Max 15 pairs, 256 chars each",
                     max_properties=15),
    ]

    @handle_api_errors("creating instant settlement")
    async def handler(request: ToolRequest) -> ToolResponse:
        settlement_data = {}
        validator = (
            Validator(request)
            .required_int(settlement_data, "amount")
            .optional_bool(settlement_data, "settle_full_balance")
            .optional_string(settlement_data, "description")
            .optional_map(settlement_data, "notes")
        )
        if (error := validator.handle_errors_if_any()) is not None:
            return error

        settlement = await resolve_client(client).settlement.create_ondemand(settlement_data)
        return create_success_result(settlement)

    return ToolDefinition(
        "create_instant_settlement",
        "Create an instant settlement to get funds transferred to your bank account",
        parameters,
        handler,
    )


def fetch_all_instant_settlements(client: Optional[RazorpayClient] = None) -> ToolDefinition:
    parameters = [
        *_window_parameters("instant settlement"),
        array_param(
            "expand",
            "Pass this if you want to fetch payout details as part of the response "
            "for all instant settlements. Supported values: ondemand_payouts",
            items={"type": "string"},
        ),
    ]

    @handle_api_errors("fetching instant settlements")
    async def handler(request: ToolRequest) -> ToolResponse:
        options = {}
        validator = (
            Validator(request)
            .pagination(options)
            .expand(options)
            .optional_int(options, "from")
            .optional_int(options, "to")
        )
        if (error := validator.handle_errors_if_any()) is not None:
            return error

        settlements = await resolve_client(client).settlement.fetch_all_ondemand(options)
        return create_success_result(settlements)

    return ToolDefinition(
        "fetch_all_instant_settlements",
        "Fetch all instant settlements with optional filtering, pagination, and payout details",
        parameters,
        handler,
    )


def fetch_instant_settlement_with_id(client: Optional[RazorpayClient] = None) -> ToolDefinition:
    parameters = [
        string_param("settlement_id", "The ID of the instant settlement to fetch. ID starts with 'setlod_'",
                     required=True),
    ]

    @handle_api_errors("fetching instant settlement")
    async def handler(request: ToolRequest) -> ToolResponse:
        params = {}
        validator = Validator(request).required_string(params, "settlement_id")
        if (error := validator.handle_errors_if_any()) is not None:
            return error

        settlement = await resolve_client(client).settlement.fetch_ondemand(params["settlement_id"])
        return create_success_result(settlement)

    return ToolDefinition(
        "fetch_instant_settlement_with_id",
        "Fetch details of a specific instant settlement using its ID",
        parameters,
        handler,
    )
