"""
Refund MCP tools for the Razorpay MCP Server.

This module contains tools to create, fetch, list and update refunds, both
globally and scoped to a single payment.
"""

from typing import Optional

from .client import RazorpayClient, resolve_client
from .errors import create_success_result, handle_api_errors
from .params import Validator
from .tool import (
    ToolDefinition, ToolRequest, ToolResponse,
    number_param, object_param, string_param,
)


def _list_parameters(subject: str):
    return [
        number_param("from", f"Unix timestamp at which the {subject} were created", minimum=0),
        number_param("to", f"Unix timestamp till which the {subject} were created", minimum=0),
        number_param("count", f"The number of {subject} to fetch (default: 10, max: 100)", minimum=1, maximum=100),
        number_param("skip", f"The number of {subject} to be skipped (default: 0)", minimum=0),
    ]


def create_refund(client: Optional[RazorpayClient] = None) -> ToolDefinition:
    """Tool that creates a normal refund for a payment."""
    parameters = [
        string_param(
            "payment_id",
            "Unique identifier of the payment which needs to be refunded. "
            "ID should have a pay_ prefix.",
            required=True,
        ),
        number_param(
            "amount",
            "Payment amount in the smallest currency unit (e.g., for ₹295, use 29500)",
            minimum=1,
        ),
        string_param(
            "speed",
            "The speed at which the refund is to be processed. Default is 'normal'. "
            "For instant refunds, speed is set as 'optimum'.",
        ),
        object_param(
            "notes",
            "Key-value pairs used to store additional information. "
            "A maximum of 15 key-value pairs can be included.",
        ),
        string_param("receipt", "A unique identifier provided by you for your internal reference."),
    ]

    @handle_api_errors("creating refund")
    async def handler(request: ToolRequest) -> ToolResponse:
        params = {}
        refund_data = {}
        validator = (
            Validator(request)
            .required_non_empty_string(params, "payment_id")
            .optional_int(refund_data, "amount")
            .optional_string(refund_data, "speed")
            .optional_map(refund_data, "notes")
            .optional_string(refund_data, "receipt")
        )
        if (error := validator.handle_errors_if_any()) is not None:
            return error

        refund = await resolve_client(client).payment.refund(params["payment_id"], refund_data)
        return create_success_result(refund)

    return ToolDefinition(
        "create_refund",
        "Use this tool to create a normal refund for a payment. "
        "Amount should be in the smallest currency unit (e.g., for ₹295, use 29500)",
        parameters,
        handler,
    )


def fetch_refund(client: Optional[RazorpayClient] = None) -> ToolDefinition:
    parameters = [
        string_param(
            "refund_id",
            "Unique identifier of the refund which is to be retrieved. "
            "ID should have a rfnd_ prefix.",
            required=True,
        ),
    ]

    @handle_api_errors("fetching refund")
    async def handler(request: ToolRequest) -> ToolResponse:
        params = {}
        validator = Validator(request).required_non_empty_string(params, "refund_id")
        if (error := validator.handle_errors_if_any()) is not None:
            return error

        refund = await resolve_client(client).refund.fetch(params["refund_id"])
        return create_success_result(refund)

    return ToolDefinition(
        "fetch_refund",
        "Use this tool to retrieve the details of a specific refund using its id.",
        parameters,
        handler,
    )


def update_refund(client: Optional[RazorpayClient] = None) -> ToolDefinition:
    parameters = [
        string_param(
            "refund_id",
            "Unique identifier of the refund which needs to be updated. "
            "ID should have a rfnd_ prefix.",
            required=True,
        ),
        object_param(
            "notes",
            "Key-value pairs used to store additional information. A maximum of 15 "
            "key-value pairs can be included, with each value not exceeding 256 characters.",
            required=True,
        ),
    ]

    @handle_api_errors("updating refund")
    async def handler(request: ToolRequest) -> ToolResponse:
        params = {}
        update_data = {}
        validator = (
            Validator(request)
            .required_non_empty_string(params, "refund_id")
            .required_map(update_data, "notes")
        )
        if (error := validator.handle_errors_if_any()) is not None:
            return error

        refund = await resolve_client(client).refund.edit(params["refund_id"], update_data)
        return create_success_result(refund)

    return ToolDefinition(
        "update_refund",
        "Use this tool to update the notes for a specific refund. "
        "Only the notes field can be modified.",
        parameters,
        handler,
    )


def fetch_multiple_refunds_for_payment(client: Optional[RazorpayClient] = None) -> ToolDefinition:
    parameters = [
        string_param(
            "payment_id",
            "Unique identifier of the payment for which refunds are to be retrieved. "
            "ID should have a pay_ prefix.",
            required=True,
        ),
        *_list_parameters("refunds"),
    ]

    @handle_api_errors("fetching multiple refunds")
    async def handler(request: ToolRequest) -> ToolResponse:
        params = {}
        options = {}
        validator = (
            Validator(request)
            .required_non_empty_string(params, "payment_id")
            .optional_int(options, "from")
            .optional_int(options, "to")
            .pagination(options)
        )
        if (error := validator.handle_errors_if_any()) is not None:
            return error

        refunds = await resolve_client(client).payment.fetch_multiple_refund(params["payment_id"], options)
        return create_success_result(refunds)

    return ToolDefinition(
        "fetch_multiple_refunds_for_payment",
        "Use this tool to retrieve multiple refunds for a payment. "
        "By default, only the last 10 refunds are returned.",
        parameters,
        handler,
    )


def fetch_specific_refund_for_payment(client: Optional[RazorpayClient] = None) -> ToolDefinition:
    parameters = [
        string_param(
            "payment_id",
            "Unique identifier of the payment for which the refund has been made. "
            "ID should have a pay_ prefix.",
            required=True,
        ),
        string_param(
            "refund_id",
            "Unique identifier of the refund to be retrieved. ID should have a rfnd_ prefix.",
            required=True,
        ),
    ]

    @handle_api_errors("fetching specific refund for payment")
    async def handler(request: ToolRequest) -> ToolResponse:
        params = {}
        validator = (
            Validator(request)
            .required_non_empty_string(params, "payment_id")
            .required_non_empty_string(params, "refund_id")
        )
        if (error := validator.handle_errors_if_any()) is not None:
            return error

        refund = await resolve_client(client).payment.fetch_refund(params["payment_id"], params["refund_id"])
        return create_success_result(refund)

    return ToolDefinition(
        "fetch_specific_refund_for_payment",
        "Use this tool to retrieve details of a specific refund made for a payment.",
        parameters,
        handler,
    )


def fetch_all_refunds(client: Optional[RazorpayClient] = None) -> ToolDefinition:
    parameters = _list_parameters("refunds")

    @handle_api_errors("fetching refunds")
    async def handler(request: ToolRequest) -> ToolResponse:
        options = {}
        validator = (
            Validator(request)
            .optional_int(options, "from")
            .optional_int(options, "to")
            .pagination(options)
        )
        if (error := validator.handle_errors_if_any()) is not None:
            return error

        refunds = await resolve_client(client).refund.all(options)
        return create_success_result(refunds)

    return ToolDefinition(
        "fetch_all_refunds",
        "Use this tool to retrieve details of all refunds. "
        "By default, only the last 10 refunds are returned.",
        parameters,
        handler,
    )
