"""
QR code MCP tools for the Razorpay MCP Server.

UPI QR codes can be created, fetched, listed (globally, per customer or per
payment), closed, and queried for the payments they received.
"""

from typing import Optional

from .client import RazorpayClient, resolve_client
from .errors import create_success_result, handle_api_errors
from .params import Validator
from .tool import (
    ToolDefinition, ToolRequest, ToolResponse,
    boolean_param, number_param, object_param, string_param,
)


def _qr_code_id_param(action: str):
    return string_param(
        "qr_code_id",
        f"Unique identifier of the QR Code to be {action}. The qr_code_id should have a prefix 'qr_'",
        required=True,
    )


def _list_parameters(subject: str):
    return [
        number_param("from", f"Unix timestamp, in seconds, from when {subject} are to be retrieved", minimum=0),
        number_param("to", f"Unix timestamp, in seconds, till when {subject} are to be retrieved", minimum=0),
        number_param("count", f"Number of {subject} to be retrieved (default: 10, max: 100)", minimum=1, maximum=100),
        number_param("skip", f"Number of {subject} to be skipped (default: 0)", minimum=0),
    ]


def create_qr_code(client: Optional[RazorpayClient] = None) -> ToolDefinition:
    """Tool that creates a UPI QR code."""
    parameters = [
        string_param("type", "The type of the QR Code. Currently only supports 'upi_qr'",
                     required=True, pattern="^upi_qr$"),
        string_param("name", "Label to identify the QR Code (e.g., 'Store Front Display')"),
        string_param(
            "usage",
            "Whether QR should accept single or multiple payments. "
            "Possible values: 'single_use', 'multiple_use'",
            required=True,
            pattern="^(single_use|multiple_use)$",
        ),
        boolean_param(
            "fixed_amount",
            "Whether QR should accept only specific amount (true) or any amount (false)",
            default=False,
        ),
        number_param("payment_amount",
                     "The specific amount allowed for transaction in smallest currency unit", minimum=1),
        string_param("description", "A brief description about the QR Code"),
        string_param("customer_id", "The unique identifier of the customer to link with the QR Code"),
        number_param("close_by",
                     "Unix timestamp at which QR Code should be automatically closed "
                     "(min 2 mins after current time)"),
        object_param("notes", "Key-value pairs for additional information (max 15 pairs, 256 chars each)",
                     max_properties=15),
    ]

    @handle_api_errors("creating QR code")
    async def handler(request: ToolRequest) -> ToolResponse:
        qr_data = {}
        validator = (
            Validator(request)
            .required_string(qr_data, "type")
            .required_string(qr_data, "usage")
            .optional_string(qr_data, "name")
            .optional_bool(qr_data, "fixed_amount")
            .optional_int(qr_data, "payment_amount")
            .optional_string(qr_data, "description")
            .optional_string(qr_data, "customer_id")
            .optional_int(qr_data, "close_by")
            .optional_map(qr_data, "notes")
        )
        if qr_data.get("fixed_amount") is True and "payment_amount" not in qr_data:
            validator.add_error("payment_amount is required when fixed_amount is true")
        if (error := validator.handle_errors_if_any()) is not None:
            return error
        qr_data.setdefault("fixed_amount", False)

        qr_code = await resolve_client(client).qr_code.create(qr_data)
        return create_success_result(qr_code)

    return ToolDefinition(
        "create_qr_code",
        "Create a new QR code in Razorpay that can be used to accept UPI payments",
        parameters,
        handler,
    )


def fetch_qr_code(client: Optional[RazorpayClient] = None) -> ToolDefinition:
    parameters = [_qr_code_id_param("fetched")]

    @handle_api_errors("fetching QR code")
    async def handler(request: ToolRequest) -> ToolResponse:
        params = {}
        validator = Validator(request).required_non_empty_string(params, "qr_code_id")
        if (error := validator.handle_errors_if_any()) is not None:
            return error

        qr_code = await resolve_client(client).qr_code.fetch(params["qr_code_id"])
        return create_success_result(qr_code)

    return ToolDefinition(
        "fetch_qr_code",
        "Fetch a QR code's details using it's ID",
        parameters,
        handler,
    )


def fetch_all_qr_codes(client: Optional[RazorpayClient] = None) -> ToolDefinition:
    parameters = _list_parameters("QR Codes")

    @handle_api_errors("fetching QR codes")
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

        qr_codes = await resolve_client(client).qr_code.all(options)
        return create_success_result(qr_codes)

    return ToolDefinition(
        "fetch_all_qr_codes",
        "Fetch all QR codes with optional filtering and pagination",
        parameters,
        handler,
    )


def fetch_qr_codes_by_customer_id(client: Optional[RazorpayClient] = None) -> ToolDefinition:
    parameters = [
        string_param("customer_id", "The unique identifier of the customer", required=True),
    ]

    @handle_api_errors("fetching QR codes")
    async def handler(request: ToolRequest) -> ToolResponse:
        options = {}
        validator = Validator(request).required_string(options, "customer_id")
        if (error := validator.handle_errors_if_any()) is not None:
            return error

        qr_codes = await resolve_client(client).qr_code.all(options)
        return create_success_result(qr_codes)

    return ToolDefinition(
        "fetch_qr_codes_by_customer_id",
        "Fetch all QR codes for a specific customer",
        parameters,
        handler,
    )


def fetch_qr_codes_by_payment_id(client: Optional[RazorpayClient] = None) -> ToolDefinition:
    parameters = [
        string_param("payment_id", "The unique identifier of the payment. The payment_id always begins with a 'pay_'",
                     required=True),
    ]

    @handle_api_errors("fetching QR codes")
    async def handler(request: ToolRequest) -> ToolResponse:
        options = {}
        validator = Validator(request).required_string(options, "payment_id")
        if (error := validator.handle_errors_if_any()) is not None:
            return error

        qr_codes = await resolve_client(client).qr_code.all(options)
        return create_success_result(qr_codes)

    return ToolDefinition(
        "fetch_qr_codes_by_payment_id",
        "Fetch QR codes for a specific payment ID",
        parameters,
        handler,
    )


def fetch_payments_for_qr_code(client: Optional[RazorpayClient] = None) -> ToolDefinition:
    parameters = [
        _qr_code_id_param("fetched"),
        *_list_parameters("payments"),
    ]

    @handle_api_errors("fetching payments for QR code")
    async def handler(request: ToolRequest) -> ToolResponse:
        params = {}
        options = {}
        validator = (
            Validator(request)
            .required_non_empty_string(params, "qr_code_id")
            .optional_int(options, "from")
            .optional_int(options, "to")
            .pagination(options)
        )
        if (error := validator.handle_errors_if_any()) is not None:
            return error

        payments = await resolve_client(client).qr_code.fetch_payments(params["qr_code_id"], options)
        return create_success_result(payments)

    return ToolDefinition(
        "fetch_payments_for_qr_code",
        "Fetch Payments for a QR Code",
        parameters,
        handler,
    )


def close_qr_code(client: Optional[RazorpayClient] = None) -> ToolDefinition:
    parameters = [_qr_code_id_param("closed")]

    @handle_api_errors("closing QR code")
    async def handler(request: ToolRequest) -> ToolResponse:
        params = {}
        validator = Validator(request).required_non_empty_string(params, "qr_code_id")
        if (error := validator.handle_errors_if_any()) is not None:
            return error

        qr_code = await resolve_client(client).qr_code.close(params["qr_code_id"])
        return create_success_result(qr_code)

    return ToolDefinition(
        "close_qr_code",
        "Close a QR Code that's no longer needed",
        parameters,
        handler,
    )
