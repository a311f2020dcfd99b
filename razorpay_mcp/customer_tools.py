"""
Customer MCP tools for the Razorpay MCP Server.

This module contains tools for creating, fetching, updating and listing
customers, plus listing a customer's saved tokens.
"""

from typing import Optional

from .client import RazorpayClient, resolve_client
from .errors import create_success_result, handle_api_errors
from .params import Validator
from .tool import (
    ToolDefinition, ToolRequest, ToolResponse,
    number_param, object_param, string_param,
)

NOTES_DESCRIPTION = (
    "Key-value pairs for additional information about the customer. "
    "Maximum 15 key-value pairs, 256 characters each."
)


def validate_customer_id(validator: Validator, params: dict) -> Validator:
    """Extract a required customer_id, which must carry the 'cust_' prefix."""
    value = {}
    validator.required_non_empty_string(value, "customer_id")
    customer_id = value.get("customer_id")
    if customer_id is None:
        return validator
    if not customer_id.startswith("cust_"):
        return validator.add_error("customer_id must start with 'cust_'")
    params["customer_id"] = customer_id
    return validator


def create_customer(client: Optional[RazorpayClient] = None) -> ToolDefinition:
    """Tool that creates a customer with basic details."""
    parameters = [
        string_param("name", "Name of the customer. Maximum 50 characters.", required=True),
        string_param("contact", "Contact number of the customer. For example, +11234567890"),
        string_param("email", "Email address of the customer. For example, john.smith@example.com"),
        string_param(
            "fail_existing",
            "Action if the customer already exists. Possible values: "
            "'0' (default) - Get existing customer, '1' - Fail if customer exists",
        ),
        object_param("notes", NOTES_DESCRIPTION),
    ]

    @handle_api_errors("creating customer")
    async def handler(request: ToolRequest) -> ToolResponse:
        customer_data = {}
        validator = (
            Validator(request)
            .required_non_empty_string(customer_data, "name")
            .optional_string(customer_data, "contact")
            .optional_string(customer_data, "email")
            .optional_string(customer_data, "fail_existing")
            .optional_map(customer_data, "notes")
        )
        if (error := validator.handle_errors_if_any()) is not None:
            return error

        customer = await resolve_client(client).customer.create(customer_data)
        return create_success_result(customer)

    return ToolDefinition(
        "create_customer",
        "Use this endpoint to create or add a customer with basic details "
        "such as name and contact details.",
        parameters,
        handler,
    )


def fetch_customer(client: Optional[RazorpayClient] = None) -> ToolDefinition:
    """Tool that fetches a customer by id."""
    parameters = [
        string_param(
            "customer_id",
            "Unique identifier of the customer to be retrieved. Must start with 'cust_'",
            required=True,
        ),
    ]

    @handle_api_errors("fetching customer")
    async def handler(request: ToolRequest) -> ToolResponse:
        params = {}
        validator = Validator(request).required_non_empty_string(params, "customer_id")
        if (error := validator.handle_errors_if_any()) is not None:
            return error

        customer = await resolve_client(client).customer.fetch(params["customer_id"])
        return create_success_result(customer)

    return ToolDefinition(
        "fetch_customer",
        "Use this tool to retrieve the details of a specific customer using its id.",
        parameters,
        handler,
    )


def edit_customer(client: Optional[RazorpayClient] = None) -> ToolDefinition:
    """Tool that updates name, contact, email or notes of a customer."""
    parameters = [
        string_param(
            "customer_id",
            "Unique identifier of the customer to be updated. Must start with 'cust_'",
            required=True,
        ),
        string_param("name", "Updated name of the customer. Maximum 50 characters."),
        string_param("contact", "Updated contact number of the customer. For example, +11234567890"),
        string_param("email", "Updated email address of the customer. For example, john.smith@example.com"),
        object_param("notes", NOTES_DESCRIPTION),
    ]

    @handle_api_errors("updating customer")
    async def handler(request: ToolRequest) -> ToolResponse:
        params = {}
        update_data = {}
        validator = (
            Validator(request)
            .required_non_empty_string(params, "customer_id")
            .optional_string(update_data, "name")
            .optional_string(update_data, "contact")
            .optional_string(update_data, "email")
            .optional_map(update_data, "notes")
        )
        if (error := validator.handle_errors_if_any()) is not None:
            return error

        customer = await resolve_client(client).customer.edit(params["customer_id"], update_data)
        return create_success_result(customer)

    return ToolDefinition(
        "edit_customer",
        "Use this tool to update customer details such as name, contact, email, and notes.",
        parameters,
        handler,
    )


def fetch_all_customers(client: Optional[RazorpayClient] = None) -> ToolDefinition:
    """Tool that lists customers with pagination and a time window."""
    parameters = [
        number_param("count", "Number of customers to fetch (default: 10, max: 100)", minimum=1, maximum=100),
        number_param("skip", "Number of customers to skip (default: 0)", minimum=0),
        number_param("from", "Unix timestamp (in seconds) from when customers are to be fetched", minimum=0),
        number_param("to", "Unix timestamp (in seconds) up till when customers are to be fetched", minimum=0),
    ]

    @handle_api_errors("fetching customers")
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

        customers = await resolve_client(client).customer.all(options)
        return create_success_result(customers)

    return ToolDefinition(
        "fetch_all_customers",
        "Fetch all customers with optional filtering and pagination",
        parameters,
        handler,
    )


def fetch_customer_tokens(client: Optional[RazorpayClient] = None) -> ToolDefinition:
    """Tool that lists the saved tokens of a customer."""
    parameters = [
        string_param(
            "customer_id",
            "The unique identifier of the customer for whom tokens are to be "
            "retrieved. Must start with 'cust_'",
            required=True,
        ),
    ]

    @handle_api_errors("fetching customer tokens")
    async def handler(request: ToolRequest) -> ToolResponse:
        params = {}
        validator = validate_customer_id(Validator(request), params)
        if (error := validator.handle_errors_if_any()) is not None:
            return error

        tokens = await resolve_client(client).customer.fetch_tokens(params["customer_id"])
        return create_success_result(tokens)

    return ToolDefinition(
        "fetch_customer_tokens",
        "Fetch all tokens for a specific customer. Returns active tokens that "
        "can be used for recurring payments",
        parameters,
        handler,
    )
