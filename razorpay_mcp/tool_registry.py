"""Tool registry for the Razorpay MCP Server.

Every tool is declared here once, grouped into the toolsets that the
transports expose.
"""
from __future__ import annotations

from typing import List, Optional

import httpx

from . import customer_tools, docs_tools, payout_tools, qr_code_tools, refund_tools, settlement_tools
from .client import RazorpayClient
from .config_manager import DocsConfig
from .toolsets import Toolset, ToolsetGroup


def build_toolsets(
    client: Optional[RazorpayClient] = None,
    enabled_toolsets: Optional[List[str]] = None,
    read_only: bool = False,
    docs: Optional[DocsConfig] = None,
    docs_transport: Optional[httpx.AsyncBaseTransport] = None,
) -> ToolsetGroup:
    """
    Assemble every toolset and enable the requested ones.

    Args:
        client: Client used by all API tools; ``None`` resolves it per request
        enabled_toolsets: Toolset names to enable; empty or ``None`` enables all
        read_only: Drop every write tool
        docs: Documentation site endpoints
        docs_transport: Optional transport for the documentation tools

    Raises:
        ToolsetNotFoundError: An unknown toolset name was requested
    """
    group = ToolsetGroup(read_only)

    customers = Toolset("customers", "Razorpay Customers related tools")
    customers.add_read_tools(
        customer_tools.fetch_customer(client),
        customer_tools.fetch_all_customers(client),
        customer_tools.fetch_customer_tokens(client),
    )
    customers.add_write_tools(
        customer_tools.create_customer(client),
        customer_tools.edit_customer(client),
    )

    payouts = Toolset("payouts", "Razorpay Payouts related tools")
    payouts.add_read_tools(
        payout_tools.fetch_payout_by_id(client),
        payout_tools.fetch_all_payouts(client),
    )

    refunds = Toolset("refunds", "Razorpay Refunds related tools")
    refunds.add_read_tools(
        refund_tools.fetch_refund(client),
        refund_tools.fetch_multiple_refunds_for_payment(client),
        refund_tools.fetch_specific_refund_for_payment(client),
        refund_tools.fetch_all_refunds(client),
    )
    refunds.add_write_tools(
        refund_tools.create_refund(client),
        refund_tools.update_refund(client),
    )

    settlements = Toolset("settlements", "Razorpay Settlements related tools")
    settlements.add_read_tools(
        settlement_tools.fetch_settlement_with_id(client),
        settlement_tools.fetch_settlement_recon_details(client),
        settlement_tools.fetch_all_settlements(client),
        settlement_tools.fetch_all_instant_settlements(client),
        settlement_tools.fetch_instant_settlement_with_id(client),
    )
    settlements.add_write_tools(
        settlement_tools.create_instant_settlement(client),
    )

    qr_codes = Toolset("qr_codes", "Razorpay QR Codes related tools")
    qr_codes.add_read_tools(
        qr_code_tools.fetch_qr_code(client),
        qr_code_tools.fetch_all_qr_codes(client),
        qr_code_tools.fetch_qr_codes_by_customer_id(client),
        qr_code_tools.fetch_qr_codes_by_payment_id(client),
        qr_code_tools.fetch_payments_for_qr_code(client),
    )
    qr_codes.add_write_tools(
        qr_code_tools.create_qr_code(client),
        qr_code_tools.close_qr_code(client),
    )

    docs_toolset = Toolset("docs", "Razorpay documentation search and retrieval")
    docs_toolset.add_read_tools(
        docs_tools.search_docs(docs, docs_transport),
        docs_tools.get_document_content(docs, docs_transport),
    )

    for toolset in (customers, payouts, refunds, settlements, qr_codes, docs_toolset):
        group.add_toolset(toolset)

    group.enable_toolsets(enabled_toolsets or [])
    return group
