"""
Documentation MCP tools for the Razorpay MCP Server.

These tools talk to the public documentation site rather than the API, so
they need no credentials and are always read-only.
"""

from typing import Any, Optional

import httpx
from bs4 import BeautifulSoup

from .config import DOCS_PAGE_HEADERS, DOCS_SEARCH_HEADERS, create_http_client
from .config_manager import DocsConfig
from .errors import ErrorType, create_error_result, create_success_result, handle_api_errors
from .params import Validator
from .tool import ToolDefinition, ToolRequest, ToolResponse, string_param


def extract_text(html: str) -> str:
    """
    Extract readable text from an HTML page.

    Script and style elements are dropped; every remaining text node is
    stripped and written on its own line.
    """
    soup = BeautifulSoup(html, "lxml")
    for element in soup(["script", "style"]):
        element.decompose()
    return "\n".join(soup.stripped_strings) + "\n"


def search_docs(
    docs: Optional[DocsConfig] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> ToolDefinition:
    docs = docs or DocsConfig()
    parameters = [
        string_param("query", "Search terms to look for in documentation", required=True),
    ]

    @handle_api_errors("searching docs")
    async def handler(request: ToolRequest) -> ToolResponse:
        params = {}
        validator = Validator(request).required_string(params, "query")
        if (error := validator.handle_errors_if_any()) is not None:
            return error

        async with create_http_client(transport=transport) as http:
            response = await http.get(
                docs.search_url,
                params={"q": params["query"]},
                headers=DOCS_SEARCH_HEADERS,
            )

        if response.status_code != 200:
            return create_error_result(
                f"search failed with status code {response.status_code}: {response.text}",
                ErrorType.HTTP,
            )

        try:
            result: Any = response.json()
        except ValueError as e:
            return create_error_result(f"failed to parse search results: {e}", ErrorType.UNEXPECTED)

        if isinstance(result, list):
            return create_success_result({"results": result})
        if isinstance(result, dict):
            if "error" in result:
                return create_error_result(f"search error: {result['error']}", ErrorType.API)
            return create_success_result(result)
        return create_error_result(
            f"failed to parse search results: unexpected {type(result).__name__}",
            ErrorType.UNEXPECTED,
        )

    return ToolDefinition(
        "search_docs",
        "Search payments documentation for specific terms",
        parameters,
        handler,
    )


def get_document_content(
    docs: Optional[DocsConfig] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> ToolDefinition:
    docs = docs or DocsConfig()
    parameters = [
        string_param("doc_path", "Path to the document relative to the razorpay docs root", required=True),
    ]

    @handle_api_errors("fetching document")
    async def handler(request: ToolRequest) -> ToolResponse:
        params = {}
        validator = Validator(request).required_string(params, "doc_path")
        if (error := validator.handle_errors_if_any()) is not None:
            return error

        doc_path = params["doc_path"]
        if doc_path.startswith("/"):
            doc_path = doc_path[1:]
        url = f"{docs.base_url.rstrip('/')}/{doc_path}"

        async with create_http_client(transport=transport) as http:
            response = await http.get(url, headers=DOCS_PAGE_HEADERS)

        if response.status_code != 200:
            return create_error_result(
                f"document fetch failed with status code {response.status_code}: {response.text}",
                ErrorType.HTTP,
            )

        return create_success_result({
            "url": url,
            "status": response.status_code,
            "content": extract_text(response.text),
            "doc_path": doc_path,
        })

    return ToolDefinition(
        "get_document_content",
        "Get the content of a specific razorpay document",
        parameters,
        handler,
    )
