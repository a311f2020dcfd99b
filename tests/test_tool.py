"""
Tests for the tool model: responses, parameter schemas and invocation.
"""

import json

import pytest

from razorpay_mcp.metrics import get_metrics_collector
from razorpay_mcp.tool import (
    ToolDefinition, ToolRequest, ToolResponse,
    array_param, boolean_param, number_param, object_param, string_param,
)


class TestToolResponse:
    """Test ToolResponse constructors and rendering."""

    def test_json_is_compact(self):
        response = ToolResponse.json({"id": "cust_1", "notes": {"a": 1}})
        assert response.is_error is False
        assert response.text == '{"id":"cust_1","notes":{"a":1}}'

    def test_error(self):
        response = ToolResponse.error("boom")
        assert response.is_error is True
        assert response.text == "boom"

    def test_to_content(self):
        assert ToolResponse.error("bad").to_content() == {
            "content": [{"type": "text", "text": "bad"}],
            "isError": True,
        }


class TestToolParameters:
    """Test the JSON Schema fragments produced by the parameter helpers."""

    def test_string_param(self):
        param = string_param("customer_id", "The customer", required=True, pattern="^cust_")
        assert param.required is True
        assert param.schema == {"type": "string", "description": "The customer", "pattern": "^cust_"}

    def test_string_param_max_length(self):
        param = string_param("description", "A note", max_length=30)
        assert param.schema == {"type": "string", "description": "A note", "maxLength": 30}

    def test_number_param_bounds(self):
        param = number_param("count", "How many", minimum=1, maximum=100)
        assert param.schema == {"type": "number", "description": "How many", "minimum": 1, "maximum": 100}

    def test_other_param_types(self):
        assert boolean_param("flag").schema == {"type": "boolean"}
        assert object_param("notes", max_properties=15).schema == {"type": "object", "maxProperties": 15}
        assert array_param("expand", items={"type": "string"}).schema == {
            "type": "array",
            "items": {"type": "string"},
        }

    def test_input_schema(self):
        async def handler(request):
            return ToolResponse("ok")

        tool = ToolDefinition(
            "demo",
            "Demo tool",
            [string_param("id", required=True), number_param("count")],
            handler,
        )
        assert tool.input_schema() == {
            "type": "object",
            "properties": {"id": {"type": "string"}, "count": {"type": "number"}},
            "required": ["id"],
        }

    def test_input_schema_without_required(self):
        async def handler(request):
            return ToolResponse("ok")

        tool = ToolDefinition("demo", "Demo tool", [number_param("count")], handler)
        assert "required" not in tool.input_schema()


class TestToolInvoke:
    """Test ToolDefinition.invoke."""

    @pytest.mark.asyncio
    async def test_invoke_passes_request(self):
        seen = []

        async def handler(request: ToolRequest):
            seen.append(request)
            return ToolResponse.json(request.arguments)

        tool = ToolDefinition("echo", "Echo", [], handler)
        response = await tool.invoke({"a": 1})

        assert seen == [ToolRequest(name="echo", arguments={"a": 1})]
        assert json.loads(response.text) == {"a": 1}
        assert get_metrics_collector().get_counter("tool_calls_total", tool="echo", status="success") == 1

    @pytest.mark.asyncio
    async def test_invoke_counts_errors(self):
        async def handler(request):
            return ToolResponse.error("nope")

        tool = ToolDefinition("fails", "Fails", [], handler)
        response = await tool.invoke({})

        assert response.is_error
        assert get_metrics_collector().get_counter("tool_calls_total", tool="fails", status="error") == 1

    @pytest.mark.asyncio
    async def test_invoke_converts_stray_exception(self):
        async def handler(request):
            raise RuntimeError("kaboom")

        tool = ToolDefinition("raises", "Raises", [], handler)
        response = await tool.invoke({})

        assert response.is_error
        assert response.text == "raises failed: kaboom"

    def test_read_only_defaults_to_false(self):
        async def handler(request):
            return ToolResponse("ok")

        assert ToolDefinition("demo", "Demo", [], handler).read_only is False
