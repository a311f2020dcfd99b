"""
Tests for the JSON-RPC HTTP transport.
"""

import base64
import json

import httpx
import pytest
from starlette.testclient import TestClient

from razorpay_mcp.client import RazorpayClient
from razorpay_mcp.http_transport import (
    AuthenticationError, create_http_app, parse_credentials,
)
from razorpay_mcp.metrics import get_metrics_collector
from razorpay_mcp.tool_registry import build_toolsets


def bearer(key_id="rzp_test_key", key_secret="secret"):
    token = base64.b64encode(f"{key_id}:{key_secret}".encode()).decode()
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def built_clients():
    return []


@pytest.fixture
def http_client(api, built_clients):
    def factory(key_id, key_secret):
        client = RazorpayClient(key_id, key_secret, transport=httpx.MockTransport(api))
        built_clients.append(client)
        return client

    app = create_http_app(build_toolsets(), client_factory=factory)
    return TestClient(app)


def rpc(http_client, payload, headers=None):
    response = http_client.post("/", json=payload, headers=bearer() if headers is None else headers)
    assert response.status_code == 200
    return response.json()


class TestParseCredentials:
    """Test bearer token decoding."""

    def test_valid_token(self):
        assert parse_credentials(bearer()["Authorization"]) == ("rzp_test_key", "secret")

    def test_secret_may_contain_colon(self):
        assert parse_credentials(bearer("key", "a:b")["Authorization"]) == ("key", "a:b")

    def test_scheme_is_case_insensitive(self):
        token = bearer()["Authorization"].split(" ", 1)[1]
        assert parse_credentials(f"bearer {token}") == ("rzp_test_key", "secret")

    @pytest.mark.parametrize("header,reason", [
        (None, "authorization header required"),
        ("", "authorization header required"),
        ("Basic abc", "invalid authorization header format"),
        ("Bearer", "invalid authorization header format"),
        ("Bearer not-base64!", "invalid token encoding"),
        ("Bearer " + base64.b64encode(b"no-separator").decode(), "invalid credentials format"),
    ])
    def test_rejected_headers(self, header, reason):
        with pytest.raises(AuthenticationError) as exc_info:
            parse_credentials(header)
        assert str(exc_info.value) == reason


class TestJsonRpcEnvelope:
    """Test request validation and error codes."""

    def test_parse_error(self, http_client):
        response = http_client.post("/", content=b"{not json", headers=bearer())
        body = response.json()
        assert response.status_code == 200
        assert body["id"] is None
        assert body["error"]["code"] == -32700
        assert body["error"]["message"] == "Parse error"

    def test_non_object_request(self, http_client):
        body = rpc(http_client, [1, 2])
        assert body["error"]["code"] == -32600

    def test_wrong_version(self, http_client):
        body = rpc(http_client, {"jsonrpc": "1.0", "id": 7, "method": "tools/list"})
        assert body == {
            "jsonrpc": "2.0",
            "id": 7,
            "error": {"code": -32600, "message": "Invalid Request", "data": "JSON-RPC version must be 2.0"},
        }

    def test_unknown_method(self, http_client):
        body = rpc(http_client, {"jsonrpc": "2.0", "id": 1, "method": "resources/list"})
        assert body["error"] == {"code": -32601, "message": "Method not found", "data": "Method resources/list not found"}

    def test_missing_authorization(self, http_client):
        body = rpc(http_client, {"jsonrpc": "2.0", "id": 1, "method": "tools/list"}, headers={})
        assert body["error"] == {"code": -32603, "message": "Authentication failed", "data": "authorization header required"}

    def test_bad_token(self, http_client, built_clients):
        body = rpc(http_client, {"jsonrpc": "2.0", "id": 1, "method": "tools/list"}, headers={"Authorization": "Bearer %%%"})
        assert body["error"]["data"] == "invalid token encoding"
        assert built_clients == []

    def test_string_ids_are_echoed(self, http_client):
        body = rpc(http_client, {"jsonrpc": "2.0", "id": "abc", "method": "tools/list"})
        assert body["id"] == "abc"


class TestToolsList:
    """Test tools/list."""

    def test_lists_enabled_tools(self, http_client):
        body = rpc(http_client, {"jsonrpc": "2.0", "id": 1, "method": "tools/list"})
        tools = {tool["name"]: tool for tool in body["result"]["tools"]}

        assert len(tools) == 28
        schema = tools["fetch_customer"]["inputSchema"]
        assert schema["required"] == ["customer_id"]
        assert schema["properties"]["customer_id"]["type"] == "string"

    def test_read_only_list(self):
        app = create_http_app(build_toolsets(read_only=True))
        body = rpc(TestClient(app), {"jsonrpc": "2.0", "id": 1, "method": "tools/list"})
        names = {tool["name"] for tool in body["result"]["tools"]}
        assert "create_refund" not in names
        assert "fetch_refund" in names


class TestToolsCall:
    """Test tools/call."""

    def test_call_tool(self, http_client, api, built_clients):
        body = rpc(http_client, {
            "jsonrpc": "2.0",
            "id": 3,
            "method": "tools/call",
            "params": {"name": "fetch_customer", "arguments": {"customer_id": "cust_1"}},
        })

        assert body["id"] == 3
        assert body["result"]["isError"] is False
        assert json.loads(body["result"]["content"][0]["text"]) == {"id": "obj_123", "entity": "test"}
        assert api.last.url.path == "/v1/customers/cust_1"
        assert built_clients[0].key_id == "rzp_test_key"

    def test_validation_error_is_a_result(self, http_client, api):
        body = rpc(http_client, {
            "jsonrpc": "2.0",
            "id": 4,
            "method": "tools/call",
            "params": {"name": "create_customer", "arguments": {"name": 12345}},
        })
        assert body["result"] == {
            "content": [{"type": "text", "text": "Validation errors:\n- invalid parameter type: name"}],
            "isError": True,
        }
        assert api.requests == []

    def test_missing_arguments_default_to_empty(self, http_client):
        body = rpc(http_client, {
            "jsonrpc": "2.0", "id": 5, "method": "tools/call", "params": {"name": "fetch_all_refunds"},
        })
        assert body["result"]["isError"] is False

    def test_non_object_arguments(self, http_client, api):
        body = rpc(http_client, {
            "jsonrpc": "2.0", "id": 6, "method": "tools/call",
            "params": {"name": "fetch_refund", "arguments": ["rfnd_1"]},
        })
        assert body["result"]["content"][0]["text"] == "Validation errors:\n- invalid arguments type"
        assert api.requests == []

    def test_unknown_tool(self, http_client):
        body = rpc(http_client, {
            "jsonrpc": "2.0", "id": 7, "method": "tools/call", "params": {"name": "delete_everything"},
        })
        assert body["error"] == {"code": -32603, "message": "Tool execution failed", "data": "tool delete_everything not found"}

    def test_read_only_hides_write_tools(self):
        app = create_http_app(build_toolsets(read_only=True))
        body = rpc(TestClient(app), {
            "jsonrpc": "2.0", "id": 8, "method": "tools/call",
            "params": {"name": "create_refund", "arguments": {"payment_id": "pay_1"}},
        })
        assert body["error"]["data"] == "tool create_refund not found"

    def test_non_object_params(self, http_client):
        body = rpc(http_client, {"jsonrpc": "2.0", "id": 9, "method": "tools/call", "params": "fetch_refund"})
        assert body["error"]["code"] == -32602

    def test_api_error_is_a_result(self):
        handler = httpx.MockTransport(
            lambda request: httpx.Response(400, json={"error": {"code": "BAD_REQUEST_ERROR", "description": "The id provided does not exist"}})
        )
        app = create_http_app(
            build_toolsets(),
            client_factory=lambda key_id, key_secret: RazorpayClient(key_id, key_secret, transport=handler),
        )
        body = rpc(TestClient(app), {
            "jsonrpc": "2.0", "id": 10, "method": "tools/call",
            "params": {"name": "fetch_payout_by_id", "arguments": {"payout_id": "pout_1"}},
        })
        assert body["result"]["isError"] is True
        assert body["result"]["content"][0]["text"] == (
            "fetching payout failed: BAD_REQUEST_ERROR: The id provided does not exist"
        )


class TestProbes:
    """Test the liveness, readiness and metrics endpoints."""

    def test_live_and_ready(self, http_client):
        assert http_client.get("/live").text == "OK"
        assert http_client.get("/ready").text == "OK"

    def test_probes_need_no_credentials(self, http_client):
        assert http_client.get("/live").status_code == 200

    def test_metrics(self, http_client):
        rpc(http_client, {
            "jsonrpc": "2.0", "id": 1, "method": "tools/call",
            "params": {"name": "fetch_refund", "arguments": {"refund_id": "rfnd_1"}},
        })
        response = http_client.get("/metrics")

        assert response.status_code == 200
        assert 'tool_calls_total{tool="fetch_refund",status="success"} 1' in response.text
        assert get_metrics_collector().get_counter(
            "http_requests_total", method="POST", path="/rpc", status_code="200"
        ) == 1
