"""Shared fixtures for the Razorpay MCP Server tests."""

import json
from typing import Callable, List

import httpx
import pytest

from razorpay_mcp.client import RazorpayClient
from razorpay_mcp.config_manager import ConfigManager, set_config_manager
from razorpay_mcp.metrics import get_metrics_collector


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch):
    """Keep local config files and credentials out of the tests."""
    for name in ConfigManager.ENV_MAPPINGS:
        monkeypatch.delenv(name, raising=False)
    manager = ConfigManager(None, enable_hot_reload=False)
    set_config_manager(manager)
    yield manager
    set_config_manager(None)


@pytest.fixture(autouse=True)
def reset_metrics():
    get_metrics_collector().reset()
    yield
    get_metrics_collector().reset()


class RecordingHandler:
    """MockTransport handler that records requests and replays a canned response."""

    def __init__(self, status_code: int = 200, body=None):
        self.status_code = status_code
        self.body = {} if body is None else body
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, json=self.body)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self):
        return json.loads(self.last.content)


@pytest.fixture
def api() -> RecordingHandler:
    return RecordingHandler(body={"id": "obj_123", "entity": "test"})


@pytest.fixture
def make_client() -> Callable[[RecordingHandler], RazorpayClient]:
    def factory(handler) -> RazorpayClient:
        return RazorpayClient(
            "rzp_test_key",
            "secret",
            user_agent="razorpay-mcp/test",
            transport=httpx.MockTransport(handler),
        )
    return factory


@pytest.fixture
def client(api, make_client) -> RazorpayClient:
    return make_client(api)


@pytest.fixture
def recording_handler():
    return RecordingHandler
