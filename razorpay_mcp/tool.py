"""
Tool model shared by every transport.

A tool is a name, a description, a list of parameters (rendered as a JSON
Schema object) and an async handler that maps a ``ToolRequest`` to a
``ToolResponse``. Handlers never raise: failures are error responses.
"""
from __future__ import annotations

import json
import time
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional

from .metrics import get_metrics_collector

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolRequest:
    """A single tool invocation: the tool name and its raw arguments."""
    name: str
    arguments: Any = field(default_factory=dict)


@dataclass(frozen=True)
class ToolResponse:
    """Text result of a tool call, flagged as an error when it failed."""
    text: str
    is_error: bool = False

    @classmethod
    def error(cls, text: str) -> "ToolResponse":
        return cls(text=text, is_error=True)

    @classmethod
    def json(cls, data: Any) -> "ToolResponse":
        return cls(text=json.dumps(data, separators=(",", ":"), default=str), is_error=False)

    def to_content(self) -> Dict[str, Any]:
        return {
            "content": [{"type": "text", "text": self.text}],
            "isError": self.is_error,
        }


ToolHandler = Callable[[ToolRequest], Awaitable[ToolResponse]]


@dataclass(frozen=True)
class ToolParameter:
    name: str
    schema: Dict[str, Any]
    required: bool = False


def _parameter(
    name: str,
    json_type: str,
    description: str,
    required: bool,
    minimum: Optional[float] = None,
    maximum: Optional[float] = None,
    pattern: Optional[str] = None,
    max_length: Optional[int] = None,
    default: Any = None,
    max_properties: Optional[int] = None,
    items: Optional[Dict[str, Any]] = None,
) -> ToolParameter:
    schema: Dict[str, Any] = {"type": json_type}
    if description:
        schema["description"] = description
    if minimum is not None:
        schema["minimum"] = minimum
    if maximum is not None:
        schema["maximum"] = maximum
    if pattern is not None:
        schema["pattern"] = pattern
    if max_length is not None:
        schema["maxLength"] = max_length
    if default is not None:
        schema["default"] = default
    if max_properties is not None:
        schema["maxProperties"] = max_properties
    if items is not None:
        schema["items"] = items
    return ToolParameter(name=name, schema=schema, required=required)


def string_param(name: str, description: str = "", required: bool = False, **constraints) -> ToolParameter:
    return _parameter(name, "string", description, required, **constraints)


def number_param(name: str, description: str = "", required: bool = False, **constraints) -> ToolParameter:
    return _parameter(name, "number", description, required, **constraints)


def boolean_param(name: str, description: str = "", required: bool = False, **constraints) -> ToolParameter:
    return _parameter(name, "boolean", description, required, **constraints)


def object_param(name: str, description: str = "", required: bool = False, **constraints) -> ToolParameter:
    return _parameter(name, "object", description, required, **constraints)


def array_param(name: str, description: str = "", required: bool = False, **constraints) -> ToolParameter:
    return _parameter(name, "array", description, required, **constraints)


@dataclass
class ToolDefinition:
    """A registered tool and the handler that serves it."""
    name: str
    description: str
    parameters: List[ToolParameter]
    handler: ToolHandler
    read_only: bool = False

    def input_schema(self) -> Dict[str, Any]:
        schema: Dict[str, Any] = {
            "type": "object",
            "properties": {p.name: dict(p.schema) for p in self.parameters},
        }
        required = [p.name for p in self.parameters if p.required]
        if required:
            schema["required"] = required
        return schema

    async def invoke(self, arguments: Any) -> ToolResponse:
        """
        Run the handler and record call metrics.

        Args:
            arguments: Raw arguments as received from the transport

        Returns:
            The handler's response. A handler that raises anyway is reported
            as an error response rather than propagated.
        """
        metrics = get_metrics_collector()
        start = time.time()
        status = "success"
        logger.debug(f"Calling tool {self.name}")
        try:
            response = await self.handler(ToolRequest(name=self.name, arguments=arguments))
        except Exception as e:
            logger.error(f"Tool {self.name} raised: {e}", exc_info=True)
            response = ToolResponse.error(f"{self.name} failed: {e}")
        if response.is_error:
            status = "error"
        metrics.increment_counter("tool_calls_total", tool=self.name, status=status)
        metrics.record_timing("tool_call_duration", (time.time() - start) * 1000, tool=self.name)
        return response
