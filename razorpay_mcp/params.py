"""
Parameter validation and extraction for Razorpay MCP tools.

Tool arguments arrive as an untyped JSON object. Every handler runs them
through a ``Validator`` which extracts one field at a time, coerces it into
the expected type and collects errors instead of failing on the first one.

Example:
    params = {}
    validator = (
        Validator(request)
        .required_string(params, "payout_id")
        .pagination(params)
    )
    error = validator.handle_errors_if_any()
    if error is not None:
        return error
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from .tool import ToolRequest, ToolResponse

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


class ParamError(ValueError):
    """Base class for parameter validation errors."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field

    def __str__(self) -> str:
        return self.message

    def __eq__(self, other: object) -> bool:
        return (
            type(self) is type(other)
            and self.message == other.message  # type: ignore[attr-defined]
            and self.field == other.field  # type: ignore[attr-defined]
        )

    def __hash__(self) -> int:
        return hash((type(self), self.message, self.field))


class MissingRequiredError(ParamError):
    def __init__(self, field: str):
        super().__init__(f"missing required parameter: {field}", field)


class InvalidTypeError(ParamError):
    def __init__(self, field: str):
        super().__init__(f"invalid parameter type: {field}", field)


class InvalidArgumentsError(ParamError):
    def __init__(self):
        super().__init__("invalid arguments type")


class CrossFieldError(ParamError):
    """Business rule spanning more than one field."""


class ParamType(Enum):
    TEXT = "text"
    INT = "int"
    FLOAT = "float"
    BOOL = "bool"
    ARRAY = "array"
    MAP = "map"
    TEXT_LIST = "text_list"


class _Mismatch:
    """Marker returned by a coercion function when the shape is wrong."""


_MISMATCH = _Mismatch()


def _is_number(value: Any) -> bool:
    # bool is a subclass of int but JSON keeps them apart
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _to_text(value: Any) -> Any:
    return value if isinstance(value, str) else _MISMATCH


def _to_int(value: Any) -> Any:
    if not _is_number(value):
        return _MISMATCH
    if isinstance(value, float):
        if not value.is_integer():
            return _MISMATCH
        value = int(value)
    if value < INT64_MIN or value > INT64_MAX:
        return _MISMATCH
    return value


def _to_float(value: Any) -> Any:
    if not _is_number(value):
        return _MISMATCH
    try:
        return float(value)
    except OverflowError:
        # ints past the float range
        return _MISMATCH


def _to_bool(value: Any) -> Any:
    return value if isinstance(value, bool) else _MISMATCH


def _to_array(value: Any) -> Any:
    return list(value) if isinstance(value, (list, tuple)) else _MISMATCH


def _to_map(value: Any) -> Any:
    if not isinstance(value, dict) or not all(isinstance(k, str) for k in value):
        return _MISMATCH
    return dict(value)


def _to_text_list(value: Any) -> Any:
    if not isinstance(value, (list, tuple)):
        return _MISMATCH
    if not all(isinstance(item, str) for item in value):
        return _MISMATCH
    return list(value)


COERCERS: Dict[ParamType, Callable[[Any], Any]] = {
    ParamType.TEXT: _to_text,
    ParamType.INT: _to_int,
    ParamType.FLOAT: _to_float,
    ParamType.BOOL: _to_bool,
    ParamType.ARRAY: _to_array,
    ParamType.MAP: _to_map,
    ParamType.TEXT_LIST: _to_text_list,
}


def extract_value(
    request: ToolRequest,
    name: str,
    param_type: ParamType,
    required: bool = False,
) -> Tuple[Optional[Any], Optional[ParamError]]:
    """
    Extract a single argument from a tool request.

    Args:
        request: The incoming tool request
        name: Argument name
        param_type: Semantic type the value must coerce into
        required: Whether an absent (or null) value is an error

    Returns:
        ``(value, None)`` on success, ``(None, None)`` for an absent optional
        argument, ``(None, error)`` otherwise. Never raises.
    """
    args = request.arguments
    if not isinstance(args, Mapping):
        return None, InvalidArgumentsError()

    value = args.get(name)
    if value is None:
        if required:
            return None, MissingRequiredError(name)
        return None, None

    coerced = COERCERS[param_type](value)
    if coerced is _MISMATCH:
        return None, InvalidTypeError(name)
    return coerced, None


class Validator:
    """Fluent accumulator of parameter validation errors for one request."""

    def __init__(self, request: ToolRequest):
        self.request = request
        self._errors: List[ParamError] = []

    @property
    def errors(self) -> List[ParamError]:
        return list(self._errors)

    def add_error(self, error: Optional[Any]) -> "Validator":
        """Record an error. ``None`` is ignored; strings become ``CrossFieldError``."""
        if error is None:
            return self
        if isinstance(error, str):
            error = CrossFieldError(error)
        elif not isinstance(error, ParamError):
            error = CrossFieldError(str(error))
        self._errors.append(error)
        return self

    def has_errors(self) -> bool:
        return len(self._errors) > 0

    def render(self) -> Optional[str]:
        if not self._errors:
            return None
        return "Validation errors:\n- " + "\n- ".join(str(e) for e in self._errors)

    def handle_errors_if_any(self) -> Optional[ToolResponse]:
        """Return an error tool response if anything failed, else ``None``."""
        message = self.render()
        if message is None:
            return None
        return ToolResponse.error(message)

    # Generic operations

    def required(self, params: Dict[str, Any], name: str, param_type: ParamType) -> "Validator":
        value, err = extract_value(self.request, name, param_type, required=True)
        if err is not None:
            return self.add_error(err)
        params[name] = value
        return self

    def optional(self, params: Dict[str, Any], name: str, param_type: ParamType) -> "Validator":
        return self.optional_to_path(params, name, name, param_type)

    def optional_to_path(
        self,
        target: Dict[str, Any],
        name: str,
        target_key: str,
        param_type: ParamType,
    ) -> "Validator":
        """Extract an optional argument and write it to ``target[target_key]``."""
        value, err = extract_value(self.request, name, param_type, required=False)
        if err is not None:
            return self.add_error(err)
        if value is None:
            return self
        target[target_key] = value
        return self

    # Typed helpers

    def required_string(self, params: Dict[str, Any], name: str) -> "Validator":
        return self.required(params, name, ParamType.TEXT)

    def required_non_empty_string(self, params: Dict[str, Any], name: str) -> "Validator":
        """Like ``required_string`` but an empty string counts as missing."""
        value, err = extract_value(self.request, name, ParamType.TEXT, required=True)
        if err is not None:
            return self.add_error(err)
        if value == "":
            return self.add_error(MissingRequiredError(name))
        params[name] = value
        return self

    def optional_string(self, params: Dict[str, Any], name: str) -> "Validator":
        return self.optional(params, name, ParamType.TEXT)

    def required_int(self, params: Dict[str, Any], name: str) -> "Validator":
        return self.required(params, name, ParamType.INT)

    def optional_int(self, params: Dict[str, Any], name: str) -> "Validator":
        return self.optional(params, name, ParamType.INT)

    def required_float(self, params: Dict[str, Any], name: str) -> "Validator":
        return self.required(params, name, ParamType.FLOAT)

    def optional_float(self, params: Dict[str, Any], name: str) -> "Validator":
        return self.optional(params, name, ParamType.FLOAT)

    def required_bool(self, params: Dict[str, Any], name: str) -> "Validator":
        return self.required(params, name, ParamType.BOOL)

    def optional_bool(self, params: Dict[str, Any], name: str) -> "Validator":
        return self.optional(params, name, ParamType.BOOL)

    def required_map(self, params: Dict[str, Any], name: str) -> "Validator":
        return self.required(params, name, ParamType.MAP)

    def optional_map(self, params: Dict[str, Any], name: str) -> "Validator":
        return self.optional(params, name, ParamType.MAP)

    def required_array(self, params: Dict[str, Any], name: str) -> "Validator":
        return self.required(params, name, ParamType.ARRAY)

    def optional_array(self, params: Dict[str, Any], name: str) -> "Validator":
        return self.optional(params, name, ParamType.ARRAY)

    def optional_string_to_path(self, target: Dict[str, Any], name: str, target_key: str) -> "Validator":
        return self.optional_to_path(target, name, target_key, ParamType.TEXT)

    def optional_int_to_path(self, target: Dict[str, Any], name: str, target_key: str) -> "Validator":
        return self.optional_to_path(target, name, target_key, ParamType.INT)

    def optional_bool_to_path(self, target: Dict[str, Any], name: str, target_key: str) -> "Validator":
        return self.optional_to_path(target, name, target_key, ParamType.BOOL)

    # Conventional list options

    def pagination(self, params: Dict[str, Any]) -> "Validator":
        return self.optional_int(params, "count").optional_int(params, "skip")

    def expand(self, params: Dict[str, Any]) -> "Validator":
        """
        Extract the optional ``expand`` list into ``params["expand[]"]``.

        Only the last element survives because every element is written to the
        same key.
        """
        values, err = extract_value(self.request, "expand", ParamType.TEXT_LIST)
        if err is not None:
            return self.add_error(err)
        if not values:
            return self
        # TODO: send every element as a repeated expand[] query parameter
        # once list-valued params are passed through to the client untouched.
        for value in values:
            params["expand[]"] = value
        return self
