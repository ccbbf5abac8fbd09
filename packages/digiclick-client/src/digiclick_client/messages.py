"""Turn results and backend error payloads into user-facing strings."""

from collections.abc import Mapping
from typing import Any

DEFAULT_ERROR = "An unexpected error occurred"
DEFAULT_SUCCESS = "Operation completed successfully"


def _field(obj: Any, name: str) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(name)
    return getattr(obj, name, None)


def get_error_message(error: Any) -> str:
    """Flatten a string, exception, mapping or validation-error list to one message."""
    if isinstance(error, str):
        return error

    message = _field(error, "message")
    if message:
        return str(message)

    if isinstance(error, (list, tuple)):
        parts = []
        for item in error:
            if isinstance(item, str):
                parts.append(item)
            else:
                parts.append(str(_field(item, "msg") or _field(item, "message") or item))
        return ", ".join(parts)

    if isinstance(error, Exception) and str(error):
        return str(error)

    return DEFAULT_ERROR


def get_success_message(response: Any) -> str:
    """Prefer the server's own message, falling back to a generic one."""
    data = _field(response, "data")
    if data is not None:
        message = _field(data, "message")
        if message:
            return str(message)

    message = _field(response, "message")
    if message:
        return str(message)

    return DEFAULT_SUCCESS
