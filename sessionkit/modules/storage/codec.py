"""
Tagged value encoding for session values crossing a serialization boundary.

Plain JSON types pass through unchanged. Types JSON cannot express are
wrapped in an object tagged with ``__type__`` so they decode to the same
Python type they were stored as.
"""

import base64
import json
from datetime import datetime
from typing import Any

from ...errors import StorageError

_TAG = "__type__"


def _tag(value: Any) -> Any:
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, bytes):
        return {_TAG: "bytes", "value": base64.b64encode(value).decode("ascii")}
    if isinstance(value, datetime):
        return {_TAG: "datetime", "value": value.isoformat()}
    if isinstance(value, tuple):
        return {_TAG: "tuple", "value": [_tag(v) for v in value]}
    if isinstance(value, list):
        return [_tag(v) for v in value]
    if isinstance(value, dict):
        if not all(isinstance(k, str) for k in value):
            raise StorageError("Only string keys are supported in stored mappings")
        if _TAG in value:
            raise StorageError(f"Stored mappings may not use the reserved key {_TAG!r}")
        return {k: _tag(v) for k, v in value.items()}
    raise StorageError(f"Cannot store value of type {type(value).__name__}")


def _untag(value: Any) -> Any:
    if isinstance(value, list):
        return [_untag(v) for v in value]
    if isinstance(value, dict):
        kind = value.get(_TAG)
        if kind == "bytes":
            return base64.b64decode(value["value"])
        if kind == "datetime":
            return datetime.fromisoformat(value["value"])
        if kind == "tuple":
            return tuple(_untag(v) for v in value["value"])
        return {k: _untag(v) for k, v in value.items()}
    return value


def encode_value(value: Any) -> str:
    """Encode a session value as JSON text."""
    return json.dumps(_tag(value), separators=(",", ":"))


def decode_value(data: str) -> Any:
    """Decode JSON text produced by encode_value."""
    try:
        return _untag(json.loads(data))
    except (ValueError, KeyError, TypeError) as e:
        raise StorageError(f"Corrupt session value: {e}") from e
