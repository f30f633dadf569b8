"""Parsing, conversion and structural equality for the JSON value model.

Guarantees:
- parse() accepts strict JSON only (no NaN/Infinity literals)
- Numbers are held as Decimal; 1, 1.0 and 1e0 are equal
- Object key order is irrelevant for equality, preserved for traversal
- Different variants are never equal (true != 1, "1" != 1)
"""

from __future__ import annotations

import json
import math
import os
from decimal import Decimal
from typing import Any, List, Tuple

from .errors import ParseError
from .types import (
    JSON_NULL,
    JsonArray,
    JsonBool,
    JsonNull,
    JsonNumber,
    JsonObject,
    JsonString,
    Value,
    ValueKind,
)

# ---------------------------------------------------------------------------
# Source handling
# ---------------------------------------------------------------------------


def read_source_text(source: Any) -> str:
    """Read a whole JSON source into text.

    Args:
        source: JSON text (str), UTF-8 bytes, a path-like, or a readable
                file object (text or binary).
    """
    if isinstance(source, str):
        return source
    if isinstance(source, (bytes, bytearray)):
        return _decode(bytes(source))
    if isinstance(source, os.PathLike):
        with open(source, "rb") as f:
            return _decode(f.read())
    if hasattr(source, "read"):
        data = source.read()
        if isinstance(data, bytes):
            return _decode(data)
        return data
    raise TypeError(f"Unsupported JSON source type: {type(source).__name__}")


def _decode(data: bytes) -> str:
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise ParseError(f"Source is not valid UTF-8: {e}") from e


def _reject_constant(name: str) -> Any:
    raise ParseError(f"Non-standard JSON constant {name!r}")


# ---------------------------------------------------------------------------
# Parsing and conversion
# ---------------------------------------------------------------------------


def parse(source: Any) -> Value:
    """Parse a complete JSON document into a Value.

    Raises:
        ParseError: If the source is not valid JSON.
    """
    text = read_source_text(source)
    try:
        obj = json.loads(
            text,
            parse_float=Decimal,
            parse_int=Decimal,
            parse_constant=_reject_constant,
        )
    except json.JSONDecodeError as e:
        raise ParseError(f"{e.msg} at line {e.lineno} column {e.colno}") from e
    return from_python(obj)


def from_python(obj: Any) -> Value:
    """Convert a JSON-like Python object into a Value."""
    if obj is None:
        return JSON_NULL
    if isinstance(obj, bool):
        return JsonBool(obj)
    if isinstance(obj, int):
        return JsonNumber(Decimal(obj))
    if isinstance(obj, float):
        if math.isnan(obj) or math.isinf(obj):
            raise ValueError(f"Non-finite number is not valid JSON: {obj!r}")
        return JsonNumber(Decimal(repr(obj)))
    if isinstance(obj, Decimal):
        if not obj.is_finite():
            raise ValueError(f"Non-finite number is not valid JSON: {obj!r}")
        return JsonNumber(obj)
    if isinstance(obj, str):
        return JsonString(obj)
    if isinstance(obj, dict):
        fields: List[Tuple[str, Value]] = []
        for key, value in obj.items():
            if not isinstance(key, str):
                raise TypeError(f"Object keys must be strings, got {type(key).__name__}")
            fields.append((key, from_python(value)))
        return JsonObject(tuple(fields))
    if isinstance(obj, (list, tuple)):
        return JsonArray(tuple(from_python(item) for item in obj))
    if isinstance(obj, (JsonNull, JsonBool, JsonNumber, JsonString, JsonArray, JsonObject)):
        return obj
    raise TypeError(f"Cannot convert {type(obj).__name__} to a JSON value")


def to_python(value: Value) -> Any:
    """Convert a Value back to plain Python (integral numbers become int)."""
    return value.to_python()


# ---------------------------------------------------------------------------
# Equality and shape
# ---------------------------------------------------------------------------


def deep_equal(a: Value, b: Value) -> bool:
    """Structural equality between two values."""
    if a.kind is not b.kind:
        return False

    kind = a.kind
    if kind is ValueKind.NULL:
        return True
    if kind is ValueKind.BOOLEAN or kind is ValueKind.STRING:
        return a.value == b.value
    if kind is ValueKind.NUMBER:
        return a.value == b.value
    if kind is ValueKind.ARRAY:
        if len(a.items) != len(b.items):
            return False
        return all(deep_equal(x, y) for x, y in zip(a.items, b.items))
    if kind is ValueKind.OBJECT:
        if len(a.fields) != len(b.fields):
            return False
        other = b.as_dict()
        for name, value in a.fields:
            match = other.get(name)
            if match is None or not deep_equal(value, match):
                return False
        return True
    raise TypeError(f"Unhandled value kind: {kind}")


def estimate_depth(*values: Value) -> int:
    """Maximum container nesting depth across the given values.

    Scalars have depth 0; ``[]`` and ``{}`` have depth 1.
    """
    max_depth = 0
    stack: List[Tuple[Value, int]] = [(v, 0) for v in values]
    while stack:
        value, depth = stack.pop()
        if not value.is_container:
            max_depth = max(max_depth, depth)
            continue
        depth += 1
        max_depth = max(max_depth, depth)
        if value.kind is ValueKind.ARRAY:
            stack.extend((item, depth) for item in value.items)
        else:
            stack.extend((child, depth) for _, child in value.fields)
    return max_depth
