"""Deterministic canonicalization for driftline values.

Provides stable text/byte representations used to order set-like arrays
and to fingerprint difference lists.

Guarantees:
- canonical_text(v) is deterministic: same value always yields identical text
- Object key order is irrelevant (sorted internally)
- Unicode is NFC-normalized
- Numbers are written exactly and compare by value: 1, 1.0 and 1e0
  serialize identically, 0.1 and 0.10000000000000000001 do not;
  -0 collapses to 0
- Any nesting depth is handled; no recursion
- canonicalize() is idempotent
"""

from __future__ import annotations

import hashlib
import logging
from typing import Any, Callable, List, Optional, Tuple

from .types import JsonArray, Value, ValueKind, json_text

logger = logging.getLogger(__name__)

DEFAULT_IDENTIFYING_FIELD = "id"


def canonical_text(value: Value) -> str:
    """Compact, key-sorted JSON text for a value."""
    return json_text(value, canonical=True)


def canon(value: Value) -> bytes:
    """Canonicalize a Value to UTF-8 bytes."""
    return canonical_text(value).encode("utf-8")


def sha256_hex(data: bytes) -> str:
    """Compute SHA-256 hex digest of bytes."""
    return hashlib.sha256(data).hexdigest()


# ---------------------------------------------------------------------------
# Array canonicalization
# ---------------------------------------------------------------------------


def _identity_key(
    items: Tuple[Value, ...], identifying_field: str
) -> Optional[Callable[[Value], Any]]:
    """Sort key on the identifying field, or None if it can't order every item.

    Every element must carry the field, and the identifiers must be all
    numbers or all strings.
    """
    ids = [item.get(identifying_field) for item in items]
    if any(i is None for i in ids):
        return None
    kinds = {i.kind for i in ids}
    if kinds == {ValueKind.NUMBER} or kinds == {ValueKind.STRING}:
        return lambda item: item.get(identifying_field).value
    return None


def canonicalize(
    array: JsonArray, identifying_field: str = DEFAULT_IDENTIFYING_FIELD
) -> JsonArray:
    """Deterministically reorder an array of objects.

    Sorts by ``identifying_field`` when every element carries it with a
    homogeneous type (numbers numerically, strings lexicographically), ties
    broken by canonical text. Otherwise sorts by canonical text. If the
    elements can't be serialized the array is returned unchanged, and the
    caller has to live with order-sensitive differences.

    Arrays containing anything other than objects are returned unchanged.
    """
    items = array.items
    if not items or any(item.kind is not ValueKind.OBJECT for item in items):
        return array

    try:
        id_key = _identity_key(items, identifying_field)
        decorated: List[Tuple[Any, str, Value]] = []
        for item in items:
            text = canonical_text(item)
            decorated.append((id_key(item) if id_key else text, text, item))
    except (TypeError, ValueError) as e:
        logger.warning("Array sort failed, keeping original order: %s", e)
        return array

    if id_key is None:
        logger.debug(
            "Identifying field %r missing or mixed; ordering %d elements by content",
            identifying_field,
            len(items),
        )
    decorated.sort(key=lambda entry: (entry[0], entry[1]))
    return JsonArray(tuple(entry[2] for entry in decorated))
