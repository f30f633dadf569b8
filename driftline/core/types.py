from __future__ import annotations

import json
import unicodedata
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union


class ValueKind(Enum):
    """Structural kind of a parsed JSON value."""

    NULL = "null"
    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"


class DifferenceKind(Enum):
    """Classification of a single detected difference."""

    VALUE_CHANGED = "value_changed"
    NODE_ADDED = "node_added"
    NODE_REMOVED = "node_removed"
    TYPE_MISMATCH = "type_mismatch"


class CompareMode(Enum):
    """
    Comparison strategy.

    TREE: both documents fully materialized in memory
    STREAM: both documents walked as token sequences in lockstep
    HYBRID: TREE first, cold restart in STREAM on resource exhaustion
    """

    TREE = "tree"
    STREAM = "stream"
    HYBRID = "hybrid"


# =============================================================================
# Value model
# =============================================================================


@dataclass(frozen=True)
class JsonNull:
    @property
    def kind(self) -> ValueKind:
        return ValueKind.NULL

    @property
    def is_container(self) -> bool:
        return False

    def to_python(self) -> Any:
        return None


@dataclass(frozen=True)
class JsonBool:
    value: bool

    @property
    def kind(self) -> ValueKind:
        return ValueKind.BOOLEAN

    @property
    def is_container(self) -> bool:
        return False

    def to_python(self) -> Any:
        return self.value


@dataclass(frozen=True)
class JsonNumber:
    """Numbers keep their exact decimal value; 1, 1.0 and 1e0 compare equal."""

    value: Decimal

    @property
    def kind(self) -> ValueKind:
        return ValueKind.NUMBER

    @property
    def is_container(self) -> bool:
        return False

    def is_integral(self) -> bool:
        return self.value == self.value.to_integral_value()

    def to_python(self) -> Any:
        # int() of 1e5000 would exceed the int/str digit limit on output
        if self.is_integral() and self.value.adjusted() < _MAX_INT_DIGITS:
            return int(self.value)
        return self.value


@dataclass(frozen=True)
class JsonString:
    value: str

    @property
    def kind(self) -> ValueKind:
        return ValueKind.STRING

    @property
    def is_container(self) -> bool:
        return False

    def to_python(self) -> Any:
        return self.value


@dataclass(frozen=True)
class JsonArray:
    items: Tuple["Value", ...] = ()

    @property
    def kind(self) -> ValueKind:
        return ValueKind.ARRAY

    @property
    def is_container(self) -> bool:
        return True

    def __len__(self) -> int:
        return len(self.items)

    def to_python(self) -> Any:
        return _container_to_python(self)


@dataclass(frozen=True)
class JsonObject:
    """
    JSON object with insertion order preserved.

    Field names are unique within one object. Order matters for traversal
    and output, never for equality (see values.deep_equal).
    """

    fields: Tuple[Tuple[str, "Value"], ...] = ()

    @property
    def kind(self) -> ValueKind:
        return ValueKind.OBJECT

    @property
    def is_container(self) -> bool:
        return True

    def __len__(self) -> int:
        return len(self.fields)

    def names(self) -> Tuple[str, ...]:
        return tuple(name for name, _ in self.fields)

    def get(self, name: str) -> Optional["Value"]:
        for field_name, value in self.fields:
            if field_name == name:
                return value
        return None

    def as_dict(self) -> Dict[str, "Value"]:
        return dict(self.fields)

    def to_python(self) -> Any:
        return _container_to_python(self)


Value = Union[JsonNull, JsonBool, JsonNumber, JsonString, JsonArray, JsonObject]

JSON_NULL = JsonNull()

_MAX_INT_DIGITS = 4300


def _container_to_python(root: Union[JsonArray, JsonObject]) -> Any:
    """Iterative conversion; documents can nest deeper than the recursion limit."""
    result: Any = [] if root.kind is ValueKind.ARRAY else {}
    stack: List[Tuple[Value, Any]] = [(root, result)]
    while stack:
        source, target = stack.pop()
        if source.kind is ValueKind.ARRAY:
            entries = enumerate(source.items)
        else:
            entries = iter(source.fields)
        for key, child in entries:
            if child.is_container:
                converted: Any = [] if child.kind is ValueKind.ARRAY else {}
                stack.append((child, converted))
            else:
                converted = child.to_python()
            if source.kind is ValueKind.ARRAY:
                target.append(converted)
            else:
                target[key] = converted
    return result


# =============================================================================
# JSON text
# =============================================================================


def _nfc(s: str) -> str:
    return unicodedata.normalize("NFC", s)


def _canonical_number(value: Decimal) -> str:
    """One text per numeric value: 1, 1.0, 1e0 and 10e-1 all become "1"."""
    if value.is_zero():
        return "0"
    sign, digits, exponent = value.as_tuple()
    digits = list(digits)
    while len(digits) > 1 and digits[-1] == 0:
        digits.pop()
        exponent += 1
    text = "".join(str(d) for d in digits)
    if 0 < exponent and len(text) + exponent <= 21:
        text += "0" * exponent
    elif -21 <= exponent < 0:
        if len(text) > -exponent:
            text = f"{text[:exponent]}.{text[exponent:]}"
        else:
            text = "0." + "0" * (-exponent - len(text)) + text
    elif exponent:
        text = f"{text}e{exponent}"
    return f"-{text}" if sign else text


def _scalar_text(value: Value, canonical: bool) -> str:
    kind = value.kind
    if kind is ValueKind.NULL:
        return "null"
    if kind is ValueKind.BOOLEAN:
        return "true" if value.value else "false"
    if kind is ValueKind.NUMBER:
        return _canonical_number(value.value) if canonical else str(value.value)
    if kind is ValueKind.STRING:
        return json.dumps(_nfc(value.value) if canonical else value.value, ensure_ascii=False)
    raise TypeError(f"Unhandled value kind: {kind}")


def json_text(value: Value, canonical: bool = False) -> str:
    """Compact JSON text for a value, built without recursion.

    Numbers are written exactly, never through float. With ``canonical``
    set, object keys are sorted, strings are NFC-normalized and numbers use
    a single normal form, so structurally equal values always produce
    identical text. Otherwise field order and number text are kept as
    parsed.
    """
    out: List[str] = []
    # Pending work: Values to write, or literal text already rendered
    stack: List[Any] = [value]
    while stack:
        item = stack.pop()
        if isinstance(item, str):
            out.append(item)
            continue
        if item.kind is ValueKind.ARRAY:
            out.append("[")
            stack.append("]")
            for i in range(len(item.items) - 1, -1, -1):
                stack.append(item.items[i])
                if i:
                    stack.append(",")
        elif item.kind is ValueKind.OBJECT:
            fields = item.fields
            if canonical:
                fields = sorted(((_nfc(name), child) for name, child in fields), key=lambda f: f[0])
            out.append("{")
            stack.append("}")
            for i in range(len(fields) - 1, -1, -1):
                name, child = fields[i]
                stack.append(child)
                stack.append(json.dumps(name, ensure_ascii=False) + ":")
                if i:
                    stack.append(",")
        else:
            out.append(_scalar_text(item, canonical))
    return "".join(out)


# =============================================================================
# Differences
# =============================================================================


def _truncate(value: Value, max_len: int = 50) -> str:
    s = json_text(value)
    if len(s) > max_len:
        return s[: max_len - 3] + "..."
    return s


@dataclass(frozen=True)
class Difference:
    """
    One detected discrepancy between the old and new document.

    Attributes:
        path: Dotted/bracketed location, e.g. "user.address[0].street".
              Empty only for a root-level whole-document difference.
        kind: DifferenceKind classification
        old: Value in the old document (absent for NODE_ADDED)
        new: Value in the new document (absent for NODE_REMOVED)
    """

    path: str
    kind: DifferenceKind
    old: Optional[Value] = None
    new: Optional[Value] = None

    def __post_init__(self) -> None:
        if self.kind is DifferenceKind.NODE_ADDED:
            if self.old is not None or self.new is None:
                raise ValueError("NODE_ADDED carries only a new value")
        elif self.kind is DifferenceKind.NODE_REMOVED:
            if self.new is not None or self.old is None:
                raise ValueError("NODE_REMOVED carries only an old value")
        elif self.old is None or self.new is None:
            raise ValueError(f"{self.kind.name} carries both old and new values")

    def swapped(self) -> "Difference":
        """The same difference seen from the other side of the comparison."""
        kind = self.kind
        if kind is DifferenceKind.NODE_ADDED:
            kind = DifferenceKind.NODE_REMOVED
        elif kind is DifferenceKind.NODE_REMOVED:
            kind = DifferenceKind.NODE_ADDED
        return Difference(path=self.path, kind=kind, old=self.new, new=self.old)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        result: Dict[str, Any] = {"path": self.path, "kind": self.kind.value}
        if self.old is not None:
            result["old"] = self.old.to_python()
        if self.new is not None:
            result["new"] = self.new.to_python()
        return result

    def __str__(self) -> str:
        location = self.path or "(root)"
        if self.kind is DifferenceKind.NODE_ADDED:
            return f"{location}: added {_truncate(self.new)}"
        if self.kind is DifferenceKind.NODE_REMOVED:
            return f"{location}: removed {_truncate(self.old)}"
        old = _truncate(self.old)
        new = _truncate(self.new)
        if self.kind is DifferenceKind.TYPE_MISMATCH:
            return (
                f"{location}: type {self.old.kind.value} -> {self.new.kind.value} "
                f"({old} -> {new})"
            )
        return f"{location}: {old} -> {new}"
