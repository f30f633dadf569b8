"""Pull-based token cursors over streaming JSON.

A Cursor wraps an ijson ``basic_parse`` event stream (or any iterable of
``(event, value)`` pairs in the same vocabulary) and exposes one-token
lookahead plus subtree-level operations:

    peek_token()            next token without consuming it
    next_token()            consume and return the next token
    skip_current_subtree()  consume the value at the cursor without building it
    read_current_value()    consume the value at the cursor and return it

Cursors never hold more than one pending token; only read_current_value()
materializes anything, and only the subtree it was asked for.
"""

from __future__ import annotations

import io
import logging
import os
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Tuple

import ijson
from ijson.common import JSONError

from .errors import ParseError
from .types import (
    JSON_NULL,
    JsonArray,
    JsonBool,
    JsonNumber,
    JsonObject,
    JsonString,
    Value,
)

logger = logging.getLogger(__name__)


class TokenKind(Enum):
    OBJECT_START = "object_start"
    OBJECT_END = "object_end"
    ARRAY_START = "array_start"
    ARRAY_END = "array_end"
    FIELD_NAME = "field_name"
    SCALAR = "scalar"

    @property
    def starts_value(self) -> bool:
        return self in (TokenKind.OBJECT_START, TokenKind.ARRAY_START, TokenKind.SCALAR)

    @property
    def is_end(self) -> bool:
        return self in (TokenKind.OBJECT_END, TokenKind.ARRAY_END)


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    name: Optional[str] = None
    value: Optional[Value] = None


_STRUCTURAL_EVENTS = {
    "start_map": TokenKind.OBJECT_START,
    "end_map": TokenKind.OBJECT_END,
    "start_array": TokenKind.ARRAY_START,
    "end_array": TokenKind.ARRAY_END,
}

_OBJECT_START = Token(TokenKind.OBJECT_START)
_OBJECT_END = Token(TokenKind.OBJECT_END)
_ARRAY_START = Token(TokenKind.ARRAY_START)
_ARRAY_END = Token(TokenKind.ARRAY_END)

_STRUCTURAL_TOKENS = {
    TokenKind.OBJECT_START: _OBJECT_START,
    TokenKind.OBJECT_END: _OBJECT_END,
    TokenKind.ARRAY_START: _ARRAY_START,
    TokenKind.ARRAY_END: _ARRAY_END,
}


def _scalar_value(event: str, value: Any) -> Value:
    if event == "null":
        return JSON_NULL
    if event == "boolean":
        return JsonBool(bool(value))
    if event == "number":
        if isinstance(value, Decimal):
            return JsonNumber(value)
        if isinstance(value, int):
            return JsonNumber(Decimal(value))
        return JsonNumber(Decimal(repr(value)))
    if event == "string":
        return JsonString(value)
    raise ParseError(f"Unknown token event {event!r}")


def event_to_token(event: str, value: Any) -> Token:
    """Translate one ijson basic_parse event into a Token."""
    kind = _STRUCTURAL_EVENTS.get(event)
    if kind is not None:
        return _STRUCTURAL_TOKENS[kind]
    if event == "map_key":
        return Token(TokenKind.FIELD_NAME, name=value)
    return Token(TokenKind.SCALAR, value=_scalar_value(event, value))


# ---------------------------------------------------------------------------
# Value folding
# ---------------------------------------------------------------------------


@dataclass
class _Builder:
    kind: TokenKind
    items: List[Value] = field(default_factory=list)
    fields: Dict[str, Value] = field(default_factory=dict)
    pending_name: Optional[str] = None

    def add(self, value: Value) -> None:
        if self.kind is TokenKind.ARRAY_START:
            self.items.append(value)
            return
        if self.pending_name is None:
            raise ParseError("Object value without a field name")
        self.fields[self.pending_name] = value
        self.pending_name = None

    def build(self, end: TokenKind) -> Value:
        if self.kind is TokenKind.ARRAY_START:
            if end is not TokenKind.ARRAY_END:
                raise ParseError("Array closed by object end")
            return JsonArray(tuple(self.items))
        if end is not TokenKind.OBJECT_END:
            raise ParseError("Object closed by array end")
        return JsonObject(tuple(self.fields.items()))


# ---------------------------------------------------------------------------
# Cursor
# ---------------------------------------------------------------------------


class Cursor:
    """
    One-token-lookahead cursor over a JSON event stream.

    Args:
        events: Iterable of ijson-style ``(event, value)`` pairs.
        closer: Called by close(), e.g. to release a file the cursor opened.
        label: Side of the comparison ("old"/"new"), used in error messages.
    """

    def __init__(
        self,
        events: Iterable[Tuple[str, Any]],
        closer: Optional[Callable[[], None]] = None,
        label: Optional[str] = None,
    ):
        self._events: Iterator[Tuple[str, Any]] = iter(events)
        self._closer = closer
        self._peeked: Optional[Token] = None
        self._exhausted = False
        self.label = label

    @classmethod
    def from_events(
        cls, events: Iterable[Tuple[str, Any]], label: Optional[str] = None
    ) -> "Cursor":
        """Cursor over pre-tokenized ijson-style events."""
        return cls(events, label=label)

    def __enter__(self) -> "Cursor":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        closer, self._closer = self._closer, None
        if closer is not None:
            closer()

    def _error(self, message: str) -> ParseError:
        return ParseError(message, source_label=self.label)

    def _pull(self) -> Optional[Token]:
        try:
            event, value = next(self._events)
        except StopIteration:
            return None
        except (JSONError, UnicodeDecodeError) as e:
            raise self._error(str(e)) from e
        try:
            return event_to_token(event, value)
        except ParseError as e:
            raise self._error(e.args[0]) from e

    def peek_token(self) -> Optional[Token]:
        """Next token without consuming it; None once the stream is exhausted."""
        if self._peeked is None and not self._exhausted:
            self._peeked = self._pull()
            if self._peeked is None:
                self._exhausted = True
        return self._peeked

    def next_token(self) -> Optional[Token]:
        token = self.peek_token()
        self._peeked = None
        return token

    def is_exhausted(self) -> bool:
        return self.peek_token() is None

    def skip_current_subtree(self) -> None:
        """Consume the value at the cursor without inspecting it.

        At a field name, the name and its value are consumed together.
        """
        token = self.next_token()
        if token is None:
            raise self._error("No value at cursor: stream exhausted")
        if token.kind is TokenKind.FIELD_NAME:
            self.skip_current_subtree()
            return
        if token.kind is TokenKind.SCALAR:
            return
        if token.kind.is_end:
            raise self._error(f"No value at cursor: found {token.kind.value}")

        depth = 1
        while depth:
            token = self.next_token()
            if token is None:
                raise self._error("Unexpected end of input inside a skipped value")
            if token.kind in (TokenKind.OBJECT_START, TokenKind.ARRAY_START):
                depth += 1
            elif token.kind.is_end:
                depth -= 1

    def read_current_value(self) -> Value:
        """Consume the value at the cursor and fold it into a Value.

        At a field name, the name is consumed and its value returned.
        """
        token = self.next_token()
        if token is not None and token.kind is TokenKind.FIELD_NAME:
            token = self.next_token()
        if token is None:
            raise self._error("No value at cursor: stream exhausted")
        if not token.kind.starts_value:
            raise self._error(f"No value at cursor: found {token.kind.value}")

        stack: List[_Builder] = []
        try:
            while True:
                kind = token.kind
                if kind is TokenKind.OBJECT_START or kind is TokenKind.ARRAY_START:
                    stack.append(_Builder(kind))
                elif kind is TokenKind.FIELD_NAME:
                    if not stack or stack[-1].kind is not TokenKind.OBJECT_START:
                        raise ParseError("Field name outside an object")
                    stack[-1].pending_name = token.name
                else:
                    if kind is TokenKind.SCALAR:
                        value = token.value
                    else:
                        value = stack.pop().build(kind)
                    if not stack:
                        return value
                    stack[-1].add(value)
                token = self.next_token()
                if token is None:
                    raise ParseError("Unexpected end of input inside a value")
        except ParseError as e:
            if e.source_label is None:
                raise self._error(e.args[0]) from e
            raise


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


def _binary_stream(source: Any) -> Tuple[Any, Optional[Callable[[], None]]]:
    if isinstance(source, str):
        return io.BytesIO(source.encode("utf-8")), None
    if isinstance(source, (bytes, bytearray)):
        return io.BytesIO(bytes(source)), None
    if isinstance(source, os.PathLike):
        f = open(source, "rb")
        return f, f.close
    if isinstance(source, io.TextIOBase):
        buffer = getattr(source, "buffer", None)
        if buffer is not None:
            return buffer, None
        return io.BytesIO(source.read().encode("utf-8")), None
    if hasattr(source, "read"):
        return source, None
    raise TypeError(f"Unsupported JSON source type: {type(source).__name__}")


def open_cursor(source: Any, label: Optional[str] = None) -> Cursor:
    """Open a token cursor over a JSON source.

    Args:
        source: JSON text (str), UTF-8 bytes, a path-like (opened and closed
                by the cursor), or a readable file object. An existing
                Cursor is returned as-is.
        label: Side of the comparison, used in error messages.
    """
    if isinstance(source, Cursor):
        if label and source.label is None:
            source.label = label
        return source
    stream, closer = _binary_stream(source)
    events = ijson.basic_parse(stream, use_float=False)
    return Cursor(events, closer=closer, label=label)
