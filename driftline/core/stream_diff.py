"""Lockstep comparison of two live token streams.

Both cursors advance one position at a time. Nothing is materialized
except scalars, the two sides of a type mismatch, and nodes present on
one side only, so memory stays bounded by nesting depth rather than
document size.

Position handling:
- value vs value of different kinds (object/array/scalar): one type
  mismatch, both subtrees consumed
- scalar vs scalar: value change iff not equal
- same container start: enter both (or skip both unseen past depth_limit)
- same field name: descend into the field on both sides
- different field names: old field removed, new field added; no re-alignment
- field name vs object end: trailing field present on one side only
- element vs array end: trailing element present on one side only
- one cursor exhausted: remaining top-level nodes of the other are
  reported as added/removed and a StreamDesyncWarning is issued

Field-order divergence inside one object is reported as removed/added
pairs. Re-aligning would require indexing every field of the object,
which gives up the bounded-memory guarantee.
"""

from __future__ import annotations

import logging
import warnings
from typing import List, Optional

from .errors import ParseError, StreamDesyncWarning
from .paths import PathStack
from .tokens import Cursor, Token, TokenKind
from .types import Difference, DifferenceKind
from .values import deep_equal

logger = logging.getLogger(__name__)


class StreamSession:
    """
    State of one streaming comparison.

    Owns both cursors' traversal, the shared path stack and the collected
    differences. Created per call and discarded afterwards.
    """

    def __init__(
        self,
        old_cursor: Cursor,
        new_cursor: Cursor,
        depth_limit: Optional[int] = None,
    ):
        self.old = old_cursor
        self.new = new_cursor
        self.depth_limit = depth_limit
        self.path = PathStack()
        self.differences: List[Difference] = []
        self.desynced = False

    def run(self) -> List[Difference]:
        while True:
            old_tok = self.old.peek_token()
            new_tok = self.new.peek_token()
            if old_tok is None and new_tok is None:
                return self.differences
            if old_tok is None:
                self._drain(self.new, DifferenceKind.NODE_ADDED)
            elif new_tok is None:
                self._drain(self.old, DifferenceKind.NODE_REMOVED)
            else:
                self._step(old_tok, new_tok)

    # ------------------------------------------------------------------
    # Emission helpers
    # ------------------------------------------------------------------

    def _emit(self, path: str, kind: DifferenceKind, old=None, new=None) -> None:
        self.differences.append(Difference(path, kind, old, new))

    def _emit_one_side(self, cursor: Cursor, kind: DifferenceKind, path: str) -> None:
        value = cursor.read_current_value()
        if kind is DifferenceKind.NODE_ADDED:
            self._emit(path, kind, new=value)
        else:
            self._emit(path, kind, old=value)

    # ------------------------------------------------------------------
    # Lockstep
    # ------------------------------------------------------------------

    def _step(self, old_tok: Token, new_tok: Token) -> None:
        ok, nk = old_tok.kind, new_tok.kind

        if ok.starts_value and nk.starts_value:
            self._compare_values(ok, nk)
            return

        if ok is TokenKind.FIELD_NAME and nk is TokenKind.FIELD_NAME:
            if old_tok.name == new_tok.name:
                self.old.next_token()
                self.new.next_token()
                self.path.push_field(old_tok.name)
            else:
                self._emit_one_side(
                    self.old, DifferenceKind.NODE_REMOVED, self.path.render_field(old_tok.name)
                )
                self._emit_one_side(
                    self.new, DifferenceKind.NODE_ADDED, self.path.render_field(new_tok.name)
                )
            return

        if ok.is_end and ok is nk:
            self.old.next_token()
            self.new.next_token()
            self._close_container()
            return

        # Trailing field or element on one side only
        if self.path.in_object():
            if ok is TokenKind.FIELD_NAME and nk is TokenKind.OBJECT_END:
                path = self.path.render_field(old_tok.name)
                self._emit_one_side(self.old, DifferenceKind.NODE_REMOVED, path)
                return
            if nk is TokenKind.FIELD_NAME and ok is TokenKind.OBJECT_END:
                path = self.path.render_field(new_tok.name)
                self._emit_one_side(self.new, DifferenceKind.NODE_ADDED, path)
                return
        elif self.path.in_array():
            if ok.starts_value and nk is TokenKind.ARRAY_END:
                self._emit_one_side(self.old, DifferenceKind.NODE_REMOVED, self.path.render())
                self.path.value_done()
                return
            if nk.starts_value and ok is TokenKind.ARRAY_END:
                self._emit_one_side(self.new, DifferenceKind.NODE_ADDED, self.path.render())
                self.path.value_done()
                return

        raise ParseError(
            f"Token streams cannot be aligned at {self.path.render() or '(root)'!r}: "
            f"{ok.value} vs {nk.value}"
        )

    def _compare_values(self, ok: TokenKind, nk: TokenKind) -> None:
        if ok is not nk:
            old_value = self.old.read_current_value()
            new_value = self.new.read_current_value()
            self._emit(self.path.render(), DifferenceKind.TYPE_MISMATCH, old_value, new_value)
            self.path.value_done()
            return

        if ok is TokenKind.SCALAR:
            old_value = self.old.next_token().value
            new_value = self.new.next_token().value
            if not deep_equal(old_value, new_value):
                self._emit(self.path.render(), DifferenceKind.VALUE_CHANGED, old_value, new_value)
            self.path.value_done()
            return

        if self.depth_limit is not None and self.path.depth + 1 > self.depth_limit:
            self.old.skip_current_subtree()
            self.new.skip_current_subtree()
            self.path.value_done()
            return

        self.old.next_token()
        self.new.next_token()
        if ok is TokenKind.OBJECT_START:
            self.path.push_object()
        else:
            self.path.push_array()

    def _close_container(self) -> None:
        try:
            self.path.pop_container()
        except IndexError:
            raise ParseError("Container end without a matching start") from None
        self.path.value_done()

    # ------------------------------------------------------------------
    # Desync
    # ------------------------------------------------------------------

    def _drain(self, live: Cursor, kind: DifferenceKind) -> None:
        """Consume one node from the cursor that outlived the other."""
        if not self.desynced:
            self.desynced = True
            ended, live_side = ("old", "new") if kind is DifferenceKind.NODE_ADDED else ("new", "old")
            message = (
                f"{ended} stream ended at {self.path.render() or '(root)'!r} while "
                f"{live_side} stream has remaining tokens; reporting the remainder "
                f"as {kind.value}"
            )
            logger.warning(message)
            warnings.warn(message, StreamDesyncWarning, stacklevel=4)

        token = live.peek_token()
        if token.kind.starts_value:
            self._emit_one_side(live, kind, self.path.render())
            self.path.value_done()
        elif token.kind is TokenKind.FIELD_NAME:
            self._emit_one_side(live, kind, self.path.render_field(token.name))
        else:
            live.next_token()
            self._close_container()


def diff_stream(
    old_cursor: Cursor,
    new_cursor: Cursor,
    depth_limit: Optional[int] = None,
) -> List[Difference]:
    """Compare two token cursors in lockstep.

    Args:
        old_cursor: Cursor over the old document.
        new_cursor: Cursor over the new document.
        depth_limit: Maximum nesting depth to descend into. Containers whose
            children would lie deeper are skipped on both sides without being
            inspected. None means unbounded.

    Returns:
        List of Difference in traversal order.

    Raises:
        ParseError: If either token stream is malformed.
    """
    return StreamSession(old_cursor, new_cursor, depth_limit).run()
