"""
Mode coordinator: the single public comparison entry point.

TREE parses both documents fully and walks them recursively.
STREAM opens two token cursors and walks them in lockstep.
HYBRID attempts TREE and, if the attempt runs out of memory or recursion
depth, discards everything it built and cold-restarts in STREAM mode.

The TREE attempt reports exhaustion as a value (TreeAttempt) rather than
an exception, so the fallback is ordinary control flow here.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Callable, List, Optional

from .config import CompareConfig
from .errors import ParseError, ResourceExhaustedError
from .memory import MemoryOracle, ProcessMemoryOracle
from .stream_diff import diff_stream
from .tokens import Cursor, open_cursor
from .tree_diff import diff_tree
from .types import CompareMode, Difference, Value
from .values import estimate_depth, parse

logger = logging.getLogger(__name__)

CursorFactory = Callable[[Any], Cursor]

_REUSABLE = object()


@dataclass(frozen=True)
class TreeAttempt:
    """
    Outcome of a tree-mode comparison.

    Exactly one of ``differences`` and ``exhausted`` is set.
    """

    differences: Optional[List[Difference]] = None
    exhausted: Optional[ResourceExhaustedError] = None

    @property
    def ok(self) -> bool:
        return self.exhausted is None


# ---------------------------------------------------------------------------
# Tree
# ---------------------------------------------------------------------------


def _materialize(source: Any, label: str) -> Value:
    try:
        if isinstance(source, Cursor):
            return source.read_current_value()
        return parse(source)
    except ParseError as e:
        if e.source_label is None:
            e.source_label = label
        raise


def attempt_tree(
    old_source: Any,
    new_source: Any,
    config: CompareConfig,
    oracle: MemoryOracle,
) -> TreeAttempt:
    """Run a tree-mode comparison, reporting resource exhaustion as a value.

    Raises:
        ParseError: If either source is not valid JSON.
    """
    stage = "parse"
    try:
        old = _materialize(old_source, "old")
        new = _materialize(new_source, "new")

        depth = estimate_depth(old, new)
        if depth > config.depth_warning_threshold:
            logger.warning(
                "Documents nest %d levels deep; stream mode is better suited", depth
            )

        stage = "diff"
        return TreeAttempt(differences=diff_tree(old, new, config=config, oracle=oracle))
    except (MemoryError, RecursionError) as e:
        # Only the message is kept: the traceback would pin the partial trees
        return TreeAttempt(
            exhausted=ResourceExhaustedError(f"{type(e).__name__}: {e}", stage=stage)
        )


# ---------------------------------------------------------------------------
# Stream
# ---------------------------------------------------------------------------


def _open(source: Any, label: str, cursor_factory: CursorFactory) -> Cursor:
    cursor = cursor_factory(source)
    if cursor.label is None:
        cursor.label = label
    return cursor


def compare_streams(
    old_source: Any,
    new_source: Any,
    config: CompareConfig,
    cursor_factory: CursorFactory = open_cursor,
) -> List[Difference]:
    """Run a stream-mode comparison; cursors opened here are closed here."""
    old_cursor = _open(old_source, "old", cursor_factory)
    try:
        new_cursor = _open(new_source, "new", cursor_factory)
        try:
            return diff_stream(old_cursor, new_cursor, config.depth_limit)
        finally:
            if new_cursor is not new_source:
                new_cursor.close()
    finally:
        if old_cursor is not old_source:
            old_cursor.close()


# ---------------------------------------------------------------------------
# Hybrid source handling
# ---------------------------------------------------------------------------


def _mark(source: Any) -> Any:
    """Remember where a source starts so it can be read a second time."""
    if isinstance(source, (str, bytes, bytearray, os.PathLike)):
        return _REUSABLE
    seekable = getattr(source, "seekable", None)
    if seekable is not None and seekable():
        return source.tell()
    return None


def _rewind(source: Any, mark: Any, stage: str) -> None:
    if mark is _REUSABLE:
        return
    if mark is None:
        raise ResourceExhaustedError(
            "Tree comparison ran out of resources and the source cannot be "
            "re-read for a stream-mode retry",
            stage=stage,
        )
    source.seek(mark)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def _resolve_mode(mode: Any, config: CompareConfig) -> CompareMode:
    if mode is None:
        return config.mode
    if isinstance(mode, CompareMode):
        return mode
    return CompareMode(str(mode).lower())


def compare(
    old_source: Any,
    new_source: Any,
    mode: Any = None,
    *,
    config: Optional[CompareConfig] = None,
    oracle: Optional[MemoryOracle] = None,
    cursor_factory: Optional[CursorFactory] = None,
) -> List[Difference]:
    """Compare two JSON documents.

    Args:
        old_source: Old document: JSON text, bytes, a path-like, a readable
                    file object, or (stream/hybrid) a Cursor.
        new_source: New document, same forms as old_source.
        mode: CompareMode or its value ("tree", "stream", "hybrid");
              overrides config.mode when given.
        config: Comparison options. Defaults to CompareConfig.default().
        oracle: Memory usage oracle for tree mode. Defaults to process RSS.
        cursor_factory: Opens a Cursor for a source. Defaults to open_cursor.

    Returns:
        Ordered list of Difference; empty when the documents are equal.

    Raises:
        ParseError: If either source is not valid JSON.
        ResourceExhaustedError: Tree mode ran out of memory or recursion
            depth (or hybrid mode could not re-read a source to retry).
    """
    config = config or CompareConfig.default()
    resolved = _resolve_mode(mode, config)
    oracle = oracle or ProcessMemoryOracle()
    cursor_factory = cursor_factory or open_cursor
    logger.debug("Comparing documents in %s mode", resolved.value)

    if resolved is CompareMode.STREAM:
        return compare_streams(old_source, new_source, config, cursor_factory)

    if resolved is CompareMode.TREE:
        attempt = attempt_tree(old_source, new_source, config, oracle)
        if not attempt.ok:
            raise attempt.exhausted
        return attempt.differences

    if isinstance(old_source, Cursor) or isinstance(new_source, Cursor):
        logger.debug("Cursor sources can only be read once; using stream mode")
        return compare_streams(old_source, new_source, config, cursor_factory)

    old_mark = _mark(old_source)
    new_mark = _mark(new_source)
    attempt = attempt_tree(old_source, new_source, config, oracle)
    if attempt.ok:
        return attempt.differences

    stage = attempt.exhausted.stage
    logger.warning("%s; restarting in stream mode", attempt.exhausted)
    del attempt
    _rewind(old_source, old_mark, stage)
    _rewind(new_source, new_mark, stage)
    return compare_streams(old_source, new_source, config, cursor_factory)
