"""Recursive comparison of two fully materialized documents.

Ordering guarantees:
- object: old's fields in old's order (removed or recursed), then
  new-only fields in new's order (added)
- array: by index; common indices recursed, then tail removes or tail adds
- Arrays whose elements are all objects are canonicalized first when
  sorting is enabled; their paths refer to canonical positions
- Scalar vs scalar of any type: value change
- Structural kind mismatch: one type mismatch for the whole subtree

Under memory pressure (checked every ``memory_check_interval`` levels) the
remaining subtree is summarized as a single value change instead of being
walked. The summary is lossy; stream mode keeps full granularity.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from .canon import canonicalize
from .config import CompareConfig
from .memory import MemoryOracle, ProcessMemoryOracle
from .paths import child_path, index_path
from .types import Difference, DifferenceKind, JsonArray, JsonObject, Value, ValueKind
from .values import deep_equal

logger = logging.getLogger(__name__)


def diff_tree(
    old: Value,
    new: Value,
    path: str = "",
    depth: int = 0,
    *,
    config: Optional[CompareConfig] = None,
    oracle: Optional[MemoryOracle] = None,
) -> List[Difference]:
    """Produce the ordered differences between two values.

    Args:
        old: Value from the old document.
        new: Value from the new document.
        path: Path of this pair within the documents ("" at the root).
        depth: Recursion depth of this pair (0 at the root).
        config: Comparison options (array sorting, memory threshold).
        oracle: Memory usage oracle; defaults to the process RSS.

    Returns:
        List of Difference, empty if the values are structurally equal.
    """
    config = config or CompareConfig.default()
    oracle = oracle or ProcessMemoryOracle()
    return _diff(old, new, path, depth, config, oracle)


def _memory_exceeded(depth: int, config: CompareConfig, oracle: MemoryOracle) -> bool:
    interval = config.memory_check_interval
    if interval is None or depth % interval:
        return False
    return oracle.current_usage_fraction() > config.memory_threshold_fraction


def _diff(
    old: Value,
    new: Value,
    path: str,
    depth: int,
    config: CompareConfig,
    oracle: MemoryOracle,
) -> List[Difference]:
    if _memory_exceeded(depth, config, oracle):
        logger.warning(
            "Memory usage above %.0f%% at depth %d; summarizing subtree at %r",
            config.memory_threshold_fraction * 100,
            depth,
            path or "(root)",
        )
        if deep_equal(old, new):
            return []
        return [Difference(path, DifferenceKind.VALUE_CHANGED, old, new)]

    if not old.is_container and not new.is_container:
        if deep_equal(old, new):
            return []
        return [Difference(path, DifferenceKind.VALUE_CHANGED, old, new)]

    if old.kind is not new.kind:
        return [Difference(path, DifferenceKind.TYPE_MISMATCH, old, new)]

    if old.kind is ValueKind.OBJECT:
        return _diff_objects(old, new, path, depth, config, oracle)
    if old.kind is ValueKind.ARRAY:
        return _diff_arrays(old, new, path, depth, config, oracle)
    raise TypeError(f"Unhandled value kind: {old.kind}")


def _diff_objects(
    old: JsonObject,
    new: JsonObject,
    path: str,
    depth: int,
    config: CompareConfig,
    oracle: MemoryOracle,
) -> List[Difference]:
    diffs: List[Difference] = []
    new_fields = new.as_dict()
    old_names = set()

    for name, old_child in old.fields:
        old_names.add(name)
        field_path = child_path(path, name)
        new_child = new_fields.get(name)
        if new_child is None:
            diffs.append(Difference(field_path, DifferenceKind.NODE_REMOVED, old=old_child))
        else:
            diffs.extend(_diff(old_child, new_child, field_path, depth + 1, config, oracle))

    for name, new_child in new.fields:
        if name not in old_names:
            diffs.append(
                Difference(child_path(path, name), DifferenceKind.NODE_ADDED, new=new_child)
            )
    return diffs


def _all_objects(array: JsonArray) -> bool:
    return all(item.kind is ValueKind.OBJECT for item in array.items)


def _diff_arrays(
    old: JsonArray,
    new: JsonArray,
    path: str,
    depth: int,
    config: CompareConfig,
    oracle: MemoryOracle,
) -> List[Difference]:
    if (
        config.enable_array_sorting
        and old.items
        and new.items
        and _all_objects(old)
        and _all_objects(new)
    ):
        old = canonicalize(old, config.identifying_field)
        new = canonicalize(new, config.identifying_field)

    diffs: List[Difference] = []
    min_len = min(len(old.items), len(new.items))
    for i in range(min_len):
        diffs.extend(
            _diff(old.items[i], new.items[i], index_path(path, i), depth + 1, config, oracle)
        )
    for i in range(min_len, len(old.items)):
        diffs.append(Difference(index_path(path, i), DifferenceKind.NODE_REMOVED, old=old.items[i]))
    for i in range(min_len, len(new.items)):
        diffs.append(Difference(index_path(path, i), DifferenceKind.NODE_ADDED, new=new.items[i]))
    return diffs
