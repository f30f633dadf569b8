from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .canon import DEFAULT_IDENTIFYING_FIELD
from .types import CompareMode


@dataclass(frozen=True)
class CompareConfig:
    """
    Configuration for one comparison.

    Passed explicitly into every call; there is no process-wide state.

    Attributes:
        mode: Comparison strategy (TREE, STREAM, HYBRID).
        enable_array_sorting: Canonicalize arrays of objects before
            index-wise comparison (tree mode).
        identifying_field: Field used to order arrays of records.
        depth_limit: Stream mode only. Containers whose children would lie
            deeper than this are skipped unseen. None means unbounded.
        memory_threshold_fraction: Tree mode stops recursing and summarizes
            the remaining subtree once memory usage exceeds this fraction.
        memory_check_interval: Query the memory oracle every N levels of
            recursion depth. None disables the check.
        depth_warning_threshold: Tree mode logs a hint to use stream mode
            when either document nests deeper than this.
    """

    mode: CompareMode = CompareMode.HYBRID
    enable_array_sorting: bool = True
    identifying_field: str = DEFAULT_IDENTIFYING_FIELD
    depth_limit: Optional[int] = None
    memory_threshold_fraction: float = 0.75
    memory_check_interval: Optional[int] = 10
    depth_warning_threshold: int = 50

    def __post_init__(self) -> None:
        if not isinstance(self.mode, CompareMode):
            object.__setattr__(self, "mode", CompareMode(self.mode))
        if not 0.0 <= self.memory_threshold_fraction <= 1.0:
            raise ValueError(
                f"memory_threshold_fraction must be within 0.0-1.0, "
                f"got {self.memory_threshold_fraction}"
            )
        if self.depth_limit is not None and self.depth_limit < 0:
            raise ValueError(f"depth_limit must be >= 0, got {self.depth_limit}")
        if self.memory_check_interval is not None and self.memory_check_interval < 1:
            raise ValueError(
                f"memory_check_interval must be >= 1, got {self.memory_check_interval}"
            )
        if not self.identifying_field:
            raise ValueError("identifying_field must be a non-empty string")

    @classmethod
    def default(cls) -> "CompareConfig":
        """Hybrid mode with array sorting on the "id" field."""
        return cls()

    @classmethod
    def ordered(cls) -> "CompareConfig":
        """Array order is significant: no canonicalization."""
        return cls(enable_array_sorting=False)

    @classmethod
    def streaming(cls, depth_limit: Optional[int] = None) -> "CompareConfig":
        """Stream mode, optionally depth-limited."""
        return cls(mode=CompareMode.STREAM, depth_limit=depth_limit)
