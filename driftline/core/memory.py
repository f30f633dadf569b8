"""Memory usage oracles consulted by the tree differ.

An oracle reports the current memory occupancy of the process as a
fraction of its memory ceiling. Oracles hold no mutable state and are safe
to query from concurrent comparisons.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

import psutil


class MemoryOracle(Protocol):
    def current_usage_fraction(self) -> float:
        """Current memory usage as a fraction (0.0-1.0) of the ceiling."""
        ...


@dataclass(frozen=True)
class ProcessMemoryOracle:
    """
    Reads the resident set size of the current process.

    The ceiling is ``ceiling_bytes`` when given, else total physical memory.
    Reports 0.0 when either can't be determined.
    """

    ceiling_bytes: Optional[int] = None

    def ceiling(self) -> Optional[int]:
        if self.ceiling_bytes:
            return self.ceiling_bytes
        try:
            return psutil.virtual_memory().total
        except (psutil.Error, OSError):
            return None

    def current_usage_fraction(self) -> float:
        ceiling = self.ceiling()
        try:
            used = psutil.Process().memory_info().rss
        except (psutil.Error, OSError):
            return 0.0
        if not ceiling:
            return 0.0
        return min(1.0, used / ceiling)


@dataclass(frozen=True)
class FixedMemoryOracle:
    """Always reports the same fraction. Used to force or suppress degradation."""

    fraction: float = 0.0

    def current_usage_fraction(self) -> float:
        return self.fraction
