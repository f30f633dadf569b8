"""Error taxonomy for driftline comparisons."""

from __future__ import annotations

from typing import Optional


class DriftlineError(Exception):
    """Base exception for comparison errors."""

    pass


class ParseError(DriftlineError):
    """
    Raised when a JSON source is malformed.

    Not recoverable: the whole comparison is aborted. ``source_label`` names
    the side ("old" or "new") when the coordinator knows it.
    """

    def __init__(self, message: str, source_label: Optional[str] = None):
        super().__init__(message)
        self.source_label = source_label

    def __str__(self) -> str:
        if self.source_label:
            return f"ParseError({self.source_label}): {self.args[0]}"
        return f"ParseError: {self.args[0]}"


class ResourceExhaustedError(DriftlineError):
    """
    Raised when Tree work breaches the memory ceiling or recursion limit.

    Recovered only in hybrid mode, by restarting the comparison in stream
    mode. ``stage`` is "parse" or "diff".
    """

    def __init__(self, message: str, stage: str = "parse"):
        super().__init__(message)
        self.stage = stage

    def __str__(self) -> str:
        return f"ResourceExhaustedError during {self.stage}: {self.args[0]}"


class StreamDesyncWarning(UserWarning):
    """
    Lockstep traversal could not keep both cursors aligned.

    Differences reported after this warning are best-effort additions and
    removals for the remainder of the live cursor.
    """

    pass
