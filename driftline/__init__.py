from .core import (
    # Coordinator
    CompareConfig,
    CompareMode,
    # Differences
    Difference,
    DifferenceKind,
    # Errors
    DriftlineError,
    # Memory
    FixedMemoryOracle,
    MemoryOracle,
    ParseError,
    ProcessMemoryOracle,
    ResourceExhaustedError,
    StreamDesyncWarning,
    # Value model
    Value,
    ValueKind,
    # Canonicalization
    canonicalize,
    compare,
    deep_equal,
    # Differs
    diff_stream,
    diff_tree,
    open_cursor,
    parse,
)
from .diff import DiffSummary, summarize
from .version import DRIFTLINE_VERSION, REPORT_SCHEMA_VERSION

__all__ = [
    # Version
    "DRIFTLINE_VERSION",
    "REPORT_SCHEMA_VERSION",
    # Entry point
    "compare",
    "CompareConfig",
    "CompareMode",
    # Differences
    "Difference",
    "DifferenceKind",
    "DiffSummary",
    "summarize",
    # Value model
    "Value",
    "ValueKind",
    "parse",
    "deep_equal",
    # Canonicalization
    "canonicalize",
    # Differs
    "diff_tree",
    "diff_stream",
    "open_cursor",
    # Memory
    "MemoryOracle",
    "ProcessMemoryOracle",
    "FixedMemoryOracle",
    # Errors
    "DriftlineError",
    "ParseError",
    "ResourceExhaustedError",
    "StreamDesyncWarning",
]
