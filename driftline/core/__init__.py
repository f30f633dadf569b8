"""Core types and logic for driftline."""

from .canon import canon, canonical_text, canonicalize, sha256_hex
from .compare import TreeAttempt, attempt_tree, compare, compare_streams
from .config import CompareConfig
from .errors import (
    DriftlineError,
    ParseError,
    ResourceExhaustedError,
    StreamDesyncWarning,
)
from .memory import FixedMemoryOracle, MemoryOracle, ProcessMemoryOracle
from .paths import PathStack, child_path, index_path
from .stream_diff import StreamSession, diff_stream
from .tokens import Cursor, Token, TokenKind, open_cursor
from .tree_diff import diff_tree
from .types import (
    JSON_NULL,
    CompareMode,
    Difference,
    DifferenceKind,
    JsonArray,
    JsonBool,
    JsonNull,
    JsonNumber,
    JsonObject,
    JsonString,
    Value,
    ValueKind,
    json_text,
)
from .values import deep_equal, estimate_depth, from_python, parse, to_python

__all__ = [
    # Value model
    "Value",
    "ValueKind",
    "JsonNull",
    "JsonBool",
    "JsonNumber",
    "JsonString",
    "JsonArray",
    "JsonObject",
    "JSON_NULL",
    "parse",
    "deep_equal",
    "from_python",
    "to_python",
    "estimate_depth",
    "json_text",
    # Differences
    "Difference",
    "DifferenceKind",
    # Paths
    "PathStack",
    "child_path",
    "index_path",
    # Canonicalization
    "canon",
    "canonical_text",
    "canonicalize",
    "sha256_hex",
    # Tokens
    "Cursor",
    "Token",
    "TokenKind",
    "open_cursor",
    # Differs
    "diff_tree",
    "diff_stream",
    "StreamSession",
    # Coordinator
    "CompareMode",
    "CompareConfig",
    "TreeAttempt",
    "attempt_tree",
    "compare",
    "compare_streams",
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
