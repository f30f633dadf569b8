"""driftline CLI.

Entry point for the ``driftline`` command-line tool.

Usage:
    driftline diff <old.json> <new.json> [--mode tree|stream|hybrid]
                   [--format json|text] [--no-array-sorting] [--id-field NAME]
                   [--depth-limit N] [--memory-threshold F] [--verbose]

Exit status: 0 when the documents match, 1 when differences were found,
2 when a document could not be read or compared.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List

from .core.compare import compare
from .core.config import CompareConfig
from .core.errors import DriftlineError
from .core.types import CompareMode, Difference, DifferenceKind, Value, json_text
from .diff import DiffSummary, summarize
from .version import DRIFTLINE_VERSION, REPORT_SCHEMA_VERSION

EXIT_SAME = 0
EXIT_DIFFERENT = 1
EXIT_ERROR = 2

# ---------------------------------------------------------------------------
# Text formatter
# ---------------------------------------------------------------------------


def _compact(value: Value) -> str:
    text = json_text(value)
    if len(text) > 40:
        text = text[:37] + "..."
    return text


def _compact_value(d: Difference) -> str:
    if d.kind is DifferenceKind.NODE_ADDED:
        return _compact(d.new)
    if d.kind is DifferenceKind.NODE_REMOVED:
        return _compact(d.old)
    return f"{_compact(d.old)} -> {_compact(d.new)}"


def _format_text(differences: List[Difference], summary: DiffSummary, limit: int) -> str:
    lines: List[str] = []
    if summary.same:
        lines.append("Documents are identical")
        return "\n".join(lines)

    lines.append(f"{summary.total} difference(s):")
    for d in differences[:limit]:
        lines.append(f"  {d.kind.value} {d.path or '(root)'}: {_compact_value(d)}")
    if len(differences) > limit:
        lines.append(f"  ... and {len(differences) - limit} more")
    lines.append("")

    counts = ", ".join(f"{kind}={count}" for kind, count in summary.counts.items() if count)
    lines.append(f"  Counts: {counts}")
    lines.append(f"  Fingerprint: {summary.fingerprint[:16]}...")
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# JSON formatter
# ---------------------------------------------------------------------------


def _difference_json(d: Difference) -> str:
    # Values are spliced in as exact JSON text; json.dumps would go through
    # float and recurse on deep values
    parts = [f'"path": {json.dumps(d.path, ensure_ascii=False)}', f'"kind": "{d.kind.value}"']
    if d.old is not None:
        parts.append(f'"old": {json_text(d.old)}')
    if d.new is not None:
        parts.append(f'"new": {json_text(d.new)}')
    return "{" + ", ".join(parts) + "}"


def _format_json(differences: List[Difference], summary: DiffSummary, mode: str) -> str:
    header = json.dumps(
        {
            "schema_version": REPORT_SCHEMA_VERSION,
            "driftline_version": DRIFTLINE_VERSION,
            "mode": mode,
            "summary": summary.to_dict(),
        },
        indent=2,
    )
    if differences:
        items = ",\n".join(f"    {_difference_json(d)}" for d in differences)
        listing = f"[\n{items}\n  ]"
    else:
        listing = "[]"
    # header ends with "\n}"; reopen it to append the differences
    return f'{header[:-2]},\n  "differences": {listing}\n}}'


# ---------------------------------------------------------------------------
# Subcommands
# ---------------------------------------------------------------------------


def _build_config(args: argparse.Namespace) -> CompareConfig:
    return CompareConfig(
        mode=CompareMode(args.mode),
        enable_array_sorting=not args.no_array_sorting,
        identifying_field=args.id_field,
        depth_limit=args.depth_limit,
        memory_threshold_fraction=args.memory_threshold,
    )


def _cmd_diff(args: argparse.Namespace) -> int:
    for label, path in (("old", args.old), ("new", args.new)):
        if not path.is_file():
            print(f"Error: {label} document '{path}' not found", file=sys.stderr)
            return EXIT_ERROR

    try:
        config = _build_config(args)
        differences = compare(args.old, args.new, config=config)
        summary = summarize(differences)
        if args.format == "json":
            report = _format_json(differences, summary, config.mode.value)
        else:
            report = _format_text(differences, summary, args.limit)
    except (DriftlineError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR

    print(report)
    return EXIT_SAME if summary.same else EXIT_DIFFERENT


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="driftline",
        description="driftline: structural diffing for JSON documents of any size",
    )
    parser.add_argument(
        "--version", action="version", version=f"driftline {DRIFTLINE_VERSION}"
    )
    subparsers = parser.add_subparsers(dest="command")

    diff_parser = subparsers.add_parser("diff", help="Compare two JSON documents")
    diff_parser.add_argument("old", type=Path, help="Path to the old document")
    diff_parser.add_argument("new", type=Path, help="Path to the new document")
    diff_parser.add_argument(
        "--mode",
        choices=[m.value for m in CompareMode],
        default=CompareMode.HYBRID.value,
        help="Comparison strategy (default: hybrid)",
    )
    diff_parser.add_argument(
        "--format",
        choices=["json", "text"],
        default="text",
        help="Output format (default: text)",
    )
    diff_parser.add_argument(
        "--no-array-sorting",
        action="store_true",
        help="Treat array order as significant",
    )
    diff_parser.add_argument(
        "--id-field",
        default="id",
        help="Field used to order arrays of objects (default: id)",
    )
    diff_parser.add_argument(
        "--depth-limit",
        type=int,
        default=None,
        help="Stream mode: do not descend deeper than N levels",
    )
    diff_parser.add_argument(
        "--memory-threshold",
        type=float,
        default=0.75,
        help="Tree mode: summarize subtrees above this memory fraction (default: 0.75)",
    )
    diff_parser.add_argument(
        "--limit", type=int, default=50, help="Text format: differences to list (default: 50)"
    )
    diff_parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log debug output to stderr"
    )
    diff_parser.set_defaults(func=_cmd_diff)

    args = parser.parse_args(argv)
    if not hasattr(args, "func"):
        parser.print_help()
        return EXIT_ERROR

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
