"""Tests for the lockstep stream differ.

Well-formed documents go through open_cursor; desync and misalignment
cases use hand-built event streams, since a real parser never produces
them from valid JSON.
"""

from __future__ import annotations

import unittest

from driftline.core.errors import ParseError, StreamDesyncWarning
from driftline.core.stream_diff import diff_stream
from driftline.core.tokens import Cursor, open_cursor
from driftline.core.types import DifferenceKind
from driftline.core.values import to_python


def _diff(old: str, new: str, depth_limit=None):
    return diff_stream(open_cursor(old), open_cursor(new), depth_limit=depth_limit)


def _summary(diffs):
    return [(d.path, d.kind) for d in diffs]


# ============================================================================
# Lockstep comparison
# ============================================================================


class TestLockstep(unittest.TestCase):
    def test_value_changed(self):
        diffs = _diff('{"a": 1}', '{"a": 2}')
        self.assertEqual(_summary(diffs), [("a", DifferenceKind.VALUE_CHANGED)])
        self.assertEqual(to_python(diffs[0].old), 1)
        self.assertEqual(to_python(diffs[0].new), 2)

    def test_trailing_field_added(self):
        diffs = _diff('{"a": 1}', '{"a": 1, "b": 2}')
        self.assertEqual(_summary(diffs), [("b", DifferenceKind.NODE_ADDED)])
        self.assertEqual(to_python(diffs[0].new), 2)

    def test_trailing_field_removed(self):
        diffs = _diff('{"a": 1, "b": {"c": [1]}}', '{"a": 1}')
        self.assertEqual(_summary(diffs), [("b", DifferenceKind.NODE_REMOVED)])
        self.assertEqual(to_python(diffs[0].old), {"c": [1]})

    def test_type_mismatch(self):
        diffs = _diff('{"a": [1, 2, 3]}', '{"a": "x"}')
        self.assertEqual(_summary(diffs), [("a", DifferenceKind.TYPE_MISMATCH)])
        self.assertEqual(to_python(diffs[0].old), [1, 2, 3])

    def test_mismatch_then_continue(self):
        diffs = _diff('{"a": {"x": 1}, "b": 1}', '{"a": [1], "b": 2}')
        self.assertEqual(
            _summary(diffs),
            [("a", DifferenceKind.TYPE_MISMATCH), ("b", DifferenceKind.VALUE_CHANGED)],
        )

    def test_scalar_kinds_are_value_changes(self):
        diffs = _diff('[1, null, "1"]', '["1", false, 1]')
        self.assertEqual([d.kind for d in diffs], [DifferenceKind.VALUE_CHANGED] * 3)
        self.assertEqual([d.path for d in diffs], ["[0]", "[1]", "[2]"])

    def test_equal_documents(self):
        doc = '{"a": [1, {"b": null}], "c": {"d": "e"}}'
        self.assertEqual(_diff(doc, doc), [])
        self.assertEqual(_diff("[1.0]", "[1]"), [])

    def test_nested_paths(self):
        diffs = _diff('{"items": [{"id": 1}, {"id": 2}]}', '{"items": [{"id": 1}, {"id": 3}]}')
        self.assertEqual(_summary(diffs), [("items[1].id", DifferenceKind.VALUE_CHANGED)])

    def test_trailing_elements(self):
        self.assertEqual(
            _summary(_diff("[1]", "[1, 2, 3]")),
            [("[1]", DifferenceKind.NODE_ADDED), ("[2]", DifferenceKind.NODE_ADDED)],
        )
        self.assertEqual(
            _summary(_diff('{"a": [[1], [2]]}', '{"a": [[1]]}')),
            [("a[1]", DifferenceKind.NODE_REMOVED)],
        )

    def test_different_field_names(self):
        diffs = _diff('{"a": 1, "z": 0}', '{"b": 1, "z": 0}')
        self.assertEqual(
            _summary(diffs),
            [("a", DifferenceKind.NODE_REMOVED), ("b", DifferenceKind.NODE_ADDED)],
        )

    def test_reordered_fields_reported_as_pairs(self):
        diffs = _diff('{"a": 1, "b": 2}', '{"b": 2, "a": 1}')
        self.assertEqual(
            _summary(diffs),
            [
                ("a", DifferenceKind.NODE_REMOVED),
                ("b", DifferenceKind.NODE_ADDED),
                ("b", DifferenceKind.NODE_REMOVED),
                ("a", DifferenceKind.NODE_ADDED),
            ],
        )

    def test_array_order_is_significant(self):
        old = '{"list": [{"id": 2}, {"id": 1}]}'
        new = '{"list": [{"id": 1}, {"id": 2}]}'
        self.assertEqual(len(_diff(old, new)), 2)


class TestDepthLimit(unittest.TestCase):
    def test_zero_skips_everything_below_root(self):
        old = '{"a": {"b": [1, 2]}, "c": 1}'
        new = '{"a": {"b": [3]}, "d": [true]}'
        self.assertEqual(_diff(old, new, depth_limit=0), [])

    def test_zero_still_compares_root_kinds(self):
        diffs = _diff('{"a": 1}', "[1]", depth_limit=0)
        self.assertEqual(_summary(diffs), [("", DifferenceKind.TYPE_MISMATCH)])

    def test_one_compares_top_level_scalars_only(self):
        old = '{"a": 1, "b": {"c": 1}, "d": [1]}'
        new = '{"a": 2, "b": {"c": 2}, "d": [2, 3]}'
        diffs = _diff(old, new, depth_limit=1)
        self.assertEqual(_summary(diffs), [("a", DifferenceKind.VALUE_CHANGED)])

    def test_unbounded_by_default(self):
        diffs = _diff('{"a": {"b": {"c": 1}}}', '{"a": {"b": {"c": 2}}}')
        self.assertEqual(diffs[0].path, "a.b.c")


# ============================================================================
# Desync and misalignment
# ============================================================================


class TestDesync(unittest.TestCase):
    def test_extra_root_value(self):
        old = Cursor.from_events([("number", 1)])
        new = Cursor.from_events([("number", 1), ("number", 2)])
        with self.assertWarns(StreamDesyncWarning):
            with self.assertLogs("driftline.core.stream_diff", level="WARNING"):
                diffs = diff_stream(old, new)
        self.assertEqual(_summary(diffs), [("", DifferenceKind.NODE_ADDED)])
        self.assertEqual(to_python(diffs[0].new), 2)

    def test_old_stream_truncated_mid_object(self):
        old = Cursor.from_events([("start_map", None), ("map_key", "a"), ("number", 1)])
        new = Cursor.from_events(
            [
                ("start_map", None),
                ("map_key", "a"),
                ("number", 1),
                ("map_key", "b"),
                ("number", 2),
                ("end_map", None),
            ]
        )
        with self.assertWarns(StreamDesyncWarning):
            diffs = diff_stream(old, new)
        self.assertEqual(_summary(diffs), [("b", DifferenceKind.NODE_ADDED)])

    def test_new_stream_truncated_reports_removed(self):
        old = Cursor.from_events(
            [("start_array", None), ("number", 1), ("string", "x"), ("end_array", None)]
        )
        new = Cursor.from_events([("start_array", None), ("number", 1)])
        with self.assertWarns(StreamDesyncWarning):
            diffs = diff_stream(old, new)
        self.assertEqual(_summary(diffs), [("[1]", DifferenceKind.NODE_REMOVED)])


class TestMisalignment(unittest.TestCase):
    def test_end_without_start(self):
        old = Cursor.from_events([("end_map", None)])
        new = Cursor.from_events([("end_map", None)])
        with self.assertRaises(ParseError):
            diff_stream(old, new)

    def test_field_against_array_end(self):
        old = Cursor.from_events([("start_map", None), ("map_key", "a"), ("number", 1), ("end_map", None)])
        new = Cursor.from_events([("start_map", None), ("end_array", None)])
        with self.assertRaises(ParseError):
            diff_stream(old, new)

    def test_malformed_json(self):
        with self.assertRaises(ParseError):
            _diff('{"a": 1}', '{"a": ')


if __name__ == "__main__":
    unittest.main()
