from __future__ import annotations

import io
import os
import tempfile
import unittest
from decimal import Decimal
from pathlib import Path

from driftline.core.errors import ParseError
from driftline.core.tokens import Cursor, TokenKind, event_to_token, open_cursor
from driftline.core.types import JsonNumber, JsonString
from driftline.core.values import to_python


class TestEventToToken(unittest.TestCase):
    def test_structural(self):
        self.assertEqual(event_to_token("start_map", None).kind, TokenKind.OBJECT_START)
        self.assertEqual(event_to_token("end_array", None).kind, TokenKind.ARRAY_END)

    def test_field_name(self):
        token = event_to_token("map_key", "user")
        self.assertEqual(token.kind, TokenKind.FIELD_NAME)
        self.assertEqual(token.name, "user")

    def test_numbers_become_decimal(self):
        self.assertEqual(event_to_token("number", 3).value, JsonNumber(Decimal(3)))
        self.assertEqual(event_to_token("number", Decimal("2.5")).value, JsonNumber(Decimal("2.5")))

    def test_unknown_event(self):
        with self.assertRaises(ParseError):
            event_to_token("comment", "x")


class TestCursor(unittest.TestCase):
    def test_peek_does_not_consume(self):
        cursor = open_cursor('{"a": 1}')
        self.assertEqual(cursor.peek_token().kind, TokenKind.OBJECT_START)
        self.assertEqual(cursor.peek_token().kind, TokenKind.OBJECT_START)
        self.assertEqual(cursor.next_token().kind, TokenKind.OBJECT_START)
        self.assertEqual(cursor.next_token().name, "a")
        self.assertEqual(cursor.next_token().value, JsonNumber(Decimal(1)))
        self.assertEqual(cursor.next_token().kind, TokenKind.OBJECT_END)
        self.assertIsNone(cursor.next_token())
        self.assertTrue(cursor.is_exhausted())

    def test_read_current_value(self):
        cursor = open_cursor('[{"a": [1, "x"], "b": null}, true]')
        cursor.next_token()
        self.assertEqual(to_python(cursor.read_current_value()), {"a": [1, "x"], "b": None})
        self.assertEqual(to_python(cursor.read_current_value()), True)
        self.assertEqual(cursor.next_token().kind, TokenKind.ARRAY_END)

    def test_read_at_field_name_returns_its_value(self):
        cursor = open_cursor('{"a": {"b": 2}, "c": "d"}')
        cursor.next_token()
        self.assertEqual(to_python(cursor.read_current_value()), {"b": 2})
        self.assertEqual(cursor.read_current_value(), JsonString("d"))

    def test_skip_current_subtree(self):
        cursor = open_cursor('{"skip": {"x": [1, [2, {}]]}, "keep": 5}')
        cursor.next_token()
        cursor.skip_current_subtree()
        self.assertEqual(cursor.next_token().name, "keep")

    def test_skip_scalar(self):
        cursor = open_cursor("[1, 2]")
        cursor.next_token()
        cursor.skip_current_subtree()
        self.assertEqual(cursor.next_token().value, JsonNumber(Decimal(2)))

    def test_read_at_end_token_fails(self):
        cursor = open_cursor("[]")
        cursor.next_token()
        with self.assertRaises(ParseError):
            cursor.read_current_value()

    def test_read_exhausted_fails(self):
        cursor = Cursor.from_events([])
        with self.assertRaises(ParseError):
            cursor.read_current_value()
        with self.assertRaises(ParseError):
            cursor.skip_current_subtree()

    def test_from_events(self):
        cursor = Cursor.from_events(
            [("start_array", None), ("string", "x"), ("end_array", None)]
        )
        self.assertEqual(to_python(cursor.read_current_value()), ["x"])
        self.assertTrue(cursor.is_exhausted())

    def test_truncated_event_stream_inside_value(self):
        cursor = Cursor.from_events([("start_map", None), ("map_key", "a")], label="old")
        with self.assertRaises(ParseError) as ctx:
            cursor.read_current_value()
        self.assertEqual(ctx.exception.source_label, "old")


class TestMalformedInput(unittest.TestCase):
    def _drain(self, cursor):
        while cursor.next_token() is not None:
            pass

    def test_incomplete_document(self):
        with self.assertRaises(ParseError):
            self._drain(open_cursor('{"a": [1, 2'))

    def test_empty_source(self):
        with self.assertRaises(ParseError):
            self._drain(open_cursor(""))

    def test_missing_colon(self):
        with self.assertRaises(ParseError) as ctx:
            self._drain(open_cursor('{"a" 1}', label="new"))
        self.assertEqual(ctx.exception.source_label, "new")


class TestOpenCursor(unittest.TestCase):
    def test_binary_and_text_files(self):
        cursor = open_cursor(io.BytesIO(b'{"a": 1}'))
        self.assertEqual(to_python(cursor.read_current_value()), {"a": 1})
        cursor = open_cursor(io.StringIO('["café"]'))
        self.assertEqual(to_python(cursor.read_current_value()), ["café"])

    def test_path_source_is_closed(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(os.path.join(temp_dir, "doc.json"))
            path.write_text('{"a": [1]}', encoding="utf-8")
            with open_cursor(path) as cursor:
                self.assertEqual(to_python(cursor.read_current_value()), {"a": [1]})
                stream = cursor._closer.__self__
            self.assertTrue(stream.closed)

    def test_existing_cursor_returned(self):
        cursor = Cursor.from_events([("null", None)])
        self.assertIs(open_cursor(cursor, label="old"), cursor)
        self.assertEqual(cursor.label, "old")

    def test_unsupported_source(self):
        with self.assertRaises(TypeError):
            open_cursor(3.5)


if __name__ == "__main__":
    unittest.main()
