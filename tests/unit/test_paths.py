from __future__ import annotations

import unittest

from driftline.core.paths import ArrayFrame, FieldFrame, PathStack, child_path, index_path


class TestPathJoin(unittest.TestCase):
    def test_child_of_root(self):
        self.assertEqual(child_path("", "a"), "a")

    def test_nested_child(self):
        self.assertEqual(child_path("user.address", "street"), "user.address.street")

    def test_index(self):
        self.assertEqual(index_path("", 2), "[2]")
        self.assertEqual(index_path("a", 0), "a[0]")
        self.assertEqual(child_path(index_path("a", 0), "b"), "a[0].b")


class TestPathStack(unittest.TestCase):
    def test_empty_stack_is_root(self):
        stack = PathStack()
        self.assertEqual(stack.render(), "")
        self.assertEqual(stack.depth, 0)

    def test_object_field_rendering(self):
        stack = PathStack()
        stack.push_object()
        stack.push_field("user")
        stack.push_object()
        stack.push_field("name")
        self.assertEqual(stack.render(), "user.name")
        self.assertEqual(stack.depth, 2)

    def test_array_elements_advance(self):
        stack = PathStack()
        stack.push_object()
        stack.push_field("tags")
        stack.push_array()
        self.assertEqual(stack.render(), "tags[0]")
        stack.value_done()
        self.assertEqual(stack.render(), "tags[1]")
        stack.value_done()
        self.assertEqual(stack.render(), "tags[2]")

    def test_value_done_pops_field(self):
        stack = PathStack()
        stack.push_object()
        stack.push_field("a")
        stack.value_done()
        self.assertEqual(stack.render(), "")
        self.assertTrue(stack.in_object())
        self.assertEqual(stack.render_field("b"), "b")

    def test_nested_arrays(self):
        stack = PathStack()
        stack.push_array()
        stack.value_done()
        stack.push_array()
        self.assertEqual(stack.render(), "[1][0]")

    def test_pop_container_closes_element(self):
        stack = PathStack()
        stack.push_object()
        stack.push_field("items")
        stack.push_array()
        stack.push_object()
        stack.push_field("id")
        self.assertEqual(stack.render(), "items[0].id")
        stack.value_done()
        stack.pop_container()
        stack.value_done()
        self.assertEqual(stack.render(), "items[1]")
        self.assertEqual(stack.depth, 2)
        self.assertIsInstance(stack.top(), ArrayFrame)

    def test_pop_container_requires_open_container(self):
        stack = PathStack()
        with self.assertRaises(IndexError):
            stack.pop_container()
        stack.push_object()
        stack.push_field("a")
        self.assertIsInstance(stack.top(), FieldFrame)
        with self.assertRaises(IndexError):
            stack.pop_container()

    def test_depth_tracks_containers_only(self):
        stack = PathStack()
        stack.push_object()
        stack.push_field("a")
        stack.push_array()
        self.assertEqual(stack.depth, 2)
        self.assertEqual(len(stack), 3)
        stack.pop_container()
        self.assertEqual(stack.depth, 1)


if __name__ == "__main__":
    unittest.main()
