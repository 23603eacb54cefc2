"""Tests for descriptor rewriting."""

import unittest

from ModBrew.core import rewrite_descriptor, read_descriptor_value
from ModBrew.core.descriptor import append_path, insert_name_suffix

DESCRIPTOR = (
    'version="1.0"\n'
    'tags={\n\t"Gameplay"\n}\n'
    'name="Foo"\n'
    'supported_version="1.14.*"\n'
)


class TestAppendPath(unittest.TestCase):
    def test_appends_exactly_one_path_line(self):
        out = rewrite_descriptor(DESCRIPTOR, "/mods/Foo")
        self.assertEqual(out, DESCRIPTOR + 'path="/mods/Foo"\n')
        self.assertEqual(out.count("path="), 1)

    def test_existing_keys_are_preserved(self):
        out = rewrite_descriptor(DESCRIPTOR, "/mods/Foo")
        for line in DESCRIPTOR.splitlines():
            self.assertIn(line, out.splitlines())

    def test_missing_trailing_newline_gets_separator(self):
        self.assertEqual(append_path('name="Foo"', "/m"), 'name="Foo"\npath="/m"\n')

    def test_empty_text(self):
        self.assertEqual(append_path("", "/m"), 'path="/m"\n')

    def test_backslashes_become_forward_slashes(self):
        out = append_path("", "C:\\Users\\me\\mod\\Foo")
        self.assertEqual(out, 'path="C:/Users/me/mod/Foo"\n')


class TestVariantSuffix(unittest.TestCase):
    def test_suffix_inserted_into_name(self):
        out = rewrite_descriptor('name="Foo"\n', "/m", " - Dev Version")
        self.assertEqual(out, 'name="Foo - Dev Version"\npath="/m"\n')

    def test_no_name_line_leaves_text_unchanged(self):
        text = 'version="1.0"\n'
        out = rewrite_descriptor(text, "/m", " - Dev Version")
        self.assertEqual(out, text + 'path="/m"\n')

    def test_only_first_name_line_changes(self):
        text = 'name="A"\nname="B"\n'
        self.assertEqual(insert_name_suffix(text, "!"), 'name="A!"\nname="B"\n')

    def test_name_match_is_case_insensitive_and_trimmed(self):
        text = 'version="1"\n   NAME = "Foo"\n'
        self.assertEqual(insert_name_suffix(text, " X"), 'version="1"\n   NAME = "Foo X"\n')

    def test_name_line_without_quote_unchanged(self):
        text = "name=Foo\n"
        self.assertEqual(insert_name_suffix(text, " X"), text)

    def test_no_suffix_requested(self):
        out = rewrite_descriptor('name="Foo"\n', "/m", None)
        self.assertEqual(out, 'name="Foo"\npath="/m"\n')


class TestReadDescriptorValue(unittest.TestCase):
    def test_reads_value(self):
        self.assertEqual(read_descriptor_value(DESCRIPTOR, "name"), "Foo")
        self.assertEqual(read_descriptor_value(DESCRIPTOR, "supported_version"), "1.14.*")

    def test_missing_key(self):
        self.assertIsNone(read_descriptor_value(DESCRIPTOR, "path"))


if __name__ == "__main__":
    unittest.main(verbosity=2)
