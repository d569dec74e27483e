"""Tests for core/yamlio.py YAML helpers."""

import tempfile
import unittest
from pathlib import Path

import yaml

from core.yamlio import dump_config, load_config, read_document


class TestLoadConfig(unittest.TestCase):
    """Tests for load_config function."""

    def test_load_schedule_mapping(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "schedule.yaml"
            path.write_text("tasks:\n  - title: Pay rent\n    freq: monthly\n", encoding="utf-8")
            result = load_config(str(path))
            self.assertEqual(result, {"tasks": [{"title": "Pay rent", "freq": "monthly"}]})

    def test_load_missing_file_returns_empty(self):
        self.assertEqual(load_config("/nonexistent/path/config.yaml"), {})

    def test_load_none_or_empty_path_returns_empty(self):
        self.assertEqual(load_config(None), {})
        self.assertEqual(load_config(""), {})

    def test_load_blank_or_null_file_returns_empty(self):
        with tempfile.TemporaryDirectory() as tmp:
            for name, text in (("blank.yaml", "   \n\n"), ("null.yaml", "~\n")):
                path = Path(tmp) / name
                path.write_text(text, encoding="utf-8")
                with self.subTest(name=name):
                    self.assertEqual(load_config(str(path)), {})


class TestDumpConfig(unittest.TestCase):
    """Tests for dump_config function."""

    def test_dump_creates_parent_directories(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "out" / "tasks.yaml"
            dump_config(str(path), {"tasks": []})
            self.assertTrue(path.exists())

    def test_dump_keeps_key_order(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "tasks.yaml"
            dump_config(str(path), {"tasks": [{"title": "Água", "due": "2024-03-10T00:00:00.000Z"}]})
            content = path.read_text(encoding="utf-8")
            self.assertLess(content.find("title"), content.find("due"))
            self.assertIn("Água", content)
            self.assertEqual(load_config(str(path))["tasks"][0]["due"], "2024-03-10T00:00:00.000Z")


class TestReadDocument(unittest.TestCase):
    """Tests for read_document, which returns the root node unchanged."""

    def test_list_root_returned_as_is(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "list.yaml"
            path.write_text("- title: a\n- title: b\n", encoding="utf-8")
            self.assertEqual(read_document(path), [{"title": "a"}, {"title": "b"}])

    def test_missing_file_raises(self):
        with self.assertRaises(FileNotFoundError):
            read_document(Path("/nonexistent/path/doc.yaml"))

    def test_empty_file_returns_none(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "empty.yaml"
            path.write_text("  \n", encoding="utf-8")
            self.assertIsNone(read_document(path))

    def test_malformed_yaml_raises_parser_error(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "bad.yaml"
            path.write_text("key: [unclosed\n", encoding="utf-8")
            with self.assertRaises(yaml.YAMLError):
                read_document(path)


if __name__ == "__main__":
    unittest.main()
