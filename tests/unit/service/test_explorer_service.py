"""Tests for the response-returning operation surface."""

from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from lazyexplorer.catalog import DirectoryCatalog
from lazyexplorer.errors import NotFound
from lazyexplorer.service import ExplorerService, Response, failure, success


class ResponseTests(unittest.TestCase):
    def test_success_and_failure_shapes(self) -> None:
        self.assertEqual(
            success({"x": 1}).to_dict(),
            {"ok": True, "code": "OK", "message": "success", "data": {"x": 1}},
        )
        self.assertEqual(
            failure(NotFound("Path does not exist: /x")).to_dict(),
            {"ok": False, "code": "NOT_FOUND", "message": "Path does not exist: /x", "data": None},
        )


class ExplorerServiceTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.root = Path(self._tmp.name)
        (self.root / "Photos").mkdir()
        (self.root / "notes.txt").write_text("hello", encoding="utf-8")
        (self.root / "Thumbs.db").write_text("", encoding="utf-8")
        self.open_file = mock.Mock(return_value=None)
        self.service = ExplorerService(open_file=self.open_file)

    def test_list_directory_payload(self) -> None:
        response = self.service.list_directory(str(self.root))

        self.assertTrue(response.ok)
        data = response.data
        self.assertEqual(data["currentPath"], os.fspath(self.root))
        self.assertEqual(data["parentPath"], os.fspath(self.root.parent))
        self.assertEqual([item["name"] for item in data["directories"]], ["Photos"])
        self.assertEqual([item["name"] for item in data["files"]], ["notes.txt"])
        self.assertNotIn("size", data["directories"][0])
        self.assertEqual(data["files"][0]["size"], 5)
        self.assertEqual(data["files"][0]["type"], "file")

    def test_list_missing_directory_is_a_failure_value(self) -> None:
        response = self.service.list_directory(str(self.root / "missing"))

        self.assertIsInstance(response, Response)
        self.assertFalse(response.ok)
        self.assertEqual(response.code, "NOT_FOUND")
        self.assertIsNone(response.data)

    def test_mutations_report_codes(self) -> None:
        self.assertTrue(self.service.create_folder(str(self.root / "New")).ok)
        self.assertEqual(self.service.create_folder(str(self.root / "New")).code, "ALREADY_EXISTS")
        self.assertTrue(self.service.create_file(str(self.root / "New" / "a.txt")).ok)
        self.assertTrue(self.service.rename(str(self.root / "New"), str(self.root / "Old")).ok)
        self.assertEqual(
            self.service.rename(str(self.root / "New"), str(self.root / "Other")).code,
            "SOURCE_MISSING",
        )
        self.assertTrue(self.service.remove(str(self.root / "Old")).ok)
        self.assertEqual(self.service.remove(str(self.root / "Old")).code, "NOT_FOUND")

    def test_copy_returns_actual_destination(self) -> None:
        source = str(self.root / "notes.txt")

        response = self.service.copy(source, source)

        self.assertTrue(response.ok)
        self.assertEqual(response.data, {"actualDestination": os.fspath(self.root / "notes(副本).txt")})

    def test_copy_onto_existing_destination(self) -> None:
        (self.root / "other.txt").write_text("", encoding="utf-8")

        response = self.service.copy(str(self.root / "notes.txt"), str(self.root / "other.txt"))

        self.assertEqual(response.code, "DESTINATION_EXISTS")

    def test_batch_operations(self) -> None:
        (self.root / "a.txt").write_text("", encoding="utf-8")
        sources = [str(self.root / "notes.txt"), str(self.root / "a.txt")]

        self.assertTrue(self.service.copy_batch(sources, str(self.root / "Photos")).ok)
        self.assertEqual(self.service.move_batch(sources, str(self.root / "Photos")).code, "DESTINATION_EXISTS")

        removed = self.service.remove_batch([str(self.root / "Photos" / "a.txt"), str(self.root / "ghost")])
        self.assertEqual(removed.data, {"removed": 1})

        self.assertTrue(self.service.move(str(self.root / "a.txt"), str(self.root / "Photos" / "a.txt")).ok)
        self.assertFalse((self.root / "a.txt").exists())

    def test_listing_after_mutation_is_fresh(self) -> None:
        self.service.list_directory(str(self.root))
        self.service.create_file(str(self.root / "fresh.txt"))

        names = [item["name"] for item in self.service.list_directory(str(self.root)).data["files"]]

        self.assertIn("fresh.txt", names)

    def test_resolve_shortcut_failure_codes(self) -> None:
        (self.root / "plain.txt").write_text("", encoding="utf-8")
        self.assertEqual(self.service.resolve_shortcut(str(self.root / "plain.txt")).code, "INVALID_FORMAT")
        self.assertEqual(self.service.resolve_shortcut(str(self.root / "missing.lnk")).code, "NOT_FOUND")

    def test_resolve_shortcut_success_payload(self) -> None:
        resolver = mock.Mock()
        resolver.resolve.return_value = "C:\\Users\\test"
        service = ExplorerService(resolver=resolver)

        response = service.resolve_shortcut("Docs.lnk")

        self.assertEqual(response.data, {"targetPath": "C:\\Users\\test"})

    def test_open_file_reports_opener_errors(self) -> None:
        self.assertTrue(self.service.open_file(str(self.root / "notes.txt")).ok)
        self.open_file.assert_called_once_with(self.root / "notes.txt")

        self.open_file.return_value = "Cannot open"
        response = self.service.open_file(str(self.root / "notes.txt"))
        self.assertEqual((response.ok, response.code, response.message), (False, "IO_FAILURE", "Cannot open"))

    def test_upload_and_export(self) -> None:
        upload = self.service.upload(str(self.root / "Photos"), [("cat.jpg", b"\xff\xd8")])
        self.assertEqual(upload.data, {"count": 1})

        rows = self.service.export_listing(str(self.root / "Photos")).data
        self.assertEqual([row["name"] for row in rows], ["cat.jpg"])
        self.assertEqual(rows[0]["size"], 2)

    def test_unexpected_exception_becomes_io_failure(self) -> None:
        catalog = mock.Mock(spec=DirectoryCatalog)
        catalog.list_directory.side_effect = RuntimeError("boom")
        service = ExplorerService(catalog=catalog)

        with self.assertLogs("lazyexplorer.service", level="ERROR"):
            response = service.list_directory("/anywhere")

        self.assertFalse(response.ok)
        self.assertEqual(response.code, "IO_FAILURE")
        self.assertIn("boom", response.message)


if __name__ == "__main__":
    unittest.main()
