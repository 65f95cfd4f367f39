"""Tests for hidden-filtered directory scanning and entry formatting."""

from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from lazyexplorer.catalog import (
    EntryKind,
    format_mtime,
    format_size,
    list_directory_entries,
    normalize_path,
)
from lazyexplorer.errors import NotADirectory, NotFound, PermissionDenied


class ListDirectoryEntriesTests(unittest.TestCase):
    def test_hidden_names_are_dropped_and_kinds_partitioned(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "a.txt").write_text("hello", encoding="utf-8")
            (root / ".hidden").write_text("x", encoding="utf-8")
            (root / "~lock").write_text("x", encoding="utf-8")
            (root / "B").mkdir()

            listing = list_directory_entries(root)

        self.assertEqual([entry.name for entry in listing.directories], ["B"])
        self.assertEqual([entry.name for entry in listing.files], ["a.txt"])
        self.assertEqual(listing.directories[0].kind, EntryKind.DIRECTORY)
        self.assertIsNone(listing.directories[0].size)
        self.assertEqual(listing.files[0].size, 5)
        self.assertIsNotNone(listing.files[0].mtime_ns)

    def test_names_sort_case_insensitively_within_each_group(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            for name in ("beta.txt", "Alpha.txt", "gamma.txt"):
                (root / name).write_text("", encoding="utf-8")
            for name in ("zoo", "Apps"):
                (root / name).mkdir()

            listing = list_directory_entries(root)

        self.assertEqual([entry.name for entry in listing.entries], ["Apps", "zoo", "Alpha.txt", "beta.txt", "gamma.txt"])

    def test_paths_are_absolute_and_parent_is_recorded(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "f.txt").write_text("", encoding="utf-8")

            listing = list_directory_entries(root)

        expected = normalize_path(root)
        self.assertEqual(listing.current_path, expected)
        self.assertEqual(listing.parent_path, expected.parent)
        self.assertFalse(listing.is_root)
        self.assertEqual(listing.find("f.txt").path, expected / "f.txt")
        self.assertIsNone(listing.find("missing"))

    def test_filesystem_root_is_its_own_parent(self) -> None:
        root = Path(os.path.abspath(os.sep))
        with mock.patch("lazyexplorer.catalog.fs.os.scandir") as scandir:
            scandir.return_value.__enter__.return_value = iter(())
            listing = list_directory_entries(root)

        self.assertTrue(listing.is_root)
        self.assertEqual(listing.entries, ())

    def test_missing_path_is_not_found(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(NotFound):
                list_directory_entries(Path(tmp) / "absent")

    def test_file_path_is_not_a_directory(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "file.txt"
            path.write_text("", encoding="utf-8")
            with self.assertRaises(NotADirectory):
                list_directory_entries(path)

    def test_unreadable_ancestor_is_permission_denied(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            target = Path(tmp) / "locked" / "inner"
            with mock.patch("lazyexplorer.catalog.fs.os.lstat", side_effect=PermissionError(13, "denied")):
                with self.assertRaises(PermissionDenied) as ctx:
                    list_directory_entries(target)
        self.assertEqual(ctx.exception.path, normalize_path(target))

    def test_file_used_as_ancestor_is_not_a_directory(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            blocker = Path(tmp) / "file.txt"
            blocker.write_text("", encoding="utf-8")
            with self.assertRaises(NotADirectory):
                list_directory_entries(blocker / "child")

    def test_unreadable_directory_is_permission_denied(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with mock.patch("lazyexplorer.catalog.fs.os.scandir", side_effect=PermissionError(13, "denied")):
                with self.assertRaises(PermissionDenied) as ctx:
                    list_directory_entries(tmp)
        self.assertEqual(ctx.exception.code, "PERMISSION_DENIED")

    @unittest.skipIf(not hasattr(os, "symlink"), "symlinks unavailable")
    def test_dangling_symlink_is_listed_without_metadata(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            try:
                os.symlink(root / "nowhere", root / "broken")
            except OSError:
                self.skipTest("cannot create symlink")

            listing = list_directory_entries(root)

        broken = listing.find("broken")
        self.assertIsNotNone(broken)
        self.assertEqual(broken.kind, EntryKind.FILE)
        self.assertIsNone(broken.size)
        self.assertIsNone(broken.mtime_ns)


class FormattingTests(unittest.TestCase):
    def test_format_size(self) -> None:
        self.assertEqual(format_size(None), "-")
        self.assertEqual(format_size(512), "512 B")
        self.assertEqual(format_size(2048), "2.0 KB")
        self.assertEqual(format_size(5 * 1024 * 1024), "5.0 MB")

    def test_format_mtime_is_empty_when_unknown(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            (Path(tmp) / "f.txt").write_text("", encoding="utf-8")
            listing = list_directory_entries(tmp)

        entry = listing.files[0]
        self.assertRegex(format_mtime(entry), r"^\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}$")
        self.assertEqual(format_mtime(type(entry)(name="x", path=Path("x"), kind=EntryKind.FILE)), "")


if __name__ == "__main__":
    unittest.main()
