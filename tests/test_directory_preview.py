from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path

from lazysummary import directory_preview as preview_mod
from lazysummary.listing import PARENT_ENTRY, Entry


class DirectoryPreviewTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name).resolve()

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_small_directory_lists_every_child(self) -> None:
        sub = self.root / "pkg"
        (sub / "inner").mkdir(parents=True)
        (sub / "main.go").write_text("package main\n", encoding="utf-8")

        text = preview_mod.build_directory_preview(sub, self.root)

        self.assertEqual(
            text.split("\n"),
            [
                "📁 Directory: pkg",
                "Path: /pkg",
                "",
                "Contains: 1 files, 1 directories",
                "",
                "Contents:",
                "  📁 inner/",
                "  🐹 main.go",
                "",
                "Press Enter to navigate into this directory.",
            ],
        )

    def test_large_directory_is_capped_at_twenty_items(self) -> None:
        sub = self.root / "many"
        sub.mkdir()
        for idx in range(25):
            (sub / f"f{idx:02d}.txt").write_text("", encoding="utf-8")

        lines = preview_mod.build_directory_preview(sub, self.root).split("\n")

        self.assertIn("Contains: 25 files", lines)
        self.assertIn("First 20 items:", lines)
        self.assertIn("  ... and 5 more items", lines)
        self.assertEqual(sum(1 for line in lines if line.startswith("  📄 ")), 20)

    def test_empty_directory(self) -> None:
        sub = self.root / "empty"
        sub.mkdir()

        text = preview_mod.build_directory_preview(sub, self.root)

        self.assertIn("📭 This directory is empty.", text)
        self.assertNotIn("Contains:", text)

    def test_parent_entry_is_left_out(self) -> None:
        entries = [PARENT_ENTRY, Entry(path="a.py", extension=".py")]

        text = preview_mod.format_directory_preview("x", entries, self.root / "x", self.root)

        self.assertIn("Contains: 1 files", text)
        self.assertNotIn("..", text)

    @unittest.skipIf(os.name == "nt" or os.geteuid() == 0, "permission bits are not enforced")
    def test_unreadable_directory_reports_error(self) -> None:
        sub = self.root / "locked"
        sub.mkdir()
        sub.chmod(0)
        try:
            with self.assertLogs("lazysummary.directory_preview", level="INFO"):
                text = preview_mod.build_directory_preview(sub, self.root)
        finally:
            sub.chmod(0o755)

        self.assertTrue(text.startswith("📁 Directory: locked"))
        self.assertIn("Error reading directory:", text)

    def test_missing_directory_reports_error(self) -> None:
        text = preview_mod.build_directory_preview(self.root / "gone", self.root)

        self.assertIn("Error reading directory:", text)


class MessageTests(unittest.TestCase):
    def test_parent_message_names_parent_path(self) -> None:
        root = Path("/work")

        self.assertEqual(
            preview_mod.parent_directory_message(root / "a" / "b", root),
            "📁 Parent Directory\n\nPath: /a\n\nPress Enter to navigate up to this directory.",
        )

    def test_parent_of_first_level_is_root(self) -> None:
        root = Path("/work")

        self.assertIn("Path: /\n", preview_mod.parent_directory_message(root / "a", root))

    def test_unsupported_message(self) -> None:
        self.assertEqual(
            preview_mod.unsupported_file_message("photo.png"),
            "File: photo.png\n\nThis file type is not supported for summarization.",
        )

    def test_icons(self) -> None:
        self.assertEqual(preview_mod.entry_icon(PARENT_ENTRY), "🔼")
        self.assertEqual(preview_mod.entry_icon(Entry(path="d", is_directory=True)), "📁")
        self.assertEqual(preview_mod.entry_icon(Entry(path="x.py", extension=".py")), "🐍")
        self.assertEqual(preview_mod.entry_icon(Entry(path="x.bin", extension=".bin")), "📄")


if __name__ == "__main__":
    unittest.main()
