from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from lazysummary.ansi import strip_ansi
from lazysummary.highlight import colorize_lines, read_text, sanitize_terminal_text


class HighlightTests(unittest.TestCase):
    def test_sanitize_escapes_control_bytes_but_keeps_whitespace(self) -> None:
        self.assertEqual(sanitize_terminal_text("a\x1b[2Jb\tc\n"), "a\\x1b[2Jb\tc\n")
        self.assertEqual(sanitize_terminal_text("bell\x07"), "bell\\x07")

    def test_colorize_python_keeps_line_count(self) -> None:
        lines = ["def main():", "", "    return 1"]

        colored = colorize_lines(lines, "a.py")

        self.assertEqual(len(colored), 3)
        self.assertEqual([strip_ansi(line) for line in colored], lines)
        self.assertIn("\x1b[", colored[0])

    def test_plain_text_is_left_alone(self) -> None:
        lines = ["just words"]

        self.assertEqual(colorize_lines(lines, "notes.txt"), lines)
        self.assertEqual(colorize_lines(lines, "unknown.zzz"), lines)

    def test_unknown_style_falls_back(self) -> None:
        colored = colorize_lines(["x = 1"], "a.py", style="no-such-style")

        self.assertEqual(strip_ansi(colored[0]), "x = 1")

    def test_read_text_falls_back_to_latin1(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "legacy.txt"
            path.write_bytes(b"caf\xe9\n")

            self.assertEqual(read_text(path), "café\n")


if __name__ == "__main__":
    unittest.main()
