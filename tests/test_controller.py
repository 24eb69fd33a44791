"""Navigation controller state-machine tests.

Background work goes through a manual scheduler so completions can be
delivered in any order, exactly when a test decides.
"""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from lazysummary.ansi import display_width
from lazysummary.controller import MODE_BROWSING, MODE_SEARCHING, NavigationController
from lazysummary.listing import Entry
from lazysummary.render import file_count_footer
from lazysummary.summarize import Summarizer, SummaryOptions
from lazysummary.summary import Summary
from lazysummary.summary_view import LOADING_TEXT
from lazysummary.theme import NO_COLOR_THEME
from lazysummary.workers import CHANNEL_LISTING, CHANNEL_PREVIEW, CHANNEL_SUMMARY, TaskRequest, TaskResult


class ManualScheduler:
    def __init__(self) -> None:
        self.pending: list[tuple[TaskRequest, object]] = []
        self.completed: list[TaskResult] = []
        self._next_id = 1

    def submit(self, channel, tag, work) -> TaskRequest:
        request = TaskRequest(request_id=self._next_id, channel=channel, tag=tag)
        self._next_id += 1
        self.pending.append((request, work))
        return request

    def drain_results(self, timeout_seconds: float = 0.0) -> list[TaskResult]:
        out = self.completed
        self.completed = []
        return out

    def run(self, index: int) -> TaskResult:
        request, work = self.pending.pop(index)
        result = TaskResult(request=request, payload=work())
        self.completed.append(result)
        return result

    def run_all(self) -> None:
        while self.pending:
            self.run(0)

    def channels(self) -> list[str]:
        return [request.channel for request, _ in self.pending]


class _ControllerTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name).resolve()
        self.scheduler = ManualScheduler()

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def make_controller(self, show_dirs: bool = True) -> NavigationController:
        summarizer = Summarizer(self.root, SummaryOptions(no_color=True, windows=False))
        controller = NavigationController(
            self.root,
            self.scheduler,
            summarizer,
            show_dirs=show_dirs,
            theme=NO_COLOR_THEME,
            no_color=True,
            windows=False,
        )
        controller.set_viewport_height(5)
        return controller

    def settle(self, controller: NavigationController) -> None:
        controller.poll_background()
        while self.scheduler.pending:
            self.scheduler.run_all()
            controller.poll_background()

    def pane_text(self, controller: NavigationController) -> str:
        return "\n".join(controller.state.pane_lines)


class ListingAndSelectionTests(_ControllerTestCase):
    def test_start_lists_root_and_summarizes_first_file(self) -> None:
        (self.root / "a.go").write_text("package a\nfunc A() {}\n", encoding="utf-8")
        (self.root / "b.txt").write_text("hello\n", encoding="utf-8")
        controller = self.make_controller()

        controller.start()
        self.assertEqual(self.scheduler.channels(), [CHANNEL_LISTING])
        self.scheduler.run(0)
        controller.poll_background()

        self.assertEqual([entry.path for entry in controller.state.all_entries], ["a.go", "b.txt"])
        self.assertEqual(controller.state.selected_path, str(self.root / "a.go"))
        self.assertTrue(controller.state.pane_loading)
        self.assertIn(LOADING_TEXT, self.pane_text(controller))
        self.assertEqual(self.scheduler.channels(), [CHANNEL_SUMMARY])

        self.settle(controller)

        self.assertFalse(controller.state.pane_loading)
        self.assertIn("Functions: 1", self.pane_text(controller))

    def test_cursor_moves_are_clamped(self) -> None:
        for name in ("a.txt", "b.txt", "c.txt"):
            (self.root / name).write_text(name, encoding="utf-8")
        controller = self.make_controller()
        controller.start()
        self.settle(controller)

        controller.handle_key("UP")
        self.assertEqual(controller.state.cursor, 0)
        controller.handle_key("CTRL_D")
        self.assertEqual(controller.state.cursor, 2)
        controller.handle_key("HOME")
        self.assertEqual(controller.state.cursor, 0)
        controller.handle_key("END")
        self.assertEqual(controller.state.cursor, 2)
        controller.handle_key("k")
        self.assertEqual(controller.state.cursor, 1)
        controller.handle_key("CTRL_U")
        self.assertEqual(controller.state.cursor, 0)

    def test_unsupported_file_shows_message_without_background_work(self) -> None:
        (self.root / "photo.png").write_bytes(b"\x89PNG")
        controller = self.make_controller()
        controller.start()
        self.scheduler.run(0)
        controller.poll_background()

        self.assertEqual(self.scheduler.pending, [])
        self.assertIn("not supported for summarization", self.pane_text(controller))

    def test_unreadable_directory_lists_as_empty(self) -> None:
        controller = self.make_controller()
        controller.state.current_directory = self.root / "missing"
        controller.start()
        self.settle(controller)

        self.assertEqual(controller.state.all_entries, [])
        self.assertIsNone(controller.current_entry())


class StaleResultTests(_ControllerTestCase):
    def test_only_latest_selection_result_is_applied(self) -> None:
        for name in ("a.txt", "b.txt", "c.txt"):
            (self.root / name).write_text(f"content of {name}\n", encoding="utf-8")
        controller = self.make_controller()
        controller.start()
        self.scheduler.run(0)
        controller.poll_background()

        controller.handle_key("DOWN")
        controller.handle_key("DOWN")
        self.assertEqual(self.scheduler.channels(), [CHANNEL_SUMMARY] * 3)
        self.assertEqual(controller.state.selected_path, str(self.root / "c.txt"))

        # A and B finish after C became selected.
        self.scheduler.run(0)
        self.scheduler.run(0)
        controller.poll_background()
        self.assertTrue(controller.state.pane_loading)
        self.assertIn(LOADING_TEXT, self.pane_text(controller))

        self.scheduler.run(0)
        controller.poll_background()
        self.assertIn("content of c.txt", self.pane_text(controller))
        self.assertNotIn("content of a.txt", self.pane_text(controller))

    def test_out_of_order_completion_after_current_still_ignored(self) -> None:
        for name in ("a.txt", "b.txt"):
            (self.root / name).write_text(f"content of {name}\n", encoding="utf-8")
        controller = self.make_controller()
        controller.start()
        self.scheduler.run(0)
        controller.poll_background()
        controller.handle_key("DOWN")

        self.scheduler.run(1)
        controller.poll_background()
        self.scheduler.run(0)
        applied = controller.poll_background()

        self.assertFalse(applied)
        self.assertIn("content of b.txt", self.pane_text(controller))

    def test_stale_listing_is_dropped(self) -> None:
        controller = self.make_controller()
        stale = TaskResult(
            request=TaskRequest(request_id=99, channel=CHANNEL_LISTING, tag=str(self.root / "elsewhere")),
            payload=[Entry(path="ghost.txt", extension=".txt")],
        )

        self.assertFalse(controller.apply_result(stale))
        self.assertEqual(controller.state.all_entries, [])

    def test_result_for_other_selection_is_dropped(self) -> None:
        controller = self.make_controller()
        controller.state.selected_path = str(self.root / "current.go")
        result = TaskResult(
            request=TaskRequest(request_id=7, channel=CHANNEL_SUMMARY, tag=str(self.root / "old.go")),
            payload=Summary(path="old.go", language_label="Go"),
        )

        self.assertFalse(controller.apply_result(result))


class SearchModeTests(_ControllerTestCase):
    def setUp(self) -> None:
        super().setUp()
        for name in ("alpha.py", "beta.py", "gamma.md"):
            (self.root / name).write_text("x\n", encoding="utf-8")
        self.controller = self.make_controller()
        self.controller.start()
        self.settle(self.controller)

    def paths(self) -> list[str]:
        return [entry.path for entry in self.controller.state.filtered_entries]

    def type_query(self, text: str) -> None:
        for ch in text:
            self.controller.handle_key(ch)

    def test_slash_enters_search_and_typing_filters(self) -> None:
        self.controller.handle_key("/")
        self.assertEqual(self.controller.state.mode, MODE_SEARCHING)
        self.assertEqual(self.controller.state.search_query, "")

        self.type_query("py")

        self.assertEqual(self.controller.state.search_query, "py")
        self.assertEqual(sorted(self.paths()), ["alpha.py", "beta.py"])

    def test_search_keys_do_not_navigate(self) -> None:
        self.controller.handle_key("/")
        self.type_query("q")

        self.assertTrue(self.controller.state.running)
        self.assertEqual(self.controller.state.search_query, "q")

    def test_backspace_to_empty_restores_all_entries(self) -> None:
        self.controller.handle_key("/")
        self.type_query("ga")
        self.assertEqual(self.paths(), ["gamma.md"])

        self.controller.handle_key("BACKSPACE")
        self.controller.handle_key("BACKSPACE")
        self.controller.handle_key("BACKSPACE")

        self.assertEqual(self.controller.state.search_query, "")
        self.assertEqual(self.paths(), ["alpha.py", "beta.py", "gamma.md"])

    def test_escape_clears_filter(self) -> None:
        self.controller.handle_key("/")
        self.type_query("beta")
        self.controller.handle_key("ESC")

        self.assertEqual(self.controller.state.mode, MODE_BROWSING)
        self.assertEqual(self.controller.state.search_query, "")
        self.assertEqual(self.paths(), ["alpha.py", "beta.py", "gamma.md"])

    def test_enter_keeps_filter_and_returns_to_browsing(self) -> None:
        self.controller.handle_key("/")
        self.type_query("beta")
        self.controller.handle_key("ENTER")

        self.assertEqual(self.controller.state.mode, MODE_BROWSING)
        self.assertEqual(self.paths(), ["beta.py"])
        self.assertEqual(self.controller.state.selected_path, str(self.root / "beta.py"))

    def test_filtering_changes_selection(self) -> None:
        self.controller.handle_key("/")
        self.type_query("gam")

        self.assertEqual(self.controller.state.selected_path, str(self.root / "gamma.md"))
        self.assertEqual(self.scheduler.channels(), [CHANNEL_SUMMARY])

    def test_filtered_entries_stay_within_all_entries(self) -> None:
        self.controller.handle_key("/")
        for query in ("a", "al", "alp", "e", "md"):
            self.controller.state.search_query = ""
            self.type_query(query)
            for entry in self.controller.state.filtered_entries:
                self.assertIn(entry, self.controller.state.all_entries)

    def test_ctrl_c_quits_even_while_searching(self) -> None:
        self.controller.handle_key("/")
        self.controller.handle_key("CTRL_C")

        self.assertFalse(self.controller.state.running)


class DirectoryTests(_ControllerTestCase):
    def test_toggle_hides_directories_and_updates_footer(self) -> None:
        sub = self.root / "pkg"
        sub.mkdir()
        (sub / "one.py").write_text("x\n", encoding="utf-8")
        (sub / "two.py").write_text("y\n", encoding="utf-8")
        (sub / "inner").mkdir()
        controller = self.make_controller()
        controller.state.current_directory = sub

        controller.handle_key("t")
        controller.start()
        self.settle(controller)

        visible = [entry.path for entry in controller.visible_entries()]
        self.assertEqual(visible, ["..", "one.py", "two.py"])
        self.assertEqual(file_count_footer(controller), "2 files (dirs hidden - press 't' to toggle)")

        controller.handle_key("t")
        self.assertEqual(file_count_footer(controller), "2 files")

    def test_toggle_keeps_cursor_on_same_file(self) -> None:
        (self.root / "dir").mkdir()
        (self.root / "file.txt").write_text("x", encoding="utf-8")
        controller = self.make_controller()
        controller.start()
        self.settle(controller)
        controller.handle_key("DOWN")
        self.assertEqual(controller.current_entry().path, "file.txt")

        controller.handle_key("t")

        self.assertEqual(controller.current_entry().path, "file.txt")

    def test_directory_selection_requests_preview(self) -> None:
        sub = self.root / "docs"
        sub.mkdir()
        (sub / "guide.md").write_text("# Guide\n", encoding="utf-8")
        controller = self.make_controller()
        controller.start()
        self.scheduler.run(0)
        controller.poll_background()

        self.assertEqual(self.scheduler.channels(), [CHANNEL_PREVIEW])
        self.settle(controller)

        text = self.pane_text(controller)
        self.assertIn("Directory: docs", text)
        self.assertIn("Contains: 1 files", text)
        self.assertIn("guide.md", text)

    def test_enter_directory_and_back_to_parent(self) -> None:
        sub = self.root / "src"
        sub.mkdir()
        (sub / "main.go").write_text("package main\n", encoding="utf-8")
        controller = self.make_controller()
        controller.start()
        self.settle(controller)

        controller.handle_key("ENTER")
        self.assertEqual(controller.state.current_directory, sub)
        self.settle(controller)
        self.assertEqual([entry.path for entry in controller.state.all_entries], ["..", "main.go"])
        self.assertIn("Parent Directory", self.pane_text(controller))
        self.assertIn("Path: /", self.pane_text(controller))

        controller.handle_key("ENTER")
        self.settle(controller)
        self.assertEqual(controller.state.current_directory, self.root)
        self.assertEqual([entry.path for entry in controller.state.all_entries], ["src"])

    def test_enter_on_file_is_noop(self) -> None:
        (self.root / "a.txt").write_text("x", encoding="utf-8")
        controller = self.make_controller()
        controller.start()
        self.settle(controller)

        controller.handle_key("ENTER")

        self.assertEqual(controller.state.current_directory, self.root)
        self.assertEqual(self.scheduler.pending, [])

    def test_refresh_picks_up_new_files(self) -> None:
        (self.root / "a.txt").write_text("x", encoding="utf-8")
        controller = self.make_controller()
        controller.start()
        self.settle(controller)
        (self.root / "b.txt").write_text("y", encoding="utf-8")

        controller.handle_key("r")
        self.settle(controller)

        self.assertEqual([entry.path for entry in controller.state.all_entries], ["a.txt", "b.txt"])


class ScrollTests(_ControllerTestCase):
    def test_scroll_offset_is_clamped_to_content(self) -> None:
        (self.root / "long.txt").write_text("".join(f"row {i}\n" for i in range(30)), encoding="utf-8")
        controller = self.make_controller()
        controller.start()
        self.settle(controller)
        max_scroll = controller.max_scroll()
        self.assertGreater(max_scroll, 0)

        controller.handle_key("PAGE_UP")
        self.assertEqual(controller.state.scroll_offset, 0)
        for _ in range(50):
            controller.handle_key("PAGE_DOWN")
        self.assertEqual(controller.state.scroll_offset, max_scroll)
        controller.handle_key("K")
        self.assertEqual(controller.state.scroll_offset, max_scroll - 1)

    def test_viewport_growth_reclamps_offset(self) -> None:
        (self.root / "long.txt").write_text("".join(f"row {i}\n" for i in range(30)), encoding="utf-8")
        controller = self.make_controller()
        controller.start()
        self.settle(controller)
        controller.scroll_summary(1000)

        controller.set_viewport_height(1000)

        self.assertEqual(controller.state.scroll_offset, 0)

    def test_new_content_resets_scroll(self) -> None:
        for name in ("a.txt", "b.txt"):
            (self.root / name).write_text("".join(f"row {i}\n" for i in range(30)), encoding="utf-8")
        controller = self.make_controller()
        controller.start()
        self.settle(controller)
        controller.scroll_summary(3)

        controller.handle_key("DOWN")

        self.assertEqual(controller.state.scroll_offset, 0)

class PaneWidthTests(_ControllerTestCase):
    def test_resize_rerenders_markdown_at_pane_width(self) -> None:
        (self.root / "README.md").write_text("# Title\n\n" + "word " * 60 + "\n", encoding="utf-8")
        controller = self.make_controller()
        controller.start()
        self.settle(controller)
        self.assertEqual(self.scheduler.pending, [])

        controller.set_pane_width(30)

        self.assertEqual(controller.state.pane_width, 30)
        self.assertEqual(self.scheduler.channels(), [CHANNEL_SUMMARY])
        result = self.scheduler.run(0)
        widths = [display_width(line) for line in result.payload.rendered_text.split("\n")]
        self.assertLessEqual(max(widths), 30)
        controller.poll_background()
        self.assertFalse(controller.state.pane_loading)

    def test_unchanged_width_does_not_rerender(self) -> None:
        (self.root / "README.md").write_text("# Title\n", encoding="utf-8")
        controller = self.make_controller()
        controller.set_pane_width(40)
        controller.start()
        self.settle(controller)

        controller.set_pane_width(40)

        self.assertEqual(self.scheduler.pending, [])

    def test_resize_leaves_other_summaries_alone(self) -> None:
        (self.root / "notes.txt").write_text("hello\n", encoding="utf-8")
        controller = self.make_controller()
        controller.start()
        self.settle(controller)

        controller.set_pane_width(30)

        self.assertEqual(controller.state.pane_width, 30)
        self.assertEqual(self.scheduler.pending, [])
        self.assertFalse(controller.state.pane_loading)



if __name__ == "__main__":
    unittest.main()
