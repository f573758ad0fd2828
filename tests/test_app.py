"""Runtime wiring tests: keys flow through the input machine into the session."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path
from unittest import mock

from lazygrep.app import IDLE_POLL_MS, SEARCHING_POLL_MS, App
from lazygrep.search import SearchConfig, SortKey
from lazygrep.session import RunState
from lazygrep.ui_theme import DARK_THEME
from lazygrep.viewer import ViewerLayout


class AppTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        (self.root / "a.txt").write_text("needle one\nhay\nneedle two\n", encoding="utf-8")
        (self.root / "b.txt").write_text("hay\nneedle three\n", encoding="utf-8")
        self.launch = mock.Mock(return_value=None)
        config = SearchConfig("needle", paths=(self.root,), no_ignore=True, sort_by=SortKey.PATH)
        self.app = App(config, DARK_THEME, launch=self.launch)
        self.addCleanup(self._tmp.cleanup)

    def finish_search(self) -> None:
        self.app.session.shutdown(timeout=10)
        self.app.step("")

    def press(self, *keys: str) -> None:
        for key in keys:
            self.app.step(key)

    def test_start_streams_results_and_relaxes_poll_interval(self) -> None:
        self.app.start()
        self.assertEqual(self.app.poll_timeout_ms(), SEARCHING_POLL_MS)

        self.finish_search()

        self.assertEqual(self.app.session.state, RunState.IDLE)
        self.assertEqual(self.app.session.result_list.get_total_number_of_matches(), 3)
        self.assertEqual(self.app.poll_timeout_ms(), IDLE_POLL_MS)

    def test_navigation_and_removal_keys_reach_result_list(self) -> None:
        self.app.start()
        self.finish_search()
        results = self.app.session.result_list

        self.press("G")
        self.assertEqual(results.get_current_match_index(), 3)
        self.press("g", "g")
        self.assertEqual(results.get_current_match_index(), 1)
        self.press("d", "w")
        self.assertEqual(results.get_current_number_of_matches(), 1)

    def test_enter_opens_selection_in_editor(self) -> None:
        self.app.start()
        self.finish_search()
        expected = self.app.session.result_list.get_selected_entry()

        self.press("ENTER")

        self.launch.assert_called_once_with(*expected)
        self.assertEqual(self.app.session.state, RunState.IDLE)

    def test_editor_failure_is_shown_until_next_key(self) -> None:
        self.launch.return_value = "Failed to open editor 'vim'. Is it installed?"
        self.app.start()
        self.finish_search()

        self.press("ENTER")
        context = self.app.render_context()

        self.assertEqual(self.app.session.state, RunState.IDLE)
        self.assertEqual(context.editor_error, "Failed to open editor 'vim'. Is it installed?")
        self.assertIsNone(context.last_error)

        self.press("j")
        self.assertIsNone(self.app.render_context().editor_error)

    def test_search_popup_restarts_search_with_new_pattern(self) -> None:
        self.app.start()
        self.finish_search()

        self.press("F5")
        self.assertTrue(self.app.search_popup.visible)
        self.assertEqual(self.app.search_popup.pattern, "needle")
        self.press(*["BACKSPACE"] * 6, "h", "a", "y", "ENTER")
        self.finish_search()

        self.assertFalse(self.app.search_popup.visible)
        self.assertEqual(self.app.session.config.pattern, "hay")
        self.assertEqual(self.app.session.result_list.get_total_number_of_matches(), 2)
        self.assertTrue(self.app.config.no_ignore)

    def test_cancelled_popup_keeps_results(self) -> None:
        self.app.start()
        self.finish_search()
        results = self.app.session.result_list

        self.press("F5", "x", "ESC")

        self.assertFalse(self.app.search_popup.visible)
        self.assertIs(self.app.session.result_list, results)
        self.assertFalse(self.app.session.exit_requested())

    def test_viewer_follows_selected_file(self) -> None:
        self.app.start()
        self.finish_search()

        self.press("v")
        self.assertEqual(self.app.viewer_state.layout, ViewerLayout.VERTICAL)
        selected_path, _ = self.app.session.result_list.get_selected_entry()
        self.assertEqual(self.app.viewer_state.viewer.file_path, selected_path)

        self.press("G")
        selected_path, _ = self.app.session.result_list.get_selected_entry()
        self.assertEqual(self.app.viewer_state.viewer.file_path, selected_path)

    def test_help_popup_scrolls_and_closes(self) -> None:
        self.press("F1", "j", "j", "k")
        self.assertTrue(self.app.keymap_popup.visible)
        self.assertEqual(self.app.keymap_popup.scroll_y, 1)

        self.press("q")
        self.assertFalse(self.app.keymap_popup.visible)
        self.assertFalse(self.app.session.exit_requested())

    def test_render_context_tracks_screen_size(self) -> None:
        self.app.resize(120, 40)

        context = self.app.render_context()

        self.assertEqual((context.width, context.height), (120, 40))
        self.assertFalse(context.searching)

    def test_q_exits(self) -> None:
        self.press("q")

        self.assertTrue(self.app.session.exit_requested())


if __name__ == "__main__":
    unittest.main()
