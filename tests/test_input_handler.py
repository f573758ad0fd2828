"""Tests for the modal key-sequence state machine."""

from __future__ import annotations

import unittest
from dataclasses import fields
from unittest import mock

from lazygrep.input import Incomplete, InputActions, InputHandler, InputMode, Invalid, Valid


def make_actions() -> InputActions:
    return InputActions(**{f.name: mock.Mock(name=f.name) for f in fields(InputActions)})


def feed(handler: InputHandler, *keys: str) -> None:
    for key in keys:
        handler.handle_key(key)


def called(actions: InputActions) -> set[str]:
    return {f.name for f in fields(InputActions) if getattr(actions, f.name).called}


class NormalModeSequenceTests(unittest.TestCase):
    def setUp(self) -> None:
        self.actions = make_actions()
        self.handler = InputHandler(self.actions)

    def test_single_key_sequences_dispatch(self) -> None:
        expectations = {
            "j": "next_match",
            "k": "previous_match",
            "l": "next_file",
            "h": "previous_file",
            "G": "bottom",
            "v": "toggle_vertical_viewer",
            "s": "toggle_horizontal_viewer",
            "q": "exit",
        }
        for key, action in expectations.items():
            with self.subTest(key=key):
                actions = make_actions()
                handler = InputHandler(actions)
                handler.handle_key(key)
                self.assertEqual(called(actions), {action})
                self.assertEqual(handler.state, Valid())

    def test_gg_jumps_to_top_after_incomplete_prefix(self) -> None:
        self.handler.handle_key("g")
        self.assertEqual(self.handler.state, Incomplete("g"))
        self.assertEqual(called(self.actions), set())

        self.handler.handle_key("g")

        self.actions.top.assert_called_once_with()
        self.assertEqual(self.handler.state, Valid())

    def test_dd_and_dw(self) -> None:
        feed(self.handler, "d", "d")
        self.actions.remove_current_entry.assert_called_once_with()

        feed(self.handler, "d", "w")
        self.actions.remove_current_file.assert_called_once_with()

    def test_unknown_sequence_is_invalid_and_cleared(self) -> None:
        feed(self.handler, "d", "x")

        self.assertEqual(self.handler.state, Invalid("dx"))
        self.assertEqual(called(self.actions), set())

        # The buffer was cleared, so a fresh sequence works immediately.
        self.handler.handle_key("j")
        self.actions.next_match.assert_called_once_with()
        self.assertEqual(self.handler.state, Valid())

    def test_unknown_single_key_is_invalid(self) -> None:
        self.handler.handle_key("z")

        self.assertEqual(self.handler.state, Invalid("z"))

    def test_g_then_d_starts_over_as_invalid(self) -> None:
        feed(self.handler, "g", "d")

        self.assertEqual(self.handler.state, Invalid("gd"))
        self.assertEqual(called(self.actions), set())


class NormalModeSpecialKeyTests(unittest.TestCase):
    def setUp(self) -> None:
        self.actions = make_actions()
        self.handler = InputHandler(self.actions)

    def test_special_keys_dispatch_directly(self) -> None:
        expectations = {
            "DOWN": "next_match",
            "UP": "previous_match",
            "RIGHT": "next_file",
            "PAGE_DOWN": "next_file",
            "LEFT": "previous_file",
            "PAGE_UP": "previous_file",
            "HOME": "top",
            "END": "bottom",
            "DELETE": "remove_current_entry",
            "ENTER": "open_file",
            "CTRL_C": "exit",
        }
        for key, action in expectations.items():
            with self.subTest(key=key):
                actions = make_actions()
                handler = InputHandler(actions)
                handler.handle_key(key)
                self.assertEqual(called(actions), {action})

    def test_special_key_clears_pending_prefix(self) -> None:
        feed(self.handler, "g", "DOWN", "g")

        self.actions.next_match.assert_called_once_with()
        self.actions.top.assert_not_called()
        self.assertEqual(self.handler.state, Incomplete("g"))

    def test_escape_exits_when_valid(self) -> None:
        self.handler.handle_key("ESC")

        self.actions.exit.assert_called_once_with()

    def test_escape_exits_when_invalid(self) -> None:
        feed(self.handler, "d", "x", "ESC")

        self.actions.exit.assert_called_once_with()

    def test_escape_only_resets_incomplete_sequence(self) -> None:
        feed(self.handler, "d", "ESC")

        self.actions.exit.assert_not_called()
        self.assertEqual(self.handler.state, Valid())

        self.handler.handle_key("ESC")
        self.actions.exit.assert_called_once_with()

    def test_unbound_special_key_is_ignored(self) -> None:
        feed(self.handler, "F9", "UNKNOWN")

        self.assertEqual(called(self.actions), set())
        self.assertEqual(self.handler.state, Valid())


class InsertModeTests(unittest.TestCase):
    def setUp(self) -> None:
        self.actions = make_actions()
        self.handler = InputHandler(self.actions)
        self.handler.handle_key("F5")

    def test_f5_opens_popup_in_insert_mode(self) -> None:
        self.actions.open_search_popup.assert_called_once_with()
        self.assertEqual(self.handler.mode, InputMode.INSERT)

    def test_characters_are_inserted_not_dispatched(self) -> None:
        feed(self.handler, "j", "Q", "BACKSPACE")

        self.assertEqual(
            [c.args for c in self.actions.insert_char.call_args_list],
            [("j",), ("Q",)],
        )
        self.actions.remove_char.assert_called_once_with()
        self.actions.next_match.assert_not_called()

    def test_enter_confirms_and_returns_to_normal_mode(self) -> None:
        self.handler.handle_key("ENTER")

        self.actions.confirm_search_popup.assert_called_once_with()
        self.assertEqual(self.handler.mode, InputMode.NORMAL)

    def test_f5_confirms(self) -> None:
        self.handler.handle_key("F5")

        self.actions.confirm_search_popup.assert_called_once_with()
        self.assertEqual(self.handler.mode, InputMode.NORMAL)

    def test_escape_and_ctrl_c_cancel_without_exiting(self) -> None:
        for key in ("ESC", "CTRL_C"):
            with self.subTest(key=key):
                actions = make_actions()
                handler = InputHandler(actions)
                feed(handler, "F5", key)
                actions.cancel_search_popup.assert_called_once_with()
                actions.exit.assert_not_called()
                self.assertEqual(handler.mode, InputMode.NORMAL)


class HelpModeTests(unittest.TestCase):
    def test_help_scrolls_and_closes(self) -> None:
        actions = make_actions()
        handler = InputHandler(actions)

        feed(handler, "F1", "j", "DOWN", "k", "q")

        self.assertEqual(actions.toggle_help.call_count, 2)
        self.assertEqual([c.args for c in actions.scroll_help.call_args_list], [(1,), (1,), (-1,)])
        actions.exit.assert_not_called()
        self.assertEqual(handler.mode, InputMode.NORMAL)


if __name__ == "__main__":
    unittest.main()
