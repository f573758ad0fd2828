"""Modal key-sequence state machine.

Normal mode accumulates character keys into a pending buffer and resolves it
against a sequence table: a full match dispatches, a strict prefix waits
(``Incomplete``), anything else is rejected (``Invalid``) and cleared.
Non-character keys clear the buffer and dispatch directly. Text-insertion
mode edits the search popup pattern; help mode scrolls the keymap popup.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from .bindings import KeyBinding, KeyBindingTable

SEARCH_POPUP_KEY = "F5"
HELP_POPUP_KEY = "F1"


@dataclass(frozen=True)
class Valid:
    pass


@dataclass(frozen=True)
class Incomplete:
    text: str


@dataclass(frozen=True)
class Invalid:
    text: str


InputState = Valid | Incomplete | Invalid


class InputMode(str, Enum):
    NORMAL = "normal"
    INSERT = "insert"
    HELP = "help"


@dataclass(frozen=True)
class InputActions:
    """Operations the state machine dispatches to."""

    next_match: Callable[[], None]
    previous_match: Callable[[], None]
    next_file: Callable[[], None]
    previous_file: Callable[[], None]
    top: Callable[[], None]
    bottom: Callable[[], None]
    remove_current_entry: Callable[[], None]
    remove_current_file: Callable[[], None]
    toggle_vertical_viewer: Callable[[], None]
    toggle_horizontal_viewer: Callable[[], None]
    open_file: Callable[[], None]
    exit: Callable[[], None]
    open_search_popup: Callable[[], None]
    confirm_search_popup: Callable[[], None]
    cancel_search_popup: Callable[[], None]
    insert_char: Callable[[str], None]
    remove_char: Callable[[], None]
    toggle_help: Callable[[], None]
    scroll_help: Callable[[int], None]


def is_character_key(key: str) -> bool:
    """Key tokens for special keys are multi-letter names; characters are single code points."""
    return len(key) == 1 and key.isprintable()


class InputHandler:
    def __init__(self, actions: InputActions) -> None:
        self.actions = actions
        self.mode = InputMode.NORMAL
        self._buffer = ""
        self._state: InputState = Valid()
        a = actions
        self._sequences = KeyBindingTable().register(
            KeyBinding(("j",), a.next_match),
            KeyBinding(("k",), a.previous_match),
            KeyBinding(("l",), a.next_file),
            KeyBinding(("h",), a.previous_file),
            KeyBinding(("gg",), a.top),
            KeyBinding(("G",), a.bottom),
            KeyBinding(("dd",), a.remove_current_entry),
            KeyBinding(("dw",), a.remove_current_file),
            KeyBinding(("v",), a.toggle_vertical_viewer),
            KeyBinding(("s",), a.toggle_horizontal_viewer),
            KeyBinding(("q",), a.exit),
        )
        self._special_keys = KeyBindingTable().register(
            KeyBinding(("DOWN",), a.next_match),
            KeyBinding(("UP",), a.previous_match),
            KeyBinding(("RIGHT", "PAGE_DOWN"), a.next_file),
            KeyBinding(("LEFT", "PAGE_UP"), a.previous_file),
            KeyBinding(("HOME",), a.top),
            KeyBinding(("END",), a.bottom),
            KeyBinding(("DELETE",), a.remove_current_entry),
            KeyBinding(("ENTER",), a.open_file),
            KeyBinding(("CTRL_C",), a.exit),
            KeyBinding((SEARCH_POPUP_KEY,), self._enter_insert_mode),
            KeyBinding((HELP_POPUP_KEY,), self._enter_help_mode),
        )

    @property
    def state(self) -> InputState:
        return self._state

    def handle_key(self, key: str) -> None:
        if not key:
            return
        if self.mode == InputMode.INSERT:
            self._handle_insert_key(key)
        elif self.mode == InputMode.HELP:
            self._handle_help_key(key)
        elif is_character_key(key):
            self._handle_char(key)
        else:
            self._handle_special(key)

    def _handle_char(self, character: str) -> None:
        self._buffer += character
        self._state = Valid()

        handler = self._sequences.lookup(self._buffer)
        if handler is not None:
            self._buffer = ""
            handler()
        elif self._sequences.is_prefix(self._buffer):
            self._state = Incomplete(self._buffer)
        else:
            self._state = Invalid(self._buffer)
            self._buffer = ""

    def _handle_special(self, key: str) -> None:
        self._buffer = ""
        if key == "ESC":
            if not isinstance(self._state, Incomplete):
                self.actions.exit()
        else:
            self._special_keys.dispatch(key)
        self._state = Valid()

    def _enter_insert_mode(self) -> None:
        self.mode = InputMode.INSERT
        self.actions.open_search_popup()

    def _enter_help_mode(self) -> None:
        self.mode = InputMode.HELP
        self.actions.toggle_help()

    def _handle_insert_key(self, key: str) -> None:
        if key in {"ENTER", SEARCH_POPUP_KEY}:
            self.mode = InputMode.NORMAL
            self.actions.confirm_search_popup()
        elif key in {"ESC", "CTRL_C"}:
            self.mode = InputMode.NORMAL
            self.actions.cancel_search_popup()
        elif key == "BACKSPACE":
            self.actions.remove_char()
        elif is_character_key(key):
            self.actions.insert_char(key)

    def _handle_help_key(self, key: str) -> None:
        if key in {HELP_POPUP_KEY, "ESC", "q"}:
            self.mode = InputMode.NORMAL
            self.actions.toggle_help()
        elif key in {"j", "DOWN"}:
            self.actions.scroll_help(1)
        elif key in {"k", "UP"}:
            self.actions.scroll_help(-1)
