"""Keyboard input: raw key decoding and the modal key-sequence state machine."""

from .bindings import KeyBinding, KeyBindingTable
from .handler import (
    InputActions,
    InputHandler,
    InputMode,
    InputState,
    Incomplete,
    Invalid,
    Valid,
)
from .reader import read_key

__all__ = [
    "KeyBinding",
    "KeyBindingTable",
    "InputActions",
    "InputHandler",
    "InputMode",
    "InputState",
    "Incomplete",
    "Invalid",
    "Valid",
    "read_key",
]
