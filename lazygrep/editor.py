"""Editor command resolution and launch.

Builtin editors know how to jump to a line; a custom command template names
the program and places ``{file_name}`` and ``{line_number}`` in its
arguments. Launching leaves raw/alternate-screen mode for the duration of
the child process and returns an error message instead of raising.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable

logger = logging.getLogger(__name__)

LAZYGREP_EDITOR_ENV = "LAZYGREP_EDITOR"
VISUAL_ENV = "VISUAL"
EDITOR_ENV = "EDITOR"


class EditorCommandError(ValueError):
    pass


class Editor(str, Enum):
    VIM = "vim"
    NEOVIM = "neovim"
    NVIM = "nvim"
    NANO = "nano"
    CODE = "code"
    VSCODE = "vscode"
    CODE_INSIDERS = "code-insiders"
    EMACS = "emacs"
    EMACSCLIENT = "emacsclient"
    HX = "hx"
    HELIX = "helix"
    SUBL = "subl"
    SUBLIME_TEXT = "sublime-text"
    MICRO = "micro"
    INTELLIJ = "intellij"
    GOLAND = "goland"
    PYCHARM = "pycharm"
    LESS = "less"

    @property
    def program(self) -> str:
        return _PROGRAMS.get(self, self.value)

    def args(self, file_name: str, line_number: int) -> list[str]:
        if self in _PLUS_LINE_EDITORS:
            return [f"+{line_number}", file_name]
        if self in {Editor.CODE, Editor.VSCODE, Editor.CODE_INSIDERS}:
            return ["-g", f"{file_name}:{line_number}"]
        if self in {Editor.EMACS, Editor.EMACSCLIENT}:
            return ["-nw", f"+{line_number}", file_name]
        if self in {Editor.INTELLIJ, Editor.GOLAND, Editor.PYCHARM}:
            return ["--line", str(line_number), file_name]
        return [f"{file_name}:{line_number}"]


_PROGRAMS: dict[Editor, str] = {
    Editor.NEOVIM: "nvim",
    Editor.VSCODE: "code",
    Editor.SUBLIME_TEXT: "subl",
    Editor.INTELLIJ: "idea",
}

_PLUS_LINE_EDITORS = frozenset(
    {Editor.VIM, Editor.NEOVIM, Editor.NVIM, Editor.NANO, Editor.MICRO, Editor.LESS}
)


def editor_names() -> tuple[str, ...]:
    return tuple(editor.value for editor in Editor)


def parse_editor(name: str) -> Editor:
    try:
        return Editor(name.strip().lower())
    except ValueError:
        raise EditorCommandError(
            f"Unsupported editor '{name}', possible variants: [{', '.join(editor_names())}]"
        ) from None


def _editor_from_env(name: str) -> Editor | None:
    value = os.environ.get(name, "").strip()
    if not value:
        return None
    program = value.split()[0]
    try:
        return parse_editor(os.path.basename(program))
    except EditorCommandError as exc:
        raise EditorCommandError(f'"{value}" read from ${name}: {exc}') from None


@dataclass(frozen=True)
class EditorCommand:
    program: str
    editor: Editor | None = None
    template: str = ""

    @classmethod
    def resolve(cls, custom_command: str | None = None, editor: str | None = None) -> EditorCommand:
        """Pick the command by precedence.

        ``custom_command`` wins, then ``editor``, then ``$LAZYGREP_EDITOR``,
        ``$VISUAL`` and ``$EDITOR``; vim is the default.
        """
        if custom_command:
            return cls.custom(custom_command)
        if editor:
            chosen = parse_editor(editor)
            return cls(program=chosen.program, editor=chosen)
        for env_name in (LAZYGREP_EDITOR_ENV, VISUAL_ENV, EDITOR_ENV):
            chosen = _editor_from_env(env_name)
            if chosen is not None:
                return cls(program=chosen.program, editor=chosen)
        return cls(program=Editor.VIM.program, editor=Editor.VIM)

    @classmethod
    def custom(cls, command: str) -> EditorCommand:
        program, sep, args = command.strip().partition(" ")
        context = f"Incorrect editor command: '{command}'"
        if not sep or not program:
            raise EditorCommandError(f"{context}. Expected program and its arguments.")
        if args.count("{file_name}") != 1:
            raise EditorCommandError(f"{context}. Expected one occurrence of '{{file_name}}'.")
        if args.count("{line_number}") != 1:
            raise EditorCommandError(f"{context}. Expected one occurrence of '{{line_number}}'.")
        return cls(program=program, template=args)

    def args(self, file_name: str, line_number: int) -> list[str]:
        if self.editor is not None:
            return self.editor.args(file_name, line_number)
        filled = self.template.replace("{file_name}", file_name)
        filled = filled.replace("{line_number}", str(line_number))
        return filled.split()

    def argv(self, file_name: str, line_number: int) -> list[str]:
        return [self.program, *self.args(file_name, line_number)]

    def __str__(self) -> str:
        return self.program


def launch_editor(
    command: EditorCommand,
    target: Path,
    line_number: int,
    disable_tui_mode: Callable[[], None],
    enable_tui_mode: Callable[[], None],
) -> str | None:
    """Run the editor on ``target`` at ``line_number`` and wait for it."""
    executable = shutil.which(command.program)
    if executable is None:
        logger.warning(f"Editor program not found: {command.program}")
        return f"Failed to open editor '{command.program}'. Is it installed?"

    argv = [executable, *command.args(str(target), line_number)]
    logger.info(f"Opening {target}:{line_number} with {command.program}")
    disable_tui_mode()
    try:
        completed = subprocess.run(argv, check=False)
    except OSError as exc:
        logger.warning(f"Editor launch failed: {exc}")
        return f"Failed to open editor '{command.program}': {exc}"
    finally:
        enable_tui_mode()
    if completed.returncode != 0:
        logger.warning(f"Editor exited with status {completed.returncode}")
        return f"Editor '{command.program}' exited with status {completed.returncode}."
    return None
