"""Syntax-highlighted window around the selected match.

A viewer caches the highlighted lines of one file and re-highlights only when
the selection moves to a different path.
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path

from ..ansi import display_width
from .highlighting import DEFAULT_STYLE, PLAIN, StyledLine, highlight_file

logger = logging.getLogger(__name__)

TAB_REPLACEMENT = "    "


class ContextViewer:
    def __init__(self, style: str = DEFAULT_STYLE) -> None:
        self.style = style
        self.file_path: Path | None = None
        self.lines: list[StyledLine] = []

    def highlight_file_if_needed(self, path: Path) -> None:
        if path == self.file_path:
            return
        self.file_path = path
        try:
            self.lines = highlight_file(path, self.style)
        except OSError as exc:
            logger.warning(f"Cannot highlight {path}: {exc}")
            self.lines = []

    def get_window(
        self,
        first_line: int,
        height: int,
        width: int,
        focus_line: int,
        highlight_bg: str | None,
    ) -> list[StyledLine]:
        """Return exactly ``height`` lines starting at 1-based ``first_line``.

        Lines past the end of the file are empty. The ``focus_line`` is padded
        to ``width`` columns and every segment on it gets ``highlight_bg``.
        """
        window: list[StyledLine] = []
        start = max(first_line, 1)
        for line_number in range(start, start + max(height, 0)):
            index = line_number - 1
            source = self.lines[index] if index < len(self.lines) else []
            line = [(style, text.replace("\t", TAB_REPLACEMENT)) for style, text in source]
            if line_number == focus_line:
                used = sum(display_width(text) for _, text in line)
                if used < width:
                    line.append((PLAIN, " " * (width - used)))
                line = [(style.with_bg(highlight_bg), text) for style, text in line]
            window.append(line)
        return window


def window_start(focus_line: int, height: int) -> int:
    """First line of a window that centres ``focus_line``."""
    return max(1, focus_line - height // 2)


class ViewerLayout(str, Enum):
    NONE = "none"
    VERTICAL = "vertical"
    HORIZONTAL = "horizontal"


class ContextViewerState:
    """Off, or a viewer split to the right (vertical) or below (horizontal)."""

    def __init__(self, style: str = DEFAULT_STYLE, layout: ViewerLayout = ViewerLayout.NONE) -> None:
        self.style = style
        self.layout = ViewerLayout.NONE
        self.viewer: ContextViewer | None = None
        if layout != ViewerLayout.NONE:
            self._switch(layout)

    def _switch(self, layout: ViewerLayout) -> None:
        if layout == ViewerLayout.NONE:
            self.viewer = None
        elif self.viewer is None:
            self.viewer = ContextViewer(self.style)
        self.layout = layout

    def toggle_vertical(self) -> None:
        if self.layout == ViewerLayout.VERTICAL:
            self._switch(ViewerLayout.NONE)
        else:
            self._switch(ViewerLayout.VERTICAL)

    def toggle_horizontal(self) -> None:
        if self.layout == ViewerLayout.HORIZONTAL:
            self._switch(ViewerLayout.NONE)
        else:
            self._switch(ViewerLayout.HORIZONTAL)
