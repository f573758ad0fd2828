"""Pattern-entry and keymap-help popup state."""

from __future__ import annotations


class SearchPopup:
    """Editable pattern shown over the result list while visible."""

    def __init__(self) -> None:
        self.visible = False
        self.pattern = ""

    def open(self, pattern: str) -> None:
        self.pattern = pattern
        self.visible = True

    def close(self) -> str:
        self.visible = False
        return self.pattern

    def insert_char(self, ch: str) -> None:
        self.pattern += ch

    def remove_char(self) -> None:
        self.pattern = self.pattern[:-1]


class KeymapPopup:
    def __init__(self) -> None:
        self.visible = False
        self.scroll_y = 0

    def toggle(self) -> None:
        self.visible = not self.visible
        if self.visible:
            self.scroll_y = 0

    def scroll(self, delta: int, content_rows: int, window_rows: int) -> None:
        limit = max(0, content_rows - window_rows)
        self.scroll_y = max(0, min(limit, self.scroll_y + delta))
