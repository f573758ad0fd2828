"""Flat, index-addressed list of file headers and their matches.

Entries live in one ordered list: every ``HeaderEntry`` is followed by the
``MatchEntry`` items of that file. Navigation is index arithmetic over this
list, and the selection always rests on a match, never on a header.
Counters keep a history of everything ingested and removed, independent of
the live list length.
"""

from __future__ import annotations

from pathlib import Path

from .entries import Entry, FileEntry, HeaderEntry, MatchEntry


class ResultList:
    def __init__(self) -> None:
        self._entries: list[Entry] = []
        self._selected: int | None = None
        self._matches_count = 0
        self._file_entries_count = 0
        self._filtered_matches_count = 0

    @property
    def entries(self) -> list[Entry]:
        return self._entries

    @property
    def selected_index(self) -> int | None:
        return self._selected

    def is_empty(self) -> bool:
        return not self._entries

    def _is_header(self, index: int) -> bool:
        return isinstance(self._entries[index], HeaderEntry)

    def add_entry(self, entry: FileEntry) -> None:
        self._file_entries_count += 1
        self._matches_count += entry.get_matches_count()
        self._entries.extend(entry.get_entries())

        if self._selected is None:
            self.next_match()

    def next_match(self) -> None:
        if self.is_empty():
            return

        i = self._selected
        if i is None:
            index = 1
        elif i == len(self._entries) - 1:
            index = i
        elif self._is_header(i + 1):
            index = i + 2
        else:
            index = i + 1
        self._selected = index

    def previous_match(self) -> None:
        if self.is_empty():
            return

        i = self._selected
        if i is None or i <= 1:
            index = 1
        elif self._is_header(i - 1):
            index = i - 2
        else:
            index = i - 1
        self._selected = index

    def _header_index_for(self, index: int) -> int:
        while index > 0 and not self._is_header(index):
            index -= 1
        return index

    def next_file(self) -> None:
        if self.is_empty():
            return
        if self._selected is None:
            self._selected = 1
            return

        for index in range(self._selected + 1, len(self._entries)):
            if self._is_header(index):
                self._selected = index + 1
                return

    def previous_file(self) -> None:
        if self.is_empty():
            return
        if self._selected is None:
            self._selected = 1
            return

        header = self._header_index_for(self._selected)
        if header == 0:
            return
        self._selected = self._header_index_for(header - 1) + 1

    def top(self) -> None:
        if self.is_empty():
            return
        self._selected = 1

    def bottom(self) -> None:
        if self.is_empty():
            return
        self._selected = len(self._entries) - 1

    def _is_last_match_in_file(self, index: int) -> bool:
        return self._is_header(index - 1) and (
            index == len(self._entries) - 1 or self._is_header(index + 1)
        )

    def remove_current_entry(self) -> None:
        """Remove the selected match; removes the whole file if it was the last one."""
        if self.is_empty() or self._selected is None:
            return

        index = self._selected
        if self._is_last_match_in_file(index):
            self.remove_current_file()
            return

        del self._entries[index]
        self._filtered_matches_count += 1
        if index >= len(self._entries) or self._is_header(index):
            self._selected = index - 1

    def remove_current_file(self) -> None:
        """Remove the selected file's header and matches as one span."""
        if self.is_empty() or self._selected is None:
            return

        selected = self._selected
        header = self._header_index_for(selected)
        next_header = len(self._entries)
        for index in range(selected, len(self._entries)):
            if self._is_header(index):
                next_header = index
                break

        span = next_header - header
        del self._entries[header:next_header]
        self._filtered_matches_count += span - 1

        if not self._entries:
            self._selected = None
        elif selected != 1:
            self._selected = max(header - 1, 1)

    def get_selected_entry(self) -> tuple[Path, int] | None:
        """Resolve the selection to ``(file path, line number)``."""
        if self._selected is None:
            return None

        line_number: int | None = None
        for index in range(self._selected, -1, -1):
            entry = self._entries[index]
            if isinstance(entry, HeaderEntry):
                if line_number is None:
                    return None
                return entry.path, line_number
            if line_number is None:
                line_number = entry.line_number
        return None

    def selected_match(self) -> MatchEntry | None:
        if self._selected is None:
            return None
        entry = self._entries[self._selected]
        return entry if isinstance(entry, MatchEntry) else None

    def get_current_match_index(self) -> int:
        """1-based rank of the selection among live matches; 0 when nothing is selected."""
        if self._selected is None:
            return 0
        return sum(1 for e in self._entries[: self._selected] if isinstance(e, MatchEntry)) + 1

    def get_current_number_of_matches(self) -> int:
        return sum(1 for e in self._entries if isinstance(e, MatchEntry))

    def get_total_number_of_matches(self) -> int:
        return self._matches_count

    def get_total_number_of_file_entries(self) -> int:
        return self._file_entries_count

    def get_filtered_matches_count(self) -> int:
        return self._filtered_matches_count
