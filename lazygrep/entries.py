"""Match records produced by search workers and consumed by the result list."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

NOT_UTF8_PLACEHOLDER = "Not UTF-8"


@dataclass(frozen=True)
class GrepMatch:
    line_number: int  # 1-based
    text: str
    spans: tuple[tuple[int, int], ...] = ()  # byte offsets into ``text``


@dataclass(frozen=True)
class HeaderEntry:
    path: Path


@dataclass(frozen=True)
class MatchEntry:
    line_number: int
    text: str
    spans: tuple[tuple[int, int], ...] = ()

    def segments(self) -> list[tuple[str, bool]]:
        """Split ``text`` into ``(chunk, is_match)`` pieces using byte spans."""
        raw = self.text.encode("utf-8")
        out: list[tuple[str, bool]] = []
        cursor = 0
        for start, end in self.spans:
            start = max(cursor, min(start, len(raw)))
            end = max(start, min(end, len(raw)))
            if start > cursor:
                out.append((raw[cursor:start].decode("utf-8", errors="replace"), False))
            if end > start:
                out.append((raw[start:end].decode("utf-8", errors="replace"), True))
            cursor = end
        if cursor < len(raw) or not out:
            out.append((raw[cursor:].decode("utf-8", errors="replace"), False))
        return out


Entry = HeaderEntry | MatchEntry


@dataclass(frozen=True)
class FileEntry:
    """All matches found in one file, in line order."""

    path: Path
    matches: tuple[GrepMatch, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "matches", tuple(self.matches))

    def get_matches_count(self) -> int:
        return len(self.matches)

    def get_entries(self) -> list[Entry]:
        entries: list[Entry] = [HeaderEntry(self.path)]
        entries.extend(MatchEntry(m.line_number, m.text, tuple(m.spans)) for m in self.matches)
        return entries
