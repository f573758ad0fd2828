"""Line-oriented regex matching over file contents.

Patterns are compiled once per run with ``re``. Files are read as bytes and
split into lines; byte offsets of every match are reported so the result list
can colour the exact matched substrings.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from ..entries import NOT_UTF8_PLACEHOLDER, GrepMatch
from .config import CaseMode


class PatternError(ValueError):
    """Raised when a search pattern cannot be compiled."""


@dataclass(frozen=True)
class Matcher:
    pattern: str
    regex: re.Pattern[str]


def _has_uppercase(pattern: str) -> bool:
    # Escapes like ``\W`` or ``\S`` are not literal uppercase characters.
    stripped = re.sub(r"\\.", "", pattern)
    return any(ch.isupper() for ch in stripped)


def compile_pattern(pattern: str, case_mode: CaseMode = CaseMode.SENSITIVE, word: bool = False) -> Matcher:
    """Compile ``pattern`` honoring case mode and whole-word matching."""
    flags = 0
    if case_mode == CaseMode.INSENSITIVE:
        flags |= re.IGNORECASE
    elif case_mode == CaseMode.SMART and not _has_uppercase(pattern):
        flags |= re.IGNORECASE

    source = rf"\b(?:{pattern})\b" if word else pattern
    try:
        regex = re.compile(source, flags)
    except re.error as exc:
        raise PatternError(f"invalid pattern {pattern!r}: {exc}") from exc
    return Matcher(pattern=pattern, regex=regex)


def _byte_spans(text: str, char_spans: list[tuple[int, int]]) -> tuple[tuple[int, int], ...]:
    if text.isascii():
        return tuple(char_spans)
    out: list[tuple[int, int]] = []
    for start, end in char_spans:
        byte_start = len(text[:start].encode("utf-8"))
        byte_end = byte_start + len(text[start:end].encode("utf-8"))
        out.append((byte_start, byte_end))
    return tuple(out)


def search_line(matcher: Matcher, line_number: int, raw_line: bytes) -> GrepMatch | None:
    """Return a match record for one line, or ``None`` when nothing matches."""
    try:
        text = raw_line.decode("utf-8")
        valid_utf8 = True
    except UnicodeDecodeError:
        text = raw_line.decode("utf-8", errors="surrogateescape")
        valid_utf8 = False

    if matcher.regex.search(text) is None:
        return None
    if not valid_utf8:
        return GrepMatch(line_number, NOT_UTF8_PLACEHOLDER, ())

    char_spans = [m.span() for m in matcher.regex.finditer(text) if m.end() > m.start()]
    return GrepMatch(line_number, text, _byte_spans(text, char_spans))


def search_bytes(matcher: Matcher, data: bytes) -> list[GrepMatch]:
    """Search a whole buffer; binary content (NUL bytes) yields no matches."""
    if b"\x00" in data:
        return []

    matches: list[GrepMatch] = []
    lines = data.split(b"\n")
    if lines and lines[-1] == b"":
        lines.pop()
    for idx, raw_line in enumerate(lines):
        if raw_line.endswith(b"\r"):
            raw_line = raw_line[:-1]
        found = search_line(matcher, idx + 1, raw_line)
        if found is not None:
            matches.append(found)
    return matches


def search_path(matcher: Matcher, path: Path) -> list[GrepMatch]:
    """Read ``path`` and search it. ``OSError`` propagates to the caller."""
    with open(path, "rb") as handle:
        data = handle.read()
    return search_bytes(matcher, data)
