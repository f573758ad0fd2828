"""Source loading, sanitization, and syntax highlighting.

Highlighting runs Pygments over the whole file and splits the token stream
into per-line ``(SegmentStyle, text)`` runs the renderer turns into ANSI.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from pygments.lexers import TextLexer, get_lexer_for_filename
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

DEFAULT_STYLE = "monokai"

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")


@dataclass(frozen=True)
class SegmentStyle:
    """Foreground/background as ``rrggbb`` hex strings plus font flags."""

    fg: str | None = None
    bg: str | None = None
    bold: bool = False
    italic: bool = False
    underline: bool = False

    def with_bg(self, bg: str | None) -> SegmentStyle:
        return SegmentStyle(self.fg, bg, self.bold, self.italic, self.underline)


PLAIN = SegmentStyle()

StyledLine = list[tuple[SegmentStyle, str]]


def read_text(path: Path) -> str:
    """Read text using tolerant encoding fallback order.

    Attempts UTF-8, UTF-8 with BOM, then latin-1; as a final fallback decodes
    with UTF-8 replacement semantics. Line endings are left untranslated.
    """
    data = path.read_bytes()
    for encoding in ("utf-8", "utf-8-sig", "latin-1"):
        try:
            return data.decode(encoding)
        except UnicodeDecodeError:
            continue
    return data.decode("utf-8", errors="replace")


def sanitize_terminal_text(source: str) -> str:
    """Escape terminal control bytes to avoid side effects (bell, cursor moves, etc.)."""
    if _CONTROL_RE.search(source) is None:
        return source

    out: list[str] = []
    for ch in source:
        code = ord(ch)
        if ch in {"\n", "\r", "\t"}:
            out.append(ch)
            continue
        # C0 controls + DEL + C1 controls.
        if code < 32 or code == 127 or 0x80 <= code <= 0x9F:
            out.append(f"\\x{code:02x}")
            continue
        out.append(ch)
    return "".join(out)


def _load_style(name: str):
    try:
        return get_style_by_name(name)
    except ClassNotFound:
        return get_style_by_name(DEFAULT_STYLE)


def _lexer_for(path: Path, source: str):
    try:
        return get_lexer_for_filename(path.name, source, stripnl=False)
    except ClassNotFound:
        return TextLexer(stripnl=False)


def _segment_style(style_class, token_type, cache: dict) -> SegmentStyle:
    cached = cache.get(token_type)
    if cached is not None:
        return cached
    token_style = style_class.style_for_token(token_type)
    segment = SegmentStyle(
        fg=token_style.get("color") or None,
        bg=None,
        bold=bool(token_style.get("bold")),
        italic=bool(token_style.get("italic")),
        underline=bool(token_style.get("underline")),
    )
    cache[token_type] = segment
    return segment


CARRIAGE_RETURN_SYMBOL = "␍"


def split_source_lines(source: str) -> list[str]:
    """Split on ``\\n`` only, dropping one trailing ``\\r`` per line.

    Numbering matches the search engine: a lone ``\\r`` or form feed never
    starts a new line, and a final terminator does not add an empty line.
    """
    lines = source.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def highlight_source(source: str, path: Path, style: str = DEFAULT_STYLE) -> list[StyledLine]:
    """Split Pygments tokens for ``source`` into styled lines.

    Line terminators are dropped; a line with no text is an empty list.
    """
    style_class = _load_style(style)
    source_lines = split_source_lines(source)
    # Pygments turns every lone \r into \n, so show it as a symbol instead.
    text = "\n".join(line.replace("\r", CARRIAGE_RETURN_SYMBOL) for line in source_lines)
    lexer = _lexer_for(path, text)

    lines: list[StyledLine] = [[]]
    cache: dict = {}
    for token_type, value in lexer.get_tokens(text):
        segment_style = _segment_style(style_class, token_type, cache)
        parts = value.split("\n")
        for index, part in enumerate(parts):
            if index > 0:
                lines.append([])
            part = sanitize_terminal_text(part)
            if part:
                lines[-1].append((segment_style, part))
    # Lexers append a trailing newline; trim back to the source line count.
    return lines[: len(source_lines)]


def highlight_file(path: Path, style: str = DEFAULT_STYLE) -> list[StyledLine]:
    return highlight_source(read_text(path), path, style)
