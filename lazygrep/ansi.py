"""ANSI-aware text measurement and line shaping utilities.

Clipping and padding preserve escape sequences and count wide characters as
two columns so panes stay aligned when colour codes are present.
"""

from __future__ import annotations

import re
import unicodedata

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
TAB_WIDTH = 4
RESET = "\033[0m"


def char_display_width(ch: str) -> int:
    """Return terminal column width for one character.

    Tabs are rendered as four spaces, combining marks consume no columns,
    and East Asian wide/fullwidth characters consume two.
    """
    if ch == "\t":
        return TAB_WIDTH
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def display_width(text: str) -> int:
    """Display width of ``text`` ignoring ANSI escape sequences."""
    plain = ANSI_ESCAPE_RE.sub("", text)
    return sum(char_display_width(ch) for ch in plain)


def clip_ansi_line(text: str, max_cols: int) -> str:
    """Trim a styled line to at most ``max_cols`` display columns.

    ANSI escape sequences are preserved verbatim and do not count toward width.
    """
    if max_cols <= 0 or not text:
        return ""

    out: list[str] = []
    col = 0
    i = 0
    n = len(text)
    while i < n:
        if text[i] == "\x1b":
            match = ANSI_ESCAPE_RE.match(text, i)
            if match:
                out.append(match.group(0))
                i = match.end()
                continue
        ch = text[i]
        w = char_display_width(ch)
        if col + w > max_cols:
            break
        out.append(" " * TAB_WIDTH if ch == "\t" else ch)
        col += w
        i += 1

    return "".join(out)


def fit_ansi_line(text: str, width: int) -> str:
    """Clip or right-pad a styled line to exactly ``width`` columns."""
    clipped = clip_ansi_line(text, width)
    used = display_width(clipped)
    return clipped + " " * max(0, width - used)


def hex_to_rgb(value: str) -> tuple[int, int, int]:
    value = value.lstrip("#")
    if len(value) == 3:
        value = "".join(ch * 2 for ch in value)
    return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)


def truecolor_sgr(fg: str | None = None, bg: str | None = None, *, bold: bool = False,
                  italic: bool = False, underline: bool = False) -> str:
    """Build one SGR sequence from ``rrggbb`` colours and font flags."""
    params: list[str] = []
    if bold:
        params.append("1")
    if italic:
        params.append("3")
    if underline:
        params.append("4")
    if fg:
        r, g, b = hex_to_rgb(fg)
        params.append(f"38;2;{r};{g};{b}")
    if bg:
        r, g, b = hex_to_rgb(bg)
        params.append(f"48;2;{r};{g};{b}")
    if not params:
        return ""
    return f"\033[{';'.join(params)}m"
