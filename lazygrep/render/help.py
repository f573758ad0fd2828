"""Keymap help popup content and drawing.

Rendering helpers here are presentation-only and side-effect free: they
return ANSI strings that use absolute cursor addressing.
"""

from __future__ import annotations

from ..ansi import clip_ansi_line, fit_ansi_line
from ..ui_theme import UITheme

KEYMAP_SECTIONS: tuple[tuple[str, tuple[tuple[str, str], ...]], ...] = (
    (
        "Navigation",
        (
            ("j / Down", "next match"),
            ("k / Up", "previous match"),
            ("l / Right / PageDown", "next file"),
            ("h / Left / PageUp", "previous file"),
            ("gg / Home", "first match"),
            ("G / End", "last match"),
        ),
    ),
    (
        "Results",
        (
            ("dd / Delete", "remove selected match"),
            ("dw", "remove selected file"),
            ("Enter", "open selection in editor"),
        ),
    ),
    (
        "Context viewer",
        (
            ("v", "toggle vertical split"),
            ("s", "toggle horizontal split"),
        ),
    ),
    (
        "Search",
        (
            ("F5", "edit pattern and search again"),
            ("Enter / F5", "confirm pattern (in popup)"),
            ("Esc / Ctrl+C", "close pattern popup"),
        ),
    ),
    (
        "General",
        (
            ("F1", "toggle this help"),
            ("q / Esc", "quit"),
        ),
    ),
)

KEYMAP_TITLE = "Keybindings"


def keymap_lines(theme: UITheme) -> list[str]:
    lines: list[str] = []
    for index, (heading, rows) in enumerate(KEYMAP_SECTIONS):
        if index:
            lines.append("")
        lines.append(f"{theme.help_heading}{heading}{theme.reset}")
        for keys, description in rows:
            lines.append(f"  {theme.help_key}{keys:<22}{theme.reset}{description}")
    lines.append("")
    lines.append(f"{theme.help_dim}Press F1 / Esc / q to close{theme.reset}")
    return lines


def keymap_content_rows() -> int:
    return sum(len(rows) + 1 for _, rows in KEYMAP_SECTIONS) + len(KEYMAP_SECTIONS) - 1 + 2


def popup_box(width: int, height: int, width_percent: int, height_percent: int) -> tuple[int, int, int, int]:
    """Return ``(x, y, w, h)`` of a centred box, 0-based, at least 3x3."""
    w = max(3, min(width, width * width_percent // 100))
    h = max(3, min(height, height * height_percent // 100))
    x = max(0, (width - w) // 2)
    y = max(0, (height - h) // 2)
    return x, y, w, h


def keymap_window_rows(height: int) -> int:
    _, _, _, h = popup_box(1, height, 80, 80)
    return max(1, h - 2)


def draw_box(x: int, y: int, w: int, h: int, title: str, theme: UITheme) -> list[str]:
    """Rounded frame with a centred title; the interior is cleared."""
    inner_w = max(1, w - 2)
    out: list[str] = []
    title = clip_ansi_line(title, max(0, inner_w - 2))
    left = max(0, (inner_w - len(title)) // 2)
    top = "─" * left + f"{theme.popup_title}{title}{theme.reset}{theme.popup_border}" + "─" * max(0, inner_w - left - len(title))
    out.append(f"\033[{y + 1};{x + 1}H{theme.popup_border}╭{top}╮{theme.reset}")
    for row in range(max(0, h - 2)):
        out.append(f"\033[{y + 2 + row};{x + 1}H{theme.popup_border}│{theme.reset}")
        out.append(" " * inner_w)
        out.append(f"{theme.popup_border}│{theme.reset}")
    out.append(f"\033[{y + h};{x + 1}H{theme.popup_border}╰{'─' * inner_w}╯{theme.reset}")
    return out


def render_keymap_popup(width: int, height: int, scroll_y: int, theme: UITheme) -> str:
    x, y, w, h = popup_box(width, height, 80, 80)
    out = draw_box(x, y, w, h, KEYMAP_TITLE, theme)
    lines = keymap_lines(theme)
    body_rows = max(0, h - 2)
    start = max(0, min(scroll_y, max(0, len(lines) - body_rows)))
    for row, line in enumerate(lines[start : start + body_rows]):
        out.append(f"\033[{y + 2 + row};{x + 3}H")
        out.append(fit_ansi_line(line, max(0, w - 4)))
        out.append(theme.reset)
    return "".join(out)
