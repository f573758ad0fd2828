"""Rendering engine for the result list, context viewer and bottom bar.

Frames are composed as one ANSI string from read-only state and written to
stdout in a single call. Layout: result list on top (left half when the
viewer is split vertically, upper half when split horizontally), bottom bar
on the last row, popups drawn over everything.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass

from ..ansi import fit_ansi_line, truecolor_sgr
from ..entries import HeaderEntry, MatchEntry
from ..input.handler import InputState, Invalid, Incomplete
from ..popups import KeymapPopup, SearchPopup
from ..result_list import ResultList
from ..ui_theme import UITheme
from ..viewer import ContextViewerState, ViewerLayout, window_start
from ..viewer.highlighting import StyledLine, sanitize_terminal_text
from .help import draw_box, popup_box, render_keymap_popup

STATUS_WIDTH = 12
SEARCH_POPUP_TITLE = "Regex Pattern"


@dataclass
class RenderContext:
    result_list: ResultList
    input_state: InputState
    searching: bool
    last_error: str | None
    viewer_state: ContextViewerState
    search_popup: SearchPopup
    keymap_popup: KeymapPopup
    theme: UITheme
    width: int
    height: int
    list_start: int = 0
    editor_error: str | None = None


@dataclass(frozen=True)
class FrameLayout:
    list_rows: int
    list_width: int
    viewer_rows: int
    viewer_width: int
    # 0-based screen row/column where the viewer starts.
    viewer_row: int
    viewer_col: int


def compute_layout(width: int, height: int, layout: ViewerLayout) -> FrameLayout:
    body = max(0, height - 1)
    if layout == ViewerLayout.VERTICAL:
        list_width = width // 2
        return FrameLayout(body, list_width, body, max(0, width - list_width - 1), 0, list_width + 1)
    if layout == ViewerLayout.HORIZONTAL:
        list_rows = body // 2
        return FrameLayout(list_rows, width, max(0, body - list_rows - 1), width, list_rows + 1, 0)
    return FrameLayout(body, width, 0, 0, 0, 0)


def scroll_to_selection(selected: int | None, start: int, rows: int, total: int) -> int:
    """Adjust the list offset so the selection stays visible.

    Scrolling up past the top keeps the selection's header row in view when
    it directly precedes the match.
    """
    if rows <= 0 or selected is None:
        return 0
    if selected < start:
        start = max(0, selected - 1)
    elif selected >= start + rows:
        start = selected - rows + 1
    return max(0, min(start, max(0, total - rows)))


def format_header(entry: HeaderEntry, theme: UITheme) -> str:
    return f"{theme.file_path}{sanitize_terminal_text(str(entry.path))}{theme.reset}"


def format_match(entry: MatchEntry, theme: UITheme, selected: bool = False) -> str:
    base = theme.selected if selected else ""
    out = [f"{base}{theme.line_number} {entry.line_number}: {theme.reset}{base}"]
    for chunk, is_match in entry.segments():
        text = sanitize_terminal_text(chunk)
        if is_match:
            out.append(f"{theme.match}{text}{theme.reset}{base}")
        else:
            out.append(text)
    return "".join(out)


def render_result_rows(result_list: ResultList, start: int, rows: int, width: int, theme: UITheme) -> list[str]:
    entries = result_list.entries
    selected = result_list.selected_index
    out: list[str] = []
    for index in range(start, start + rows):
        if index >= len(entries):
            out.append(" " * width)
            continue
        entry = entries[index]
        if isinstance(entry, HeaderEntry):
            line = format_header(entry, theme)
        else:
            is_selected = index == selected
            line = format_match(entry, theme, is_selected)
            if is_selected:
                out.append(theme.selected + fit_ansi_line(line, width) + theme.reset)
                continue
        out.append(fit_ansi_line(line, width) + theme.reset)
    return out


def styled_line_to_ansi(line: StyledLine, reset: str = "\033[0m") -> str:
    out: list[str] = []
    for style, text in line:
        sgr = truecolor_sgr(
            style.fg, style.bg, bold=style.bold, italic=style.italic, underline=style.underline
        )
        out.append(f"{sgr}{text}{reset}" if sgr else text)
    return "".join(out)


def render_viewer_rows(context: RenderContext, rows: int, width: int) -> list[str]:
    viewer = context.viewer_state.viewer
    selected = context.result_list.get_selected_entry()
    if viewer is None or selected is None or rows <= 0:
        return [" " * width for _ in range(max(0, rows))]
    _, focus_line = selected
    window = viewer.get_window(
        window_start(focus_line, rows), rows, width, focus_line, context.theme.highlight_bg
    )
    return [fit_ansi_line(styled_line_to_ansi(line), width) + context.theme.reset for line in window]


def status_label(searching: bool, last_error: str | None) -> str:
    if searching:
        return "SEARCHING"
    if last_error is not None:
        return "ERROR"
    return "FINISHED"


def summary_text(
    result_list: ResultList,
    searching: bool,
    last_error: str | None,
    editor_error: str | None = None,
) -> str:
    """Run summary, with a pending editor failure appended."""
    notice = f" {editor_error}" if editor_error else ""
    if searching:
        return notice
    if last_error is not None:
        return f" {last_error}{notice}"
    total = result_list.get_total_number_of_matches()
    if total == 0:
        return f" No matches found.{notice}"
    files = result_list.get_total_number_of_file_entries()
    matches_word = "match" if total == 1 else "matches"
    files_word = "file" if files == 1 else "files"
    filtered = result_list.get_filtered_matches_count()
    filtered_text = f" ({filtered} filtered out)" if filtered else ""
    return f" Found {total} {matches_word} in {files} {files_word}{filtered_text}.{notice}"


def selected_info_text(result_list: ResultList) -> str:
    current_total = result_list.get_current_number_of_matches()
    index = result_list.get_current_match_index()
    digits = len(str(current_total))
    return f" | {index:>{digits}}/{current_total} "


def pending_input_text(state: InputState) -> str:
    if isinstance(state, Incomplete):
        return f"{state.text}…"
    if isinstance(state, Invalid):
        return state.text
    return ""


def render_bottom_bar(context: RenderContext) -> str:
    theme = context.theme
    label = status_label(context.searching, context.last_error)
    status_style = {
        "SEARCHING": theme.status_searching,
        "ERROR": theme.status_error,
        "FINISHED": theme.status_finished,
    }[label]
    status = f"{status_style}{label:^{STATUS_WIDTH}}{theme.reset}"

    info = selected_info_text(context.result_list)
    pending = pending_input_text(context.input_state)
    input_style = theme.invalid_input if isinstance(context.input_state, Invalid) else theme.bottom_bar_input
    pending_block = f"{pending:>2}"

    summary_width = max(0, context.width - STATUS_WIDTH - len(pending_block) - len(info))
    summary = fit_ansi_line(
        summary_text(context.result_list, context.searching, context.last_error, context.editor_error),
        summary_width,
    )
    line = (
        f"{status}{theme.bottom_bar}{summary}{theme.reset}"
        f"{input_style}{pending_block}{theme.reset}"
        f"{theme.bottom_bar}{info}{theme.reset}"
    )
    return fit_ansi_line(line, context.width) + theme.reset


def render_search_popup(popup: SearchPopup, width: int, height: int, theme: UITheme) -> str:
    x, y, w, _ = popup_box(width, height, 50, 100)
    h = 3
    y = max(0, (height - h) // 2)
    out = draw_box(x, y, w, h, SEARCH_POPUP_TITLE, theme)
    max_text = max(1, w - 4)
    pattern = sanitize_terminal_text(popup.pattern)
    if len(pattern) > max_text:
        pattern = "…" + pattern[len(pattern) - max_text + 1 :]
    out.append(f"\033[{y + 2};{x + 3}H{pattern}")
    return "".join(out)


def build_frame(context: RenderContext) -> str:
    width = max(1, context.width)
    height = max(1, context.height)
    theme = context.theme
    frame = compute_layout(width, height, context.viewer_state.layout)

    out: list[str] = ["\033[H\033[J"]
    rows = render_result_rows(context.result_list, context.list_start, frame.list_rows, frame.list_width, theme)
    viewer_rows = render_viewer_rows(context, frame.viewer_rows, frame.viewer_width)

    if context.viewer_state.layout == ViewerLayout.VERTICAL:
        for row in range(frame.list_rows):
            out.append(f"\033[{row + 1};1H{rows[row]}")
            out.append(f"{theme.list_divider}│{theme.reset}{viewer_rows[row]}")
    else:
        for row, line in enumerate(rows):
            out.append(f"\033[{row + 1};1H{line}")
        if context.viewer_state.layout == ViewerLayout.HORIZONTAL:
            out.append(f"\033[{frame.list_rows + 1};1H{theme.list_divider}{'─' * width}{theme.reset}")
            for row, line in enumerate(viewer_rows):
                out.append(f"\033[{frame.viewer_row + row + 1};1H{line}")

    out.append(f"\033[{height};1H")
    out.append(render_bottom_bar(context))

    if context.search_popup.visible:
        out.append(render_search_popup(context.search_popup, width, height, theme))
    if context.keymap_popup.visible:
        out.append(render_keymap_popup(width, height, context.keymap_popup.scroll_y, theme))
    return "".join(out)


def render_frame(context: RenderContext) -> None:
    os.write(sys.stdout.fileno(), build_frame(context).encode("utf-8", errors="replace"))
