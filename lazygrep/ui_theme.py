"""UI theme definitions and selection helpers.

Themes are ANSI palettes for the result list and chrome plus the Pygments
style name used by the context viewer.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UITheme:
    """Semantic palette used by renderers."""

    name: str
    reset: str
    file_path: str
    line_number: str
    match: str
    selected: str
    list_divider: str
    # ``rrggbb`` background for the focus line of the context viewer.
    highlight_bg: str
    bottom_bar: str
    bottom_bar_input: str
    invalid_input: str
    status_searching: str
    status_finished: str
    status_error: str
    popup_border: str
    popup_title: str
    help_heading: str
    help_key: str
    help_dim: str
    syntax_style: str


DARK_THEME = UITheme(
    name="dark",
    reset="\033[0m",
    file_path="\033[95m",
    line_number="\033[32m",
    match="\033[31m",
    selected="\033[48;2;58;58;58m",
    list_divider="\033[2m",
    highlight_bg="3a3a3a",
    bottom_bar="\033[48;2;58;58;58;38;2;147;147;147m",
    bottom_bar_input="\033[48;2;58;58;58;38;2;147;147;147m",
    invalid_input="\033[48;2;58;58;58;31m",
    status_searching="\033[1;48;5;25;38;5;231m",
    status_finished="\033[1;48;5;28;38;5;231m",
    status_error="\033[1;48;5;124;38;5;231m",
    popup_border="\033[32m",
    popup_title="\033[1;32m",
    help_heading="\033[1;38;5;81m",
    help_key="\033[38;5;229m",
    help_dim="\033[2;38;5;250m",
    syntax_style="monokai",
)

LIGHT_THEME = UITheme(
    name="light",
    reset="\033[0m",
    file_path="\033[35m",
    line_number="\033[32m",
    match="\033[31m",
    selected="\033[48;2;220;220;220m",
    list_divider="\033[2m",
    highlight_bg="dcdcdc",
    bottom_bar="\033[48;2;220;220;220;38;2;60;60;60m",
    bottom_bar_input="\033[48;2;220;220;220;38;2;60;60;60m",
    invalid_input="\033[48;2;220;220;220;31m",
    status_searching="\033[1;48;5;25;38;5;231m",
    status_finished="\033[1;48;5;28;38;5;231m",
    status_error="\033[1;48;5;124;38;5;231m",
    popup_border="\033[32m",
    popup_title="\033[1;32m",
    help_heading="\033[1;38;5;25m",
    help_key="\033[38;5;94m",
    help_dim="\033[2;38;5;240m",
    syntax_style="default",
)

_THEMES: dict[str, UITheme] = {
    DARK_THEME.name: DARK_THEME,
    LIGHT_THEME.name: LIGHT_THEME,
}


def available_theme_names() -> tuple[str, ...]:
    return tuple(sorted(_THEMES.keys()))


def normalize_theme_name(name: str | None) -> str:
    """Return a valid theme name, falling back to dark."""
    if not name:
        return DARK_THEME.name
    candidate = str(name).strip().lower()
    if candidate in _THEMES:
        return candidate
    return DARK_THEME.name


def resolve_theme(name: str | None) -> UITheme:
    return _THEMES[normalize_theme_name(name)]


__all__ = [
    "UITheme",
    "DARK_THEME",
    "LIGHT_THEME",
    "available_theme_names",
    "normalize_theme_name",
    "resolve_theme",
]
