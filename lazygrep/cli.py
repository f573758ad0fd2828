"""Command-line front door for lazygrep.

Parses CLI options, merges them over the persisted config, validates the
search and editor settings, then hands control to the interactive runtime.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from .config import load_config, save_theme_name, search_defaults
from .editor import EditorCommand, EditorCommandError, editor_names
from .log import configure_logging
from .search import CaseMode, SearchConfig, SearchConfigError
from .search.config import format_type_list, parse_sort_key
from .ui_theme import available_theme_names, normalize_theme_name, resolve_theme
from .viewer import ViewerLayout

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lazygrep",
        description="Interactive grep: browse matches, preview context, open them in an editor.",
    )
    parser.add_argument("pattern", nargs="?", help="Regular expression used for searching.")
    parser.add_argument("paths", nargs="*", type=Path, help="Files or directories to search (default: .).")

    case = parser.add_argument_group("case")
    case.add_argument("-i", "--ignore-case", action="store_true", default=None, help="Search case insensitively.")
    case.add_argument(
        "-S",
        "--smart-case",
        action="store_true",
        default=None,
        help="Search case insensitively if the pattern is all lowercase.",
    )
    parser.add_argument("-w", "--word-regexp", action="store_true", default=None, help="Only show matches surrounded by word boundaries.")

    walk = parser.add_argument_group("walking")
    walk.add_argument("-.", "--hidden", action="store_true", default=None, help="Search hidden files and directories.")
    walk.add_argument("-L", "--follow", action="store_true", default=None, help="Follow symbolic links.")
    walk.add_argument("--no-ignore", action="store_true", default=None, help="Don't respect .gitignore files.")
    walk.add_argument(
        "-g",
        "--glob",
        action="append",
        metavar="GLOB",
        help="Include files matching GLOB; prefix with ! to exclude. Repeatable.",
    )
    walk.add_argument("-t", "--type", action="append", metavar="TYPE", help="Only search files of TYPE. Repeatable.")
    walk.add_argument("-T", "--type-not", action="append", metavar="TYPE", help="Do not search files of TYPE. Repeatable.")
    walk.add_argument("--type-list", action="store_true", help="Show all supported file types and their globs, then exit.")
    sort = walk.add_mutually_exclusive_group()
    sort.add_argument("--sort", metavar="KEY", help="Sort results by path, modified, accessed or created.")
    sort.add_argument("--sortr", metavar="KEY", help="Sort results in reverse order by KEY.")

    ui = parser.add_argument_group("interface")
    ui.add_argument("--editor", help=f"Text editor used to open files ({', '.join(editor_names())}).")
    ui.add_argument(
        "--custom-command",
        metavar="CMD",
        help="Custom editor command, e.g. \"kak +{line_number} {file_name}\".",
    )
    ui.add_argument("--theme", help=f"UI theme ({', '.join(available_theme_names())}).")
    ui.add_argument(
        "--context-viewer",
        choices=[layout.value for layout in ViewerLayout],
        help="Open the context viewer at startup.",
    )
    parser.add_argument("--log-file", type=Path, help="Write debug logs to this file.")
    return parser


def _pick(cli_value, defaults: dict[str, object], key: str, fallback=None):
    if cli_value is not None:
        return cli_value
    return defaults.get(key, fallback)


def resolve_case_mode(ignore_case: bool, smart_case: bool) -> CaseMode:
    if ignore_case:
        return CaseMode.INSENSITIVE
    if smart_case:
        return CaseMode.SMART
    return CaseMode.SENSITIVE


def build_search_config(args: argparse.Namespace, defaults: dict[str, object]) -> SearchConfig:
    """Merge CLI values over config defaults; raises ``SearchConfigError``."""
    paths = tuple(args.paths) or (Path("."),)
    for path in paths:
        if not path.exists():
            raise SearchConfigError(f"Path not found: {path}")

    if args.sort is not None or args.sortr is not None:
        sort_value, reverse = (args.sortr, True) if args.sortr is not None else (args.sort, False)
    elif "sortr" in defaults:
        sort_value, reverse = defaults["sortr"], True
    else:
        sort_value, reverse = defaults.get("sort"), False

    return SearchConfig(
        pattern=args.pattern,
        paths=paths,
        case_mode=resolve_case_mode(
            bool(_pick(args.ignore_case, defaults, "ignore_case", False)),
            bool(_pick(args.smart_case, defaults, "smart_case", False)),
        ),
        word_regexp=bool(_pick(args.word_regexp, defaults, "word_regexp", False)),
        search_hidden=bool(_pick(args.hidden, defaults, "hidden", False)),
        follow_links=bool(_pick(args.follow, defaults, "follow", False)),
        no_ignore=bool(_pick(args.no_ignore, defaults, "no_ignore", False)),
        globs=tuple(_pick(args.glob, defaults, "glob", ())),
        types=tuple(_pick(args.type, defaults, "type", ())),
        types_not=tuple(_pick(args.type_not, defaults, "type_not", ())),
        sort_by=parse_sort_key(sort_value),
        sort_reversed=reverse,
    )


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and launch the interactive search browser."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.type_list:
        sys.stdout.write(format_type_list())
        return
    if args.pattern is None:
        parser.error("the following arguments are required: pattern")

    configure_logging(args.log_file)
    defaults = search_defaults(load_config())

    try:
        config = build_search_config(args, defaults)
    except SearchConfigError as exc:
        raise SystemExit(str(exc)) from None

    try:
        editor_command = EditorCommand.resolve(
            _pick(args.custom_command, defaults, "custom_command"),
            _pick(args.editor, defaults, "editor"),
        )
    except EditorCommandError as exc:
        raise SystemExit(str(exc)) from None

    theme_name = normalize_theme_name(_pick(args.theme, defaults, "theme"))
    if args.theme is not None:
        save_theme_name(theme_name)
    layout_value = _pick(args.context_viewer, defaults, "context_viewer", ViewerLayout.NONE.value)
    try:
        layout = ViewerLayout(layout_value)
    except ValueError:
        layout = ViewerLayout.NONE

    if not sys.stdin.isatty() or not sys.stdout.isatty():
        raise SystemExit("lazygrep needs an interactive terminal.")

    from .app import App, run_app
    from .editor import launch_editor
    from .terminal import TerminalController

    stdin_fd = sys.stdin.fileno()
    terminal = TerminalController(stdin_fd, sys.stdout.fileno())

    def launch(path: Path, line_number: int) -> str | None:
        return launch_editor(
            editor_command,
            path,
            line_number,
            terminal.disable_tui_mode,
            terminal.enable_tui_mode,
        )

    app = App(config, resolve_theme(theme_name), layout, launch)
    logger.info(f"lazygrep started in {os.getcwd()}")
    run_app(app, terminal, stdin_fd)


if __name__ == "__main__":
    main()
