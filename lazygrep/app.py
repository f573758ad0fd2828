"""Runtime composition layer and main interactive loop.

``App`` wires the session, input state machine, popups and context viewer
together; ``run_app`` drives it: drain search events, redraw when dirty,
poll one key, then service a pending editor request.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .input import InputActions, InputHandler, read_key
from .popups import KeymapPopup, SearchPopup
from .render import RenderContext, compute_layout, render_frame, scroll_to_selection
from .render.help import keymap_content_rows, keymap_window_rows
from .search import SearchConfig
from .session import LaunchFn, Session
from .terminal import TerminalController
from .ui_theme import UITheme
from .viewer import ContextViewerState, ViewerLayout

logger = logging.getLogger(__name__)

SEARCHING_POLL_MS = 1
IDLE_POLL_MS = 100


def _no_editor(path, line_number) -> str | None:
    return "No editor configured."


@dataclass
class ScreenSize:
    width: int = 80
    height: int = 24


class App:
    def __init__(
        self,
        config: SearchConfig,
        theme: UITheme,
        viewer_layout: ViewerLayout = ViewerLayout.NONE,
        launch: LaunchFn = _no_editor,
        session: Session | None = None,
    ) -> None:
        self.config = config
        self.theme = theme
        self.launch = launch
        self.session = session or Session()
        self.viewer_state = ContextViewerState(theme.syntax_style, viewer_layout)
        self.search_popup = SearchPopup()
        self.keymap_popup = KeymapPopup()
        self.input = InputHandler(self._build_actions())
        self.screen = ScreenSize()
        self.list_start = 0
        self.dirty = True

    def _build_actions(self) -> InputActions:
        # The session swaps its result list on every new search, so resolve it per call.
        def on_results(method_name: str):
            return lambda: getattr(self.session.result_list, method_name)()

        return InputActions(
            next_match=on_results("next_match"),
            previous_match=on_results("previous_match"),
            next_file=on_results("next_file"),
            previous_file=on_results("previous_file"),
            top=on_results("top"),
            bottom=on_results("bottom"),
            remove_current_entry=on_results("remove_current_entry"),
            remove_current_file=on_results("remove_current_file"),
            toggle_vertical_viewer=self.viewer_state.toggle_vertical,
            toggle_horizontal_viewer=self.viewer_state.toggle_horizontal,
            open_file=self.session.open_file,
            exit=self.session.exit,
            open_search_popup=self.open_search_popup,
            confirm_search_popup=self.confirm_search_popup,
            cancel_search_popup=self.search_popup.close,
            insert_char=self.search_popup.insert_char,
            remove_char=self.search_popup.remove_char,
            toggle_help=self.keymap_popup.toggle,
            scroll_help=self.scroll_help,
        )

    def start(self) -> None:
        self.session.search(self.config)
        self.dirty = True

    def open_search_popup(self) -> None:
        current = self.session.config or self.config
        self.search_popup.open(current.pattern)

    def confirm_search_popup(self) -> None:
        pattern = self.search_popup.close()
        if self.session.can_search():
            self.session.search(self.config.with_pattern(pattern))
        else:
            logger.info("search still running; pattern change ignored")

    def scroll_help(self, delta: int) -> None:
        self.keymap_popup.scroll(delta, keymap_content_rows(), keymap_window_rows(self.screen.height))

    def poll_timeout_ms(self) -> int:
        return SEARCHING_POLL_MS if self.session.is_searching() else IDLE_POLL_MS

    def handle_key(self, key: str) -> None:
        if not key:
            return
        self.session.editor_error = None
        self.input.handle_key(key)
        self.dirty = True

    def sync_viewer(self) -> None:
        """Highlight the selected file in the viewer when the selection changed files."""
        viewer = self.viewer_state.viewer
        selected = self.session.result_list.get_selected_entry()
        if viewer is None or selected is None:
            return
        path, _ = selected
        if path != viewer.file_path:
            viewer.highlight_file_if_needed(path)
            self.dirty = True

    def resize(self, width: int, height: int) -> None:
        if (width, height) != (self.screen.width, self.screen.height):
            self.screen = ScreenSize(width, height)
            self.dirty = True

    def render_context(self) -> RenderContext:
        width, height = self.screen.width, self.screen.height
        result_list = self.session.result_list
        layout = compute_layout(width, height, self.viewer_state.layout)
        self.list_start = scroll_to_selection(
            result_list.selected_index, self.list_start, layout.list_rows, len(result_list.entries)
        )
        return RenderContext(
            result_list=result_list,
            input_state=self.input.state,
            searching=self.session.is_searching(),
            last_error=self.session.last_error,
            viewer_state=self.viewer_state,
            search_popup=self.search_popup,
            keymap_popup=self.keymap_popup,
            theme=self.theme,
            width=width,
            height=height,
            list_start=self.list_start,
            editor_error=self.session.editor_error,
        )

    def step(self, key: str) -> None:
        """One loop iteration after the key read, without touching the terminal."""
        self.handle_key(key)
        if self.session.open_file_if_requested(self.launch):
            self.dirty = True
        if self.session.handle_search_events():
            self.dirty = True
        self.sync_viewer()


def run_app(app: App, terminal: TerminalController, stdin_fd: int) -> None:
    """Run the interactive loop until exit is requested."""
    with terminal.raw_mode():
        app.start()
        while not app.session.exit_requested():
            app.resize(*terminal.size())
            if app.session.handle_search_events():
                app.dirty = True
            app.sync_viewer()
            if app.dirty:
                render_frame(app.render_context())
                app.dirty = False
            key = read_key(stdin_fd, app.poll_timeout_ms())
            app.step(key)
    app.session.cancel()
    app.session.shutdown(timeout=0.0)
