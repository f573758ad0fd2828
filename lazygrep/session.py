"""Run state owned by the main thread.

A ``Session`` holds the current result list, the active search run and the
run state shown by the bottom bar. Search events are applied only from
``handle_search_events`` on the main thread; a new search replaces the
result list wholesale.
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Callable

from .result_list import ResultList
from .search import (
    Finished,
    NewEntry,
    PatternError,
    SearchConfig,
    SearchFailed,
    SearchOrchestrator,
    SearchRun,
)

logger = logging.getLogger(__name__)


class RunState(str, Enum):
    IDLE = "idle"
    SEARCHING = "searching"
    OPEN_FILE = "open_file"
    ERROR = "error"
    EXIT = "exit"


LaunchFn = Callable[[Path, int], "str | None"]


class Session:
    def __init__(self, orchestrator: SearchOrchestrator | None = None) -> None:
        self.orchestrator = orchestrator or SearchOrchestrator()
        self.result_list = ResultList()
        self.state = RunState.IDLE
        self.config: SearchConfig | None = None
        self.last_error: str | None = None
        # Independent of the run state; the app clears it on the next key press.
        self.editor_error: str | None = None
        self._run: SearchRun | None = None
        self._resume_state = RunState.IDLE

    def is_searching(self) -> bool:
        return self.state == RunState.SEARCHING

    def exit_requested(self) -> bool:
        return self.state == RunState.EXIT

    def can_search(self) -> bool:
        return self.state in {RunState.IDLE, RunState.ERROR}

    def search(self, config: SearchConfig) -> bool:
        """Start a fresh run unless one is in flight; return whether it started."""
        if not self.can_search():
            return False
        if self._run is not None:
            self._run.join()
            self._run = None

        self.config = config
        self.result_list = ResultList()
        self.last_error = None
        try:
            self._run = self.orchestrator.start(config)
        except PatternError as exc:
            logger.info(f"pattern rejected: {exc}")
            self.state = RunState.ERROR
            self.last_error = str(exc)
            return False
        self.state = RunState.SEARCHING
        return True

    def handle_search_events(self, max_events: int | None = None) -> bool:
        """Apply queued worker events; return whether anything changed."""
        if self._run is None:
            return False
        events = self._run.poll(max_events)
        for event in events:
            if isinstance(event, NewEntry):
                self.result_list.add_entry(event.entry)
            elif isinstance(event, Finished):
                self._finish(RunState.IDLE)
            elif isinstance(event, SearchFailed):
                self.last_error = event.message
                self._finish(RunState.ERROR)
        return bool(events)

    def _finish(self, state: RunState) -> None:
        if self.state == RunState.OPEN_FILE:
            self._resume_state = state
        elif self.state != RunState.EXIT:
            self.state = state

    def open_file(self) -> None:
        if self.state in {RunState.OPEN_FILE, RunState.EXIT}:
            return
        self._resume_state = self.state
        self.state = RunState.OPEN_FILE

    def open_file_if_requested(self, launch: LaunchFn) -> bool:
        """Launch the editor for a pending request; return whether one was pending."""
        if self.state != RunState.OPEN_FILE:
            return False
        selected = self.result_list.get_selected_entry()
        self.state = self._resume_state
        if selected is None:
            return True
        path, line_number = selected
        self.editor_error = launch(path, line_number)
        return True

    def exit(self) -> None:
        self.state = RunState.EXIT

    def cancel(self) -> None:
        """Stop the active run's workers after their current file."""
        if self._run is not None:
            self._run.cancel()

    def shutdown(self, timeout: float | None = None) -> None:
        if self._run is not None:
            self._run.join(timeout)
