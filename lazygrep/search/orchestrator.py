"""Concurrent search runs that stream per-file results to the UI thread.

One daemon worker thread per configured root walks its tree and searches
every candidate file. A supervisor thread joins the workers and emits exactly
one terminal event: ``Finished`` when every worker returned, or
``SearchFailed`` when any worker raised. All events go through an unbounded
queue so workers never wait on the UI; a cancelled run stops between files.
"""

from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from pathlib import Path

from ..entries import FileEntry, GrepMatch
from .config import SearchConfig
from .matcher import Matcher, compile_pattern, search_path
from .walker import walk_files

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NewEntry:
    entry: FileEntry


@dataclass(frozen=True)
class Finished:
    pass


@dataclass(frozen=True)
class SearchFailed:
    message: str


SearchEvent = NewEntry | Finished | SearchFailed

WalkFn = Callable[[Path, SearchConfig], Iterable[Path]]
SearchFileFn = Callable[[Matcher, Path], list[GrepMatch]]


class SearchRun:
    """Handle for one run: the receiving end of the event queue plus the supervisor."""

    def __init__(self, config: SearchConfig, events: queue.Queue[SearchEvent]) -> None:
        self.config = config
        self._events = events
        self._supervisor: threading.Thread | None = None
        self.cancelled = threading.Event()

    def _attach(self, supervisor: threading.Thread) -> None:
        self._supervisor = supervisor

    def poll(self, max_events: int | None = None) -> list[SearchEvent]:
        """Drain queued events without blocking."""
        drained: list[SearchEvent] = []
        while max_events is None or len(drained) < max_events:
            try:
                drained.append(self._events.get_nowait())
            except queue.Empty:
                break
        return drained

    def cancel(self) -> None:
        """Ask workers to stop after the file they are currently searching."""
        self.cancelled.set()

    def join(self, timeout: float | None = None) -> None:
        if self._supervisor is not None:
            self._supervisor.join(timeout)

    @property
    def done(self) -> bool:
        return self._supervisor is not None and not self._supervisor.is_alive()


class SearchOrchestrator:
    """Start search runs; collaborators are injectable for tests."""

    def __init__(
        self,
        walk: WalkFn = walk_files,
        search_file: SearchFileFn = search_path,
    ) -> None:
        self._walk = walk
        self._search_file = search_file

    def start(self, config: SearchConfig) -> SearchRun:
        """Compile the pattern and launch workers.

        ``PatternError`` propagates before any thread is started.
        """
        matcher = compile_pattern(config.pattern, config.case_mode, config.word_regexp)
        events: queue.Queue[SearchEvent] = queue.Queue()
        run = SearchRun(config, events)
        supervisor = threading.Thread(
            target=self._supervise,
            args=(config, matcher, events, run.cancelled),
            name="lazygrep-search",
            daemon=True,
        )
        run._attach(supervisor)
        logger.info(f"starting search for {config.pattern!r} in {len(config.paths)} root(s)")
        supervisor.start()
        return run

    def _supervise(
        self,
        config: SearchConfig,
        matcher: Matcher,
        events: queue.Queue[SearchEvent],
        cancelled: threading.Event,
    ) -> None:
        failures: list[str] = []
        failures_lock = threading.Lock()

        def work(root: Path) -> None:
            try:
                self._search_root(root, config, matcher, events, cancelled)
            except Exception as exc:
                logger.error(f"search worker for {root} failed: {exc!r}")
                with failures_lock:
                    failures.append(f"{root}: {exc}")

        # Daemon threads: interpreter exit does not wait for a walk in progress.
        workers = [
            threading.Thread(target=work, args=(root,), name=f"lazygrep-worker-{index}", daemon=True)
            for index, root in enumerate(config.paths)
        ]
        for worker in workers:
            worker.start()
        for worker in workers:
            worker.join()

        if failures:
            events.put(SearchFailed("Search failed: " + "; ".join(failures)))
            return
        logger.info(f"search for {config.pattern!r} finished")
        events.put(Finished())

    def _search_root(
        self,
        root: Path,
        config: SearchConfig,
        matcher: Matcher,
        events: queue.Queue[SearchEvent],
        cancelled: threading.Event,
    ) -> None:
        for path in self._walk(root, config):
            if cancelled.is_set():
                logger.debug(f"search in {root} cancelled")
                return
            try:
                matches = self._search_file(matcher, path)
            except (OSError, UnicodeError) as exc:
                logger.debug(f"skipping {path}: {exc}")
                continue
            if matches:
                events.put(NewEntry(FileEntry(path, tuple(matches))))
