"""Gitignore lookups for the tree walker.

Git itself is asked which paths are ignored under a search root, so nested
``.gitignore`` files, ``.git/info/exclude`` and global excludes all apply
without reimplementing git's matching rules. Outside a repository (or without
git installed) nothing is ignored.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

IGNORED_PATHS_CACHE_MAX = 32
IGNORED_PATHS_CACHE_TTL_SECONDS = 2.0


@dataclass(frozen=True)
class IgnoredPaths:
    """Resolved snapshot of git-ignored files and directories below ``root``."""

    root: Path
    files: frozenset[Path]
    dirs: frozenset[Path]

    def is_ignored(self, path: Path) -> bool:
        resolved = path.resolve()
        if resolved in self.files or resolved in self.dirs:
            return True
        try:
            relative = resolved.relative_to(self.root)
        except ValueError:
            return False
        current = self.root
        for part in relative.parts[:-1]:
            current = current / part
            if current in self.dirs:
                return True
        return False


@dataclass(frozen=True)
class _CacheEntry:
    ignored: IgnoredPaths | None
    loaded_at: float


_CACHE: OrderedDict[Path, _CacheEntry] = OrderedDict()
_CACHE_LOCK = threading.Lock()


def clear_ignored_paths_cache() -> None:
    with _CACHE_LOCK:
        _CACHE.clear()


def _git_stdout(args: list[str]) -> bytes | None:
    try:
        proc = subprocess.run(
            ["git", *args],
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            check=True,
        )
    except (OSError, subprocess.CalledProcessError):
        return None
    return proc.stdout


def load_ignored_paths(root: Path) -> IgnoredPaths | None:
    """Query git for ignored paths under ``root``; ``None`` outside a repo."""
    if shutil.which("git") is None:
        return None

    root = root.resolve()
    probe_dir = root if root.is_dir() else root.parent
    top_level = _git_stdout(["-C", str(probe_dir), "rev-parse", "--show-toplevel"])
    if not top_level:
        return None
    repo_root = Path(top_level.decode("utf-8", errors="replace").strip()).resolve()

    listing = _git_stdout(
        [
            "-C",
            str(repo_root),
            "ls-files",
            "-z",
            "--others",
            "-i",
            "--exclude-standard",
            "--directory",
        ]
    )
    if listing is None:
        return None

    files: set[Path] = set()
    dirs: set[Path] = set()
    for raw in listing.split(b"\x00"):
        if not raw:
            continue
        rel = raw.decode("utf-8", errors="surrogateescape")
        target = dirs if rel.endswith("/") else files
        rel = rel.rstrip("/")
        if rel:
            target.add((repo_root / rel).resolve())

    logger.debug(f"git reports {len(files)} ignored files and {len(dirs)} ignored dirs under {repo_root}")
    return IgnoredPaths(root=repo_root, files=frozenset(files), dirs=frozenset(dirs))


def get_ignored_paths(root: Path) -> IgnoredPaths | None:
    """Return a cached ``IgnoredPaths`` for ``root`` with bounded staleness."""
    key = root.resolve()
    now = time.monotonic()
    with _CACHE_LOCK:
        cached = _CACHE.get(key)
        if cached is not None and now - cached.loaded_at <= IGNORED_PATHS_CACHE_TTL_SECONDS:
            _CACHE.move_to_end(key)
            return cached.ignored

    ignored = load_ignored_paths(key)
    with _CACHE_LOCK:
        _CACHE[key] = _CacheEntry(ignored=ignored, loaded_at=now)
        _CACHE.move_to_end(key)
        while len(_CACHE) > IGNORED_PATHS_CACHE_MAX:
            _CACHE.popitem(last=False)
    return ignored
