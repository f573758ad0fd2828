"""Candidate file enumeration for one search root.

Walks a directory tree with ``os.scandir`` and applies the hidden, symlink,
gitignore, glob and file-type filters from ``SearchConfig``. Sorted runs
materialize the candidate list first so files come out in a stable order.
"""

from __future__ import annotations

import fnmatch
import logging
import os
from collections.abc import Iterable, Iterator
from pathlib import Path

from .config import SearchConfig, SortKey
from .gitignore import IgnoredPaths, get_ignored_paths

logger = logging.getLogger(__name__)

ALWAYS_SKIPPED_DIRS = frozenset({".git"})


def _glob_hit(globs: Iterable[str], rel_path: str, name: str) -> bool:
    for glob in globs:
        target = rel_path if "/" in glob else name
        if fnmatch.fnmatchcase(target, glob):
            return True
    return False


def file_passes_filters(rel_path: str, name: str, config: SearchConfig) -> bool:
    """Apply include/exclude globs and type selections to one file."""
    if config.exclude_globs and _glob_hit(config.exclude_globs, rel_path, name):
        return False
    if config.include_globs and not _glob_hit(config.include_globs, rel_path, name):
        return False
    if config.type_globs and not _glob_hit(config.type_globs, rel_path, name):
        return False
    if config.type_not_globs and _glob_hit(config.type_not_globs, rel_path, name):
        return False
    return True


def _dir_passes_filters(rel_path: str, name: str, config: SearchConfig) -> bool:
    if name in ALWAYS_SKIPPED_DIRS:
        return False
    return not (config.exclude_globs and _glob_hit(config.exclude_globs, rel_path, name))


def _iter_tree(root: Path, config: SearchConfig, ignored: IgnoredPaths | None) -> Iterator[Path]:
    visited: set[tuple[int, int]] = set()
    try:
        root_stat = root.stat()
        visited.add((root_stat.st_dev, root_stat.st_ino))
    except OSError:
        pass

    stack: list[tuple[Path, str]] = [(root, "")]
    while stack:
        directory, rel_dir = stack.pop()
        try:
            with os.scandir(directory) as it:
                children = list(it)
        except OSError as exc:
            logger.debug(f"skipping unreadable directory {directory}: {exc}")
            continue

        subdirs: list[tuple[Path, str]] = []
        for child in children:
            name = child.name
            if not config.search_hidden and name.startswith("."):
                continue
            rel_path = f"{rel_dir}/{name}" if rel_dir else name
            child_path = directory / name
            try:
                is_symlink = child.is_symlink()
                if is_symlink and not config.follow_links:
                    continue
                is_dir = child.is_dir(follow_symlinks=config.follow_links)
                is_file = not is_dir and child.is_file(follow_symlinks=config.follow_links)
            except OSError:
                continue

            if ignored is not None and ignored.is_ignored(child_path):
                continue

            if is_dir:
                if not _dir_passes_filters(rel_path, name, config):
                    continue
                if is_symlink:
                    try:
                        st = child_path.stat()
                    except OSError:
                        continue
                    identity = (st.st_dev, st.st_ino)
                    if identity in visited:
                        continue
                    visited.add(identity)
                subdirs.append((child_path, rel_path))
            elif is_file and file_passes_filters(rel_path, name, config):
                yield child_path

        # Reversed so the stack pops subdirectories in scandir order.
        stack.extend(reversed(subdirs))


def _sort_value(path: Path, key: SortKey) -> object:
    if key == SortKey.PATH:
        return str(path)
    try:
        st = path.stat()
    except OSError:
        return 0.0
    if key == SortKey.MODIFIED:
        return st.st_mtime
    if key == SortKey.ACCESSED:
        return st.st_atime
    return getattr(st, "st_birthtime", st.st_ctime)


def sort_paths(paths: list[Path], key: SortKey, reverse: bool = False) -> list[Path]:
    return sorted(paths, key=lambda p: (_sort_value(p, key), str(p)), reverse=reverse)


def walk_files(root: Path, config: SearchConfig) -> Iterator[Path]:
    """Yield candidate files under ``root`` honoring ``config`` filters.

    A root that is itself a file is yielded unconditionally, matching how
    explicitly named files are always searched.
    """
    if root.is_file():
        yield root
        return

    ignored = None if config.no_ignore else get_ignored_paths(root)
    candidates = _iter_tree(root, config, ignored)
    if config.sort_by is None:
        yield from candidates
        return
    yield from sort_paths(list(candidates), config.sort_by, config.sort_reversed)
