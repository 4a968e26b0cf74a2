"""Directory search for forward jumps.

Walks a tree breadth-first and reports directories whose final path
component equals the requested name, or matches it when the pattern is a
shell glob. The shallowest match wins a forward jump.
"""

from __future__ import annotations

import fnmatch
import os
from collections import deque
from collections.abc import Callable, Iterable, Iterator
from pathlib import Path

from jumpdir.core.console import get_logger

logger = get_logger(__name__)

_GLOB_CHARS = frozenset("*?[")


def is_glob(pattern: str) -> bool:
    return any(char in _GLOB_CHARS for char in pattern)


def _matcher(pattern: str) -> Callable[[str], bool]:
    if is_glob(pattern):
        return lambda name: fnmatch.fnmatchcase(name, pattern)
    return lambda name: name == pattern


def iter_matches(
    pattern: str,
    root: Path,
    max_depth: int,
    ignore_dirs: Iterable[str] = (),
    follow_symlinks: bool = False,
) -> Iterator[Path]:
    """Yield matching directories under ``root``, shallowest first.

    Within one depth, entries are visited in sorted name order so results are
    stable across runs.
    """
    matches = _matcher(pattern)
    ignored = set(ignore_dirs)
    base = Path(os.path.normpath(os.path.abspath(root.expanduser())))
    # Scanning a directory at depth d reports children at depth d + 1.
    queue: deque[tuple[Path, int]] = deque([(base, 0)] if max_depth > 0 else [])

    while queue:
        current, depth = queue.popleft()
        try:
            with os.scandir(current) as it:
                children = sorted(it, key=lambda entry: entry.name)
        except OSError as exc:
            logger.debug("Skipping unreadable directory %s: %s", current, exc)
            continue

        for child in children:
            if child.name in ignored:
                continue
            try:
                if not child.is_dir(follow_symlinks=follow_symlinks):
                    continue
            except OSError:
                continue

            child_path = Path(child.path)
            if matches(child.name):
                yield child_path
            if depth + 1 < max_depth:
                queue.append((child_path, depth + 1))


def _direct_path(pattern: str, root: Path) -> Path | None:
    candidate = Path(pattern).expanduser()
    if not candidate.is_absolute():
        candidate = root / candidate
    try:
        if not candidate.is_dir():
            return None
    except OSError as exc:
        logger.debug("Cannot stat %s: %s", candidate, exc)
        return None
    return Path(os.path.normpath(os.path.abspath(candidate)))


def find_directory(
    pattern: str,
    root: Path,
    max_depth: int,
    ignore_dirs: Iterable[str] = (),
    follow_symlinks: bool = False,
) -> Path | None:
    """Resolve ``pattern`` to one directory, or None when nothing matches.

    A pattern that already names a directory (absolute, ``~`` or relative to
    ``root``) is used as-is; otherwise the shallowest search match is taken.
    """
    if not pattern:
        return None

    direct = _direct_path(pattern, root)
    if direct is not None:
        logger.debug("Pattern %s names a directory directly", pattern)
        return direct

    for match in iter_matches(pattern, root, max_depth, ignore_dirs, follow_symlinks):
        return match
    return None


__all__ = ["find_directory", "is_glob", "iter_matches"]
