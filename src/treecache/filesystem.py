# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Directory helpers consumed by the cache slot manager and materializer."""

from __future__ import annotations

import logging
import os
import shutil
from os import PathLike
from pathlib import Path

LOGGER = logging.getLogger(__name__)

_Pathish = str | PathLike[str] | Path
_DIRECTORY_SUFFIX = "/"


def walk_sync(root: _Pathish, *, follow_links: bool = True) -> list[str]:
    """Return every entry beneath ``root`` as sorted relative POSIX paths.

    Directories are reported with a trailing ``/`` before their contents.
    Symlinked directories are descended into unless ``follow_links`` is
    false, in which case the link itself is listed as a plain entry. A link
    back to a directory already being walked is listed but not descended.

    Args:
        root: Directory to list.
        follow_links: Descend into symlinked directories.

    Returns:
        list[str]: Relative entries in depth-first lexical order; empty when
        ``root`` does not exist.
    """

    base = Path(root)
    if not base.is_dir():
        return []
    entries: list[str] = []
    _walk_into(base, "", entries, follow_links=follow_links, ancestors=frozenset({_identity(base)}))
    return entries


def _identity(directory: Path) -> tuple[int, int]:
    info = directory.stat()
    return info.st_dev, info.st_ino


def _walk_into(
    directory: Path,
    prefix: str,
    entries: list[str],
    *,
    follow_links: bool,
    ancestors: frozenset[tuple[int, int]],
) -> None:
    for name in sorted(os.listdir(directory)):
        child = directory / name
        relative = f"{prefix}{name}"
        if not child.is_dir() or (child.is_symlink() and not follow_links):
            entries.append(relative)
            continue
        entries.append(relative + _DIRECTORY_SUFFIX)
        identity = _identity(child)
        if identity in ancestors:
            LOGGER.debug("%s links back to an ancestor, not descending", child)
            continue
        _walk_into(
            child,
            relative + _DIRECTORY_SUFFIX,
            entries,
            follow_links=follow_links,
            ancestors=ancestors | {identity},
        )


def ensure_directory(path: _Pathish) -> Path:
    """Create ``path`` and any missing ancestors, returning it as a ``Path``."""

    directory = Path(path)
    directory.mkdir(parents=True, exist_ok=True)
    return directory


def remove_tree(path: _Pathish) -> None:
    """Remove the file or directory tree at ``path`` when it exists."""

    target = Path(path)
    if target.is_symlink() or target.is_file():
        target.unlink(missing_ok=True)
        return
    if target.exists():
        shutil.rmtree(target)


__all__ = ["ensure_directory", "remove_tree", "walk_sync"]
