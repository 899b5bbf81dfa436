# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Hard-link capability detection and cache materialization."""

from __future__ import annotations

import errno
import logging
import os
import shutil
import stat
import tempfile
from functools import lru_cache
from pathlib import Path
from typing import Final

from .errors import MaterializeError
from .filesystem import ensure_directory, remove_tree, walk_sync
from .logging import warn

LOGGER = logging.getLogger(__name__)

_PROBE_SOURCE_NAME: Final[str] = "treecache-can-link-src-{pid}.tmp"
_PROBE_DEST_NAME: Final[str] = "treecache-can-link-dest-{pid}.tmp"


def probe_hard_links(directory: Path | None = None) -> bool:
    """Return whether the filesystem under ``directory`` supports hard links.

    A throwaway file is created and linked to a second name; a leftover link
    target from an earlier run is replaced, and both entries are removed on
    every exit path. Failing to create the file counts as "no
    link support" rather than an error.

    Args:
        directory: Location of the probe files; defaults to the system
            temporary directory.

    Returns:
        bool: ``True`` when the file could be created and hard-linked.
    """

    base = Path(tempfile.gettempdir()) if directory is None else Path(directory)
    source = base / _PROBE_SOURCE_NAME.format(pid=os.getpid())
    dest = base / _PROBE_DEST_NAME.format(pid=os.getpid())
    try:
        source.write_bytes(b"")
    except OSError as exc:
        LOGGER.debug("link probe could not create %s: %s", source, exc)
        return False
    try:
        dest.unlink(missing_ok=True)
        os.link(source, dest)
    except OSError as exc:
        LOGGER.debug("link probe could not link %s: %s", dest, exc)
        return False
    else:
        return True
    finally:
        _discard_probe_file(dest)
        _discard_probe_file(source)


def _discard_probe_file(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as exc:
        warn(f"Warning: failed to remove link probe file {path}: {exc}", use_emoji=False)


@lru_cache(maxsize=1)
def can_link() -> bool:
    """Return the process-wide hard-link capability flag, probing once."""

    return probe_hard_links()


def link_from_cache(
    cache_dir: str | os.PathLike[str],
    dest_dir: str | os.PathLike[str],
    *,
    use_links: bool | None = None,
) -> list[Path]:
    """Reproduce the regular files of ``cache_dir`` beneath ``dest_dir``.

    Files are hard-linked when links are supported and byte-copied otherwise.
    Directories only serve as containers and are created as needed. Existing
    destination files are replaced and destination entries absent from the
    cache are removed, so the destination's regular files match the cache's
    exactly. A missing or empty cache directory materializes nothing.

    Args:
        cache_dir: Directory holding the cached build output.
        dest_dir: Directory receiving the materialized files.
        use_links: Override for the capability flag; ``None`` uses
            :func:`can_link`.

    Returns:
        list[Path]: Destination files written, in cache listing order.

    Raises:
        MaterializeError: If the cache contains an entry that is neither a
            regular file nor a directory.
        OSError: If a destination directory or file cannot be written.
    """

    source_root = Path(cache_dir)
    dest_root = Path(dest_dir)
    link = can_link() if use_links is None else use_links
    cached = walk_sync(source_root)
    _prune_stale_entries(dest_root, frozenset(cached))
    written: list[Path] = []
    for relative in cached:
        source = source_root / relative
        mode = source.stat().st_mode
        if stat.S_ISDIR(mode):
            continue
        if not stat.S_ISREG(mode):
            raise MaterializeError(f"cannot materialize non-file entry {source}")
        target = dest_root / relative
        ensure_directory(target.parent)
        _transfer(source, target, link=link)
        written.append(target)
    return written


def _prune_stale_entries(dest_root: Path, cached: frozenset[str]) -> None:
    for relative in walk_sync(dest_root, follow_links=False):
        if relative not in cached:
            LOGGER.debug("removing stale destination entry %s", relative)
            remove_tree(dest_root / relative)


def _transfer(source: Path, target: Path, *, link: bool) -> None:
    if target.is_symlink() or target.exists():
        target.unlink()
    if link:
        try:
            os.link(source, target)
            return
        except OSError as exc:
            if exc.errno != errno.EXDEV:
                raise
            LOGGER.debug("cross-device link for %s, copying instead", target)
    shutil.copyfile(source, target)


__all__ = ["can_link", "link_from_cache", "probe_hard_links"]
