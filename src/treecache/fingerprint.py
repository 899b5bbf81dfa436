# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Metadata-based fingerprints of directory trees.

A fingerprint is a flat, ordered token sequence describing every node of a
tree: its relative path, its mode, a device/inode identity for directories,
and the modification time and size of regular files. File contents are never
read. Directory entries are visited in lexical order so repeated walks of an
unchanged tree produce identical sequences.
"""

from __future__ import annotations

import hashlib
import os
import stat
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Final, TypeAlias

from .logging import warn

Token: TypeAlias = str | int

PATH_MARKER: Final[str] = "path"
STATS_MARKER: Final[str] = "stats"
STAT_FAILED: Final[str] = "stat failed"
READDIR_FAILED: Final[str] = "readdir failed"
ROOT_RELATIVE_PATH: Final[str] = "."
_TOKEN_SEPARATOR: Final[str] = "\x00"
_HASH_ENCODING: Final[str] = "utf-8"

IgnorePredicate: TypeAlias = Callable[[str], bool]


@dataclass(frozen=True, slots=True)
class TreeFingerprint:
    """Represent a tree fingerprint and its reduced digest.

    Attributes:
        keys: Ordered token sequence produced by :func:`keys_for_tree`.
        digest: Hex digest of ``keys`` produced by :func:`hash_strings`.
    """

    keys: tuple[Token, ...]
    digest: str


def keys_for_tree(
    full_path: str | os.PathLike[str],
    relative_path: str = ROOT_RELATIVE_PATH,
    *,
    should_be_ignored: IgnorePredicate | None = None,
    _ancestors: frozenset[str] = frozenset(),
) -> list[Token]:
    """Return the fingerprint tokens describing the tree rooted at ``full_path``.

    Vanished or unreadable nodes never raise: they emit a warning and the
    ``"stat failed"`` or ``"readdir failed"`` sentinel instead, so they
    fingerprint differently from present nodes.

    Args:
        full_path: Filesystem location of the node to describe.
        relative_path: Path of the node relative to the walk root.
        should_be_ignored: Optional predicate receiving a regular file's full
            path; files it accepts contribute no tokens at all.

    Returns:
        list[Token]: Flat token sequence for the node and its descendants.
    """

    node = os.fspath(full_path)
    try:
        stats: os.stat_result | None = os.stat(node)
    except OSError:
        warn(f"Warning: failed to stat {node}", use_emoji=False)
        stats = None

    if stats is None:
        return [PATH_MARKER, relative_path, STAT_FAILED]

    stat_keys: list[Token] = [STATS_MARKER, stats.st_mode]
    child_keys: list[Token] = []
    if stat.S_ISDIR(stats.st_mode):
        identity = f"{stats.st_dev}{_TOKEN_SEPARATOR}{stats.st_ino}"
        stat_keys.append(identity)
        entries = _list_entries(node, cyclic=identity in _ancestors)
        if entries is None:
            child_keys.append(READDIR_FAILED)
            entries = []
        for entry in entries:
            child_keys.extend(
                keys_for_tree(
                    os.path.join(node, entry),
                    f"{relative_path}/{entry}",
                    should_be_ignored=should_be_ignored,
                    _ancestors=_ancestors | {identity},
                ),
            )
    elif stat.S_ISREG(stats.st_mode):
        if should_be_ignored is not None and should_be_ignored(node):
            return []
        stat_keys.extend((stats.st_mtime_ns, stats.st_size))

    return [PATH_MARKER, relative_path, *stat_keys, *child_keys]


def _list_entries(node: str, *, cyclic: bool) -> list[str] | None:
    if cyclic:
        warn(f"Warning: {node} links back to one of its ancestors, not descending", use_emoji=False)
        return None
    try:
        return sorted(os.listdir(node))
    except OSError as exc:
        warn(f"Warning: failed to read directory {node}: {exc}", use_emoji=False)
        return None


def hash_strings(tokens: Iterable[Token]) -> str:
    """Reduce an ordered token sequence to a single hex digest.

    Args:
        tokens: Tokens whose string forms are hashed in order.

    Returns:
        str: Digest that is stable for equal sequences.
    """

    hasher = hashlib.md5(usedforsecurity=False)
    for index, token in enumerate(tokens):
        if index:
            hasher.update(_TOKEN_SEPARATOR.encode(_HASH_ENCODING))
        hasher.update(str(token).encode(_HASH_ENCODING, errors="surrogateescape"))
    return hasher.hexdigest()


def fingerprint_tree(
    root: str | os.PathLike[str],
    *,
    should_be_ignored: IgnorePredicate | None = None,
) -> TreeFingerprint:
    """Walk ``root`` and return its fingerprint.

    Args:
        root: Directory to fingerprint.
        should_be_ignored: Optional file filter, see :func:`keys_for_tree`.

    Returns:
        TreeFingerprint: Tokens together with their digest.
    """

    keys = tuple(keys_for_tree(Path(root), should_be_ignored=should_be_ignored))
    return TreeFingerprint(keys=keys, digest=hash_strings(keys))


__all__ = [
    "READDIR_FAILED",
    "STAT_FAILED",
    "Token",
    "TreeFingerprint",
    "fingerprint_tree",
    "hash_strings",
    "keys_for_tree",
]
