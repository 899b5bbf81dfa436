# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Writer nodes that memoize directory-producing build steps.

A :class:`CachingWriter` fingerprints its input tree on every build, reruns
:meth:`CachingWriter.update_cache` only when the fingerprint digest changed,
and always materializes the cache slot into the destination directory.
"""

from __future__ import annotations

import inspect
import logging
import os
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable, Mapping
from pathlib import Path
from typing import Any, Generic, TypeAlias, TypeVar

from .config import CacheSettings, FilterFromCache, resolve_cache_settings
from .fingerprint import ROOT_RELATIVE_PATH, Token, hash_strings, keys_for_tree
from .linking import link_from_cache
from .tempdirs import TempDirectory

LOGGER = logging.getLogger(__name__)

InputTreeT = TypeVar("InputTreeT")
PathResult: TypeAlias = str | os.PathLike[str]
ReadTree: TypeAlias = Callable[[Any], Awaitable[PathResult] | PathResult]

_DEST_SLOT = "tmpDestDir"
_CACHE_SLOT = "tmpCacheDir"


async def _resolve(value: Awaitable[Any] | Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


async def resolve_input(read_tree: ReadTree, input_tree: object) -> Path:
    """Return the source directory ``read_tree`` resolves for ``input_tree``.

    Args:
        read_tree: Host-supplied resolver returning a path or an awaitable
            producing one.
        input_tree: Abstract input reference understood by ``read_tree``.

    Returns:
        Path: Concrete source directory.
    """

    return Path(await _resolve(read_tree(input_tree)))


async def read_path_tree(tree: PathResult) -> Path:
    """Resolve an input tree that is already a filesystem path."""

    return Path(tree)


class Writer(ABC):
    """Define the node contract a host pipeline drives once per build."""

    def __init__(self, *, settings: CacheSettings | None = None) -> None:
        self._settings = resolve_cache_settings(settings)
        self._dest_slot = TempDirectory(type(self).__name__, _DEST_SLOT, settings=self._settings)

    async def read(self, read_tree: ReadTree) -> Path:
        """Build into a freshly recreated destination directory and return it."""

        dest_dir = self._dest_slot.make_or_remake()
        await self.write(read_tree, dest_dir)
        return dest_dir

    @abstractmethod
    async def write(self, read_tree: ReadTree, dest_dir: Path) -> None:
        """Populate ``dest_dir`` from the inputs resolved through ``read_tree``."""
        raise NotImplementedError

    def cleanup(self) -> None:
        """Remove temporary directories owned by the node."""

        self._dest_slot.remove()


class CachingWriter(Writer, Generic[InputTreeT]):
    """Replay cached output while the input tree's fingerprint is unchanged.

    Subclasses implement :meth:`update_cache`, which receives the resolved
    source directory and an empty cache directory to fill. Overlapping
    :meth:`write` calls on one instance are not supported.

    Attributes:
        input_tree: Input reference passed to the host resolver.
        filter_from_cache: Include/exclude configuration applied to files
            when fingerprinting the input tree.
    """

    def __init__(
        self,
        input_tree: InputTreeT,
        *,
        filter_from_cache: FilterFromCache | Mapping[str, object] | None = None,
        settings: CacheSettings | None = None,
    ) -> None:
        """Create a caching writer.

        Args:
            input_tree: Input reference resolved on every :meth:`write`.
            filter_from_cache: Filter configuration or mapping with optional
                ``include`` and ``exclude`` lists.
            settings: Optional settings controlling temporary directories.

        Raises:
            ConfigError: If ``filter_from_cache`` is malformed.
        """

        super().__init__(settings=settings)
        self.input_tree = input_tree
        self.filter_from_cache = FilterFromCache.from_options(filter_from_cache)
        self._path_filter = self.filter_from_cache.build_filter()
        self._cache_slot = TempDirectory(type(self).__name__, _CACHE_SLOT, settings=self._settings)
        self._cache_hash: str | None = None
        self._cache_tree_keys: tuple[Token, ...] | None = None

    @property
    def cache_hash(self) -> str | None:
        """Return the digest of the input tree the cache was last built from."""

        return self._cache_hash

    @property
    def cache_tree_keys(self) -> tuple[Token, ...] | None:
        """Return the token sequence behind :attr:`cache_hash`, for diagnostics."""

        return self._cache_tree_keys

    def get_cache_dir(self) -> Path:
        """Return the cache directory, creating it on first use."""

        return self._cache_slot.make_or_reuse()

    def get_clean_cache_dir(self) -> Path:
        """Return a freshly recreated, empty cache directory."""

        return self._cache_slot.make_or_remake()

    def should_be_ignored(self, full_path: str) -> bool:
        """Return whether ``full_path`` is filtered out of fingerprints."""

        return self._path_filter.should_be_ignored(full_path)

    def keys_for_tree(self, full_path: PathResult, relative_path: str = ROOT_RELATIVE_PATH) -> list[Token]:
        """Return fingerprint tokens for ``full_path`` honouring the cache filter."""

        return keys_for_tree(full_path, relative_path, should_be_ignored=self.should_be_ignored)

    async def write(self, read_tree: ReadTree, dest_dir: Path) -> None:
        """Rebuild the cache when the input changed, then materialize it.

        The stored digest only advances after :meth:`update_cache` succeeds,
        so a failed rebuild is retried on the next call. Materialization runs
        whether or not a rebuild happened or failed.

        Args:
            read_tree: Host resolver for :attr:`input_tree`.
            dest_dir: Directory receiving the cached files.
        """

        src_dir = await resolve_input(read_tree, self.input_tree)
        tree_keys = tuple(self.keys_for_tree(src_dir))
        tree_hash = hash_strings(tree_keys)
        try:
            if tree_hash != self._cache_hash:
                LOGGER.debug("input %s changed (%s), rebuilding cache", src_dir, tree_hash)
                await _resolve(self.update_cache(src_dir, self.get_clean_cache_dir()))
                self._cache_hash = tree_hash
                self._cache_tree_keys = tree_keys
            else:
                LOGGER.debug("input %s unchanged, reusing cache", src_dir)
        finally:
            link_from_cache(self.get_cache_dir(), dest_dir)

    @abstractmethod
    def update_cache(self, src_dir: Path, cache_dir: Path) -> Awaitable[None] | None:
        """Regenerate the cache contents from ``src_dir`` into ``cache_dir``.

        ``cache_dir`` is always empty when this is called. Implementations
        may be plain or ``async`` methods.
        """
        raise NotImplementedError("You must implement update_cache.")

    def cleanup(self) -> None:
        """Remove the cache slot and forget the stored fingerprint."""

        self._cache_slot.remove()
        self._cache_hash = None
        self._cache_tree_keys = None
        super().cleanup()


__all__ = [
    "CachingWriter",
    "ReadTree",
    "Writer",
    "read_path_tree",
    "resolve_input",
]
