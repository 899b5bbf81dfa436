# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Per-instance temporary directories backing cache slots."""

from __future__ import annotations

import logging
import re
import tempfile
from pathlib import Path

from .config import CacheSettings, resolve_cache_settings
from .filesystem import ensure_directory, remove_tree

LOGGER = logging.getLogger(__name__)

_UNSAFE_NAME_CHARS = re.compile(r"[^A-Za-z0-9_.-]+")


class TempDirectory:
    """Own one uniquely named temporary directory for an (owner, slot) pair.

    The handle is held by its owner for the owner's lifetime; there is no
    global registry. Each allocation yields a fresh name of the form
    ``<owner>-<slot>_XXXXXXXX.tmp`` under the configured temporary root.
    """

    def __init__(self, owner_name: str, slot_name: str, *, settings: CacheSettings | None = None) -> None:
        """Create an unallocated handle.

        Args:
            owner_name: Human-readable owner label, usually the class name.
            slot_name: Name distinguishing slots held by the same owner.
            settings: Optional settings overriding the temporary root.
        """

        self._prefix = f"{_sanitize(owner_name)}-{_sanitize(slot_name)}_"
        self._settings = resolve_cache_settings(settings)
        self._path: Path | None = None

    @property
    def path(self) -> Path | None:
        """Return the allocated directory, or ``None`` before allocation."""

        return self._path

    def make_or_reuse(self) -> Path:
        """Return the allocated directory, creating one when necessary."""

        if self._path is not None and self._path.is_dir():
            return self._path
        return self._allocate()

    def make_or_remake(self) -> Path:
        """Discard any allocated directory and return a freshly created empty one."""

        self.remove()
        return self._allocate()

    def remove(self) -> None:
        """Delete the allocated directory and forget its path; safe to repeat."""

        if self._path is None:
            return
        LOGGER.debug("removing temporary directory %s", self._path)
        remove_tree(self._path)
        self._path = None

    def _allocate(self) -> Path:
        root = ensure_directory(self._settings.resolved_tmp_root())
        self._path = Path(tempfile.mkdtemp(prefix=self._prefix, suffix=".tmp", dir=root))
        LOGGER.debug("allocated temporary directory %s", self._path)
        return self._path


def _sanitize(label: str) -> str:
    return _UNSAFE_NAME_CHARS.sub("_", label) or "slot"


__all__ = ["TempDirectory"]
