# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import os
from collections.abc import Callable, Mapping
from pathlib import Path

import pytest

from treecache.config import CacheSettings

TreeLayout = Mapping[str, tuple[str, int]]
TreeWriter = Callable[[Path, TreeLayout], None]


def _write_tree(root: Path, files: TreeLayout) -> None:
    """Create ``files`` under ``root`` with fixed modification times.

    Args:
        root: Directory receiving the files.
        files: Mapping of relative POSIX paths to ``(content, mtime_seconds)``.
    """

    for relative, (content, mtime) in files.items():
        target = root / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
        os.utime(target, ns=(mtime * 1_000_000_000, mtime * 1_000_000_000))


@pytest.fixture
def write_tree() -> TreeWriter:
    """Return the helper writing files with fixed modification times."""

    return _write_tree


@pytest.fixture
def make_tree(tmp_path: Path) -> Callable[[TreeLayout], Path]:
    """Return a factory populating ``tmp_path / "input"``."""

    def _make(files: TreeLayout) -> Path:
        root = tmp_path / "input"
        root.mkdir(exist_ok=True)
        _write_tree(root, files)
        return root

    return _make


@pytest.fixture
def cache_settings(tmp_path: Path) -> CacheSettings:
    """Return settings allocating temporary directories under ``tmp_path``."""

    return CacheSettings(tmp_root=tmp_path / "tmp")


@pytest.fixture
def captured_warnings(monkeypatch: pytest.MonkeyPatch) -> list[str]:
    """Capture fingerprint warnings instead of printing them."""

    warnings: list[str] = []

    def capture_warn(msg: str, *, use_emoji: bool, use_color=None) -> None:  # type: ignore[no-untyped-def]
        del use_emoji, use_color
        warnings.append(msg)

    monkeypatch.setattr("treecache.fingerprint.warn", capture_warn)
    return warnings
