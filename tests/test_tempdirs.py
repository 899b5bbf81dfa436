# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for per-instance temporary directories."""

from __future__ import annotations

from treecache.config import CacheSettings
from treecache.tempdirs import TempDirectory


def test_path_is_unset_until_allocated(cache_settings: CacheSettings) -> None:
    slot = TempDirectory("Owner", "tmpCacheDir", settings=cache_settings)
    assert slot.path is None


def test_make_or_reuse_returns_same_directory(cache_settings: CacheSettings) -> None:
    slot = TempDirectory("Owner", "tmpCacheDir", settings=cache_settings)

    first = slot.make_or_reuse()
    (first / "kept.txt").write_text("kept", encoding="utf-8")
    second = slot.make_or_reuse()

    assert first == second
    assert (second / "kept.txt").read_text(encoding="utf-8") == "kept"
    assert first.parent == cache_settings.tmp_root
    assert first.name.startswith("Owner-tmpCacheDir_")
    assert first.name.endswith(".tmp")


def test_make_or_remake_yields_empty_directory(cache_settings: CacheSettings) -> None:
    slot = TempDirectory("Owner", "tmpCacheDir", settings=cache_settings)
    first = slot.make_or_reuse()
    (first / "stale.txt").write_text("stale", encoding="utf-8")

    second = slot.make_or_remake()

    assert second.is_dir()
    assert list(second.iterdir()) == []
    assert not first.exists() or first == second


def test_make_or_remake_without_prior_allocation(cache_settings: CacheSettings) -> None:
    slot = TempDirectory("Owner", "tmpCacheDir", settings=cache_settings)
    assert slot.make_or_remake().is_dir()


def test_remove_is_idempotent(cache_settings: CacheSettings) -> None:
    slot = TempDirectory("Owner", "tmpCacheDir", settings=cache_settings)
    allocated = slot.make_or_reuse()

    slot.remove()
    slot.remove()

    assert not allocated.exists()
    assert slot.path is None


def test_slots_of_different_owners_are_distinct(cache_settings: CacheSettings) -> None:
    first = TempDirectory("Owner", "tmpCacheDir", settings=cache_settings).make_or_reuse()
    second = TempDirectory("Owner", "tmpCacheDir", settings=cache_settings).make_or_reuse()
    assert first != second


def test_unsafe_owner_names_are_sanitized(cache_settings: CacheSettings) -> None:
    slot = TempDirectory("My Writer/<1>", "cache", settings=cache_settings)
    assert slot.make_or_reuse().name.startswith("My_Writer_1_-cache_")
