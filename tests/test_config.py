# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for configuration models."""

from __future__ import annotations

import re
from pathlib import Path

import pytest

from treecache.config import CacheSettings, FilterFromCache, resolve_cache_settings
from treecache.errors import ConfigError


def test_filter_defaults_to_empty_lists() -> None:
    config = FilterFromCache.from_options(None)
    assert config.include == []
    assert config.exclude == []


def test_mapping_with_missing_keys_uses_defaults() -> None:
    config = FilterFromCache.from_options({"exclude": [re.compile("tmp")]})
    assert config.include == []
    assert len(config.exclude) == 1


@pytest.mark.parametrize("field", ["include", "exclude"])
@pytest.mark.parametrize("value", ["*.js", None, {"pattern": "x"}, 3])
def test_non_list_values_are_rejected(field: str, value: object) -> None:
    with pytest.raises(ConfigError, match=field):
        FilterFromCache.from_options({field: value})


def test_unknown_keys_are_rejected() -> None:
    with pytest.raises(ConfigError, match="Unknown filter_from_cache option\\(s\\): excludes"):
        FilterFromCache.from_options({"excludes": [re.compile("tmp")]})


def test_non_mapping_options_are_rejected() -> None:
    with pytest.raises(ConfigError):
        FilterFromCache.from_options(["include"])  # type: ignore[arg-type]


def test_invalid_regex_raises_config_error() -> None:
    config = FilterFromCache(include=["("])
    with pytest.raises(ConfigError):
        config.build_filter()


def test_explicit_settings_take_precedence(tmp_path: Path) -> None:
    settings = CacheSettings(tmp_root=tmp_path)
    assert resolve_cache_settings(settings, env={"TREECACHE_TMP_ROOT": "/elsewhere"}) is settings


def test_environment_override(tmp_path: Path) -> None:
    resolved = resolve_cache_settings(env={"TREECACHE_TMP_ROOT": str(tmp_path)})
    assert resolved.tmp_root == tmp_path
    assert resolved.resolved_tmp_root() == tmp_path


def test_empty_environment_override_is_rejected() -> None:
    with pytest.raises(ConfigError):
        resolve_cache_settings(env={"TREECACHE_TMP_ROOT": "  "})


def test_default_settings_use_system_tmp() -> None:
    resolved = resolve_cache_settings(env={})
    assert resolved.tmp_root is None
    assert resolved.resolved_tmp_root().is_dir()
