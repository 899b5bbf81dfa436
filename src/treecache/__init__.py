# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Incremental-rebuild cache for directory-producing build steps."""

from __future__ import annotations

from .config import CacheSettings, FilterFromCache, resolve_cache_settings
from .errors import ConfigError, MaterializeError, TreecacheError
from .filtering import PathFilter, PathMatcher
from .fingerprint import TreeFingerprint, fingerprint_tree, hash_strings, keys_for_tree
from .linking import can_link, link_from_cache, probe_hard_links
from .tempdirs import TempDirectory
from .writer import CachingWriter, Writer, read_path_tree, resolve_input

__all__ = [
    "CacheSettings",
    "CachingWriter",
    "ConfigError",
    "FilterFromCache",
    "MaterializeError",
    "PathFilter",
    "PathMatcher",
    "TempDirectory",
    "TreeFingerprint",
    "TreecacheError",
    "Writer",
    "can_link",
    "fingerprint_tree",
    "hash_strings",
    "keys_for_tree",
    "link_from_cache",
    "probe_hard_links",
    "read_path_tree",
    "resolve_input",
    "resolve_cache_settings",
]
