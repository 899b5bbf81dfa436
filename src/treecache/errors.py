# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exception hierarchy shared across treecache."""

from __future__ import annotations


class TreecacheError(Exception):
    """Base class for errors raised by treecache."""


class ConfigError(TreecacheError):
    """Raised when configuration input is invalid."""


class MaterializeError(TreecacheError):
    """Raised when cached content cannot be transferred to a destination."""


__all__ = ["ConfigError", "MaterializeError", "TreecacheError"]
