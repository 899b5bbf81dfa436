# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models for caching writers."""

from __future__ import annotations

import os
import re
import tempfile
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigError
from .filtering import PathFilter

_TMP_ROOT_ENV_VAR: Final[str] = "TREECACHE_TMP_ROOT"


class FilterFromCache(BaseModel):
    """Describe which input files participate in cache fingerprints.

    Attributes:
        include: Matchers a file must satisfy to be fingerprinted. An empty
            list does not restrict inclusion.
        exclude: Matchers removing files from fingerprints. Exclusion always
            wins over inclusion.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True, extra="forbid")

    include: list[Any] = Field(default_factory=list)
    exclude: list[Any] = Field(default_factory=list)

    @field_validator("include", "exclude", mode="before")
    @classmethod
    def _require_list(cls, value: object) -> list[Any]:
        if isinstance(value, (list, tuple)):
            return list(value)
        raise ValueError("must be a list of patterns")

    @classmethod
    def from_options(cls, raw: FilterFromCache | Mapping[str, object] | None) -> FilterFromCache:
        """Return a validated filter configuration built from ``raw``.

        Args:
            raw: Existing configuration, mapping with optional ``include`` and
                ``exclude`` keys, or ``None`` for the unrestricted default.

        Returns:
            FilterFromCache: Validated configuration.

        Raises:
            ConfigError: If ``raw`` is not a mapping, names an unknown key, or
                either list is malformed.
        """

        if raw is None:
            return cls()
        if isinstance(raw, FilterFromCache):
            return raw
        if not isinstance(raw, Mapping):
            raise ConfigError(f"Invalid filter_from_cache option: expected a mapping, got {type(raw).__name__}")
        try:
            return cls.model_validate(dict(raw))
        except ValidationError as exc:
            unknown = sorted(str(error["loc"][0]) for error in exc.errors() if error["type"] == "extra_forbidden")
            if unknown:
                raise ConfigError(f"Unknown filter_from_cache option(s): {', '.join(unknown)}") from exc
            fields = sorted({str(error["loc"][0]) for error in exc.errors() if error["loc"]})
            label = ", ".join(fields) or "filter_from_cache"
            raise ConfigError(
                f"Invalid filter_from_cache.{label} option, it must be a list or omitted.",
            ) from exc

    def build_filter(self) -> PathFilter:
        """Return a :class:`PathFilter` evaluating this configuration.

        Raises:
            ConfigError: If an entry cannot be used as a path matcher.
        """

        try:
            return PathFilter(include=self.include, exclude=self.exclude)
        except (TypeError, ValueError, re.error) as exc:
            raise ConfigError(f"Invalid filter_from_cache pattern: {exc}") from exc


@dataclass(frozen=True, slots=True)
class CacheSettings:
    """Define where cache slots are allocated.

    Attributes:
        tmp_root: Directory under which per-instance temporary directories
            are created. ``None`` selects the system temporary directory.
    """

    tmp_root: Path | None = None

    def resolved_tmp_root(self) -> Path:
        """Return the directory used to allocate temporary directories."""

        return self.tmp_root if self.tmp_root is not None else Path(tempfile.gettempdir())


def _settings_from_environment(env: Mapping[str, str]) -> CacheSettings | None:
    """Parse cache settings from ``env`` when overrides are configured."""

    raw = env.get(_TMP_ROOT_ENV_VAR)
    if raw is None:
        return None
    token = raw.strip()
    if not token:
        raise ConfigError(f"{_TMP_ROOT_ENV_VAR} must name a directory when set")
    return CacheSettings(tmp_root=Path(token).expanduser())


def resolve_cache_settings(
    settings: CacheSettings | None = None,
    *,
    env: Mapping[str, str] | None = None,
) -> CacheSettings:
    """Return cache settings honouring overrides and defaults.

    Args:
        settings: Explicit settings that take precedence when provided.
        env: Optional environment mapping used instead of :mod:`os.environ`.

    Returns:
        CacheSettings: Effective settings.

    Raises:
        ConfigError: If the environment override is present but empty.
    """

    if settings is not None:
        return settings
    environment = os.environ if env is None else env
    env_settings = _settings_from_environment(environment)
    if env_settings is not None:
        return env_settings
    return CacheSettings()


__all__ = [
    "CacheSettings",
    "ConfigError",
    "FilterFromCache",
    "resolve_cache_settings",
]
