# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Include/exclude filtering of files contributing to tree fingerprints."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Protocol, TypeAlias, runtime_checkable


@runtime_checkable
class PathMatcher(Protocol):
    """Define the matcher capability consulted by :class:`PathFilter`."""

    def test(self, path: str) -> bool:
        """Return whether ``path`` matches the pattern."""
        ...


MatcherLike: TypeAlias = PathMatcher | re.Pattern[str] | str | Callable[[str], bool]


@dataclass(frozen=True, slots=True)
class RegexMatcher:
    """Match paths with a regular expression using search semantics."""

    pattern: re.Pattern[str]

    def test(self, path: str) -> bool:
        """Return whether the expression matches anywhere in ``path``."""

        return self.pattern.search(path) is not None


@dataclass(frozen=True, slots=True)
class CallableMatcher:
    """Adapt a plain predicate to the :class:`PathMatcher` protocol."""

    predicate: Callable[[str], bool]

    def test(self, path: str) -> bool:
        """Return the truthiness of the wrapped predicate for ``path``."""

        return bool(self.predicate(path))


def coerce_matcher(candidate: MatcherLike) -> PathMatcher:
    """Return ``candidate`` adapted to the :class:`PathMatcher` protocol.

    Args:
        candidate: Compiled regular expression, pattern string, object with a
            ``test`` method, or predicate callable.

    Returns:
        PathMatcher: Matcher exposing ``test(path) -> bool``.

    Raises:
        TypeError: If ``candidate`` offers none of the supported capabilities.
        re.error: If a pattern string is not a valid regular expression.
    """

    if isinstance(candidate, re.Pattern):
        return RegexMatcher(candidate)
    if isinstance(candidate, str):
        return RegexMatcher(re.compile(candidate))
    if isinstance(candidate, PathMatcher):
        return candidate
    if callable(candidate):
        return CallableMatcher(candidate)
    raise TypeError(f"unsupported path matcher: {candidate!r}")


class PathFilter:
    """Decide which files participate in fingerprinting.

    Verdicts are memoized per absolute path for the lifetime of the filter.
    The verdict cache is never invalidated or bounded: a path keeps the same
    verdict across rebuild cycles.
    """

    def __init__(
        self,
        include: Iterable[MatcherLike] = (),
        exclude: Iterable[MatcherLike] = (),
    ) -> None:
        self._include: tuple[PathMatcher, ...] = tuple(coerce_matcher(item) for item in include)
        self._exclude: tuple[PathMatcher, ...] = tuple(coerce_matcher(item) for item in exclude)
        self._verdicts: dict[str, bool] = {}

    @property
    def include(self) -> tuple[PathMatcher, ...]:
        """Return the include matchers in evaluation order."""

        return self._include

    @property
    def exclude(self) -> tuple[PathMatcher, ...]:
        """Return the exclude matchers in evaluation order."""

        return self._exclude

    @property
    def cache_size(self) -> int:
        """Return the number of memoized verdicts."""

        return len(self._verdicts)

    def should_be_ignored(self, full_path: str) -> bool:
        """Return ``True`` when ``full_path`` must not contribute to fingerprints.

        Exclude matchers win over include matchers. With no include matchers
        configured every non-excluded path is kept; otherwise a path is kept
        only when at least one include matcher accepts it.

        Args:
            full_path: Absolute path of the candidate file.

        Returns:
            bool: ``True`` when the file is filtered out.
        """

        cached = self._verdicts.get(full_path)
        if cached is not None:
            return cached
        verdict = self._evaluate(full_path)
        self._verdicts[full_path] = verdict
        return verdict

    def __call__(self, full_path: str) -> bool:
        return self.should_be_ignored(full_path)

    def _evaluate(self, full_path: str) -> bool:
        if any(matcher.test(full_path) for matcher in self._exclude):
            return True
        if self._include:
            return not any(matcher.test(full_path) for matcher in self._include)
        return False


__all__ = [
    "CallableMatcher",
    "MatcherLike",
    "PathFilter",
    "PathMatcher",
    "RegexMatcher",
    "coerce_matcher",
]
