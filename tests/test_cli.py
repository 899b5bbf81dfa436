# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for the treecache command-line interface."""

from __future__ import annotations

from pathlib import Path

from typer.testing import CliRunner

from treecache.cli import app
from treecache.filtering import PathFilter
from treecache.fingerprint import fingerprint_tree


def _setup_tree(root: Path) -> None:
    (root / "src").mkdir()
    (root / "src" / "app.js").write_text("console.log(1)", encoding="utf-8")
    (root / "src" / "app.js.map").write_text("{}", encoding="utf-8")


def test_fingerprint_prints_digest(tmp_path: Path) -> None:
    _setup_tree(tmp_path)
    runner = CliRunner()

    result = runner.invoke(app, ["fingerprint", str(tmp_path)])

    assert result.exit_code == 0
    assert result.stdout.strip() == fingerprint_tree(tmp_path).digest


def test_fingerprint_honours_exclude(tmp_path: Path) -> None:
    _setup_tree(tmp_path)
    runner = CliRunner()
    expected = fingerprint_tree(tmp_path, should_be_ignored=PathFilter(exclude=[r"\.map$"])).digest

    result = runner.invoke(app, ["fingerprint", str(tmp_path), "--exclude", r"\.map$", "--keys"])

    assert result.exit_code == 0
    lines = result.stdout.strip().splitlines()
    assert lines[-1] == expected
    assert "'./src/app.js.map'" not in lines
    assert "'./src/app.js'" in lines


def test_fingerprint_rejects_invalid_pattern(tmp_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(app, ["fingerprint", str(tmp_path), "--include", "("])

    assert result.exit_code == 1
    assert "Invalid filter_from_cache pattern" in result.output


def test_materialize_copies_files(tmp_path: Path) -> None:
    cache_dir = tmp_path / "cache"
    cache_dir.mkdir()
    _setup_tree(cache_dir)
    runner = CliRunner()

    result = runner.invoke(app, ["materialize", str(cache_dir), str(tmp_path / "dest"), "--copy"])

    assert result.exit_code == 0
    assert "Materialized 2 files" in result.stdout
    assert (tmp_path / "dest" / "src" / "app.js").read_text(encoding="utf-8") == "console.log(1)"


def test_probe_link_reports_capability() -> None:
    runner = CliRunner()

    result = runner.invoke(app, ["probe-link"])

    assert result.exit_code == 0
    assert "Hard links" in result.stdout
