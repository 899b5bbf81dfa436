# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Command-line entry points for inspecting caches and fingerprints."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from .config import FilterFromCache
from .errors import TreecacheError
from .fingerprint import fingerprint_tree
from .linking import can_link, link_from_cache
from .logging import fail, info, ok

app = typer.Typer(
    name="treecache",
    help="Fingerprint input trees and materialize cached build output.",
    no_args_is_help=True,
    add_completion=False,
)

EmojiOption = Annotated[bool, typer.Option("--emoji/--no-emoji", help="Prefix messages with emoji.")]


@app.command("fingerprint")
def fingerprint_command(
    root: Annotated[Path, typer.Argument(help="Directory to fingerprint.")],
    include: Annotated[
        list[str] | None,
        typer.Option("--include", "-i", help="Regular expression a file must match to count."),
    ] = None,
    exclude: Annotated[
        list[str] | None,
        typer.Option("--exclude", "-x", help="Regular expression removing matching files."),
    ] = None,
    keys: Annotated[bool, typer.Option("--keys", help="Print the token sequence as well.")] = False,
    emoji: EmojiOption = False,
) -> None:
    """Print the fingerprint digest of ROOT."""

    try:
        path_filter = FilterFromCache(include=include or [], exclude=exclude or []).build_filter()
    except TreecacheError as exc:
        fail(str(exc), use_emoji=emoji)
        raise typer.Exit(code=1) from exc
    result = fingerprint_tree(root, should_be_ignored=path_filter.should_be_ignored)
    if keys:
        for token in result.keys:
            typer.echo(repr(token))
    typer.echo(result.digest)


@app.command("materialize")
def materialize_command(
    cache_dir: Annotated[Path, typer.Argument(help="Directory holding cached output.")],
    dest_dir: Annotated[Path, typer.Argument(help="Directory receiving the files.")],
    copy: Annotated[bool, typer.Option("--copy", help="Always copy instead of hard-linking.")] = False,
    emoji: EmojiOption = False,
) -> None:
    """Link or copy every file of CACHE_DIR into DEST_DIR."""

    try:
        written = link_from_cache(cache_dir, dest_dir, use_links=False if copy else None)
    except (TreecacheError, OSError) as exc:
        fail(f"Materialization failed: {exc}", use_emoji=emoji)
        raise typer.Exit(code=1) from exc
    ok(f"Materialized {len(written)} files into {dest_dir}", use_emoji=emoji)


@app.command("probe-link")
def probe_link_command(emoji: EmojiOption = False) -> None:
    """Report whether hard links are used when materializing."""

    if can_link():
        info("Hard links supported", use_emoji=emoji)
    else:
        info("Hard links unsupported, files will be copied", use_emoji=emoji)


def main() -> None:
    """Run the ``treecache`` application."""

    app()


__all__ = ["app", "main"]
