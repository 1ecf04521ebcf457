"""Shared utilities."""

from __future__ import annotations

import logging
import os

from rich.logging import RichHandler


def fmt_bytes(b: int | float) -> str:
    """Format byte count to human-readable string."""
    if b > 1_000_000_000:
        return f"{b / 1_000_000_000:.2f} GB"
    if b > 1_000_000:
        return f"{b / 1_000_000:.2f} MB"
    return f"{b / 1_000:.2f} KB"


def configure_logging(verbose: bool = False) -> None:
    """Route diagnostic logging through Rich. Debug records only when verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(name)s: %(message)s",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )
    # aiohttp's own debug output is noise at this level
    logging.getLogger("aiohttp").setLevel(logging.WARNING)


def display_path(path: str) -> str:
    """Printable text for a filesystem path.

    Undecodable bytes in file names come back from os.walk as lone
    surrogates; they are replaced with U+FFFD so the text can be written
    to UTF-8 files and streams.
    """
    return os.fsencode(path).decode("utf-8", errors="replace")
