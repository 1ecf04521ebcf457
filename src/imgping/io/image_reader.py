"""Recursive image discovery by file extension."""

from __future__ import annotations

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)


def is_image(path: str | Path, extensions: tuple[str, ...]) -> bool:
    """True if the file extension (case-insensitive) is one of ``extensions``."""
    suffix = Path(path).suffix.lower()
    return bool(suffix) and suffix in {e.lower() for e in extensions}


def _log_walk_error(err: OSError) -> None:
    logger.debug("Skipping unreadable entry: %s", err)


def discover_images(
    root: str | Path,
    extensions: tuple[str, ...],
) -> list[str]:
    """Recursively discover image files under root, sorted by path.

    Directory symlinks are not followed and unreadable subdirectories are
    skipped. Raises OSError if the root itself cannot be listed.
    """
    root = Path(root)
    # Fail loudly on the root; os.walk would silently yield nothing
    with os.scandir(root):
        pass

    found: list[str] = []
    skipped = 0
    for dirpath, _dirnames, filenames in os.walk(root, onerror=_log_walk_error):
        for fn in filenames:
            if not is_image(fn, extensions):
                continue
            full = os.path.join(dirpath, fn)
            # Broken symlinks and special files
            if not os.path.isfile(full):
                skipped += 1
                continue
            found.append(full)
    if skipped:
        logger.debug("Skipped %d non-regular entries under %s", skipped, root)
    found.sort()
    return found
