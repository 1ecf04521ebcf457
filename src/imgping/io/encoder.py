"""Base64 encoding of raw image bytes."""

from __future__ import annotations

import base64
from pathlib import Path


def encode_image(path: str | Path) -> str:
    """Read the whole file and return its standard base64 encoding.

    The file is fully buffered in memory; there is no size cap.
    """
    data = Path(path).read_bytes()
    return base64.b64encode(data).decode("ascii")
