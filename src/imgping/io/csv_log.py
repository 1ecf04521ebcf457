"""Append-only CSV log of (path, response) rows shared by concurrent pipelines."""

from __future__ import annotations

import asyncio
import csv
import os
from pathlib import Path
from types import TracebackType


class CsvResultLog:
    """Single owner of the CSV file handle.

    Callers only ever go through :meth:`append`, which holds one lock for the
    duration of a write plus flush, so rows from concurrent pipelines never
    interleave. The file is opened in append mode when the log is created;
    an OSError there is a setup error and propagates to the caller.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._file = open(self.path, "a", newline="", encoding="utf-8")
        self._writer = csv.writer(self._file, lineterminator="\n")
        self._lock = asyncio.Lock()
        self.rows_written = 0

    def _write_row(self, row: list[str]) -> None:
        self._writer.writerow(row)
        self._file.flush()
        os.fsync(self._file.fileno())

    async def append(self, image_path: str, response_text: str) -> None:
        """Append one row and make it durable before returning."""
        async with self._lock:
            await asyncio.to_thread(self._write_row, [image_path, response_text])
            self.rows_written += 1

    def close(self) -> None:
        if not self._file.closed:
            self._file.close()

    async def __aenter__(self) -> CsvResultLog:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
