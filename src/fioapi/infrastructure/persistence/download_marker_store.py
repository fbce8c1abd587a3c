"""Download marker store implementations.

Two adapters for DownloadMarkerPort: an in-memory one (tests, one-shot
scripts) and a plain tracking file holding a single ISO date.
"""

from __future__ import annotations

import asyncio
import logging
import os
import tempfile
from datetime import date
from pathlib import Path

from fioapi.domain.banking.exceptions import MalformedFieldError
from fioapi.domain.banking.ports import DownloadMarkerPort

logger = logging.getLogger(__name__)


class InMemoryDownloadMarkerStore(DownloadMarkerPort):
    """Marker kept in process memory."""

    def __init__(self, marker: date | None = None):
        self._marker = marker

    async def get_last_marker(self) -> date | None:
        return self._marker

    async def set_marker(self, marker: date) -> None:
        self._marker = marker


class FileDownloadMarkerStore(DownloadMarkerPort):
    """
    Marker persisted as one ``YYYY-MM-DD`` line in a text file.

    A missing or empty file means no marker was written yet. Writes go to a
    temporary file in the same directory which then replaces the target, so
    a crash never leaves a half-written marker behind.
    """

    def __init__(self, path: str | Path):
        self._path = Path(path).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    async def get_last_marker(self) -> date | None:
        return await asyncio.to_thread(self._read_marker)

    async def set_marker(self, marker: date) -> None:
        await asyncio.to_thread(self._write_marker, marker)
        logger.debug("Wrote marker %s to %s", marker, self._path)

    # File access runs in a worker thread, off the event loop.

    def _read_marker(self) -> date | None:
        try:
            content = self._path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            logger.debug("Marker file %s does not exist yet", self._path)
            return None

        if not content:
            return None

        try:
            return date.fromisoformat(content.splitlines()[0].strip()[:10])
        except ValueError as e:
            msg = f"{self._path} does not contain an ISO date"
            raise MalformedFieldError("marker", msg) from e

    def _write_marker(self, marker: date) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(
            dir=self._path.parent,
            prefix=f".{self._path.name}.",
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(f"{marker.isoformat()}\n")
            Path(tmp_name).replace(self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
