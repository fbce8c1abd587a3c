"""Download marker port interface."""

from abc import ABC, abstractmethod
from datetime import date


class DownloadMarkerPort(ABC):
    """
    Read/write access to the "last successful download" marker.

    The marker is a single calendar date owned by the caller's persistence
    (file, environment, database row). The client only reads it before a
    "since last download" request and writes it on explicit request.
    Implementations are not required to lock; callers sharing one store
    across concurrent clients must serialize writes themselves.
    """

    @abstractmethod
    async def get_last_marker(self) -> date | None:
        """
        Read the current marker.

        Returns
        -------
        Marker date, or None if no marker was ever written
        """

    @abstractmethod
    async def set_marker(self, marker: date) -> None:
        """
        Replace the current marker.

        Parameters
        ----------
        marker
            First date the next "since last download" request should cover
        """
