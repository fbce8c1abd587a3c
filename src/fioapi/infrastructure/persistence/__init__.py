"""Persistence adapters for the download marker."""

from fioapi.infrastructure.persistence.download_marker_store import (
    FileDownloadMarkerStore,
    InMemoryDownloadMarkerStore,
)

__all__ = [
    "FileDownloadMarkerStore",
    "InMemoryDownloadMarkerStore",
]
