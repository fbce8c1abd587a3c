"""Port interfaces for banking operations.

These interfaces define what the client needs from its environment.
Implementations (adapters) are provided in the infrastructure layer.
"""

from fioapi.domain.banking.ports.download_marker_port import DownloadMarkerPort

__all__ = [
    "DownloadMarkerPort",
]
