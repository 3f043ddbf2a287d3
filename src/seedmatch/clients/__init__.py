"""Torrent client implementations for seedmatch."""

from .client_common import (
    TorrentClient,
    TorrentClientConfig,
    TorrentConflictError,
    parse_libtc_url,
)
from .deluge import DelugeClient
from .qbittorrent import QBittorrentClient
from .registry import create_torrent_client
from .transmission import TransmissionClient

__all__ = [
    "DelugeClient",
    "QBittorrentClient",
    "TorrentClient",
    "TorrentClientConfig",
    "TorrentConflictError",
    "TransmissionClient",
    "create_torrent_client",
    "parse_libtc_url",
]
