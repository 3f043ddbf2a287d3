"""Torrent client factory for seedmatch."""

from urllib.parse import urlparse

from .client_common import TorrentClient
from .deluge import DelugeClient
from .qbittorrent import QBittorrentClient
from .transmission import TransmissionClient

# Torrent client factory mapping
TORRENT_CLIENT_MAPPING: dict[str, type[TorrentClient]] = {
    "transmission": TransmissionClient,
    "qbittorrent": QBittorrentClient,
    "deluge": DelugeClient,
}


def create_torrent_client(
    url: str,
    label: str | None = None,
    add_paused: bool = False,
) -> TorrentClient:
    """Create a torrent client instance based on the URL scheme.

    Args:
        url: The torrent client URL.
        label: Optional label (or category) for added torrents.
        add_paused: Whether torrents are added in paused state.

    Returns:
        Configured torrent client instance.

    Raises:
        ValueError: If URL is empty, None, or client type is not supported.
    """
    if not url or not url.strip():
        raise ValueError("URL cannot be empty")

    parsed = urlparse(url)
    client_type = parsed.scheme.split("+")[0]

    if client_type not in TORRENT_CLIENT_MAPPING:
        raise ValueError(f"Unsupported torrent client type: {client_type}")

    return TORRENT_CLIENT_MAPPING[client_type](
        url, label=label, add_paused=add_paused
    )
