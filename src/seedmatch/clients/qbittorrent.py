"""
qBittorrent client implementation.
Provides integration with qBittorrent via its Web API.
"""

import qbittorrentapi
from asyncer import asyncify
from torf import Torrent

from .. import logger
from .client_common import TorrentClient, TorrentConflictError


class QBittorrentClient(TorrentClient):
    """qBittorrent torrent client implementation."""

    def _connect(self) -> qbittorrentapi.Client:
        client = qbittorrentapi.Client(
            host=self.client_config.url or "http://localhost:8080",
            username=self.client_config.username,
            password=self.client_config.password,
        )
        # Authenticate with qBittorrent
        if self.client_config.username and self.client_config.password:
            client.auth_log_in()
        return client

    async def _get_torrent_hashes(self) -> list[str]:
        client = await self._get_client()
        torrents = await asyncify(client.torrents_info)()
        return [torrent.hash for torrent in torrents]

    async def _add_torrent(self, torrent_data: bytes, download_dir: str) -> str:
        """Add torrent to qBittorrent.

        Args:
            torrent_data (bytes): Torrent file data.
            download_dir (str): Download directory.

        Returns:
            str: Torrent hash.
        """
        client = await self._get_client()
        result = await asyncify(client.torrents_add)(
            torrent_files=torrent_data,
            save_path=download_dir,
            is_paused=self.add_paused,
            category=self.label,
            use_auto_torrent_management=False,
        )

        # qBittorrent doesn't return the hash directly, we need to decode it
        info_hash = Torrent.read_stream(torrent_data).infohash

        # qBittorrent returns "Ok." for success and "Fails." for failure
        if result != "Ok.":
            existing = await asyncify(client.torrents_info)(torrent_hashes=info_hash)
            if existing:
                logger.debug("qBittorrent already has torrent %s", info_hash)
                raise TorrentConflictError(f"Torrent already in client: {info_hash}")
            raise ValueError(f"Failed to add torrent to qBittorrent: {result}")

        return info_hash
