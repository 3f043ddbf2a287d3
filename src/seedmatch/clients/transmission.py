"""
Transmission client implementation.
Provides integration with Transmission via its JSON-RPC interface.
"""

import transmission_rpc
from asyncer import asyncify

from .client_common import TorrentClient

DEFAULT_RPC_PATH = "/transmission/rpc"


class TransmissionClient(TorrentClient):
    """Transmission torrent client implementation."""

    def _connect(self) -> transmission_rpc.Client:
        # transmission_rpc.Client checks the RPC session while being built
        return transmission_rpc.Client(
            protocol=self.client_config.scheme or "http",
            host=self.client_config.host or "localhost",
            port=self.client_config.port or 9091,
            path=self.client_config.path or DEFAULT_RPC_PATH,
            username=self.client_config.username,
            password=self.client_config.password,
            timeout=float(self.client_config.options.get("timeout", 60)),
        )

    async def _get_torrent_hashes(self) -> list[str]:
        client = await self._get_client()
        torrents = await asyncify(client.get_torrents)(arguments=["hashString"])
        return [torrent.hash_string for torrent in torrents]

    async def _add_torrent(self, torrent_data: bytes, download_dir: str) -> str:
        """Add torrent to Transmission.

        Transmission answers a duplicate add with the existing torrent rather
        than an error, so duplicates come back as a normal hash here.

        Args:
            torrent_data (bytes): Torrent file data.
            download_dir (str): Download directory.

        Returns:
            str: Torrent hash string.
        """
        client = await self._get_client()
        torrent = await asyncify(client.add_torrent)(
            torrent_data,
            download_dir=download_dir,
            paused=self.add_paused,
            labels=[self.label] if self.label else None,
        )
        return torrent.hash_string
