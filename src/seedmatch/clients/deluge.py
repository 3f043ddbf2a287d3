"""
Deluge client implementation.
Provides integration with Deluge via its RPC interface.
"""

import base64
import re

import deluge_client
from asyncer import asyncify

from .. import logger
from .client_common import TorrentClient, TorrentConflictError


class DelugeClient(TorrentClient):
    """Deluge torrent client implementation."""

    def _connect(self) -> deluge_client.DelugeRPCClient:
        client = deluge_client.DelugeRPCClient(
            host=self.client_config.host or "localhost",
            port=self.client_config.port or 58846,
            username=self.client_config.username or "",
            password=self.client_config.password or "",
            decode_utf8=True,
            timeout=int(self.client_config.options.get("timeout", 60)),
        )
        # Connect to Deluge daemon
        client.connect()
        return client

    async def _get_torrent_hashes(self) -> list[str]:
        """Get torrent hashes from Deluge.

        Raises:
            ValueError: If Deluge answers with something other than a mapping.
        """
        client = await self._get_client()
        torrent_details = await asyncify(client.call)(
            "core.get_torrents_status", {}, ["hash"]
        )

        if not isinstance(torrent_details, dict):
            raise ValueError(f"Invalid torrents details from Deluge: {torrent_details}")

        return [torrent["hash"] for torrent in torrent_details.values()]

    async def _add_torrent(self, torrent_data: bytes, download_dir: str) -> str:
        """Add torrent to Deluge.

        Args:
            torrent_data (bytes): Torrent file data.
            download_dir (str): Download directory.

        Returns:
            str: Torrent hash.
        """
        client = await self._get_client()
        torrent_b64 = base64.b64encode(torrent_data).decode()
        try:
            torrent_hash = await asyncify(client.call)(
                "core.add_torrent_file",
                None,
                torrent_b64,
                {
                    "download_location": download_dir,
                    "add_paused": self.add_paused,
                },
            )
        except Exception as e:
            if "Torrent already in session" in str(e):
                # Extract torrent hash from error message
                match = re.search(r"\(([a-f0-9]{40})\)", str(e))
                existing = match.group(1) if match else "unknown"
                raise TorrentConflictError(
                    f"Torrent already in session: {existing}"
                ) from e
            raise

        if self.label and torrent_hash:
            await self._set_label(client, str(torrent_hash), self.label)

        return str(torrent_hash)

    async def _set_label(
        self, client: deluge_client.DelugeRPCClient, torrent_hash: str, label: str
    ) -> None:
        """Apply a label through the Label plugin, creating it on demand."""
        try:
            await asyncify(client.call)("label.set_torrent", torrent_hash, label)
        except Exception as label_error:
            if (
                "Unknown Label" in str(label_error)
                or "label does not exist" in str(label_error).lower()
            ):
                try:
                    await asyncify(client.call)("label.add", label)
                    await asyncify(client.call)(
                        "label.set_torrent", torrent_hash, label
                    )
                except Exception as retry_error:
                    logger.warning(
                        "Failed to set label after creating it: %s", retry_error
                    )
            else:
                logger.warning("Failed to set label '%s': %s", label, label_error)
