"""Torrent metadata helpers for seedmatch."""

from asyncer import asyncify
from torf import Torrent


def read_infohash(torrent_path: str) -> str:
    """Read a .torrent file and return its info-hash.

    Args:
        torrent_path: Path of the .torrent file.

    Returns:
        str: Lowercase hex v1 info-hash.

    Raises:
        torf.TorfError: If the file cannot be read or is not a valid torrent.
    """
    return Torrent.read(torrent_path).infohash.lower()


async def read_infohash_async(torrent_path: str) -> str:
    """Async wrapper around ``read_infohash`` running in a worker thread."""
    return await asyncify(read_infohash)(torrent_path)
