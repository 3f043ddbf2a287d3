"""Shared fixtures for core tests."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from seedmatch.clients.client_common import TorrentClient


@pytest.fixture
def mock_torrent_client() -> MagicMock:
    """Create a mock TorrentClient with nothing registered."""
    client = MagicMock(spec=TorrentClient)
    client.get_torrent_hashes = AsyncMock(return_value=set())
    client.add_torrent = AsyncMock(return_value="added_hash")
    return client


@pytest.fixture
def fake_hash_fn() -> AsyncMock:
    """Info-hash derivation returning a hash built from the torrent path."""
    return AsyncMock(side_effect=lambda torrent_path: f"hash-of-{torrent_path}")
