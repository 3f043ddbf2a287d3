"""Unit tests for TorrentRegistrar."""

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import anyio
import pytest

from seedmatch.clients.client_common import TorrentConflictError
from seedmatch.config import RegistryErrorPolicy
from seedmatch.core.models import RegistrationStatus, ResolvedMatch
from seedmatch.core.registrar import TorrentRegistrar
from seedmatch.errors import RegistrationError

pytestmark = pytest.mark.anyio


# --- Fixtures ---


@pytest.fixture
def torrent_file(tmp_path: Path) -> Path:
    """Create a placeholder .torrent file."""
    path = tmp_path / "ubuntu.torrent"
    path.write_bytes(b"d4:infod4:name6:ubuntuee")
    return path


@pytest.fixture
def match(torrent_file: Path) -> ResolvedMatch:
    return ResolvedMatch(
        torrent_path=str(torrent_file),
        content_hash="abc123",
        target_dir="/data/incoming/",
    )


@pytest.fixture
def registrar(mock_torrent_client: MagicMock) -> TorrentRegistrar:
    return TorrentRegistrar(mock_torrent_client)


# --- Tests for load_registered ---


class TestLoadRegistered:
    """Tests for TorrentRegistrar.load_registered."""

    async def test_loads_client_hashes(
        self, registrar: TorrentRegistrar, mock_torrent_client: MagicMock
    ) -> None:
        """Should keep the hashes reported by the client."""
        mock_torrent_client.get_torrent_hashes = AsyncMock(
            return_value={"abc123", "def456"}
        )

        result = await registrar.load_registered()

        assert result == frozenset({"abc123", "def456"})
        assert registrar.registered == result

    async def test_degrades_to_empty_set(
        self, registrar: TorrentRegistrar, mock_torrent_client: MagicMock
    ) -> None:
        """Should assume nothing is registered when the fetch fails."""
        mock_torrent_client.get_torrent_hashes = AsyncMock(
            side_effect=ConnectionError("connection refused")
        )

        assert await registrar.load_registered() == frozenset()

    async def test_abort_policy_raises(self, mock_torrent_client: MagicMock) -> None:
        """Should raise RegistrationError under the abort policy."""
        mock_torrent_client.get_torrent_hashes = AsyncMock(
            side_effect=ConnectionError("connection refused")
        )
        registrar = TorrentRegistrar(
            mock_torrent_client, on_registry_error=RegistryErrorPolicy.ABORT
        )

        with pytest.raises(RegistrationError, match="connection refused"):
            await registrar.load_registered()


# --- Tests for register ---


class TestRegister:
    """Tests for TorrentRegistrar.register."""

    async def test_adds_unknown_torrent(
        self,
        registrar: TorrentRegistrar,
        mock_torrent_client: MagicMock,
        match: ResolvedMatch,
        torrent_file: Path,
    ) -> None:
        """Should submit the torrent data with the target directory."""
        await registrar.load_registered()

        status = await registrar.register(match)

        assert status == RegistrationStatus.ADDED
        mock_torrent_client.add_torrent.assert_awaited_once_with(
            torrent_file.read_bytes(), "/data/incoming/"
        )
        assert registrar.stats.added == 1

    async def test_never_submits_registered_hash(
        self,
        registrar: TorrentRegistrar,
        mock_torrent_client: MagicMock,
        match: ResolvedMatch,
    ) -> None:
        """Should skip a match whose hash the client already has."""
        mock_torrent_client.get_torrent_hashes = AsyncMock(return_value={"abc123"})
        await registrar.load_registered()

        status = await registrar.register(match)

        assert status == RegistrationStatus.ALREADY_REGISTERED
        mock_torrent_client.add_torrent.assert_not_called()
        assert registrar.stats.already_registered == 1

    async def test_same_content_submitted_once(
        self,
        registrar: TorrentRegistrar,
        mock_torrent_client: MagicMock,
        match: ResolvedMatch,
        tmp_path: Path,
    ) -> None:
        """Should not submit the same info-hash twice in one run."""
        copy = tmp_path / "ubuntu-copy.torrent"
        copy.write_bytes(b"d4:infod4:name6:ubuntuee")
        await registrar.load_registered()

        first = await registrar.register(match)
        second = await registrar.register(
            ResolvedMatch(
                torrent_path=str(copy),
                content_hash=match.content_hash,
                target_dir="/data/other/",
            )
        )

        assert first == RegistrationStatus.ADDED
        assert second == RegistrationStatus.ALREADY_REGISTERED
        mock_torrent_client.add_torrent.assert_awaited_once()

    async def test_submit_error_is_not_fatal(
        self,
        registrar: TorrentRegistrar,
        mock_torrent_client: MagicMock,
        match: ResolvedMatch,
    ) -> None:
        """Should report a failed submission and keep going."""
        mock_torrent_client.add_torrent = AsyncMock(
            side_effect=[RuntimeError("HTTP 500"), "other_hash"]
        )
        other = ResolvedMatch(
            torrent_path=match.torrent_path, content_hash="zzz999", target_dir="/x/"
        )

        assert await registrar.register(match) == RegistrationStatus.FAILED
        assert await registrar.register(other) == RegistrationStatus.ADDED
        assert registrar.stats.failed == 1
        assert registrar.stats.added == 1

    async def test_failed_torrent_is_not_marked_submitted(
        self,
        registrar: TorrentRegistrar,
        mock_torrent_client: MagicMock,
        match: ResolvedMatch,
    ) -> None:
        """Should leave a failed hash eligible for another torrent path."""
        mock_torrent_client.add_torrent = AsyncMock(side_effect=RuntimeError("boom"))

        await registrar.register(match)

        assert match.content_hash not in registrar.submitted

    async def test_missing_torrent_file_is_a_failure(
        self,
        registrar: TorrentRegistrar,
        mock_torrent_client: MagicMock,
        tmp_path: Path,
    ) -> None:
        """Should count an unreadable torrent file as a failed submission."""
        missing = ResolvedMatch(
            torrent_path=str(tmp_path / "gone.torrent"),
            content_hash="abc123",
            target_dir="/data/",
        )

        assert await registrar.register(missing) == RegistrationStatus.FAILED
        mock_torrent_client.add_torrent.assert_not_called()

    async def test_conflict_counts_as_duplicate(
        self,
        registrar: TorrentRegistrar,
        mock_torrent_client: MagicMock,
        match: ResolvedMatch,
    ) -> None:
        """Should count a client-side duplicate separately from failures."""
        mock_torrent_client.add_torrent = AsyncMock(
            side_effect=TorrentConflictError("Torrent already in session: abc123")
        )

        status = await registrar.register(match)

        assert status == RegistrationStatus.DUPLICATE
        assert registrar.stats.duplicates == 1
        assert registrar.stats.failed == 0


# --- Tests for run ---


class TestRun:
    """Tests for TorrentRegistrar.run."""

    async def test_drains_stream(
        self,
        registrar: TorrentRegistrar,
        mock_torrent_client: MagicMock,
        match: ResolvedMatch,
    ) -> None:
        """Should register every match until the stream is closed."""
        send, receive = anyio.create_memory_object_stream[ResolvedMatch](0)
        other = ResolvedMatch(
            torrent_path=match.torrent_path, content_hash="def456", target_dir="/y/"
        )

        async with anyio.create_task_group() as tg:
            tg.start_soon(registrar.run, receive)
            async with send:
                await send.send(match)
                await send.send(other)

        assert registrar.stats.received == 2
        assert mock_torrent_client.add_torrent.await_count == 2
