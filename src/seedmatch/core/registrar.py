"""Torrent registration stage for seedmatch."""

from anyio import Path
from anyio.streams.memory import MemoryObjectReceiveStream

from .. import logger
from ..clients import TorrentClient, TorrentConflictError
from ..config import RegistryErrorPolicy
from ..errors import RegistrationError
from .models import RegistrarStats, RegistrationStatus, ResolvedMatch


class TorrentRegistrar:
    """Adds resolved torrents to the torrent client, once each.

    The client's registered torrents are fetched once by ``load_registered``;
    matches whose info-hash is in that set are never submitted.

    Args:
        torrent_client: TorrentClient instance torrents are added to.
        on_registry_error: Whether a failed fetch of registered torrents
            degrades to an empty set or aborts the run.
    """

    def __init__(
        self,
        torrent_client: TorrentClient,
        on_registry_error: RegistryErrorPolicy = RegistryErrorPolicy.DEGRADE,
    ) -> None:
        self.torrent_client = torrent_client
        self.on_registry_error = on_registry_error
        self.registered: frozenset[str] = frozenset()
        # Hashes added (or found duplicated) during this run
        self.submitted: set[str] = set()
        self.stats = RegistrarStats()

    async def load_registered(self) -> frozenset[str]:
        """Fetch the info-hashes already registered in the client.

        Returns:
            frozenset[str]: Registered info-hashes.

        Raises:
            RegistrationError: If the fetch fails and the policy is abort.
        """
        try:
            hashes = await self.torrent_client.get_torrent_hashes()
        except Exception as e:
            if self.on_registry_error == RegistryErrorPolicy.ABORT:
                logger.error("Failed to list torrents in client: %s", e)
                raise RegistrationError(f"Failed to list torrents in client: {e}") from e
            logger.warning(
                "Failed to list torrents in client, assuming none are registered: %s",
                e,
            )
            hashes = set()

        self.registered = frozenset(hashes)
        logger.info("Torrent client has %d registered torrents", len(self.registered))
        return self.registered

    async def register(self, match: ResolvedMatch) -> RegistrationStatus:
        """Submit one match to the client unless it is already known.

        Submission errors are logged and reported through the returned
        status; they never propagate.

        Args:
            match: Resolved torrent to add.

        Returns:
            RegistrationStatus: Outcome for this match.
        """
        self.stats.received += 1

        if match.content_hash in self.registered or match.content_hash in self.submitted:
            self.stats.already_registered += 1
            logger.debug(
                "Skipping %s: %s already in client",
                match.torrent_path,
                match.content_hash,
            )
            return RegistrationStatus.ALREADY_REGISTERED

        try:
            torrent_data = await Path(match.torrent_path).read_bytes()
            await self.torrent_client.add_torrent(torrent_data, match.target_dir)
        except TorrentConflictError as e:
            self.submitted.add(match.content_hash)
            self.stats.duplicates += 1
            logger.warning("Client rejected %s as duplicate: %s", match.torrent_path, e)
            return RegistrationStatus.DUPLICATE
        except Exception as e:
            self.stats.failed += 1
            logger.error(
                "Failed to add %s at %s: %s", match.torrent_path, match.target_dir, e
            )
            return RegistrationStatus.FAILED

        self.submitted.add(match.content_hash)
        self.stats.added += 1
        logger.success("Added %s at %s", match.torrent_path, match.target_dir)
        return RegistrationStatus.ADDED

    async def run(
        self, receive_stream: MemoryObjectReceiveStream[ResolvedMatch]
    ) -> None:
        """Register matches until the stream closes."""
        async with receive_stream:
            async for match in receive_stream:
                await self.register(match)
