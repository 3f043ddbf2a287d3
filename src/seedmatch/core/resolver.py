"""Path resolution stage for seedmatch."""

import re
import sqlite3
from collections.abc import Awaitable, Callable

from anyio.streams.memory import MemoryObjectReceiveStream, MemoryObjectSendStream
from torf import TorfError

from .. import logger
from ..db import PathDatabase
from ..errors import ResolutionError
from .models import ResolvedMatch, ResolverStats, TorrentFileRef
from .utils import read_infohash_async

# Type alias for the info-hash derivation signature
HashFn = Callable[[str], Awaitable[str]]


class PathResolver:
    """Resolves torrent/file pairs to payload directories.

    Each torrent is resolved at most once: the first candidate path that
    survives the exclusion pattern and ends with the contained file wins, and
    later pairs for the same torrent are dropped without a query.

    Args:
        database: Path database to query.
        exclude: Optional pattern; candidates it matches are ignored.
        hash_fn: Info-hash derivation, called only once a match is accepted.
    """

    def __init__(
        self,
        database: PathDatabase,
        exclude: re.Pattern[str] | None = None,
        hash_fn: HashFn = read_infohash_async,
    ) -> None:
        self.database = database
        self.exclude = exclude
        self.hash_fn = hash_fn
        # torrent path -> resolved target directory
        self.memo: dict[str, str] = {}
        self.stats = ResolverStats()

    async def resolve(self, ref: TorrentFileRef) -> ResolvedMatch | None:
        """Resolve one pair.

        Args:
            ref: Torrent/file pair to resolve.

        Returns:
            ResolvedMatch | None: The match, or None if the torrent is already
                resolved, nothing matched, or its info-hash is unreadable.

        Raises:
            ResolutionError: If the path database query fails.
        """
        if ref.torrent_path in self.memo:
            self.stats.skipped_resolved += 1
            return None

        logger.debug("Querying %s: %s", ref.torrent_path, ref.contained_file)
        self.stats.queried += 1
        try:
            candidates = await self.database.search_paths_by_suffix(ref.contained_file)
        except sqlite3.Error as e:
            logger.error(
                "Path database query failed for %s (%s): %s",
                ref.torrent_path,
                ref.contained_file,
                e,
            )
            raise ResolutionError(ref.contained_file, e) from e

        for candidate in candidates:
            if self.exclude is not None and self.exclude.search(candidate):
                self.stats.excluded += 1
                logger.debug("Exclude: %s", candidate)
                continue

            logger.debug("Result: %s", candidate)
            if not candidate.endswith(ref.contained_file):
                continue

            target_dir = candidate[: -len(ref.contained_file)]
            self.memo[ref.torrent_path] = target_dir
            logger.debug("Match: %s", target_dir)

            try:
                content_hash = await self.hash_fn(ref.torrent_path)
            except (TorfError, OSError) as e:
                self.stats.hash_failed += 1
                logger.error("Cannot read torrent %s: %s", ref.torrent_path, e)
                return None

            self.stats.matched += 1
            logger.info("Resolved %s -> %s", ref.torrent_path, target_dir)
            return ResolvedMatch(
                torrent_path=ref.torrent_path,
                content_hash=content_hash,
                target_dir=target_dir,
            )

        self.stats.unresolved += 1
        logger.info(
            "No match for %s (searched %s, %d candidates)",
            ref.torrent_path,
            ref.contained_file,
            len(candidates),
        )
        return None

    async def run(
        self,
        receive_stream: MemoryObjectReceiveStream[TorrentFileRef],
        send_stream: MemoryObjectSendStream[ResolvedMatch],
    ) -> None:
        """Resolve pairs until the input stream closes.

        Both streams are closed on exit, including when a query error aborts
        the stage, so the upstream sender and the downstream receiver both
        see the stage end.
        """
        async with receive_stream, send_stream:
            async for ref in receive_stream:
                match = await self.resolve(ref)
                if match is not None:
                    await send_stream.send(match)
