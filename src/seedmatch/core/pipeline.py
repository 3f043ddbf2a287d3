"""Pipeline coordinator wiring reader, resolver and registrar."""

from collections.abc import Iterable
from contextlib import aclosing

import anyio
from anyio.streams.memory import MemoryObjectReceiveStream, MemoryObjectSendStream

from .. import logger
from ..errors import ResolutionError
from .models import ReconcileStats, ResolvedMatch, TorrentFileRef
from .reader import InputReader
from .registrar import TorrentRegistrar
from .resolver import PathResolver


class ReconcilePipeline:
    """Runs the three reconcile stages concurrently.

    The reader runs on the calling task and feeds the resolver through a
    zero-capacity stream; the resolver feeds the registrar the same way, so
    each stage is throttled to the pace of the next one.

    Args:
        reader: InputReader producing torrent/file pairs.
        resolver: PathResolver turning pairs into matches.
        registrar: TorrentRegistrar adding matches to the client.
    """

    def __init__(
        self,
        reader: InputReader,
        resolver: PathResolver,
        registrar: TorrentRegistrar,
    ) -> None:
        self.reader = reader
        self.resolver = resolver
        self.registrar = registrar
        self._resolution_error: ResolutionError | None = None

    @property
    def stats(self) -> ReconcileStats:
        return ReconcileStats(
            reader=self.reader.stats,
            resolver=self.resolver.stats,
            registrar=self.registrar.stats,
        )

    async def run(self, sources: Iterable[str]) -> ReconcileStats:
        """Reconcile every pair found in ``sources``.

        Args:
            sources: Input file paths, processed in order.

        Returns:
            ReconcileStats: Counters of the finished run.

        Raises:
            RegistrationError: If registered torrents cannot be fetched and
                the registrar is configured to abort.
            ResolutionError: If the path database failed mid-run. Matches
                resolved before the failure are still registered.
        """
        logger.section("===== Reconciling Torrents =====")
        self._resolution_error = None

        await self.registrar.load_registered()

        ref_send, ref_receive = anyio.create_memory_object_stream[TorrentFileRef](0)
        match_send, match_receive = anyio.create_memory_object_stream[ResolvedMatch](0)

        try:
            async with anyio.create_task_group() as tg:
                tg.start_soon(self._run_resolver, ref_receive, match_send)
                tg.start_soon(self.registrar.run, match_receive)
                await self._feed(sources, ref_send)
        finally:
            self._log_summary()

        if self._resolution_error is not None:
            raise self._resolution_error
        return self.stats

    async def _run_resolver(
        self,
        receive_stream: MemoryObjectReceiveStream[TorrentFileRef],
        send_stream: MemoryObjectSendStream[ResolvedMatch],
    ) -> None:
        try:
            await self.resolver.run(receive_stream, send_stream)
        except ResolutionError as e:
            self._resolution_error = e

    async def _feed(
        self,
        sources: Iterable[str],
        send_stream: MemoryObjectSendStream[TorrentFileRef],
    ) -> None:
        async with send_stream, aclosing(self.reader.read(sources)) as refs:
            async for ref in refs:
                try:
                    await send_stream.send(ref)
                except anyio.BrokenResourceError:
                    logger.error("Path resolver stopped, abandoning remaining input")
                    return

    def _log_summary(self) -> None:
        reader = self.reader.stats
        resolver = self.resolver.stats
        registrar = self.registrar.stats
        logger.success("Reconcile summary:")
        logger.success(
            "Inputs read: %d (%d unreadable)", reader.sources_read, reader.sources_failed
        )
        logger.success(
            "Lines read: %d (%d invalid)", reader.lines_read, reader.invalid_lines
        )
        logger.success("Database queries: %d", resolver.queried)
        logger.success("Excluded candidates: %d", resolver.excluded)
        logger.success("Torrents resolved: %d", resolver.matched)
        logger.success("Torrents unresolved: %d", resolver.unresolved)
        logger.success("Unreadable torrents: %d", resolver.hash_failed)
        logger.success("Already registered: %d", registrar.already_registered)
        logger.success("Torrents added: %d", registrar.added)
        logger.success("Rejected as duplicate: %d", registrar.duplicates)
        logger.success("Failed to add: %d", registrar.failed)
        logger.section("===== Reconcile Complete =====")
