"""Input reader for torrent/file pair lists."""

import io
import sys
from collections.abc import AsyncIterator, Iterable

import anyio

from .. import logger
from .models import ReaderStats, TorrentFileRef

STDIN_SOURCE = "-"


def parse_line(line: str) -> TorrentFileRef | None:
    """Parse one ``torrent<TAB>file`` line.

    Args:
        line: Input line, with or without its line terminator.

    Returns:
        TorrentFileRef | None: The pair, or None if the line does not have
            exactly two non-empty tab-separated fields.
    """
    fields = line.rstrip("\r\n").split("\t")
    if len(fields) != 2:
        return None
    torrent_path, contained_file = (field.strip() for field in fields)
    if not torrent_path or not contained_file:
        return None
    return TorrentFileRef(torrent_path=torrent_path, contained_file=contained_file)


class InputReader:
    """Reads torrent/file pairs from input files, one source after another."""

    def __init__(self) -> None:
        self.stats = ReaderStats()

    async def read(self, sources: Iterable[str]) -> AsyncIterator[TorrentFileRef]:
        """Yield pairs from every source in order.

        Unreadable sources and malformed lines are logged and skipped.

        Args:
            sources: Input file paths; ``-`` reads standard input.

        Yields:
            TorrentFileRef: One pair per valid line.
        """
        for source in sources:
            async for ref in self._read_source(source):
                yield ref

    async def _read_source(self, source: str) -> AsyncIterator[TorrentFileRef]:
        stdin = None
        if source == STDIN_SOURCE:
            # Decoded as UTF-8 whatever the locale; detached when done
            stdin = io.TextIOWrapper(
                sys.stdin.buffer, encoding="utf-8", errors="replace"
            )
            f = anyio.wrap_file(stdin)
        else:
            try:
                f = await anyio.open_file(source, encoding="utf-8", errors="replace")
            except OSError as e:
                self.stats.sources_failed += 1
                logger.error("Cannot open input %s: %s", source, e)
                return

        logger.debug("Reading input %s", source)
        self.stats.sources_read += 1
        lineno = 0
        try:
            async for line in f:
                lineno += 1
                self.stats.lines_read += 1
                ref = parse_line(line)
                if ref is None:
                    self.stats.invalid_lines += 1
                    logger.warning(
                        "Invalid line %s:%d: %r", source, lineno, line.rstrip("\r\n")
                    )
                    continue
                yield ref
        except OSError as e:
            self.stats.sources_failed += 1
            logger.error("Error reading input %s at line %d: %s", source, lineno, e)
        finally:
            if stdin is not None:
                stdin.detach()
            else:
                await f.aclose()
