"""Read-only access to the on-disk path database.

The database is a SQLite file with a ``files(path, file)`` table, one row per
known file; the full path of a row is ``path || '/' || file``.
"""

import sqlite3
from pathlib import Path

from asyncer import asyncify

from . import logger
from .errors import ConfigurationError

LIKE_ESCAPE = "\\"

LOOKUP_QUERY = (
    "SELECT path || '/' || file FROM files "
    "WHERE path || '/' || file LIKE ? ESCAPE '\\'"
)


def escape_like(fragment: str) -> str:
    """Escape LIKE wildcards so the fragment matches literally."""
    return (
        fragment.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


class PathDatabase:
    """Read-only lookup service over the path database.

    Args:
        path: SQLite database file.
        timeout: Seconds to wait on a locked database before failing.
    """

    def __init__(self, path: str, timeout: float = 30.0) -> None:
        self.path = path
        self.timeout = timeout
        self._conn: sqlite3.Connection | None = None

    async def connect(self) -> None:
        """Open the database read-only.

        Raises:
            ConfigurationError: If the file is missing or not a usable database.
        """
        if not Path(self.path).is_file():
            raise ConfigurationError(f"Path database not found: {self.path}")

        uri = Path(self.path).absolute().as_uri() + "?mode=ro"
        try:
            self._conn = await asyncify(sqlite3.connect)(
                uri, timeout=self.timeout, uri=True, check_same_thread=False
            )
        except sqlite3.Error as e:
            raise ConfigurationError(
                f"Cannot open path database {self.path}: {e}"
            ) from e
        logger.debug("Opened path database %s (timeout %ss)", self.path, self.timeout)

    async def close(self) -> None:
        if self._conn is not None:
            await asyncify(self._conn.close)()
            self._conn = None

    async def __aenter__(self) -> "PathDatabase":
        await self.connect()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    def _search(self, pattern: str) -> list[str]:
        if self._conn is None:
            raise sqlite3.ProgrammingError("Path database is not connected")
        cursor = self._conn.execute(LOOKUP_QUERY, (pattern,))
        try:
            return [row[0] for row in cursor]
        finally:
            cursor.close()

    async def search_paths_by_suffix(self, fragment: str) -> list[str]:
        """Find stored full paths ending with ``fragment``.

        The query is a broad ``LIKE '%fragment'`` scan; callers still verify
        the exact suffix. Rows come back in storage order.

        Args:
            fragment: Relative path fragment to look for.

        Returns:
            list[str]: Candidate full paths.

        Raises:
            sqlite3.Error: If the query fails.
        """
        return await asyncify(self._search)("%" + escape_like(fragment))
