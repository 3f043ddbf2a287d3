"""Data models for the seedmatch pipeline."""

from enum import StrEnum

import msgspec


class TorrentFileRef(msgspec.Struct, frozen=True):
    """A file expected inside a torrent.

    Attributes:
        torrent_path: Path of the .torrent file.
        contained_file: Relative path of one payload file, searched as a
            suffix of the stored full paths.
    """

    torrent_path: str
    contained_file: str


class ResolvedMatch(msgspec.Struct, frozen=True):
    """A torrent whose payload directory has been found.

    Attributes:
        torrent_path: Path of the .torrent file.
        content_hash: Lowercase hex info-hash of the torrent.
        target_dir: Directory the payload lives under.
    """

    torrent_path: str
    content_hash: str
    target_dir: str


class RegistrationStatus(StrEnum):
    """Outcome of registering one resolved match."""

    ADDED = "added"
    ALREADY_REGISTERED = "already_registered"
    DUPLICATE = "duplicate"
    FAILED = "failed"


class ReaderStats(msgspec.Struct):
    """Counters owned by the input reader."""

    sources_read: int = 0
    sources_failed: int = 0
    lines_read: int = 0
    invalid_lines: int = 0


class ResolverStats(msgspec.Struct):
    """Counters owned by the path resolver."""

    queried: int = 0
    skipped_resolved: int = 0
    excluded: int = 0
    matched: int = 0
    unresolved: int = 0
    hash_failed: int = 0


class RegistrarStats(msgspec.Struct):
    """Counters owned by the registrar."""

    received: int = 0
    already_registered: int = 0
    added: int = 0
    duplicates: int = 0
    failed: int = 0


class ReconcileStats(msgspec.Struct):
    """Statistics for one reconcile run."""

    reader: ReaderStats = msgspec.field(default_factory=ReaderStats)
    resolver: ResolverStats = msgspec.field(default_factory=ResolverStats)
    registrar: RegistrarStats = msgspec.field(default_factory=RegistrarStats)
