"""Core reconcile pipeline for seedmatch."""

from .models import (
    ReaderStats,
    ReconcileStats,
    RegistrarStats,
    RegistrationStatus,
    ResolvedMatch,
    ResolverStats,
    TorrentFileRef,
)
from .pipeline import ReconcilePipeline
from .reader import InputReader, parse_line
from .registrar import TorrentRegistrar
from .resolver import PathResolver
from .utils import read_infohash, read_infohash_async

__all__ = [
    "InputReader",
    "PathResolver",
    "ReaderStats",
    "ReconcilePipeline",
    "ReconcileStats",
    "RegistrarStats",
    "RegistrationStatus",
    "ResolvedMatch",
    "ResolverStats",
    "TorrentFileRef",
    "TorrentRegistrar",
    "parse_line",
    "read_infohash",
    "read_infohash_async",
]
