"""Shared test fixtures and configuration for seedmatch tests."""

import sqlite3
from collections.abc import Callable
from pathlib import Path

import pytest
from torf import Torrent

import seedmatch.logger as logger_module


def pytest_configure(config: pytest.Config) -> None:
    """Initialize logger once for all tests."""
    if getattr(logger_module, "_logger_instance", None) is None:
        logger_module.init_logger("debug")


@pytest.fixture
def make_path_db(tmp_path: Path) -> Callable[[list[str]], Path]:
    """Build a path database holding the given full paths, in order."""

    def _make(full_paths: list[str]) -> Path:
        db_path = tmp_path / "files.db"
        conn = sqlite3.connect(db_path)
        conn.execute("CREATE TABLE files (path TEXT NOT NULL, file TEXT NOT NULL)")
        conn.executemany(
            "INSERT INTO files (path, file) VALUES (?, ?)",
            [tuple(full_path.rsplit("/", 1)) for full_path in full_paths],
        )
        conn.commit()
        conn.close()
        return db_path

    return _make


@pytest.fixture
def make_torrent_file(tmp_path: Path) -> Callable[[str], tuple[Path, str]]:
    """Write a real .torrent file and return its path and info-hash."""

    def _make(name: str) -> tuple[Path, str]:
        content_dir = tmp_path / "content" / name
        content_dir.mkdir(parents=True)
        (content_dir / f"{name}.bin").write_bytes(name.encode() * 512)
        torrent = Torrent(
            path=str(content_dir), trackers=["http://tracker.example/announce"]
        )
        torrent.generate()
        torrent_path = tmp_path / f"{name}.torrent"
        torrent.write(str(torrent_path))
        return torrent_path, torrent.infohash

    return _make
