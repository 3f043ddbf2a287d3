"""Configuration model for seedmatch.

The configuration is built once at startup (YAML file overlaid with command
line values), validated, and handed to each pipeline stage explicitly.
"""

import re
from enum import StrEnum
from typing import Any
from urllib.parse import quote

import msgspec

from .errors import ConfigurationError

DEFAULT_DB_TIMEOUT = 30.0
DEFAULT_SERVER = "localhost:9091"
DEFAULT_USERNAME = "transmission"


class RegistryErrorPolicy(StrEnum):
    """What to do when the client's registered torrents cannot be fetched."""

    DEGRADE = "degrade"
    ABORT = "abort"


class DatabaseConfig(msgspec.Struct, frozen=True, kw_only=True):
    """Path database settings."""

    path: str | None = None
    timeout: float = DEFAULT_DB_TIMEOUT


class ResolverConfig(msgspec.Struct, frozen=True, kw_only=True):
    """Path resolution settings."""

    # Candidates whose full path matches this regex are ignored
    exclude: str | None = None


class DownloaderConfig(msgspec.Struct, frozen=True, kw_only=True):
    """Torrent client settings."""

    client: str | None = None
    server: str = DEFAULT_SERVER
    username: str = DEFAULT_USERNAME
    password: str = ""
    ssl: bool = False
    label: str | None = None
    add_paused: bool = False
    on_registry_error: RegistryErrorPolicy = RegistryErrorPolicy.DEGRADE

    @property
    def client_url(self) -> str:
        """Get the torrent client URL.

        An explicit ``client`` URL wins. Otherwise a Transmission URL is built
        from ``server``, credentials and the ``ssl`` flag.
        """
        if self.client:
            return self.client

        scheme = "https" if self.ssl else "http"
        userinfo = ""
        if self.username:
            userinfo = quote(self.username, safe="")
            if self.password:
                userinfo += ":" + quote(self.password, safe="")
            userinfo += "@"
        return f"transmission+{scheme}://{userinfo}{self.server}/transmission/rpc"


class Config(msgspec.Struct, frozen=True, kw_only=True):
    """Top-level seedmatch configuration."""

    database: DatabaseConfig = msgspec.field(default_factory=DatabaseConfig)
    resolver: ResolverConfig = msgspec.field(default_factory=ResolverConfig)
    downloader: DownloaderConfig = msgspec.field(default_factory=DownloaderConfig)

    def exclude_pattern(self) -> re.Pattern[str] | None:
        """Compile the exclusion regex.

        Returns:
            re.Pattern[str] | None: Compiled pattern, or None if unset.

        Raises:
            ConfigurationError: If the regex does not compile.
        """
        if not self.resolver.exclude:
            return None
        try:
            return re.compile(self.resolver.exclude)
        except re.error as e:
            raise ConfigurationError(
                f"Invalid exclude pattern {self.resolver.exclude!r}: {e}"
            ) from e


def load_config(path: str | None) -> Config:
    """Load configuration from a YAML file.

    Args:
        path: Path to the YAML file, or None for defaults.

    Returns:
        Config: Decoded configuration.

    Raises:
        ConfigurationError: If the file cannot be read or decoded.
    """
    if path is None:
        return Config()

    try:
        with open(path, "rb") as f:
            data = f.read()
    except OSError as e:
        raise ConfigurationError(f"Cannot read config file {path}: {e}") from e

    if not data.strip():
        return Config()

    try:
        return msgspec.yaml.decode(data, type=Config)
    except msgspec.DecodeError as e:
        raise ConfigurationError(f"Invalid config file {path}: {e}") from e


def apply_overrides(cfg: Config, section: str, **values: Any) -> Config:
    """Return a copy of ``cfg`` with non-None values replaced in one section.

    Args:
        cfg: Base configuration.
        section: Section name (``database``, ``resolver`` or ``downloader``).
        **values: Field values; None means "keep the current value".

    Returns:
        Config: Updated configuration.
    """
    updates = {key: value for key, value in values.items() if value is not None}
    if not updates:
        return cfg
    current = getattr(cfg, section)
    return msgspec.structs.replace(
        cfg, **{section: msgspec.structs.replace(current, **updates)}
    )


def validate_config(cfg: Config) -> None:
    """Check values that must be present before any pipeline work starts.

    Raises:
        ConfigurationError: On a missing database path, a non-positive
            timeout or an invalid exclusion regex.
    """
    if not cfg.database.path:
        raise ConfigurationError("A path database must be set (--db)")
    if cfg.database.timeout <= 0:
        raise ConfigurationError("Database timeout must be positive")
    cfg.exclude_pattern()
