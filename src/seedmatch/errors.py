"""Exception types for seedmatch."""


class SeedmatchError(Exception):
    """Base class for seedmatch errors."""


class ConfigurationError(SeedmatchError):
    """Raised when the run configuration is incomplete or invalid."""


class ResolutionError(SeedmatchError):
    """Raised when the path database cannot be queried.

    A broken database connection cannot recover mid-run, so this error stops
    the resolver and ends the whole run.
    """

    def __init__(self, fragment: str, cause: Exception) -> None:
        super().__init__(f"Path database query failed for {fragment!r}: {cause}")
        self.fragment = fragment
        self.cause = cause


class RegistrationError(SeedmatchError):
    """Raised when the torrent client's registered torrents cannot be fetched."""
