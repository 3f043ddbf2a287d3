"""seedmatch: add torrents to a client at directories found in a path database."""

__version__ = "0.1.0"
