from __future__ import annotations

from pathlib import Path


class OsmFetchError(Exception):
    """Base class for cache and download failures."""


class CacheEntryNotFound(OsmFetchError, LookupError):
    def __init__(self, base_name: str) -> None:
        super().__init__(f"No cached file for base name {base_name!r}")
        self.base_name = base_name


class TransportError(OsmFetchError):
    """A single endpoint could not deliver the full response."""

    prefix = "Could not download data from"

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"{self.prefix} {url} ({reason})")
        self.url = url
        self.reason = reason


class MalformedUrlError(TransportError):
    prefix = "The URL was malformed:"


class CacheReadError(OsmFetchError):
    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Could not read cached file {path} ({reason})")
        self.path = path
        self.reason = reason
