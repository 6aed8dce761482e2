"""Exceptions raised across camelot-sort."""

from typing import Optional


class CamelotSortError(Exception):
    """Base exception for camelot-sort operations."""

    pass


class KeyParseError(CamelotSortError, ValueError):
    """Raised when a key, Camelot label or pitch class cannot be interpreted."""

    def __init__(self, raw: object, message: Optional[str] = None):
        self.raw = raw
        super().__init__(message or f"Cannot parse key: {raw!r}")


class LookupFailedError(CamelotSortError):
    """Raised when a candidate source cannot answer a query."""

    pass


class SetupError(CamelotSortError):
    """Raised for unrecoverable setup problems (credentials, config, arguments)."""

    pass


class CatalogError(SetupError):
    """Raised when the local catalog file exists but cannot be read."""

    pass


class PlaylistReadError(CamelotSortError):
    """Raised when the playlist cannot be read from the host."""

    pass


class WriteBackError(CamelotSortError):
    """Raised when the reordered playlist cannot be written back."""

    def __init__(
        self, playlist_id: str, status_code: Optional[int] = None, message: Optional[str] = None
    ):
        self.playlist_id = playlist_id
        self.status_code = status_code
        detail = f" (HTTP {status_code})" if status_code else ""
        super().__init__(message or f"Failed to write playlist {playlist_id}{detail}")
