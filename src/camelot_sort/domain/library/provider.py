"""
Provider interfaces for key/tempo sources and playlist hosts.

Candidate sources (local catalog, GetSongBPM) are plain callables that map a
(title, artist) query to CatalogEntry candidates. Playlist hosts are
implemented as modules with pure functions that take and return a
ProviderState, following the contract described by PlaylistProvider.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Protocol, Sequence, Tuple

from .models import CatalogEntry, InputTrack


class CandidateSource(Protocol):
    """Produces candidate key/tempo records for a track query.

    Implementations never raise for "nothing found"; they return an empty
    sequence. Lookup failures are logged and also yield an empty sequence.

    Example:
        entries = source("Hotline Bling", "Drake")
        # [CatalogEntry(title="Hotline Bling", artist="Drake", tempo=135.0, key="4A")]
    """

    name: str

    def __call__(self, title: str, artist: str) -> Sequence[CatalogEntry]:
        ...


@dataclass
class ProviderConfig:
    """Base configuration for a playlist host provider."""

    name: str  # Provider name: "spotify"
    client_id: str = ""
    client_secret: str = ""
    redirect_uri: str = "http://localhost:8080/callback"


@dataclass
class ProviderState:
    """Runtime state for a provider.

    Immutable state container passed to all provider functions.
    Functions return new ProviderState instead of mutating.
    """

    config: ProviderConfig
    authenticated: bool = False
    cache: Dict[str, Any] = field(default_factory=dict)

    def with_authenticated(self, authenticated: bool) -> "ProviderState":
        """Return new state with updated authentication status."""
        return replace(self, authenticated=authenticated)

    def with_cache(self, **updates) -> "ProviderState":
        """Return new state with updated cache entries."""
        return replace(self, cache={**self.cache, **updates})


class PlaylistProvider(Protocol):
    """Contract for playlist host modules (see providers.spotify)."""

    def init_provider(config: ProviderConfig) -> ProviderState:
        """Load stored credentials and return the initial state."""
        ...

    def authenticate(state: ProviderState) -> Tuple[ProviderState, bool]:
        """Run the interactive authorization flow.

        Returns:
            (new_state, success)
        """
        ...

    def get_playlist_tracks(
        state: ProviderState, playlist_id: str
    ) -> Tuple[ProviderState, List[InputTrack], int]:
        """Read the playlist in order.

        Returns:
            (new_state, tracks, skipped_count) with track.position set to the
            index among kept tracks
        """
        ...

    def replace_playlist_order(
        state: ProviderState, playlist_id: str, track_ids: Sequence[str], chunk_size: int = 100
    ) -> ProviderState:
        """Rewrite the playlist in the given order.

        Raises:
            WriteBackError: If the host rejects a request
        """
        ...


def parse_duration_ms(value: Any) -> Optional[int]:
    """Coerce a duration to milliseconds.

    Values below 10000 are taken as seconds.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        duration = float(value)
    except (TypeError, ValueError):
        return None
    if duration <= 0:
        return None
    if duration < 10000:
        duration *= 1000.0
    return int(round(duration))


def parse_tempo(value: Any) -> Optional[float]:
    """Coerce a tempo value to positive BPM, or None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        tempo = float(value)
    except (TypeError, ValueError):
        return None
    return tempo if tempo > 0 else None
