"""
GetSongBPM key/tempo lookup.

Queries the GetSongBPM search endpoint for a (title, artist) pair and turns
each hit into a CatalogEntry candidate. Key values come back as names such
as "F♯m" or "E♭" and are interpreted later by the key translator.
"""

from typing import Any, Dict, List, Optional, Sequence

import requests
from loguru import logger

from ....errors import LookupFailedError
from ..models import CatalogEntry
from ..provider import parse_duration_ms, parse_tempo

API_BASE = "https://api.getsong.co"


def _entry_from_song(song: Dict[str, Any]) -> Optional[CatalogEntry]:
    """Convert one search hit to a CatalogEntry (None if unusable)."""
    if not isinstance(song, dict):
        return None

    title = song.get("title") or song.get("song_title")
    artist_data = song.get("artist")
    if isinstance(artist_data, dict):
        artist = artist_data.get("name")
    else:
        artist = artist_data or song.get("artist_name")

    if not isinstance(title, str) or not isinstance(artist, str):
        return None

    key = song.get("key_of") or song.get("song_key") or song.get("open_key")
    return CatalogEntry(
        title=title,
        artist=artist.strip(),
        tempo=parse_tempo(song.get("tempo")),
        key=key.strip() if isinstance(key, str) and key.strip() else None,
        duration_ms=parse_duration_ms(song.get("duration")),
    )


class GetSongBPMSource:
    """Candidate source backed by the GetSongBPM API.

    Args:
        api_key: GetSongBPM API key
        base_url: API root
        timeout: Request timeout in seconds
        limit: Maximum hits requested per query
    """

    name = "getsongbpm"

    def __init__(
        self,
        api_key: str,
        base_url: str = API_BASE,
        timeout: float = 30,
        limit: int = 5,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.limit = limit

    def search(self, title: str, artist: str) -> List[CatalogEntry]:
        """Run one search request.

        Raises:
            LookupFailedError: On network errors, non-2xx responses or bad JSON
        """
        lookup = f"song:{title} artist:{artist}"
        params = {
            "api_key": self.api_key,
            "type": "both",
            "lookup": lookup,
            "limit": self.limit,
        }

        try:
            response = requests.get(
                f"{self.base_url}/search/", params=params, timeout=self.timeout
            )
            response.raise_for_status()
            data = response.json()
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else "?"
            raise LookupFailedError(f"GetSongBPM HTTP {status} for {lookup!r}") from e
        except (requests.RequestException, ValueError) as e:
            raise LookupFailedError(f"GetSongBPM lookup failed for {lookup!r}: {e}") from e

        hits = data.get("search") if isinstance(data, dict) else None
        # The API answers {"search": {"error": "no result"}} when nothing matches
        if not isinstance(hits, list):
            return []

        entries = []
        for song in hits:
            entry = _entry_from_song(song)
            if entry is None:
                logger.debug(f"Skipping malformed GetSongBPM result: {song!r}")
                continue
            entries.append(entry)
        return entries

    def __call__(self, title: str, artist: str) -> Sequence[CatalogEntry]:
        if not self.api_key:
            return []
        try:
            return self.search(title, artist)
        except LookupFailedError as e:
            logger.warning(str(e))
            return []
