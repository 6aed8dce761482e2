"""
Spotify Web API operations.

Pure functions for reading a playlist in order and writing a new order back.
All functions take ProviderState and return the (possibly refreshed) state.
"""

from typing import Any, Dict, List, Optional, Sequence, Tuple

import requests
from loguru import logger

from camelot_sort.errors import PlaylistReadError, WriteBackError

from ...models import InputTrack
from ...provider import ProviderState

API_BASE = "https://api.spotify.com/v1"

# Spotify accepts at most 100 URIs per playlist write and returns 100 items per page
MAX_ITEMS_PER_REQUEST = 100


def _ensure_valid_token(
    state: ProviderState,
) -> Tuple[ProviderState, Optional[Dict[str, Any]]]:
    """Ensure access token is valid, refreshing if expired.

    Returns:
        (updated_state, token_data or None)
    """
    from . import auth

    token_data = state.cache.get("token_data")
    if not token_data:
        logger.debug("No token data in cache")
        return state, None

    if not auth.is_token_expired(token_data):
        return state, token_data

    logger.info("Spotify token expired, attempting refresh")
    new_token_data = auth.refresh_token(state.config, token_data)
    if new_token_data:
        return state.with_cache(token_data=new_token_data), new_token_data

    logger.warning("Token refresh failed, marking as unauthenticated")
    return state.with_authenticated(False), None


def _headers(token: Dict[str, Any]) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token['access_token']}"}


def _strip_urn(spotify_id: str) -> str:
    """Handle URN format: spotify:playlist:{id} -> {id}."""
    return spotify_id.split(":")[-1] if ":" in spotify_id else spotify_id


def _input_track(track: Dict[str, Any], position: int) -> InputTrack:
    """Convert a Spotify track object to an InputTrack (primary artist only)."""
    artists = [a.get("name") for a in track.get("artists") or [] if a.get("name")]
    return InputTrack(
        track_id=track["id"],
        title=track.get("name") or "",
        artist=artists[0] if artists else "Unknown",
        duration_ms=track.get("duration_ms") or None,
        position=position,
    )


def get_playlist_tracks(
    state: ProviderState, playlist_id: str
) -> Tuple[ProviderState, List[InputTrack], int]:
    """Fetch all tracks of a playlist in playlist order.

    Local files, episodes and removed tracks are skipped; positions count
    only the kept tracks. Rewriting the playlist with only the kept tracks
    removes the skipped items, so their count is returned as well.

    Args:
        state: Provider state
        playlist_id: Spotify playlist ID or URN

    Returns:
        (updated_state, tracks, skipped_count)

    Raises:
        PlaylistReadError: If not authenticated or a page cannot be fetched
    """
    state, token = _ensure_valid_token(state)
    if not token:
        raise PlaylistReadError("Not authenticated with Spotify")

    playlist_id = _strip_urn(playlist_id)
    tracks: List[InputTrack] = []
    skipped = 0
    url: Optional[str] = f"{API_BASE}/playlists/{playlist_id}/tracks"
    params: Dict[str, Any] = {"limit": MAX_ITEMS_PER_REQUEST}

    try:
        while url:
            response = requests.get(url, params=params, headers=_headers(token), timeout=30)
            response.raise_for_status()
            data = response.json()

            for item in data.get("items", []):
                track = item.get("track")
                if not track or item.get("is_local") or track.get("is_local"):
                    skipped += 1
                    continue
                if track.get("type", "track") != "track" or not track.get("id"):
                    skipped += 1
                    continue
                tracks.append(_input_track(track, len(tracks)))

            # "next" already carries offset and limit
            url = data.get("next")
            params = {}

    except requests.HTTPError as e:
        status = e.response.status_code if e.response is not None else None
        logger.exception(f"HTTP error fetching playlist {playlist_id}: {status}")
        if status == 404:
            raise PlaylistReadError(f"Playlist not found: {playlist_id}") from e
        raise PlaylistReadError(f"Could not read playlist {playlist_id} (HTTP {status})") from e
    except (requests.RequestException, ValueError, KeyError) as e:
        logger.exception(f"Error fetching playlist tracks: {playlist_id}")
        raise PlaylistReadError(f"Could not read playlist {playlist_id}: {e}") from e

    logger.info(f"Fetched {len(tracks)} tracks for playlist {playlist_id} ({skipped} skipped)")
    return state, tracks, skipped


def chunked(items: Sequence[str], size: int) -> List[List[str]]:
    """Split items into consecutive lists of at most size elements."""
    return [list(items[i : i + size]) for i in range(0, len(items), size)]


def replace_playlist_order(
    state: ProviderState,
    playlist_id: str,
    track_ids: Sequence[str],
    chunk_size: int = MAX_ITEMS_PER_REQUEST,
) -> ProviderState:
    """Rewrite a playlist so it contains track_ids in the given order.

    The first chunk replaces the playlist contents; later chunks append.

    Args:
        state: Provider state
        playlist_id: Spotify playlist ID or URN
        track_ids: Track IDs (or URNs) in final order
        chunk_size: URIs per request, 1-100

    Returns:
        Updated state

    Raises:
        ValueError: If chunk_size is outside 1-100
        WriteBackError: If not authenticated or Spotify rejects a request
    """
    if not 1 <= chunk_size <= MAX_ITEMS_PER_REQUEST:
        raise ValueError(f"chunk_size must be between 1 and {MAX_ITEMS_PER_REQUEST}")

    playlist_id = _strip_urn(playlist_id)
    if not track_ids:
        logger.info(f"Nothing to write for playlist {playlist_id}")
        return state

    state, token = _ensure_valid_token(state)
    if not token:
        raise WriteBackError(playlist_id, message="Not authenticated with Spotify")

    url = f"{API_BASE}/playlists/{playlist_id}/tracks"
    uris = [f"spotify:track:{_strip_urn(track_id)}" for track_id in track_ids]
    chunks = chunked(uris, chunk_size)

    for i, chunk in enumerate(chunks):
        # PUT replaces the whole playlist, POST appends
        method = requests.put if i == 0 else requests.post
        try:
            response = method(url, json={"uris": chunk}, headers=_headers(token), timeout=30)
            response.raise_for_status()
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            logger.exception(f"Write-back failed on chunk {i + 1}/{len(chunks)}")
            raise WriteBackError(playlist_id, status) from e
        except requests.RequestException as e:
            logger.exception(f"Write-back failed on chunk {i + 1}/{len(chunks)}")
            raise WriteBackError(playlist_id, message=f"Failed to write playlist {playlist_id}: {e}") from e

        logger.debug(f"Wrote chunk {i + 1}/{len(chunks)} ({len(chunk)} tracks)")

    logger.info(f"Reordered playlist {playlist_id}: {len(uris)} tracks in {len(chunks)} requests")
    return state
