"""
Argument parsing utilities.

Cross-cutting helpers for interpreting user-supplied references.
"""

import re
from urllib.parse import urlparse

_ID_PATTERN = re.compile(r"^[A-Za-z0-9]+$")
_URI_PATTERN = re.compile(r"^spotify:(?:user:[^:]+:)?playlist:([A-Za-z0-9]+)$")


def parse_playlist_id(reference: str) -> str:
    """
    Extract a Spotify playlist ID from an ID, URI or URL.

    Args:
        reference: Playlist reference given on the command line

    Returns:
        Bare playlist ID

    Raises:
        ValueError: If no playlist ID can be found

    Example:
        'https://open.spotify.com/playlist/37i9dQZF1DXcBWIGoYBM5M?si=abc'
        -> '37i9dQZF1DXcBWIGoYBM5M'
    """
    ref = (reference or "").strip()
    if not ref:
        raise ValueError("Playlist reference is empty")

    if _ID_PATTERN.match(ref):
        return ref

    uri_match = _URI_PATTERN.match(ref)
    if uri_match:
        return uri_match.group(1)

    parsed = urlparse(ref if "://" in ref else f"https://{ref}")
    if parsed.netloc.endswith("spotify.com"):
        # /playlist/{id}, /intl-xx/playlist/{id}, /user/{u}/playlist/{id}
        parts = [p for p in parsed.path.split("/") if p]
        if "playlist" in parts:
            index = parts.index("playlist")
            if index + 1 < len(parts) and _ID_PATTERN.match(parts[index + 1]):
                return parts[index + 1]

    raise ValueError(f"Not a Spotify playlist ID, URI or URL: {reference!r}")


__all__ = ["parse_playlist_id"]
