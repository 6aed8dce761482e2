"""
Cross-cutting utilities for camelot-sort.

Contains:
- parsers: Playlist reference parsing
"""

from .parsers import parse_playlist_id

__all__ = ["parse_playlist_id"]
