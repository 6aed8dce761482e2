"""Playlist ordering and the reorder workflow."""

from .ordering import UNRESOLVED, SortMode, build_sort_key, order_tracks, partition_tracks

__all__ = [
    "UNRESOLVED",
    "SortMode",
    "build_sort_key",
    "order_tracks",
    "partition_tracks",
]
