"""
Harmonic playlist ordering.

Resolved tracks are sorted by a fixed key (Camelot position or pitch class,
then tempo); unresolved tracks keep their original relative order and are
appended after them. Unresolved tracks never reach the sort.
"""

from typing import List, Literal, Sequence, Tuple, Union

from ..harmony.keys import split_camelot, to_camelot
from ..library.models import MINOR, ResolvedTrack

SortMode = Literal["camelot", "pitch"]
SORT_MODES = ("camelot", "pitch")

SortKey = Tuple[int, int, float]


class _Unresolved:
    """Marker returned by build_sort_key for tracks without key/tempo."""

    def __repr__(self) -> str:
        return "UNRESOLVED"

    def __bool__(self) -> bool:
        return False


UNRESOLVED = _Unresolved()

_LETTER_RANK = {"A": 0, "B": 1}


def build_sort_key(
    resolved: ResolvedTrack, mode: SortMode = "camelot"
) -> Union[SortKey, _Unresolved]:
    """Build the ordering key for a track.

    camelot: (Camelot number, A before B, tempo)
    pitch:   (pitch class, minor before major, tempo)

    Args:
        resolved: Track with optional resolution
        mode: "camelot" or "pitch"

    Returns:
        Comparable tuple, or UNRESOLVED when key or tempo is missing
    """
    if mode not in SORT_MODES:
        raise ValueError(f"Unknown sort mode: {mode!r}. Valid modes are: {SORT_MODES}")

    if not resolved.is_resolved:
        return UNRESOLVED

    key = resolved.key
    if mode == "camelot":
        number, letter = split_camelot(resolved.camelot or to_camelot(*key))
        return (number, _LETTER_RANK[letter], resolved.tempo)

    modality_rank = 0 if key.modality == MINOR else 1
    return (key.pitch_class, modality_rank, resolved.tempo)


def partition_tracks(
    tracks: Sequence[ResolvedTrack],
) -> Tuple[List[ResolvedTrack], List[ResolvedTrack]]:
    """Split tracks into (resolved, unresolved), keeping relative order in each."""
    resolved = []
    unresolved = []
    for track in tracks:
        if track.is_resolved:
            resolved.append(track)
        else:
            unresolved.append(track)
    return resolved, unresolved


def order_tracks(
    tracks: Sequence[ResolvedTrack], mode: SortMode = "camelot"
) -> List[ResolvedTrack]:
    """Produce the final playlist order.

    Args:
        tracks: Tracks in original playlist order
        mode: "camelot" or "pitch"

    Returns:
        Sorted resolved tracks followed by unresolved tracks in original order
    """
    if mode not in SORT_MODES:
        raise ValueError(f"Unknown sort mode: {mode!r}. Valid modes are: {SORT_MODES}")

    resolved, unresolved = partition_tracks(tracks)
    # sorted() is stable: equal keys keep original order
    ordered = sorted(resolved, key=lambda t: build_sort_key(t, mode))
    return ordered + unresolved
