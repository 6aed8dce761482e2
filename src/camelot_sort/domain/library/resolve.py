"""
Resolve playlist tracks to key and tempo.

Each track is looked up in the configured candidate sources in order
(local catalog first, remote lookup as fallback). The first source whose
best match carries both a parseable key and a positive tempo wins.
Anything else leaves the track unresolved; nothing here aborts a run.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence

from loguru import logger

from ...errors import KeyParseError
from ..harmony.keys import resolve_entry_key, to_camelot
from .matching import DEFAULT_WEIGHTS, MatchWeights, find_best_match
from .models import InputTrack, ResolvedTrack
from .provider import CandidateSource


def _resolve_from_source(
    track: InputTrack, source: CandidateSource, weights: MatchWeights
) -> Optional[ResolvedTrack]:
    try:
        candidates = source(track.title, track.artist)
    except Exception:
        logger.exception(f"Lookup in {source.name} failed for {track.artist} - {track.title}")
        return None

    match = find_best_match(track, candidates, weights)
    if match is None:
        return None

    if match.tempo is None or match.tempo <= 0:
        logger.debug(f"{source.name}: match without tempo for {track.artist} - {track.title}")
        return None

    try:
        key = resolve_entry_key(match)
    except KeyParseError as e:
        logger.debug(f"{source.name}: {e} for {track.artist} - {track.title}")
        return None

    return ResolvedTrack(
        track=track,
        key=key,
        tempo=match.tempo,
        camelot=to_camelot(*key),
        source=source.name,
    )


def resolve_track(
    track: InputTrack,
    sources: Sequence[CandidateSource],
    weights: MatchWeights = DEFAULT_WEIGHTS,
) -> ResolvedTrack:
    """Resolve one track against the sources, in order.

    Args:
        track: Playlist track
        sources: Candidate sources to try
        weights: Matching policy

    Returns:
        ResolvedTrack (unresolved if no source produced key and tempo)
    """
    for source in sources:
        resolved = _resolve_from_source(track, source, weights)
        if resolved is not None:
            return resolved
    return ResolvedTrack.unresolved(track)


def resolve_tracks(
    tracks: Sequence[InputTrack],
    sources: Sequence[CandidateSource],
    weights: MatchWeights = DEFAULT_WEIGHTS,
    max_workers: int = 1,
) -> List[ResolvedTrack]:
    """Resolve all tracks, returning results in input order.

    With max_workers > 1 lookups run in a thread pool; results are still
    collected by input index, never by completion order.
    """
    if max_workers <= 1 or len(tracks) <= 1:
        return [resolve_track(track, sources, weights) for track in tracks]

    with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="lookup") as pool:
        futures = [pool.submit(resolve_track, track, sources, weights) for track in tracks]
        return [future.result() for future in futures]
