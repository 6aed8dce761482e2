"""
Match playlist tracks to authoritative catalog records.

Candidates must share the target's normalized title; survivors are scored
from independent signals:

    exact artist (normalized)         +100
    partial artist (containment)       +80
    duration within tolerance          +50
    duration beyond tolerance          -50
    duration missing on either side      0
    exact original title (case-sens.)  +20

The highest strictly positive score wins; ties go to the first candidate.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from loguru import logger

from .models import CatalogEntry, InputTrack
from .normalize import normalize


@dataclass(frozen=True)
class MatchWeights:
    """Scoring policy for candidate matching."""

    exact_artist: int = 100
    partial_artist: int = 80
    duration_match: int = 50
    duration_mismatch: int = -50
    exact_title: int = 20
    duration_tolerance_ms: int = 5000


DEFAULT_WEIGHTS = MatchWeights()


def _is_valid_candidate(candidate: object) -> bool:
    """A candidate needs text title and artist to be scored."""
    return (
        isinstance(candidate, CatalogEntry)
        and isinstance(candidate.title, str)
        and isinstance(candidate.artist, str)
        and bool(candidate.title.strip())
    )


def score_candidate(
    target: InputTrack,
    candidate: CatalogEntry,
    weights: MatchWeights = DEFAULT_WEIGHTS,
) -> int:
    """Score a candidate against the target (title filter not applied).

    Args:
        target: Playlist track being resolved
        candidate: Catalog record
        weights: Scoring policy

    Returns:
        Integer match score (may be zero or negative)
    """
    score = 0

    target_artist = normalize(target.artist)
    candidate_artist = normalize(candidate.artist)
    if target_artist and candidate_artist:
        if target_artist == candidate_artist:
            score += weights.exact_artist
        elif target_artist in candidate_artist or candidate_artist in target_artist:
            score += weights.partial_artist

    if target.duration_ms is not None and candidate.duration_ms is not None:
        if abs(target.duration_ms - candidate.duration_ms) <= weights.duration_tolerance_ms:
            score += weights.duration_match
        else:
            score += weights.duration_mismatch

    if target.title == candidate.title:
        score += weights.exact_title

    return score


def rank_candidates(
    target: InputTrack,
    candidates: Iterable[CatalogEntry],
    weights: MatchWeights = DEFAULT_WEIGHTS,
) -> List[Tuple[CatalogEntry, int]]:
    """Score every title-matching candidate, preserving candidate order.

    Malformed candidates are skipped.
    """
    target_title = normalize(target.title)
    ranked = []

    for candidate in candidates:
        if not _is_valid_candidate(candidate):
            logger.debug(f"Skipping malformed candidate: {candidate!r}")
            continue
        if normalize(candidate.title) != target_title:
            continue
        ranked.append((candidate, score_candidate(target, candidate, weights)))

    return ranked


def find_best_match(
    target: InputTrack,
    candidates: Sequence[CatalogEntry],
    weights: MatchWeights = DEFAULT_WEIGHTS,
) -> Optional[CatalogEntry]:
    """Return the best-scoring candidate for target, or None.

    Only candidates whose normalized title equals the target's are eligible,
    and only positive totals can win. Ties keep the first-seen candidate.

    Args:
        target: Playlist track being resolved
        candidates: Catalog records to choose from
        weights: Scoring policy

    Returns:
        Winning CatalogEntry, or None if nothing scores above zero
    """
    best: Optional[CatalogEntry] = None
    best_score = 0

    for candidate, score in rank_candidates(target, candidates, weights):
        if score > best_score:
            best, best_score = candidate, score

    if best is not None:
        logger.debug(f"Matched '{target.artist} - {target.title}' (score {best_score})")
    return best
