"""
Track library domain: models, normalization, matching and candidate sources.
"""

from .matching import DEFAULT_WEIGHTS, MatchWeights, find_best_match, score_candidate
from .models import MAJOR, MINOR, CatalogEntry, InputTrack, KeyInfo, Modality, ResolvedTrack
from .normalize import normalize

__all__ = [
    "CatalogEntry",
    "InputTrack",
    "KeyInfo",
    "Modality",
    "MAJOR",
    "MINOR",
    "ResolvedTrack",
    "normalize",
    "DEFAULT_WEIGHTS",
    "MatchWeights",
    "find_best_match",
    "score_candidate",
]
