"""
Playlist reorder workflow.

Glues the playlist host, the candidate sources and the ordering engine:
read tracks -> resolve key/tempo -> order -> write back.
"""

from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from camelot_sort.core.config import Config
from camelot_sort.core.output import log
from camelot_sort.errors import WriteBackError

from ..library.catalog import load_catalog
from ..library.matching import DEFAULT_WEIGHTS, MatchWeights
from ..library.models import InputTrack, ResolvedTrack
from ..library.provider import CandidateSource, ProviderState
from ..library.providers import spotify
from ..library.providers.getsongbpm import GetSongBPMSource
from ..library.resolve import resolve_tracks
from .ordering import SortMode, order_tracks

_SOURCE_LABELS = {"local": "LOCAL", "getsongbpm": "REMOTE"}


@dataclass(frozen=True)
class ReorderSummary:
    """Counts reported at the end of a run."""

    total: int
    resolved: int
    unresolved: int
    by_source: Dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class ReorderPlan:
    """Computed order for one playlist, ready for write-back."""

    playlist_id: str
    ordered: List[ResolvedTrack]
    summary: ReorderSummary
    skipped: int = 0  # Playlist items the reader could not keep (local files, episodes)

    @property
    def track_ids(self) -> List[str]:
        return [t.track.track_id for t in self.ordered]

    @property
    def changed(self) -> bool:
        """True if the computed order differs from the original one."""
        return [t.position for t in self.ordered] != sorted(t.position for t in self.ordered)


def build_sources(
    config: Config,
    use_remote: bool = True,
    catalog_path: Optional[Path] = None,
) -> List[CandidateSource]:
    """Create candidate sources in lookup order: local catalog, then GetSongBPM.

    Raises:
        CatalogError: If the catalog file exists but cannot be read
    """
    sources: List[CandidateSource] = []

    catalog = load_catalog(Path(catalog_path or config.catalog.path))
    if len(catalog):
        sources.append(catalog)

    gs = config.getsongbpm
    if use_remote and gs.enabled:
        if gs.api_key:
            sources.append(
                GetSongBPMSource(gs.api_key, base_url=gs.base_url, timeout=gs.timeout, limit=gs.limit)
            )
        else:
            log("GETSONGBPM_API_KEY not set, remote lookup disabled", level="warning")

    return sources


def summarize(tracks: Sequence[ResolvedTrack]) -> ReorderSummary:
    resolved = [t for t in tracks if t.is_resolved]
    return ReorderSummary(
        total=len(tracks),
        resolved=len(resolved),
        unresolved=len(tracks) - len(resolved),
        by_source=dict(Counter(t.source for t in resolved)),
    )


def _report(track: ResolvedTrack) -> None:
    name = f"{track.track.artist} - {track.track.title}"
    if track.is_resolved:
        label = _SOURCE_LABELS.get(track.source, str(track.source).upper())
        log(f"[✓ {label}] {name} ({track.camelot}, {track.tempo:g} BPM)", level="info")
    else:
        log(f"[ X MISS ] {name}", level="warning")


def compute_order(
    tracks: Sequence[InputTrack],
    sources: Sequence[CandidateSource],
    mode: SortMode = "camelot",
    weights: MatchWeights = DEFAULT_WEIGHTS,
    max_workers: int = 1,
) -> Tuple[List[ResolvedTrack], ReorderSummary]:
    """Resolve and order tracks.

    Args:
        tracks: Playlist tracks (any order; original order is their position)
        sources: Candidate sources in lookup order
        mode: "camelot" or "pitch"
        weights: Matching policy
        max_workers: Concurrent lookups

    Returns:
        (ordered tracks, summary)
    """
    in_order = sorted(tracks, key=lambda t: t.position)
    resolved = resolve_tracks(in_order, sources, weights, max_workers=max_workers)
    for track in resolved:
        _report(track)

    return order_tracks(resolved, mode), summarize(resolved)


def plan_reorder(
    state: ProviderState,
    playlist_id: str,
    sources: Sequence[CandidateSource],
    mode: SortMode = "camelot",
    weights: MatchWeights = DEFAULT_WEIGHTS,
    max_workers: int = 1,
) -> Tuple[ProviderState, ReorderPlan]:
    """Read a playlist and compute its harmonic order.

    Raises:
        PlaylistReadError: If the playlist cannot be read
    """
    log("Fetching playlist tracks...", level="info")
    state, tracks, skipped = spotify.get_playlist_tracks(state, playlist_id)
    log(f"Found {len(tracks)} tracks.", level="info")
    if skipped:
        log(
            f"{skipped} playlist items (local files, episodes or unavailable tracks) "
            "cannot be reordered",
            level="warning",
        )

    ordered, summary = compute_order(tracks, sources, mode, weights, max_workers)
    return state, ReorderPlan(
        playlist_id=playlist_id, ordered=ordered, summary=summary, skipped=skipped
    )


def apply_plan(
    state: ProviderState, plan: ReorderPlan, allow_drop: bool = False
) -> ProviderState:
    """Write the planned order back to the playlist.

    The rewrite replaces the whole playlist, so items that were skipped on
    read would be removed. That only happens with allow_drop=True.

    Raises:
        WriteBackError: If skipped items would be removed without allow_drop,
            or the playlist host rejects the update
    """
    if plan.skipped and not allow_drop:
        raise WriteBackError(
            plan.playlist_id,
            message=(
                f"Refusing to rewrite playlist {plan.playlist_id}: {plan.skipped} items "
                "(local files, episodes or unavailable tracks) would be removed. "
                "Re-run with --allow-drop to accept this."
            ),
        )

    log("Updating Spotify playlist order...", level="info")
    return spotify.replace_playlist_order(state, plan.playlist_id, plan.track_ids)
