"""
camelot-sort - Entry point

Reorders a Spotify playlist by Camelot key (or pitch class) and tempo.
"""

import argparse
import sys
from dataclasses import asdict
from pathlib import Path
from typing import List, Optional

from loguru import logger

from camelot_sort.core.config import VALID_SORT_MODES, Config, load_config
from camelot_sort.core.console import print_styled, print_table
from camelot_sort.core.output import log, setup_loguru
from camelot_sort.domain.harmony.keys import key_name
from camelot_sort.domain.library.matching import MatchWeights
from camelot_sort.domain.library.provider import ProviderConfig, ProviderState
from camelot_sort.domain.library.providers import spotify
from camelot_sort.domain.playlists.reorder import (
    ReorderPlan,
    ReorderSummary,
    apply_plan,
    build_sources,
    plan_reorder,
)
from camelot_sort.errors import PlaylistReadError, SetupError, WriteBackError
from camelot_sort.utils.parsers import parse_playlist_id


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="camelot-sort",
        description="Reorder a Spotify playlist by Camelot key and tempo",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "playlist",
        help="Playlist ID, spotify:playlist: URI or open.spotify.com URL",
    )
    parser.add_argument(
        "--mode",
        choices=VALID_SORT_MODES,
        help="Sort by Camelot wheel or by pitch class (default: from config, camelot)",
    )
    parser.add_argument("--catalog", type=Path, help="Local catalog JSON (default: local_db.json)")
    parser.add_argument("--config", type=Path, help="Path to config.toml")
    parser.add_argument(
        "--no-remote", action="store_true", help="Do not query GetSongBPM for missing tracks"
    )
    parser.add_argument(
        "--dry-run", action="store_true", help="Print the new order without changing the playlist"
    )
    parser.add_argument(
        "--allow-drop",
        action="store_true",
        help="Rewrite even if local files or episodes in the playlist would be removed",
    )
    parser.add_argument("--workers", type=int, help="Concurrent remote lookups")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log to stderr as well")
    return parser


def print_order(plan: ReorderPlan) -> None:
    rows = []
    for i, track in enumerate(plan.ordered, start=1):
        rows.append(
            (
                i,
                track.camelot,
                key_name(track.key) if track.key else None,
                f"{track.tempo:.1f}" if track.tempo else None,
                track.track.artist,
                track.track.title,
                track.source,
            )
        )
    print_table(
        f"New order for playlist {plan.playlist_id}",
        ("#", "Camelot", "Key", "BPM", "Artist", "Title", "Source"),
        rows,
    )


def print_summary(summary: ReorderSummary) -> None:
    sources = ", ".join(f"{name}: {count}" for name, count in sorted(summary.by_source.items()))
    print_styled(
        f"Resolved {summary.resolved}/{summary.total} tracks"
        + (f" ({sources})" if sources else "")
        + f", {summary.unresolved} unresolved (kept at the end in original order)",
        style="bold",
    )


def connect_spotify(config: Config) -> ProviderState:
    """Load or obtain Spotify credentials.

    Raises:
        SetupError: If credentials are missing or authorization fails
    """
    sp = config.spotify
    if not sp.client_id or not sp.client_secret:
        raise SetupError("SPOTIFY_CLIENT_ID / SPOTIFY_CLIENT_SECRET missing")

    provider_config = ProviderConfig(
        name="spotify",
        client_id=sp.client_id,
        client_secret=sp.client_secret,
        redirect_uri=sp.redirect_uri,
    )
    state = spotify.init_provider(provider_config)
    if state.authenticated:
        return state

    state, success = spotify.authenticate(state)
    if not success:
        raise SetupError("Spotify authorization failed")
    return state


def run_reorder(args: argparse.Namespace) -> int:
    """Run one reorder.

    Returns:
        Exit code (0 for success, 1 for setup or write-back failure)
    """
    config = load_config(args.config)
    setup_loguru(
        Path(config.logging.log_file) if config.logging.log_file else None,
        level=config.logging.level,
        console_output=config.logging.console_output or args.verbose,
    )

    mode = args.mode or config.sorting.mode
    workers = args.workers if args.workers is not None else config.lookup.max_workers
    if workers < 1:
        log("❌ --workers must be at least 1", level="error")
        return 1

    try:
        playlist_id = parse_playlist_id(args.playlist)
        sources = build_sources(config, use_remote=not args.no_remote, catalog_path=args.catalog)
        state = connect_spotify(config)
    except (ValueError, SetupError) as e:
        log(f"❌ {e}", level="error")
        return 1

    if not sources:
        log("No catalog entries and no remote lookup: every track will stay unresolved", level="warning")

    try:
        state, plan = plan_reorder(
            state,
            playlist_id,
            sources,
            mode=mode,
            weights=MatchWeights(**asdict(config.matching)),
            max_workers=workers,
        )
    except PlaylistReadError as e:
        log(f"❌ {e}", level="error")
        return 1

    if args.dry_run:
        print_order(plan)
        print_summary(plan.summary)
        return 0

    if not plan.changed:
        print_summary(plan.summary)
        log("Playlist is already in harmonic order, nothing to write.", level="info")
        return 0

    try:
        apply_plan(state, plan, allow_drop=args.allow_drop)
    except WriteBackError as e:
        print_order(plan)
        log(f"❌ {e}", level="error")
        return 1

    print_summary(plan.summary)
    log("Done! Check 'Custom Order' in Spotify.", level="info")
    return 0


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the camelot-sort command."""
    args = build_parser().parse_args(argv)
    try:
        sys.exit(run_reorder(args))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        print("\nInterrupted", file=sys.stderr)
        sys.exit(130)


if __name__ == "__main__":
    main()
