"""Tracklist CLI entry point.
This module lists a playlist's tracks through the caching client.
It maps argparse options onto SDK calls.
"""

from __future__ import annotations

import argparse
from dataclasses import replace
from pathlib import Path
import sys
from typing import Sequence

from core.config import TracklistConfig
from core.errors import TracklistError
from core.logging_config import configure_logging
from core.playlist_link import parse_playlist_link
from playlist.display import render_playlist
from playlist.tracklist_client import TracklistClient

MISSING_ARGUMENT_MESSAGE = (
    "This command expects a Spotify playlist link or ID as a command line argument"
)
UNPARSEABLE_ARGUMENT_MESSAGE = "Couldn't parse playlist ID from argument"


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(
        prog="tracklist",
        description="List a Spotify playlist's tracks using a local cache",
    )
    parser.add_argument(
        "playlist",
        nargs="?",
        help="Playlist id, open.spotify.com link, or spotify:playlist: URI",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Refetch the first page and refresh the cached playlist length",
    )
    parser.add_argument("--cache-path", help="Override TRACKLIST_CACHE_PATH for this command")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the Tracklist CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.playlist is None:
        print(MISSING_ARGUMENT_MESSAGE)
        return 0
    playlist_id = parse_playlist_link(args.playlist)
    if playlist_id is None:
        print(UNPARSEABLE_ARGUMENT_MESSAGE)
        return 0
    try:
        config = _build_config(args.cache_path)
        configure_logging(config.log_level)
        with _build_client(config) as client:
            lines = render_playlist(client.playlist_tracks(playlist_id, force=args.force))
    except TracklistError as error:
        print(f"error: {error}", file=sys.stderr)
        return 1
    for line in lines:
        print(line)
    return 0


def _build_config(cache_path: str | None) -> TracklistConfig:
    """Build config with optional cache-path override.

    Args:
        cache_path: Optional override path.

    Returns:
        Runtime configuration.
    """
    config = TracklistConfig.from_env()
    if cache_path:
        config = replace(config, cache_path=Path(cache_path).expanduser())
    return config


def _build_client(config: TracklistConfig) -> TracklistClient:
    return TracklistClient(config)
