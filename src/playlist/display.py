"""Playlist listing order and formatting.

This module renders playlist items as tab-separated listing lines,
ordered by release date, artists, album, and track position.
"""

from __future__ import annotations

from collections.abc import Iterable

from core.constants import NO_URL_TEXT, SPOTIFY_URL_KEY, UNKNOWN_YEAR_TEXT
from core.logging_config import get_logger
from core.types import Album, PlaylistItem

_LOGGER = get_logger(__name__)

_YEAR_PRECISIONS = ("day", "month", "year")


def release_year(album: Album) -> int | None:
    """Return the album release year when it is known.

    Args:
        album: Album metadata.

    Returns:
        Four-digit year, or None for a missing or unrecognized date.
    """
    if album.release_date is None or album.release_date_precision is None:
        return None
    if album.release_date_precision not in _YEAR_PRECISIONS:
        _LOGGER.warning(
            "release_date_precision_unknown",
            album=album.name,
            precision=album.release_date_precision,
        )
        return None
    year_text = album.release_date[:4]
    if len(year_text) != 4 or not year_text.isdigit():
        _LOGGER.warning(
            "release_date_unparsable", album=album.name, release_date=album.release_date
        )
        return None
    return int(year_text)


def display_sort_key(item: PlaylistItem) -> tuple[object, ...]:
    """Return the listing sort key of a playlist item.

    Items order by release date (missing dates first), then artist names
    pairwise, then artist count, album name, track number and track name.
    """
    track = item.track
    release_date = track.album.release_date
    return (
        release_date is not None,
        release_date or "",
        tuple(artist.name for artist in track.artists),
        len(track.artists),
        track.album.name,
        track.track_number,
        track.name,
    )


def format_item_line(item: PlaylistItem) -> str:
    """Format one listing line."""
    track = item.track
    url = track.external_urls.get(SPOTIFY_URL_KEY, NO_URL_TEXT)
    artists = ", ".join(artist.name for artist in track.artists)
    year = release_year(track.album)
    year_text = str(year) if year is not None else UNKNOWN_YEAR_TEXT
    return f"{url}\t{track.name} - {artists} ({track.album.name}) {year_text}"


def render_playlist(items: Iterable[PlaylistItem]) -> list[str]:
    """Render a count line followed by sorted item lines.

    Args:
        items: Playlist items in any order.

    Returns:
        Output lines without trailing newlines.
    """
    ordered = sorted(items, key=display_sort_key)
    return [f"{len(ordered)} tracks", *(format_item_line(item) for item in ordered)]
