"""Shared typed models.

This module defines immutable data models used by the remote source,
cache store, iterator, and display layers to keep interfaces explicit.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping


@dataclass(frozen=True)
class Artist:
    """Artist credited on a track.

    Attributes:
        name: Display name.
        artist_id: Remote artist id when known.
    """

    name: str
    artist_id: str | None = None


@dataclass(frozen=True)
class Album:
    """Album a track was released on.

    Attributes:
        name: Album title.
        release_date: Release date text (``YYYY``, ``YYYY-MM`` or ``YYYY-MM-DD``).
        release_date_precision: One of ``year``, ``month`` or ``day``.
    """

    name: str
    release_date: str | None = None
    release_date_precision: str | None = None


@dataclass(frozen=True)
class Track:
    """Track record as returned by the remote API.

    Attributes:
        track_id: Remote track id; local files have none.
        name: Track title.
        artists: Credited artists in billing order.
        album: Album metadata.
        track_number: Position on its album.
        duration_ms: Track length in milliseconds.
        external_urls: Public URLs keyed by provider name.
    """

    track_id: str | None
    name: str
    artists: tuple[Artist, ...]
    album: Album
    track_number: int = 0
    duration_ms: int = 0
    external_urls: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class PlaylistItem:
    """One entry of a playlist collection.

    Attributes:
        track: Track metadata.
        added_at: ISO timestamp the track was added, when reported.
    """

    track: Track
    added_at: str | None = None


@dataclass(frozen=True)
class Page:
    """One bounded batch of playlist items.

    Attributes:
        items: Items in collection order starting at the requested offset.
        total: Total size of the whole collection.
    """

    items: tuple[PlaylistItem, ...]
    total: int
