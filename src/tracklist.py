"""Public SDK surface for Tracklist.

This module provides a stable import path for library users.
It re-exports the client, the caching primitives, and typed models.
"""

from __future__ import annotations

from core.config import TracklistConfig
from core.errors import (
    TracklistCodecError,
    TracklistConfigError,
    TracklistError,
    TracklistIOError,
    TracklistStoreError,
    TracklistUpstreamError,
)
from core.playlist_link import parse_playlist_link
from core.types import Album, Artist, Page, PlaylistItem, Track
from playlist.cached_iterator import CachedCollectionIterator
from playlist.caching_fetcher import CachingCollectionFetcher
from playlist.display import render_playlist
from playlist.tracklist_client import TracklistClient
from remote.page_source import PageSource
from remote.retry import RetryingPageSource, RetryPolicy
from store.cache_store import LmdbCacheStore

__all__ = [
    "Album",
    "Artist",
    "CachedCollectionIterator",
    "CachingCollectionFetcher",
    "LmdbCacheStore",
    "Page",
    "PageSource",
    "PlaylistItem",
    "RetryPolicy",
    "RetryingPageSource",
    "Track",
    "TracklistClient",
    "TracklistCodecError",
    "TracklistConfig",
    "TracklistConfigError",
    "TracklistError",
    "TracklistIOError",
    "TracklistStoreError",
    "TracklistUpstreamError",
    "parse_playlist_link",
    "render_playlist",
]
