"""Python SDK for cached playlist access.

This module wires configuration, the cache store, the remote page
source, and retry behavior into one client object.
"""

from __future__ import annotations

from types import TracebackType

from core.config import TracklistConfig
from playlist.cached_iterator import CachedCollectionIterator
from playlist.caching_fetcher import CachingCollectionFetcher
from remote.page_source import PageSource, SpotifyPageSource
from remote.retry import RetryingPageSource, RetryPolicy
from remote.spotify_auth import resolve_access_token
from store.cache_store import LmdbCacheStore


class TracklistClient:
    """Primary SDK entry point for cached playlist traversal."""

    def __init__(
        self,
        config: TracklistConfig | None = None,
        page_source: PageSource | None = None,
    ) -> None:
        """Create SDK client.

        Args:
            config: Optional runtime configuration.
            page_source: Optional page source; the Spotify Web API is used
                with the cached access token when omitted.

        Raises:
            TracklistConfigError: If credentials are missing or invalid.
            TracklistStoreError: If the cache cannot be opened.
        """
        self._config = config or TracklistConfig.from_env()
        source = page_source or SpotifyPageSource(
            resolve_access_token(self._config),
            self._config.api_base_url,
        )
        policy = RetryPolicy(
            max_attempts=self._config.retry_attempts,
            base_delay=self._config.retry_base_delay,
        )
        self._store = LmdbCacheStore(self._config.cache_path)
        self._fetcher = CachingCollectionFetcher(
            self._store,
            RetryingPageSource(source, policy),
            self._config.page_size,
        )

    def playlist_tracks(self, playlist_id: str, force: bool = False) -> CachedCollectionIterator:
        """Start a traversal of a playlist's tracks.

        Args:
            playlist_id: Playlist id.
            force: Refetch the first page and refresh the cached length.

        Returns:
            Lazy iterator over playlist items.
        """
        return self._fetcher.fetch(playlist_id, force=force)

    def close(self) -> None:
        """Close the cache store. Open iterators must not be used afterwards."""
        self._store.close()

    def __enter__(self) -> "TracklistClient":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()
