"""Entry point for cache-backed playlist traversals."""

from __future__ import annotations

from core.constants import DEFAULT_PAGE_SIZE
from core.logging_config import get_logger
from playlist.cached_iterator import CachedCollectionIterator
from playlist.page_loader import CachingPageLoader
from remote.page_source import PageSource
from store.cache_store import LmdbCacheStore

_LOGGER = get_logger(__name__)


class CachingCollectionFetcher:
    """Creates playlist iterators backed by the shared cache store."""

    def __init__(
        self,
        store: LmdbCacheStore,
        source: PageSource,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        """Create the fetcher.

        Args:
            store: Cache store lent to every iterator this fetcher creates.
            source: Remote page source.
            page_size: Items requested per remote page.
        """
        self._store = store
        self._loader = CachingPageLoader(store, source, page_size)

    def fetch(self, collection_id: str, force: bool = False) -> CachedCollectionIterator:
        """Start a traversal of a collection.

        With a cached length and no ``force`` no remote call is made here;
        items are resolved lazily. Otherwise the first page is fetched and
        cached, and its total replaces any cached length.

        Args:
            collection_id: Collection identifier.
            force: Ignore the cached length and refetch the first page.

        Returns:
            A fresh iterator positioned at index zero.

        Raises:
            TracklistUpstreamError: If the first page cannot be fetched.
            TracklistStoreError: If the cache cannot be read or written.
            TracklistCodecError: If a fetched item cannot be encoded.
        """
        if not force:
            total = self._store.get_length(collection_id)
            if total is not None:
                _LOGGER.info("playlist_length_cache_hit", collection_id=collection_id, total=total)
                return CachedCollectionIterator(collection_id, total, self._store, self._loader)
        page = self._loader.load(collection_id, 0)
        self._store.put_length(collection_id, page.total)
        _LOGGER.info(
            "playlist_length_cached",
            collection_id=collection_id,
            total=page.total,
            forced=force,
        )
        return CachedCollectionIterator(
            collection_id,
            page.total,
            self._store,
            self._loader,
            seed_items=page.items,
        )
