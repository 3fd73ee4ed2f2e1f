"""Remote page loading with cache population.

Every page obtained from the remote source passes through here so
that each fetched item is written to the items namespace exactly once.
"""

from __future__ import annotations

from core.logging_config import get_logger
from core.types import Page
from remote.page_source import PageSource
from store.cache_keys import ItemKeyBuilder
from store.cache_store import LmdbCacheStore
from store.item_codec import encode_item

_LOGGER = get_logger(__name__)


class CachingPageLoader:
    """Fetches remote pages and caches their items by absolute index."""

    def __init__(self, store: LmdbCacheStore, source: PageSource, page_size: int) -> None:
        self._store = store
        self._source = source
        self._page_size = page_size

    @property
    def page_size(self) -> int:
        return self._page_size

    def load(self, collection_id: str, offset: int) -> Page:
        """Fetch the page starting at ``offset`` and cache its items.

        Existing cache entries are left untouched.

        Args:
            collection_id: Collection identifier.
            offset: Absolute index of the first item of the page.

        Returns:
            The fetched page.

        Raises:
            TracklistUpstreamError: If the remote fetch fails.
            TracklistCodecError: If an item cannot be encoded.
            TracklistStoreError: If a cache write fails.
        """
        page = self._source.fetch_page(collection_id, self._page_size, offset)
        keys = ItemKeyBuilder(collection_id)
        written = 0
        for position, item in enumerate(page.items):
            key = keys.key_for(offset + position)
            if self._store.put_item(key, encode_item(item), overwrite=False):
                written += 1
        _LOGGER.info(
            "playlist_page_fetched",
            collection_id=collection_id,
            offset=offset,
            item_count=len(page.items),
            cached_count=written,
            total=page.total,
        )
        return page
