"""Lazy cache-backed playlist iterator.

Each pull resolves one index from exactly one source: the items cache,
then the lookahead buffer of the most recent remote page, then a new
remote page. Buffered items carry their absolute index so a cache hit
never consumes an unrelated buffered item.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable, Iterator

from core.errors import TracklistCodecError, TracklistStoreError
from core.logging_config import get_logger
from core.types import PlaylistItem
from playlist.page_loader import CachingPageLoader
from store.cache_keys import ItemKeyBuilder
from store.cache_store import LmdbCacheStore
from store.item_codec import decode_item

_LOGGER = get_logger(__name__)


class CachedCollectionIterator(Iterator[PlaylistItem]):
    """Single-pass iterator over one playlist's items.

    A failed pull raises and leaves the cursor where it was, so calling
    ``next`` again retries the same index. Once ``offset`` reaches
    ``total`` the iterator is exhausted for good.
    """

    def __init__(
        self,
        collection_id: str,
        total: int,
        store: LmdbCacheStore,
        loader: CachingPageLoader,
        seed_items: Iterable[PlaylistItem] = (),
    ) -> None:
        """Create an iterator positioned at index zero.

        Args:
            collection_id: Collection identifier.
            total: Number of items the traversal will produce.
            store: Shared cache store.
            loader: Page loader used on cache and buffer misses.
            seed_items: Items of an already fetched first page.
        """
        self._collection_id = collection_id
        self._total = total
        self._offset = 0
        self._store = store
        self._loader = loader
        self._keys = ItemKeyBuilder(collection_id)
        self._buffer: deque[tuple[int, PlaylistItem]] = deque(enumerate(seed_items))

    @property
    def collection_id(self) -> str:
        return self._collection_id

    @property
    def total(self) -> int:
        return self._total

    @property
    def offset(self) -> int:
        """Index of the next item to produce."""
        return self._offset

    @property
    def exhausted(self) -> bool:
        return self._offset >= self._total

    def __iter__(self) -> "CachedCollectionIterator":
        return self

    def __next__(self) -> PlaylistItem:
        if self.exhausted:
            raise StopIteration
        cached = self._read_cached(self._offset)
        if cached is not None:
            if self._buffer and self._buffer[0][0] == self._offset:
                self._buffer.popleft()
            return self._advance(cached)
        buffered = self._take_buffered(self._offset)
        if buffered is not None:
            return self._advance(buffered)
        page = self._loader.load(self._collection_id, self._offset)
        if not page.items:
            _LOGGER.warning(
                "playlist_page_empty",
                collection_id=self._collection_id,
                offset=self._offset,
                expected_total=self._total,
                reported_total=page.total,
            )
            self._total = self._offset
            raise StopIteration
        self._buffer = deque(enumerate(page.items, start=self._offset))
        _, item = self._buffer.popleft()
        return self._advance(item)

    def _advance(self, item: PlaylistItem) -> PlaylistItem:
        self._offset += 1
        return item

    def _read_cached(self, index: int) -> PlaylistItem | None:
        """Return the cached item at ``index``; unreadable entries count as misses."""
        key = self._keys.key_for(index)
        try:
            payload = self._store.get_item(key)
        except TracklistStoreError as error:
            _LOGGER.error(
                "cache_item_read_failed",
                collection_id=self._collection_id,
                index=index,
                error=str(error),
            )
            return None
        if payload is None:
            return None
        try:
            return decode_item(payload)
        except TracklistCodecError as error:
            _LOGGER.error(
                "cache_item_corrupt",
                collection_id=self._collection_id,
                index=index,
                error=str(error),
            )
            return None

    def _take_buffered(self, index: int) -> PlaylistItem | None:
        while self._buffer and self._buffer[0][0] < index:
            self._buffer.popleft()
        if self._buffer and self._buffer[0][0] == index:
            return self._buffer.popleft()[1]
        return None
