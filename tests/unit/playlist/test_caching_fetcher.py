"""Unit tests for cache-backed playlist traversal."""

from __future__ import annotations

import msgpack
import pytest

from core.errors import TracklistStoreError, TracklistUpstreamError
from playlist.caching_fetcher import CachingCollectionFetcher
from store.cache_keys import item_key
from store.cache_store import LmdbCacheStore
from store.item_codec import encode_item
from tests.playlist_stubs import make_item, stub_source

PLAYLIST_ID = "37i9dQZF1DXcBWIGoYBM5M"


@pytest.fixture
def store(tmp_path):
    with LmdbCacheStore(tmp_path / "cache") as cache_store:
        yield cache_store


@pytest.mark.parametrize("total", [0, 1, 19, 20, 21, 40, 45])
def test_traversal_yields_exactly_total_items(store, total) -> None:
    """A full traversal should yield every item once and then stop."""
    source = stub_source(total)
    iterator = CachingCollectionFetcher(store, source, page_size=20).fetch(PLAYLIST_ID)

    items = list(iterator)

    assert items == source.items
    assert next(iterator, None) is None
    assert iterator.exhausted


def test_cached_length_defers_remote_calls(store) -> None:
    """A cached length should create the iterator without any remote call."""
    source = stub_source(5)
    store.put_length(PLAYLIST_ID, 5)

    iterator = CachingCollectionFetcher(store, source, page_size=20).fetch(PLAYLIST_ID)

    assert source.calls == [] and iterator.total == 5


def test_scenario_twenty_five_items_with_page_size_twenty(store) -> None:
    """Two remote pages should cover a 25 item playlist on an empty cache."""
    source = stub_source(25)
    iterator = CachingCollectionFetcher(store, source, page_size=20).fetch(PLAYLIST_ID)

    assert source.calls == [(PLAYLIST_ID, 20, 0)]
    assert store.get_length(PLAYLIST_ID) == 25

    first_twenty = [next(iterator) for _ in range(20)]
    assert first_twenty == source.items[:20]
    assert iterator.offset == 20 and len(source.calls) == 1

    assert next(iterator) == source.items[20]
    assert source.calls[-1] == (PLAYLIST_ID, 20, 20)

    rest = [next(iterator) for _ in range(4)]
    assert rest == source.items[21:25]
    assert len(source.calls) == 2
    assert next(iterator, None) is None
    assert all(store.get_item(item_key(PLAYLIST_ID, index)) for index in range(25))


def test_second_traversal_is_served_from_cache(store) -> None:
    """Cached indices should never be resolved remotely."""
    source = stub_source(45)
    fetcher = CachingCollectionFetcher(store, source, page_size=20)
    list(fetcher.fetch(PLAYLIST_ID))
    source.calls.clear()
    source.forbidden_offsets = {0, 20, 40}

    items = list(fetcher.fetch(PLAYLIST_ID))

    assert items == source.items and source.calls == []


def test_partially_cached_playlist_fetches_only_missing_pages(store) -> None:
    """Only the uncached tail should trigger remote calls."""
    source = stub_source(25)
    for index in range(20):
        store.put_item(item_key(PLAYLIST_ID, index), encode_item(source.items[index]))
    store.put_length(PLAYLIST_ID, 25)
    source.forbidden_offsets = set(range(20))

    items = list(CachingCollectionFetcher(store, source, page_size=20).fetch(PLAYLIST_ID))

    assert items == source.items and source.offsets == [20]


def test_corrupt_entry_is_resolved_remotely(store) -> None:
    """An unreadable cache entry should be skipped and refetched without error."""
    source = stub_source(25)
    fetcher = CachingCollectionFetcher(store, source, page_size=20)
    list(fetcher.fetch(PLAYLIST_ID))
    store.put_item(item_key(PLAYLIST_ID, 3), b"\x01\xc1not-msgpack")
    source.calls.clear()

    items = list(fetcher.fetch(PLAYLIST_ID))

    assert items == source.items and source.offsets == [3]


def test_payload_from_other_format_version_is_treated_as_miss(store) -> None:
    """A version mismatch should behave like a corrupt entry."""
    source = stub_source(3)
    fetcher = CachingCollectionFetcher(store, source, page_size=20)
    list(fetcher.fetch(PLAYLIST_ID))
    foreign_payload = bytes([99]) + msgpack.packb({"track": {}}, use_bin_type=True)
    store.put_item(item_key(PLAYLIST_ID, 0), foreign_payload)
    source.calls.clear()

    items = list(fetcher.fetch(PLAYLIST_ID))

    assert items == source.items and source.offsets == [0]


def test_forced_refresh_refetches_and_overwrites_length(store) -> None:
    """Forced fetch should always call the remote source and replace the length."""
    source = stub_source(7)
    store.put_length(PLAYLIST_ID, 3)

    iterator = CachingCollectionFetcher(store, source, page_size=20).fetch(PLAYLIST_ID, force=True)

    assert source.offsets == [0]
    assert store.get_length(PLAYLIST_ID) == 7
    assert list(iterator) == source.items


def test_upstream_failure_leaves_cursor_retryable(store) -> None:
    """A failed page fetch should raise and keep the same offset for a retry."""
    source = stub_source(3)
    store.put_length(PLAYLIST_ID, 3)
    iterator = CachingCollectionFetcher(store, source, page_size=20).fetch(PLAYLIST_ID)
    source.failures_remaining = 1

    with pytest.raises(TracklistUpstreamError):
        next(iterator)

    assert iterator.offset == 0
    assert list(iterator) == source.items


def test_eager_fetch_failure_propagates(store) -> None:
    """A failed first page should raise and leave no cached length."""
    source = stub_source(3)
    source.failures_remaining = 1

    with pytest.raises(TracklistUpstreamError):
        CachingCollectionFetcher(store, source, page_size=20).fetch(PLAYLIST_ID)

    assert store.get_length(PLAYLIST_ID) is None


def test_store_write_failure_raises_without_advancing(store, monkeypatch) -> None:
    """A cache write failure should surface and keep the cursor in place."""
    source = stub_source(2)
    store.put_length(PLAYLIST_ID, 2)
    iterator = CachingCollectionFetcher(store, source, page_size=20).fetch(PLAYLIST_ID)
    original_put_item = store.put_item

    def failing_put_item(key: bytes, payload: bytes, overwrite: bool = True) -> bool:
        raise TracklistStoreError("disk full")

    monkeypatch.setattr(store, "put_item", failing_put_item)
    with pytest.raises(TracklistStoreError):
        next(iterator)
    monkeypatch.setattr(store, "put_item", original_put_item)

    assert iterator.offset == 0
    assert list(iterator) == source.items


def test_cache_read_failure_is_treated_as_miss(store, monkeypatch) -> None:
    """A store read error should fall back to the remote path."""
    source = stub_source(2)
    store.put_length(PLAYLIST_ID, 2)

    def failing_get_item(key: bytes) -> bytes | None:
        raise TracklistStoreError("read failed")

    monkeypatch.setattr(store, "get_item", failing_get_item)
    items = list(CachingCollectionFetcher(store, source, page_size=20).fetch(PLAYLIST_ID))

    assert items == source.items and source.offsets == [0]


def test_cache_hit_does_not_consume_unrelated_buffer_entry(store) -> None:
    """A cache hit should only drop the buffered item with the same index."""
    source = stub_source(4)
    iterator = CachingCollectionFetcher(store, source, page_size=20).fetch(PLAYLIST_ID)
    replacement = make_item(100)
    store.put_item(item_key(PLAYLIST_ID, 0), encode_item(replacement), overwrite=True)

    items = list(iterator)

    assert items == [replacement, *source.items[1:]]


def test_shrunken_playlist_ends_traversal_early(store) -> None:
    """An empty remote page before the cached total should end the traversal."""
    source = stub_source(2)
    store.put_length(PLAYLIST_ID, 5)
    for index in range(2):
        store.put_item(item_key(PLAYLIST_ID, index), encode_item(source.items[index]))

    iterator = CachingCollectionFetcher(store, source, page_size=20).fetch(PLAYLIST_ID)
    items = list(iterator)

    assert items == source.items and iterator.exhausted
