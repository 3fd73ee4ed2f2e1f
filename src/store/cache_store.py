"""LMDB-backed cache store.

This module persists two namespaces in one embedded environment:
collection lengths keyed by collection id, and item payloads keyed
by composite item keys. Every write commits before returning.
"""

from __future__ import annotations

from pathlib import Path
from types import TracebackType

import lmdb

from core.constants import DEFAULT_CACHE_MAP_SIZE, ITEMS_NAMESPACE, LENGTHS_NAMESPACE
from core.errors import TracklistStoreError
from core.logging_config import get_logger
from store.cache_keys import collection_key, decode_length, encode_u32

_LOGGER = get_logger(__name__)


class LmdbCacheStore:
    """Durable ordered key-value cache for playlist data."""

    def __init__(self, cache_path: Path, map_size: int = DEFAULT_CACHE_MAP_SIZE) -> None:
        """Open or create the cache environment.

        Args:
            cache_path: Directory holding the LMDB files.
            map_size: Maximum size of the memory map in bytes.

        Raises:
            TracklistStoreError: If the environment cannot be opened.
        """
        self._cache_path = cache_path
        try:
            cache_path.mkdir(parents=True, exist_ok=True)
            self._env = lmdb.open(str(cache_path), map_size=map_size, max_dbs=2)
            self._lengths = self._env.open_db(LENGTHS_NAMESPACE)
            self._items = self._env.open_db(ITEMS_NAMESPACE)
        except (OSError, lmdb.Error) as error:
            raise TracklistStoreError(
                f"Failed to open cache at {cache_path}: {error}. "
                "Check the cache path and its permissions."
            ) from error
        _LOGGER.debug("cache_store_opened", cache_path=str(cache_path))

    def get_length(self, collection_id: str) -> int | None:
        """Return the cached total length of a collection.

        Args:
            collection_id: Collection identifier.

        Returns:
            Cached length, or None when absent or malformed.

        Raises:
            TracklistStoreError: If the read fails.
        """
        raw_value = self._get(self._lengths, collection_key(collection_id))
        if raw_value is None:
            return None
        total = decode_length(raw_value)
        if total is None:
            _LOGGER.warning(
                "cache_length_malformed",
                collection_id=collection_id,
                byte_count=len(raw_value),
            )
        return total

    def put_length(self, collection_id: str, total: int) -> None:
        """Store the total length of a collection, replacing any previous value.

        Raises:
            TracklistStoreError: If the write fails.
        """
        self._put(self._lengths, collection_key(collection_id), encode_u32(total), overwrite=True)

    def get_item(self, key: bytes) -> bytes | None:
        """Return the payload stored under a composite item key.

        Raises:
            TracklistStoreError: If the read fails.
        """
        return self._get(self._items, key)

    def put_item(self, key: bytes, payload: bytes, overwrite: bool = True) -> bool:
        """Store an item payload.

        Args:
            key: Composite item key.
            payload: Encoded item payload.
            overwrite: Replace an existing value when True.

        Returns:
            Whether the payload was written.

        Raises:
            TracklistStoreError: If the write fails.
        """
        return self._put(self._items, key, payload, overwrite=overwrite)

    def close(self) -> None:
        """Close the environment."""
        self._env.close()

    def __enter__(self) -> "LmdbCacheStore":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()

    def _get(self, database: object, key: bytes) -> bytes | None:
        try:
            with self._env.begin(db=database) as txn:
                value = txn.get(key)
        except lmdb.Error as error:
            raise TracklistStoreError(
                f"Failed to read from cache at {self._cache_path}: {error}."
            ) from error
        return None if value is None else bytes(value)

    def _put(self, database: object, key: bytes, value: bytes, overwrite: bool) -> bool:
        try:
            with self._env.begin(db=database, write=True) as txn:
                return bool(txn.put(key, value, overwrite=overwrite))
        except lmdb.Error as error:
            raise TracklistStoreError(
                f"Failed to write to cache at {self._cache_path}: {error}. "
                "Check free disk space and retry."
            ) from error
