"""Cache key and length encoding.

Item keys are the collection id bytes followed by a fixed-width
big-endian index, so keys of one collection sort by index.
"""

from __future__ import annotations

from core.constants import INDEX_WIDTH_BYTES, MAX_INDEX_VALUE
from core.errors import TracklistStoreError


def collection_key(collection_id: str) -> bytes:
    """Return the raw key used in the lengths namespace."""
    return collection_id.encode("utf-8")


def encode_u32(value: int) -> bytes:
    """Encode an index or length as four big-endian bytes.

    Raises:
        TracklistStoreError: If value does not fit in 32 unsigned bits.
    """
    if value < 0 or value > MAX_INDEX_VALUE:
        raise TracklistStoreError(
            f"Value {value} cannot be stored in the cache: expected 0..{MAX_INDEX_VALUE}."
        )
    return value.to_bytes(INDEX_WIDTH_BYTES, "big")


def decode_length(raw_value: bytes) -> int | None:
    """Decode a stored length, or None when the value is malformed."""
    if len(raw_value) != INDEX_WIDTH_BYTES:
        return None
    return int.from_bytes(raw_value, "big")


def item_key(collection_id: str, index: int) -> bytes:
    """Return the composite key of one cached item."""
    return collection_key(collection_id) + encode_u32(index)


class ItemKeyBuilder:
    """Builds composite item keys for a single collection.

    The encoded collection prefix is computed once and reused for every
    index of a traversal.
    """

    def __init__(self, collection_id: str) -> None:
        self._prefix = collection_key(collection_id)

    def key_for(self, index: int) -> bytes:
        """Return the composite key for ``index``."""
        return self._prefix + encode_u32(index)
