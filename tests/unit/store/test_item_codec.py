"""Unit tests for the cached item codec."""

from __future__ import annotations

import msgpack
import pytest

from core.constants import CACHE_FORMAT_VERSION
from core.errors import TracklistCodecError
from store.item_codec import decode_item, encode_item
from tests.playlist_stubs import make_item


def test_encoded_item_decodes_to_equal_item() -> None:
    """Decoding should restore every field of the item."""
    item = make_item(12)

    assert decode_item(encode_item(item)) == item


def test_payload_starts_with_format_version() -> None:
    """Payloads should be tagged with the current format version."""
    assert encode_item(make_item(0))[0] == CACHE_FORMAT_VERSION


@pytest.mark.parametrize(
    "payload",
    [
        b"",
        bytes([CACHE_FORMAT_VERSION + 1]) + msgpack.packb({"track": {}}),
        bytes([CACHE_FORMAT_VERSION]) + b"\xc1",
        bytes([CACHE_FORMAT_VERSION]) + msgpack.packb([1, 2, 3]),
        bytes([CACHE_FORMAT_VERSION]) + msgpack.packb({"track": {"name": "x"}}),
    ],
)
def test_invalid_payloads_raise_codec_error(payload: bytes) -> None:
    """Empty, foreign-version, garbage, and incomplete payloads are rejected."""
    with pytest.raises(TracklistCodecError):
        decode_item(payload)
