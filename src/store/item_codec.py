"""Binary payload codec for cached playlist items.

Each payload is one format-version byte followed by a msgpack map
with named fields. A payload written by another format version is
rejected like a corrupt one so callers can refetch it.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import msgpack
from msgpack.exceptions import UnpackException

from core.constants import CACHE_FORMAT_VERSION
from core.errors import TracklistCodecError
from core.types import Album, Artist, PlaylistItem, Track


def encode_item(item: PlaylistItem) -> bytes:
    """Serialize a playlist item into a versioned cache payload.

    Args:
        item: Playlist item to serialize.

    Returns:
        Payload bytes.

    Raises:
        TracklistCodecError: If the item cannot be packed.
    """
    try:
        packed = msgpack.packb(playlist_item_to_payload(item), use_bin_type=True)
    except (TypeError, ValueError, OverflowError) as error:
        raise TracklistCodecError(
            f"Failed to encode playlist item for the cache: {error}"
        ) from error
    return bytes([CACHE_FORMAT_VERSION]) + packed


def decode_item(payload: bytes) -> PlaylistItem:
    """Deserialize a versioned cache payload.

    Args:
        payload: Bytes previously produced by ``encode_item``.

    Returns:
        Decoded playlist item.

    Raises:
        TracklistCodecError: If the payload is empty, from another format
            version, or not a valid item encoding.
    """
    if not payload:
        raise TracklistCodecError("Cached item payload is empty.")
    version = payload[0]
    if version != CACHE_FORMAT_VERSION:
        raise TracklistCodecError(
            f"Cached item payload has format version {version}, "
            f"expected {CACHE_FORMAT_VERSION}."
        )
    try:
        unpacked = msgpack.unpackb(payload[1:], raw=False)
    except (UnpackException, ValueError, TypeError) as error:
        raise TracklistCodecError(
            f"Cached item payload is not valid msgpack: {error}"
        ) from error
    try:
        return playlist_item_from_payload(unpacked)
    except (AttributeError, KeyError, TypeError, ValueError) as error:
        raise TracklistCodecError(
            f"Cached item payload has an invalid shape: {error!r}"
        ) from error


def playlist_item_to_payload(item: PlaylistItem) -> dict[str, object]:
    """Convert a playlist item into a plain mapping."""
    track = item.track
    return {
        "added_at": item.added_at,
        "track": {
            "id": track.track_id,
            "name": track.name,
            "artists": [{"name": artist.name, "id": artist.artist_id} for artist in track.artists],
            "album": {
                "name": track.album.name,
                "release_date": track.album.release_date,
                "release_date_precision": track.album.release_date_precision,
            },
            "track_number": track.track_number,
            "duration_ms": track.duration_ms,
            "external_urls": dict(track.external_urls),
        },
    }


def playlist_item_from_payload(payload: Any) -> PlaylistItem:
    """Convert a plain mapping back into a playlist item.

    Raises:
        KeyError: If a required field is missing.
        TypeError: If a field has the wrong container type.
    """
    if not isinstance(payload, Mapping):
        raise TypeError(f"expected mapping, got {type(payload).__name__}")
    track_payload = payload["track"]
    album_payload = track_payload["album"]
    artists = tuple(
        Artist(name=str(artist["name"]), artist_id=_optional_str(artist.get("id")))
        for artist in track_payload["artists"]
    )
    album = Album(
        name=str(album_payload["name"]),
        release_date=_optional_str(album_payload.get("release_date")),
        release_date_precision=_optional_str(album_payload.get("release_date_precision")),
    )
    track = Track(
        track_id=_optional_str(track_payload.get("id")),
        name=str(track_payload["name"]),
        artists=artists,
        album=album,
        track_number=int(track_payload.get("track_number") or 0),
        duration_ms=int(track_payload.get("duration_ms") or 0),
        external_urls={
            str(key): str(value)
            for key, value in dict(track_payload.get("external_urls") or {}).items()
        },
    )
    return PlaylistItem(track=track, added_at=_optional_str(payload.get("added_at")))


def _optional_str(value: object) -> str | None:
    return None if value is None else str(value)
