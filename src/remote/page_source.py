"""Playlist page sources.

This module defines the page source contract used by the caching
layer and its Spotify Web API implementation.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from core.errors import TracklistUpstreamError
from core.logging_config import get_logger
from core.types import Page
from store.item_codec import playlist_item_from_payload

_LOGGER = get_logger(__name__)


class PageSource(Protocol):
    """Source of playlist pages."""

    def fetch_page(self, collection_id: str, limit: int, offset: int) -> Page:
        """Fetch up to ``limit`` items starting at ``offset``."""
        ...


class SpotifyPageSource:
    """Spotify Web API playlist track pages.

    Each call blocks until the HTTP response is read.
    """

    def __init__(self, access_token: str, api_base_url: str) -> None:
        """Create the page source.

        Args:
            access_token: Bearer token obtained out of band.
            api_base_url: Base URL of the Web API, without trailing slash.
        """
        self._access_token = access_token
        self._api_base_url = api_base_url.rstrip("/")

    def fetch_page(self, collection_id: str, limit: int, offset: int) -> Page:
        """Fetch one page of playlist tracks.

        Args:
            collection_id: Playlist id.
            limit: Maximum items in the page.
            offset: Index of the first requested item.

        Returns:
            Parsed page with the playlist total.

        Raises:
            TracklistUpstreamError: If the request or payload is invalid.
        """
        payload = asyncio.run(self._get_page_payload(collection_id, limit, offset))
        page = page_from_payload(payload)
        _LOGGER.debug(
            "spotify_page_fetched",
            collection_id=collection_id,
            offset=offset,
            limit=limit,
            item_count=len(page.items),
            total=page.total,
        )
        return page

    async def _get_page_payload(self, collection_id: str, limit: int, offset: int) -> Any:
        url = f"{self._api_base_url}/playlists/{collection_id}/tracks"
        headers = {"Authorization": f"Bearer {self._access_token}"}
        params = {"limit": str(limit), "offset": str(offset)}
        try:
            async with aiohttp.ClientSession(headers=headers) as session:
                async with session.get(url, params=params) as response:
                    if response.status != 200:
                        body = await response.text()
                        raise TracklistUpstreamError(
                            f"Spotify returned HTTP {response.status} for playlist "
                            f"{collection_id} at offset {offset}: {body[:200]}",
                            retryable=is_retryable_status(response.status),
                        )
                    return await response.json()
        except aiohttp.ClientError as error:
            raise TracklistUpstreamError(
                f"Request for playlist {collection_id} at offset {offset} failed: {error}"
            ) from error
        except asyncio.TimeoutError as error:
            raise TracklistUpstreamError(
                f"Request for playlist {collection_id} at offset {offset} timed out."
            ) from error
        except ValueError as error:
            raise TracklistUpstreamError(
                f"Response for playlist {collection_id} at offset {offset} "
                f"is not valid JSON: {error}"
            ) from error


def is_retryable_status(status: int) -> bool:
    """Return whether an HTTP status marks a transient failure."""
    return status == 429 or status >= 500


def page_from_payload(payload: Any) -> Page:
    """Convert a Web API paging object into a page.

    Args:
        payload: Decoded JSON response body.

    Returns:
        Parsed page.

    Raises:
        TracklistUpstreamError: If the payload is not a valid paging object.
    """
    if not isinstance(payload, Mapping):
        raise TracklistUpstreamError(
            f"Invalid playlist page: expected JSON object, got {type(payload).__name__}.",
            retryable=False,
        )
    total = payload.get("total")
    raw_items = payload.get("items")
    if not isinstance(total, int) or total < 0 or not isinstance(raw_items, list):
        raise TracklistUpstreamError(
            "Invalid playlist page: expected integer 'total' and list 'items'.",
            retryable=False,
        )
    try:
        items = tuple(playlist_item_from_payload(raw_item) for raw_item in raw_items)
    except (AttributeError, KeyError, TypeError, ValueError) as error:
        raise TracklistUpstreamError(
            f"Invalid playlist item in page: {error!r}", retryable=False
        ) from error
    return Page(items=items, total=total)
