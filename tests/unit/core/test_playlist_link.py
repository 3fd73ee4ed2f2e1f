"""Unit tests for playlist link parsing."""

from __future__ import annotations

import pytest

from core.playlist_link import parse_playlist_link

PLAYLIST_ID = "37i9dQZF1DXcBWIGoYBM5M"


@pytest.mark.parametrize(
    "text",
    [
        PLAYLIST_ID,
        f"https://open.spotify.com/playlist/{PLAYLIST_ID}",
        f"https://open.spotify.com/playlist/{PLAYLIST_ID}?si=a1B2-c_3",
        f"spotify:playlist:{PLAYLIST_ID}",
    ],
)
def test_recognized_forms_yield_playlist_id(text: str) -> None:
    """Bare ids, links, and URIs should all resolve to the id."""
    assert parse_playlist_link(text) == PLAYLIST_ID


@pytest.mark.parametrize(
    "text",
    [
        "",
        PLAYLIST_ID[:-1],
        f"{PLAYLIST_ID}x",
        f"https://open.spotify.com/album/{PLAYLIST_ID}",
        f"spotify:track:{PLAYLIST_ID}",
        f" {PLAYLIST_ID}",
        f"{PLAYLIST_ID}\n",
    ],
)
def test_unrecognized_forms_yield_none(text: str) -> None:
    """Anything else should not parse."""
    assert parse_playlist_link(text) is None
