"""Playlist link parsing.

Accepts bare playlist ids, open.spotify.com links and spotify: URIs.
"""

from __future__ import annotations

import functools
import re

from core.constants import PLAYLIST_ID_LENGTH


def parse_playlist_link(text: str) -> str | None:
    """Extract a playlist id from a link, URI, or bare id.

    Args:
        text: User supplied argument.

    Returns:
        The 22-character playlist id, or None when the text is not recognized.
    """
    match = _playlist_link_pattern().match(text)
    if match is None:
        return None
    return match.group("playlist_id")


@functools.lru_cache(maxsize=None)
def _playlist_link_pattern() -> re.Pattern[str]:
    return re.compile(
        r"^(?:https://open\.spotify\.com/playlist/|spotify:playlist:)?"
        rf"(?P<playlist_id>[0-9A-Za-z]{{{PLAYLIST_ID_LENGTH}}})"
        r"(?:\?si=[-_0-9A-Za-z]*)?\Z"
    )
