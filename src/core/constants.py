"""Core constants used across Tracklist modules.

This module centralizes non-domain-specific constants.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

from pathlib import Path

DEFAULT_CACHE_PATH = Path("cache")
DEFAULT_CLIENT_CONFIG_PATH = Path("~/.config/spotify-tui/client.yml")
DEFAULT_TOKEN_CACHE_PATH = Path("~/.config/spotify-tui/.spotify_token_cache.json")
DEFAULT_API_BASE_URL = "https://api.spotify.com/v1"
DEFAULT_ACCOUNTS_TOKEN_URL = "https://accounts.spotify.com/api/token"
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 50
DEFAULT_LOG_LEVEL = "WARNING"
LENGTHS_NAMESPACE = b"lengths"
ITEMS_NAMESPACE = b"items"
DEFAULT_CACHE_MAP_SIZE = 1 << 30
INDEX_WIDTH_BYTES = 4
MAX_INDEX_VALUE = (1 << (8 * INDEX_WIDTH_BYTES)) - 1
CACHE_FORMAT_VERSION = 1
DEFAULT_RETRY_ATTEMPTS = 3
DEFAULT_RETRY_BASE_DELAY = 0.5
DEFAULT_RETRY_MAX_DELAY = 30.0
DEFAULT_RETRY_EXPONENTIAL_BASE = 2.0
TOKEN_EXPIRY_MARGIN_SECONDS = 60
NO_URL_TEXT = "(no URL)"
UNKNOWN_YEAR_TEXT = "(unknown year)"
SPOTIFY_URL_KEY = "spotify"
PLAYLIST_ID_LENGTH = 22
