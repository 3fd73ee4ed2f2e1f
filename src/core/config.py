"""Runtime configuration model for Tracklist.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

from core.constants import (
    DEFAULT_API_BASE_URL,
    DEFAULT_CACHE_PATH,
    DEFAULT_CLIENT_CONFIG_PATH,
    DEFAULT_LOG_LEVEL,
    DEFAULT_PAGE_SIZE,
    DEFAULT_RETRY_ATTEMPTS,
    DEFAULT_RETRY_BASE_DELAY,
    DEFAULT_TOKEN_CACHE_PATH,
    MAX_PAGE_SIZE,
)
from core.errors import TracklistConfigError
from core.logging_config import parse_log_level


@dataclass(frozen=True)
class TracklistConfig:
    """Validated runtime configuration.

    Attributes:
        cache_path: Directory of the embedded LMDB cache.
        client_config_path: YAML file with Spotify client credentials.
        token_cache_path: JSON file holding the cached OAuth token.
        api_base_url: Base URL of the Spotify Web API.
        page_size: Number of items requested per remote page.
        retry_attempts: Total attempts per remote page fetch.
        retry_base_delay: First backoff delay in seconds.
        log_level: Minimum structured log level.
    """

    cache_path: Path
    client_config_path: Path
    token_cache_path: Path
    api_base_url: str
    page_size: int
    retry_attempts: int
    retry_base_delay: float
    log_level: str

    @classmethod
    def from_env(cls) -> "TracklistConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            TracklistConfigError: If environment values are invalid.
        """
        cache_path_value = os.getenv("TRACKLIST_CACHE_PATH", str(DEFAULT_CACHE_PATH))
        client_config_value = os.getenv(
            "TRACKLIST_CLIENT_CONFIG", str(DEFAULT_CLIENT_CONFIG_PATH)
        )
        token_cache_value = os.getenv("TRACKLIST_TOKEN_CACHE", str(DEFAULT_TOKEN_CACHE_PATH))
        api_base_url = os.getenv("TRACKLIST_API_BASE_URL", DEFAULT_API_BASE_URL).rstrip("/")
        page_size = _parse_int(
            "TRACKLIST_PAGE_SIZE",
            os.getenv("TRACKLIST_PAGE_SIZE", str(DEFAULT_PAGE_SIZE)),
            minimum=1,
            maximum=MAX_PAGE_SIZE,
        )
        retry_attempts = _parse_int(
            "TRACKLIST_RETRY_ATTEMPTS",
            os.getenv("TRACKLIST_RETRY_ATTEMPTS", str(DEFAULT_RETRY_ATTEMPTS)),
            minimum=1,
        )
        retry_base_delay = _parse_delay(
            os.getenv("TRACKLIST_RETRY_BASE_DELAY", str(DEFAULT_RETRY_BASE_DELAY))
        )
        log_level = os.getenv("TRACKLIST_LOG_LEVEL", DEFAULT_LOG_LEVEL)
        parse_log_level(log_level)
        return cls(
            cache_path=Path(cache_path_value).expanduser(),
            client_config_path=Path(client_config_value).expanduser(),
            token_cache_path=Path(token_cache_value).expanduser(),
            api_base_url=api_base_url,
            page_size=page_size,
            retry_attempts=retry_attempts,
            retry_base_delay=retry_base_delay,
            log_level=log_level,
        )


def _parse_int(
    variable_name: str,
    raw_value: str,
    minimum: int,
    maximum: int | None = None,
) -> int:
    """Parse a bounded integer environment value.

    Args:
        variable_name: Environment variable name for error messages.
        raw_value: Raw string from environment.
        minimum: Smallest accepted value.
        maximum: Largest accepted value, unbounded when omitted.

    Returns:
        Parsed integer.

    Raises:
        TracklistConfigError: If value is not an integer in range.
    """
    try:
        value = int(raw_value)
    except ValueError as error:
        raise TracklistConfigError(
            f"Invalid {variable_name} value: "
            f"expected integer, got '{raw_value}'. "
            f"Set {variable_name} to a numeric value."
        ) from error
    if value < minimum or (maximum is not None and value > maximum):
        upper = "" if maximum is None else f" and at most {maximum}"
        raise TracklistConfigError(
            f"Invalid {variable_name} value {value}: expected at least {minimum}{upper}."
        )
    return value


def _parse_delay(raw_value: str) -> float:
    """Parse the retry base delay environment value."""
    try:
        value = float(raw_value)
    except ValueError as error:
        raise TracklistConfigError(
            "Invalid TRACKLIST_RETRY_BASE_DELAY value: "
            f"expected seconds as a number, got '{raw_value}'."
        ) from error
    if value < 0:
        raise TracklistConfigError(
            f"Invalid TRACKLIST_RETRY_BASE_DELAY value {value}: delay cannot be negative."
        )
    return value
