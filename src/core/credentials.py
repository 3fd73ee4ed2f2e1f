"""Client credential and token cache files.

This module reads the YAML client configuration and the JSON OAuth
token cache that an external authorization flow leaves on disk.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict, dataclass
import json
from pathlib import Path
import time
from typing import cast

import yaml

from core.constants import TOKEN_EXPIRY_MARGIN_SECONDS
from core.errors import TracklistConfigError, TracklistIOError


@dataclass(frozen=True)
class ClientCredentials:
    """Spotify application credentials.

    Attributes:
        client_id: Application client id.
        client_secret: Application client secret.
        device_id: Optional preferred playback device.
    """

    client_id: str
    client_secret: str
    device_id: str | None = None


@dataclass(frozen=True)
class CachedToken:
    """OAuth token as persisted in the token cache file."""

    access_token: str
    token_type: str = "Bearer"
    expires_at: int | None = None
    refresh_token: str | None = None
    scope: str | None = None

    def is_expired(self, now: float | None = None) -> bool:
        """Return whether the token expires within the safety margin."""
        if self.expires_at is None:
            return False
        current = time.time() if now is None else now
        return self.expires_at - TOKEN_EXPIRY_MARGIN_SECONDS <= current


def load_client_credentials(config_path: Path) -> ClientCredentials:
    """Load client credentials from a YAML file.

    Args:
        config_path: Path to the YAML client configuration.

    Returns:
        Parsed credentials.

    Raises:
        TracklistIOError: If the file cannot be read.
        TracklistConfigError: If YAML is invalid or keys are missing.
    """
    text = _read_text(config_path, "client config")
    try:
        payload = cast(object, yaml.safe_load(text))
    except yaml.YAMLError as error:
        raise TracklistConfigError(
            f"Failed to parse YAML client config at {config_path}: {error}. "
            "Fix YAML syntax and retry."
        ) from error
    mapping = _expect_mapping(payload, f"client config at {config_path}")
    device_id = mapping.get("device_id")
    return ClientCredentials(
        client_id=_required_string(mapping, "client_id", config_path),
        client_secret=_required_string(mapping, "client_secret", config_path),
        device_id=str(device_id) if device_id is not None else None,
    )


def load_cached_token(token_path: Path) -> CachedToken:
    """Load the OAuth token cache file.

    Args:
        token_path: Path to the JSON token cache.

    Returns:
        Parsed cached token.

    Raises:
        TracklistIOError: If the file cannot be read.
        TracklistConfigError: If JSON is invalid or has no access token.
    """
    text = _read_text(token_path, "token cache")
    try:
        payload = cast(object, json.loads(text))
    except json.JSONDecodeError as error:
        raise TracklistConfigError(
            f"Failed to parse token cache at {token_path}: {error.msg}. "
            "Re-run the authorization flow to recreate it."
        ) from error
    mapping = _expect_mapping(payload, f"token cache at {token_path}")
    return token_from_payload(mapping, token_path)


def token_from_payload(mapping: Mapping[str, object], source: Path | str) -> CachedToken:
    """Build a cached token from a decoded JSON mapping.

    Raises:
        TracklistConfigError: If required fields are missing or mistyped.
    """
    expires_at = mapping.get("expires_at")
    if expires_at is not None and not isinstance(expires_at, (int, float)):
        raise TracklistConfigError(
            f"Invalid token cache at {source}: 'expires_at' must be a number."
        )
    refresh_token = mapping.get("refresh_token")
    scope = mapping.get("scope")
    return CachedToken(
        access_token=_required_string(mapping, "access_token", source),
        token_type=str(mapping.get("token_type") or "Bearer"),
        expires_at=int(expires_at) if expires_at is not None else None,
        refresh_token=str(refresh_token) if refresh_token else None,
        scope=str(scope) if scope else None,
    )


def save_cached_token(token_path: Path, token: CachedToken) -> None:
    """Persist a token to the cache file.

    Raises:
        TracklistIOError: If the file cannot be written.
    """
    try:
        token_path.parent.mkdir(parents=True, exist_ok=True)
        token_path.write_text(json.dumps(asdict(token), indent=2) + "\n", encoding="utf-8")
    except OSError as error:
        raise TracklistIOError(
            f"Failed to write token cache at {token_path}: {error}. "
            "Check file permissions and retry."
        ) from error


def _read_text(path: Path, description: str) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as error:
        raise TracklistIOError(
            f"Failed to read {description} at {path}: {error}. "
            "Check the path and file permissions."
        ) from error


def _expect_mapping(value: object, context: str) -> Mapping[str, object]:
    if isinstance(value, Mapping):
        return {str(key): payload for key, payload in value.items()}
    raise TracklistConfigError(
        f"Invalid {context}: expected object mapping, got {type(value).__name__}."
    )


def _required_string(mapping: Mapping[str, object], key: str, source: Path | str) -> str:
    value = mapping.get(key)
    if not isinstance(value, str) or not value:
        raise TracklistConfigError(
            f"Invalid {source}: missing required string field '{key}'."
        )
    return value
