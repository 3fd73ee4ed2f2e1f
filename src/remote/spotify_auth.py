"""Access token resolution for the Spotify Web API.

The token is obtained out of band and read from the token cache file.
An expired token is refreshed once with the client credentials when a
refresh token is available, and the cache file is rewritten.
"""

from __future__ import annotations

import asyncio
from dataclasses import replace
import time
from typing import Any

import aiohttp

from core.config import TracklistConfig
from core.constants import DEFAULT_ACCOUNTS_TOKEN_URL
from core.credentials import (
    CachedToken,
    ClientCredentials,
    load_cached_token,
    load_client_credentials,
    save_cached_token,
    token_from_payload,
)
from core.errors import TracklistConfigError, TracklistUpstreamError
from core.logging_config import get_logger
from remote.page_source import is_retryable_status

_LOGGER = get_logger(__name__)


def resolve_access_token(config: TracklistConfig) -> str:
    """Return a usable bearer token.

    Args:
        config: Runtime configuration with credential file paths.

    Returns:
        Access token string.

    Raises:
        TracklistConfigError: If no usable token can be produced.
        TracklistIOError: If credential files cannot be read or written.
        TracklistUpstreamError: If the token refresh request fails.
    """
    token = load_cached_token(config.token_cache_path)
    if not token.is_expired():
        return token.access_token
    if token.refresh_token is None:
        raise TracklistConfigError(
            f"Cached token at {config.token_cache_path} has expired and has no refresh token. "
            "Re-run the authorization flow."
        )
    credentials = load_client_credentials(config.client_config_path)
    refreshed = refresh_token(credentials, token)
    save_cached_token(config.token_cache_path, refreshed)
    _LOGGER.info("access_token_refreshed", expires_at=refreshed.expires_at)
    return refreshed.access_token


def refresh_token(
    credentials: ClientCredentials,
    token: CachedToken,
    token_url: str = DEFAULT_ACCOUNTS_TOKEN_URL,
) -> CachedToken:
    """Exchange a refresh token for a new access token.

    Raises:
        TracklistUpstreamError: If the accounts service rejects the request.
    """
    payload = asyncio.run(_post_refresh(credentials, token, token_url))
    return merge_refreshed_token(token, payload, now=time.time())


def merge_refreshed_token(token: CachedToken, payload: Any, now: float) -> CachedToken:
    """Combine a refresh response with the previous token.

    The accounts service may omit the refresh token and scope; the
    previous values are kept in that case.
    """
    if not isinstance(payload, dict):
        raise TracklistUpstreamError("Token refresh returned a non-object response.")
    try:
        refreshed = token_from_payload(payload, "token refresh response")
    except TracklistConfigError as error:
        raise TracklistUpstreamError(str(error)) from error
    expires_in = payload.get("expires_in")
    expires_at = int(now + expires_in) if isinstance(expires_in, (int, float)) else None
    return replace(
        refreshed,
        expires_at=expires_at,
        refresh_token=refreshed.refresh_token or token.refresh_token,
        scope=refreshed.scope or token.scope,
    )


async def _post_refresh(
    credentials: ClientCredentials,
    token: CachedToken,
    token_url: str,
) -> Any:
    auth = aiohttp.BasicAuth(credentials.client_id, credentials.client_secret)
    form = {"grant_type": "refresh_token", "refresh_token": token.refresh_token or ""}
    try:
        async with aiohttp.ClientSession(auth=auth) as session:
            async with session.post(token_url, data=form) as response:
                if response.status != 200:
                    body = await response.text()
                    raise TracklistUpstreamError(
                        f"Token refresh failed with HTTP {response.status}: {body[:200]}",
                        retryable=is_retryable_status(response.status),
                    )
                return await response.json()
    except aiohttp.ClientError as error:
        raise TracklistUpstreamError(f"Token refresh request failed: {error}") from error
    except asyncio.TimeoutError as error:
        raise TracklistUpstreamError("Token refresh request timed out.") from error
    except ValueError as error:
        raise TracklistUpstreamError(
            f"Token refresh response is not valid JSON: {error}"
        ) from error
