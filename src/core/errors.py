"""Tracklist exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each subsystem raises a specific error type for debuggability.
"""

from __future__ import annotations


class TracklistError(Exception):
    """Base exception for all Tracklist failures."""


class TracklistIOError(TracklistError):
    """Raised for local filesystem failures."""


class TracklistConfigError(TracklistError):
    """Raised for invalid runtime configuration or credential files."""


class TracklistStoreError(TracklistError):
    """Raised for embedded cache store failures."""


class TracklistCodecError(TracklistError):
    """Raised when a cached item payload cannot be encoded or decoded."""


class TracklistUpstreamError(TracklistError):
    """Raised when the remote page source fails.

    Attributes:
        retryable: Whether repeating the same request may succeed.
    """

    def __init__(self, message: str, retryable: bool = True) -> None:
        super().__init__(message)
        self.retryable = retryable
