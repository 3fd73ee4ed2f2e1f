"""Unit tests for core config parsing."""

from __future__ import annotations

import os

import pytest

from core.config import TracklistConfig
from core.errors import TracklistConfigError


def test_from_env_reads_cache_path(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should resolve cache path from environment."""
    monkeypatch.setenv("TRACKLIST_CACHE_PATH", "./.tmp-cache")

    config = TracklistConfig.from_env()

    assert config.cache_path.name == ".tmp-cache"


def test_from_env_defaults_page_size(monkeypatch: pytest.MonkeyPatch) -> None:
    """Page size should default to twenty items."""
    monkeypatch.delenv("TRACKLIST_PAGE_SIZE", raising=False)

    config = TracklistConfig.from_env()

    assert config.page_size == 20


@pytest.mark.parametrize(
    ("variable", "value"),
    [
        ("TRACKLIST_PAGE_SIZE", "not-a-number"),
        ("TRACKLIST_PAGE_SIZE", "0"),
        ("TRACKLIST_PAGE_SIZE", "51"),
        ("TRACKLIST_RETRY_ATTEMPTS", "0"),
        ("TRACKLIST_RETRY_BASE_DELAY", "-1"),
        ("TRACKLIST_LOG_LEVEL", "LOUD"),
    ],
)
def test_from_env_raises_for_invalid_values(
    monkeypatch: pytest.MonkeyPatch, variable: str, value: str
) -> None:
    """Config should fail for out-of-range or malformed values."""
    monkeypatch.setenv(variable, value)

    with pytest.raises(TracklistConfigError):
        TracklistConfig.from_env()

    assert os.getenv(variable) == value
