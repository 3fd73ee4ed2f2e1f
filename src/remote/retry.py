"""Bounded retry for remote page fetches."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
import time

from core.constants import (
    DEFAULT_RETRY_ATTEMPTS,
    DEFAULT_RETRY_BASE_DELAY,
    DEFAULT_RETRY_EXPONENTIAL_BASE,
    DEFAULT_RETRY_MAX_DELAY,
)
from core.errors import TracklistUpstreamError
from core.logging_config import get_logger
from core.types import Page
from remote.page_source import PageSource

_LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class RetryPolicy:
    """Exponential backoff settings.

    Attributes:
        max_attempts: Total attempts including the first one.
        base_delay: Delay in seconds before the second attempt.
        max_delay: Upper bound for any single delay.
        exponential_base: Growth factor between consecutive delays.
    """

    max_attempts: int = DEFAULT_RETRY_ATTEMPTS
    base_delay: float = DEFAULT_RETRY_BASE_DELAY
    max_delay: float = DEFAULT_RETRY_MAX_DELAY
    exponential_base: float = DEFAULT_RETRY_EXPONENTIAL_BASE

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.base_delay < 0 or self.max_delay < 0:
            raise ValueError("retry delays cannot be negative")

    def delay_for(self, attempt: int) -> float:
        """Return the delay after failed attempt number ``attempt`` (zero-based)."""
        return min(self.base_delay * (self.exponential_base**attempt), self.max_delay)


class RetryingPageSource:
    """Page source wrapper that retries upstream failures."""

    def __init__(
        self,
        source: PageSource,
        policy: RetryPolicy,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._source = source
        self._policy = policy
        self._sleep = sleep

    def fetch_page(self, collection_id: str, limit: int, offset: int) -> Page:
        """Fetch a page, retrying transient upstream errors with backoff.

        Errors flagged as not retryable propagate on the first attempt.

        Raises:
            TracklistUpstreamError: The last failure once attempts run out.
        """
        attempt = 0
        while True:
            try:
                return self._source.fetch_page(collection_id, limit, offset)
            except TracklistUpstreamError as error:
                attempt += 1
                if not error.retryable:
                    _LOGGER.error(
                        "upstream_failure_not_retryable",
                        collection_id=collection_id,
                        offset=offset,
                        attempts=attempt,
                        error=str(error),
                    )
                    raise
                if attempt >= self._policy.max_attempts:
                    _LOGGER.error(
                        "upstream_retries_exhausted",
                        collection_id=collection_id,
                        offset=offset,
                        attempts=attempt,
                        error=str(error),
                    )
                    raise
                delay = self._policy.delay_for(attempt - 1)
                _LOGGER.warning(
                    "upstream_retry_scheduled",
                    collection_id=collection_id,
                    offset=offset,
                    attempt=attempt,
                    delay_seconds=delay,
                    error=str(error),
                )
            self._sleep(delay)
