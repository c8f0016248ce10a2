"""HTTP client for downloading spreadsheet feeds."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Final

import httpx
from httpx_retries import Retry, RetryTransport

from schedsync import __version__
from schedsync.config.http_resilience import ResilienceConfig, RetryPolicy

from .reader import AtomEntryReader

log = getLogger(__name__)

USER_AGENT: Final[str] = f"schedsync/{__version__}"

if TYPE_CHECKING:
    from collections.abc import Mapping


class FeedFetchError(RuntimeError):
    """Raised when a feed document cannot be downloaded."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def build_retry(policy: RetryPolicy) -> Retry:
    return Retry(
        total=policy.total,
        backoff_factor=policy.backoff_factor,
        max_backoff_wait=policy.max_backoff_wait,
        respect_retry_after_header=policy.respect_retry_after_header,
        allowed_methods=tuple(policy.allowed_methods),
        status_forcelist=tuple(policy.status_forcelist),
        retry_on_exceptions=policy.retry_on_exceptions,
        backoff_jitter=policy.backoff_jitter,
    )


def _default_resilience() -> ResilienceConfig:
    return ResilienceConfig(name="spreadsheet-feed")


@dataclass(slots=True)
class SpreadsheetFeedClient:
    """Download feed bodies with retries; hand them to an ``AtomEntryReader``."""

    resilience: ResilienceConfig = field(default_factory=_default_resilience)
    transport: httpx.BaseTransport | None = None

    def fetch(self, url: str) -> bytes:
        log.info("Fetching feed %s", url)
        with self._build_client() as client:
            try:
                response = client.get(url, follow_redirects=True)
                response.raise_for_status()
            except httpx.HTTPStatusError as exc:
                status = exc.response.status_code
                log.error("Feed %s answered HTTP %s", url, status)
                raise FeedFetchError(
                    f"Failed to fetch feed {url}: HTTP {status}", status_code=status
                ) from exc
            except httpx.HTTPError as exc:
                log.error("Feed %s could not be fetched: %s", url, exc)
                raise FeedFetchError(f"Failed to fetch feed {url}: {exc}") from exc
        log.debug("Fetched %s bytes from %s", len(response.content), url)
        return response.content

    def open_reader(self, url: str) -> AtomEntryReader:
        return AtomEntryReader.from_bytes(self.fetch(url))

    def _build_client(self) -> httpx.Client:
        headers: Mapping[str, str] = {
            "User-Agent": USER_AGENT,
            **(self.resilience.default_headers or {}),
        }
        return httpx.Client(
            timeout=self.resilience.timeout_seconds,
            headers=dict(headers),
            transport=RetryTransport(
                transport=self.transport,
                retry=build_retry(self.resilience.retry),
            ),
        )
