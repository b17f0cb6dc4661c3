# OCSYNC Content Sources
# Fetch item content from HTTP or a local directory with bounded retries

import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol
from urllib.parse import urljoin

import requests

from ocsync import __version__
from ocsync.exceptions import (
    ClientError,
    FetchError,
    FetchTimeoutError,
    NetworkError,
    NotFoundError,
    RetryExhaustedError,
    ServerError,
)

DEFAULT_TIMEOUT = 10.0


class ContentSource(Protocol):
    """Anything that can return the bytes stored at a source location."""

    def fetch(self, location: str) -> bytes:
        """Fetch content, raising a FetchError subclass on failure."""
        ...


class HttpContentSource:
    """
    Content source backed by HTTP GET.

    Each call is a single attempt with its own timeout; retries are applied
    by ``fetch_with_retry``.
    """

    USER_AGENT = f"ocsync/{__version__}"

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.base_url = base_url
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": self.USER_AGENT})
        self.timeout = timeout

    def url_for(self, location: str) -> str:
        """Make a location absolute against the base URL."""
        if "://" in location or not self.base_url:
            return location
        base = self.base_url if self.base_url.endswith("/") else self.base_url + "/"
        return urljoin(base, location.lstrip("/"))

    def fetch(self, location: str) -> bytes:
        url = self.url_for(location)
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.Timeout as e:
            raise FetchTimeoutError(url, f"Timed out fetching {url} after {self.timeout}s") from e
        except requests.RequestException as e:
            raise NetworkError(url, f"Request failed for {url}: {e}") from e

        status = response.status_code
        if status == 404:
            raise NotFoundError(url, f"Not found: {url}", status=status)
        if 400 <= status < 500:
            raise ClientError(url, f"Failed to fetch {url}: {status} {response.reason}", status=status)
        if status >= 500:
            raise ServerError(url, f"Server error fetching {url}: {status} {response.reason}", status=status)

        return response.content


class LocalContentSource:
    """Content source reading files below a root directory."""

    def __init__(self, root: Path):
        self.root = root

    def path_for(self, location: str) -> Path:
        """Resolve a location against the root."""
        path = Path(location)
        return path if path.is_absolute() else self.root / location

    def fetch(self, location: str) -> bytes:
        path = self.path_for(location)
        if not path.exists():
            raise NotFoundError(str(path), f"Not found: {path}")
        if path.is_dir():
            raise ClientError(str(path), f"Expected a file, found a directory: {path}")
        try:
            return path.read_bytes()
        except OSError as e:
            raise FetchError(str(path), f"Cannot read {path}: {e}") from e


def open_content_source(base: str, *, timeout: float = DEFAULT_TIMEOUT) -> ContentSource:
    """Pick a content source for a base URL or directory."""
    if base.startswith(("http://", "https://")):
        return HttpContentSource(base, timeout=timeout)
    return LocalContentSource(Path(base).expanduser())


@dataclass(frozen=True)
class RetryPolicy:
    """Retry bound for transient fetch failures."""

    max_retries: int = 2
    backoff: float = 0.5

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1


def fetch_with_retry(
    source: ContentSource,
    location: str,
    policy: RetryPolicy = RetryPolicy(),
    *,
    sleep: Callable[[float], None] = time.sleep,
) -> bytes:
    """
    Fetch with retries on server errors and timeouts.

    Non-retryable errors (not found, other client errors, network) are raised
    on the first attempt.

    Raises:
        RetryExhaustedError: If every attempt failed with a retryable error.
        FetchError: On the first non-retryable error.
    """
    attempt = 1
    while True:
        try:
            return source.fetch(location)
        except FetchError as e:
            if not e.retryable:
                raise
            if attempt >= policy.max_attempts:
                raise RetryExhaustedError(location, attempt, e) from e
            if policy.backoff > 0:
                sleep(policy.backoff * attempt)
        attempt += 1
