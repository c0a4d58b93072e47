"""Feed retrieval over HTTP with timeouts, retries and format checks."""

import json
import logging
import re
import time
from typing import Callable

import requests

from ..config import FetchConfig, RetryPolicy
from ..exceptions import InvalidFormatError
from ..utils.retry import with_retry
from . import http

logger = logging.getLogger(__name__)

# Anything that looks like an opening tag
_MARKUP_RE = re.compile(rb"<[^>]+>")


class FeedRetriever:
    """Fetches raw feed bytes and chapter JSON.

    Retryable failures (timeouts, 429, 5xx, connection errors) are retried
    with the configured backoff. Client errors and malformed bodies are not.
    """

    def __init__(
        self,
        config: FetchConfig,
        retry: RetryPolicy,
        session: requests.Session | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._config = config
        # Registrations stay local to this retriever, the config is shared
        self._large_feed_urls = set(config.large_feed_urls)
        self._retry = retry
        self._session = session or http.create_session(config.user_agent)
        self._sleep = sleep

    def register_large_feed(self, url: str) -> None:
        """Give a feed the long timeout budget for subsequent fetches."""
        self._large_feed_urls.add(url)

    def timeout_for(self, url: str) -> float:
        """Timeout budget for a URL, longer for feeds known to be large."""
        if url in self._large_feed_urls:
            return self._config.large_feed_timeout
        return self._config.timeout

    def _get(self, url: str, timeout: float | None) -> requests.Response:
        budget = timeout if timeout is not None else self.timeout_for(url)
        return with_retry(
            lambda: http.get(self._session, url, timeout=budget),
            self._retry,
            sleep=self._sleep,
            description=f"Fetch {url}",
        )

    def fetch(self, url: str, timeout: float | None = None) -> bytes:
        """Fetch a feed document.

        Args:
            url: Feed URL
            timeout: Override for the per-request timeout in seconds

        Returns:
            The raw response body

        Raises:
            FetchError: Network or HTTP failure after retries
            InvalidFormatError: Empty body or nothing resembling XML
        """
        logger.debug(f"Fetching feed {url}")
        body = self._get(url, timeout).content or b""

        if not body.strip():
            raise InvalidFormatError(f"Empty response body from {url}", url=url)
        if not _MARKUP_RE.search(body):
            raise InvalidFormatError(f"Response from {url} does not look like XML", url=url)

        logger.debug(f"Fetched {len(body)} bytes from {url}")
        return body

    def fetch_json(self, url: str, timeout: float | None = None) -> dict | list:
        """Fetch and decode a JSON document such as a chapters file."""
        logger.debug(f"Fetching JSON {url}")
        body = self._get(url, timeout).content or b""
        if not body.strip():
            raise InvalidFormatError(f"Empty response body from {url}", url=url)
        try:
            return json.loads(body)
        except ValueError as e:
            raise InvalidFormatError(f"Invalid JSON from {url}: {e}", url=url) from e
