"""Podcast Index directory API client."""

import hashlib
import logging
import time
from typing import Callable

import requests

from ..config import DirectoryConfig, RetryPolicy
from ..exceptions import DirectoryApiError, InvalidFormatError, NotFoundInDirectoryError
from ..models.directory import DirectoryEpisode, DirectoryFeed
from ..utils.retry import with_retry
from . import http

logger = logging.getLogger(__name__)


class DirectoryClient:
    """Signed requests against the Podcast Index API.

    Every request carries X-Auth-Date, X-Auth-Key and an Authorization hash
    of key + secret + date.
    """

    def __init__(
        self,
        config: DirectoryConfig,
        retry: RetryPolicy,
        session: requests.Session | None = None,
        clock: Callable[[], float] = time.time,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._config = config
        self._retry = retry
        self._session = session or http.create_session(config.user_agent)
        self._clock = clock
        self._sleep = sleep

    @property
    def enabled(self) -> bool:
        """Check if directory lookups are enabled (credentials are set)."""
        return self._config.is_configured

    def _auth_headers(self) -> dict[str, str]:
        """Build the signed header triple for one request."""
        auth_date = str(int(self._clock()))
        digest = hashlib.sha1(
            (self._config.api_key + self._config.api_secret + auth_date).encode("utf-8")
        ).hexdigest()
        return {
            "User-Agent": self._config.user_agent,
            "X-Auth-Date": auth_date,
            "X-Auth-Key": self._config.api_key,
            "Authorization": digest,
        }

    def _make_request(self, endpoint: str, params: dict) -> dict:
        """Make a signed API request with retry logic.

        Args:
            endpoint: API path relative to the base URL (e.g., "podcasts/byguid")
            params: Query parameters

        Returns:
            Decoded JSON body whose status flag is "true"
        """
        if not self.enabled:
            raise DirectoryApiError("Podcast Index credentials are not configured")

        url = f"{self._config.api_url.rstrip('/')}/{endpoint}"

        def attempt() -> dict:
            # Headers are re-signed per attempt so the timestamp stays fresh
            response = http.get(
                self._session,
                url,
                timeout=self._config.timeout,
                params=params,
                headers=self._auth_headers(),
            )
            try:
                return response.json()
            except ValueError as e:
                raise InvalidFormatError(f"Invalid JSON from {url}: {e}", url=url) from e

        data = with_retry(attempt, self._retry, sleep=self._sleep, description=f"Podcast Index {endpoint}")

        status = data.get("status") if isinstance(data, dict) else None
        if str(status).lower() != "true":
            description = data.get("description", "no description") if isinstance(data, dict) else "malformed"
            raise DirectoryApiError(f"Podcast Index {endpoint} returned status {status!r}: {description}")
        return data

    def lookup_feed_by_guid(self, guid: str) -> DirectoryFeed:
        """Look up a feed by its podcast:guid.

        Raises:
            NotFoundInDirectoryError: The directory has no feed for this guid
            DirectoryApiError: The API reported failure
        """
        data = self._make_request("podcasts/byguid", {"guid": guid})
        feed = data.get("feed")
        if not feed or not isinstance(feed, dict):
            raise NotFoundInDirectoryError(f"Feed {guid} not found in Podcast Index")
        result = DirectoryFeed.from_api(feed)
        logger.debug(f"Directory resolved feed {guid} to {result.feed_url}")
        return result

    def lookup_episode_by_guid(self, feed_guid: str, item_guid: str) -> DirectoryEpisode:
        """Look up one episode by feed guid and item guid."""
        data = self._make_request(
            "episodes/byguid",
            {"podcastguid": feed_guid, "guid": item_guid},
        )
        episode = data.get("episode")
        if not episode or not isinstance(episode, dict):
            raise NotFoundInDirectoryError(
                f"Episode {item_guid} of feed {feed_guid} not found in Podcast Index"
            )
        return DirectoryEpisode.from_api(episode)

    def search_music(self, query: str, limit: int = 20) -> list[DirectoryFeed]:
        """Search music feeds by term.

        Returns:
            Matching feeds, possibly empty
        """
        data = self._make_request("search/music/byterm", {"q": query, "max": limit})
        feeds = data.get("feeds")
        if feeds is None:
            raise NotFoundInDirectoryError(f"Podcast Index search for '{query}' returned no feeds field")
        return [DirectoryFeed.from_api(feed) for feed in feeds if isinstance(feed, dict)]
