"""Unit tests for feedcatalog/services/retriever.py."""

import sys
from pathlib import Path

import pytest
import requests

# Add parent dir to path so feedcatalog is importable as a package
sys.path.insert(0, str(Path(__file__).parent.parent))

from feedcatalog.config import FetchConfig
from feedcatalog.exceptions import (
    ClientError,
    FetchTimeoutError,
    InvalidFormatError,
    NetworkError,
    RateLimitedError,
    ServerError,
)
from feedcatalog.services.retriever import FeedRetriever

FEED_URL = "https://feeds.example.test/album.xml"
VALID_XML = "<rss><channel><title>x</title></channel></rss>"


@pytest.fixture
def retriever(fetch_config, retry_policy, fake_session, fake_sleep):
    return FeedRetriever(fetch_config, retry_policy, session=fake_session, sleep=fake_sleep)


class TestFetch:
    """Tests for FeedRetriever.fetch() success paths."""

    def test_returns_body(self, retriever, fake_session):
        fake_session.add_xml(FEED_URL, VALID_XML)
        assert retriever.fetch(FEED_URL) == VALID_XML.encode()

    def test_default_timeout(self, retriever, fake_session):
        fake_session.add_xml(FEED_URL, VALID_XML)
        retriever.fetch(FEED_URL)
        assert fake_session.calls[0]["timeout"] == 30.0

    def test_large_feed_timeout(self, retriever, fake_session):
        """Feeds registered as large get the long budget."""
        fake_session.add_xml(FEED_URL, VALID_XML)
        retriever.register_large_feed(FEED_URL)
        retriever.fetch(FEED_URL)
        assert fake_session.calls[0]["timeout"] == 120.0

    def test_registration_does_not_touch_config(self, fetch_config, retry_policy, fake_session, fake_sleep):
        """Registering a large feed on one retriever leaves others on the default budget."""
        first = FeedRetriever(fetch_config, retry_policy, session=fake_session, sleep=fake_sleep)
        second = FeedRetriever(fetch_config, retry_policy, session=fake_session, sleep=fake_sleep)

        first.register_large_feed(FEED_URL)

        assert fetch_config.large_feed_urls == set()
        assert first.timeout_for(FEED_URL) == 120.0
        assert second.timeout_for(FEED_URL) == 30.0

    def test_configured_large_feeds(self, retry_policy, fake_session, fake_sleep):
        config = FetchConfig(timeout=30.0, large_feed_timeout=120.0, large_feed_urls={FEED_URL})
        retriever = FeedRetriever(config, retry_policy, session=fake_session, sleep=fake_sleep)
        assert retriever.timeout_for(FEED_URL) == 120.0

    def test_explicit_timeout(self, retriever, fake_session):
        fake_session.add_xml(FEED_URL, VALID_XML)
        retriever.fetch(FEED_URL, timeout=5)
        assert fake_session.calls[0]["timeout"] == 5


class TestFetchErrors:
    """Tests for error classification and retry behaviour."""

    def test_client_error_not_retried(self, retriever, fake_session, fake_response, sleeps):
        fake_session.add(FEED_URL, fake_response(404, b"", "Not Found"))
        with pytest.raises(ClientError) as exc_info:
            retriever.fetch(FEED_URL)
        assert exc_info.value.status_code == 404
        assert exc_info.value.url == FEED_URL
        assert len(fake_session.calls) == 1
        assert sleeps == []

    def test_rate_limited_retried_with_backoff(self, retriever, fake_session, fake_response, sleeps):
        """429 is retried; delays follow 1s, 2s."""
        fake_session.add(FEED_URL, fake_response(429))
        with pytest.raises(RateLimitedError) as exc_info:
            retriever.fetch(FEED_URL)
        assert exc_info.value.status_code == 429
        assert len(fake_session.calls) == 3
        assert sleeps == [1.0, 2.0]

    def test_server_error_then_success(self, retriever, fake_session, fake_response, sleeps):
        fake_session.add(FEED_URL, fake_response(503), fake_response(200, VALID_XML))
        assert retriever.fetch(FEED_URL) == VALID_XML.encode()
        assert len(fake_session.calls) == 2
        assert sleeps == [1.0]

    def test_server_error_exhausts(self, retriever, fake_session, fake_response):
        fake_session.add(FEED_URL, fake_response(500))
        with pytest.raises(ServerError):
            retriever.fetch(FEED_URL)

    def test_timeout_is_retryable(self, retriever, fake_session):
        fake_session.add(FEED_URL, requests.Timeout("slow"))
        with pytest.raises(FetchTimeoutError) as exc_info:
            retriever.fetch(FEED_URL)
        assert exc_info.value.retryable
        assert len(fake_session.calls) == 3

    def test_connection_error(self, retriever, fake_session):
        fake_session.add(FEED_URL, requests.ConnectionError("refused"), requests.ConnectionError("refused"))
        with pytest.raises(NetworkError):
            retriever.fetch(FEED_URL)

    @pytest.mark.parametrize("body", ["", "   \n", "just some text", '{"json": true}'])
    def test_invalid_format_not_retried(self, retriever, fake_session, fake_response, sleeps, body):
        """Empty and non-XML bodies fail once, without retries."""
        fake_session.add(FEED_URL, fake_response(200, body))
        with pytest.raises(InvalidFormatError):
            retriever.fetch(FEED_URL)
        assert len(fake_session.calls) == 1
        assert sleeps == []


class TestFetchJson:
    """Tests for FeedRetriever.fetch_json()."""

    def test_decodes(self, retriever, fake_session):
        fake_session.add_json("https://x.test/chapters.json", {"version": "1.2", "chapters": []})
        assert retriever.fetch_json("https://x.test/chapters.json") == {"version": "1.2", "chapters": []}

    def test_invalid_json(self, retriever, fake_session, fake_response):
        fake_session.add("https://x.test/chapters.json", fake_response(200, "{not json"))
        with pytest.raises(InvalidFormatError):
            retriever.fetch_json("https://x.test/chapters.json")
