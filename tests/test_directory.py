"""Unit tests for feedcatalog/services/directory.py."""

import hashlib
import sys
from pathlib import Path

import pytest

# Add parent dir to path so feedcatalog is importable as a package
sys.path.insert(0, str(Path(__file__).parent.parent))

from feedcatalog.config import DirectoryConfig
from feedcatalog.exceptions import DirectoryApiError, NotFoundInDirectoryError, ServerError
from feedcatalog.services.directory import DirectoryClient

API = "https://api.example.test/api/1.0"
FEED_GUID = "917393e3-1b1e-5cef-ace4-edaa54e1f810"


@pytest.fixture
def client(directory_config, retry_policy, fake_session, fake_sleep):
    return DirectoryClient(
        directory_config,
        retry_policy,
        session=fake_session,
        clock=lambda: 1700000000.5,
        sleep=fake_sleep,
    )


class TestAuthHeaders:
    """Tests for request signing."""

    def test_header_triple(self, client):
        headers = client._auth_headers()
        expected = hashlib.sha1(b"KEYSECRET1700000000").hexdigest()
        assert headers["X-Auth-Date"] == "1700000000"
        assert headers["X-Auth-Key"] == "KEY"
        assert headers["Authorization"] == expected
        assert headers["User-Agent"] == "TestAgent/1.0"

    def test_headers_sent(self, client, fake_session):
        fake_session.add_json(f"{API}/podcasts/byguid", {"status": "true", "feed": {"url": "https://a.test/f.xml"}})
        client.lookup_feed_by_guid(FEED_GUID)
        call = fake_session.calls[0]
        assert call["params"] == {"guid": FEED_GUID}
        assert call["headers"]["X-Auth-Key"] == "KEY"
        assert call["timeout"] == 10.0


class TestLookupFeed:
    """Tests for DirectoryClient.lookup_feed_by_guid()."""

    def test_found(self, client, fake_session):
        fake_session.add_json(
            f"{API}/podcasts/byguid",
            {
                "status": "true",
                "feed": {
                    "id": 42,
                    "podcastGuid": FEED_GUID,
                    "title": "They Ride",
                    "url": "https://a.test/f.xml",
                    "originalUrl": "https://orig.test/f.xml",
                    "medium": "music",
                },
            },
        )
        feed = client.lookup_feed_by_guid(FEED_GUID)
        assert feed.id == 42
        assert feed.guid == FEED_GUID
        assert feed.feed_url == "https://a.test/f.xml"
        assert feed.medium == "music"

    def test_original_url_fallback(self, client, fake_session):
        fake_session.add_json(
            f"{API}/podcasts/byguid",
            {"status": "true", "feed": {"url": "", "originalUrl": "https://orig.test/f.xml"}},
        )
        assert client.lookup_feed_by_guid(FEED_GUID).feed_url == "https://orig.test/f.xml"

    def test_status_false(self, client, fake_session):
        """A status other than "true" is an API error."""
        fake_session.add_json(f"{API}/podcasts/byguid", {"status": "false", "description": "Bad auth"})
        with pytest.raises(DirectoryApiError, match="Bad auth"):
            client.lookup_feed_by_guid(FEED_GUID)

    @pytest.mark.parametrize("payload", [{"status": "true"}, {"status": "true", "feed": []}, {"status": "true", "feed": {}}])
    def test_missing_payload(self, client, fake_session, payload):
        """A success status with no feed object is not found."""
        fake_session.add_json(f"{API}/podcasts/byguid", payload)
        with pytest.raises(NotFoundInDirectoryError):
            client.lookup_feed_by_guid(FEED_GUID)

    def test_server_error_retried(self, client, fake_session, fake_response, sleeps):
        fake_session.add(f"{API}/podcasts/byguid", fake_response(502))
        with pytest.raises(ServerError):
            client.lookup_feed_by_guid(FEED_GUID)
        assert len(fake_session.calls) == 3
        assert sleeps == [1.0, 2.0]

    def test_not_configured(self, retry_policy, fake_session):
        """Without credentials no request is made."""
        client = DirectoryClient(DirectoryConfig(), retry_policy, session=fake_session)
        assert not client.enabled
        with pytest.raises(DirectoryApiError):
            client.lookup_feed_by_guid(FEED_GUID)
        assert fake_session.calls == []


class TestEpisodeAndSearch:
    """Tests for episode lookup and music search."""

    def test_episode(self, client, fake_session):
        fake_session.add_json(
            f"{API}/episodes/byguid",
            {
                "status": "true",
                "episode": {
                    "guid": "item-1",
                    "title": "Heaven Knows",
                    "enclosureUrl": "https://a.test/1.mp3",
                    "duration": 245,
                },
            },
        )
        episode = client.lookup_episode_by_guid(FEED_GUID, "item-1")
        assert episode.title == "Heaven Knows"
        assert episode.enclosure_url == "https://a.test/1.mp3"
        assert fake_session.calls[0]["params"] == {"podcastguid": FEED_GUID, "guid": "item-1"}

    def test_episode_missing(self, client, fake_session):
        fake_session.add_json(f"{API}/episodes/byguid", {"status": "true", "episode": None})
        with pytest.raises(NotFoundInDirectoryError):
            client.lookup_episode_by_guid(FEED_GUID, "item-1")

    def test_search(self, client, fake_session):
        fake_session.add_json(
            f"{API}/search/music/byterm",
            {"status": "true", "feeds": [{"title": "They Ride", "url": "https://a.test/f.xml"}]},
        )
        feeds = client.search_music("iroh", limit=5)
        assert [f.title for f in feeds] == ["They Ride"]
        assert fake_session.calls[0]["params"] == {"q": "iroh", "max": 5}

    def test_search_no_results(self, client, fake_session):
        fake_session.add_json(f"{API}/search/music/byterm", {"status": "true", "feeds": []})
        assert client.search_music("nothing") == []
