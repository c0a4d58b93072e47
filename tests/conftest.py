"""Shared fixtures: a fake HTTP session and a feed document builder."""

import json
import sys
from pathlib import Path

import pytest

# Add parent dir to path so feedcatalog is importable as a package
sys.path.insert(0, str(Path(__file__).parent.parent))

from feedcatalog.config import BatchConfig, DirectoryConfig, FetchConfig, RetryPolicy

PODCAST_NS = "https://podcastindex.org/namespace/1.0"
ITUNES_NS = "http://www.itunes.com/dtds/podcast-1.0.dtd"


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, status_code: int = 200, content: bytes | str = b"", reason: str = "") -> None:
        self.status_code = status_code
        self.content = content.encode("utf-8") if isinstance(content, str) else content
        self.reason = reason

    def json(self):
        return json.loads(self.content)


class FakeSession:
    """Routes GET requests to canned responses by URL.

    A route holds a queue of responses or exceptions; the last entry
    repeats once the queue is exhausted.
    """

    def __init__(self) -> None:
        self.routes: dict[str, list] = {}
        self.calls: list[dict] = []

    def add(self, url: str, *outcomes) -> None:
        self.routes[url] = list(outcomes)

    def add_xml(self, url: str, body: str) -> None:
        self.add(url, FakeResponse(200, body))

    def add_json(self, url: str, data) -> None:
        self.add(url, FakeResponse(200, json.dumps(data)))

    def calls_to(self, url: str) -> list[dict]:
        return [call for call in self.calls if call["url"] == url]

    def get(self, url, params=None, headers=None, timeout=None):
        self.calls.append({"url": url, "params": params, "headers": headers, "timeout": timeout})
        if url not in self.routes:
            return FakeResponse(404, b"", "Not Found")
        queue = self.routes[url]
        outcome = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def build_feed(channel: str = "", items: list[str] | tuple[str, ...] = (), title: str | None = "Test Album") -> str:
    """Wrap channel and item XML into a namespaced RSS document."""
    title_xml = f"<title>{title}</title>" if title is not None else ""
    item_xml = "".join(f"<item>{item}</item>" for item in items)
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        f'<rss version="2.0" xmlns:itunes="{ITUNES_NS}" xmlns:podcast="{PODCAST_NS}">'
        f"<channel>{title_xml}{channel}{item_xml}</channel>"
        "</rss>"
    )


@pytest.fixture
def fake_session():
    """A FakeSession with no routes."""
    return FakeSession()


@pytest.fixture
def feed_xml():
    """The build_feed document builder."""
    return build_feed


@pytest.fixture
def sleeps():
    """Records requested sleep durations instead of sleeping."""
    return []


@pytest.fixture
def fake_sleep(sleeps):
    return sleeps.append


@pytest.fixture
def retry_policy():
    return RetryPolicy(max_attempts=3, base_delay=1.0, multiplier=2.0)


@pytest.fixture
def fetch_config():
    return FetchConfig(user_agent="TestAgent/1.0", timeout=30.0, large_feed_timeout=120.0)


@pytest.fixture
def directory_config():
    return DirectoryConfig(
        api_key="KEY",
        api_secret="SECRET",
        api_url="https://api.example.test/api/1.0",
        user_agent="TestAgent/1.0",
    )


@pytest.fixture
def batch_config():
    return BatchConfig(batch_size=2, inter_batch_delay=0.5)


@pytest.fixture
def fake_response():
    """The FakeResponse class, for routes with custom status codes."""
    return FakeResponse
