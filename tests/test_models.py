"""Unit tests for feedcatalog/models."""

import json
import sys
from pathlib import Path

import pytest

# Add parent dir to path so feedcatalog is importable as a package
sys.path.insert(0, str(Path(__file__).parent.parent))

from feedcatalog.exceptions import NoFeedUrlError
from feedcatalog.models import (
    Album,
    DirectoryFeed,
    MusicTrack,
    RemoteItemReference,
    ResolutionFailure,
    ResolutionMode,
    ResolvedRemoteItem,
    Track,
    TrackSource,
    ValueBlock,
    ValueRecipient,
)


def music_track(**overrides):
    fields = dict(
        id="abc",
        title="They Ride",
        artist="IROH",
        episode_id="ep-1",
        episode_title="Episode 1",
        source=TrackSource.CHAPTER,
        feed_url="https://feeds.test/show.xml",
    )
    fields.update(overrides)
    return MusicTrack(**fields)


class TestMusicTrack:
    """Tests for MusicTrack."""

    def test_end_before_start_rejected(self):
        with pytest.raises(ValueError):
            music_track(start_time=100, end_time=50)

    def test_untimed_allowed(self):
        track = music_track(source=TrackSource.DESCRIPTION)
        assert (track.start_time, track.end_time) == (0, 0)
        assert not track.is_high_confidence

    def test_to_dict_is_json(self):
        data = music_track(start_time=10, end_time=70, duration=60).to_dict()
        assert data["source"] == "chapter"
        assert data["high_confidence"] is True
        assert json.loads(json.dumps(data)) == data


class TestValueBlock:
    """Tests for ValueBlock."""

    def test_primary_recipient_skips_fees(self):
        block = ValueBlock(
            suggested=0.0001,
            recipients=[
                ValueRecipient(name="App", address="app", percentage=95, fee=True),
                ValueRecipient(name="Artist", address="artist", percentage=80),
                ValueRecipient(name="Producer", address="producer", percentage=20),
            ],
        )
        assert block.primary_recipient().name == "Artist"
        assert block.payment_info().suggested_amount == 0.0001

    def test_no_recipients(self):
        assert ValueBlock().payment_info() is None


class TestRemoteItems:
    """Tests for remote item models."""

    def test_key(self):
        assert RemoteItemReference(feed_guid="f", item_guid="i").key == "f:i"
        assert RemoteItemReference(feed_url="https://a.test/f.xml").key == "https://a.test/f.xml:feed"

    def test_failure_from_exception(self):
        ref = RemoteItemReference(feed_guid="f", item_guid="i", feed_url="https://a.test/f.xml")
        failure = ResolutionFailure.from_exception(ref, NoFeedUrlError("no url"))
        assert failure.to_dict() == {
            "feed_guid": "f",
            "item_guid": "i",
            "feed_url": "https://a.test/f.xml",
            "reason": "no_feed_url",
            "message": "no url",
        }

    def test_failure_from_unexpected_exception(self):
        failure = ResolutionFailure.from_exception(RemoteItemReference(feed_guid="f"), KeyError("x"))
        assert failure.reason == "unexpected"

    def test_resolved_feed_mode_to_dict(self):
        tracks = [Track(title="One", guid="1"), Track(title="Two", guid="2")]
        feed = Album(title="They Ride", artist="IROH", tracks=tracks, cover_art="https://a.test/art.jpg")
        resolved = ResolvedRemoteItem(
            reference=RemoteItemReference(feed_guid="f"),
            mode=ResolutionMode.FEED,
            feed=feed,
            items=list(tracks),
        )
        data = resolved.to_dict()
        assert data["mode"] == "feed"
        assert data["title"] == "They Ride"
        assert data["image"] == "https://a.test/art.jpg"
        assert data["item"] is None
        assert [item["title"] for item in data["items"]] == ["One", "Two"]
        assert "tracks" not in data["feed"]


class TestAlbum:
    """Tests for Album serialization."""

    def test_to_dict(self):
        album = Album(title="They Ride", artist="IROH", tracks=[Track(title="One")])
        assert album.to_dict()["tracks"][0]["title"] == "One"
        assert "tracks" not in album.to_dict(include_tracks=False)


class TestDirectoryFeed:
    """Tests for DirectoryFeed."""

    def test_from_api(self):
        feed = DirectoryFeed.from_api(
            {"id": 7, "podcastGuid": "g", "title": "T", "url": "", "originalUrl": "https://a.test/o.xml"}
        )
        assert feed.guid == "g"
        assert feed.feed_url == "https://a.test/o.xml"
