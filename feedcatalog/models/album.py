"""Album and feed-native track models."""

from dataclasses import dataclass, field

from .remote import RemoteItemReference
from .value import ValueBlock, ValueTimeSplit


@dataclass(frozen=True)
class Funding:
    """A podcast:funding link."""

    url: str
    message: str | None = None

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dictionary."""
        return {"url": self.url, "message": self.message}


@dataclass(frozen=True)
class PodRollEntry:
    """A recommended related feed from podcast:podroll."""

    url: str | None = None
    feed_guid: str | None = None
    title: str | None = None
    description: str | None = None
    # Feed whose podroll recommended this one
    parent_feed_url: str | None = None

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dictionary."""
        return {
            "url": self.url,
            "feed_guid": self.feed_guid,
            "title": self.title,
            "description": self.description,
            "parent_feed_url": self.parent_feed_url,
        }


@dataclass(frozen=True)
class Owner:
    """Feed owner contact from itunes:owner."""

    name: str | None = None
    email: str | None = None

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dictionary."""
        return {"name": self.name, "email": self.email}


@dataclass(frozen=True)
class Track:
    """A track listed natively as an <item> in an album feed."""

    title: str
    duration: str = "0:00"
    url: str | None = None
    track_number: int | None = None
    subtitle: str | None = None
    summary: str | None = None
    image: str | None = None
    explicit: bool = False
    keywords: list[str] = field(default_factory=list)
    # Item-level podcasting 2.0 data
    guid: str | None = None
    pub_date: str | None = None
    description: str | None = None  # raw text, markup preserved
    media_type: str | None = None
    duration_seconds: int = 0
    chapters_url: str | None = None
    value: ValueBlock | None = None
    value_time_splits: list[ValueTimeSplit] = field(default_factory=list)
    remote_items: list[RemoteItemReference] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dictionary."""
        return {
            "title": self.title,
            "duration": self.duration,
            "url": self.url,
            "track_number": self.track_number,
            "subtitle": self.subtitle,
            "summary": self.summary,
            "image": self.image,
            "explicit": self.explicit,
            "keywords": list(self.keywords),
            "guid": self.guid,
            "pub_date": self.pub_date,
            "media_type": self.media_type,
            "chapters_url": self.chapters_url,
            "value": self.value.to_dict() if self.value else None,
            "value_time_splits": [s.to_dict() for s in self.value_time_splits],
            "remote_items": [r.to_dict() for r in self.remote_items],
        }


@dataclass(frozen=True)
class Album:
    """One syndication feed's worth of music."""

    title: str
    artist: str
    description: str = ""
    cover_art: str | None = None
    tracks: list[Track] = field(default_factory=list)
    release_date: str | None = None
    link: str = ""
    funding: list[Funding] = field(default_factory=list)
    podroll: list[PodRollEntry] = field(default_factory=list)
    publisher: RemoteItemReference | None = None
    explicit: bool = False
    language: str | None = None
    keywords: list[str] = field(default_factory=list)
    categories: list[str] = field(default_factory=list)
    owner: Owner | None = None
    subtitle: str | None = None
    summary: str | None = None
    copyright: str | None = None
    feed_url: str | None = None
    feed_guid: str | None = None
    medium: str | None = None
    value: ValueBlock | None = None
    remote_items: list[RemoteItemReference] = field(default_factory=list)

    def to_dict(self, include_tracks: bool = True) -> dict:
        """Convert to JSON-serializable dictionary."""
        data = {
            "title": self.title,
            "artist": self.artist,
            "description": self.description,
            "cover_art": self.cover_art,
            "release_date": self.release_date,
            "link": self.link,
            "funding": [f.to_dict() for f in self.funding],
            "podroll": [p.to_dict() for p in self.podroll],
            "publisher": self.publisher.to_dict() if self.publisher else None,
            "explicit": self.explicit,
            "language": self.language,
            "keywords": list(self.keywords),
            "categories": list(self.categories),
            "owner": self.owner.to_dict() if self.owner else None,
            "subtitle": self.subtitle,
            "summary": self.summary,
            "copyright": self.copyright,
            "feed_url": self.feed_url,
            "feed_guid": self.feed_guid,
            "medium": self.medium,
            "value": self.value.to_dict() if self.value else None,
            "remote_items": [r.to_dict() for r in self.remote_items],
        }
        if include_tracks:
            data["tracks"] = [t.to_dict() for t in self.tracks]
        return data
