"""Records returned by the Podcast Index directory API."""

from dataclasses import dataclass


@dataclass(frozen=True)
class DirectoryFeed:
    """Feed record from podcasts/byguid or search results."""

    id: int | None = None
    guid: str | None = None
    title: str | None = None
    url: str | None = None
    original_url: str | None = None
    author: str | None = None
    artwork: str | None = None
    medium: str | None = None
    language: str | None = None
    explicit: bool = False
    episode_count: int | None = None

    @property
    def feed_url(self) -> str | None:
        """Canonical feed URL, falling back to the originally submitted one."""
        return self.url or self.original_url or None

    @classmethod
    def from_api(cls, data: dict) -> "DirectoryFeed":
        """Build from a raw API feed object."""
        return cls(
            id=data.get("id"),
            guid=data.get("podcastGuid") or data.get("guid"),
            title=data.get("title"),
            url=data.get("url") or None,
            original_url=data.get("originalUrl") or None,
            author=data.get("author") or data.get("ownerName"),
            artwork=data.get("artwork") or data.get("image") or None,
            medium=data.get("medium"),
            language=data.get("language"),
            explicit=bool(data.get("explicit")),
            episode_count=data.get("episodeCount"),
        )

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dictionary."""
        return {
            "id": self.id,
            "guid": self.guid,
            "title": self.title,
            "url": self.url,
            "original_url": self.original_url,
            "author": self.author,
            "artwork": self.artwork,
            "medium": self.medium,
            "language": self.language,
            "explicit": self.explicit,
            "episode_count": self.episode_count,
        }


@dataclass(frozen=True)
class DirectoryEpisode:
    """Episode record from episodes/byguid."""

    id: int | None = None
    guid: str | None = None
    title: str | None = None
    feed_id: int | None = None
    feed_title: str | None = None
    enclosure_url: str | None = None
    duration: int | None = None
    image: str | None = None
    chapters_url: str | None = None
    date_published: int | None = None

    @classmethod
    def from_api(cls, data: dict) -> "DirectoryEpisode":
        """Build from a raw API episode object."""
        return cls(
            id=data.get("id"),
            guid=data.get("guid"),
            title=data.get("title"),
            feed_id=data.get("feedId"),
            feed_title=data.get("feedTitle"),
            enclosure_url=data.get("enclosureUrl") or None,
            duration=data.get("duration"),
            image=data.get("image") or data.get("feedImage") or None,
            chapters_url=data.get("chaptersUrl") or None,
            date_published=data.get("datePublished"),
        )

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dictionary."""
        return {
            "id": self.id,
            "guid": self.guid,
            "title": self.title,
            "feed_id": self.feed_id,
            "feed_title": self.feed_title,
            "enclosure_url": self.enclosure_url,
            "duration": self.duration,
            "image": self.image,
            "chapters_url": self.chapters_url,
            "date_published": self.date_published,
        }
