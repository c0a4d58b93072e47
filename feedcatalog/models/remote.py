"""Remote item references and their resolution results."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .album import Album, Track
    from .track import PaymentInfo


@dataclass(frozen=True)
class RemoteItemReference:
    """A pointer to content living in another feed.

    A reference with only ``feed_guid`` denotes the whole feed.
    """

    feed_guid: str | None = None
    item_guid: str | None = None
    feed_url: str | None = None
    medium: str | None = None
    title: str | None = None

    @property
    def key(self) -> str:
        """Stable identifier for logging and grouping."""
        feed = self.feed_guid or self.feed_url or "?"
        return f"{feed}:{self.item_guid or 'feed'}"

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dictionary."""
        return {
            "feed_guid": self.feed_guid,
            "item_guid": self.item_guid,
            "feed_url": self.feed_url,
            "medium": self.medium,
            "title": self.title,
        }


class ResolutionMode(str, Enum):
    """Whether a resolution produced one item or a whole feed."""

    ITEM = "item"
    FEED = "feed"


@dataclass
class ResolvedRemoteItem:
    """A remote reference turned into concrete feed data."""

    reference: RemoteItemReference
    mode: ResolutionMode
    feed: Album
    item: Track | None = None
    items: list[Track] = field(default_factory=list)

    @property
    def title(self) -> str:
        if self.item is not None:
            return self.item.title
        return self.feed.title

    @property
    def artist(self) -> str:
        return self.feed.artist

    @property
    def duration(self) -> str | None:
        return self.item.duration if self.item is not None else None

    @property
    def audio_url(self) -> str | None:
        return self.item.url if self.item is not None else None

    @property
    def image(self) -> str | None:
        if self.item is not None and self.item.image:
            return self.item.image
        return self.feed.cover_art

    @property
    def payment(self) -> PaymentInfo | None:
        """Payment info from the item's value block, else the feed's."""
        value = None
        if self.item is not None and self.item.value is not None:
            value = self.item.value
        elif self.feed.value is not None:
            value = self.feed.value
        return value.payment_info() if value is not None else None

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dictionary."""
        payment = self.payment
        return {
            "reference": self.reference.to_dict(),
            "mode": self.mode.value,
            "title": self.title,
            "artist": self.artist,
            "duration": self.duration,
            "audio_url": self.audio_url,
            "image": self.image,
            "payment": payment.to_dict() if payment else None,
            "feed": self.feed.to_dict(include_tracks=False),
            "item": self.item.to_dict() if self.item is not None else None,
            "items": [item.to_dict() for item in self.items],
        }


@dataclass(frozen=True)
class ResolutionFailure:
    """Explicit record of a reference that could not be resolved."""

    feed_guid: str | None
    item_guid: str | None
    reason: str
    message: str
    feed_url: str | None = None

    @classmethod
    def from_exception(cls, reference: RemoteItemReference, error: Exception) -> ResolutionFailure:
        """Build a failure record from the exception that ended resolution."""
        return cls(
            feed_guid=reference.feed_guid,
            item_guid=reference.item_guid,
            feed_url=reference.feed_url,
            reason=getattr(error, "reason", "unexpected"),
            message=str(error),
        )

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dictionary."""
        return {
            "feed_guid": self.feed_guid,
            "item_guid": self.item_guid,
            "feed_url": self.feed_url,
            "reason": self.reason,
            "message": self.message,
        }
