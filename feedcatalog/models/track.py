"""Music track models extracted from episode content."""

from dataclasses import dataclass
from enum import Enum

from .remote import RemoteItemReference


class TrackSource(str, Enum):
    """Which extractor produced a music track."""

    CHAPTER = "chapter"
    VALUE_SPLIT = "value-split"
    DESCRIPTION = "description"
    EXTERNAL_FEED = "external-feed"


@dataclass(frozen=True)
class PaymentInfo:
    """Value-for-value routing for a single track."""

    lightning_address: str = ""
    suggested_amount: float = 0.0
    custom_key: str | None = None
    custom_value: str | None = None

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dictionary."""
        return {
            "lightning_address": self.lightning_address,
            "suggested_amount": self.suggested_amount,
            "custom_key": self.custom_key,
            "custom_value": self.custom_value,
        }


@dataclass(frozen=True)
class MusicTrack:
    """A track inferred from episode content rather than a native track list.

    ``start_time``/``end_time`` are seconds into the episode audio, both zero
    when the track is not time-bounded.
    """

    id: str
    title: str
    artist: str
    episode_id: str
    episode_title: str
    source: TrackSource
    feed_url: str
    episode_date: str | None = None
    start_time: float = 0.0
    end_time: float = 0.0
    duration: float = 0.0
    audio_url: str | None = None
    value_for_value: PaymentInfo | None = None
    description: str | None = None
    image: str | None = None
    remote_item: RemoteItemReference | None = None

    def __post_init__(self) -> None:
        if self.start_time and self.end_time and self.end_time < self.start_time:
            raise ValueError(
                f"end_time {self.end_time} precedes start_time {self.start_time} for '{self.title}'"
            )

    @property
    def is_high_confidence(self) -> bool:
        """Description-mined tracks are heuristic; every other source is trusted."""
        return self.source is not TrackSource.DESCRIPTION

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dictionary."""
        return {
            "id": self.id,
            "title": self.title,
            "artist": self.artist,
            "episode_id": self.episode_id,
            "episode_title": self.episode_title,
            "episode_date": self.episode_date,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "duration": self.duration,
            "audio_url": self.audio_url,
            "source": self.source.value,
            "feed_url": self.feed_url,
            "value_for_value": self.value_for_value.to_dict() if self.value_for_value else None,
            "description": self.description,
            "image": self.image,
            "remote_item": self.remote_item.to_dict() if self.remote_item else None,
            "high_confidence": self.is_high_confidence,
        }
