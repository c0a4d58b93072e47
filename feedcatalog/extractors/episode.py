"""Per-episode context shared by the music track extractors."""

from dataclasses import dataclass

from ..models.album import Album, Track
from ..utils.identifiers import make_track_id


@dataclass(frozen=True)
class EpisodeContext:
    """Where an extracted track came from."""

    episode_id: str
    episode_title: str
    feed_url: str
    artist: str
    episode_date: str | None = None
    audio_url: str | None = None
    image: str | None = None

    @classmethod
    def from_track(cls, album: Album, track: Track) -> "EpisodeContext":
        """Build the context for one feed item.

        Items without a guid are identified by feed URL and position.
        """
        feed_url = album.feed_url or album.link or ""
        episode_id = track.guid or make_track_id(feed_url, track.track_number, track.title)
        return cls(
            episode_id=episode_id,
            episode_title=track.title,
            feed_url=feed_url,
            artist=album.artist,
            episode_date=track.pub_date,
            audio_url=track.url,
            image=track.image or album.cover_art,
        )

    def track_id(self, *parts: object) -> str:
        """Deterministic id for a track found in this episode."""
        return make_track_id(self.feed_url, self.episode_id, *parts)
