"""Music tracks from podcast:valueTimeSplit payment segments."""

import logging

from ..models.track import MusicTrack, TrackSource
from ..models.value import ValueBlock, ValueTimeSplit
from ..utils.text import format_time
from .episode import EpisodeContext

logger = logging.getLogger(__name__)


def extract_value_split_tracks(
    context: EpisodeContext,
    splits: list[ValueTimeSplit],
    value: ValueBlock | None = None,
) -> list[MusicTrack]:
    """Turn each music-candidate split into a time-bounded track.

    Splits that only pay local recipients are ignored. The first remote
    recipient names the track and receives the payment.
    """
    suggested = value.suggested if value is not None else None
    tracks = []
    for split in splits:
        if not split.is_music_candidate:
            continue

        recipient = split.remote_recipients[0]
        title = recipient.name or f"Music Track at {format_time(split.start_time)}"
        try:
            tracks.append(
                MusicTrack(
                    id=context.track_id(TrackSource.VALUE_SPLIT.value, split.start_time, title),
                    title=title,
                    artist=context.artist,
                    episode_id=context.episode_id,
                    episode_title=context.episode_title,
                    episode_date=context.episode_date,
                    start_time=split.start_time,
                    end_time=split.end_time,
                    duration=split.duration,
                    audio_url=context.audio_url,
                    source=TrackSource.VALUE_SPLIT,
                    feed_url=context.feed_url,
                    value_for_value=recipient.to_payment_info(suggested),
                    image=context.image,
                    remote_item=split.remote_item,
                )
            )
        except ValueError as e:
            logger.warning(f"Skipping value split at {split.start_time}s in '{context.episode_title}': {e}")
    return tracks
