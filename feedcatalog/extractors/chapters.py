"""Music tracks from podcast:chapters JSON files."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..exceptions import FeedCatalogError
from ..models.track import MusicTrack, TrackSource
from ..utils.heuristics import is_music_chapter, split_artist_title
from .episode import EpisodeContext

if TYPE_CHECKING:
    from ..services.retriever import FeedRetriever

logger = logging.getLogger(__name__)

# Chapters without an end time are assumed to last five minutes
DEFAULT_CHAPTER_LENGTH = 300.0


class ChapterExtractor:
    """Finds songs among an episode's chapters.

    A chapter counts as music when its title contains a music keyword.
    """

    def __init__(self, retriever: FeedRetriever) -> None:
        self._retriever = retriever

    def extract(self, context: EpisodeContext, chapters_url: str | None) -> list[MusicTrack]:
        """Fetch the chapter file and convert music chapters to tracks.

        An unreachable or malformed chapter file yields no tracks.
        """
        if not chapters_url:
            return []

        try:
            data = self._retriever.fetch_json(chapters_url)
        except FeedCatalogError as e:
            logger.warning(f"Could not load chapters {chapters_url}: {e}")
            return []

        chapters = data.get("chapters") if isinstance(data, dict) else None
        if not isinstance(chapters, list):
            logger.warning(f"Chapters file {chapters_url} has no chapter list")
            return []

        return self.tracks_from_chapters(context, chapters)

    def tracks_from_chapters(self, context: EpisodeContext, chapters: list) -> list[MusicTrack]:
        tracks = []
        for position, chapter in enumerate(chapters):
            try:
                track = self._chapter_to_track(context, chapter)
            except (TypeError, ValueError, AttributeError) as e:
                logger.warning(f"Skipping malformed chapter {position} in '{context.episode_title}': {e}")
                continue
            if track is not None:
                tracks.append(track)
        return tracks

    def _chapter_to_track(self, context: EpisodeContext, chapter: dict) -> MusicTrack | None:
        title = chapter.get("title")
        if not isinstance(title, str) or not is_music_chapter(title):
            return None

        start = float(chapter.get("startTime") or 0)
        end_raw = chapter.get("endTime")
        end = float(end_raw) if end_raw is not None else start + DEFAULT_CHAPTER_LENGTH
        artist, song = split_artist_title(title)

        return MusicTrack(
            id=context.track_id(TrackSource.CHAPTER.value, start, title),
            title=song,
            artist=artist,
            episode_id=context.episode_id,
            episode_title=context.episode_title,
            episode_date=context.episode_date,
            start_time=start,
            end_time=end,
            duration=end - start,
            audio_url=context.audio_url,
            source=TrackSource.CHAPTER,
            feed_url=context.feed_url,
            image=chapter.get("img") or chapter.get("image") or context.image,
        )
