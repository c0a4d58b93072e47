"""Music track extraction across all strategies for one feed."""

from __future__ import annotations

import logging
import time
from collections import Counter
from dataclasses import replace
from typing import TYPE_CHECKING, Callable

from ..config import DescriptionConfig
from ..exceptions import FeedCatalogError
from ..extractors.chapters import ChapterExtractor
from ..extractors.description import DescriptionExtractor
from ..extractors.episode import EpisodeContext
from ..extractors.feed import FeedDocumentParser
from ..extractors.playlist import PlaylistExtractor, is_playlist_feed
from ..extractors.value_splits import extract_value_split_tracks
from ..models.album import Album, PodRollEntry, Track
from ..models.results import Err, ExtractionResult, Ok, Result
from ..models.track import MusicTrack, TrackSource
from ..services.retriever import FeedRetriever

if TYPE_CHECKING:
    from .batch import BatchResolutionOrchestrator

logger = logging.getLogger(__name__)


class TrackExtractionPipeline:
    """Runs the chapter, value-split and description extractors per episode.

    Playlist feeds (musicL medium or channel-level remote items) are handled
    as a whole by the playlist extractor instead.
    """

    def __init__(
        self,
        retriever: FeedRetriever,
        parser: FeedDocumentParser,
        orchestrator: BatchResolutionOrchestrator | None = None,
        description_config: DescriptionConfig | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._retriever = retriever
        self._parser = parser
        self._orchestrator = orchestrator
        self._chapters = ChapterExtractor(retriever)
        self._description = DescriptionExtractor(description_config)
        self._playlist = PlaylistExtractor(orchestrator)
        self._clock = clock

    def extract_from_url(self, url: str) -> ExtractionResult:
        """Fetch, parse and extract a feed.

        Raises:
            FetchError: The feed is unreachable
            ParseError: The feed is not a valid document
        """
        album = self._parser.parse(self._retriever.fetch(url), feed_url=url)
        return self.extract(album)

    def extract(self, album: Album) -> ExtractionResult:
        """Extract music tracks from an already parsed feed."""
        started = self._clock()

        if is_playlist_feed(album):
            logger.info(f"Extracting '{album.title}' as a playlist feed")
            tracks = self._playlist.extract(album)
        else:
            tracks = []
            for item in album.tracks:
                try:
                    tracks.extend(self.extract_episode(album, item))
                except (TypeError, ValueError) as e:
                    logger.warning(f"Skipping episode '{item.title}' in '{album.title}': {e}")

        related_feeds = self.enrich_related_feeds(album)
        stats = self._stats(tracks, related_feeds, self._clock() - started)
        logger.info(f"Extracted {len(tracks)} music tracks from '{album.title}': {stats}")
        return ExtractionResult(tracks=tracks, related_feeds=related_feeds, stats=stats)

    def enrich_related_feeds(self, album: Album) -> list[PodRollEntry]:
        """Fill in podroll titles and descriptions from the recommended feeds.

        Best effort: an entry whose feed cannot be loaded is kept as parsed.
        Entries without a feed URL are never fetched.
        """
        entries = [
            entry if entry.parent_feed_url else replace(entry, parent_feed_url=album.feed_url)
            for entry in album.podroll
        ]
        pending = [index for index, entry in enumerate(entries) if entry.url]
        if not pending:
            return entries

        logger.info(f"Loading {len(pending)} related feeds for '{album.title}'")
        items = [entries[index] for index in pending]
        if self._orchestrator is not None:
            results = self._orchestrator.map_batched(
                items,
                self._load_related_feed,
                lambda entry, e: Err(e),
                desc="Loading related feeds",
            )
        else:
            results = [self._load_related_feed(entry) for entry in items]

        for index, result in zip(pending, results):
            if result.ok:
                entries[index] = result.value
            else:
                logger.warning(f"Could not load related feed {entries[index].url}: {result.error}")
        return entries

    def _load_related_feed(self, entry: PodRollEntry) -> Result[PodRollEntry, Exception]:
        try:
            feed = self._parser.parse(self._retriever.fetch(entry.url), feed_url=entry.url)
        except FeedCatalogError as e:
            return Err(e)
        return Ok(
            replace(
                entry,
                title=entry.title or feed.title,
                description=entry.description or feed.description or None,
            )
        )

    def extract_episode(self, album: Album, item: Track) -> list[MusicTrack]:
        """Run every per-episode extractor; one may find what another misses."""
        context = EpisodeContext.from_track(album, item)
        tracks: list[MusicTrack] = []
        tracks.extend(self._chapters.extract(context, item.chapters_url))
        tracks.extend(extract_value_split_tracks(context, item.value_time_splits, item.value))
        tracks.extend(self._description.extract(context, item.description))
        return tracks

    def _stats(self, tracks: list[MusicTrack], related_feeds: list[PodRollEntry], elapsed: float) -> dict[str, float]:
        by_source = Counter(track.source for track in tracks)
        stats: dict[str, float] = {"total_tracks": len(tracks)}
        for source in TrackSource:
            stats[f"from_{source.value.replace('-', '_')}"] = by_source.get(source, 0)
        stats["related_feeds"] = len(related_feeds)
        stats["extraction_seconds"] = round(elapsed, 3)
        return stats
