"""Publisher feed aggregation into a flat, deduplicated discography."""

import logging

from ..models.album import Album
from ..models.remote import RemoteItemReference
from ..models.results import Err
from ..utils.identifiers import album_dedup_key
from .albums import AlbumLoader
from .batch import BatchResolutionOrchestrator
from .ordering import OrderingRegistry

logger = logging.getLogger(__name__)

MUSIC_MEDIUM = "music"


def music_references(publisher: Album) -> list[RemoteItemReference]:
    """Collect music remote items from channel and item level, first mention wins."""
    candidates = list(publisher.remote_items)
    for track in publisher.tracks:
        candidates.extend(track.remote_items)

    refs = []
    seen: set[tuple[str | None, str | None, str | None]] = set()
    for ref in candidates:
        if (ref.medium or "").lower() != MUSIC_MEDIUM:
            continue
        identity = (ref.feed_guid, ref.feed_url, ref.item_guid)
        if identity in seen:
            continue
        seen.add(identity)
        refs.append(ref)
    return refs


def dedupe_albums(albums: list[Album]) -> list[Album]:
    """Drop albums whose lower(title)|lower(artist) key was already seen."""
    unique = []
    seen: set[str] = set()
    for album in albums:
        key = album_dedup_key(album.title, album.artist)
        if key in seen:
            logger.debug(f"Dropping duplicate album '{album.title}' by {album.artist}")
            continue
        seen.add(key)
        unique.append(album)
    return unique


class PublisherAggregator:
    """Builds an artist discography from a publisher feed.

    References carrying a feedUrl are loaded as album feeds; bare
    references go through remote item resolution.
    """

    def __init__(
        self,
        loader: AlbumLoader,
        orchestrator: BatchResolutionOrchestrator,
        ordering: OrderingRegistry | None = None,
    ) -> None:
        self._loader = loader
        self._orchestrator = orchestrator
        self._ordering = ordering or OrderingRegistry()

    def aggregate(self, publisher_feed_url: str) -> list[Album]:
        """Aggregate every music album a publisher feed references.

        Returns:
            Albums in publisher order, deduplicated; empty when the
            publisher feed itself cannot be loaded
        """
        result = self._loader.load(publisher_feed_url)
        if not result.ok:
            logger.warning(f"Could not load publisher feed {publisher_feed_url}: {result.error}")
            return []

        publisher = result.value
        refs = music_references(publisher)
        logger.info(f"Publisher '{publisher.title}' references {len(refs)} music feeds")
        if not refs:
            return []

        slots: list[Album | None] = [None] * len(refs)

        with_url = [(index, ref) for index, ref in enumerate(refs) if ref.feed_url]
        bare = [(index, ref) for index, ref in enumerate(refs) if not ref.feed_url]

        if with_url:
            loaded = self._orchestrator.map_batched(
                [ref.feed_url for _, ref in with_url],
                self._loader.load,
                lambda url, e: Err(e),
                desc="Loading albums",
            )
            for (index, ref), outcome in zip(with_url, loaded):
                if outcome.ok:
                    slots[index] = outcome.value
                else:
                    logger.warning(f"Dropping album feed {ref.feed_url}: {outcome.error}")

        if bare:
            resolved = self._orchestrator.resolve_all([ref for _, ref in bare])
            for (index, ref), outcome in zip(bare, resolved):
                if outcome.ok:
                    slots[index] = self._ordering.apply(outcome.value.feed)
                else:
                    logger.warning(f"Dropping album {ref.key}: {outcome.error.reason} ({outcome.error.message})")

        albums = dedupe_albums([album for album in slots if album is not None])
        logger.info(f"Aggregated {len(albums)} albums for '{publisher.title}'")
        return albums
