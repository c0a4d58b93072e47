"""Resolution of podcast:remoteItem references into concrete feed data."""

import logging

from ..exceptions import (
    DirectoryApiError,
    FeedCatalogError,
    ItemNotFoundError,
    NoFeedUrlError,
    NotFoundInDirectoryError,
    ResolutionError,
)
from ..extractors.feed import FeedDocumentParser
from ..models.album import Album
from ..models.remote import (
    RemoteItemReference,
    ResolutionFailure,
    ResolutionMode,
    ResolvedRemoteItem,
)
from ..models.results import Err, Ok, Result
from ..utils.cache import ThreadSafeCache
from .directory import DirectoryClient
from .retriever import FeedRetriever

logger = logging.getLogger(__name__)

# Parsed feeds stay fresh for an hour
FEED_CACHE_TTL = 3600.0


class RemoteItemResolver:
    """Turns a (feedGuid, itemGuid) reference into a resolved feed or item.

    Parsed feeds are cached per URL, so resolving many items of one feed
    costs a single fetch.
    """

    def __init__(
        self,
        directory: DirectoryClient,
        retriever: FeedRetriever,
        parser: FeedDocumentParser,
        cache: ThreadSafeCache[str, Album] | None = None,
    ) -> None:
        self._directory = directory
        self._retriever = retriever
        self._parser = parser
        self._feed_cache: ThreadSafeCache[str, Album] = (
            cache if cache is not None else ThreadSafeCache(ttl=FEED_CACHE_TTL)
        )

    def _feed_url_for(self, ref: RemoteItemReference) -> str:
        """Find the URL of the feed a reference points at.

        A feedGuid goes through the directory first. A carried feedUrl is
        used directly when there is no guid, when the directory is not
        configured, or when the directory has never heard of the guid.
        """
        if ref.feed_guid and self._directory.enabled:
            try:
                feed = self._directory.lookup_feed_by_guid(ref.feed_guid)
            except NotFoundInDirectoryError:
                if not ref.feed_url:
                    raise
                logger.debug(f"Feed {ref.feed_guid} not in directory, using carried URL {ref.feed_url}")
                return ref.feed_url
            if not feed.feed_url:
                raise NoFeedUrlError(f"Directory found feed {ref.feed_guid} but it has no URL")
            return feed.feed_url

        if ref.feed_url:
            return ref.feed_url

        if ref.feed_guid:
            raise DirectoryApiError(
                f"Cannot look up feed {ref.feed_guid}: Podcast Index credentials are not configured"
            )
        raise ResolutionError("Remote item has neither feedGuid nor feedUrl")

    def load_feed(self, url: str) -> Album:
        """Fetch and parse a feed, served from cache when fresh."""
        return self._feed_cache.get_or_compute(
            url,
            lambda: self._parser.parse(self._retriever.fetch(url), feed_url=url),
        )

    def resolve(self, ref: RemoteItemReference) -> ResolvedRemoteItem:
        """Resolve a reference.

        Returns:
            A feed-mode result when the reference has no itemGuid, otherwise
            an item-mode result for the item whose guid matches exactly.

        Raises:
            FeedCatalogError: Any fetch, parse or resolution failure
        """
        feed_url = self._feed_url_for(ref)
        album = self.load_feed(feed_url)

        if not ref.item_guid:
            logger.debug(f"Resolved feed {ref.key} with {len(album.tracks)} items")
            return ResolvedRemoteItem(
                reference=ref,
                mode=ResolutionMode.FEED,
                feed=album,
                items=list(album.tracks),
            )

        for track in album.tracks:
            if track.guid == ref.item_guid:
                logger.debug(f"Resolved item {ref.key} to '{track.title}'")
                return ResolvedRemoteItem(
                    reference=ref,
                    mode=ResolutionMode.ITEM,
                    feed=album,
                    item=track,
                )

        raise ItemNotFoundError(f"No item with guid {ref.item_guid} in feed {feed_url}")

    def resolve_safe(self, ref: RemoteItemReference) -> Result[ResolvedRemoteItem, ResolutionFailure]:
        """Resolve a reference, returning the failure as a value instead of raising."""
        try:
            return Ok(self.resolve(ref))
        except FeedCatalogError as e:
            logger.debug(f"Could not resolve {ref.key}: {e}")
            return Err(ResolutionFailure.from_exception(ref, e))

    def clear_cache(self) -> None:
        self._feed_cache.clear()
