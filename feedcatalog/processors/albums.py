"""Loading album feeds into tagged results."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Sequence

from ..exceptions import FeedCatalogError
from ..extractors.feed import FeedDocumentParser
from ..models.album import Album
from ..models.results import Err, Ok, Result
from ..services.retriever import FeedRetriever
from .ordering import OrderingRegistry

if TYPE_CHECKING:
    from .batch import BatchResolutionOrchestrator

logger = logging.getLogger(__name__)


class AlbumLoader:
    """Fetches and parses album feeds.

    A feed that cannot be fetched or parsed is an Err result, never a
    partially filled Album.
    """

    def __init__(
        self,
        retriever: FeedRetriever,
        parser: FeedDocumentParser,
        ordering: OrderingRegistry | None = None,
    ) -> None:
        self._retriever = retriever
        self._parser = parser
        self._ordering = ordering or OrderingRegistry()

    def load(self, url: str) -> Result[Album, FeedCatalogError]:
        """Load one album feed."""
        try:
            album = self._parser.parse(self._retriever.fetch(url), feed_url=url)
        except FeedCatalogError as e:
            logger.debug(f"Failed to load album feed {url}: {e}")
            return Err(e)
        return Ok(self._ordering.apply(album))

    def load_many(
        self,
        urls: Sequence[str],
        orchestrator: BatchResolutionOrchestrator | None = None,
    ) -> list[Album]:
        """Load many album feeds, dropping failures with a logged reason.

        An empty list means every feed failed.
        """
        if orchestrator is not None:
            results = orchestrator.map_batched(
                urls,
                self.load,
                lambda url, e: Err(e),
                desc="Loading albums",
            )
        else:
            results = [self.load(url) for url in urls]

        albums = []
        for url, result in zip(urls, results):
            if result.ok:
                albums.append(result.value)
            else:
                logger.warning(f"Dropping feed {url}: {result.error}")
        logger.info(f"Loaded {len(albums)}/{len(urls)} album feeds")
        return albums
