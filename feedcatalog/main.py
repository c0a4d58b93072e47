#!/usr/bin/env python3
"""
Podcasting 2.0 Music Catalog

Parses music feeds, extracts tracks from podcast episodes, resolves
remote items through Podcast Index, and aggregates publisher feeds.
Every command prints JSON.
"""

import argparse
import json
import logging
import sys

import requests

from .config import Config, configure_logging
from .exceptions import FeedCatalogError
from .extractors.feed import FeedDocumentParser
from .models.album import Album
from .models.directory import DirectoryFeed
from .models.remote import RemoteItemReference, ResolutionFailure, ResolvedRemoteItem
from .models.results import ExtractionResult, Result
from .processors.albums import AlbumLoader
from .processors.batch import BatchResolutionOrchestrator
from .processors.ordering import default_registry
from .processors.pipeline import TrackExtractionPipeline
from .processors.publisher import PublisherAggregator
from .services.directory import DirectoryClient
from .services.http import create_session
from .services.resolver import RemoteItemResolver
from .services.retriever import FeedRetriever

logger = logging.getLogger(__name__)


class FeedCatalog:
    """Wires the services together from one Config."""

    def __init__(self, config: Config, session: requests.Session | None = None) -> None:
        self._config = config
        session = session or create_session(config.fetch.user_agent)

        self._parser = FeedDocumentParser()
        self._retriever = FeedRetriever(config.fetch, config.retry, session)
        self._directory = DirectoryClient(config.directory, config.retry, session)
        self._resolver = RemoteItemResolver(self._directory, self._retriever, self._parser)
        self._orchestrator = BatchResolutionOrchestrator(self._resolver, config.batch)

        ordering = default_registry()
        self._loader = AlbumLoader(self._retriever, self._parser, ordering)
        self._pipeline = TrackExtractionPipeline(
            self._retriever,
            self._parser,
            self._orchestrator,
            config.description,
        )
        self._publisher = PublisherAggregator(self._loader, self._orchestrator, ordering)

        if not self._directory.enabled:
            logger.debug("Directory lookups disabled, feedGuid-only references will fail")

    def album(self, url: str) -> Result[Album, FeedCatalogError]:
        """Load one album feed."""
        return self._loader.load(url)

    def albums(self, urls: list[str]) -> list[Album]:
        """Load many album feeds, dropping the ones that fail."""
        return self._loader.load_many(urls, self._orchestrator)

    def tracks(self, url: str) -> ExtractionResult:
        """Extract music tracks from a podcast or playlist feed."""
        return self._pipeline.extract_from_url(url)

    def resolve(self, ref: RemoteItemReference) -> Result[ResolvedRemoteItem, ResolutionFailure]:
        """Resolve one remote item reference."""
        return self._resolver.resolve_safe(ref)

    def publisher(self, url: str) -> list[Album]:
        """Aggregate a publisher feed into its albums."""
        return self._publisher.aggregate(url)

    def search(self, query: str, limit: int = 20) -> list[DirectoryFeed]:
        """Search Podcast Index for music feeds."""
        return self._directory.search_music(query, limit=limit)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Build a music catalog from Podcasting 2.0 feeds"
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Verbose output",
    )
    parser.add_argument(
        "--output",
        "-o",
        help="Write JSON to this file instead of stdout",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        help="References resolved concurrently per batch (default: BATCH_SIZE or 5)",
    )
    parser.add_argument(
        "--delay",
        type=float,
        help="Seconds to wait between batches (default: BATCH_DELAY or 0.5)",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    album = commands.add_parser("album", help="Parse an album feed")
    album.add_argument("url", help="Feed URL")

    tracks = commands.add_parser("tracks", help="Extract music tracks from a feed")
    tracks.add_argument("url", help="Feed URL")

    resolve = commands.add_parser("resolve", help="Resolve a remote item reference")
    resolve.add_argument("feed_guid", help="podcast:guid of the referenced feed")
    resolve.add_argument("item_guid", nargs="?", help="guid of the referenced item (omit for the whole feed)")
    resolve.add_argument("--feed-url", help="Feed URL carried on the reference")

    publisher = commands.add_parser("publisher", help="Aggregate a publisher feed")
    publisher.add_argument("url", help="Publisher feed URL")

    search = commands.add_parser("search", help="Search Podcast Index for music feeds")
    search.add_argument("query", help="Search term")
    search.add_argument("--limit", type=int, default=20, help="Maximum results (default: 20)")

    return parser.parse_args(argv)


def write_output(data: object, output: str | None) -> None:
    """Serialize data as JSON to a file or stdout."""
    json_str = json.dumps(data, indent=2, ensure_ascii=False)
    if output:
        with open(output, "w", encoding="utf-8") as f:
            f.write(json_str)
        print(f"Saved to {output}")
    else:
        print(json_str)


def run(args: argparse.Namespace, catalog: FeedCatalog) -> int:
    """Execute one command and return the process exit code."""
    if args.command == "album":
        result = catalog.album(args.url)
        if not result.ok:
            print(f"Error: {result.error}", file=sys.stderr)
            return 1
        write_output(result.value.to_dict(), args.output)

    elif args.command == "tracks":
        write_output(catalog.tracks(args.url).to_dict(), args.output)

    elif args.command == "resolve":
        ref = RemoteItemReference(
            feed_guid=args.feed_guid,
            item_guid=args.item_guid,
            feed_url=args.feed_url,
        )
        result = catalog.resolve(ref)
        if not result.ok:
            print(f"Error: {result.error.reason}: {result.error.message}", file=sys.stderr)
            return 1
        write_output(result.value.to_dict(), args.output)

    elif args.command == "publisher":
        albums = catalog.publisher(args.url)
        write_output([album.to_dict() for album in albums], args.output)

    elif args.command == "search":
        feeds = catalog.search(args.query, limit=args.limit)
        write_output([feed.to_dict() for feed in feeds], args.output)

    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    configure_logging(verbose=args.verbose)

    try:
        config = Config.from_environment()
        if args.batch_size is not None:
            config.batch.batch_size = args.batch_size
        if args.delay is not None:
            config.batch.inter_batch_delay = args.delay
        config.batch.show_progress = True
        config.validate()
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    catalog = FeedCatalog(config)
    try:
        return run(args, catalog)
    except FeedCatalogError as e:
        logger.error(f"{args.command} failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
