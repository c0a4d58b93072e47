"""Extractors for feed documents and the music tracks inside them."""

from .feed import FeedDocumentParser

__all__ = [
    "FeedDocumentParser",
]
