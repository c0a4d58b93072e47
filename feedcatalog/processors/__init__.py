"""Processors that compose services into catalog operations."""

from .albums import AlbumLoader
from .batch import BatchResolutionOrchestrator
from .ordering import CanonicalOrderHook, OrderingRegistry, default_registry
from .pipeline import TrackExtractionPipeline
from .publisher import PublisherAggregator

__all__ = [
    "AlbumLoader",
    "BatchResolutionOrchestrator",
    "CanonicalOrderHook",
    "OrderingRegistry",
    "PublisherAggregator",
    "TrackExtractionPipeline",
    "default_registry",
]
