"""Utility modules for caching, text handling and heuristics."""

from .cache import ThreadSafeCache
from .retry import with_retry

__all__ = [
    "ThreadSafeCache",
    "with_retry",
]
