"""Service modules for HTTP retrieval, the directory API and resolution."""

from .directory import DirectoryClient
from .resolver import RemoteItemResolver
from .retriever import FeedRetriever

__all__ = ["DirectoryClient", "FeedRetriever", "RemoteItemResolver"]
