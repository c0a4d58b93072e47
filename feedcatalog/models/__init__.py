"""Data models for feeds, tracks and remote items."""

from .remote import RemoteItemReference, ResolutionFailure, ResolutionMode, ResolvedRemoteItem
from .track import MusicTrack, PaymentInfo, TrackSource
from .value import ValueBlock, ValueRecipient, ValueTimeSplit
from .album import Album, Funding, Owner, PodRollEntry, Track
from .directory import DirectoryEpisode, DirectoryFeed
from .results import BatchSummary, Err, ExtractionResult, Ok, Result, summarize

__all__ = [
    "Album",
    "BatchSummary",
    "DirectoryEpisode",
    "DirectoryFeed",
    "Err",
    "ExtractionResult",
    "Funding",
    "MusicTrack",
    "Ok",
    "Owner",
    "PaymentInfo",
    "PodRollEntry",
    "RemoteItemReference",
    "ResolutionFailure",
    "ResolutionMode",
    "ResolvedRemoteItem",
    "Result",
    "Track",
    "TrackSource",
    "ValueBlock",
    "ValueRecipient",
    "ValueTimeSplit",
    "summarize",
]
