"""Tagged result types and aggregate statistics."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Generic, TypeVar, Union

from .album import PodRollEntry
from .track import MusicTrack

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful outcome carrying a value."""

    value: T
    ok: bool = field(default=True, init=False)


@dataclass(frozen=True)
class Err(Generic[E]):
    """Failed outcome carrying the error that ended the operation."""

    error: E
    ok: bool = field(default=False, init=False)


Result = Union[Ok[T], Err[E]]


def _error_reason(error: object) -> str:
    return getattr(error, "reason", None) or type(error).__name__


@dataclass(frozen=True)
class BatchSummary:
    """Counts derived from a list of results."""

    success: int
    failed: int
    failures_by_reason: dict[str, int]

    @property
    def total(self) -> int:
        return self.success + self.failed

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dictionary."""
        return {
            "success": self.success,
            "failed": self.failed,
            "failures_by_reason": dict(self.failures_by_reason),
        }


def summarize(results: list[Result]) -> BatchSummary:
    """Derive success/failure counts and failure reasons from results."""
    reasons: Counter[str] = Counter()
    success = 0
    for result in results:
        if result.ok:
            success += 1
        else:
            reasons[_error_reason(result.error)] += 1
    return BatchSummary(
        success=success,
        failed=sum(reasons.values()),
        failures_by_reason=dict(reasons),
    )


@dataclass
class ExtractionResult:
    """Music tracks extracted from one feed."""

    tracks: list[MusicTrack] = field(default_factory=list)
    related_feeds: list[PodRollEntry] = field(default_factory=list)
    stats: dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dictionary."""
        return {
            "tracks": [t.to_dict() for t in self.tracks],
            "related_feeds": [f.to_dict() for f in self.related_feeds],
            "stats": dict(self.stats),
        }
