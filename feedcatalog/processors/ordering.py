"""Pluggable track ordering for albums whose feed order is wrong."""

import logging
from dataclasses import replace
from typing import Protocol, Sequence

from ..models.album import Album, Track
from ..utils.identifiers import album_key, normalize_title_key

logger = logging.getLogger(__name__)


class TrackOrderingHook(Protocol):
    """Reorders an album's tracks after parsing."""

    def apply(self, tracks: list[Track]) -> list[Track]: ...


class CanonicalOrderHook:
    """Sorts tracks to follow a canonical title list.

    Exact (case-insensitive) matches win, then equal alphanumeric content,
    then substring containment in either direction.
    The staged order is intentional: a single loose predicate lets "." match
    "feat." and titles land in the wrong slot.
    Unmatched tracks keep their relative order after the matched ones.
    """

    def __init__(self, canonical_titles: Sequence[str]) -> None:
        self._titles = [title.lower().strip() for title in canonical_titles]
        self._keys = [normalize_title_key(title) for title in canonical_titles]

    def position(self, title: str) -> int | None:
        """Index of the canonical title matching a track title."""
        lowered = title.lower().strip()
        key = normalize_title_key(title)

        for index, canonical in enumerate(self._titles):
            if lowered == canonical:
                return index

        if key:
            for index, canonical_key in enumerate(self._keys):
                if key == canonical_key:
                    return index

            # Punctuation-only titles match exactly or not at all
            for index, canonical in enumerate(self._titles):
                if self._keys[index] and (canonical in lowered or lowered in canonical):
                    return index
        return None

    def apply(self, tracks: list[Track]) -> list[Track]:
        unmatched = len(self._titles)
        positions = {id(track): self.position(track.title) for track in tracks}
        # sorted() is stable, so ties and unmatched tracks keep source order
        return sorted(
            tracks,
            key=lambda track: unmatched if positions[id(track)] is None else positions[id(track)],
        )


class OrderingRegistry:
    """Ordering hooks keyed by album_key(title, artist)."""

    def __init__(self) -> None:
        self._hooks: dict[str, TrackOrderingHook] = {}

    def register(self, title: str, artist: str, hook: TrackOrderingHook) -> None:
        self._hooks[album_key(title, artist)] = hook

    def hook_for(self, album: Album) -> TrackOrderingHook | None:
        return self._hooks.get(album_key(album.title, album.artist))

    def apply(self, album: Album) -> Album:
        """Return the album with its tracks reordered, or unchanged if no hook applies."""
        hook = self.hook_for(album)
        if hook is None:
            return album
        logger.info(f"Applying custom track order for '{album.title}' by {album.artist}")
        return replace_tracks(album, hook.apply(list(album.tracks)))

    def __len__(self) -> int:
        return len(self._hooks)


def replace_tracks(album: Album, tracks: list[Track]) -> Album:
    return replace(album, tracks=tracks)


# Concept album whose feed lists tracks out of the intended sequence
THEY_RIDE_ORDER = (
    "-",
    "Heaven Knows",
    "....",
    "The Fever",
    ".",
    "In Exile",
    "-.--",
    "The Seed Man",
    "-.-.",
    "Renfield",
    "..",
    "They Ride",
    "-..",
    "Pedal Down ( feat. Rob Montgomery )",
    ". ( The Last Transmission? )",
)


def default_registry() -> OrderingRegistry:
    """Registry carrying the known concept album overrides."""
    registry = OrderingRegistry()
    registry.register("They Ride", "IROH", CanonicalOrderHook(THEY_RIDE_ORDER))
    return registry
