"""Unit tests for feedcatalog/processors/ordering.py."""

import sys
from pathlib import Path

# Add parent dir to path so feedcatalog is importable as a package
sys.path.insert(0, str(Path(__file__).parent.parent))

from feedcatalog.models.album import Album, Track
from feedcatalog.processors.ordering import (
    THEY_RIDE_ORDER,
    CanonicalOrderHook,
    OrderingRegistry,
    default_registry,
)


def tracks_named(*titles):
    return [Track(title=title, track_number=n) for n, title in enumerate(titles, start=1)]


class TestCanonicalOrderHook:
    """Tests for CanonicalOrderHook."""

    def test_they_ride_reversed(self):
        """The feed's reversed listing comes back in canonical order."""
        hook = CanonicalOrderHook(THEY_RIDE_ORDER)
        ordered = hook.apply(tracks_named(*reversed(THEY_RIDE_ORDER)))
        assert [t.title for t in ordered] == list(THEY_RIDE_ORDER)

    def test_punctuation_titles_exact(self):
        hook = CanonicalOrderHook(THEY_RIDE_ORDER)
        assert hook.position(".") == 4
        assert hook.position("..") == 10
        assert hook.position("-..") == 12
        assert hook.position("?") is None

    def test_loose_matches(self):
        hook = CanonicalOrderHook(THEY_RIDE_ORDER)
        assert hook.position("Pedal Down (feat. Rob Montgomery)") == 13
        assert hook.position("THE FEVER") == 3
        assert hook.position("Renfield (Remastered)") == 9

    def test_unmatched_last_in_source_order(self):
        hook = CanonicalOrderHook(["B", "A"])
        ordered = hook.apply(tracks_named("Zed", "A", "Kol", "B"))
        assert [t.title for t in ordered] == ["B", "A", "Zed", "Kol"]


class TestOrderingRegistry:
    """Tests for OrderingRegistry."""

    def test_default_registry(self):
        registry = default_registry()
        album = Album(title="They Ride", artist="IROH", tracks=tracks_named("They Ride", "-", "Heaven Knows"))

        ordered = registry.apply(album)
        assert [t.title for t in ordered.tracks] == ["-", "Heaven Knows", "They Ride"]
        assert [t.title for t in album.tracks] == ["They Ride", "-", "Heaven Knows"]

    def test_key_ignores_case_and_whitespace(self):
        registry = default_registry()
        album = Album(title=" they ride ", artist="iroh", tracks=tracks_named("They Ride", "-"))
        assert [t.title for t in registry.apply(album).tracks] == ["-", "They Ride"]

    def test_other_albums_untouched(self):
        registry = default_registry()
        album = Album(title="They Ride", artist="Someone Else", tracks=tracks_named("They Ride", "-"))
        assert registry.apply(album) is album

    def test_register(self):
        registry = OrderingRegistry()
        assert len(registry) == 0
        registry.register("Album", "Artist", CanonicalOrderHook(["Second", "First"]))
        assert len(registry) == 1
        album = Album(title="Album", artist="Artist", tracks=tracks_named("First", "Second"))
        assert [t.title for t in registry.apply(album).tracks] == ["Second", "First"]
