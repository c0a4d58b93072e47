"""Unit tests for feedcatalog/utils/heuristics.py."""

import sys
from pathlib import Path

import pytest

# Add parent dir to path so feedcatalog is importable as a package
sys.path.insert(0, str(Path(__file__).parent.parent))

from feedcatalog.utils.heuristics import (
    UNKNOWN_ARTIST,
    is_acceptable_fragment,
    is_music_chapter,
    mine_description_line,
    split_artist_title,
    strip_list_marker,
)


class TestIsMusicChapter:
    """Tests for is_music_chapter() function."""

    @pytest.mark.parametrize(
        "title",
        ["Song: Heaven Knows", "Featured TRACK", "Guitar solo", "Acoustic set", "Bridge"],
    )
    def test_music_keywords(self, title):
        """Titles containing a music keyword are music."""
        assert is_music_chapter(title)

    @pytest.mark.parametrize("title", ["Intro", "News of the week", "", None])
    def test_non_music(self, title):
        assert not is_music_chapter(title)


class TestSplitArtistTitle:
    """Tests for split_artist_title() precedence."""

    def test_dash(self):
        assert split_artist_title("IROH - They Ride") == ("IROH", "They Ride")

    def test_dash_beats_colon(self):
        """Dash is tried before colon."""
        assert split_artist_title("Live: IROH - They Ride") == ("Live: IROH", "They Ride")

    def test_colon(self):
        assert split_artist_title("IROH: They Ride") == ("IROH", "They Ride")

    def test_double_quotes(self):
        assert split_artist_title('IROH "They Ride"') == ("IROH", "They Ride")

    def test_single_quotes(self):
        assert split_artist_title("IROH 'They Ride'") == ("IROH", "They Ride")

    def test_parentheses(self):
        assert split_artist_title("IROH (They Ride)") == ("IROH", "They Ride")

    def test_no_pattern(self):
        """Without a separator the whole string is the title."""
        assert split_artist_title("  They Ride  ") == (UNKNOWN_ARTIST, "They Ride")


class TestStripListMarker:
    """Tests for strip_list_marker() function."""

    @pytest.mark.parametrize("line", ["- Song", "* Song", "• Song", "1. Song", "12) Song"])
    def test_markers_removed(self, line):
        assert strip_list_marker(line) == "Song"

    def test_dash_without_space_kept(self):
        assert strip_list_marker("-Song") == "-Song"


class TestIsAcceptableFragment:
    """Tests for is_acceptable_fragment() function."""

    def test_too_short(self):
        assert not is_acceptable_fragment("ab")

    def test_minimum_length_accepted(self):
        assert is_acceptable_fragment("abc")

    def test_too_long(self):
        assert not is_acceptable_fragment("x" * 121)

    def test_url_rejected(self):
        assert not is_acceptable_fragment("see https://example.com")

    def test_markup_rejected(self):
        assert not is_acceptable_fragment("a <b>bold</b> title")


class TestMineDescriptionLine:
    """Tests for mine_description_line() pattern battery."""

    def _pairs(self, line, **kwargs):
        return [(m.artist, m.title) for m in mine_description_line(line, **kwargs)]

    def test_artist_dash_title(self):
        assert self._pairs("IROH - Heaven Knows") == [("IROH", "Heaven Knows")]

    def test_numbered_title_by_artist(self):
        assert self._pairs("3. Heaven Knows by IROH") == [("IROH", "Heaven Knows")]

    def test_bulleted_pipe(self):
        assert self._pairs("- IROH | The Fever") == [("IROH", "The Fever")]

    def test_artist_colon_title(self):
        assert self._pairs("IROH: The Seed Man") == [("IROH", "The Seed Man")]

    def test_artist_quoted_title(self):
        assert self._pairs('IROH "Renfield"') == [("IROH", "Renfield")]

    def test_inline_keyword_quoted(self):
        """Inline mentions inside prose are found."""
        pairs = self._pairs("Tonight we spin song: 'IROH - In Exile' for you")
        assert pairs == [("IROH", "In Exile")]

    def test_inline_plays_quoted(self):
        pairs = self._pairs('The band plays "Pedal Down" live')
        assert pairs == [(UNKNOWN_ARTIST, "Pedal Down")]

    @pytest.mark.parametrize(
        "line",
        ["Unknown Artist - Some Song", "Volume 3 - Mixtape", "VOLUME up - loud"],
    )
    def test_blocklisted_lines(self, line):
        """Lines containing blocklisted words are false-positive magnets."""
        assert self._pairs(line) == []

    def test_short_fragments_rejected(self):
        assert self._pairs("AB - CD") == []

    def test_url_fragment_rejected(self):
        assert self._pairs("Website - https://example.com/show") == []

    def test_plain_prose_ignored(self):
        assert self._pairs("Thanks for listening to the show") == []

    def test_custom_blocklist(self):
        """Blocklist comes from configuration."""
        assert self._pairs("Volume 3 - Mixtape", blocklist=()) == [("Volume 3", "Mixtape")]

    def test_custom_min_length(self):
        assert self._pairs("AB - CD", min_length=2) == [("AB", "CD")]
