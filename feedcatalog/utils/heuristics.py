"""Pattern heuristics for spotting music in chapter titles and descriptions.

Each heuristic is a pure function over an enumerated pattern list so the
lists can be inspected and tested on their own.
"""

import re
from dataclasses import dataclass

from .text import contains_markup, contains_url

UNKNOWN_ARTIST = "Unknown Artist"

# Substrings that mark a chapter title as music
MUSIC_KEYWORDS = (
    "song",
    "track",
    "music",
    "tune",
    "melody",
    "jam",
    "riff",
    "instrumental",
    "acoustic",
    "electric",
    "guitar",
    "piano",
    "drums",
    "bass",
    "vocal",
    "chorus",
    "verse",
    "bridge",
)

# Tried in order, first match wins; group 1 is the artist, group 2 the title
ARTIST_TITLE_PATTERNS = (
    ("dash", re.compile(r"^(.+?)\s*-\s*(.+)$")),
    ("colon", re.compile(r"^(.+?):\s*(.+)$")),
    ("double_quote", re.compile(r'^(.+?)\s*"([^"]+)"$')),
    ("single_quote", re.compile(r"^(.+?)\s*'([^']+)'$")),
    ("parentheses", re.compile(r"^(.+?)\s*\(([^)]+)\)$")),
)

# Leading list markers: "- ", "* ", "• ", "1. ", "2) "
LIST_MARKER_RE = re.compile(r"^\s*(?:[-*•●]|\d{1,3}[.)])\s+")


@dataclass(frozen=True)
class DescriptionPattern:
    """One description-mining pattern with named artist/title groups.

    Patterns with only a ``track`` group yield a string that is split with
    ``split_artist_title``.
    """

    name: str
    regex: re.Pattern
    whole_line: bool = True


DESCRIPTION_PATTERNS = (
    # Inline mentions anywhere in a line
    DescriptionPattern(
        "keyword_quoted",
        re.compile(r"(?:song|track|music|tune):\s*[\"'](?P<track>[^\"']+)[\"']", re.IGNORECASE),
        whole_line=False,
    ),
    DescriptionPattern(
        "plays_quoted",
        re.compile(r"\b(?:plays?|features?|includes?)\s+[\"'](?P<track>[^\"']+)[\"']", re.IGNORECASE),
        whole_line=False,
    ),
    # Whole-line track listings, after any list marker is removed
    DescriptionPattern("title_by_artist", re.compile(r"^[\"']?(?P<title>.+?)[\"']?\s+by\s+(?P<artist>.+)$")),
    DescriptionPattern("artist_pipe_title", re.compile(r"^(?P<artist>[^|]+?)\s*\|\s*(?P<title>[^|]+)$")),
    DescriptionPattern("artist_dash_title", re.compile(r"^(?P<artist>.+?)\s+[-–—]\s+(?P<title>.+)$")),
    DescriptionPattern("artist_colon_title", re.compile(r"^(?P<artist>[^:]+?):\s+(?P<title>.+)$")),
    DescriptionPattern("artist_quoted_title", re.compile(r"^(?P<artist>[^\"']+?)\s+[\"'](?P<title>[^\"']+)[\"']$")),
)


def is_music_chapter(title: str | None) -> bool:
    """Check whether a chapter title contains a music keyword."""
    if not title:
        return False
    lowered = title.lower()
    return any(keyword in lowered for keyword in MUSIC_KEYWORDS)


def split_artist_title(text: str) -> tuple[str, str]:
    """Split a combined string into (artist, title).

    Precedence: dash, colon, double quotes, single quotes, parentheses.
    Without a match the whole string is the title.

    Example: "IROH - They Ride" -> ("IROH", "They Ride")
    """
    trimmed = text.strip()
    for _, pattern in ARTIST_TITLE_PATTERNS:
        match = pattern.match(trimmed)
        if match:
            return match.group(1).strip(), match.group(2).strip()
    return UNKNOWN_ARTIST, trimmed


def strip_list_marker(line: str) -> str:
    return LIST_MARKER_RE.sub("", line).strip()


@dataclass(frozen=True)
class DescriptionMatch:
    """An (artist, title) pair mined from a description line."""

    artist: str
    title: str
    pattern: str
    line: str


def is_acceptable_fragment(
    text: str,
    min_length: int = 3,
    max_length: int = 120,
) -> bool:
    """Check a mined artist or title is plausible.

    Rejects markup, URLs, and text outside the length bounds.
    """
    stripped = text.strip()
    if len(stripped) < min_length or len(stripped) > max_length:
        return False
    return not contains_markup(stripped) and not contains_url(stripped)


def contains_blocked_word(text: str, blocklist: tuple[str, ...] | list[str]) -> bool:
    lowered = text.lower()
    return any(word in lowered for word in blocklist)


def mine_description_line(
    line: str,
    min_length: int = 3,
    max_length: int = 120,
    blocklist: tuple[str, ...] | list[str] = ("unknown", "volume"),
) -> list[DescriptionMatch]:
    """Run the pattern battery over one line of description text.

    Inline patterns may yield several matches; whole-line patterns yield at
    most one, the first that matches.
    """
    line = line.strip()
    if not line or contains_blocked_word(line, blocklist):
        return []

    matches: list[DescriptionMatch] = []

    def accept(artist: str, title: str, pattern_name: str) -> None:
        artist, title = artist.strip(), title.strip()
        if artist == UNKNOWN_ARTIST:
            ok = is_acceptable_fragment(title, min_length, max_length)
        else:
            ok = is_acceptable_fragment(artist, min_length, max_length) and is_acceptable_fragment(
                title, min_length, max_length
            )
        if ok:
            matches.append(DescriptionMatch(artist=artist, title=title, pattern=pattern_name, line=line))

    for pattern in DESCRIPTION_PATTERNS:
        if pattern.whole_line:
            continue
        for found in pattern.regex.finditer(line):
            artist, title = split_artist_title(found.group("track"))
            accept(artist, title, pattern.name)

    if matches:
        return matches

    candidate = strip_list_marker(line)
    if len(candidate) > max_length * 2 + 3:
        return []
    for pattern in DESCRIPTION_PATTERNS:
        if not pattern.whole_line:
            continue
        found = pattern.regex.match(candidate)
        if found:
            accept(found.group("artist"), found.group("title"), pattern.name)
            break

    return matches
