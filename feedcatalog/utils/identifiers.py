"""Identifier and key utilities."""

import hashlib
import re


def normalize_title_key(text: str | None) -> str:
    """Reduce a title to lowercase alphanumerics for loose comparison.

    Example: "Pedal Down ( feat. Rob Montgomery )" -> "pedaldownfeatrobmontgomery"
    """
    if not text:
        return ""
    return re.sub(r"[^a-z0-9]", "", text.lower())


def album_dedup_key(title: str | None, artist: str | None) -> str:
    """Get case-insensitive key used to deduplicate albums.

    Example: ("They Ride", "IROH") and ("they ride", "Iroh") -> "they ride|iroh"
    """
    return f"{(title or '').lower()}|{(artist or '').lower()}"


def album_key(title: str | None, artist: str | None) -> str:
    """Get the stable key ordering hooks are registered under.

    Surrounding whitespace is ignored, otherwise identical to the dedup key.
    """
    return album_dedup_key((title or "").strip(), (artist or "").strip())


def make_track_id(*parts: object) -> str:
    """Build a deterministic identifier from the parts that define a track.

    Extracting the same episode twice yields the same ids.
    """
    raw = "\x1f".join("" if part is None else str(part) for part in parts)
    return hashlib.sha1(raw.encode("utf-8")).hexdigest()[:16]


def short_guid(guid: str | None, length: int = 8) -> str:
    """Get a short prefix of a guid for placeholder titles."""
    return (guid or "")[:length]
