"""Text, duration and URL normalization helpers."""

import math
import re

# Order matters: &amp; is decoded last so "&amp;lt;" stays "&lt;"
HTML_ENTITIES = (
    ("&nbsp;", " "),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&#39;", "'"),
    ("&amp;", "&"),
)

UNSAFE_URL_MARKERS = ("javascript:", "data:")

_TAG_RE = re.compile(r"<[^>]+>")
_WS_RE = re.compile(r"\s+")


def strip_html(text: str | None) -> str:
    """Remove markup and decode common entities from free text.

    Example: "Rock &amp; Roll <b>Live</b>" -> "Rock & Roll Live"
    """
    if not text:
        return ""
    text = _TAG_RE.sub("", text)
    for entity, char in HTML_ENTITIES:
        text = text.replace(entity, char)
    return _WS_RE.sub(" ", text).strip()


def duration_to_seconds(value: str | int | float | None) -> int | None:
    """Parse a duration into whole seconds.

    Handles:
        - Bare seconds: "125" -> 125
        - MM:SS: "3:07" -> 187
        - H:MM:SS: "1:05:30" -> 3930

    Returns:
        Seconds, or None when the value is missing or unparseable.
    """
    if value is None:
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, (int, float)):
        return int(value) if value >= 0 else None

    text = value.strip()
    if not text:
        return None

    parts = text.split(":")
    if len(parts) > 3:
        return None
    try:
        numbers = [float(part) for part in parts]
    except ValueError:
        return None
    if any(n < 0 for n in numbers):
        return None

    seconds = 0.0
    for number in numbers:
        seconds = seconds * 60 + number
    # float() accepts "nan", "inf" and overflowing exponents
    if not math.isfinite(seconds):
        return None
    return int(seconds)


def format_time(seconds: float) -> str:
    """Format seconds as total minutes and zero-padded seconds.

    Example: 3930 -> "65:30"
    """
    total = max(int(seconds), 0) if math.isfinite(seconds) else 0
    minutes, secs = divmod(total, 60)
    return f"{minutes}:{secs:02d}"


def normalize_duration(value: str | int | float | None) -> str:
    """Normalize any supported duration to "M:SS", "0:00" when unusable."""
    seconds = duration_to_seconds(value)
    if seconds is None:
        return "0:00"
    return format_time(seconds)


def is_safe_url(url: str | None) -> bool:
    """Check a URL does not carry a script or inline-data scheme."""
    if not url:
        return False
    lowered = url.strip().lower()
    return not any(marker in lowered for marker in UNSAFE_URL_MARKERS)


def parse_bool(value: str | None) -> bool:
    """Interpret itunes-style yes/no/true/explicit flags."""
    if value is None:
        return False
    return value.strip().lower() in ("yes", "true", "explicit", "1")


def parse_float(value: str | None, default: float | None = None) -> float | None:
    """Parse a float attribute, returning default when missing, malformed or not finite."""
    if value is None or not value.strip():
        return default
    try:
        number = float(value)
    except ValueError:
        return default
    return number if math.isfinite(number) else default


def split_keywords(value: str | None) -> list[str]:
    """Split a comma-separated keyword list, dropping empties."""
    if not value:
        return []
    return [word.strip() for word in value.split(",") if word.strip()]


def contains_markup(text: str) -> bool:
    return bool(_TAG_RE.search(text)) or "&lt;" in text or "&gt;" in text


def contains_url(text: str) -> bool:
    lowered = text.lower()
    return "http://" in lowered or "https://" in lowered or "www." in lowered
