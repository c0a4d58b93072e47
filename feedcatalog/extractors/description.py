"""Music tracks mined from free-text episode descriptions."""

import logging
import re

from ..config import DescriptionConfig
from ..models.track import MusicTrack, TrackSource
from ..utils.heuristics import mine_description_line
from ..utils.text import strip_html
from .episode import EpisodeContext

logger = logging.getLogger(__name__)

# Block-level markup that separates lines of a track listing
_LINE_BREAK_RE = re.compile(r"<br\s*/?>|</p>|<p[^>]*>|</li>|<li[^>]*>|</div>|</h\d>", re.IGNORECASE)


def description_lines(raw: str) -> list[str]:
    """Split a raw HTML or plain-text description into clean lines."""
    text = _LINE_BREAK_RE.sub("\n", raw)
    return [line for line in (strip_html(part) for part in text.splitlines()) if line]


class DescriptionExtractor:
    """Heuristic track mining over episode show notes.

    Results are low confidence; thresholds come from DescriptionConfig.
    """

    def __init__(self, config: DescriptionConfig | None = None) -> None:
        self._config = config or DescriptionConfig()

    def extract(self, context: EpisodeContext, description: str | None) -> list[MusicTrack]:
        if not description:
            return []

        tracks = []
        seen: set[tuple[str, str]] = set()
        for line in description_lines(description):
            matches = mine_description_line(
                line,
                min_length=self._config.min_length,
                max_length=self._config.max_length,
                blocklist=self._config.blocklist,
            )
            for match in matches:
                key = (match.artist.lower(), match.title.lower())
                if key in seen:
                    continue
                seen.add(key)
                tracks.append(
                    MusicTrack(
                        id=context.track_id(TrackSource.DESCRIPTION.value, match.artist, match.title),
                        title=match.title,
                        artist=match.artist,
                        episode_id=context.episode_id,
                        episode_title=context.episode_title,
                        episode_date=context.episode_date,
                        audio_url=context.audio_url,
                        source=TrackSource.DESCRIPTION,
                        feed_url=context.feed_url,
                        description=f'Extracted from episode description: "{match.line}"',
                    )
                )

        if tracks:
            logger.debug(f"Mined {len(tracks)} tracks from description of '{context.episode_title}'")
        return tracks
