"""Whole-feed playlist extraction for musicL feeds and remote item lists."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..models.album import Album, Track
from ..models.remote import RemoteItemReference, ResolvedRemoteItem
from ..models.track import MusicTrack, TrackSource
from ..utils.heuristics import UNKNOWN_ARTIST, split_artist_title
from ..utils.identifiers import make_track_id, short_guid

if TYPE_CHECKING:
    from ..processors.batch import BatchResolutionOrchestrator

logger = logging.getLogger(__name__)

MUSICL_MEDIUM = "musicl"


def is_playlist_feed(album: Album) -> bool:
    """A feed is a playlist when flagged musicL or when it lists remote items at channel level."""
    return (album.medium or "").lower() == MUSICL_MEDIUM or bool(album.remote_items)


class PlaylistExtractor:
    """Turns a playlist feed into tracks.

    Channel-level remote items are resolved through the orchestrator;
    references that fail keep a placeholder title and artist.
    """

    def __init__(self, orchestrator: BatchResolutionOrchestrator | None = None) -> None:
        self._orchestrator = orchestrator

    def extract(self, album: Album) -> list[MusicTrack]:
        tracks = self._remote_item_tracks(album)
        for track in album.tracks:
            tracks.append(self._item_track(album, track))
        return tracks

    def _feed_url(self, album: Album) -> str:
        return album.feed_url or album.link or ""

    def _remote_item_tracks(self, album: Album) -> list[MusicTrack]:
        refs = album.remote_items
        if not refs:
            return []

        if self._orchestrator is not None:
            results = self._orchestrator.resolve_all(refs)
        else:
            logger.debug(f"No resolver available, keeping {len(refs)} placeholder tracks")
            results = [None] * len(refs)

        tracks = []
        for ref, result in zip(refs, results):
            if result is not None and result.ok:
                tracks.append(self._resolved_track(album, ref, result.value))
            else:
                if result is not None:
                    logger.warning(f"Keeping placeholder for {ref.key}: {result.error.message}")
                tracks.append(self._placeholder_track(album, ref))
        return tracks

    def _resolved_track(
        self, album: Album, ref: RemoteItemReference, resolved: ResolvedRemoteItem
    ) -> MusicTrack:
        feed_url = self._feed_url(album)
        item = resolved.item
        return MusicTrack(
            id=make_track_id(feed_url, ref.feed_guid or ref.feed_url, ref.item_guid),
            title=resolved.title,
            artist=resolved.artist,
            episode_id=ref.item_guid or ref.feed_guid or ref.feed_url or "",
            episode_title=album.title,
            episode_date=item.pub_date if item is not None else None,
            duration=float(item.duration_seconds) if item is not None else 0.0,
            audio_url=resolved.audio_url,
            source=TrackSource.EXTERNAL_FEED,
            feed_url=feed_url,
            value_for_value=resolved.payment,
            description=f"Resolved from feed {resolved.feed.feed_url or ref.feed_guid}",
            image=resolved.image,
            remote_item=ref,
        )

    def _placeholder_track(self, album: Album, ref: RemoteItemReference) -> MusicTrack:
        feed_url = self._feed_url(album)
        feed_id = ref.feed_guid or ref.feed_url or ""
        if (album.medium or "").lower() == MUSICL_MEDIUM:
            title = f"Music Track ({short_guid(feed_id)}...)"
            artist = "From MusicL Feed"
        else:
            title = f"Track from {feed_id}"
            artist = "Various Artists"
        return MusicTrack(
            id=make_track_id(feed_url, feed_id, ref.item_guid),
            title=ref.title or title,
            artist=artist,
            episode_id=ref.item_guid or feed_id,
            episode_title=album.title,
            source=TrackSource.EXTERNAL_FEED,
            feed_url=feed_url,
            description=f"Podcasting 2.0 remote item from feed {feed_id}",
            remote_item=ref,
        )

    def _item_track(self, album: Album, track: Track) -> MusicTrack:
        feed_url = self._feed_url(album)
        artist, title = split_artist_title(track.title)
        if artist == UNKNOWN_ARTIST:
            artist = album.artist
        payment = track.value.payment_info() if track.value is not None else None
        return MusicTrack(
            id=make_track_id(feed_url, track.guid, track.track_number, track.title),
            title=title,
            artist=artist,
            episode_id=track.guid or make_track_id(feed_url, track.track_number),
            episode_title=album.title,
            episode_date=track.pub_date,
            duration=float(track.duration_seconds),
            audio_url=track.url,
            source=TrackSource.EXTERNAL_FEED,
            feed_url=feed_url,
            value_for_value=payment,
            description=track.summary,
            image=track.image or album.cover_art,
        )
