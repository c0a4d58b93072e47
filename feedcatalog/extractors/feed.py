"""Feed document parsing into Album and Track models."""

from __future__ import annotations

import logging

# Bandit: parsing handled via defusedxml safe APIs
from xml.etree.ElementTree import Element  # nosec B405

from defusedxml import DefusedXmlException
from defusedxml.ElementTree import ParseError as DefusedXMLParseError
from defusedxml.ElementTree import fromstring as safe_fromstring

from ..exceptions import InvalidFormatError, NoChannelError
from ..models.album import Album, Funding, Owner, PodRollEntry, Track
from ..models.remote import RemoteItemReference
from ..models.value import ValueBlock, ValueRecipient, ValueTimeSplit
from ..utils.heuristics import UNKNOWN_ARTIST
from ..utils.text import (
    duration_to_seconds,
    is_safe_url,
    normalize_duration,
    parse_bool,
    parse_float,
    split_keywords,
    strip_html,
)

logger = logging.getLogger(__name__)

ITUNES_NS = "http://www.itunes.com/dtds/podcast-1.0.dtd"
MEDIA_NS = "http://search.yahoo.com/mrss/"
CONTENT_NS = "http://purl.org/rss/1.0/modules/content/"

DEFAULT_ALBUM_TITLE = "Unknown Album"
PUBLISHER_MEDIUM = "publisher"


def _split_tag(tag: object) -> tuple[str | None, str]:
    """Split "{ns}local" into (ns, local); comments and PIs yield ("", "")."""
    if not isinstance(tag, str):
        return "", ""
    if tag.startswith("{"):
        ns, _, local = tag[1:].partition("}")
        return ns, local
    return None, tag


def _is_podcast_tag(el: Element, name: str) -> bool:
    """Match a Podcasting 2.0 element in either spelling.

    Accepts the bare element and any namespace that names the podcast
    namespace, but never the itunes one.
    """
    ns, local = _split_tag(el.tag)
    if local != name:
        return False
    if ns is None:
        return True
    return bool(ns) and ns != ITUNES_NS and "podcast" in ns.lower()


def _podcast_children(parent: Element, name: str) -> list[Element]:
    return [child for child in parent if _is_podcast_tag(child, name)]


def _podcast_child(parent: Element, name: str) -> Element | None:
    children = _podcast_children(parent, name)
    return children[0] if children else None


def _text(el: Element | None) -> str | None:
    if el is None or el.text is None:
        return None
    text = el.text.strip()
    return text or None


def _child_text(parent: Element, path: str) -> str | None:
    return _text(parent.find(path))


def _itunes(name: str) -> str:
    return f"{{{ITUNES_NS}}}{name}"


def _media(name: str) -> str:
    return f"{{{MEDIA_NS}}}{name}"


def _attr(el: Element | None, name: str) -> str | None:
    if el is None:
        return None
    value = el.attrib.get(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


def _optional_html(value: str | None) -> str | None:
    return strip_html(value) or None


class FeedDocumentParser:
    """Parses RSS 2.0 + Podcasting 2.0 documents into Album objects.

    Stateless; one instance can be shared across threads.
    """

    def parse(self, data: bytes | str, feed_url: str | None = None) -> Album:
        """Parse a feed document.

        Args:
            data: Raw XML bytes or text
            feed_url: URL the document came from, recorded on the album

        Raises:
            InvalidFormatError: The document is not well-formed XML
            NoChannelError: The document has no <channel>
        """
        source = feed_url or "feed"
        try:
            root = safe_fromstring(data)
        except DefusedXMLParseError as e:
            raise InvalidFormatError(f"Malformed XML in {source}: {e}", url=feed_url) from e
        except DefusedXmlException as e:
            raise InvalidFormatError(f"Unsafe XML rejected in {source}: {e}", url=feed_url) from e

        channel = self._find_channel(root)
        if channel is None:
            raise NoChannelError(f"No <channel> element in {source}", url=feed_url)

        album = self._parse_channel(channel, feed_url)
        logger.debug(f"Parsed '{album.title}' by '{album.artist}' with {len(album.tracks)} tracks")
        return album

    def _find_channel(self, root: Element) -> Element | None:
        if _split_tag(root.tag)[1] == "channel":
            return root
        channel = root.find("channel")
        if channel is None:
            channel = next(
                (e for e in root.iter() if _split_tag(e.tag)[1] == "channel"),
                None,
            )
        return channel

    def _parse_channel(self, channel: Element, feed_url: str | None) -> Album:
        title = strip_html(_child_text(channel, "title")) or DEFAULT_ALBUM_TITLE
        description = strip_html(
            _child_text(channel, "description") or _child_text(channel, _itunes("summary"))
        )
        items = [child for child in channel if _split_tag(child.tag) == (None, "item")]

        publisher, remote_items = self._parse_channel_remote_items(channel)

        return Album(
            title=title,
            artist=self._parse_artist(channel, title),
            description=description,
            cover_art=self._parse_cover_art(channel, items),
            tracks=[self._parse_item(item, index) for index, item in enumerate(items, start=1)],
            release_date=_child_text(channel, "pubDate") or _child_text(channel, "lastBuildDate"),
            link=_child_text(channel, "link") or "",
            funding=self._parse_funding(channel),
            podroll=self._parse_podroll(channel, feed_url),
            publisher=publisher,
            explicit=parse_bool(_child_text(channel, _itunes("explicit"))),
            language=_child_text(channel, "language"),
            keywords=split_keywords(_child_text(channel, _itunes("keywords"))),
            categories=self._parse_categories(channel),
            owner=self._parse_owner(channel),
            subtitle=_optional_html(_child_text(channel, _itunes("subtitle"))),
            summary=_optional_html(_child_text(channel, _itunes("summary"))),
            copyright=_child_text(channel, "copyright"),
            feed_url=feed_url,
            feed_guid=_text(_podcast_child(channel, "guid")),
            medium=_text(_podcast_child(channel, "medium")),
            value=self._parse_value(_podcast_child(channel, "value")),
            remote_items=remote_items,
        )

    def _parse_artist(self, channel: Element, title: str) -> str:
        artist = strip_html(_child_text(channel, _itunes("author")) or _child_text(channel, "author"))
        if artist:
            return artist
        # "Artist - Album" titles carry the artist as a prefix
        if " - " in title:
            prefix = title.split(" - ", 1)[0].strip()
            if prefix:
                return prefix
        return UNKNOWN_ARTIST

    def _parse_cover_art(self, channel: Element, items: list[Element]) -> str | None:
        """Resolve cover art: itunes:image, then <image><url>, then first item's itunes:image."""
        url = _attr(channel.find(_itunes("image")), "href")
        if not url:
            url = _child_text(channel, "image/url")
        if not url and items:
            url = _attr(items[0].find(_itunes("image")), "href")
        if url and not is_safe_url(url):
            logger.warning(f"Rejected unsafe cover art URL: {url[:60]}")
            return None
        return url or None

    def _parse_categories(self, channel: Element) -> list[str]:
        categories: list[str] = []
        for el in channel.iter(_itunes("category")):
            name = _attr(el, "text")
            if name and name not in categories:
                categories.append(name)
        if not categories:
            for el in channel.findall("category"):
                name = _text(el)
                if name and name not in categories:
                    categories.append(name)
        return categories

    def _parse_owner(self, channel: Element) -> Owner | None:
        owner = channel.find(_itunes("owner"))
        if owner is None:
            return None
        name = _child_text(owner, _itunes("name"))
        email = _child_text(owner, _itunes("email"))
        if not name and not email:
            return None
        return Owner(name=name, email=email)

    def _parse_funding(self, channel: Element) -> list[Funding]:
        funding = []
        for el in _podcast_children(channel, "funding"):
            message = _text(el)
            url = _attr(el, "url") or (message if message and message.startswith("http") else None)
            if not url:
                continue
            funding.append(Funding(url=url, message=message if message != url else None))
        return funding

    def _parse_podroll(self, channel: Element, feed_url: str | None) -> list[PodRollEntry]:
        entries = []
        for podroll in _podcast_children(channel, "podroll"):
            for el in _podcast_children(podroll, "remoteItem"):
                ref = self._parse_remote_item(el)
                if ref is None:
                    continue
                entries.append(
                    PodRollEntry(
                        url=ref.feed_url,
                        feed_guid=ref.feed_guid,
                        title=ref.title,
                        description=_attr(el, "description"),
                        parent_feed_url=feed_url,
                    )
                )
        return entries

    def _parse_channel_remote_items(
        self, channel: Element
    ) -> tuple[RemoteItemReference | None, list[RemoteItemReference]]:
        """Split channel-level remote items into the publisher reference and the rest."""
        publisher: RemoteItemReference | None = None
        remote_items: list[RemoteItemReference] = []

        candidates = _podcast_children(channel, "remoteItem")
        for block in _podcast_children(channel, "publisher"):
            candidates.extend(_podcast_children(block, "remoteItem"))

        for el in candidates:
            ref = self._parse_remote_item(el)
            if ref is None:
                continue
            if (ref.medium or "").lower() == PUBLISHER_MEDIUM:
                if publisher is None:
                    publisher = ref
                continue
            remote_items.append(ref)
        return publisher, remote_items

    def _parse_remote_item(self, el: Element) -> RemoteItemReference | None:
        feed_guid = _attr(el, "feedGuid")
        feed_url = _attr(el, "feedUrl")
        if not feed_guid and not feed_url:
            logger.debug("Skipping remoteItem without feedGuid or feedUrl")
            return None
        return RemoteItemReference(
            feed_guid=feed_guid,
            item_guid=_attr(el, "itemGuid"),
            feed_url=feed_url,
            medium=_attr(el, "medium"),
            title=_attr(el, "title") or _text(el),
        )

    def _parse_value(self, el: Element | None) -> ValueBlock | None:
        if el is None:
            return None
        return ValueBlock(
            type=_attr(el, "type"),
            method=_attr(el, "method"),
            suggested=parse_float(_attr(el, "suggested")),
            recipients=[self._parse_recipient(r) for r in _podcast_children(el, "valueRecipient")],
            time_splits=[
                split
                for split in (self._parse_time_split(s) for s in _podcast_children(el, "valueTimeSplit"))
                if split is not None
            ],
        )

    def _parse_recipient(self, el: Element) -> ValueRecipient:
        percentage = parse_float(_attr(el, "split"))
        if percentage is None:
            percentage = parse_float(_attr(el, "percentage"), 0.0)
        return ValueRecipient(
            name=_attr(el, "name"),
            type=(_attr(el, "type") or "local").lower(),
            address=_attr(el, "address"),
            percentage=percentage,
            amount=parse_float(_attr(el, "amount")),
            custom_key=_attr(el, "customKey"),
            custom_value=_attr(el, "customValue"),
            fee=parse_bool(_attr(el, "fee")),
        )

    def _parse_time_split(self, el: Element) -> ValueTimeSplit | None:
        """Parse one valueTimeSplit; malformed splits are skipped."""
        start = parse_float(_attr(el, "startTime"))
        if start is None or start < 0:
            logger.warning(f"Skipping valueTimeSplit with invalid startTime {_attr(el, 'startTime')!r}")
            return None

        duration = parse_float(_attr(el, "duration"))
        if duration is None:
            end = parse_float(_attr(el, "endTime"))
            duration = end - start if end is not None and end > start else 0.0

        remote_item_el = _podcast_child(el, "remoteItem")
        remote_item = self._parse_remote_item(remote_item_el) if remote_item_el is not None else None

        remote_percentage = parse_float(_attr(el, "remotePercentage"))
        if remote_percentage is None:
            remote_percentage = 100.0 if remote_item is not None else 0.0

        recipients = [self._parse_recipient(r) for r in _podcast_children(el, "valueRecipient")]
        if remote_item is not None:
            # A split that points at a remote item pays that item's recipients
            recipients.append(
                ValueRecipient(
                    name=remote_item.title,
                    type="remote",
                    percentage=remote_percentage,
                )
            )

        return ValueTimeSplit(
            start_time=start,
            duration=duration,
            remote_percentage=remote_percentage,
            recipients=recipients,
            remote_item=remote_item,
        )

    def _parse_media_url(self, item: Element) -> tuple[str | None, str | None]:
        """Resolve (url, mime type): enclosure, then <link>, then media:content."""
        enclosure = item.find("enclosure")
        url = _attr(enclosure, "url")
        if url:
            return url, _attr(enclosure, "type")

        link = _child_text(item, "link")
        if link:
            return link, None

        content = item.find(_media("content"))
        if content is None:
            content = item.find(f"{_media('group')}/{_media('content')}")
        url = _attr(content, "url")
        if url:
            return url, _attr(content, "type")
        return None, None

    def _parse_item(self, item: Element, index: int) -> Track:
        url, media_type = self._parse_media_url(item)
        raw_duration = _child_text(item, _itunes("duration"))
        value = self._parse_value(_podcast_child(item, "value"))

        time_splits = list(value.time_splits) if value is not None else []
        for el in _podcast_children(item, "valueTimeSplit"):
            split = self._parse_time_split(el)
            if split is not None:
                time_splits.append(split)

        remote_items = [
            ref
            for ref in (self._parse_remote_item(el) for el in _podcast_children(item, "remoteItem"))
            if ref is not None
        ]

        return Track(
            title=strip_html(_child_text(item, "title")) or f"Track {index}",
            duration=normalize_duration(raw_duration),
            url=url,
            track_number=index,
            subtitle=_optional_html(_child_text(item, _itunes("subtitle"))),
            summary=_optional_html(_child_text(item, _itunes("summary"))),
            image=_attr(item.find(_itunes("image")), "href"),
            explicit=parse_bool(_child_text(item, _itunes("explicit"))),
            keywords=split_keywords(_child_text(item, _itunes("keywords"))),
            guid=_child_text(item, "guid"),
            pub_date=_child_text(item, "pubDate"),
            description=_child_text(item, "description") or _child_text(item, f"{{{CONTENT_NS}}}encoded"),
            media_type=media_type,
            duration_seconds=duration_to_seconds(raw_duration) or 0,
            chapters_url=_attr(_podcast_child(item, "chapters"), "url"),
            value=value,
            value_time_splits=time_splits,
            remote_items=remote_items,
        )
