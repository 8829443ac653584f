"""Normalization of RSS 2.0 and Atom documents into ParsedFeed."""

import logging
import xml.etree.ElementTree as ET
from collections.abc import Iterator

from .errors import InvalidDocument
from .models import UNTITLED_FEED, ParsedFeed, Post

logger = logging.getLogger(__name__)


def _local(tag: object) -> str | None:
    """Return an element tag without its namespace, e.g. '{ns}entry' -> 'entry'."""
    if not isinstance(tag, str):
        return None
    return tag.rsplit("}", 1)[-1]


def _descendants(elem: ET.Element, name: str) -> Iterator[ET.Element]:
    """Yield elem and every descendant whose local name is name, in document order."""
    for child in elem.iter():
        if _local(child.tag) == name:
            yield child


def _children(elem: ET.Element, name: str) -> Iterator[ET.Element]:
    """Yield direct children of elem whose local name is name."""
    for child in elem:
        if _local(child.tag) == name:
            yield child


def _first(elems: Iterator[ET.Element]) -> ET.Element | None:
    return next(elems, None)


def _text(elem: ET.Element | None) -> str:
    """Full text content of an element, stripped. Empty when elem is missing."""
    if elem is None:
        return ""
    return "".join(elem.itertext()).strip()


def _parse_rss(channel: ET.Element) -> ParsedFeed:
    title = _text(_first(_children(channel, "title"))) or UNTITLED_FEED
    # Items carry their own <link>, so only a direct child counts
    site_link = _text(_first(_children(channel, "link")))

    posts = []
    for item in _descendants(channel, "item"):
        guid = _text(_first(_children(item, "guid")))
        link = _text(_first(_children(item, "link")))
        post_title = _text(_first(_children(item, "title")))
        posts.append(Post(id=guid or link or post_title, title=post_title, link=link))

    return ParsedFeed(title=title, site_link=site_link, posts=posts)


def _atom_link(parent: ET.Element, skip_self: bool = False) -> str:
    """Pick the href of parent's alternate link, falling back to another link.

    With skip_self the fallback ignores rel="self" links (feed level);
    otherwise the fallback is simply the first link (entry level).
    """
    links = list(_children(parent, "link"))
    for link in links:
        if link.get("rel") == "alternate":
            return link.get("href") or ""
    for link in links:
        if skip_self and link.get("rel") == "self":
            continue
        return link.get("href") or ""
    return ""


def _parse_atom(feed: ET.Element) -> ParsedFeed:
    title = _text(_first(_children(feed, "title"))) or UNTITLED_FEED
    site_link = _atom_link(feed, skip_self=True)

    posts = []
    for entry in _descendants(feed, "entry"):
        entry_id = _text(_first(_children(entry, "id")))
        link = _atom_link(entry)
        post_title = _text(_first(_children(entry, "title")))
        posts.append(
            Post(id=entry_id or link or post_title, title=post_title, link=link)
        )

    return ParsedFeed(title=title, site_link=site_link, posts=posts)


def parse_document(document: str | bytes) -> ParsedFeed:
    """Parse a feed document.

    Raises:
        InvalidDocument: If the document is not well-formed XML or is
            neither RSS (has a <channel>) nor Atom (has a <feed>)
    """
    try:
        root = ET.fromstring(document)
    except ET.ParseError as exc:
        raise InvalidDocument(f"malformed XML: {exc}") from exc

    channel = _first(_descendants(root, "channel"))
    if channel is not None:
        return _parse_rss(channel)

    feed = _first(_descendants(root, "feed"))
    if feed is not None:
        return _parse_atom(feed)

    raise InvalidDocument(f"unrecognized root element <{_local(root.tag)}>")


def parse_feed(document: str | bytes) -> ParsedFeed | None:
    """
    Parse an RSS 2.0 or Atom document into a ParsedFeed.

    Post ids fall back from the native identifier (RSS guid / Atom id) to the
    permalink and then to the title. Posts are returned in document order and
    are not deduplicated.

    Args:
        document: Raw feed document, as text or undecoded bytes

    Returns:
        The normalized feed, or None if the document is malformed or not a feed
    """
    try:
        return parse_document(document)
    except InvalidDocument as exc:
        logger.debug("Rejected feed document: %s", exc)
        return None
    except Exception:
        logger.debug("Unexpected error parsing feed document", exc_info=True)
        return None
