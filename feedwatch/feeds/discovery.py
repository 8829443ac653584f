"""Resolve a page or feed URL to a subscribable feed."""

import logging
from urllib.parse import urljoin, urlsplit

import httpx
from bs4 import BeautifulSoup

from .errors import DiscoveryExhausted, NetworkFailure
from .fetcher import client_scope, fetch_and_parse, get
from .models import DiscoveredFeed

logger = logging.getLogger(__name__)

# <link type=...> values advertising a feed in a page's <head>
FEED_LINK_TYPES = ("application/rss+xml", "application/atom+xml")

# Probed, in order, against the site origin when the page advertises nothing
COMMON_FEED_PATHS = (
    "/feed",
    "/rss",
    "/feed.xml",
    "/rss.xml",
    "/atom.xml",
    "/index.xml",
)


def url_origin(url: str) -> str | None:
    """Return scheme://host[:port] for an absolute URL, or None."""
    try:
        parts = urlsplit(url)
    except ValueError:
        return None
    if not parts.scheme or not parts.netloc:
        return None
    host = parts.netloc.rsplit("@", 1)[-1]
    return f"{parts.scheme}://{host}"


def find_feed_link(html: str, base_url: str) -> str | None:
    """Find the first auto-discovery feed link in an HTML page.

    Args:
        html: Page markup
        base_url: URL the page was fetched from, for resolving relative hrefs

    Returns:
        Absolute feed URL, or None if the page advertises no feed
    """
    soup = BeautifulSoup(html, "html.parser")
    for link in soup.find_all("link"):
        link_type = (link.get("type") or "").strip().lower()
        if link_type not in FEED_LINK_TYPES:
            continue
        href = (link.get("href") or "").strip()
        if not href:
            return None
        return urljoin(base_url, href)
    return None


async def _discover_or_raise(url: str, client: httpx.AsyncClient) -> DiscoveredFeed:
    # 1. The URL may already be a feed
    direct = await fetch_and_parse(url, client)
    if direct is not None:
        site_url = direct.site_link or url_origin(url) or url
        return DiscoveredFeed(feed_url=url, site_url=site_url, title=direct.title)

    # 2. Otherwise treat it as a page; failing to load it ends discovery
    response = await get(client, url)

    # 3. Auto-discovery <link> in the page
    feed_url = find_feed_link(response.text, url)
    if feed_url:
        parsed = await fetch_and_parse(feed_url, client)
        if parsed is not None:
            return DiscoveredFeed(feed_url=feed_url, site_url=url, title=parsed.title)
        logger.debug("Advertised feed %s for %s did not parse", feed_url, url)

    # 4. Conventional feed locations at the site root
    origin = url_origin(url)
    if origin is None:
        raise DiscoveryExhausted(url)
    for path in COMMON_FEED_PATHS:
        candidate = origin + path
        parsed = await fetch_and_parse(candidate, client)
        if parsed is not None:
            return DiscoveredFeed(feed_url=candidate, site_url=url, title=parsed.title)

    raise DiscoveryExhausted(url)


async def discover(
    url: str, client: httpx.AsyncClient | None = None
) -> DiscoveredFeed | None:
    """
    Resolve a URL that is either a feed or a web page to a feed.

    Strategies, first success wins:
    1. Parse the URL itself as a feed
    2. Fetch it as HTML and follow an RSS/Atom auto-discovery <link>
    3. Probe COMMON_FEED_PATHS at the URL's origin

    Each request is attempted once. A failed request moves on to the next
    strategy, except that an unreachable page ends discovery.

    Args:
        url: URL pasted by the user
        client: HTTP client to use; a temporary one is created when omitted

    Returns:
        The discovered feed, or None if nothing was found
    """
    async with client_scope(client) as http:
        try:
            found = await _discover_or_raise(url, http)
        except (NetworkFailure, DiscoveryExhausted) as exc:
            logger.info("No feed discovered for %s (%s)", url, type(exc).__name__)
            return None
        except Exception:
            logger.warning("Unexpected error discovering feed for %s", url, exc_info=True)
            return None

    logger.info("Discovered feed %s for %s", found.feed_url, url)
    return found
