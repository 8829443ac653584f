"""Poll cycle over every stored feed."""

import asyncio
import logging

import httpx

from feedwatch.config import get_settings
from feedwatch.feeds.fetcher import client_scope, fetch_and_parse
from feedwatch.feeds.models import Feed
from feedwatch.storage import FeedStore

from .delta import apply_poll

logger = logging.getLogger(__name__)


async def check_feed(feed: Feed, client: httpx.AsyncClient | None = None) -> Feed:
    """Poll one feed.

    Returns the feed unchanged when it cannot be fetched or parsed, so the
    next cycle simply tries again.
    """
    try:
        parsed = await fetch_and_parse(feed.feed_url, client)
        if parsed is None:
            logger.info("Skipping feed %s: fetch or parse failed", feed.feed_url)
            return feed
        updated = apply_poll(feed, parsed)
    except Exception:
        logger.exception("Error polling feed %s", feed.feed_url)
        return feed

    new_posts = updated.unread_count - feed.unread_count
    if new_posts:
        logger.info("Feed %s has %d new post(s)", feed.feed_url, new_posts)
    return updated


def merge_poll_results(
    current: list[Feed], before: list[Feed], after: list[Feed]
) -> list[Feed]:
    """Apply what a poll learned onto the feed list as it is now.

    The poll started from `before` and produced `after`; meanwhile the stored
    list may have gained, lost or edited feeds. Feeds added or deleted since
    are kept as they are now. For polled feeds, newly seen ids and the unread
    increment are added on top of the current record, so a mark_read done
    during the poll is not undone. A feed whose URL changed meanwhile keeps
    its current state.
    """
    before_by_id = {feed.id: feed for feed in before}
    after_by_id = {feed.id: feed for feed in after}

    merged = []
    for feed in current:
        old = before_by_id.get(feed.id)
        new = after_by_id.get(feed.id)
        if old is None or new is None or new is old or feed.feed_url != old.feed_url:
            merged.append(feed)
            continue

        known = set(feed.known_post_ids)
        discovered = [i for i in new.known_post_ids if i not in known]
        merged.append(
            feed.model_copy(
                update={
                    "known_post_ids": [*feed.known_post_ids, *discovered],
                    "unread_count": feed.unread_count
                    + (new.unread_count - old.unread_count),
                    "last_checked": new.last_checked,
                }
            )
        )
    return merged


async def check_all_feeds(
    store: FeedStore, client: httpx.AsyncClient | None = None
) -> list[Feed]:
    """
    Poll every stored feed concurrently and persist the results in one write.

    Each feed is polled independently; a failure leaves that feed's record
    as it was without affecting the others. The store lock is not held
    during network requests; results are merged into a fresh read of the
    store under the lock, so feeds added, deleted or marked read while the
    poll ran are preserved.

    Args:
        store: Feed store to read from and write back to
        client: HTTP client shared by all polls; a temporary one is created
            when omitted

    Returns:
        The updated feed records, in stored order
    """
    feeds = await store.get_feeds()
    if not feeds:
        return []

    async with client_scope(client) as http:
        updated = await asyncio.gather(*(check_feed(feed, http) for feed in feeds))

    async with store.lock:
        current = await store.get_feeds()
        updated_feeds = merge_poll_results(current, feeds, list(updated))
        await store.save_feeds(updated_feeds)

    logger.info(
        "Checked %d feed(s), %d unread in total",
        len(updated_feeds),
        total_unread(updated_feeds),
    )
    return updated_feeds


def total_unread(feeds: list[Feed]) -> int:
    """Sum of unread posts across feeds."""
    return sum(feed.unread_count for feed in feeds)


def badge_text(count: int, cap: int | None = None) -> str:
    """Text for the unread badge: empty at zero, '<cap>+' above the cap."""
    if cap is None:
        cap = get_settings().badge_cap
    if count <= 0:
        return ""
    if count > cap:
        return f"{cap}+"
    return str(count)
