"""Persistence of the ordered feed list (Redis or in-memory)."""

import asyncio
import json
import logging
import time
from abc import ABC, abstractmethod
from typing import Any

from redis.asyncio import Redis

from feedwatch.config import get_settings
from feedwatch.feeds.models import Feed

logger = logging.getLogger(__name__)


class FeedStore(ABC):
    """Abstract key-value store holding the whole feed list.

    Read-modify-write sequences hold `lock` so that concurrent writers in
    this process never overwrite each other's changes.
    """

    def __init__(self):
        self.lock = asyncio.Lock()

    @abstractmethod
    async def get_feeds(self) -> list[Feed]:
        """
        Load every stored feed.

        Returns:
            Feed records in stored order (empty list if none)
        """
        pass

    @abstractmethod
    async def save_feeds(self, feeds: list[Feed]) -> None:
        """
        Replace the stored feed list.

        Args:
            feeds: The complete list of feeds; anything not in it is dropped
        """
        pass


class RedisFeedStore(FeedStore):
    """Stores the feed list as one JSON array under a single Redis key."""

    def __init__(self, redis: Redis, key: str | None = None):
        super().__init__()
        self.redis = redis
        self.key = key or get_settings().feeds_key

    async def get_feeds(self) -> list[Feed]:
        raw = await self.redis.get(self.key)
        if not raw:
            return []
        return [Feed.model_validate(item) for item in json.loads(raw)]

    async def save_feeds(self, feeds: list[Feed]) -> None:
        payload = [feed.model_dump(mode="json") for feed in feeds]
        await self.redis.set(self.key, json.dumps(payload))


class MemoryFeedStore(FeedStore):
    """Process-local store, used for tests and single-run tools."""

    def __init__(self, feeds: list[Feed] | None = None):
        super().__init__()
        self._feeds = [feed.model_copy(deep=True) for feed in feeds or []]

    async def get_feeds(self) -> list[Feed]:
        return [feed.model_copy(deep=True) for feed in self._feeds]

    async def save_feeds(self, feeds: list[Feed]) -> None:
        self._feeds = [feed.model_copy(deep=True) for feed in feeds]


def sorted_feeds(feeds: list[Feed]) -> list[Feed]:
    """Feeds in display order."""
    return sorted(feeds, key=lambda f: f.order)


async def add_feed(store: FeedStore, name: str, feed_url: str, site_url: str) -> Feed:
    """
    Subscribe to a feed.

    The new record gets a millisecond-timestamp id, an order after every
    existing feed, and fresh poll state (never checked, nothing known).

    Returns:
        The stored feed record
    """
    async with store.lock:
        feeds = await store.get_feeds()
        existing_ids = {f.id for f in feeds}
        stamp = int(time.time() * 1000)
        while str(stamp) in existing_ids:
            stamp += 1

        feed = Feed(
            id=str(stamp),
            order=max((f.order for f in feeds), default=0) + 1,
            name=name,
            feed_url=feed_url,
            site_url=site_url,
        )
        feeds.append(feed)
        await store.save_feeds(feeds)
    logger.info("Added feed %s (%s)", feed.id, feed.feed_url)
    return feed


async def update_feed(store: FeedStore, feed_id: str, **updates: Any) -> Feed | None:
    """
    Replace fields of a stored feed.

    Returns:
        The updated record, or None if no feed has that id
    """
    async with store.lock:
        feeds = await store.get_feeds()
        for index, feed in enumerate(feeds):
            if feed.id == feed_id:
                feeds[index] = Feed.model_validate({**feed.model_dump(), **updates})
                await store.save_feeds(feeds)
                return feeds[index]
    return None


async def delete_feed(store: FeedStore, feed_id: str) -> bool:
    """Remove a feed. Returns False if no feed has that id."""
    async with store.lock:
        feeds = await store.get_feeds()
        remaining = [f for f in feeds if f.id != feed_id]
        if len(remaining) == len(feeds):
            return False
        await store.save_feeds(remaining)
    logger.info("Deleted feed %s", feed_id)
    return True


async def reorder_feeds(store: FeedStore, ordered_ids: list[str]) -> list[Feed]:
    """Set each listed feed's order to its position; unknown ids are ignored."""
    positions = {feed_id: index for index, feed_id in enumerate(ordered_ids)}
    async with store.lock:
        feeds = await store.get_feeds()
        feeds = [
            f.model_copy(update={"order": positions[f.id]}) if f.id in positions else f
            for f in feeds
        ]
        await store.save_feeds(feeds)
    return sorted_feeds(feeds)


async def mark_read(store: FeedStore, feed_id: str) -> Feed | None:
    """Reset a feed's unread count after the user opens it."""
    return await update_feed(store, feed_id, unread_count=0)
