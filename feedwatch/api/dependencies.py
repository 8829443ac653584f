"""FastAPI dependencies for API routers."""

from collections.abc import AsyncGenerator

import httpx
from redis.asyncio import Redis

from feedwatch.config import get_settings
from feedwatch.feeds.fetcher import make_client
from feedwatch.storage import FeedStore, RedisFeedStore

_redis_client: Redis | None = None
_feed_store: FeedStore | None = None


def redis_client() -> Redis:
    """Return the process-wide async Redis client, creating it on first use."""
    global _redis_client

    if _redis_client is None:
        settings = get_settings()
        _redis_client = Redis.from_url(
            settings.redis_url,
            encoding="utf-8",
            decode_responses=False,
        )
    return _redis_client


async def get_redis() -> AsyncGenerator[Redis, None]:
    """Dependency for FastAPI routes to get an async Redis connection.

    Yields:
        Async Redis client instance
    """
    yield redis_client()


def feed_store() -> FeedStore:
    """Return the process-wide Redis feed store.

    API routes and the poll scheduler share this instance, and with it the
    store lock.
    """
    global _feed_store

    if _feed_store is None:
        _feed_store = RedisFeedStore(redis_client())
    return _feed_store


async def get_store() -> FeedStore:
    """Dependency returning the shared feed store."""
    return feed_store()


async def get_http_client() -> AsyncGenerator[httpx.AsyncClient, None]:
    """Dependency yielding an outbound HTTP client for one request."""
    async with make_client() as client:
        yield client
