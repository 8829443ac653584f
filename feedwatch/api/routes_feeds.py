"""Subscribed feed endpoints for the Feedwatch API."""

import httpx
from fastapi import APIRouter, Depends, HTTPException, Request, Response
from pydantic import BaseModel, Field
from slowapi import Limiter
from slowapi.util import get_remote_address

from feedwatch.api.dependencies import get_http_client, get_store
from feedwatch.feeds.discovery import discover
from feedwatch.feeds.models import Feed
from feedwatch.poll.checker import badge_text, check_all_feeds, total_unread
from feedwatch.storage import (
    FeedStore,
    add_feed,
    delete_feed,
    mark_read,
    reorder_feeds,
    sorted_feeds,
    update_feed,
)

router = APIRouter(prefix="/api/feeds", tags=["feeds"])
limiter = Limiter(key_func=get_remote_address)


class AddFeedRequest(BaseModel):
    url: str = Field(min_length=1, max_length=2048)
    name: str | None = Field(default=None, max_length=200)


class UpdateFeedRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    feed_url: str | None = Field(default=None, min_length=1, max_length=2048)
    site_url: str | None = Field(default=None, max_length=2048)


class ReorderRequest(BaseModel):
    ids: list[str]


def _feed_list(feeds: list[Feed]) -> dict:
    unread = total_unread(feeds)
    return {
        "feeds": [feed.model_dump(mode="json") for feed in sorted_feeds(feeds)],
        "unread": unread,
        "badge": badge_text(unread),
    }


@router.get("")
async def list_feeds(store: FeedStore = Depends(get_store)):
    """
    List subscribed feeds in display order.

    Returns:
        feeds, the total unread count and the badge text for that count
    """
    return _feed_list(await store.get_feeds())


@router.post("", status_code=201)
@limiter.limit("30/minute")
async def create_feed(
    request: Request,
    body: AddFeedRequest,
    store: FeedStore = Depends(get_store),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    """
    Subscribe to a feed given either its URL or a web page that links to it.

    The feed starts with no known posts; its first poll records the current
    posts without counting them as unread.

    Discovery makes up to eight outbound requests, hence the rate limit.

    Raises:
        HTTPException: 422 if discovery finds no feed
    """
    found = await discover(body.url.strip(), client)
    if found is None:
        raise HTTPException(status_code=422, detail="No feed found at this URL")

    feed = await add_feed(
        store,
        name=(body.name or "").strip() or found.title,
        feed_url=found.feed_url,
        site_url=found.site_url,
    )
    return feed.model_dump(mode="json")


@router.post("/check")
async def check_feeds(
    store: FeedStore = Depends(get_store),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    """Poll every feed now and return the updated list."""
    return _feed_list(await check_all_feeds(store, client))


@router.post("/reorder")
async def reorder(body: ReorderRequest, store: FeedStore = Depends(get_store)):
    """Set display order to the order of the given ids."""
    return _feed_list(await reorder_feeds(store, body.ids))


@router.patch("/{feed_id}")
async def edit_feed(
    feed_id: str, body: UpdateFeedRequest, store: FeedStore = Depends(get_store)
):
    """Rename a feed or change its URLs; poll state is kept."""
    updates = body.model_dump(exclude_none=True)
    feed = await update_feed(store, feed_id, **updates)
    if feed is None:
        raise HTTPException(status_code=404, detail="Feed not found")
    return feed.model_dump(mode="json")


@router.post("/{feed_id}/read")
async def read_feed(feed_id: str, store: FeedStore = Depends(get_store)):
    """Mark all posts of a feed as read."""
    feed = await mark_read(store, feed_id)
    if feed is None:
        raise HTTPException(status_code=404, detail="Feed not found")
    return feed.model_dump(mode="json")


@router.delete("/{feed_id}", status_code=204)
async def remove_feed(feed_id: str, store: FeedStore = Depends(get_store)):
    """Unsubscribe from a feed."""
    if not await delete_feed(store, feed_id):
        raise HTTPException(status_code=404, detail="Feed not found")
    return Response(status_code=204)
