"""Pydantic models for normalized feeds and stored feed state."""

from datetime import datetime

from pydantic import BaseModel, Field

UNTITLED_FEED = "Untitled Feed"


class Post(BaseModel):
    """A single item/entry from a feed document."""

    id: str
    title: str = ""
    link: str = ""


class ParsedFeed(BaseModel):
    """A feed document normalized to title, site link and posts."""

    title: str = UNTITLED_FEED
    site_link: str = ""
    posts: list[Post] = Field(default_factory=list)


class FeedState(BaseModel):
    """Poll state for one feed.

    known_post_ids only ever grows. last_checked is None until the first
    successful poll.
    """

    known_post_ids: list[str] = Field(default_factory=list)
    unread_count: int = Field(default=0, ge=0)
    last_checked: datetime | None = None


class Feed(FeedState):
    """A subscribed feed as persisted by the feed store."""

    id: str
    order: int = 0
    name: str
    feed_url: str
    site_url: str = ""


class DiscoveredFeed(BaseModel):
    """Result of resolving a user supplied URL to a feed."""

    feed_url: str
    site_url: str
    title: str
