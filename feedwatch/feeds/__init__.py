"""Feed normalization and discovery for Feedwatch."""

from .discovery import discover
from .fetcher import fetch_and_parse
from .models import DiscoveredFeed, Feed, FeedState, ParsedFeed, Post
from .parser import parse_feed

__all__ = [
    "DiscoveredFeed",
    "Feed",
    "FeedState",
    "ParsedFeed",
    "Post",
    "discover",
    "fetch_and_parse",
    "parse_feed",
]
