"""Failure types raised while fetching and normalizing feeds.

These never cross the public boundary of the feeds package: parse_feed,
fetch_and_parse and discover turn them into None.
"""


class FeedError(Exception):
    """Base class for feed fetching and parsing failures."""


class InvalidDocument(FeedError):
    """The document is malformed XML or neither RSS nor Atom."""


class NetworkFailure(FeedError):
    """Transport error or non-success HTTP status."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason


class DiscoveryExhausted(FeedError):
    """Every discovery strategy failed for a URL."""
