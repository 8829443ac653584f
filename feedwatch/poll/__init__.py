"""Polling and unread tracking for Feedwatch."""

from .checker import badge_text, check_all_feeds, check_feed, total_unread
from .delta import apply_poll

__all__ = ["apply_poll", "badge_text", "check_all_feeds", "check_feed", "total_unread"]
