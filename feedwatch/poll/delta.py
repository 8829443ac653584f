"""Fold freshly parsed posts into a feed's stored poll state."""

from datetime import datetime, timezone
from typing import TypeVar

from feedwatch.feeds.models import FeedState, ParsedFeed

StateT = TypeVar("StateT", bound=FeedState)


def apply_poll(
    state: StateT, parsed: ParsedFeed, now: datetime | None = None
) -> StateT:
    """Compute the state that results from one successful poll.

    Every post id not already in state.known_post_ids is appended in document
    order. Unseen ids count towards unread_count unless this is the feed's
    first poll (last_checked is None), so subscribing never floods the badge.
    The input is not modified; a copy of the same model type is returned, so
    a Feed keeps its identity fields.

    Args:
        state: Current state of the feed
        parsed: The feed document that was just fetched
        now: Check timestamp; defaults to the current UTC time

    Returns:
        The updated state
    """
    is_first_check = state.last_checked is None
    known = set(state.known_post_ids)
    discovered: list[str] = []
    new_count = 0

    for post in parsed.posts:
        if post.id in known:
            continue
        known.add(post.id)
        discovered.append(post.id)
        if not is_first_check:
            new_count += 1

    return state.model_copy(
        update={
            "known_post_ids": [*state.known_post_ids, *discovered],
            "unread_count": state.unread_count + new_count,
            "last_checked": now or datetime.now(timezone.utc),
        }
    )
