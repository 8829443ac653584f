"""Tests for folding parsed posts into feed state."""

from datetime import datetime, timedelta, timezone

from feedwatch.feeds.models import Feed, FeedState, ParsedFeed, Post
from feedwatch.poll.delta import apply_poll

EARLIER = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
NOW = datetime(2024, 1, 1, 13, 0, tzinfo=timezone.utc)


def parsed(*ids: str) -> ParsedFeed:
    return ParsedFeed(title="Feed", posts=[Post(id=i, title=i) for i in ids])


def test_first_check_records_ids_without_unread():
    """Test that the first poll learns every post but counts none as unread."""
    state = FeedState()

    result = apply_poll(state, parsed("a", "b", "c", "d", "e"), now=NOW)

    assert result.unread_count == 0
    assert result.known_post_ids == ["a", "b", "c", "d", "e"]
    assert result.last_checked == NOW


def test_first_check_keeps_existing_unread_count():
    """Test that the first poll leaves a non-zero unread count unchanged."""
    state = FeedState(unread_count=4)

    result = apply_poll(state, parsed("a", "b", "c", "d", "e"), now=NOW)

    assert result.unread_count == 4
    assert len(result.known_post_ids) == 5


def test_subsequent_check_counts_only_new_ids():
    """Test that 2 known and 3 new posts add exactly 3 unread."""
    state = FeedState(known_post_ids=["a", "b"], unread_count=1, last_checked=EARLIER)

    result = apply_poll(state, parsed("x", "a", "y", "b", "z"), now=NOW)

    assert result.unread_count == 4
    assert result.known_post_ids == ["a", "b", "x", "y", "z"]
    assert result.last_checked == NOW


def test_second_identical_poll_is_idempotent():
    """Test that re-applying the same document adds nothing."""
    state = FeedState(last_checked=EARLIER)
    doc = parsed("a", "b", "c")

    first = apply_poll(state, doc, now=NOW)
    second = apply_poll(first, doc, now=NOW + timedelta(hours=1))

    assert first.unread_count == 3
    assert second.unread_count == first.unread_count
    assert second.known_post_ids == first.known_post_ids
    assert second.last_checked == NOW + timedelta(hours=1)


def test_republished_old_post_is_not_counted_again():
    """Test that a post dropping out and coming back is not new."""
    state = FeedState(known_post_ids=["old", "mid"], last_checked=EARLIER)

    after_drop = apply_poll(state, parsed("new", "mid"), now=NOW)
    after_return = apply_poll(after_drop, parsed("old", "new", "mid"), now=NOW)

    assert after_drop.unread_count == 1
    assert after_return.unread_count == 1
    assert after_return.known_post_ids == ["old", "mid", "new"]


def test_duplicate_ids_in_one_document_count_once():
    """Test that a document repeating an id yields one unread and one known id."""
    state = FeedState(last_checked=EARLIER)

    result = apply_poll(state, parsed("dup", "dup", "other"), now=NOW)

    assert result.unread_count == 2
    assert result.known_post_ids == ["dup", "other"]


def test_input_state_is_not_mutated():
    """Test that the caller's state and its id list are left untouched."""
    ids = ["a"]
    state = FeedState(known_post_ids=ids, last_checked=EARLIER)

    result = apply_poll(state, parsed("a", "b"), now=NOW)

    assert ids == ["a"]
    assert state.known_post_ids == ["a"]
    assert state.unread_count == 0
    assert state.last_checked == EARLIER
    assert result.known_post_ids is not state.known_post_ids


def test_feed_record_keeps_identity_fields():
    """Test that a Feed comes back as a Feed with id, name and URLs intact."""
    feed = Feed(id="1", order=3, name="Blog", feed_url="https://b.example/rss")

    result = apply_poll(feed, parsed("a"), now=NOW)

    assert isinstance(result, Feed)
    assert result.id == "1"
    assert result.order == 3
    assert result.name == "Blog"
    assert result.feed_url == "https://b.example/rss"


def test_empty_document_only_updates_timestamp():
    """Test that a feed with no posts still records the check time."""
    state = FeedState(known_post_ids=["a"], unread_count=2, last_checked=EARLIER)

    result = apply_poll(state, parsed(), now=NOW)

    assert result.known_post_ids == ["a"]
    assert result.unread_count == 2
    assert result.last_checked == NOW


def test_default_timestamp_is_current_utc():
    """Test that last_checked defaults to an aware current time."""
    before = datetime.now(timezone.utc)

    result = apply_poll(FeedState(), parsed("a"))

    assert result.last_checked is not None
    assert result.last_checked.tzinfo is not None
    assert result.last_checked >= before
