from __future__ import annotations

from datetime import datetime, timedelta, timezone

from chanfeed.feed_builder import assemble_feed, build_item, sort_items
from chanfeed.models import FeedItem
from helpers import make_file, make_post

T0 = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def _item(title: str, published):
    return FeedItem(title=title, link="", description="", author="", published=published)


def test_build_item_fields():
    post = make_post(post_id=4242, comment="hello https://example.com world<wbr>", name="Anon42")
    item = build_item(post, "news", 10)
    assert item.title == "[ 10] hello https://example.com world"
    assert item.link == "https://boards.4channel.org/news/thread/4242/"
    assert item.description == (
        "hello <a href='https://example.com'>https://example.com</a> world"
    )
    assert item.author == "Anon42"
    assert item.published == T0
    assert item.published_text == "2024-05-01T12:00:00+00:00"


def test_reply_count_display_is_padded_and_clamped():
    post = make_post(subject="s")
    assert build_item(post, "g", 7).title == "[  7] s"
    assert build_item(post, "g", 999).title == "[999] s"
    assert build_item(post, "g", 5000).title == "[999] s"
    assert build_item(post, "g", -3).title == "[  0] s"


def test_empty_author_is_kept_empty():
    assert build_item(make_post(name=""), "g", 1).author == ""


def test_file_only_post():
    item = build_item(make_post(file=make_file("poster", ".jpg")), "news", 11)
    assert item.title == "[ 11] poster.jpg"
    assert "<p>Original filename: poster.jpg</p>" in item.description
    assert "<img alt='poster.jpg' src='https://i.4cdn.org/news/1714564800123s.jpg'/>" in item.description


def test_sort_items_newest_first():
    t1, t2, t3 = T0 + timedelta(hours=2), T0 + timedelta(hours=1), T0
    items = [_item("3", t3), _item("1", t1), _item("2", t2)]
    assert [i.title for i in sort_items(items)] == ["1", "2", "3"]


def test_missing_publication_time_sorts_last():
    items = [_item("unknown", None), _item("old", T0), _item("new", T0 + timedelta(days=1))]
    assert [i.title for i in sort_items(items)] == ["new", "old", "unknown"]


def test_ties_keep_arrival_order():
    items = [_item("a", T0), _item("b", T0), _item("c", T0)]
    assert [i.title for i in sort_items(items)] == ["a", "b", "c"]


def test_assemble_feed_merges_boards_and_sets_envelope():
    now = T0 + timedelta(days=2)
    board_a = [_item("a-old", T0), _item("a-new", T0 + timedelta(hours=5))]
    board_b = [_item("b-mid", T0 + timedelta(hours=3))]
    feed = assemble_feed([board_a, board_b], min_replies=25, now=now)

    assert [i.title for i in feed.items] == ["a-new", "b-mid", "a-old"]
    assert feed.title == "4chan threads from multiple boards"
    assert feed.link == "https://boards.4channel.org/"
    assert feed.description == "Threads from multiple boards with more than 25 replies"
    assert feed.author == "Anon"
    assert feed.updated == now


def test_assemble_feed_defaults_update_time_to_now():
    before = datetime.now(timezone.utc)
    feed = assemble_feed([], min_replies=10)
    assert feed.items == ()
    assert feed.updated >= before


def test_assemble_feed_logs_time_span(caplog):
    items = [_item("old", T0), _item("new", T0 + timedelta(hours=1))]
    with caplog.at_level("INFO", logger="chanfeed.feed_builder"):
        assemble_feed([items], min_replies=10, now=T0)
    assert "items=2 newest=2024-05-01T13:00:00+00:00 oldest=2024-05-01T12:00:00+00:00" in caplog.text


def test_published_text_is_empty_when_unknown():
    assert _item("x", None).published_text == ""
