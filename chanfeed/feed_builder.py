from __future__ import annotations

import logging
from datetime import datetime, timezone
from itertools import chain
from typing import Iterable, Optional, Sequence

from chanfeed.anchorize import Anchorizer
from chanfeed.models import Feed, FeedItem, Post
from chanfeed.titles import derive_title

logger = logging.getLogger(__name__)

THREAD_URL = "https://boards.4channel.org/{board}/thread/{post_id}/"

FEED_TITLE = "4chan threads from multiple boards"
FEED_LINK = "https://boards.4channel.org/"
FEED_AUTHOR = "Anon"
FEED_DESCRIPTION = "Threads from multiple boards with more than {min_replies} replies"

MAX_DISPLAY_REPLIES = 999

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)

_default_anchorizer = Anchorizer()


def build_item(
        post: Post,
        board: str,
        replies: int,
        anchorizer: Optional[Anchorizer] = None,
) -> FeedItem:
    """
    Feed entry for a thread's opening post.

    The reply count is clamped to 0..999 for the title prefix only.
    """
    anchorizer = anchorizer or _default_anchorizer
    shown = max(0, min(MAX_DISPLAY_REPLIES, replies))
    return FeedItem(
        title=f"[{shown:3d}] {derive_title(post)}",
        link=THREAD_URL.format(board=board, post_id=post.post_id),
        description=anchorizer.transform(post),
        author=post.name,
        published=post.created_at,
    )


def _sort_key(item: FeedItem) -> datetime:
    return item.published if item.published is not None else _OLDEST


def sort_items(items: Iterable[FeedItem]) -> list[FeedItem]:
    """
    Newest first. Items without a publication time go last; ties keep arrival order.
    """
    items = list(items)
    missing = sum(1 for it in items if it.published is None)
    if missing:
        logger.warning("Items without publication time sorted as oldest: count=%s", missing)
    return sorted(items, key=_sort_key, reverse=True)


def assemble_feed(
        per_board_items: Sequence[Sequence[FeedItem]],
        min_replies: int,
        now: Optional[datetime] = None,
) -> Feed:
    """Merge per-board items into one feed envelope, ordered by recency."""
    items = sort_items(chain.from_iterable(per_board_items))
    logger.info(
        "Assembled feed: items=%s newest=%s oldest=%s",
        len(items),
        items[0].published_text if items else "-",
        items[-1].published_text if items else "-",
    )
    return Feed(
        title=FEED_TITLE,
        link=FEED_LINK,
        description=FEED_DESCRIPTION.format(min_replies=min_replies),
        author=FEED_AUTHOR,
        updated=now or datetime.now(timezone.utc),
        items=tuple(items),
    )
