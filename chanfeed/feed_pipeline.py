from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from chanfeed.anchorize import Anchorizer
from chanfeed.board_fetcher import BoardFetcher
from chanfeed.errors import ConfigError
from chanfeed.feed_builder import assemble_feed, build_item
from chanfeed.feed_encoder import FeedEncoder
from chanfeed.models import Feed, FeedItem, Thread
from chanfeed.thread_filter import filter_threads

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunOptions:
    boards: tuple[str, ...]
    pages: int = 1
    min_replies: int = 10
    exclude: str = ""


def parse_boards(value: str) -> tuple[str, ...]:
    """
    Split a comma-separated board list.

    Raises:
        ConfigError: if the list is empty or has an empty entry (e.g. "news,,g")
    """
    boards = tuple(b.strip() for b in value.split(","))
    if not boards or any(not b for b in boards):
        raise ConfigError(f"Malformed board list: {value!r}")
    return boards


def make_options(boards: str, pages: int, min_replies: int, exclude: Optional[str] = None) -> RunOptions:
    """
    Validate raw run parameters before anything touches the network.

    Raises:
        ConfigError: page count below 1, negative reply threshold, bad board list
    """
    if pages < 1:
        raise ConfigError("page count (-p) must be greater than 0")
    if min_replies < 0:
        raise ConfigError("minimum reply count (-n) must not be negative")
    return RunOptions(
        boards=parse_boards(boards),
        pages=pages,
        min_replies=min_replies,
        exclude=exclude or "",
    )


def process_threads(
        threads: list[Thread],
        board: str,
        options: RunOptions,
        anchorizer: Optional[Anchorizer] = None,
) -> list[FeedItem]:
    kept = filter_threads(threads, options.min_replies, options.exclude)
    return [build_item(t.op, board, t.replies, anchorizer) for t in kept]


def build_feed(
        fetcher: BoardFetcher,
        options: RunOptions,
        anchorizer: Optional[Anchorizer] = None,
        now: Optional[datetime] = None,
) -> Feed:
    """
    Fetch every requested board and assemble one feed.

    Boards and pages are fetched sequentially. Any FetchError aborts the run.
    """
    per_board: list[list[FeedItem]] = []
    for board in options.boards:
        threads = fetcher.fetch_threads(board, options.pages)
        items = process_threads(threads, board, options, anchorizer)
        logger.info("Built items: board=%s threads=%s items=%s", board, len(threads), len(items))
        per_board.append(items)

    return assemble_feed(per_board, options.min_replies, now=now)


def render_feed(
        fetcher: BoardFetcher,
        options: RunOptions,
        encoder: FeedEncoder,
        now: Optional[datetime] = None,
) -> str:
    """Full run: fetch, filter, build, sort, encode."""
    feed = build_feed(fetcher, options, now=now)
    return encoder.encode(feed)
