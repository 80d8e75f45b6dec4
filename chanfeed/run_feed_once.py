from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from chanfeed.board_fetcher import BoardFetcher
from chanfeed.errors import ChanFeedError
from chanfeed.feed_encoder import FEED_FORMATS, FeedEncoder
from chanfeed.feed_pipeline import make_options, render_feed
from chanfeed.http_client import HttpClient, HttpConfig
from chanfeed.settings import FeedSettings, load_settings

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)


def build_parser(s: FeedSettings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chanfeed",
        description="Build one RSS/Atom feed from busy threads on several 4chan boards.",
    )
    parser.add_argument("-n", dest="replies", type=int, default=s.min_replies,
                        help="Minimum number of replies required to include a thread")
    parser.add_argument("-p", dest="pages", type=int, default=s.pages,
                        help="Number of pages to fetch per board")
    parser.add_argument("-b", dest="boards", default=s.boards,
                        help="Comma-separated list of board names")
    parser.add_argument("-f", dest="filter_string", default=s.filter_string,
                        help="String to filter out from thread titles (e.g. 'general')")
    parser.add_argument("--format", dest="feed_format", choices=FEED_FORMATS,
                        default=s.feed_format, help="Output feed format")
    parser.add_argument("-o", dest="output", default=s.output_path,
                        help="Output file path")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    try:
        s = load_settings()
    except ChanFeedError as e:
        # Usage still shows the built-in defaults.
        build_parser(FeedSettings.model_construct()).print_usage(sys.stderr)
        logger.error("%s", e)
        return 1

    parser = build_parser(s)
    args = parser.parse_args(argv)

    try:
        options = make_options(args.boards, args.pages, args.replies, args.filter_string)
        encoder = FeedEncoder(args.feed_format)

        http = HttpClient(
            HttpConfig(
                timeout_sec=s.request_timeout_sec,
                delay_sec=s.request_delay_sec,
                max_retries=s.max_retries,
                backoff_base_sec=s.backoff_base_sec,
                backoff_max_sec=s.backoff_max_sec,
                user_agent=s.user_agent,
            )
        )
        fetcher = BoardFetcher(http, api_base_url=s.api_base_url, image_base_url=s.image_base_url)

        document = render_feed(fetcher, options, encoder)
    except ChanFeedError as e:
        parser.print_usage(sys.stderr)
        logger.error("%s", e)
        return 1

    try:
        Path(args.output).write_text(document, encoding="utf-8")
    except OSError as e:
        logger.error("Failed to write feed to file: path=%s err=%s", args.output, e)
        return 1

    print(f"{args.feed_format.upper()} feed saved to {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
