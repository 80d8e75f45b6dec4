from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Optional

import requests

from chanfeed.errors import FetchError
from chanfeed.http_client import HttpClient
from chanfeed.models import Post, PostFile, Thread

logger = logging.getLogger(__name__)


class BoardFetcher:
    """
    Reader for the 4chan read-only JSON API.

    Scope:
    - Board index page: https://a.4cdn.org/<board>/<page>.json (1-indexed remotely)
    - Only the opening post and the reply count of each thread are kept.
    """

    def __init__(
        self,
        http: HttpClient,
        api_base_url: str = "https://a.4cdn.org",
        image_base_url: str = "https://i.4cdn.org",
    ):
        self.http = http
        self.api_base_url = api_base_url.rstrip("/")
        self.image_base_url = image_base_url.rstrip("/")

    def fetch_page(self, board: str, page: int) -> list[Thread]:
        """
        Fetch the threads listed on one index page. ``page`` is 0-indexed.

        Raises:
            FetchError: on HTTP/network failure or a malformed payload.
        """
        url = f"{self.api_base_url}/{board}/{page + 1}.json"
        logger.info("Fetching board index: board=%s page=%s url=%s", board, page, url)
        try:
            data = self.http.get_json(url)
        except requests.RequestException as e:
            raise FetchError(board, page, str(e)) from e

        try:
            return self._parse_index(data, board)
        except (KeyError, TypeError, ValueError) as e:
            raise FetchError(board, page, f"malformed index payload ({e!r})") from e

    def fetch_threads(self, board: str, pages: int) -> list[Thread]:
        """Fetch pages 0..pages-1 sequentially and concatenate them in page order."""
        threads: list[Thread] = []
        for page in range(pages):
            threads.extend(self.fetch_page(board, page))
        logger.info("Fetched threads: board=%s pages=%s count=%s", board, pages, len(threads))
        return threads

    # -------------------------
    # Parsing (unit-test target)
    # -------------------------

    def _parse_index(self, data: Any, board: str) -> list[Thread]:
        if not isinstance(data, dict) or not isinstance(data.get("threads"), list):
            raise ValueError("expected an object with a 'threads' list")

        out: list[Thread] = []
        for raw in data["threads"]:
            posts = raw["posts"]
            if not posts:
                raise ValueError("thread without posts")
            op = self._parse_post(posts[0], board)
            replies = int(raw.get("omitted_posts", 0)) + len(posts) - 1
            out.append(Thread(op=op, replies=replies))
        return out

    def _parse_post(self, raw: dict, board: str) -> Post:
        return Post(
            post_id=int(raw["no"]),
            subject=raw.get("sub", ""),
            comment=raw.get("com", ""),
            name=raw.get("name", ""),
            created_at=self._parse_time(raw.get("time"), raw["no"]),
            file=self._parse_file(raw, board),
        )

    def _parse_file(self, raw: dict, board: str) -> Optional[PostFile]:
        if "tim" not in raw or "ext" not in raw:
            return None
        file_id = int(raw["tim"])
        return PostFile(
            name=raw.get("filename", ""),
            ext=raw["ext"],
            image_url=f"{self.image_base_url}/{board}/{file_id}{raw['ext']}",
            thumb_url=f"{self.image_base_url}/{board}/{file_id}s.jpg",
            file_id=file_id,
        )

    def _parse_time(self, value: Any, post_id: Any) -> Optional[datetime]:
        # A bad timestamp only degrades ordering for this post; it does not fail the page.
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            logger.warning("Missing or malformed timestamp: post_id=%s value=%r", post_id, value)
            return None
        try:
            return datetime.fromtimestamp(value, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            logger.warning("Timestamp out of range: post_id=%s value=%r", post_id, value)
            return None
