"""Builders and fakes shared by the test modules."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

import requests

from chanfeed.http_client import HttpClient, HttpConfig
from chanfeed.models import Post, PostFile, Thread


class FakeHttp(HttpClient):
    """Serves canned JSON keyed by URL; unknown URLs fail like a 404."""

    def __init__(self, pages: Optional[dict[str, Any]] = None):
        super().__init__(
            HttpConfig(
                timeout_sec=1.0,
                delay_sec=0.0,
                max_retries=0,
                backoff_base_sec=0.0,
                backoff_max_sec=0.0,
                user_agent="test",
            )
        )
        self.pages = pages or {}
        self.requested: list[str] = []

    def get_json(self, url: str) -> Any:
        self.requested.append(url)
        if url not in self.pages:
            raise requests.HTTPError(f"404 Client Error: Not Found for url: {url}")
        return self.pages[url]


def make_post(
        post_id: int = 1,
        subject: str = "",
        comment: str = "",
        name: str = "Anonymous",
        created_at: Optional[datetime] = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
        file: Optional[PostFile] = None,
) -> Post:
    return Post(
        post_id=post_id,
        subject=subject,
        comment=comment,
        name=name,
        created_at=created_at,
        file=file,
    )


def make_file(name: str = "cat", ext: str = ".png") -> PostFile:
    return PostFile(
        name=name,
        ext=ext,
        image_url=f"https://i.4cdn.org/news/1714564800123{ext}",
        thumb_url="https://i.4cdn.org/news/1714564800123s.jpg",
        file_id=1714564800123,
    )


def make_thread(replies: int, **post_kwargs: Any) -> Thread:
    return Thread(op=make_post(**post_kwargs), replies=replies)
