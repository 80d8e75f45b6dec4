from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class PostFile:
    """File attached to a post."""

    name: str
    ext: str
    image_url: str
    thumb_url: str
    file_id: Optional[int] = None

    @property
    def filename(self) -> str:
        return f"{self.name}{self.ext}"


@dataclass(frozen=True)
class Post:
    """Opening post of a thread, as listed on a board index page."""

    post_id: int
    subject: str
    comment: str
    name: str
    created_at: Optional[datetime]  # tz-aware UTC, None when the remote value is unusable
    file: Optional[PostFile] = None


@dataclass(frozen=True)
class Thread:
    op: Post
    replies: int  # excludes the opening post


@dataclass(frozen=True)
class FeedItem:
    title: str
    link: str
    description: str
    author: str
    published: Optional[datetime]

    @property
    def published_text(self) -> str:
        """RFC3339 form of the publication time, empty when unknown."""
        if self.published is None:
            return ""
        return self.published.isoformat()


@dataclass(frozen=True)
class Feed:
    title: str
    link: str
    description: str
    author: str
    updated: datetime
    items: tuple[FeedItem, ...] = field(default_factory=tuple)
