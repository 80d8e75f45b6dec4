from __future__ import annotations

from typing import Optional


class ChanFeedError(Exception):
    """Base class for failures that abort a feed run."""


class ConfigError(ChanFeedError):
    """Invalid run configuration, detected before any network activity."""


class FetchError(ChanFeedError):
    """A board index page could not be retrieved or parsed."""

    def __init__(self, board: str, page: int, reason: str):
        super().__init__(f"Failed to fetch board={board} page={page}: {reason}")
        self.board = board
        self.page = page
        self.reason = reason


class EncodingError(ChanFeedError):
    """The assembled feed could not be serialized."""

    def __init__(self, fmt: str, reason: Optional[str] = None):
        msg = f"Failed to encode {fmt} feed"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)
        self.fmt = fmt
