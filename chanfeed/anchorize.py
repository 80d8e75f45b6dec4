from __future__ import annotations

import re
from typing import Match, Pattern

from chanfeed.models import Post

NOISE_TOKEN = "<wbr>"

# Strict URL grammar: a scheme is required, bare domains are not links.
# Quotes and angle brackets end a URL since comments are HTML fragments.
STRICT_URL_RE: Pattern[str] = re.compile(
    r"""
    (?:[a-zA-Z][a-zA-Z0-9+.\-]*://|mailto:)   # scheme
    [^\s<>"'`]+                               # authority, path, query
    (?<![.,;:!?])                             # trailing punctuation is prose
    """,
    re.VERBOSE,
)

_PROSE_PUNCT = ".,;:!?"


def _split_tail(url: str) -> tuple[str, str]:
    """Peel prose punctuation and unbalanced closing parens off the end of a match."""
    end = len(url)
    while end:
        last = url[end - 1]
        if last in _PROSE_PUNCT:
            end -= 1
        elif last == ")" and url.count("(", 0, end) < url.count(")", 0, end):
            end -= 1
        else:
            break
    return url[:end], url[end:]


def _link(m: Match[str]) -> str:
    url, tail = _split_tail(m.group(0))
    if not url:
        return m.group(0)
    return f"<a href='{url}'>{url}</a>{tail}"


class Anchorizer:
    """Turns a post into the HTML description of its feed item."""

    def __init__(self, pattern: Pattern[str] = STRICT_URL_RE):
        self._pattern = pattern

    def anchorize(self, text: str) -> str:
        return self._pattern.sub(_link, text)

    def transform(self, post: Post) -> str:
        description = self.anchorize(post.comment.replace(NOISE_TOKEN, ""))
        if post.file is not None:
            filename = post.file.filename
            description += f"<p>Original filename: {filename}</p>"
            description += (
                f"<a href='{post.file.image_url}'>"
                f"<img alt='{filename}' src='{post.file.thumb_url}'/></a>"
            )
        return description
