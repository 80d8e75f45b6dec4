from __future__ import annotations

import logging
import re

from feedgen.feed import FeedGenerator

from chanfeed.errors import ConfigError, EncodingError
from chanfeed.models import Feed

logger = logging.getLogger(__name__)

FEED_FORMATS = ("rss", "atom")

# Characters XML 1.0 cannot carry at all, even escaped.
_XML_ILLEGAL_RE = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\ufffe\uffff]")


def xml_safe(text: str) -> str:
    """Replace characters XML cannot represent with U+FFFD."""
    return _XML_ILLEGAL_RE.sub("\ufffd", text)


class FeedEncoder:
    """
    Serializes a Feed to RSS 2.0 or Atom with feedgen.

    Items are written in the order the Feed holds them.
    """

    def __init__(self, fmt: str = "rss"):
        fmt = fmt.strip().lower()
        if fmt not in FEED_FORMATS:
            raise ConfigError(f"Unknown feed format: {fmt!r} (expected one of {', '.join(FEED_FORMATS)})")
        self.fmt = fmt

    def encode(self, feed: Feed) -> str:
        """
        Raises:
            EncodingError: feedgen rejected the data (missing fields, naive datetimes)
        """
        try:
            fg = self._build(feed)
            if self.fmt == "atom":
                out = fg.atom_str(pretty=True)
            else:
                out = fg.rss_str(pretty=True)
        except (ValueError, TypeError) as e:
            logger.error("Feed encoding failed: format=%s err=%s", self.fmt, e)
            raise EncodingError(self.fmt, str(e)) from e

        logger.info("Encoded feed: format=%s items=%s bytes=%s", self.fmt, len(feed.items), len(out))
        return out.decode("utf-8")

    def _build(self, feed: Feed) -> FeedGenerator:
        atom = self.fmt == "atom"

        fg = FeedGenerator()
        if not atom:
            fg.load_extension("dc", atom=False, rss=True)

        fg.id(feed.link)
        fg.title(feed.title)
        fg.link(href=feed.link, rel="alternate")
        fg.description(feed.description)
        fg.author(name=feed.author)
        fg.managingEditor(feed.author)
        fg.updated(feed.updated)
        fg.lastBuildDate(feed.updated)

        for item in feed.items:
            title = xml_safe(item.title)
            description = xml_safe(item.description)
            author = xml_safe(item.author)

            fe = fg.add_entry(order="append")
            fe.id(item.link)
            fe.title(title)
            fe.link(href=item.link)
            if atom:
                fe.content(description, type="html")
                fe.updated(item.published or feed.updated)
                if item.published is not None:
                    fe.published(item.published)
                if author:
                    fe.author(name=author)
            else:
                fe.guid(item.link, permalink=True)
                fe.description(description)
                if item.published is not None:
                    fe.pubDate(item.published)
                if author:
                    fe.dc.dc_creator(author)
        return fg
