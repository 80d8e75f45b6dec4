from __future__ import annotations

import logging
from typing import Optional, Sequence

from chanfeed.models import Thread
from chanfeed.titles import derive_title

logger = logging.getLogger(__name__)


def is_wanted(thread: Thread, min_replies: int, exclude: Optional[str] = None) -> bool:
    if thread.replies < min_replies:
        return False
    if exclude and exclude.lower() in derive_title(thread.op).lower():
        return False
    return True


def filter_threads(
        threads: Sequence[Thread],
        min_replies: int,
        exclude: Optional[str] = None,
) -> list[Thread]:
    """
    Keep threads with at least ``min_replies`` replies whose derived title does not
    contain ``exclude`` (case-insensitive).

    - Does not mutate input
    - Keeps ordering
    """
    kept = [t for t in threads if is_wanted(t, min_replies, exclude)]
    logger.info(
        "Filtered threads: kept=%s dropped=%s min_replies=%s exclude=%r",
        len(kept),
        len(threads) - len(kept),
        min_replies,
        exclude or "",
    )
    return kept
