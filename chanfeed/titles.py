from __future__ import annotations

from bs4 import BeautifulSoup

from chanfeed.models import Post

TITLE_MAX_LEN = 80
NO_TITLE = "no title"


def html_to_text(html: str) -> str:
    """Plain text of a comment: line breaks kept, tags dropped, entities decoded."""
    if not html:
        return ""
    soup = BeautifulSoup(html, "lxml")
    for br in soup.find_all("br"):
        br.replace_with("\n")
    return soup.get_text()


def truncate(s: str, end: int) -> str:
    """
    Flatten newlines and keep the first ``min(len(s), end - 1)`` characters.

    The cut is measured on ``s`` as given, so strings shorter than ``end`` come back
    whole (with newlines turned into spaces).
    """
    unline = s.replace("\n", " ")
    return unline[: max(0, min(len(s), end - 1))]


def derive_title(post: Post) -> str:
    """
    Display title for a thread's opening post.

    Fallback chain: subject, then the comment as plain text, then the attached
    file's name, then a fixed placeholder. Never raises.
    """
    title = post.subject
    if not title:
        title = truncate(html_to_text(post.comment), TITLE_MAX_LEN).strip()
    if not title and post.file is not None:
        title = truncate(post.file.filename, TITLE_MAX_LEN)
    if not title:
        title = NO_TITLE
    return title
