"""Text and markup normalization helpers for article bodies."""

from __future__ import annotations

import html
import re

from bs4 import BeautifulSoup

WHITESPACE_PATTERN = re.compile(r"\s+")
NEWLINE_PATTERN = re.compile(r"\r\n|\r|\n")
KEPT_TAGS = {"a"}


def collapse_whitespace(text: str) -> str:
    """Collapse whitespace runs to single spaces and trim."""
    return WHITESPACE_PATTERN.sub(" ", text).strip()


def wrap_text(tag: str, text: str) -> str:
    """Wrap escaped text in a bare ``<tag>`` with no attributes."""
    return f"<{tag}>{html.escape(text, quote=False)}</{tag}>"


def strip_tags(markup: str, keep: set[str] | None = None) -> str:
    """Remove every tag except the kept ones; anchors keep only their href."""
    kept = KEPT_TAGS if keep is None else keep
    soup = BeautifulSoup(markup, "html.parser")
    for tag in soup.find_all(True):
        if tag.name not in kept:
            tag.unwrap()
            continue
        href = tag.get("href")
        tag.attrs = {"href": href} if href else {}
    return str(soup)


def nl2br(text: str) -> str:
    """Insert ``<br />`` before every line break."""
    return NEWLINE_PATTERN.sub(lambda match: "<br />" + match.group(0), text)
