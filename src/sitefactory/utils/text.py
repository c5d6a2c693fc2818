"""HTML and text helpers shared by parsing, scoring and rendering."""

from __future__ import annotations

import re

_TAG_PATTERN = re.compile(r"<[^>]*>")
_WHITESPACE = re.compile(r"\s+")
_NON_SLUG_RUN = re.compile(r"[^a-z0-9]+")

MAX_SLUG_LENGTH = 60


def strip_html(html: str) -> str:
    """Replace tags with spaces and collapse whitespace."""
    text = _TAG_PATTERN.sub(" ", html or "")
    return _WHITESPACE.sub(" ", text).strip()


def count_words(html: str) -> int:
    return len(strip_html(html).split())


def slugify(text: str, max_length: int = MAX_SLUG_LENGTH) -> str:
    """URL slug: lowercase alphanumeric runs joined by single hyphens."""
    slug = _NON_SLUG_RUN.sub("-", (text or "").lower()).strip("-")
    return slug[:max_length].rstrip("-")
