"""Parse LLM response text into JSON payloads and Article models."""

from __future__ import annotations

import json
import logging
import math
from datetime import date
from typing import Any

from sitefactory.types import Article
from sitefactory.utils.text import count_words, strip_html

logger = logging.getLogger(__name__)

_WORDS_PER_MINUTE = 200


def extract_json(text: str) -> dict[str, Any]:
    """Parse the span from the first ``{`` to the last ``}``.

    Anything that does not yield a JSON object is wrapped as
    ``{"content": text}``.
    """
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end < start:
        return {"content": text}
    try:
        parsed = json.loads(text[start : end + 1])
    except json.JSONDecodeError:
        logger.warning("Failed to parse JSON response. Using raw content.")
        return {"content": text}
    if not isinstance(parsed, dict):
        return {"content": text}
    return parsed


def calculate_read_time(content: str) -> str:
    minutes = max(1, math.ceil(count_words(content) / _WORDS_PER_MINUTE))
    return f"{minutes} min read"


def parse_article_from_text(
    text: str,
    topic: str,
    category: str | None = None,
) -> Article:
    """Build an Article from raw model output, filling gaps with topic-based defaults."""
    parsed = extract_json(text)

    # extract_json wraps unparseable text as {"content": text}
    if parsed == {"content": text}:
        return Article(
            title=f"The Future of {topic}: What You Need to Know",
            excerpt=f"An in-depth look at {topic} and its impact on the industry.",
            content=f"<p>{text}</p>",
            date=date.today().isoformat(),
            read_time=calculate_read_time(text),
            category=category or "AI Insights",
        )

    content = _as_text(parsed.get("content")) or f"<p>{text}</p>"
    return Article(
        title=_as_text(parsed.get("title")) or f"The Future of {topic}: What You Need to Know",
        excerpt=_as_text(parsed.get("excerpt")) or f"An in-depth look at {topic} and its impact.",
        content=content,
        author=_as_text(parsed.get("author")) or "AI Analyst",
        date=_as_text(parsed.get("date")) or date.today().isoformat(),
        read_time=_as_text(parsed.get("readTime"))
        or calculate_read_time(_as_text(parsed.get("content")) or text),
        category=_as_text(parsed.get("category")) or category or "AI Insights",
    )


def validate_article_structure(article: Article) -> bool:
    """Title and content present, with more than 100 characters of text."""
    if not article.title or not article.content:
        return False
    return len(strip_html(article.content)) > 100


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, list):
        return "\n".join(_as_text(v) for v in value)
    return str(value)
