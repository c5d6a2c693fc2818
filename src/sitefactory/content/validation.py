"""Topic input checks and advisory article structure validation."""

from __future__ import annotations

import re
from typing import Any

from pydantic import BaseModel, Field

from sitefactory.errors.exceptions import ContentValidationError
from sitefactory.types import Article, Stage
from sitefactory.utils.text import strip_html

MAX_TOPIC_LENGTH = 200
MIN_CONTENT_CHARS = 100

_ANGLE_BRACKETS = re.compile(r"[<>]")
_WHITESPACE = re.compile(r"\s+")

# Phrases that read as machine-written.
AI_PHRASES: list[re.Pattern[str]] = [
    re.compile(r"delve into", re.I),
    re.compile(r"it's important to note", re.I),
    re.compile(r"furthermore", re.I),
    re.compile(r"it is crucial that", re.I),
    re.compile(r"it's worth noting", re.I),
]


class ArticleValidation(BaseModel):
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors


def validate_topic(topic: Any) -> str:
    """Return the stripped topic or raise ContentValidationError."""
    if not isinstance(topic, str) or not topic:
        raise ContentValidationError("Topic must be a non-empty string")
    trimmed = topic.strip()
    if not trimmed:
        raise ContentValidationError("Topic cannot be empty")
    if len(trimmed) > MAX_TOPIC_LENGTH:
        raise ContentValidationError(f"Topic must be less than {MAX_TOPIC_LENGTH} characters")
    return trimmed


def sanitize_topic(topic: Any) -> str:
    """Drop angle brackets, collapse whitespace and cap the length."""
    if not isinstance(topic, str):
        return ""
    cleaned = _ANGLE_BRACKETS.sub("", topic.strip())
    cleaned = _WHITESPACE.sub(" ", cleaned)
    return cleaned[:MAX_TOPIC_LENGTH]


def validate_stage_name(stage: str) -> str:
    valid = [s.value for s in Stage]
    if stage not in valid:
        raise ContentValidationError(
            f"Invalid stage name: {stage}. Valid stages: {', '.join(valid)}"
        )
    return stage


def validate_article(article: Article) -> ArticleValidation:
    """Errors for a missing title or content; warnings for weaker problems."""
    result = ArticleValidation()

    if not article.title.strip():
        result.errors.append("Article must have a non-empty title")
    if not article.content.strip():
        result.errors.append("Article must have non-empty content")

    if not article.excerpt:
        result.warnings.append("Article should have an excerpt")
    if not article.author:
        result.warnings.append("Article should have an author")

    if article.content:
        text = strip_html(article.content)
        if len(text) < MIN_CONTENT_CHARS:
            result.warnings.append(
                f"Article content seems too short (less than {MIN_CONTENT_CHARS} characters)"
            )
        found = sum(1 for pattern in AI_PHRASES if pattern.search(text))
        if found:
            result.warnings.append(f"Article contains AI-sounding phrases: {found} detected")

    return result
