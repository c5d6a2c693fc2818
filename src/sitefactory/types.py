"""Shared Pydantic models for sitefactory."""

from __future__ import annotations

from datetime import date
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# ── Enums ──


class Stage(StrEnum):
    DEFAULT = "default"
    BLUEPRINT = "blueprint"
    DRAFT = "draft"
    ENHANCE = "enhance"
    HUMANIZE = "humanize"
    SEO = "seo"


class RetryStrategy(StrEnum):
    EXPONENTIAL = "exponential"
    LINEAR = "linear"
    FIXED = "fixed"


class ErrorCategory(StrEnum):
    VALIDATION = "validation"
    API = "api"
    FILE_SYSTEM = "file_system"
    PIPELINE = "pipeline"
    NETWORK = "network"
    CONFIG = "config"
    UNKNOWN = "unknown"


class Severity(StrEnum):
    CRITICAL = "critical"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class ArticleSource(StrEnum):
    GENERATED = "generated"
    DRY_RUN = "dry_run"
    CACHE = "cache"
    PLACEHOLDER = "placeholder"


# ── Config models ──


class RetryConfig(BaseModel):
    max_attempts: int = 3
    base_delay: float = 1.0
    strategy: RetryStrategy = RetryStrategy.LINEAR
    rate_limit_strategy: RetryStrategy = RetryStrategy.EXPONENTIAL
    max_wait: float = 60.0


# ── Runtime models ──


class TokenUsage(BaseModel):
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0

    def add(self, other: TokenUsage) -> TokenUsage:
        return TokenUsage(
            prompt_tokens=self.prompt_tokens + other.prompt_tokens,
            completion_tokens=self.completion_tokens + other.completion_tokens,
            total_tokens=self.total_tokens + other.total_tokens,
        )


class LLMResponse(BaseModel):
    content: str
    model: str
    token_usage: TokenUsage = Field(default_factory=TokenUsage)
    finish_reason: str | None = None


class StageOutput(BaseModel):
    """Raw text produced by one pipeline stage."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    stage: str
    content: str
    token_usage: TokenUsage = Field(default_factory=TokenUsage)
    model: str = ""
    cached: bool = False


class CheckResult(BaseModel):
    """Outcome of one weighted scoring criterion."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    item: str
    status: str = "good"
    points: float = 0.0
    max_points: float = 0.0
    message: str | None = None

    @property
    def passed(self) -> bool:
        return self.status == "good"


class QualityScores(BaseModel):
    readability: float = 0.0
    seo: float = 0.0
    structure: float = 0.0
    engagement: float = 0.0
    overall: float = 0.0


class QualityReport(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    scores: QualityScores = Field(default_factory=QualityScores)
    grade: str = "F"
    recommendations: list[str] = Field(default_factory=list)
    seo_checks: list[CheckResult] = Field(default_factory=list)


def _today() -> str:
    return date.today().isoformat()


class Article(BaseModel):
    """A finished article as written to the manifest."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int | None = None
    title: str
    excerpt: str = ""
    content: str
    author: str = "AI Analyst"
    date: str = Field(default_factory=_today)
    category: str = "AI Insights"
    read_time: str = "5 min read"
    style: str = "medium"
    angle: str = "analytical"
    word_count: int = 0
    topic_slug: str = ""
    image: str | None = None
    featured: bool = False
    source: ArticleSource = ArticleSource.GENERATED
    degraded_stages: list[str] = Field(default_factory=list)
    quality: QualityReport | None = None
    token_usage: TokenUsage | None = Field(default=None, alias="_tokenUsage")

    def to_manifest_dict(self) -> dict[str, Any]:
        """Serialize with camelCase keys for the manifest and cache."""
        return self.model_dump(mode="json", by_alias=True)
