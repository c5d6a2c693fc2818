"""Cache entry and statistics models."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()


class CacheEntry(BaseModel):
    """One cached article or stage output, as stored on disk."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    topic: str
    prompt_version: str = "v1"
    stage: str | None = None
    article: Any = None
    cached_at: str = Field(default_factory=_now_iso)


class CacheStats(BaseModel):
    """Aggregate cache statistics."""

    entries: int = 0
    size_bytes: int = 0
    hits: int = 0
    misses: int = 0
    corrupted: int = 0

    @property
    def size_mb(self) -> float:
        return self.size_bytes / (1024 * 1024)

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0
