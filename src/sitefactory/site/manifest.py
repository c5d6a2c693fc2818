"""Article manifest: the JSON document handed from generation to the site build."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from sitefactory.errors.exceptions import SiteBuildError
from sitefactory.types import Article

logger = logging.getLogger(__name__)


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()


class Manifest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    generated_at: str = Field(default_factory=_now_iso)
    model: str = ""
    pipeline: list[str] = Field(default_factory=list)
    articles: list[Article] = Field(default_factory=list)

    def average_quality(self) -> float | None:
        scores = [a.quality.scores.overall for a in self.articles if a.quality is not None]
        return sum(scores) / len(scores) if scores else None

    def grade_distribution(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for article in self.articles:
            if article.quality is not None:
                counts[article.quality.grade] = counts.get(article.quality.grade, 0) + 1
        return counts


def write_manifest(
    articles: list[Article],
    path: Path,
    meta: dict[str, Any] | None = None,
) -> Manifest:
    """Write ``{generatedAt, model, pipeline, articles}`` to ``path``.

    ``meta`` supplies ``model`` and ``pipeline`` (the stage names, empty
    for single-stage runs).
    """
    meta = meta or {}
    manifest = Manifest(
        model=meta.get("model", ""),
        pipeline=list(meta.get("pipeline") or []),
        articles=articles,
    )
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps(manifest.model_dump(mode="json", by_alias=True), indent=2),
            encoding="utf-8",
        )
    except OSError as e:
        raise SiteBuildError(f"Failed to write manifest: {e}", path=str(path)) from e

    logger.info("Wrote %d articles to %s", len(articles), path)
    return manifest


def load_manifest(path: Path) -> Manifest:
    """Read a manifest written by :func:`write_manifest`."""
    if not path.exists():
        raise SiteBuildError(f"Manifest not found: {path}", path=str(path))
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return Manifest.model_validate(data)
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        raise SiteBuildError(f"Invalid manifest {path}: {e}", path=str(path)) from e
