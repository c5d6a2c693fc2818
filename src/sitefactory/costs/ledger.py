"""Persisted cost ledger model."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)


def _default_by_type() -> dict[str, float]:
    return {"llm": 0.0, "image": 0.0}


class CostLedger(BaseModel):
    """Running totals plus an append-only history of cost records."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total: float = 0.0
    by_date: dict[str, float] = Field(default_factory=dict)
    by_article: dict[str, float] = Field(default_factory=dict)
    by_model: dict[str, float] = Field(default_factory=dict)
    by_type: dict[str, float] = Field(default_factory=_default_by_type)
    history: list[dict[str, Any]] = Field(default_factory=list)

    @classmethod
    def load(cls, path: Path) -> CostLedger:
        """Read a ledger file; a missing or unreadable file gives an empty ledger."""
        if not path.exists():
            return cls()
        try:
            return cls.model_validate(json.loads(path.read_text()))
        except Exception as e:
            logger.warning("Error loading cost data from %s: %s", path, e)
            return cls()

    def save(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(self.model_dump(mode="json", by_alias=True), indent=2))
