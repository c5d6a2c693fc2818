"""Lens system: named perspectives for exploring one topic several ways."""

from __future__ import annotations

import logging
import random
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

_LENSES_YAML = Path(__file__).parent / "data" / "lenses.yaml"

DEFAULT_LENS = "analytical"
DEFAULT_PRIORITY = ["analytical", "practical", "reflective"]
PERSPECTIVE_STYLES = ["short", "medium", "long"]


class Lens(BaseModel):
    key: str
    name: str
    description: str = ""
    tone: str = ""
    focus: list[str] = Field(default_factory=list)
    question: str = ""
    voice: str = ""
    structure: str = ""
    examples: list[str] = Field(default_factory=list)


class Perspective(BaseModel):
    """One lens applied to a topic, with the style chosen for it."""

    lens: Lens
    style: str
    perspective: int
    total_perspectives: int


class LensSystem:
    """Lens definitions, combinations and per-category priorities loaded from lenses.yaml."""

    def __init__(
        self,
        lenses_path: Path | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._rng = rng or random.Random()
        self._lenses: dict[str, Lens] = {}
        self._combinations: dict[str, list[str]] = {}
        self._priorities: dict[str, list[str]] = {}
        self._load(lenses_path or _LENSES_YAML)

    def _load(self, path: Path) -> None:
        if not path.exists():
            logger.warning("Lens definitions not found: %s", path)
            return

        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)

        if not isinstance(data, dict) or "lenses" not in data:
            logger.warning("Invalid lens YAML: missing 'lenses' key")
            return

        for key, info in data["lenses"].items():
            if isinstance(info, dict):
                self._lenses[key] = Lens(key=key, **info)
        self._combinations = dict(data.get("combinations") or {})
        self._priorities = dict(data.get("category_priorities") or {})

    def all_lenses(self) -> list[str]:
        return list(self._lenses)

    def get_lens(self, name: str | None) -> Lens:
        """Lens by key; unknown names get the analytical lens."""
        return self._lenses.get(name or DEFAULT_LENS) or self._lenses[DEFAULT_LENS]

    def combination(self, name: str) -> list[str]:
        return list(self._combinations.get(name) or self._combinations.get("comprehensive", []))

    def recommended_lenses(self, category: str | None, count: int = 3) -> list[str]:
        priority = self._priorities.get(category or "", DEFAULT_PRIORITY)
        return priority[:count]

    def lenses_for_topic(
        self,
        category: str | None,
        count: int = 3,
        include_variety: bool = True,
    ) -> list[Lens]:
        """Category-priority lenses, topped up with random unused ones to reach ``count``."""
        selected = self.recommended_lenses(category, count)

        if include_variety and count > 1:
            used = set(selected)
            while len(selected) < count:
                available = [name for name in self._lenses if name not in used]
                if not available:
                    break
                pick = self._rng.choice(available)
                selected.append(pick)
                used.add(pick)

        return [self.get_lens(name) for name in selected]

    def random_lens(self) -> Lens:
        return self._lenses[self._rng.choice(list(self._lenses))]

    @staticmethod
    def lens_prompt(topic: str, lens: Lens) -> str:
        """Prompt section steering the article toward ``lens``."""
        return "\n".join(
            [
                f'Approach the topic "{topic}" from the "{lens.name}" lens:',
                "",
                f"Focus: {lens.description}",
                f"Tone: {lens.tone}",
                f"Key Question: {lens.question}",
                f"Voice: Write as a {lens.voice}",
                "",
                f"Emphasize: {', '.join(lens.focus)}",
                "",
                f"Structure your article to answer: {lens.question}",
            ]
        )

    def multiple_perspectives(
        self,
        topic: Any,
        count: int = 3,
        vary_styles: bool = True,
        base_style: str = "medium",
    ) -> list[Perspective]:
        """``count`` lenses for one topic, cycling short/medium/long when ``vary_styles``.

        The topic's ``category`` attribute picks the lens priority; a bare
        string topic gets the default priority.
        """
        lenses = self.lenses_for_topic(getattr(topic, "category", None), count)
        return [
            Perspective(
                lens=lens,
                style=PERSPECTIVE_STYLES[i % len(PERSPECTIVE_STYLES)] if vary_styles else base_style,
                perspective=i + 1,
                total_perspectives=count,
            )
            for i, lens in enumerate(lenses)
        ]
