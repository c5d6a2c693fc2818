"""Per-category voice profiles and the prompt guidance built from them."""

from __future__ import annotations

import logging
import random
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

_VOICES_YAML = Path(__file__).parent / "data" / "voices.yaml"

DEFAULT_VOICE = "default"


class VoiceProfile(BaseModel):
    name: str
    tone: str = ""
    characteristics: list[str] = Field(default_factory=list)
    openings: list[str] = Field(default_factory=list)
    transitions: list[str] = Field(default_factory=list)
    closings: list[str] = Field(default_factory=list)
    avoid: list[str] = Field(default_factory=list)
    prefer_words: list[str] = Field(default_factory=list)
    avoid_words: list[str] = Field(default_factory=list)


_FALLBACK_PROFILE = VoiceProfile(name="Thoughtful Writer", tone="engaging, clear, insightful")


class VoiceSystem:
    """Voice profiles loaded from voices.yaml, keyed by topic category."""

    def __init__(
        self,
        voices_path: Path | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._rng = rng or random.Random()
        self._profiles: dict[str, VoiceProfile] = {}
        self._load(voices_path or _VOICES_YAML)

    def _load(self, path: Path) -> None:
        if not path.exists():
            logger.warning("Voice profiles not found: %s", path)
            return

        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)

        if not isinstance(data, dict) or "voices" not in data:
            logger.warning("Invalid voice YAML: missing 'voices' key")
            return

        for category, info in data["voices"].items():
            if isinstance(info, dict):
                self._profiles[category] = VoiceProfile(**info)

    def categories(self) -> list[str]:
        return [c for c in self._profiles if c != DEFAULT_VOICE]

    def profile(self, category: str | None) -> VoiceProfile:
        """Profile for ``category`` (case-insensitive), else the default voice."""
        key = (category or "").lower()
        return (
            self._profiles.get(key)
            or self._profiles.get(DEFAULT_VOICE)
            or _FALLBACK_PROFILE
        )

    def opening_suggestion(self, category: str | None) -> str:
        openings = self.profile(category).openings
        return self._rng.choice(openings) if openings else ""

    def voice_guidance(self, category: str | None) -> str:
        """Markdown block describing the voice to write in."""
        p = self.profile(category)
        lines = [
            "**Voice and Style Guidance:**",
            "",
            f"**Voice Profile:** {p.name}",
            f"**Tone:** {p.tone}",
            "",
            "**Characteristics:**",
            *(f"- {c}" for c in p.characteristics),
            "",
            "**Writing Patterns:**",
            f"- Opening style: {p.openings[0] if p.openings else ''}",
            f"- Transition style: {p.transitions[0] if p.transitions else ''}",
            f"- Closing style: {p.closings[0] if p.closings else ''}",
            "",
            "**Word Choices:**",
            f"- Prefer: {', '.join(p.prefer_words)}",
            f"- Avoid: {', '.join(p.avoid_words)}",
            "",
            "**What to Avoid:**",
            *(f"- {a}" for a in p.avoid),
            "",
            "**Voice Principles:**",
            f"1. Write with {p.tone} tone",
            "2. Create engaging, natural flow",
            f"3. Use {p.name.lower()} voice characteristics",
            "4. Balance depth with accessibility",
            "5. Make content enjoyable and valuable to read",
            "",
            "Maintain this voice consistently throughout the article while ensuring "
            "natural, human-like writing that readers will enjoy.",
        ]
        return "\n".join(lines)
