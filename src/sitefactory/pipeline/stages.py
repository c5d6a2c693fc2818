"""Stage definitions: ordering, token budgets and advisory output checks."""

from __future__ import annotations

import json
from typing import Any

from sitefactory.types import Stage

DEFAULT_STAGES: list[str] = [Stage.BLUEPRINT, Stage.DRAFT, Stage.ENHANCE]
FULL_STAGES: list[str] = [*DEFAULT_STAGES, Stage.HUMANIZE, Stage.SEO]

BLUEPRINT_MAX_TOKENS = 1500
STAGE_MAX_TOKENS = 2500

_MIN_LONGFORM_CHARS = 200
_BLUEPRINT_MARKERS = ("title", "sections", "thesis")

# Every template variable gets a value so rendering never leaves placeholders.
TEMPLATE_VARIABLES: dict[str, str] = {
    "topic": "",
    "previous_content": "",
    "category": "",
    "style": "medium",
    "word_count": "800-1200",
    "sections": "3",
    "angle": "analytical",
    "lens_guidance": "",
    "voice_guidance": "",
}


def max_tokens_for(stage: str) -> int:
    return BLUEPRINT_MAX_TOKENS if stage == Stage.BLUEPRINT else STAGE_MAX_TOKENS


def build_variables(topic: str, extra: dict[str, Any] | None = None) -> dict[str, Any]:
    variables: dict[str, Any] = dict(TEMPLATE_VARIABLES)
    variables["topic"] = topic
    if extra:
        variables.update({k: v for k, v in extra.items() if v is not None})
    return variables


def validate_stage_output(output: Any, stage: str) -> bool:
    """Advisory check on one stage's raw output. Never raises."""
    if output is None:
        return False
    text = output if isinstance(output, str) else json.dumps(output)
    if not text.strip():
        return False

    if stage == Stage.BLUEPRINT:
        if isinstance(output, dict):
            return any(output.get(m) for m in _BLUEPRINT_MARKERS)
        return any(m in text for m in _BLUEPRINT_MARKERS)

    if stage in (Stage.DRAFT, Stage.ENHANCE):
        return len(text) > _MIN_LONGFORM_CHARS

    return True
