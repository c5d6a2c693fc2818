"""Prompt template loading with ``{variable}`` substitution."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

BUNDLED_PROMPTS_DIR = Path(__file__).resolve().parent.parent / "prompts"

# Only bare identifiers are placeholders, so JSON examples in templates survive.
_PLACEHOLDER_PATTERN = re.compile(r"\{(\w+)\}")


def default_prompt(topic: str) -> str:
    """Built-in prompt used when no template file exists for a stage."""
    return (
        f"Write a comprehensive, engaging article about: {topic}\n"
        "\n"
        "Requirements:\n"
        "- Title: Catchy, SEO-friendly title\n"
        "- Excerpt: 2-3 sentence summary (150-200 characters)\n"
        "- Content: 800-1200 word article in HTML format\n"
        "- Structure: Introduction, 3-5 main sections, conclusion\n"
        '- Style: Natural, human-like voice. Avoid AI-sounding phrases like "delve into", '
        "\"it's important to note\"\n"
        "- Include: Practical insights, examples, actionable takeaways\n"
        "\n"
        "Output format: JSON with fields: title, excerpt, content (HTML), author, category"
    )


def render_template(template: str, variables: dict[str, Any]) -> str:
    """Replace ``{name}`` placeholders; unknown names are left in place."""

    def _sub(match: re.Match[str]) -> str:
        name = match.group(1)
        if name not in variables:
            return match.group(0)
        value = variables[name]
        return "" if value is None else str(value)

    rendered = _PLACEHOLDER_PATTERN.sub(_sub, template)

    unreplaced = sorted({m.group(0) for m in _PLACEHOLDER_PATTERN.finditer(rendered)})
    if unreplaced:
        logger.warning("Unreplaced variables in prompt: %s", ", ".join(unreplaced))
    return rendered


class PromptLoader:
    """Resolves ``<stage>.md`` templates.

    A user-supplied ``prompts_dir`` is searched before the bundled
    templates. A stage with no template anywhere gets :func:`default_prompt`.
    """

    def __init__(self, prompts_dir: Path | None = None) -> None:
        self._search_dirs: list[Path] = []
        if prompts_dir is not None:
            self._search_dirs.append(Path(prompts_dir))
        self._search_dirs.append(BUNDLED_PROMPTS_DIR)

    def find(self, stage: str) -> Path | None:
        for directory in self._search_dirs:
            candidate = directory / f"{stage}.md"
            if candidate.is_file():
                return candidate
        return None

    def load(self, stage: str, variables: dict[str, Any]) -> str:
        path = self.find(stage)
        if path is None:
            logger.debug("No prompt template for stage '%s', using default", stage)
            return default_prompt(str(variables.get("topic", "")))
        return render_template(path.read_text(), variables)
