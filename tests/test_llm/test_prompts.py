"""Tests for prompt template loading."""

from sitefactory.llm.prompts import (
    BUNDLED_PROMPTS_DIR,
    PromptLoader,
    default_prompt,
    render_template,
)
from sitefactory.pipeline.stages import TEMPLATE_VARIABLES


class TestRenderTemplate:
    def test_substitutes_known_names(self):
        assert render_template("About {topic} in {style}", {"topic": "AI", "style": "short"}) == (
            "About AI in short"
        )

    def test_unknown_names_left_in_place(self, caplog):
        assert render_template("Hello {name}", {}) == "Hello {name}"
        assert "{name}" in caplog.text

    def test_none_becomes_empty(self):
        assert render_template("[{lens_guidance}]", {"lens_guidance": None}) == "[]"

    def test_json_examples_survive(self):
        template = 'Return {"title": "...", "content": "..."} for {topic}'
        assert render_template(template, {"topic": "AI"}) == (
            'Return {"title": "...", "content": "..."} for AI'
        )


class TestPromptLoader:
    def test_bundled_templates_exist(self):
        for stage in ("default", "blueprint", "draft", "enhance", "humanize", "seo"):
            assert (BUNDLED_PROMPTS_DIR / f"{stage}.md").is_file()

    def test_bundled_templates_render_fully(self):
        loader = PromptLoader()
        variables = dict(
            TEMPLATE_VARIABLES, topic="Power BI", previous_content="Earlier draft on Power BI"
        )
        for stage in ("default", "blueprint", "draft", "enhance", "humanize", "seo"):
            prompt = loader.load(stage, variables)
            assert "Power BI" in prompt
            for name in TEMPLATE_VARIABLES:
                assert "{" + name + "}" not in prompt

    def test_user_dir_overrides_bundled(self, tmp_path):
        (tmp_path / "draft.md").write_text("Custom draft for {topic}")
        loader = PromptLoader(tmp_path)
        assert loader.load("draft", {"topic": "AI"}) == "Custom draft for AI"
        assert loader.find("blueprint").parent == BUNDLED_PROMPTS_DIR

    def test_missing_stage_uses_default_prompt(self):
        loader = PromptLoader()
        assert loader.find("nonexistent") is None
        assert loader.load("nonexistent", {"topic": "AI"}) == default_prompt("AI")

    def test_default_prompt_mentions_topic(self):
        assert "Write a comprehensive, engaging article about: Cats" in default_prompt("Cats")
