"""Tests for stage definitions and output checks."""

from sitefactory.pipeline.stages import (
    BLUEPRINT_MAX_TOKENS,
    DEFAULT_STAGES,
    FULL_STAGES,
    STAGE_MAX_TOKENS,
    build_variables,
    max_tokens_for,
    validate_stage_output,
)


class TestStageLists:
    def test_default_order(self):
        assert DEFAULT_STAGES == ["blueprint", "draft", "enhance"]

    def test_full_order(self):
        assert FULL_STAGES == ["blueprint", "draft", "enhance", "humanize", "seo"]

    def test_token_budgets(self):
        assert max_tokens_for("blueprint") == BLUEPRINT_MAX_TOKENS == 1500
        assert max_tokens_for("draft") == STAGE_MAX_TOKENS == 2500
        assert max_tokens_for("seo") == STAGE_MAX_TOKENS


class TestBuildVariables:
    def test_every_variable_has_a_value(self):
        variables = build_variables("AI")
        assert variables["topic"] == "AI"
        assert variables["previous_content"] == ""
        assert variables["style"] == "medium"

    def test_extra_overrides_and_none_ignored(self):
        variables = build_variables("AI", {"style": "long", "angle": None, "custom": "x"})
        assert variables["style"] == "long"
        assert variables["angle"] == "analytical"
        assert variables["custom"] == "x"


class TestValidateStageOutput:
    def test_empty_fails(self):
        assert not validate_stage_output(None, "draft")
        assert not validate_stage_output("   ", "draft")

    def test_blueprint_markers(self):
        assert validate_stage_output('{"title": "x", "sections": []}', "blueprint")
        assert validate_stage_output({"thesis": "x"}, "blueprint")
        assert not validate_stage_output("an outline", "blueprint")

    def test_longform_length(self):
        assert validate_stage_output("x" * 201, "draft")
        assert not validate_stage_output("x" * 200, "enhance")

    def test_other_stages_accept_any_text(self):
        assert validate_stage_output("short", "seo")
