"""Tests for default configuration."""

from sitefactory.config.defaults import (
    DEFAULT_MODEL,
    DEFAULT_PIPELINE_STAGES,
    get_defaults,
)


def test_defaults_has_required_keys():
    defaults = get_defaults()
    for key in ("model", "pipeline_stages", "max_retries", "data_dir", "output_dir", "site_url"):
        assert key in defaults


def test_default_model():
    assert get_defaults()["model"] == DEFAULT_MODEL == "gpt-4o-mini"


def test_default_stages_in_order():
    assert DEFAULT_PIPELINE_STAGES == ["blueprint", "draft", "enhance", "humanize", "seo"]


def test_defaults_are_copies():
    first = get_defaults()
    first["pipeline_stages"].append("extra")
    assert "extra" not in get_defaults()["pipeline_stages"]
