"""Tests for pricing arithmetic."""

import pytest

from sitefactory.costs.pricing import (
    IMAGE_COST_PER_IMAGE,
    PRICING,
    calculate_image_cost,
    calculate_llm_cost,
    pricing_for,
)


class TestCalculateLLMCost:
    @pytest.mark.parametrize("model", sorted(PRICING))
    def test_thousand_tokens_each_way(self, model):
        pricing = PRICING[model]
        assert calculate_llm_cost(model, 1000, 1000) == pytest.approx(
            pricing.input + pricing.output
        )

    def test_gpt_4o_mini(self):
        assert calculate_llm_cost("gpt-4o-mini", 2000, 500) == pytest.approx(
            2 * 0.00015 + 0.5 * 0.0006
        )

    def test_unknown_model_priced_as_default(self):
        assert calculate_llm_cost("mystery-model", 1000, 1000) == pytest.approx(
            calculate_llm_cost("gpt-4o-mini", 1000, 1000)
        )
        assert pricing_for("mystery-model") == PRICING["gpt-4o-mini"]

    def test_zero_tokens(self):
        assert calculate_llm_cost("gpt-4o", 0, 0) == 0.0


class TestCalculateImageCost:
    def test_per_image(self):
        assert calculate_image_cost() == IMAGE_COST_PER_IMAGE
        assert calculate_image_cost(3) == pytest.approx(3 * IMAGE_COST_PER_IMAGE)
