"""OpenAI pricing table (USD per 1K tokens) and cost arithmetic."""

from __future__ import annotations

from pydantic import BaseModel

DEFAULT_PRICING_MODEL = "gpt-4o-mini"
IMAGE_COST_PER_IMAGE = 0.02


class ModelPricing(BaseModel):
    input: float
    output: float


PRICING: dict[str, ModelPricing] = {
    "gpt-4o-mini": ModelPricing(input=0.00015, output=0.0006),
    "gpt-4o": ModelPricing(input=0.005, output=0.015),
    "gpt-4-turbo": ModelPricing(input=0.01, output=0.03),
    "gpt-3.5-turbo": ModelPricing(input=0.0005, output=0.0015),
    "gpt-4.1": ModelPricing(input=0.002, output=0.008),
    "gpt-4.1-mini": ModelPricing(input=0.0004, output=0.0016),
    "gpt-4.1-nano": ModelPricing(input=0.0001, output=0.0004),
}


def pricing_for(model: str) -> ModelPricing:
    """Look up a model's row; unknown models are priced as gpt-4o-mini."""
    return PRICING.get(model, PRICING[DEFAULT_PRICING_MODEL])


def calculate_llm_cost(model: str, input_tokens: int, output_tokens: int) -> float:
    pricing = pricing_for(model)
    return (input_tokens / 1000) * pricing.input + (output_tokens / 1000) * pricing.output


def calculate_image_cost(count: int = 1) -> float:
    return count * IMAGE_COST_PER_IMAGE
