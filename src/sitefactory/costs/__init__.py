"""Cost tracking: pricing table and persisted ledger."""

from sitefactory.costs.ledger import CostLedger
from sitefactory.costs.pricing import PRICING, calculate_image_cost, calculate_llm_cost
from sitefactory.costs.tracker import CostTracker

__all__ = [
    "PRICING",
    "CostLedger",
    "CostTracker",
    "calculate_image_cost",
    "calculate_llm_cost",
]
