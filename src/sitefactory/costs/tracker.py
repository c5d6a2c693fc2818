"""Cost tracking for LLM and image calls."""

from __future__ import annotations

import logging
import math
from datetime import UTC, date, datetime
from pathlib import Path
from typing import Any

from pydantic.alias_generators import to_camel
from rich.console import Console
from rich.table import Table

from sitefactory.costs.ledger import CostLedger
from sitefactory.costs.pricing import calculate_image_cost, calculate_llm_cost

logger = logging.getLogger(__name__)

_BUDGET_WARNING_PCT = 90.0


class CostTracker:
    """Accumulates API spend into a JSON ledger at ``<data_dir>/costs.json``.

    Recording never raises: invalid amounts are rejected with a warning and
    persistence failures are logged. A budget only produces warnings.
    """

    def __init__(self, data_dir: Path, budget: float | None = None) -> None:
        self._path = Path(data_dir) / "costs.json"
        self.budget = budget if budget and budget > 0 else None
        self._ledger = CostLedger.load(self._path)

    @property
    def path(self) -> Path:
        return self._path

    @property
    def ledger(self) -> CostLedger:
        return self._ledger

    @property
    def total(self) -> float:
        return self._ledger.total

    # ── Pricing ──

    @staticmethod
    def calculate_llm_cost(model: str, input_tokens: int, output_tokens: int) -> float:
        return calculate_llm_cost(model, input_tokens, output_tokens)

    @staticmethod
    def calculate_image_cost(count: int = 1) -> float:
        return calculate_image_cost(count)

    # ── Recording ──

    def track_llm_cost(
        self,
        model: str,
        input_tokens: int,
        output_tokens: int,
        article_id: str | None = None,
    ) -> float:
        cost = self.calculate_llm_cost(model, input_tokens, output_tokens)
        return self.record_cost(
            cost,
            type="llm",
            model=model,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            article_id=article_id,
        )

    def track_image_cost(self, count: int = 1, article_id: str | None = None) -> float:
        cost = self.calculate_image_cost(count)
        return self.record_cost(cost, type="image", count=count, article_id=article_id)

    def record_cost(self, cost: Any, **metadata: Any) -> float:
        """Add one cost record. Returns the amount recorded (0.0 if rejected).

        The in-memory ledger is the source of truth for the run; a failed
        save is logged and retried with the next record.
        """
        if (
            isinstance(cost, bool)
            or not isinstance(cost, (int, float))
            or not math.isfinite(cost)
            or cost < 0
        ):
            logger.warning("Invalid cost value: %r. Skipping cost tracking.", cost)
            return 0.0

        cost = float(cost)
        ledger = self._ledger
        today = date.today().isoformat()

        ledger.total += cost
        ledger.by_date[today] = ledger.by_date.get(today, 0.0) + cost

        article_id = metadata.get("article_id")
        if article_id:
            key = str(article_id)
            ledger.by_article[key] = ledger.by_article.get(key, 0.0) + cost

        model = metadata.get("model")
        if model:
            ledger.by_model[model] = ledger.by_model.get(model, 0.0) + cost

        cost_type = metadata.get("type")
        if cost_type:
            ledger.by_type[cost_type] = ledger.by_type.get(cost_type, 0.0) + cost

        record = {"cost": cost, "timestamp": datetime.now(UTC).isoformat()}
        record.update({to_camel(k): v for k, v in metadata.items()})
        ledger.history.append(record)

        self._check_budget()
        try:
            ledger.save(self._path)
        except (OSError, TypeError, ValueError) as e:
            logger.warning("Could not save cost ledger to %s: %s", self._path, e)
        return cost

    def _check_budget(self) -> None:
        if not self.budget:
            return
        total = self._ledger.total
        used_pct = total / self.budget * 100
        if total >= self.budget:
            logger.warning(
                "Budget limit reached: $%.4f / $%.4f (100%%)", total, self.budget
            )
        elif used_pct >= _BUDGET_WARNING_PCT:
            logger.warning(
                "Budget warning: $%.4f / $%.4f (%.1f%%)", total, self.budget, used_pct
            )

    # ── Reporting ──

    def get_summary(self) -> dict[str, Any]:
        ledger = self._ledger
        return {
            "total": ledger.total,
            "today": ledger.by_date.get(date.today().isoformat(), 0.0),
            "byType": dict(ledger.by_type),
            "byModel": dict(ledger.by_model),
            "budget": self.budget,
            "remaining": max(0.0, self.budget - ledger.total) if self.budget else None,
            "articleCount": len(ledger.by_article),
        }

    def get_report(self) -> dict[str, Any]:
        ledger = self._ledger
        top_articles = sorted(ledger.by_article.items(), key=lambda kv: kv[1], reverse=True)
        daily = sorted(ledger.by_date.items(), key=lambda kv: kv[0], reverse=True)
        return {
            "summary": self.get_summary(),
            "recentHistory": ledger.history[-20:],
            "topArticles": [{"articleId": a, "cost": c} for a, c in top_articles[:10]],
            "dailyBreakdown": [{"date": d, "cost": c} for d, c in daily[:7]],
        }

    def print_report(self, console: Console) -> None:
        report = self.get_report()
        summary = report["summary"]

        table = Table(title="Cost Report", show_header=True)
        table.add_column("Metric", style="cyan")
        table.add_column("Value", justify="right")
        table.add_row("Total cost", f"${summary['total']:.4f}")
        table.add_row("Today's cost", f"${summary['today']:.4f}")
        table.add_row("Articles", str(summary["articleCount"]))
        if summary["budget"]:
            table.add_row("Budget", f"${summary['budget']:.4f}")
            table.add_row("Remaining", f"${summary['remaining']:.4f}")
        for cost_type, cost in summary["byType"].items():
            table.add_row(f"Type: {cost_type}", f"${cost:.4f}")
        for model, cost in summary["byModel"].items():
            table.add_row(f"Model: {model}", f"${cost:.4f}")
        console.print(table)

        if report["topArticles"]:
            top_table = Table(title="Top Articles by Cost", show_header=True)
            top_table.add_column("#", justify="right")
            top_table.add_column("Article", style="cyan")
            top_table.add_column("Cost", justify="right")
            for i, item in enumerate(report["topArticles"], start=1):
                top_table.add_row(str(i), item["articleId"], f"${item['cost']:.4f}")
            console.print(top_table)

        if report["dailyBreakdown"]:
            day_table = Table(title="Last 7 Days", show_header=True)
            day_table.add_column("Date", style="cyan")
            day_table.add_column("Cost", justify="right")
            for day in report["dailyBreakdown"]:
                day_table.add_row(day["date"], f"${day['cost']:.4f}")
            console.print(day_table)

    def reset(self) -> None:
        self._ledger = CostLedger()
        try:
            self._ledger.save(self._path)
        except OSError as e:
            logger.error("Error saving cost data: %s", e)
