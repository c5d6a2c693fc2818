"""Tests for cost tracking."""

import json
from datetime import date

import pytest
from rich.console import Console

from sitefactory.costs.ledger import CostLedger
from sitefactory.costs.tracker import CostTracker


class TestRecording:
    def test_track_llm_cost(self, tmp_path):
        tracker = CostTracker(tmp_path)
        cost = tracker.track_llm_cost("gpt-4o", 1000, 1000, article_id="article-1")
        assert cost == pytest.approx(0.02)
        assert tracker.total == pytest.approx(0.02)
        ledger = tracker.ledger
        assert ledger.by_model["gpt-4o"] == pytest.approx(0.02)
        assert ledger.by_type["llm"] == pytest.approx(0.02)
        assert ledger.by_article["article-1"] == pytest.approx(0.02)
        assert ledger.by_date[date.today().isoformat()] == pytest.approx(0.02)

    def test_track_image_cost(self, tmp_path):
        tracker = CostTracker(tmp_path)
        tracker.track_image_cost(2, article_id="article-3")
        assert tracker.ledger.by_type["image"] == pytest.approx(0.04)
        assert tracker.ledger.by_type["llm"] == 0.0

    def test_history_record(self, tmp_path):
        tracker = CostTracker(tmp_path)
        tracker.track_llm_cost("gpt-4o-mini", 10, 20)
        record = tracker.ledger.history[-1]
        assert record["type"] == "llm"
        assert record["inputTokens"] == 10
        assert record["outputTokens"] == 20
        assert "timestamp" in record

    @pytest.mark.parametrize("bad", [-1.0, float("nan"), float("inf"), "0.5", None, True])
    def test_invalid_cost_rejected(self, tmp_path, bad):
        tracker = CostTracker(tmp_path)
        assert tracker.record_cost(bad, type="llm") == 0.0
        assert tracker.total == 0.0
        assert tracker.ledger.history == []

    def test_persisted_and_reloaded(self, tmp_path):
        CostTracker(tmp_path).track_llm_cost("gpt-4o", 1000, 0)
        data = json.loads((tmp_path / "costs.json").read_text())
        assert data["total"] == pytest.approx(0.005)
        assert "byModel" in data
        assert CostTracker(tmp_path).total == pytest.approx(0.005)

    def test_failed_save_keeps_recorded_cost(self, tmp_path, monkeypatch, caplog):
        def _fail(self, path):
            raise OSError("disk full")

        monkeypatch.setattr(CostLedger, "save", _fail)
        tracker = CostTracker(tmp_path)
        cost = tracker.track_llm_cost("gpt-4o", 1000, 0)

        assert cost == pytest.approx(0.005)
        assert tracker.total == pytest.approx(0.005)
        assert len(tracker.ledger.history) == 1
        assert "Could not save cost ledger" in caplog.text
        assert not (tmp_path / "costs.json").exists()

    def test_corrupt_ledger_starts_empty(self, tmp_path):
        (tmp_path / "costs.json").write_text("{oops")
        assert CostTracker(tmp_path).total == 0.0


class TestBudget:
    def test_warning_near_limit(self, tmp_path, caplog):
        tracker = CostTracker(tmp_path, budget=0.01)
        tracker.record_cost(0.0095, type="llm")
        assert "Budget warning" in caplog.text

    def test_limit_reached_still_records(self, tmp_path, caplog):
        tracker = CostTracker(tmp_path, budget=0.01)
        assert tracker.record_cost(0.02, type="llm") == 0.02
        assert "Budget limit reached" in caplog.text
        assert tracker.total == pytest.approx(0.02)

    def test_zero_budget_disabled(self, tmp_path):
        assert CostTracker(tmp_path, budget=0).budget is None

    def test_summary_remaining(self, tmp_path):
        tracker = CostTracker(tmp_path, budget=1.0)
        tracker.record_cost(0.25, type="llm", article_id="a")
        summary = tracker.get_summary()
        assert summary["remaining"] == pytest.approx(0.75)
        assert summary["articleCount"] == 1


class TestReporting:
    def test_report_shape(self, tmp_path):
        tracker = CostTracker(tmp_path)
        tracker.record_cost(0.3, type="llm", article_id="a")
        tracker.record_cost(0.1, type="llm", article_id="b")
        report = tracker.get_report()
        assert report["topArticles"][0] == {"articleId": "a", "cost": 0.3}
        assert len(report["dailyBreakdown"]) == 1
        assert len(report["recentHistory"]) == 2

    def test_print_report(self, tmp_path):
        tracker = CostTracker(tmp_path)
        tracker.track_llm_cost("gpt-4o", 1000, 1000, article_id="article-1")
        console = Console(record=True, width=200)
        tracker.print_report(console)
        output = console.export_text()
        assert "Cost Report" in output
        assert "gpt-4o" in output

    def test_reset(self, tmp_path):
        tracker = CostTracker(tmp_path)
        tracker.record_cost(1.0, type="llm")
        tracker.reset()
        assert tracker.total == 0.0
        assert CostTracker(tmp_path).total == 0.0
