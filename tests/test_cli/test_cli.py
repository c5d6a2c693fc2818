"""Tests for CLI commands."""

import json
import logging

import pytest
from click.testing import CliRunner

from sitefactory.cli import _log_level, cli


@pytest.fixture
def runner():
    return CliRunner()


class TestCLIGroup:
    def test_help(self, runner):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "sitefactory" in result.output
        for command in ("generate", "article", "build", "cache", "costs", "errors"):
            assert command in result.output

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0


class TestLogLevel:
    def test_verbose_flags_win(self):
        assert _log_level(1, "ERROR") == logging.INFO
        assert _log_level(2, "ERROR") == logging.DEBUG

    def test_configured_level_without_flags(self):
        assert _log_level(0) == logging.WARNING
        assert _log_level(0, "debug") == logging.DEBUG
        assert _log_level(0, "ERROR") == logging.ERROR


class TestArticleCommand:
    def test_help(self, runner):
        result = runner.invoke(cli, ["article", "--help"])
        assert result.exit_code == 0
        assert "--dry-run" in result.output
        assert "--no-pipeline" in result.output

    def test_missing_topic(self, runner):
        result = runner.invoke(cli, ["article"])
        assert result.exit_code != 0

    def test_dry_run_prints_json(self, runner):
        result = runner.invoke(cli, ["article", "Power BI", "--dry-run"])
        assert result.exit_code == 0
        assert "Mock Article: Power BI" in result.output


class TestGenerateAndBuild:
    def test_generate_help(self, runner):
        result = runner.invoke(cli, ["generate", "--help"])
        assert result.exit_code == 0
        assert "--max-articles" in result.output
        assert "--min-quality" in result.output

    def test_dry_run_site(self, runner, tmp_path):
        result = runner.invoke(cli, ["generate", "--dry-run", "--max-articles", "2", "--seed", "3"])
        assert result.exit_code == 0, result.output

        manifest = json.loads((tmp_path / "data" / "articles.json").read_text())
        assert len(manifest["articles"]) == 2
        assert manifest["pipeline"] == ["blueprint", "draft", "enhance", "humanize", "seo"]
        assert manifest["articles"][0]["featured"] is True

        result = runner.invoke(cli, ["build"])
        assert result.exit_code == 0, result.output
        assert (tmp_path / "dist" / "index.html").is_file()
        assert (tmp_path / "dist" / "sitemap.xml").is_file()

    def test_no_pipeline_manifest(self, runner, tmp_path):
        result = runner.invoke(
            cli, ["generate", "--dry-run", "--no-pipeline", "--max-articles", "1"]
        )
        assert result.exit_code == 0, result.output
        manifest = json.loads((tmp_path / "data" / "articles.json").read_text())
        assert manifest["pipeline"] == []

    def test_build_missing_manifest(self, runner, tmp_path):
        result = runner.invoke(cli, ["build", "--manifest", str(tmp_path / "nope.json")])
        assert result.exit_code == 1
        assert "Build failed" in result.output

    def test_build_output_dir(self, runner, tmp_path):
        runner.invoke(cli, ["generate", "--dry-run", "--max-articles", "1"])
        result = runner.invoke(cli, ["build", "-o", str(tmp_path / "public")])
        assert result.exit_code == 0, result.output
        assert (tmp_path / "public" / "robots.txt").is_file()


class TestCacheCommands:
    def test_cache_help(self, runner):
        result = runner.invoke(cli, ["cache", "--help"])
        assert result.exit_code == 0
        assert "stats" in result.output
        assert "clear" in result.output

    def test_cache_stats(self, runner):
        result = runner.invoke(cli, ["cache", "stats"])
        assert result.exit_code == 0
        assert "Cache Statistics" in result.output

    def test_cache_clear_needs_confirmation(self, runner):
        result = runner.invoke(cli, ["cache", "clear"], input="n\n")
        assert result.exit_code != 0

    def test_cache_clear_with_yes(self, runner):
        result = runner.invoke(cli, ["cache", "clear", "--yes"])
        assert result.exit_code == 0
        assert "Removed 0 cache entries" in result.output


class TestReportCommands:
    def test_costs_report(self, runner):
        result = runner.invoke(cli, ["costs", "report"])
        assert result.exit_code == 0
        assert "Cost Report" in result.output

    def test_costs_reset_with_yes(self, runner):
        result = runner.invoke(cli, ["costs", "reset", "--yes"])
        assert result.exit_code == 0
        assert "Cost ledger reset" in result.output

    def test_errors_report_json(self, runner):
        result = runner.invoke(cli, ["errors", "report", "--json"])
        assert result.exit_code == 0
        report = json.loads(result.stdout)
        assert report["summary"]["total"] == 0
