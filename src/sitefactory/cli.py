"""Click CLI for sitefactory: generate articles and build the static site."""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from sitefactory.config.schema import Settings, load_settings
from sitefactory.errors.exceptions import ConfigError, SiteBuildError
from sitefactory.types import Article, ErrorCategory, Severity

console = Console()
error_console = Console(stderr=True)


def _log_level(verbosity: int, configured: str = "WARNING") -> int:
    """-v means INFO, -vv DEBUG; without -v the configured ``log_level`` applies."""
    if verbosity == 1:
        return logging.INFO
    if verbosity >= 2:
        return logging.DEBUG
    return logging.getLevelName(configured.upper())


def _setup_logging(verbosity: int, configured: str = "WARNING") -> None:
    """Configure logging based on verbosity level."""
    logging.basicConfig(
        level=_log_level(verbosity, configured),
        format="%(message)s",
        handlers=[RichHandler(console=error_console, show_time=False, show_path=False)],
    )


def _load_settings(**overrides: Any) -> Settings:
    try:
        return load_settings(**overrides)
    except ConfigError as e:
        error_console.print(f"[red]Configuration error:[/red] {e}")
        sys.exit(1)


@click.group()
@click.version_option(package_name="sitefactory")
def cli() -> None:
    """sitefactory: LLM-generated static content sites."""


# ── Generation ──


@cli.command()
@click.option("--max-articles", type=int, default=None, help="Number of articles to generate.")
@click.option("--dry-run", is_flag=True, default=False, help="Skip all paid API calls.")
@click.option("--no-pipeline", is_flag=True, default=False, help="Single-stage generation.")
@click.option("--no-cache", is_flag=True, default=False, help="Disable the article cache.")
@click.option("--min-quality", type=float, default=None, help="Drop articles scoring below this.")
@click.option("--seed", type=int, default=None, help="Seed for topic, style and lens choices.")
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v info, -vv debug).")
def generate(
    max_articles: int | None,
    dry_run: bool,
    no_pipeline: bool,
    no_cache: bool,
    min_quality: float | None,
    seed: int | None,
    verbose: int,
) -> None:
    """Generate articles in bulk and write the manifest."""
    settings = _load_settings(
        max_articles=max_articles,
        dry_run=dry_run or None,
        use_pipeline=False if no_pipeline else None,
        cache_disabled=no_cache or None,
        min_quality_score=min_quality,
    )
    _setup_logging(verbose, settings.log_level)

    from sitefactory.core import SiteFactory
    from sitefactory.runner import BulkRunner, build_article_configs
    from sitefactory.site.manifest import write_manifest

    factory = SiteFactory(settings, seed=seed)
    _print_configuration(factory)

    configs = build_article_configs(
        factory.topics,
        factory.lenses,
        settings.max_articles,
        multiple_perspectives=settings.multiple_perspectives,
        vary_styles=settings.vary_styles,
    )
    console.print(f"Prepared {len(configs)} article configurations.")

    runner = BulkRunner(
        factory.orchestrator,
        factory.images,
        error_logger=factory.error_logger,
        request_delay=settings.request_delay,
        min_quality_score=settings.min_quality_score,
        dry_run=factory.dry_run,
    )

    async def _run() -> list[Article]:
        try:
            return await runner.run(configs)
        finally:
            await factory.close()

    try:
        articles = asyncio.run(_run())
        manifest = write_manifest(
            articles,
            settings.manifest_path,
            {"model": settings.model, "pipeline": factory.pipeline},
        )
    except Exception as e:
        factory.error_logger.log(
            e,
            category=ErrorCategory.PIPELINE,
            severity=Severity.CRITICAL,
            module="bulk",
            operation="bulk-entry",
        )
        error_console.print(f"[red]Fatal error:[/red] {e}")
        factory.error_logger.print_report(error_console)
        sys.exit(1)

    console.print(
        f"[green]Generated {len(articles)} articles into {settings.manifest_path}[/green]"
    )
    _print_quality(manifest.average_quality(), manifest.grade_distribution())
    factory.cost_tracker.print_report(console)
    if factory.error_logger.summary()["total"] > 0:
        console.print("[yellow]Errors occurred during generation:[/yellow]")
        factory.error_logger.print_report(console)


@cli.command()
@click.argument("topic")
@click.option("--dry-run", is_flag=True, default=False, help="Skip all paid API calls.")
@click.option("--no-pipeline", is_flag=True, default=False, help="Single-stage generation.")
@click.option("--no-cache", is_flag=True, default=False, help="Disable the article cache.")
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v info, -vv debug).")
def article(
    topic: str,
    dry_run: bool,
    no_pipeline: bool,
    no_cache: bool,
    verbose: int,
) -> None:
    """Generate one article for TOPIC and print it as JSON."""
    settings = _load_settings(
        dry_run=dry_run or None,
        use_pipeline=False if no_pipeline else None,
        cache_disabled=no_cache or None,
    )
    _setup_logging(verbose, settings.log_level)

    from sitefactory.core import SiteFactory

    factory = SiteFactory(settings)

    async def _run() -> Article:
        try:
            return await factory.orchestrator.generate(topic)
        finally:
            await factory.close()

    try:
        result = asyncio.run(_run())
    except Exception as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    console.print_json(json.dumps(result.to_manifest_dict()))


# ── Site build ──


@cli.command()
@click.option("--manifest", type=click.Path(), default=None, help="Manifest to render.")
@click.option("-o", "--output-dir", type=click.Path(), default=None, help="Site output directory.")
@click.option(
    "--templates-dir", type=click.Path(exists=True), default=None, help="Template overrides."
)
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v info, -vv debug).")
def build(
    manifest: str | None,
    output_dir: str | None,
    templates_dir: str | None,
    verbose: int,
) -> None:
    """Render the manifest into a static site."""
    settings = _load_settings(output_dir=output_dir)
    _setup_logging(verbose, settings.log_level)

    from sitefactory.errors.log import ErrorLogger
    from sitefactory.quality.seo import SiteMeta
    from sitefactory.site.manifest import load_manifest
    from sitefactory.site.render import SiteBuilder

    error_logger = ErrorLogger(settings.data_dir)
    manifest_path = Path(manifest) if manifest else settings.manifest_path

    try:
        loaded = load_manifest(manifest_path)
        builder = SiteBuilder(
            site=SiteMeta(name=settings.site_name, url=settings.site_url),
            description=settings.site_description,
            templates_dir=Path(templates_dir) if templates_dir else None,
        )
        result = builder.build(loaded.articles, settings.output_dir)
    except SiteBuildError as e:
        error_logger.log(
            e,
            severity=Severity.CRITICAL,
            module="build",
            operation="build-site",
            metadata={"path": e.path},
        )
        error_console.print(f"[red]Build failed:[/red] {e}")
        error_logger.print_report(error_console)
        sys.exit(1)

    console.print(
        f"[green]Built {len(result.pages)} files in {result.output_dir}[/green]"
        + (f" ([yellow]{len(result.skipped)} skipped[/yellow])" if result.skipped else "")
    )


# ── Maintenance ──


@cli.group()
def cache() -> None:
    """Inspect or clear the article cache."""


@cache.command("stats")
def cache_stats() -> None:
    """Show cache statistics."""
    from sitefactory.cache.disk import ArticleCache

    settings = _load_settings()
    stats = ArticleCache(settings.cache_dir).stats()

    table = Table(title="Cache Statistics", show_header=True)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Directory", str(settings.cache_dir))
    table.add_row("Entries", str(stats.entries))
    table.add_row("Size", f"{stats.size_mb:.2f} MB")
    console.print(table)


@cache.command("clear")
@click.confirmation_option(prompt="Delete all cached articles?")
def cache_clear() -> None:
    """Delete every cached article."""
    from sitefactory.cache.disk import ArticleCache

    settings = _load_settings()
    removed = ArticleCache(settings.cache_dir).clear()
    console.print(f"[green]Removed {removed} cache entries.[/green]")


@cli.group()
def costs() -> None:
    """Inspect or reset the cost ledger."""


@costs.command("report")
def costs_report() -> None:
    """Show spend by model, type and date."""
    from sitefactory.costs.tracker import CostTracker

    settings = _load_settings()
    CostTracker(settings.data_dir, budget=settings.budget).print_report(console)


@costs.command("reset")
@click.confirmation_option(prompt="Reset the cost ledger?")
def costs_reset() -> None:
    """Start a fresh cost ledger."""
    from sitefactory.costs.tracker import CostTracker

    settings = _load_settings()
    CostTracker(settings.data_dir, budget=settings.budget).reset()
    console.print("[green]Cost ledger reset.[/green]")


@cli.group()
def errors() -> None:
    """Inspect the persisted error log."""


@errors.command("report")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the raw report.")
def errors_report(as_json: bool) -> None:
    """Summarize logged errors."""
    from sitefactory.errors.log import ErrorLogger

    settings = _load_settings()
    error_logger = ErrorLogger(settings.data_dir)
    if as_json:
        console.print_json(json.dumps(error_logger.report()))
    else:
        error_logger.print_report(console)


# ── Output helpers ──


def _print_configuration(factory: Any) -> None:
    settings = factory.settings
    table = Table(title="Configuration", show_header=False)
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    table.add_row("Model", settings.model)
    table.add_row("Cache", "Disabled" if factory.cache is None else "Enabled")
    table.add_row("Dry run", "Yes (no API calls)" if factory.dry_run else "No")
    pipeline = factory.pipeline
    table.add_row(
        "Pipeline",
        f"{len(pipeline)}-stage ({' → '.join(pipeline)})" if pipeline else "Single-stage",
    )
    console.print(table)


def _print_quality(average: float | None, grades: dict[str, int]) -> None:
    table = Table(title="Quality Report", show_header=True)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Average score", f"{average:.1f}/100" if average is not None else "N/A")
    for grade, count in sorted(grades.items()):
        table.add_row(f"Grade {grade}", str(count))
    console.print(table)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
