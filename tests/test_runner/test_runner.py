"""Tests for bulk config building and the bulk runner."""

import random
from unittest.mock import AsyncMock, MagicMock

import pytest

from sitefactory.content.lenses import LensSystem
from sitefactory.content.topics import TopicManager
from sitefactory.errors.log import ErrorLogger
from sitefactory.images.generator import placeholder_url
from sitefactory.runner import BulkRunner, build_article_configs
from sitefactory.types import Article, ErrorCategory, QualityReport, QualityScores, Severity


def _managers(seed=11):
    topics = TopicManager(seed=seed)
    return topics, LensSystem(rng=random.Random(seed))


def _article(title="Story", score=75.0):
    return Article(
        title=title,
        content="<p>body</p>",
        quality=QualityReport(scores=QualityScores(overall=score), grade="B"),
    )


def _configs(*slugs):
    topics = TopicManager(seed=1)
    return [topics.generate_article_config(s, style="medium", angle="analytical") for s in slugs]


def _orchestrator(*results):
    orchestrator = MagicMock()
    orchestrator.generate = AsyncMock(side_effect=list(results))
    return orchestrator


def _images(url="/images/header.jpg", error=None):
    images = MagicMock()
    images.generate_image = AsyncMock(return_value=url, side_effect=error)
    return images


class TestBuildArticleConfigs:
    def test_zero(self):
        assert build_article_configs(*_managers(), 0) == []

    def test_three_perspectives_per_topic(self):
        configs = build_article_configs(*_managers(), 6)
        assert len(configs) == 6
        assert [c.topic.slug for c in configs] == ["coastal-erosion"] * 3 + ["attention-economy"] * 3
        assert [c.perspective for c in configs] == [1, 2, 3, 1, 2, 3]
        assert [c.style for c in configs[:3]] == ["short", "medium", "long"]
        assert all(c.lens is not None and c.angle == c.lens.key for c in configs)

    def test_truncated_to_max(self):
        assert len(build_article_configs(*_managers(), 4)) == 4

    def test_single_perspective_spreads_categories(self):
        configs = build_article_configs(*_managers(), 5, multiple_perspectives=False)
        assert len(configs) == 5
        assert len({c.topic.category for c in configs}) == 5
        assert all(c.lens is not None for c in configs)

    def test_fixed_style_when_not_varied(self):
        configs = build_article_configs(
            *_managers(), 3, multiple_perspectives=False, vary_styles=False
        )
        assert all(c.style == "medium" and c.angle == "analytical" for c in configs)

    def test_single_mode_capped_by_catalog(self):
        configs = build_article_configs(*_managers(), 200, multiple_perspectives=False)
        assert len(configs) == 100
        assert len({c.topic.slug for c in configs}) == 100

    def test_top_up_has_no_duplicates(self):
        topics = TopicManager(catalog={"a": ["one", "two", "three"], "b": ["four"]}, seed=4)
        configs = build_article_configs(
            topics, LensSystem(rng=random.Random(4)), 4, multiple_perspectives=False
        )
        slugs = [c.topic.slug for c in configs]
        assert len(slugs) == len(set(slugs))
        assert set(slugs) <= {"one", "two", "three", "four"}


class TestBulkRunner:
    async def test_ids_images_and_featured(self, no_sleep):
        orchestrator = _orchestrator(_article("A"), _article("B"), _article("C"))
        images = _images()
        runner = BulkRunner(orchestrator, images, sleep=no_sleep)

        articles = await runner.run(_configs("ai-alignment", "cybersecurity", "ethical-ai"))

        assert [a.id for a in articles] == [1, 2, 3]
        assert [a.featured for a in articles] == [True, False, False]
        assert all(a.image == "/images/header.jpg" for a in articles)
        assert [c.args[0] for c in no_sleep.await_args_list] == [0.5, 0.5, 0.5]

    async def test_calls_collaborators(self, no_sleep):
        orchestrator = _orchestrator(_article())
        images = _images()
        configs = _configs("ai-alignment")
        await BulkRunner(orchestrator, images, sleep=no_sleep).run(configs)

        assert orchestrator.generate.await_args.args[0] is configs[0]
        assert orchestrator.generate.await_args.kwargs["article_id"] == "ai-alignment"
        image_call = images.generate_image.await_args
        assert image_call.args[0] == "Ai Alignment"
        assert image_call.kwargs["width"] == 1200
        assert image_call.kwargs["height"] == 800
        assert image_call.kwargs["article_id"] == "article-1"

    async def test_quality_filter(self, tmp_path, no_sleep):
        error_logger = ErrorLogger(tmp_path)
        orchestrator = _orchestrator(_article("Weak", 50.0), _article("Strong", 80.0))
        runner = BulkRunner(
            orchestrator, _images(), error_logger=error_logger, min_quality_score=60, sleep=no_sleep
        )

        articles = await runner.run(_configs("ai-alignment", "cybersecurity"))

        assert [a.title for a in articles] == ["Strong"]
        assert articles[0].id == 2
        assert articles[0].featured is True
        entry = error_logger.entries[0]
        assert entry.category == ErrorCategory.VALIDATION
        assert entry.severity == Severity.WARNING
        assert entry.operation == "quality-filter"
        assert entry.metadata["qualityScore"] == 50.0
        assert "below minimum 60" in entry.message

    async def test_failed_article_skipped(self, tmp_path, no_sleep):
        error_logger = ErrorLogger(tmp_path)
        orchestrator = _orchestrator(RuntimeError("boom"), _article("Survivor"))
        runner = BulkRunner(orchestrator, _images(), error_logger=error_logger, sleep=no_sleep)

        articles = await runner.run(_configs("ai-alignment", "cybersecurity"))

        assert [a.id for a in articles] == [2]
        entry = error_logger.entries[0]
        assert entry.category == ErrorCategory.PIPELINE
        assert entry.severity == Severity.ERROR
        assert entry.module == "bulk"
        assert entry.operation == "article-generation-loop"
        assert no_sleep.await_count == 1

    async def test_image_failure_uses_placeholder(self, tmp_path, no_sleep):
        error_logger = ErrorLogger(tmp_path)
        runner = BulkRunner(
            _orchestrator(_article()),
            _images(error=RuntimeError("no images")),
            error_logger=error_logger,
            sleep=no_sleep,
        )

        articles = await runner.run(_configs("ai-alignment"))

        assert articles[0].image == placeholder_url(1200, 800)
        assert articles[0].image.endswith("w=1200&h=800")
        entry = error_logger.entries[0]
        assert entry.category == ErrorCategory.API
        assert entry.severity == Severity.WARNING
        assert entry.operation == "generate-image"

    async def test_dry_run_skips_delay(self, no_sleep):
        runner = BulkRunner(
            _orchestrator(_article(), _article()), _images(), dry_run=True, sleep=no_sleep
        )
        await runner.run(_configs("ai-alignment", "cybersecurity"))
        no_sleep.assert_not_awaited()

    async def test_empty(self, no_sleep):
        assert await BulkRunner(_orchestrator(), _images(), sleep=no_sleep).run([]) == []

    @pytest.mark.parametrize("min_quality", [0, 0.0])
    async def test_no_filter_by_default(self, no_sleep, min_quality):
        runner = BulkRunner(
            _orchestrator(_article(score=1.0)),
            _images(),
            min_quality_score=min_quality,
            sleep=no_sleep,
        )
        assert len(await runner.run(_configs("ai-alignment"))) == 1
