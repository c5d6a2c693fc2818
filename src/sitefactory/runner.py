"""Bulk generation: topic configs in, a list of finished articles out."""

from __future__ import annotations

import asyncio
import logging
import math
from collections.abc import Awaitable, Callable

from sitefactory.config.defaults import DEFAULT_MIN_QUALITY_SCORE, DEFAULT_REQUEST_DELAY
from sitefactory.content.lenses import LensSystem
from sitefactory.content.orchestrator import ContentOrchestrator
from sitefactory.content.topics import ArticleConfig, Topic, TopicManager
from sitefactory.errors.exceptions import ContentValidationError
from sitefactory.errors.log import ErrorLogger
from sitefactory.images.generator import ImageGenerator, placeholder_url
from sitefactory.types import Article, ErrorCategory, Severity

logger = logging.getLogger(__name__)

IMAGE_WIDTH = 1200
IMAGE_HEIGHT = 800
PERSPECTIVES_PER_TOPIC = 3


def _perspective_configs(
    topic: Topic,
    topics: TopicManager,
    lenses: LensSystem,
    vary_styles: bool,
) -> list[ArticleConfig]:
    return [
        topics.generate_article_config(
            topic,
            style=p.style,
            angle=p.lens.key,
            lens=p.lens,
            perspective=p.perspective,
            total_perspectives=p.total_perspectives,
        )
        for p in lenses.multiple_perspectives(topic, PERSPECTIVES_PER_TOPIC, vary_styles=vary_styles)
    ]


def _single_config(
    topic: Topic,
    topics: TopicManager,
    lenses: LensSystem,
    vary_styles: bool,
) -> ArticleConfig:
    return topics.generate_article_config(
        topic,
        style=None if vary_styles else "medium",
        angle=None if vary_styles else "analytical",
        lens=lenses.random_lens(),
    )


def build_article_configs(
    topics: TopicManager,
    lenses: LensSystem,
    max_articles: int,
    multiple_perspectives: bool = True,
    vary_styles: bool = True,
) -> list[ArticleConfig]:
    """Spread ``max_articles`` across categories, then top up with random topics.

    Each category contributes up to ``ceil(max_articles / categories)``
    topics. With ``multiple_perspectives`` every topic yields three configs,
    one per lens.
    """
    configs: list[ArticleConfig] = []
    categories = topics.categories()
    if max_articles <= 0 or not categories:
        return configs

    per_category = math.ceil(max_articles / len(categories))

    for category in categories:
        for topic in topics.topics_by_category(category)[:per_category]:
            if multiple_perspectives:
                configs.extend(_perspective_configs(topic, topics, lenses, vary_styles))
            else:
                configs.append(_single_config(topic, topics, lenses, vary_styles))
            if len(configs) >= max_articles:
                return configs[:max_articles]

    all_topics = topics.all_topics()
    attempts = 0
    while len(configs) < min(max_articles, len(all_topics)) and attempts < len(all_topics) * 10:
        attempts += 1
        topic = topics.random_topic()
        if multiple_perspectives and len(configs) + PERSPECTIVES_PER_TOPIC <= max_articles:
            for config in _perspective_configs(topic, topics, lenses, vary_styles):
                if not any(
                    c.topic.slug == config.topic.slug and c.perspective == config.perspective
                    for c in configs
                ):
                    configs.append(config)
        elif not any(c.topic.slug == topic.slug for c in configs):
            configs.append(_single_config(topic, topics, lenses, vary_styles))

    return configs[:max_articles]


class BulkRunner:
    """Generates articles one config at a time.

    Each article gets a 1200x800 header image and passes the minimum
    quality filter before it is kept. A failure on one article is logged
    and the run moves on.
    """

    def __init__(
        self,
        orchestrator: ContentOrchestrator,
        images: ImageGenerator,
        error_logger: ErrorLogger | None = None,
        request_delay: float = DEFAULT_REQUEST_DELAY,
        min_quality_score: float = DEFAULT_MIN_QUALITY_SCORE,
        dry_run: bool = False,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._orchestrator = orchestrator
        self._images = images
        self._error_logger = error_logger
        self._request_delay = request_delay
        self._min_quality_score = min_quality_score
        self._dry_run = dry_run
        self._sleep = sleep

    async def run(self, configs: list[ArticleConfig]) -> list[Article]:
        articles: list[Article] = []
        next_id = 1
        total = len(configs)

        for config in configs:
            topic = config.display_name
            logger.info(
                "Processing [%d/%d]: %s (style=%s, angle=%s, category=%s)",
                next_id,
                total,
                topic,
                config.style,
                config.angle,
                config.topic.category,
            )
            article_id = next_id
            next_id += 1

            try:
                article = await self._orchestrator.generate(
                    config, article_id=config.topic.slug or f"article-{article_id}"
                )
                image = await self._image_for(topic, article_id)

                score = article.quality.scores.overall if article.quality else 0.0
                if self._min_quality_score > 0 and score < self._min_quality_score:
                    self._filter_out(article_id, topic, score)
                    continue

                article.id = article_id
                article.image = image
                article.featured = not articles
                articles.append(article)

                if article.quality is not None:
                    logger.info(
                        "Quality: %s (%.1f/100)", article.quality.grade, article.quality.scores.overall
                    )
            except Exception as e:
                logger.error("Failed to generate article '%s': %s", topic, e)
                self._log(
                    e,
                    category=ErrorCategory.PIPELINE,
                    severity=Severity.ERROR,
                    operation="article-generation-loop",
                    metadata={"articleId": article_id, "topic": topic},
                )
                continue

            if not self._dry_run:
                await self._sleep(self._request_delay)

        logger.info("Generated %d of %d articles", len(articles), total)
        return articles

    async def _image_for(self, topic: str, article_id: int) -> str:
        try:
            return await self._images.generate_image(
                topic,
                width=IMAGE_WIDTH,
                height=IMAGE_HEIGHT,
                save_local=True,
                article_id=f"article-{article_id}",
            )
        except Exception as e:
            logger.warning("Image generation failed for '%s', using fallback: %s", topic, e)
            self._log(
                e,
                category=ErrorCategory.API,
                severity=Severity.WARNING,
                operation="generate-image",
                metadata={"articleId": article_id, "topic": topic},
            )
            return placeholder_url(IMAGE_WIDTH, IMAGE_HEIGHT)

    def _filter_out(self, article_id: int, topic: str, score: float) -> None:
        message = (
            f"Article filtered: Quality score {score:.1f} below minimum {self._min_quality_score}"
        )
        logger.warning("%s (%s)", message, topic)
        self._log(
            ContentValidationError(message),
            category=ErrorCategory.VALIDATION,
            severity=Severity.WARNING,
            operation="quality-filter",
            metadata={
                "articleId": article_id,
                "qualityScore": score,
                "minQualityScore": self._min_quality_score,
            },
        )

    def _log(
        self,
        error: Exception,
        *,
        category: ErrorCategory,
        severity: Severity,
        operation: str,
        metadata: dict,
    ) -> None:
        if self._error_logger is None:
            return
        self._error_logger.log(
            error,
            category=category,
            severity=severity,
            module="bulk",
            operation=operation,
            metadata=metadata,
        )
