"""Content orchestrator: topic config in, decorated and scored Article out."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from sitefactory.content.lenses import LensSystem
from sitefactory.content.topics import ArticleConfig, Topic, TopicManager
from sitefactory.content.validation import sanitize_topic, validate_article, validate_topic
from sitefactory.content.voices import VoiceSystem
from sitefactory.llm.response_parser import calculate_read_time
from sitefactory.quality.scorer import QualityScorer
from sitefactory.types import Article, ArticleSource, ErrorCategory, Severity
from sitefactory.utils.text import count_words, slugify

if TYPE_CHECKING:
    from sitefactory.errors.log import ErrorLogger
    from sitefactory.pipeline.generator import ArticleGenerator

logger = logging.getLogger(__name__)


def placeholder_article(topic: str, category: str | None = None) -> Article:
    """Visible stand-in for an article that could not be generated."""
    return Article(
        title=f"{topic}: Article Unavailable",
        excerpt="This article could not be generated right now. Please check back later.",
        content=(
            f"<p>We were unable to generate the article about {topic}. "
            "The error has been logged and the article will be retried on the next build.</p>"
        ),
        category=category or "General",
        read_time="1 min read",
        source=ArticleSource.PLACEHOLDER,
    )


class ContentOrchestrator:
    """Builds prompt variables from style, angle, lens and voice, then runs generation.

    Generation failures never escape :meth:`generate`: they are logged and
    the cached article (or a placeholder) is returned instead. Only an
    invalid topic raises.
    """

    def __init__(
        self,
        generator: ArticleGenerator,
        *,
        scorer: QualityScorer | None = None,
        error_logger: ErrorLogger | None = None,
        topics: TopicManager | None = None,
        lenses: LensSystem | None = None,
        voices: VoiceSystem | None = None,
        use_pipeline: bool = True,
        stages: Sequence[str] | None = None,
        prompt_version: str = "v1",
    ) -> None:
        self._generator = generator
        self._scorer = scorer or QualityScorer()
        self._error_logger = error_logger
        self._topics = topics or TopicManager()
        self._lenses = lenses or LensSystem()
        self._voices = voices or VoiceSystem()
        self._use_pipeline = use_pipeline
        self._stages = list(stages) if stages else None
        self._prompt_version = prompt_version

    @property
    def generator(self) -> ArticleGenerator:
        return self._generator

    def config_for(self, topic: str) -> ArticleConfig:
        """Config for a free-text topic: catalog entry if the slug matches, else medium/analytical."""
        known = self._topics.topic_by_slug(slugify(topic))
        if known is not None:
            return self._topics.generate_article_config(known, style="medium", angle="analytical")
        return self._topics.generate_article_config(
            Topic(slug=slugify(topic), title=topic),
            style="medium",
            angle="analytical",
        )

    def build_variables(self, config: ArticleConfig) -> dict[str, Any]:
        topic = config.display_name
        style = self._topics.article_style(config.style)
        lens = config.lens or (
            self._lenses.get_lens(config.angle) if config.angle in self._lenses.all_lenses() else None
        )
        return {
            "category": config.topic.category,
            "style": f"{config.style} ({style.style})",
            "word_count": str(config.word_count),
            "sections": str(config.sections),
            "angle": config.angle,
            "lens_guidance": self._lenses.lens_prompt(topic, lens) if lens else "",
            "voice_guidance": self._voices.voice_guidance(config.topic.category),
        }

    async def generate(
        self,
        config_or_topic: ArticleConfig | str,
        *,
        use_pipeline: bool | None = None,
        stages: Sequence[str] | None = None,
        prompt_version: str | None = None,
        article_id: str | None = None,
    ) -> Article:
        config = (
            self.config_for(config_or_topic)
            if isinstance(config_or_topic, str)
            else config_or_topic
        )
        topic = validate_topic(sanitize_topic(config.display_name))
        use_pipeline = self._use_pipeline if use_pipeline is None else use_pipeline
        version = prompt_version or self._prompt_version
        category = self._display_category(config.topic.category)
        variables = self.build_variables(config)

        try:
            if use_pipeline:
                article = await self._generator.generate_article_pipeline(
                    topic,
                    stages=stages or self._stages,
                    variables=variables,
                    prompt_version=version,
                    article_id=article_id,
                    category=category,
                )
            else:
                article = await self._generator.generate_article(
                    topic,
                    variables=variables,
                    prompt_version=version,
                    article_id=article_id,
                    category=category,
                )
        except Exception as e:
            logger.error("Article generation failed for '%s': %s", topic, e)
            self._log_failure(e, topic, article_id)
            cached = self._generator.get_cached_article(topic, version)
            if cached is not None:
                logger.info("Using cached article for '%s'", topic)
                return self._finish(cached, config, topic)
            return self._decorate(placeholder_article(topic, category), config)

        return self._finish(article, config, topic)

    # ── Helpers ──

    def _finish(self, article: Article, config: ArticleConfig, topic: str) -> Article:
        """Decorate, validate (advisory) and score; scoring failures leave ``quality`` unset."""
        article = self._decorate(article, config)

        validation = validate_article(article)
        for warning in validation.warnings:
            logger.debug("Article '%s': %s", topic, warning)
        if not validation.valid:
            logger.warning(
                "Article structure validation failed for '%s': %s",
                topic,
                ", ".join(validation.errors),
            )

        try:
            article.quality = self._scorer.score(article)
        except Exception as e:
            logger.warning("Quality scoring failed for '%s': %s", topic, e)

        return article

    @staticmethod
    def _decorate(article: Article, config: ArticleConfig) -> Article:
        article.style = config.style
        article.angle = config.lens.key if config.lens else config.angle
        article.word_count = count_words(article.content)
        article.topic_slug = config.topic.slug or slugify(config.display_name)
        article.read_time = calculate_read_time(article.content)
        return article

    @staticmethod
    def _display_category(category: str) -> str | None:
        if not category or category == "general":
            return None
        return category[:1].upper() + category[1:]

    def _log_failure(self, error: Exception, topic: str, article_id: str | None) -> None:
        if self._error_logger is None:
            return
        self._error_logger.log(
            error,
            category=ErrorCategory.PIPELINE,
            severity=Severity.ERROR,
            module="content",
            operation="generate-article",
            metadata={"topic": topic, "articleId": article_id},
        )
