"""Article generation: single-stage and multi-stage pipelines with caching."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from sitefactory.config.defaults import DEFAULT_STAGE_DELAY
from sitefactory.content.validation import validate_stage_name
from sitefactory.errors.exceptions import PipelineError
from sitefactory.llm.client import AsyncLLMClient, dry_run_response
from sitefactory.llm.prompts import PromptLoader
from sitefactory.llm.response_parser import parse_article_from_text, validate_article_structure
from sitefactory.pipeline.stages import (
    DEFAULT_STAGES,
    build_variables,
    max_tokens_for,
    validate_stage_output,
)
from sitefactory.types import (
    Article,
    ArticleSource,
    ErrorCategory,
    LLMResponse,
    Severity,
    Stage,
    StageOutput,
    TokenUsage,
)

if TYPE_CHECKING:
    from sitefactory.cache.disk import ArticleCache
    from sitefactory.costs.tracker import CostTracker
    from sitefactory.errors.log import ErrorLogger

logger = logging.getLogger(__name__)


class ArticleGenerator:
    """Turns a topic into an Article through one or more LLM stages.

    Cache, cost tracker and error logger are optional collaborators. In
    dry-run mode no API call is made and nothing is cached or costed.
    """

    def __init__(
        self,
        llm: AsyncLLMClient,
        cache: ArticleCache | None = None,
        cost_tracker: CostTracker | None = None,
        error_logger: ErrorLogger | None = None,
        prompts: PromptLoader | None = None,
        stage_delay: float = DEFAULT_STAGE_DELAY,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._llm = llm
        self._cache = cache
        self._cost_tracker = cost_tracker
        self._error_logger = error_logger
        self._prompts = prompts or PromptLoader()
        self._stage_delay = stage_delay
        self._sleep = sleep

    @property
    def dry_run(self) -> bool:
        return self._llm.dry_run

    @property
    def model(self) -> str:
        return self._llm.model

    @property
    def cache(self) -> ArticleCache | None:
        return self._cache

    def get_cached_article(self, topic: str, prompt_version: str = "v1") -> Article | None:
        """Previously generated article for this topic, if the cache holds a valid one."""
        if self._cache is None:
            return None
        payload = self._cache.get(topic, prompt_version)
        if not isinstance(payload, dict):
            return None
        try:
            article = Article.model_validate(payload)
        except ValidationError as e:
            logger.warning("Ignoring malformed cached article for '%s': %s", topic, e)
            return None
        article.source = ArticleSource.CACHE
        return article

    # ── Single stage ──

    async def generate_article(
        self,
        topic: str,
        *,
        variables: dict[str, Any] | None = None,
        prompt_version: str = "v1",
        use_cache: bool = True,
        stage: str = Stage.DEFAULT,
        article_id: str | None = None,
        category: str | None = None,
    ) -> Article:
        use_cache = self._caching_enabled(use_cache)

        if use_cache:
            cached = self.get_cached_article(topic, prompt_version)
            if cached is not None:
                logger.info("Cache hit for article: %s", topic)
                return cached

        prompt = self._prompts.load(stage, build_variables(topic, variables))
        response = await self._call(prompt, topic=topic, category=category)

        article = parse_article_from_text(response.content, topic, category)
        if self.dry_run:
            article.source = ArticleSource.DRY_RUN

        usage = response.token_usage
        if usage.prompt_tokens > 0:
            self._track_cost(usage, article_id or topic)
            article.token_usage = usage

        if use_cache:
            self._cache.set(topic, article, prompt_version)

        return article

    # ── Multi-stage pipeline ──

    async def generate_article_pipeline(
        self,
        topic: str,
        *,
        stages: Sequence[str] | None = None,
        variables: dict[str, Any] | None = None,
        prompt_version: str = "v1",
        use_cache: bool = True,
        article_id: str | None = None,
        category: str | None = None,
    ) -> Article:
        """Run the stages in order, each consuming the previous stage's text.

        A failing first stage raises PipelineError. A later failure is
        recorded in the error log and the previous output is carried
        forward; the stage name ends up in ``Article.degraded_stages``.
        An unknown stage name raises ContentValidationError before any call.
        """
        stage_list = [validate_stage_name(s) for s in (stages or DEFAULT_STAGES)]
        use_cache = self._caching_enabled(use_cache)

        logger.info("Starting %d-stage pipeline for: %s", len(stage_list), topic)

        current = topic
        usage = TokenUsage()
        degraded: list[str] = []

        for i, stage in enumerate(stage_list):
            logger.info("Stage %d/%d: %s", i + 1, len(stage_list), stage)
            try:
                output = await self._run_stage(
                    topic,
                    stage,
                    previous=current,
                    variables=variables,
                    prompt_version=prompt_version,
                    use_cache=use_cache,
                    category=category,
                )
            except Exception as e:
                if i == 0:
                    raise PipelineError(
                        f"Pipeline failed at initial stage ({stage}): {e}",
                        stage=stage,
                        inner=e,
                    ) from e
                logger.warning("Using output from previous stage due to %s failure: %s", stage, e)
                degraded.append(stage)
                self._log_stage_failure(e, topic, stage, article_id)
                continue

            current = output.content
            usage = usage.add(output.token_usage)

            if i < len(stage_list) - 1 and not output.cached and not self.dry_run:
                await self._sleep(self._stage_delay)

        article = parse_article_from_text(current, topic, category)
        if not validate_article_structure(article):
            logger.warning("Final article structure validation failed for '%s'", topic)

        article.degraded_stages = degraded
        if self.dry_run:
            article.source = ArticleSource.DRY_RUN

        if usage.prompt_tokens > 0:
            self._track_cost(usage, article_id or topic)
            article.token_usage = usage

        if use_cache:
            self._cache.set(topic, article, prompt_version)

        return article

    async def _run_stage(
        self,
        topic: str,
        stage: str,
        *,
        previous: str,
        variables: dict[str, Any] | None,
        prompt_version: str,
        use_cache: bool,
        category: str | None,
    ) -> StageOutput:
        if use_cache:
            cached = self._cache.get(topic, prompt_version, stage=stage)
            if cached:
                logger.info("Cache hit for stage: %s", stage)
                content = cached if isinstance(cached, str) else json.dumps(cached)
                return StageOutput(stage=stage, content=content, cached=True)

        stage_vars = dict(variables or {})
        stage_vars["previous_content"] = previous
        prompt = self._prompts.load(stage, build_variables(topic, stage_vars))

        response = await self._call(
            prompt, topic=topic, category=category, max_tokens=max_tokens_for(stage)
        )

        if not validate_stage_output(response.content, stage):
            logger.warning("Stage %s output validation failed, but continuing", stage)

        if use_cache and response.content:
            self._cache.set(topic, response.content, prompt_version, stage=stage)

        return StageOutput(
            stage=stage,
            content=response.content,
            token_usage=response.token_usage,
            model=response.model,
        )

    # ── Helpers ──

    def _caching_enabled(self, use_cache: bool) -> bool:
        return use_cache and self._cache is not None and not self.dry_run

    async def _call(
        self,
        prompt: str,
        *,
        topic: str,
        category: str | None,
        max_tokens: int | None = None,
    ) -> LLMResponse:
        if self.dry_run:
            logger.info("DRY RUN: skipping API call for '%s'", topic)
            return dry_run_response(topic, category)
        return await self._llm.complete(prompt, max_tokens=max_tokens)

    def _track_cost(self, usage: TokenUsage, article_id: str) -> None:
        if self._cost_tracker is None:
            return
        self._cost_tracker.track_llm_cost(
            self._llm.model,
            usage.prompt_tokens,
            usage.completion_tokens,
            article_id=article_id,
        )

    def _log_stage_failure(
        self, error: Exception, topic: str, stage: str, article_id: str | None
    ) -> None:
        if self._error_logger is None:
            return
        self._error_logger.log(
            error,
            category=ErrorCategory.PIPELINE,
            severity=Severity.WARNING,
            module="pipeline",
            operation=f"stage:{stage}",
            metadata={"topic": topic, "stage": stage, "articleId": article_id},
        )
