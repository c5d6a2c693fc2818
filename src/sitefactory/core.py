"""Top-level wiring: one SiteFactory owns every collaborator for a run."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from sitefactory.cache.disk import ArticleCache
from sitefactory.config.schema import Settings, load_settings
from sitefactory.content.lenses import LensSystem
from sitefactory.content.orchestrator import ContentOrchestrator
from sitefactory.content.topics import TopicManager
from sitefactory.content.voices import VoiceSystem
from sitefactory.costs.tracker import CostTracker
from sitefactory.errors.log import ErrorLogger
from sitefactory.images.generator import ImageGenerator
from sitefactory.llm.client import AsyncLLMClient
from sitefactory.llm.prompts import PromptLoader
from sitefactory.pipeline.generator import ArticleGenerator
from sitefactory.quality.scorer import QualityScorer
from sitefactory.quality.seo import SEOAnalyzer, SiteMeta
from sitefactory.site.render import SiteBuilder

logger = logging.getLogger(__name__)


class SiteFactory:
    """Builds the client, cache, trackers and generators from ``Settings``.

    Nothing is global: every collaborator is created here and passed down
    through constructors.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        seed: int | None = None,
    ) -> None:
        self.settings = settings or load_settings()
        s = self.settings
        dry_run = s.effective_dry_run

        self.error_logger = ErrorLogger(s.data_dir)
        self.cost_tracker = CostTracker(s.data_dir, budget=s.budget)
        self.cache: ArticleCache | None = (
            None if s.cache_disabled else ArticleCache(s.cache_dir, max_entries=s.cache_max_entries)
        )

        self.llm = AsyncLLMClient(
            api_key=s.api_key,
            base_url=s.base_url,
            model=s.model,
            system_prompt=s.system_prompt,
            temperature=s.temperature,
            max_tokens=s.max_tokens,
            retry_config=s.retry_config(),
            dry_run=dry_run,
            sleep=sleep,
        )
        self.generator = ArticleGenerator(
            self.llm,
            cache=self.cache,
            cost_tracker=self.cost_tracker,
            error_logger=self.error_logger,
            prompts=PromptLoader(s.prompts_dir),
            stage_delay=s.stage_delay,
            sleep=sleep,
        )
        self.images = ImageGenerator(
            s.image_dir,
            s.image_cache_dir,
            api_key=s.image_key,
            model=s.image_model,
            base_url=s.base_url,
            dry_run=dry_run,
            cost_tracker=self.cost_tracker,
            retry_config=s.retry_config(),
            sleep=sleep,
        )

        self.topics = TopicManager(seed=seed)
        self.lenses = LensSystem(rng=self.topics.rng)
        self.voices = VoiceSystem(rng=self.topics.rng)
        self.orchestrator = ContentOrchestrator(
            self.generator,
            scorer=QualityScorer(),
            error_logger=self.error_logger,
            topics=self.topics,
            lenses=self.lenses,
            voices=self.voices,
            use_pipeline=s.use_pipeline,
            stages=s.pipeline_stages,
            prompt_version=s.prompt_version,
        )

    @property
    def dry_run(self) -> bool:
        return self.llm.dry_run

    @property
    def pipeline(self) -> list[str]:
        """Stage names recorded in the manifest; empty for single-stage runs."""
        return list(self.settings.pipeline_stages) if self.settings.use_pipeline else []

    def site_meta(self) -> SiteMeta:
        return SiteMeta(name=self.settings.site_name, url=self.settings.site_url)

    def site_builder(self) -> SiteBuilder:
        return SiteBuilder(
            site=self.site_meta(),
            description=self.settings.site_description,
            seo=SEOAnalyzer(),
        )

    async def close(self) -> None:
        await self.llm.close()
        await self.images.close()
