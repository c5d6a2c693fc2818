"""Validated settings model built from the merged config hierarchy."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator

from sitefactory.config import defaults
from sitefactory.config.hierarchy import load_config_hierarchy
from sitefactory.errors.exceptions import ConfigError
from sitefactory.types import RetryConfig, Stage

_PLACEHOLDER_KEYS = {defaults.PLACEHOLDER_LLM_KEY, defaults.PLACEHOLDER_IMAGE_KEY}
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def is_placeholder_key(key: str | None) -> bool:
    """True when the key is absent or one of the shipped placeholders."""
    return not key or key.strip() in _PLACEHOLDER_KEYS


class Settings(BaseModel):
    api_key: str | None = None
    base_url: str | None = None
    image_api_key: str | None = None

    model: str = defaults.DEFAULT_MODEL
    image_model: str = defaults.DEFAULT_IMAGE_MODEL
    max_tokens: int = defaults.DEFAULT_MAX_TOKENS
    temperature: float = defaults.DEFAULT_TEMPERATURE
    system_prompt: str = defaults.DEFAULT_SYSTEM_PROMPT

    use_pipeline: bool = defaults.DEFAULT_USE_PIPELINE
    pipeline_stages: list[str] = Field(
        default_factory=lambda: list(defaults.DEFAULT_PIPELINE_STAGES)
    )
    prompt_version: str = defaults.DEFAULT_PROMPT_VERSION
    prompts_dir: Path | None = None
    stage_delay: float = defaults.DEFAULT_STAGE_DELAY
    dry_run: bool = defaults.DEFAULT_DRY_RUN

    max_retries: int = defaults.DEFAULT_MAX_RETRIES
    retry_delay: float = defaults.DEFAULT_RETRY_DELAY

    data_dir: Path = Path(defaults.DEFAULT_DATA_DIR)
    output_dir: Path = Path(defaults.DEFAULT_OUTPUT_DIR)
    cache_disabled: bool = defaults.DEFAULT_CACHE_DISABLED
    cache_max_entries: int | None = None

    budget: float | None = None
    max_articles: int = defaults.DEFAULT_MAX_ARTICLES
    request_delay: float = defaults.DEFAULT_REQUEST_DELAY
    min_quality_score: float = defaults.DEFAULT_MIN_QUALITY_SCORE
    multiple_perspectives: bool = defaults.DEFAULT_MULTIPLE_PERSPECTIVES
    vary_styles: bool = defaults.DEFAULT_VARY_STYLES

    site_name: str = defaults.DEFAULT_SITE_NAME
    site_url: str = defaults.DEFAULT_SITE_URL
    site_description: str = defaults.DEFAULT_SITE_DESCRIPTION

    log_level: str = defaults.DEFAULT_LOG_LEVEL

    @field_validator("pipeline_stages")
    @classmethod
    def _known_stages(cls, value: list[str]) -> list[str]:
        known = {s.value for s in Stage}
        unknown = [s for s in value if s not in known]
        if unknown:
            raise ValueError(f"unknown pipeline stages: {', '.join(unknown)}")
        return value

    @field_validator("budget")
    @classmethod
    def _positive_budget(cls, value: float | None) -> float | None:
        if value is not None and value <= 0:
            return None
        return value

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"unknown log level: {value}")
        return level

    # ── Derived paths ──

    @property
    def cache_dir(self) -> Path:
        return self.data_dir / "cache"

    @property
    def image_dir(self) -> Path:
        return self.output_dir / "images"

    @property
    def image_cache_dir(self) -> Path:
        return self.cache_dir / "images"

    @property
    def costs_path(self) -> Path:
        return self.data_dir / "costs.json"

    @property
    def manifest_path(self) -> Path:
        return self.data_dir / "articles.json"

    # ── Credentials ──

    @property
    def has_llm_key(self) -> bool:
        return not is_placeholder_key(self.api_key)

    @property
    def has_image_key(self) -> bool:
        return not is_placeholder_key(self.image_api_key)

    @property
    def image_key(self) -> str | None:
        """Key for the image provider; falls back to the LLM key."""
        if self.has_image_key:
            return self.image_api_key
        return self.api_key if self.has_llm_key else None

    @property
    def effective_dry_run(self) -> bool:
        return self.dry_run or not self.has_llm_key

    def retry_config(self) -> RetryConfig:
        return RetryConfig(max_attempts=self.max_retries, base_delay=self.retry_delay)


def load_settings(**overrides: Any) -> Settings:
    """Resolve the config hierarchy and validate it into ``Settings``."""
    raw = load_config_hierarchy(**overrides)
    known = {k: v for k, v in raw.items() if k in Settings.model_fields}
    try:
        return Settings.model_validate(known)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
