"""Package-level default configuration values."""

from __future__ import annotations

from typing import Any

# Default model settings
DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_IMAGE_MODEL = "dall-e-3"
DEFAULT_MAX_TOKENS = 2000
DEFAULT_TEMPERATURE = 0.7
DEFAULT_SYSTEM_PROMPT = (
    "You are an expert content writer specializing in creating high-quality, "
    "engaging articles with natural human voice."
)

# Placeholder credentials shipped in sample configs; treated as missing
PLACEHOLDER_LLM_KEY = "placeholder-llm-key"
PLACEHOLDER_IMAGE_KEY = "placeholder-nano-banana-key"

# Default pipeline settings
DEFAULT_USE_PIPELINE = True
DEFAULT_PIPELINE_STAGES = ["blueprint", "draft", "enhance", "humanize", "seo"]
DEFAULT_PROMPT_VERSION = "v1"
DEFAULT_STAGE_DELAY = 0.5  # seconds
DEFAULT_DRY_RUN = False

# Default retry settings
DEFAULT_MAX_RETRIES = 3
DEFAULT_RETRY_DELAY = 1.0  # seconds

# Default storage locations (relative to cwd unless absolute)
DEFAULT_DATA_DIR = "data"
DEFAULT_OUTPUT_DIR = "dist"
DEFAULT_CACHE_DISABLED = False

# Default bulk settings
DEFAULT_MAX_ARTICLES = 50
DEFAULT_REQUEST_DELAY = 0.5  # seconds
DEFAULT_MIN_QUALITY_SCORE = 0.0
DEFAULT_MULTIPLE_PERSPECTIVES = True
DEFAULT_VARY_STYLES = True

# Site identity
DEFAULT_SITE_NAME = "EveryTopic News"
DEFAULT_SITE_URL = "https://everytopic.news"
DEFAULT_SITE_DESCRIPTION = "Long-form articles on ideas that shape how we live and work."

# Log level
DEFAULT_LOG_LEVEL = "WARNING"


def get_defaults() -> dict[str, Any]:
    """Return all defaults as a flat dictionary for merging."""
    return {
        "model": DEFAULT_MODEL,
        "image_model": DEFAULT_IMAGE_MODEL,
        "max_tokens": DEFAULT_MAX_TOKENS,
        "temperature": DEFAULT_TEMPERATURE,
        "system_prompt": DEFAULT_SYSTEM_PROMPT,
        "use_pipeline": DEFAULT_USE_PIPELINE,
        "pipeline_stages": list(DEFAULT_PIPELINE_STAGES),
        "prompt_version": DEFAULT_PROMPT_VERSION,
        "stage_delay": DEFAULT_STAGE_DELAY,
        "dry_run": DEFAULT_DRY_RUN,
        "max_retries": DEFAULT_MAX_RETRIES,
        "retry_delay": DEFAULT_RETRY_DELAY,
        "data_dir": DEFAULT_DATA_DIR,
        "output_dir": DEFAULT_OUTPUT_DIR,
        "cache_disabled": DEFAULT_CACHE_DISABLED,
        "max_articles": DEFAULT_MAX_ARTICLES,
        "request_delay": DEFAULT_REQUEST_DELAY,
        "min_quality_score": DEFAULT_MIN_QUALITY_SCORE,
        "multiple_perspectives": DEFAULT_MULTIPLE_PERSPECTIVES,
        "vary_styles": DEFAULT_VARY_STYLES,
        "site_name": DEFAULT_SITE_NAME,
        "site_url": DEFAULT_SITE_URL,
        "site_description": DEFAULT_SITE_DESCRIPTION,
        "log_level": DEFAULT_LOG_LEVEL,
    }
