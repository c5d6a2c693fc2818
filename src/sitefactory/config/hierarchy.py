"""Layered config resolution for sitefactory.

Each layer overrides the one before it:
  1. Package defaults
  2. ``~/.sitefactory/config.yaml``
  3. ``sitefactory.yaml`` in the working directory or the nearest parent
  4. Environment variables (OPENAI_API_KEY, LLM_API_KEY, DRY_RUN, SITEFACTORY_*, ...)
  5. Runtime overrides that are not None
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from pathlib import Path
from typing import Any

import yaml

from sitefactory.config.defaults import get_defaults

logger = logging.getLogger(__name__)

_GLOBAL_CONFIG_PATH = Path.home() / ".sitefactory" / "config.yaml"
_PROJECT_CONFIG_NAME = "sitefactory.yaml"

# Env var -> config key. Read in order, so OPENAI_API_KEY wins over LLM_API_KEY.
_ENV_MAP: dict[str, str] = {
    "LLM_API_KEY": "api_key",
    "OPENAI_API_KEY": "api_key",
    "OPENAI_BASE_URL": "base_url",
    "IMAGE_GEN_API_KEY": "image_api_key",
    "DRY_RUN": "dry_run",
    "USE_PIPELINE": "use_pipeline",
    "MAX_ARTICLES": "max_articles",
    "MONTHLY_BUDGET": "budget",
    "MIN_QUALITY_SCORE": "min_quality_score",
    "USE_MULTIPLE_PERSPECTIVES": "multiple_perspectives",
    "VARY_STYLES": "vary_styles",
    "SITEFACTORY_MODEL": "model",
    "SITEFACTORY_IMAGE_MODEL": "image_model",
    "SITEFACTORY_DATA_DIR": "data_dir",
    "SITEFACTORY_OUTPUT_DIR": "output_dir",
    "SITEFACTORY_PROMPTS_DIR": "prompts_dir",
    "SITEFACTORY_PROMPT_VERSION": "prompt_version",
    "SITEFACTORY_PIPELINE_STAGES": "pipeline_stages",
    "SITEFACTORY_CACHE_DISABLED": "cache_disabled",
    "SITEFACTORY_CACHE_MAX_ENTRIES": "cache_max_entries",
    "SITEFACTORY_MAX_RETRIES": "max_retries",
    "SITEFACTORY_SITE_URL": "site_url",
    "SITEFACTORY_LOG_LEVEL": "log_level",
}

_YES = frozenset({"1", "true", "yes", "on"})
_NO = frozenset({"0", "false", "no", "off", ""})


def _to_bool(raw: str) -> bool:
    token = raw.strip().lower()
    if token in _YES:
        return True
    if token in _NO:
        return False
    raise ValueError(f"not a boolean: {raw!r}")


def _to_list(raw: str) -> list[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


_CONVERTERS: dict[str, Callable[[str], Any]] = {
    "dry_run": _to_bool,
    "use_pipeline": _to_bool,
    "multiple_perspectives": _to_bool,
    "vary_styles": _to_bool,
    "cache_disabled": _to_bool,
    "pipeline_stages": _to_list,
    "max_articles": int,
    "max_tokens": int,
    "max_retries": int,
    "cache_max_entries": int,
    "temperature": float,
    "budget": float,
    "min_quality_score": float,
    "stage_delay": float,
    "retry_delay": float,
    "request_delay": float,
}


def load_config_hierarchy(**runtime_overrides: Any) -> dict[str, Any]:
    """Resolve every layer into one flat dict of config values."""
    merged = get_defaults()
    for layer in (_read_yaml(_GLOBAL_CONFIG_PATH), _read_yaml(_project_config_path())):
        merged.update(layer)
    merged.update(_env_layer())
    merged.update({k: v for k, v in runtime_overrides.items() if v is not None})
    return merged


def _project_config_path() -> Path | None:
    here = Path.cwd()
    candidates = (d / _PROJECT_CONFIG_NAME for d in (here, *here.parents))
    return next((c for c in candidates if c.exists()), None)


def _read_yaml(path: Path | None) -> dict[str, Any]:
    """Mapping from a YAML file; empty for a missing, unreadable or non-mapping file."""
    if path is None or not path.is_file():
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Skipping unreadable config %s: %s", path, e)
        return {}
    if not isinstance(data, dict):
        logger.warning("Skipping config %s: top level must be a mapping", path)
        return {}
    logger.debug("Loaded config layer %s", path)
    return data


def _env_layer() -> dict[str, Any]:
    layer: dict[str, Any] = {}
    for env_key, config_key in _ENV_MAP.items():
        raw = os.environ.get(env_key)
        if raw is not None:
            layer[config_key] = _convert(config_key, raw)
    return layer


def _convert(key: str, raw: str) -> Any:
    """Typed value for ``raw``; the string itself when it does not parse."""
    converter = _CONVERTERS.get(key)
    if converter is None:
        return raw
    try:
        return converter(raw)
    except (ValueError, TypeError):
        logger.warning("Env value for '%s' is not valid, keeping the raw string: %r", key, raw)
        return raw
