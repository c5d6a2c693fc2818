"""Cache key generation: md5 over the identifying inputs."""

from __future__ import annotations

import hashlib


def generate_cache_key(topic: str, prompt_version: str = "v1", stage: str | None = None) -> str:
    """Key for an article or a single pipeline stage.

    The key depends only on (topic, prompt_version, stage), so changing the
    prompt version invalidates every entry written under the old one.
    """
    parts = [topic, prompt_version]
    if stage:
        parts.append(stage)
    return _md5("_".join(parts))


def image_cache_key(prompt: str, width: int, height: int) -> str:
    return _md5(f"{prompt}_{width}x{height}")


def _md5(text: str) -> str:
    return hashlib.md5(text.encode("utf-8")).hexdigest()
