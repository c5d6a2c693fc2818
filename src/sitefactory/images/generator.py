"""Header image generation with deterministic stock-photo fallback."""

from __future__ import annotations

import asyncio
import base64
import hashlib
import json
import logging
import re
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING

import httpx
import openai

from sitefactory.cache.keys import image_cache_key
from sitefactory.config.defaults import DEFAULT_IMAGE_MODEL
from sitefactory.config.schema import is_placeholder_key
from sitefactory.errors.retry import retry_async
from sitefactory.types import RetryConfig

if TYPE_CHECKING:
    from sitefactory.costs.tracker import CostTracker

logger = logging.getLogger(__name__)

UNSPLASH_BASE = "https://images.unsplash.com"
PLACEHOLDER_PHOTO_ID = "photo-1518186285589-2f7649de83e0"
UNSPLASH_PHOTO_IDS = [
    "photo-1518186285589-2f7649de83e0",  # business/tech
    "photo-1460925895917-afdab827c52f",  # data/analytics
    "photo-1504868584819-f8e8b4b6d7e3",  # abstract/business
    "photo-1551288049-bebda4e38f71",  # technology
    "photo-1543286386-713bdd548da4",  # analytics
    "photo-1454165804606-c3d57bc86b40",  # business intelligence
]

SUPPORTED_SIZES: dict[str, tuple[int, int]] = {
    "articleHeader": (1200, 800),
    "articleCard": (600, 400),
    "thumbnail": (300, 200),
    "hero": (1920, 1080),
}

_DEFAULT_WIDTH, _DEFAULT_HEIGHT = SUPPORTED_SIZES["articleHeader"]

_KEYWORD_NOISE = re.compile(r"Professional|high-quality|image|suitable|article|header", re.I)
_KEYWORD_DIMENSIONS = re.compile(r"Dimensions.*pixels", re.I)
_KEYWORD_STYLE = re.compile(r"Style.*style", re.I)

_DOWNLOAD_TIMEOUT = 30.0  # seconds


def extract_keywords(prompt: str) -> str:
    """First three words longer than three characters, after dropping boilerplate."""
    cleaned = _KEYWORD_NOISE.sub("", prompt)
    cleaned = _KEYWORD_DIMENSIONS.sub("", cleaned)
    cleaned = _KEYWORD_STYLE.sub("", cleaned).strip()
    words = [w for w in cleaned.split() if len(w) > 3]
    return ",".join(words[:3])


def stock_photo_id(keywords: str) -> str:
    digest = hashlib.md5(keywords.encode("utf-8")).hexdigest()
    return UNSPLASH_PHOTO_IDS[int(digest[:2], 16) % len(UNSPLASH_PHOTO_IDS)]


def stock_photo_url(prompt: str, width: int, height: int) -> str:
    photo_id = stock_photo_id(extract_keywords(prompt))
    return (
        f"{UNSPLASH_BASE}/{photo_id}"
        f"?fit=crop&crop=center&q=85&auto=format&fm=jpg&w={width}&h={height}"
    )


def placeholder_url(width: int, height: int) -> str:
    return f"{UNSPLASH_BASE}/{PLACEHOLDER_PHOTO_ID}?fit=crop&q=80&w={width}&h={height}"


def generate_image_prompt(
    topic: str, style: str = "editorial photography", mood: str = "professional"
) -> str:
    return (
        f'Professional {style} image related to "{topic}". {mood} mood, high-quality, '
        "suitable for article header. Clean composition, good lighting."
    )


def supported_sizes() -> dict[str, dict[str, int]]:
    return {name: {"width": w, "height": h} for name, (w, h) in SUPPORTED_SIZES.items()}


def _provider_size(width: int, height: int) -> str:
    """Closest size the Images API accepts for the requested aspect ratio."""
    if width > height:
        return "1792x1024"
    if height > width:
        return "1024x1792"
    return "1024x1024"


class ImageGenerator:
    """Produces an image URL for a prompt at an exact size.

    Order of attempts: cached local file, the OpenAI Images API, a stock
    photo chosen from the prompt's keywords, then a fixed placeholder.
    Remote fallback URLs always end with ``w={width}&h={height}``.
    """

    def __init__(
        self,
        image_dir: Path,
        cache_dir: Path,
        api_key: str | None = None,
        model: str = DEFAULT_IMAGE_MODEL,
        base_url: str | None = None,
        dry_run: bool = False,
        cost_tracker: CostTracker | None = None,
        retry_config: RetryConfig | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        client: openai.AsyncOpenAI | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._image_dir = Path(image_dir)
        self._cache_dir = Path(cache_dir)
        self.model = model
        self._cost_tracker = cost_tracker
        self._retry_config = retry_config or RetryConfig()
        self._sleep = sleep
        self._client = client
        self._http = http_client
        self._owns_http = http_client is None

        if client is None and not dry_run and not is_placeholder_key(api_key):
            self._client = openai.AsyncOpenAI(api_key=api_key, base_url=base_url)
        elif client is None:
            if not dry_run:
                logger.warning("Image API key not set. Using dry-run mode for images.")
            dry_run = True
        self.dry_run = dry_run

    async def generate_image(
        self,
        prompt: str,
        *,
        width: int = _DEFAULT_WIDTH,
        height: int = _DEFAULT_HEIGHT,
        save_local: bool = True,
        article_id: str | None = None,
    ) -> str:
        key = image_cache_key(prompt, width, height)

        cached = self._get_cached(key)
        if cached:
            logger.info("Cache hit for image: %s", prompt[:50])
            return cached

        if self.dry_run:
            logger.info("DRY RUN: skipping image generation for '%s'", prompt[:50])
            return placeholder_url(width, height)

        provider_image: str | bytes | None = None
        try:
            provider_image = await retry_async(
                self._generate_with_provider,
                self._retry_config,
                sleep=self._sleep,
                prompt=prompt,
                width=width,
                height=height,
            )
        except Exception as e:
            logger.warning("Image provider failed: %s. Using fallback.", e)

        if provider_image is not None and self._cost_tracker is not None:
            self._cost_tracker.track_image_cost(1, article_id=article_id)

        if isinstance(provider_image, bytes):
            local = self._write_local(key, width, height, provider_image)
            if local is not None:
                self._save_cached(key, prompt, width, height, local)
                return self._local_url(local)
            provider_image = None

        image_url = provider_image or self._fallback_url(prompt, width, height)

        if save_local:
            local = await self._download(image_url, key, width, height)
            if local is not None:
                self._save_cached(key, prompt, width, height, local)
                return self._local_url(local)

        return image_url

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
        if self._http is not None and self._owns_http:
            await self._http.aclose()

    # ── Provider ──

    async def _generate_with_provider(self, prompt: str, width: int, height: int) -> str | bytes:
        enhanced = (
            f"{prompt}. Professional, high-quality image suitable for article header. "
            f"Dimensions: {width}x{height} pixels. "
            "Style: modern, clean, editorial photography style."
        )
        response = await self._client.images.generate(
            model=self.model,
            prompt=enhanced,
            size=_provider_size(width, height),
            n=1,
        )
        if not response.data:
            raise ValueError("Image provider returned no data")
        image = response.data[0]
        if image.url:
            return image.url
        if image.b64_json:
            return base64.b64decode(image.b64_json)
        raise ValueError("Image provider returned neither url nor b64_json")

    @staticmethod
    def _fallback_url(prompt: str, width: int, height: int) -> str:
        try:
            return stock_photo_url(prompt, width, height)
        except Exception as e:
            logger.error("Stock photo fallback failed: %s", e)
            return placeholder_url(width, height)

    # ── Local files ──

    def _filename(self, key: str, width: int, height: int) -> str:
        return f"{key}_{width}x{height}.jpg"

    @staticmethod
    def _local_url(path: Path) -> str:
        return f"/images/{path.name}"

    def _write_local(self, key: str, width: int, height: int, data: bytes) -> Path | None:
        path = self._image_dir / self._filename(key, width, height)
        try:
            self._image_dir.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as e:
            logger.warning("Failed to save image %s: %s", path, e)
            return None
        logger.info("Saved image: %s", path.name)
        return path

    async def _download(self, url: str, key: str, width: int, height: int) -> Path | None:
        if not url.startswith("http"):
            return None
        if self._http is None:
            self._http = httpx.AsyncClient(timeout=_DOWNLOAD_TIMEOUT, follow_redirects=True)
        try:
            response = await self._http.get(url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning("Failed to download image: %s", e)
            return None
        return self._write_local(key, width, height, response.content)

    # ── Cache ──

    def _get_cached(self, key: str) -> str | None:
        cache_file = self._cache_dir / f"{key}.json"
        if not cache_file.exists():
            return None
        try:
            data = json.loads(cache_file.read_text())
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Error reading image cache: %s", e)
            return None
        image_path = data.get("imagePath") if isinstance(data, dict) else None
        if image_path and Path(image_path).exists():
            return self._local_url(Path(image_path))
        return None

    def _save_cached(self, key: str, prompt: str, width: int, height: int, path: Path) -> None:
        record = {
            "prompt": prompt,
            "width": width,
            "height": height,
            "imagePath": str(path),
            "cachedAt": datetime.now(UTC).isoformat(),
        }
        try:
            self._cache_dir.mkdir(parents=True, exist_ok=True)
            (self._cache_dir / f"{key}.json").write_text(json.dumps(record, indent=2))
        except OSError as e:
            logger.warning("Error saving image cache: %s", e)
