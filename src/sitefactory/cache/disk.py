"""Disk cache: one JSON file per (topic, prompt version, stage)."""

from __future__ import annotations

import contextlib
import json
import logging
import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ValidationError

from sitefactory.cache.keys import generate_cache_key
from sitefactory.cache.stats import CacheEntry, CacheStats

logger = logging.getLogger(__name__)


class ArticleCache:
    """Content-addressed JSON memo for generated articles and stage outputs.

    A missing file is a miss. A file that is empty, unparsable, not a JSON
    object, or carries neither ``article`` nor ``topic`` is deleted and
    reported as a miss. Reads never raise and failed writes are logged.

    When ``max_entries`` is set, ``set`` evicts the least recently used
    files (by mtime; hits refresh mtime) until the count fits.
    """

    def __init__(self, cache_dir: Path, max_entries: int | None = None) -> None:
        self._cache_dir = Path(cache_dir)
        self._max_entries = max_entries
        self._hits = 0
        self._misses = 0
        self._corrupted = 0
        self._cache_dir.mkdir(parents=True, exist_ok=True)

    @property
    def cache_dir(self) -> Path:
        return self._cache_dir

    def path_for(self, topic: str, version: str = "v1", stage: str | None = None) -> Path:
        return self._cache_dir / f"{generate_cache_key(topic, version, stage)}.json"

    def get(self, topic: str, version: str = "v1", stage: str | None = None) -> Any:
        """Return the cached payload, or None on a miss."""
        entry = self.get_entry(topic, version, stage)
        if entry is None or not entry.article:
            return None
        return entry.article

    def get_entry(
        self, topic: str, version: str = "v1", stage: str | None = None
    ) -> CacheEntry | None:
        path = self.path_for(topic, version, stage)
        if not path.exists():
            self._misses += 1
            return None

        data = self._read_valid(path)
        if data is None:
            self._misses += 1
            return None

        try:
            entry = CacheEntry.model_validate(data)
        except ValidationError:
            # Legacy entries may lack a topic string; keep the payload.
            entry = CacheEntry(
                topic=str(data.get("topic") or topic),
                prompt_version=str(data.get("promptVersion") or version),
                stage=stage,
                article=data.get("article"),
            )

        self._touch(path)
        self._hits += 1
        logger.debug("Cache hit for %s (stage=%s, version=%s)", topic, stage, version)
        return entry

    def set(
        self,
        topic: str,
        payload: Any,
        version: str = "v1",
        stage: str | None = None,
    ) -> None:
        """Write (or overwrite) the entry for this key."""
        path = self.path_for(topic, version, stage)
        entry = CacheEntry(
            topic=topic,
            prompt_version=version,
            stage=stage,
            article=_to_jsonable(payload),
        )
        try:
            self._cache_dir.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(entry.model_dump(mode="json", by_alias=True), indent=2))
            logger.debug("Cached %s (stage=%s, version=%s)", topic, stage, version)
        except (OSError, TypeError, ValueError) as e:
            logger.warning("Error writing cache file %s: %s", path, e)
            return

        if self._max_entries is not None:
            self._evict(keep=path)

    def clear(self) -> int:
        """Delete every cache file. Returns the number removed."""
        removed = 0
        for path in self._files():
            try:
                path.unlink()
                removed += 1
            except OSError as e:
                logger.warning("Failed to remove cache file %s: %s", path, e)
        logger.info("Cache cleared (%d entries)", removed)
        return removed

    def stats(self) -> CacheStats:
        files = self._files()
        size = 0
        for path in files:
            try:
                size += path.stat().st_size
            except OSError:
                continue
        return CacheStats(
            entries=len(files),
            size_bytes=size,
            hits=self._hits,
            misses=self._misses,
            corrupted=self._corrupted,
        )

    @property
    def entry_count(self) -> int:
        return len(self._files())

    def _files(self) -> list[Path]:
        if not self._cache_dir.exists():
            return []
        return [p for p in self._cache_dir.iterdir() if p.suffix == ".json" and p.is_file()]

    def _read_valid(self, path: Path) -> dict[str, Any] | None:
        try:
            text = path.read_text()
        except OSError as e:
            logger.warning("Error reading cache file %s: %s", path, e)
            return None

        if not text.strip():
            logger.warning("Cache file is empty, removing: %s", path)
            self._remove_corrupted(path)
            return None

        try:
            data = json.loads(text)
        except json.JSONDecodeError:
            logger.warning("Corrupted cache file detected, removing: %s", path)
            self._remove_corrupted(path)
            return None

        if not isinstance(data, dict):
            logger.warning("Invalid cache structure, removing: %s", path)
            self._remove_corrupted(path)
            return None

        if not data.get("article") and not data.get("topic"):
            logger.warning("Cache missing required fields, removing: %s", path)
            self._remove_corrupted(path)
            return None

        return data

    def _remove_corrupted(self, path: Path) -> None:
        self._corrupted += 1
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.error("Failed to remove corrupted cache file %s: %s", path, e)

    @staticmethod
    def _touch(path: Path) -> None:
        with contextlib.suppress(OSError):
            os.utime(path)

    def _evict(self, keep: Path) -> None:
        files = self._files()
        excess = len(files) - (self._max_entries or 0)
        if excess <= 0:
            return

        def _mtime(p: Path) -> float:
            try:
                return p.stat().st_mtime
            except OSError:
                return 0.0

        candidates = sorted((p for p in files if p != keep), key=_mtime)
        for path in candidates[:excess]:
            try:
                path.unlink()
                logger.debug("Evicted cache file %s", path.name)
            except OSError as e:
                logger.warning("Failed to evict cache file %s: %s", path, e)


def _to_jsonable(payload: Any) -> Any:
    if isinstance(payload, BaseModel):
        return payload.model_dump(mode="json", by_alias=True)
    if isinstance(payload, list):
        return [_to_jsonable(p) for p in payload]
    if isinstance(payload, dict):
        return {k: _to_jsonable(v) for k, v in payload.items()}
    return payload
