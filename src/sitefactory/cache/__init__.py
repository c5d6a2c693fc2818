"""Cache subsystem: JSON files on disk keyed by content hash."""

from sitefactory.cache.disk import ArticleCache
from sitefactory.cache.keys import generate_cache_key, image_cache_key
from sitefactory.cache.stats import CacheEntry, CacheStats

__all__ = [
    "ArticleCache",
    "CacheEntry",
    "CacheStats",
    "generate_cache_key",
    "image_cache_key",
]
