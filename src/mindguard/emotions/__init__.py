"""Emotion reference data lookups."""

from mindguard.emotions.cache import (
    CachedArea,
    CacheStats,
    EmotionAreaCache,
    EmotionAreaSource,
    EmotionCacheConfig,
)

__all__ = [
    "CachedArea",
    "CacheStats",
    "EmotionAreaCache",
    "EmotionAreaSource",
    "EmotionCacheConfig",
]
