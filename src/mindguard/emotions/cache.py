"""Read-through cache for emotion code to area lookups.

Emotion reference data rarely changes, so resolved areas are kept in
memory with a TTL and LRU eviction. Unresolvable codes are never cached.
"""

import asyncio
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Protocol

from mindguard.config.settings import Settings, get_settings
from mindguard.core.logging import get_logger
from mindguard.monitoring.types import Area

logger = get_logger(__name__)


class EmotionAreaSource(Protocol):
    """Backing store that maps an emotion code to its area."""

    async def load_area(self, emotion_code: str) -> Area | str | None:
        """Load the area for an emotion code, or None if unknown."""
        ...


@dataclass
class EmotionCacheConfig:
    """Configuration for the emotion area cache.

    Attributes:
        enabled: Whether caching is enabled
        ttl_seconds: Time an entry stays valid
        max_entries: Maximum number of entries in the cache
    """

    enabled: bool = True
    ttl_seconds: int = 86400
    max_entries: int = 512

    @classmethod
    def from_settings(cls, settings: Settings) -> "EmotionCacheConfig":
        """Build the cache configuration from application settings."""
        return cls(
            ttl_seconds=settings.emotion_cache_ttl_seconds,
            max_entries=settings.emotion_cache_max_entries,
        )


@dataclass
class CachedArea:
    """A cached area with its expiry."""

    area: Area
    cached_at: datetime
    expires_at: datetime
    access_count: int = 0
    last_accessed: datetime = field(default_factory=lambda: datetime.now(UTC))


@dataclass
class CacheStats:
    """Statistics about cache performance."""

    hits: int = 0
    misses: int = 0
    evictions: int = 0
    expirations: int = 0
    unresolved: int = 0
    entries: int = 0

    @property
    def hit_rate(self) -> float:
        """Calculate cache hit rate."""
        total = self.hits + self.misses
        if total == 0:
            return 0.0
        return self.hits / total


class EmotionAreaCache:
    """Read-through cache in front of an ``EmotionAreaSource``.

    Example:
        cache = EmotionAreaCache(source)
        area = await cache.get_area("E001")  # loads once, then served from memory
        cache.invalidate("E001")  # after reference data changes
    """

    def __init__(
        self,
        source: EmotionAreaSource,
        config: EmotionCacheConfig | None = None,
    ):
        """Initialize the cache.

        Args:
            source: Backing lookup for cache misses
            config: Cache configuration (defaults from settings)
        """
        self.source = source
        self.config = config or EmotionCacheConfig.from_settings(get_settings())
        self._cache: OrderedDict[str, CachedArea] = OrderedDict()
        self._lock = asyncio.Lock()
        self._stats = CacheStats()

    @property
    def stats(self) -> CacheStats:
        """Get current cache statistics."""
        self._stats.entries = len(self._cache)
        return self._stats

    async def get_area(self, emotion_code: str | None) -> Area | None:
        """Resolve an emotion code to its area.

        Args:
            emotion_code: Code assigned by the upstream classifier

        Returns:
            The area, or None if the code is empty, unknown or not an area
        """
        if not emotion_code:
            return None

        cached = self._get_cached(emotion_code)
        if cached is not None:
            return cached

        raw = await self.source.load_area(emotion_code)
        try:
            area = Area.parse(raw)
        except ValueError:
            logger.warning("emotion_area_invalid", emotion_code=emotion_code, area=raw)
            area = None

        if area is None:
            self._stats.unresolved += 1
            logger.debug("emotion_area_unresolved", emotion_code=emotion_code)
            return None

        self._store(emotion_code, area)
        return area

    def _get_cached(self, emotion_code: str) -> Area | None:
        if not self.config.enabled:
            self._stats.misses += 1
            return None

        cached = self._cache.get(emotion_code)
        if cached is None:
            self._stats.misses += 1
            return None

        now = datetime.now(UTC)
        if cached.expires_at <= now:
            self._cache.pop(emotion_code, None)
            self._stats.misses += 1
            self._stats.expirations += 1
            return None

        self._stats.hits += 1
        cached.access_count += 1
        cached.last_accessed = now
        self._cache.move_to_end(emotion_code)
        return cached.area

    def _store(self, emotion_code: str, area: Area) -> None:
        if not self.config.enabled:
            return

        now = datetime.now(UTC)
        while len(self._cache) >= self.config.max_entries:
            oldest_key = next(iter(self._cache))
            self._cache.pop(oldest_key)
            self._stats.evictions += 1
            logger.debug("emotion_cache_evicted", emotion_code=oldest_key)

        self._cache[emotion_code] = CachedArea(
            area=area,
            cached_at=now,
            expires_at=now + timedelta(seconds=self.config.ttl_seconds),
        )

    def invalidate(self, emotion_code: str) -> bool:
        """Invalidate one cached code.

        Returns:
            True if an entry was removed, False if not found
        """
        if emotion_code in self._cache:
            del self._cache[emotion_code]
            logger.info("emotion_cache_invalidated", emotion_code=emotion_code)
            return True
        return False

    def invalidate_all(self) -> int:
        """Clear all cached entries.

        Returns:
            Number of entries cleared
        """
        count = len(self._cache)
        self._cache.clear()
        logger.info("emotion_cache_cleared", entries=count)
        return count

    async def cleanup_expired(self) -> int:
        """Remove all expired entries.

        Returns:
            Number of entries removed
        """
        async with self._lock:
            now = datetime.now(UTC)
            expired = [code for code, cached in self._cache.items() if cached.expires_at <= now]
            for code in expired:
                del self._cache[code]
            self._stats.expirations += len(expired)
            return len(expired)
