"""Infrastructure helpers for Ladderwatch (caching)."""

from ladderwatch.infra.cache import CacheStats, TTLCache

__all__ = ["CacheStats", "TTLCache"]
