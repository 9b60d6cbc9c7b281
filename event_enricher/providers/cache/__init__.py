"""Cache provider implementations."""

from event_enricher.providers.cache.memory_cache import MemoryCacheProvider

__all__ = ["MemoryCacheProvider"]
