"""
Services - Cache Service

TTL cache for search result pages, keyed by query text, offset and limit.
"""

from typing import Optional
from cachetools import TTLCache

from hatena_search.config import get_settings
from hatena_search.schemas import SearchBatch, SearchQuery


class CacheService:
    """TTL-based cache of fetched search pages."""

    def __init__(self, settings=None):
        self.settings = settings or get_settings()
        self._pages = TTLCache(
            maxsize=self.settings.cache.max_entries,
            ttl=self.settings.cache.ttl_seconds,
        )

    @staticmethod
    def page_key(query: SearchQuery) -> str:
        """Cache key for one page of a search."""
        return f"page:{query.text}:{query.offset}:{query.limit}"

    def get(self, query: SearchQuery) -> Optional[SearchBatch]:
        """
        Get a cached page.

        Args:
            query: The request the page was fetched for

        Returns:
            Cached SearchBatch or None
        """
        if not self.settings.cache.enabled:
            return None
        return self._pages.get(self.page_key(query))

    def set(self, query: SearchQuery, batch: SearchBatch) -> None:
        """Store a fetched page."""
        if not self.settings.cache.enabled:
            return
        self._pages[self.page_key(query)] = batch

    def clear(self) -> None:
        """Drop every cached page."""
        self._pages.clear()

    def get_stats(self) -> dict:
        """Get cache statistics."""
        return {
            "size": len(self._pages),
            "maxsize": self._pages.maxsize,
            "ttl": self._pages.ttl,
            "enabled": self.settings.cache.enabled,
        }
