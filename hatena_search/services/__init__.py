"""
Services Module - Search Orchestration

Provides the incremental search controller, candidate formatting, page
caching and the one-shot search service.
"""

from hatena_search.services.cache_service import CacheService
from hatena_search.services.formatter import CandidateFormatter
from hatena_search.services.search_controller import (
    Control,
    ControllerState,
    SearchController,
)
from hatena_search.services.search_service import (
    BookmarkSearchService,
    get_search_service,
)

__all__ = [
    "CacheService",
    "CandidateFormatter",
    "Control",
    "ControllerState",
    "SearchController",
    "BookmarkSearchService",
    "get_search_service",
]
