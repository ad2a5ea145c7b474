"""
Services - Search Service

One-shot search: runs a controller session to completion and collects the
formatted candidates.
"""

import logging
from typing import Any, Callable, List, Optional

import httpx

from hatena_search.config import get_settings
from hatena_search.errors import HatenaSearchError
from hatena_search.pipeline.client import HatenaBookmarkClient
from hatena_search.pipeline.paginator import PaginationDriver
from hatena_search.schemas import Candidate
from hatena_search.services.cache_service import CacheService
from hatena_search.services.formatter import CandidateFormatter
from hatena_search.services.search_controller import Control, SearchController

logger = logging.getLogger(__name__)


class BookmarkSearchService:
    """
    Owns one cached client for the life of the process.

    Every search and every controller created here shares the same page
    cache, so retyping a query reuses pages fetched earlier.
    """

    def __init__(
        self,
        settings=None,
        client=None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings or get_settings()
        self.cache = CacheService(self.settings)
        self.client = client or HatenaBookmarkClient(
            self.settings, cache=self.cache, transport=transport
        )
        self.driver = PaginationDriver(self.client, self.settings)
        self.formatter = CandidateFormatter()

    def create_controller(
        self,
        sink: Callable[[Any], None],
        on_error: Optional[Callable[[HatenaSearchError], None]] = None,
    ) -> SearchController:
        """Incremental controller backed by this service's cached client."""
        return SearchController(self.driver, sink, self.formatter, on_error=on_error)

    async def search(
        self,
        query: str,
        max_results: Optional[int] = None,
    ) -> List[Candidate]:
        """
        Search bookmarks and return formatted candidates.

        Args:
            query: Search text
            max_results: Stop after this many candidates (default: from settings)

        Returns:
            Candidates in server order

        Raises:
            ValueError: max_results is less than 1
            HatenaSearchError: the search failed
        """
        if max_results is not None and max_results < 1:
            raise ValueError(f"max_results must be at least 1, got {max_results}")
        cap = max_results if max_results is not None else self.settings.search.max_results
        results: List[Candidate] = []

        def sink(item: Any) -> None:
            if item is Control.FLUSH:
                results.clear()
            elif isinstance(item, list):
                results.extend(item)
                if len(results) >= cap:
                    controller.handle("")

        controller = self.create_controller(sink)
        controller.handle(query)
        await controller.wait()

        if controller.last_error is not None:
            raise controller.last_error

        logger.info(f"Search for {query!r} returned {len(results)} bookmarks")
        return results[:cap]


_service: Optional[BookmarkSearchService] = None


def get_search_service() -> BookmarkSearchService:
    """Process-wide search service, created on first use."""
    global _service
    if _service is None:
        _service = BookmarkSearchService()
    return _service
