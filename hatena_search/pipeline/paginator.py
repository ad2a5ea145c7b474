"""
Pipeline - Pagination Driver

Walks every page of one search, feeding each batch to a sink until the
reported total is reached or the session is cancelled.
"""

import logging
from dataclasses import dataclass
from typing import AsyncIterator, Callable, List, Optional

from hatena_search.config import get_settings
from hatena_search.schemas import BookmarkRecord, SearchQuery

logger = logging.getLogger(__name__)

BatchCallback = Callable[[List[BookmarkRecord]], None]


@dataclass
class SearchSession:
    """State of one in-flight paginated search."""
    query_text: str
    offset: int = 0
    total: Optional[int] = None
    first_page_fetched: bool = False
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True

    @property
    def finished(self) -> bool:
        return self.total is not None and self.offset >= self.total


class PaginationDriver:
    """
    Sequential page fetcher for a single SearchSession.

    The first page is small so the UI fills quickly; later pages use the
    API's maximum page size. Only one request is outstanding at a time, so
    batches arrive in offset order.
    """

    def __init__(
        self,
        client,
        settings=None,
        first_page_limit: Optional[int] = None,
        page_limit: Optional[int] = None,
    ):
        self.client = client
        self.settings = settings or get_settings()
        self.first_page_limit = first_page_limit or self.settings.search.first_page_limit
        self.page_limit = page_limit or self.settings.search.page_limit

    async def batches(
        self,
        query_text: str,
        session: SearchSession,
    ) -> AsyncIterator[List[BookmarkRecord]]:
        """
        Yield each page of records for a session.

        Args:
            query_text: Search text
            session: Session whose offset/total are advanced in place

        Yields:
            List of BookmarkRecord per page, in offset order
        """
        while not session.cancelled:
            limit = self.page_limit if session.first_page_fetched else self.first_page_limit
            query = SearchQuery(text=query_text, offset=session.offset, limit=limit)

            batch = await self.client.fetch(query)

            # Result of a superseded session is dropped
            if session.cancelled:
                logger.debug(f"Discarding page at offset {query.offset} for {query_text!r}")
                return

            if session.total is None:
                session.total = batch.total
            session.first_page_fetched = True

            yield batch.records
            session.offset += len(batch.records)

            if session.offset >= session.total:
                return
            if not batch.records:
                logger.warning(
                    f"Empty page at offset {session.offset} of {session.total} "
                    f"for {query_text!r}; stopping"
                )
                return

    async def run(
        self,
        query_text: str,
        on_batch: BatchCallback,
        session: SearchSession,
    ) -> SearchSession:
        """
        Fetch all pages of a search and forward each batch.

        Errors from the client propagate and end the session.

        Returns:
            The session, with its final offset and total
        """
        async for records in self.batches(query_text, session):
            if session.cancelled:
                break
            on_batch(records)
        return session
