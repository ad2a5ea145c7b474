"""
MCP Tool - search_bookmarks

Search the user's Hatena Bookmarks.
"""

from fastmcp import FastMCP
from pydantic import Field
from typing import Annotated, Optional

from hatena_search.errors import HatenaSearchError
from hatena_search.services import CandidateFormatter, get_search_service

router = FastMCP("search_bookmarks")


async def find_bookmarks(query: str, max_results: Optional[int] = None) -> dict:
    """Run a search on the shared service and shape the tool response."""
    service = get_search_service()

    try:
        candidates = await service.search(query, max_results=max_results)
    except HatenaSearchError as e:
        return {"error": str(e), "query": query}

    return {
        "results": [
            {
                "display": c.display,
                "url": c.key,
                "date": c.annotation.date,
                "comment": c.annotation.comment,
                "count": c.annotation.count,
                "annotation": CandidateFormatter.annotate(c),
            }
            for c in candidates
        ],
        "count": len(candidates),
        "query": query,
    }


@router.tool()
async def search_bookmarks(
    query: str,
    max_results: Annotated[Optional[int], Field(ge=1)] = None,
) -> dict:
    """
    Search your Hatena Bookmarks.

    Walks every result page (20 first, then 100 per page) until the
    server-reported total or max_results is reached.

    Args:
        query: Search text
        max_results: Maximum bookmarks to return, at least 1 (default from settings)

    Returns:
        Matching bookmarks with title line, URL, date, comment and user count
    """
    return await find_bookmarks(query, max_results)
