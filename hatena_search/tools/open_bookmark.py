"""
MCP Tool - open_bookmark

Open a bookmarked URL in the user's browser.
"""

import logging
import webbrowser
from urllib.parse import urlparse

from fastmcp import FastMCP

logger = logging.getLogger(__name__)

router = FastMCP("open_bookmark")


def open_url(url: str) -> bool:
    """Open an http(s) URL with the default browser."""
    if urlparse(url).scheme not in ("http", "https"):
        raise ValueError(f"Refusing to open non-http URL: {url}")
    logger.info(f"Opening {url}")
    return webbrowser.open(url)


@router.tool()
async def open_bookmark(url: str) -> dict:
    """
    Open a bookmark in the default web browser.

    Args:
        url: Bookmark URL, as returned by search_bookmarks

    Returns:
        Whether a browser was launched
    """
    try:
        opened = open_url(url)
    except ValueError as e:
        return {"error": str(e)}
    return {"url": url, "opened": opened}
