"""
Tools Module - MCP Tool Implementations

MCP tools for searching and opening Hatena Bookmarks.
"""

from hatena_search.tools import search_bookmarks
from hatena_search.tools import open_bookmark

__all__ = [
    "search_bookmarks",
    "open_bookmark",
]
