"""
Hatena Bookmark Search - Main Entry Point

FastMCP server with STDIO and SSE transport support.
"""

import argparse
from fastmcp import FastMCP

from hatena_search.config import configure_logging, get_settings
from hatena_search.pipeline.client import warn_missing_credentials

# Import tools (registered with decorators)
from hatena_search.tools import (
    search_bookmarks,
    open_bookmark,
)


def create_app() -> FastMCP:
    """Create and configure the MCP application."""
    mcp = FastMCP(
        name="hatena-bookmark-search",
        instructions="Incremental search over your Hatena Bookmarks",
    )

    mcp.mount(search_bookmarks.router)
    mcp.mount(open_bookmark.router)

    return mcp


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Hatena Bookmark Search MCP Server")
    parser.add_argument(
        "--transport",
        choices=["stdio", "sse"],
        default=None,
        help="Transport protocol (default: from env)"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port for SSE transport (default: from env)"
    )
    args = parser.parse_args()

    settings = get_settings()
    configure_logging(settings)
    warn_missing_credentials(settings)

    transport = args.transport or settings.mcp.transport
    port = args.port or settings.mcp.port

    mcp = create_app()

    if transport == "stdio":
        mcp.run(transport="stdio")
    else:
        mcp.run(transport="sse", host=settings.mcp.host, port=port)


if __name__ == "__main__":
    main()
