"""
Pipeline Module - Request Signing, Fetching and Pagination

Components:
- WSSESigner: per-request X-WSSE authentication header
- HatenaBookmarkClient: one page of search results per call
- PaginationDriver: walks all pages of a search session
"""

from hatena_search.pipeline.wsse import WSSESigner
from hatena_search.pipeline.client import HatenaBookmarkClient
from hatena_search.pipeline.paginator import PaginationDriver, SearchSession

__all__ = [
    "WSSESigner",
    "HatenaBookmarkClient",
    "PaginationDriver",
    "SearchSession",
]
