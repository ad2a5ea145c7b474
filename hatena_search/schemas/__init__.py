"""
Schemas Module - Pydantic Models

Data models for search requests, bookmark records and display candidates.
"""

from hatena_search.schemas.search import SearchQuery, BookmarkRecord, SearchBatch
from hatena_search.schemas.candidate import BookmarkAnnotation, Candidate

__all__ = [
    "SearchQuery",
    "BookmarkRecord",
    "SearchBatch",
    "BookmarkAnnotation",
    "Candidate",
]
