"""
Schemas - Search Models

Pydantic models for search queries, bookmark records and result batches.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import List


class SearchQuery(BaseModel):
    """One paginated request against the search endpoint."""
    model_config = ConfigDict(frozen=True)

    text: str
    offset: int = Field(default=0, ge=0)
    limit: int = Field(default=20, ge=1, le=100)


class BookmarkRecord(BaseModel):
    """A single bookmark from the search response."""
    model_config = ConfigDict(frozen=True)

    title: str
    url: str
    comment: str = ""
    timestamp: int = 0
    count: int = 0


class SearchBatch(BaseModel):
    """One page of records plus the total reported by the API."""
    model_config = ConfigDict(frozen=True)

    records: List[BookmarkRecord] = []
    total: int = Field(default=0, ge=0)
