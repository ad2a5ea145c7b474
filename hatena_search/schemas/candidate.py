"""
Schemas - Candidate Models

Display candidates handed to the selection UI.
"""

from pydantic import BaseModel, ConfigDict


class BookmarkAnnotation(BaseModel):
    """Metadata shown beside a candidate by the annotation renderer."""
    model_config = ConfigDict(frozen=True)

    date: str
    comment: str = ""
    count: int = 0


class Candidate(BaseModel):
    """A formatted bookmark ready for the selection list."""
    model_config = ConfigDict(frozen=True)

    display: str
    key: str
    annotation: BookmarkAnnotation
