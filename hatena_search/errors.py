"""
Hatena Bookmark Search - Errors

Every failure of a search request surfaces as a HatenaSearchError subclass.
"""

from typing import Optional


class HatenaSearchError(Exception):
    """
    Base exception for search failures.

    Attributes:
        message: Error description
        detail: Raw error detail or response body, if any
    """

    def __init__(self, message: str, detail: Optional[str] = None):
        self.message = message
        self.detail = detail
        super().__init__(message)

    def __str__(self) -> str:
        if self.detail:
            return f"{self.message}: {self.detail}"
        return self.message


class NetworkError(HatenaSearchError):
    """Transport failure, unparsable HTTP response, or non-2xx status."""
    pass


class MalformedResponseError(HatenaSearchError):
    """Response body is not valid JSON or does not match the search schema."""
    pass


class AuthError(HatenaSearchError):
    """The API rejected the WSSE credentials."""
    pass
