"""
Pipeline - Hatena Bookmark API Client

Fetches one page of the user's bookmark search results.
"""

import json
import logging
import httpx
from typing import Any, Dict, Optional

from hatena_search.config import get_settings
from hatena_search.errors import AuthError, MalformedResponseError, NetworkError
from hatena_search.pipeline.wsse import WSSESigner
from hatena_search.schemas import BookmarkRecord, SearchBatch, SearchQuery

logger = logging.getLogger(__name__)

_credentials_warned = False


def warn_missing_credentials(settings) -> bool:
    """
    Log a one-time warning when the username or API key is unset.

    Returns:
        True if credentials are missing
    """
    global _credentials_warned
    if settings.hatena.has_credentials:
        return False
    if not _credentials_warned:
        logger.warning(
            "HATENA_USERNAME or HATENA_API_KEY is not set; "
            "searches will likely be rejected by the server"
        )
        _credentials_warned = True
    return True


def parse_search_response(data: Dict[str, Any]) -> SearchBatch:
    """Map a decoded search response onto a SearchBatch."""
    try:
        total = int(data["meta"]["total"])
        if total == 0:
            return SearchBatch(records=[], total=0)

        records = [
            BookmarkRecord(
                title=item["entry"]["title"],
                url=item["entry"]["url"],
                comment=item.get("comment") or "",
                timestamp=int(item.get("timestamp") or 0),
                count=int(item["entry"].get("count") or 0),
            )
            for item in data.get("bookmarks", [])
        ]
    except (KeyError, TypeError, ValueError) as e:
        raise MalformedResponseError("Unexpected search response", repr(e)) from e

    return SearchBatch(records=records, total=total)


class HatenaBookmarkClient:
    """Issues paginated search requests against the Hatena Bookmark API."""

    def __init__(
        self,
        settings=None,
        cache=None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings or get_settings()
        self.search_url = self.settings.hatena.search_url
        self.signer = WSSESigner(
            self.settings.hatena.username,
            self.settings.hatena.api_key,
        )
        self.cache = cache
        self._transport = transport
        warn_missing_credentials(self.settings)

    @staticmethod
    def build_params(query: SearchQuery) -> Dict[str, Any]:
        """Query string parameters; `of` is omitted for the first page."""
        params: Dict[str, Any] = {"q": query.text}
        if query.offset:
            params["of"] = query.offset
        params["limit"] = query.limit
        return params

    async def fetch(self, query: SearchQuery) -> SearchBatch:
        """
        Fetch one page of search results.

        Args:
            query: Search text, offset and page size

        Returns:
            SearchBatch with the page's records and the reported total

        Raises:
            NetworkError: transport failure or non-2xx status
            AuthError: credentials rejected (401/403)
            MalformedResponseError: body is not the expected JSON
        """
        if self.cache is not None:
            cached = self.cache.get(query)
            if cached is not None:
                logger.debug(f"Cache hit for {query.text!r} at offset {query.offset}")
                return cached

        async with httpx.AsyncClient(
            timeout=self.settings.hatena.timeout_seconds,
            transport=self._transport,
        ) as client:
            try:
                response = await client.get(
                    self.search_url,
                    params=self.build_params(query),
                    headers=self.signer.build_headers(),
                )
                response.raise_for_status()
            except httpx.HTTPStatusError as e:
                body = e.response.text
                if e.response.status_code in (401, 403):
                    raise AuthError(
                        f"Authentication rejected ({e.response.status_code})", body
                    ) from e
                raise NetworkError(
                    f"Search request failed ({e.response.status_code})", body
                ) from e
            except httpx.HTTPError as e:
                raise NetworkError("Search request failed", str(e) or repr(e)) from e

        try:
            data = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise MalformedResponseError("Invalid JSON in search response", response.text) from e

        batch = parse_search_response(data)
        logger.debug(
            f"Fetched {len(batch.records)} bookmarks for {query.text!r} "
            f"(offset={query.offset}, total={batch.total})"
        )

        if self.cache is not None:
            self.cache.set(query, batch)
        return batch
