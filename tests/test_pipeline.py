"""
Unit Tests for Pipeline Module
"""

import asyncio
import base64
import hashlib
import re
from datetime import datetime, timedelta, timezone

import httpx
import pytest

from hatena_search.config import HatenaSettings, Settings
from hatena_search.errors import AuthError, MalformedResponseError, NetworkError
from hatena_search.pipeline.client import HatenaBookmarkClient, parse_search_response
from hatena_search.pipeline.paginator import PaginationDriver, SearchSession
from hatena_search.pipeline.wsse import WSSESigner
from hatena_search.schemas import BookmarkRecord, SearchBatch, SearchQuery
from hatena_search.services.cache_service import CacheService


def make_settings() -> Settings:
    return Settings(
        hatena=HatenaSettings(HATENA_USERNAME="alice", HATENA_API_KEY="secret"),
    )


def bookmark_json(i: int) -> dict:
    return {
        "timestamp": 1700000000 + i,
        "comment": f"note {i}" if i % 2 else "",
        "entry": {"count": i, "url": f"https://example.com/{i}", "title": f"Page {i}"},
    }


def records(start: int, n: int):
    return [
        BookmarkRecord(title=f"Page {i}", url=f"https://example.com/{i}")
        for i in range(start, start + n)
    ]


class FakeClient:
    """Serves fixed pages from memory and records every query."""

    def __init__(self, total: int, page_sizes=None):
        self.total = total
        self.page_sizes = page_sizes
        self.queries = []
        self.gates = {}

    async def fetch(self, query: SearchQuery) -> SearchBatch:
        self.queries.append(query)
        gate = self.gates.get(len(self.queries))
        if gate is not None:
            await gate.wait()
        if self.page_sizes is not None:
            n = self.page_sizes[len(self.queries) - 1]
        else:
            n = max(0, min(query.limit, self.total - query.offset))
        return SearchBatch(records=records(query.offset, n), total=self.total)


class TestWSSESigner:
    """Tests for WSSESigner."""

    HEADER_RE = re.compile(
        r'UsernameToken Username="(?P<user>[^"]*)", PasswordDigest="(?P<digest>[^"]+)", '
        r'Nonce="(?P<nonce>[^"]+)", Created="(?P<created>[^"]+)"'
    )

    def test_header_digest_matches_nonce_and_created(self):
        """PasswordDigest is SHA-1 of nonce + created + api key."""
        signer = WSSESigner("alice", "secret")
        now = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)

        match = self.HEADER_RE.fullmatch(signer.header_value(now))

        assert match is not None
        assert match["user"] == "alice"
        assert match["created"] == "2024-01-02T03:04:05Z"
        nonce = base64.b64decode(match["nonce"])
        assert len(nonce) == 20
        expected = hashlib.sha1(nonce + b"2024-01-02T03:04:05Z" + b"secret").digest()
        assert base64.b64decode(match["digest"]) == expected

    def test_headers_never_repeat(self):
        """Two headers a second apart differ in nonce and digest."""
        signer = WSSESigner("alice", "secret")
        now = datetime.now(timezone.utc)

        first = self.HEADER_RE.fullmatch(signer.header_value(now))
        second = self.HEADER_RE.fullmatch(signer.header_value(now + timedelta(seconds=1)))

        assert first["nonce"] != second["nonce"]
        assert first["digest"] != second["digest"]

    def test_build_headers(self):
        headers = WSSESigner("alice", "secret").build_headers()

        assert headers["Authorization"] == 'WSSE profile="UsernameToken"'
        assert headers["X-WSSE"].startswith('UsernameToken Username="alice"')


class TestParseSearchResponse:
    """Tests for response parsing."""

    def test_zero_total_is_empty(self):
        batch = parse_search_response({"meta": {"total": 0}, "bookmarks": []})

        assert batch.records == []
        assert batch.total == 0

    def test_maps_entry_fields(self):
        batch = parse_search_response({"meta": {"total": 1}, "bookmarks": [bookmark_json(3)]})

        record = batch.records[0]
        assert record.title == "Page 3"
        assert record.url == "https://example.com/3"
        assert record.comment == "note 3"
        assert record.timestamp == 1700000003
        assert record.count == 3

    def test_missing_meta_is_malformed(self):
        with pytest.raises(MalformedResponseError):
            parse_search_response({"bookmarks": []})


class TestHatenaBookmarkClient:
    """Tests for HatenaBookmarkClient against a mock transport."""

    def make_client(self, handler, cache=None) -> HatenaBookmarkClient:
        return HatenaBookmarkClient(
            make_settings(), cache=cache, transport=httpx.MockTransport(handler)
        )

    @pytest.mark.asyncio
    async def test_first_page_request(self):
        """First page omits `of` and carries both auth headers."""
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"meta": {"total": 1}, "bookmarks": [bookmark_json(1)]})

        client = self.make_client(handler)
        batch = await client.fetch(SearchQuery(text="emacs lisp", limit=20))

        request = seen[0]
        assert request.url.params["q"] == "emacs lisp"
        assert "of" not in request.url.params
        assert request.url.params["limit"] == "20"
        assert request.headers["Authorization"] == 'WSSE profile="UsernameToken"'
        assert request.headers["X-WSSE"].startswith("UsernameToken")
        assert batch.total == 1
        assert batch.records[0].url == "https://example.com/1"

    @pytest.mark.asyncio
    async def test_offset_sent_after_first_page(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"meta": {"total": 30}, "bookmarks": []})

        client = self.make_client(handler)
        await client.fetch(SearchQuery(text="emacs", offset=20, limit=100))

        assert seen[0].url.params["of"] == "20"
        assert seen[0].url.params["limit"] == "100"

    @pytest.mark.asyncio
    async def test_transport_error_is_network_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = self.make_client(handler)

        with pytest.raises(NetworkError) as excinfo:
            await client.fetch(SearchQuery(text="emacs"))
        assert "connection refused" in str(excinfo.value)

    @pytest.mark.asyncio
    async def test_server_error_carries_body(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, text="internal trouble")

        client = self.make_client(handler)

        with pytest.raises(NetworkError) as excinfo:
            await client.fetch(SearchQuery(text="emacs"))
        assert excinfo.value.detail == "internal trouble"

    @pytest.mark.asyncio
    async def test_auth_rejection(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(401, text="bad wsse")

        client = self.make_client(handler)

        with pytest.raises(AuthError):
            await client.fetch(SearchQuery(text="emacs"))

    @pytest.mark.asyncio
    async def test_invalid_json(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>not json</html>")

        client = self.make_client(handler)

        with pytest.raises(MalformedResponseError):
            await client.fetch(SearchQuery(text="emacs"))

    @pytest.mark.asyncio
    async def test_cache_reuses_page(self):
        """A repeated query is served from the page cache."""
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200, json={"meta": {"total": 1}, "bookmarks": [bookmark_json(1)]})

        settings = make_settings()
        client = self.make_client(handler, cache=CacheService(settings))

        first = await client.fetch(SearchQuery(text="emacs"))
        second = await client.fetch(SearchQuery(text="emacs"))

        assert len(calls) == 1
        assert first == second


class TestPaginationDriver:
    """Tests for PaginationDriver."""

    @pytest.mark.asyncio
    async def test_two_pages(self):
        """total=25: a page of 20 then a page of 5 at offset 20, limit 100."""
        client = FakeClient(total=25)
        driver = PaginationDriver(client, make_settings())
        batches = []

        session = await driver.run("emacs", batches.append, SearchSession("emacs"))

        assert [len(b) for b in batches] == [20, 5]
        assert [(q.offset, q.limit) for q in client.queries] == [(0, 20), (20, 100)]
        assert session.offset == 25
        assert session.finished

    @pytest.mark.asyncio
    async def test_offsets_have_no_gaps(self):
        client = FakeClient(total=250)
        driver = PaginationDriver(client, make_settings())
        batches = []

        await driver.run("python", batches.append, SearchSession("python"))

        offsets = [q.offset for q in client.queries]
        for n in range(len(offsets) - 1):
            assert offsets[n + 1] == offsets[n] + len(batches[n])
        assert sum(len(b) for b in batches) == 250

    @pytest.mark.asyncio
    async def test_zero_total_yields_one_empty_batch(self):
        client = FakeClient(total=0)
        driver = PaginationDriver(client, make_settings())
        batches = []

        await driver.run("nothing", batches.append, SearchSession("nothing"))

        assert batches == [[]]
        assert len(client.queries) == 1

    @pytest.mark.asyncio
    async def test_empty_page_before_total_stops(self):
        """A short server stops the loop instead of spinning."""
        client = FakeClient(total=50, page_sizes=[20, 0, 30])
        driver = PaginationDriver(client, make_settings())
        batches = []

        session = await driver.run("emacs", batches.append, SearchSession("emacs"))

        assert len(client.queries) == 2
        assert session.offset == 20

    @pytest.mark.asyncio
    async def test_cancel_before_fetch(self):
        client = FakeClient(total=25)
        driver = PaginationDriver(client, make_settings())
        session = SearchSession("emacs")
        session.cancel()
        batches = []

        await driver.run("emacs", batches.append, session)

        assert batches == []
        assert client.queries == []

    @pytest.mark.asyncio
    async def test_cancel_while_first_fetch_in_flight(self):
        client = FakeClient(total=25)
        gate = asyncio.Event()
        client.gates[1] = gate
        driver = PaginationDriver(client, make_settings())
        session = SearchSession("emacs")
        batches = []

        task = asyncio.create_task(driver.run("emacs", batches.append, session))
        await asyncio.sleep(0)
        session.cancel()
        gate.set()
        await task

        assert batches == []

    @pytest.mark.asyncio
    async def test_cancel_mid_loop_keeps_k_batches(self):
        """Cancelling with page k+1 in flight delivers exactly k batches."""
        client = FakeClient(total=300)
        gate = asyncio.Event()
        client.gates[3] = gate
        driver = PaginationDriver(client, make_settings())
        session = SearchSession("emacs")
        batches = []

        task = asyncio.create_task(driver.run("emacs", batches.append, session))
        while len(client.queries) < 3:
            await asyncio.sleep(0)
        session.cancel()
        gate.set()
        await task

        assert len(batches) == 2
        assert len(client.queries) == 3

    @pytest.mark.asyncio
    async def test_errors_propagate(self):
        class FailingClient:
            async def fetch(self, query):
                raise NetworkError("Search request failed", "boom")

        driver = PaginationDriver(FailingClient(), make_settings())

        with pytest.raises(NetworkError):
            await driver.run("emacs", lambda records: None, SearchSession("emacs"))
