"""
Services - Incremental Search Controller

Action-driven front end for the pagination driver. Each new query text
cancels the running session and starts a fresh one; control tokens are
forwarded to the sink.
"""

import asyncio
import logging
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from hatena_search.errors import HatenaSearchError
from hatena_search.pipeline.paginator import PaginationDriver, SearchSession
from hatena_search.schemas import BookmarkRecord, Candidate
from hatena_search.services.formatter import CandidateFormatter

logger = logging.getLogger(__name__)


class Control(str, Enum):
    """Control tokens exchanged with the sink."""

    FLUSH = "flush"
    DESTROY = "destroy"


class ControllerState(str, Enum):
    IDLE = "idle"
    SEARCHING = "searching"
    DESTROYED = "destroyed"


Sink = Callable[[Any], None]


class SearchController:
    """
    Drives one SearchSession at a time on the running event loop.

    Actions passed to handle():
        ""               cancel the current search, keep the UI open
        non-empty str    flush the sink and search for the new text
        Control.DESTROY  cancel and tear down permanently
        anything else    forwarded to the sink unchanged
    """

    def __init__(
        self,
        driver: PaginationDriver,
        sink: Sink,
        formatter: Optional[CandidateFormatter] = None,
        on_error: Optional[Callable[[HatenaSearchError], None]] = None,
    ):
        self.driver = driver
        self.sink = sink
        self.formatter = formatter or CandidateFormatter()
        self.on_error = on_error
        self.state = ControllerState.IDLE
        self.session: Optional[SearchSession] = None
        self.last_error: Optional[HatenaSearchError] = None
        self._task: Optional[asyncio.Task] = None
        self._records: Dict[str, BookmarkRecord] = {}

    def handle(self, action: Any) -> None:
        """Dispatch one action from the host."""
        if self.state is ControllerState.DESTROYED:
            logger.debug(f"Ignoring {action!r}: controller destroyed")
            return

        if action == "":
            self.cancel()
        elif isinstance(action, str) and not isinstance(action, Control):
            self.start(action)
        elif action is Control.DESTROY:
            self.destroy()
        else:
            self.sink(action)

    def cancel(self) -> None:
        """Cancel the running session, if any."""
        if self.session is not None and not self.session.cancelled:
            logger.debug(f"Cancelling search for {self.session.query_text!r}")
            self.session.cancel()
        if self.state is ControllerState.SEARCHING:
            self.state = ControllerState.IDLE

    def start(self, query_text: str) -> SearchSession:
        """Replace any running session with a search for query_text."""
        self.cancel()
        self.sink(Control.FLUSH)
        self._records.clear()
        self.last_error = None

        session = SearchSession(query_text=query_text)
        self.session = session
        self.state = ControllerState.SEARCHING
        self._task = asyncio.get_running_loop().create_task(self._run(session))
        return session

    def destroy(self) -> None:
        """Cancel and tear down; the controller accepts no further actions."""
        self.cancel()
        self.sink(Control.DESTROY)
        self._records.clear()
        self.state = ControllerState.DESTROYED

    async def wait(self) -> None:
        """Wait for the current driver task to finish."""
        if self._task is not None:
            await self._task

    def resolve(self, key: str) -> Optional[BookmarkRecord]:
        """Map a selected candidate key back to its bookmark."""
        return self._records.get(key)

    def _emit(self, session: SearchSession, records: List[BookmarkRecord]) -> None:
        if session.cancelled or session is not self.session:
            return
        for record in records:
            self._records[record.url] = record
        candidates: List[Candidate] = self.formatter.format_batch(records)
        self.sink(candidates)

    async def _run(self, session: SearchSession) -> None:
        try:
            await self.driver.run(
                session.query_text,
                lambda records: self._emit(session, records),
                session,
            )
        except HatenaSearchError as e:
            if session is not self.session:
                return
            logger.error(f"Search for {session.query_text!r} failed: {e}")
            self.last_error = e
            if self.on_error is not None:
                self.on_error(e)
        finally:
            if session is self.session and self.state is ControllerState.SEARCHING:
                self.state = ControllerState.IDLE
