"""Debounced, most-recent-wins search controller.

One controller serves one consumer (a WebSocket connection). Query edits
restart a quiet-interval timer; page changes fetch at once. Every fetch
takes a token from a monotonic counter and its result is applied only if
no newer fetch has been issued since.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Optional

import structlog

from src.core.exceptions import AppException
from src.schemas.vendor import VendorRecord
from src.search.pagination import clamp_page
from src.search.service import VendorSearchService

logger = structlog.get_logger()

FETCH_ERROR_MESSAGE = "Error fetching vendors. Please try again."


@dataclass
class ListState:
    """The in-memory list a consumer is looking at."""

    query: str = ""
    page: int = 1
    total_pages: int = 0
    results: list[VendorRecord] = field(default_factory=list)
    loading: bool = False
    error: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "query": self.query,
            "page": self.page,
            "total_pages": self.total_pages,
            "results": [r.model_dump() for r in self.results],
            "loading": self.loading,
            "error": self.error,
        }


OnChange = Callable[[ListState], Awaitable[None]]


class SearchController:
    def __init__(
        self,
        service: VendorSearchService,
        debounce_seconds: float,
        on_change: Optional[OnChange] = None,
        state: Optional[ListState] = None,
    ):
        self.service = service
        self.debounce_seconds = debounce_seconds
        self.on_change = on_change
        self.state = state or ListState()
        self._issued = 0
        self._timer: Optional[asyncio.Task] = None
        self._inflight: set[asyncio.Task] = set()

    @property
    def latest_token(self) -> int:
        return self._issued

    def set_query(self, query: str) -> Optional[asyncio.Task]:
        """Record a query edit and (re)start the debounce timer.

        Returns the timer task, or None when the query is blank and the
        service would not fetch for it (the list is cleared at once).
        """
        self.state.query = query
        self.state.page = 1
        self._cancel_timer()

        if self.service.skips_fetch(query):
            # Supersede anything in flight for the old query.
            self._issued += 1
            self.state.results = []
            self.state.total_pages = 0
            self.state.loading = False
            self.state.error = None
            self._spawn(self._notify())
            return None

        self._timer = self._spawn(self._debounced())
        return self._timer

    def set_page(self, page: int) -> asyncio.Task:
        """Move to ``page`` and fetch immediately (no debounce)."""
        if self.state.total_pages:
            page = clamp_page(page, self.state.total_pages)
        self.state.page = max(page, 1)
        # The immediate fetch already carries the latest query.
        self._cancel_timer()
        return self._spawn(self.fetch())

    def refresh(self) -> asyncio.Task:
        return self._spawn(self.fetch())

    async def fetch(self) -> None:
        """Issue one fetch for the current query/page; apply it if still latest."""
        self._issued += 1
        token = self._issued
        query, page = self.state.query, self.state.page

        self.state.loading = True
        self.state.error = None
        await self._notify()

        try:
            result = await self.service.fetch(query, page)
        except AppException as e:
            if token != self._issued:
                return
            logger.warning("vendor_search_failed", query=query, page=page, error=e.message)
            self.state.results = []
            self.state.total_pages = 0
            self.state.page = 1
            self.state.loading = False
            self.state.error = FETCH_ERROR_MESSAGE
            await self._notify()
            return

        if token != self._issued:
            logger.debug("vendor_search_stale", token=token, latest=self._issued)
            return

        self.state.results = list(result.results)
        self.state.total_pages = result.total_pages
        self.state.page = result.page
        self.state.loading = False
        await self._notify()

    async def close(self) -> None:
        """Cancel the pending timer and any in-flight fetches."""
        self._cancel_timer()
        tasks = list(self._inflight)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    async def _debounced(self) -> None:
        await asyncio.sleep(self.debounce_seconds)
        self._timer = None
        await self.fetch()

    def _cancel_timer(self) -> None:
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
        self._timer = None

    def _spawn(self, coro) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)
        return task

    async def _notify(self) -> None:
        if self.on_change is not None:
            await self.on_change(self.state)
