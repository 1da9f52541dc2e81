"""
Client-side paging and debounced search over any page fetcher.

The controller runs on a single asyncio event loop. Page changes and refreshes
fetch immediately; search input is debounced and resets paging to page 1.
In-flight fetches are never cancelled, but every fetch is tagged with a
request id and only the most recently issued one may write state, so a slow
response for an old page can never overwrite a newer one.
"""

import asyncio
import logging
import math
from typing import Any, Awaitable, Callable, Dict, Generic, List, Optional, TypeVar

from ..config import settings
from ..models.pagination import PageResult

logger = logging.getLogger(__name__)

T = TypeVar("T")

FetchFn = Callable[[int, int, str], Awaitable[PageResult[T]]]

DEFAULT_ERROR_MESSAGE = "Error while loading data."


class DebounceTimer:
    """Single-slot timer: scheduling a callback replaces any pending one."""

    def __init__(self, delay: float):
        self.delay = delay
        self._handle: Optional[asyncio.TimerHandle] = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def schedule(self, callback: Callable[..., Any], *args: Any) -> None:
        self.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.delay, self._fire, callback, args)

    def cancel(self) -> bool:
        if self._handle is None:
            return False
        self._handle.cancel()
        self._handle = None
        return True

    def _fire(self, callback: Callable[..., Any], args: tuple) -> None:
        self._handle = None
        callback(*args)


class PaginatedQueryController(Generic[T]):
    """
    Paging/search state bound to a fetch function.

    Args:
        fetch: Coroutine function ``(page, page_size, search) -> PageResult``
        page_size: Fixed for the controller's lifetime
        initial_search: Search term used by ``start()``
        debounce_seconds: Quiet period after the last ``set_search`` call
        name: Label used in log lines
    """

    def __init__(
        self,
        fetch: FetchFn,
        page_size: int = settings.DEFAULT_PAGE_SIZE,
        initial_search: str = "",
        debounce_seconds: float = settings.SEARCH_DEBOUNCE_SECONDS,
        name: str = "query",
    ):
        if page_size < 1:
            raise ValueError(f"page_size must be >= 1, got {page_size}")
        self._fetch = fetch
        self.name = name
        self.page_size = page_size
        self.page = 1
        self.search = initial_search
        self.data: List[T] = []
        self.total = 0
        self.loading = False
        self.error: Optional[str] = None

        self._timer = DebounceTimer(debounce_seconds)
        self._latest_request_id = 0
        self._latest_task: Optional[asyncio.Task] = None

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.page_size)

    @property
    def search_pending(self) -> bool:
        return self._timer.pending

    def start(self) -> asyncio.Task:
        """Initial load at page 1."""
        self.page = 1
        return self._issue(self.page, self.search)

    def set_page(self, page: int) -> asyncio.Task:
        if page < 1:
            raise ValueError(f"page must be >= 1, got {page}")
        self.page = page
        return self._issue(page, self.search)

    def set_search(self, term: str) -> None:
        """Update the visible term now; fetch once input has been quiet for the debounce delay."""
        self.search = term
        self._timer.schedule(self._on_search_settled, term)

    def refresh(self) -> asyncio.Task:
        """Refetch the current page, e.g. after a save."""
        return self._issue(self.page, self.search)

    def close(self) -> None:
        self._timer.cancel()

    async def settle(self) -> None:
        """Wait until no search is pending and the latest fetch has resolved."""
        while True:
            if self._timer.pending:
                await asyncio.sleep(self._timer.delay)
                continue
            task = self._latest_task
            if task is None or task.done():
                return
            await asyncio.wait({task})

    def state(self) -> Dict[str, Any]:
        return {
            "page": self.page,
            "page_size": self.page_size,
            "search": self.search,
            "data": self.data,
            "total": self.total,
            "loading": self.loading,
            "error": self.error,
        }

    def _on_search_settled(self, term: str) -> None:
        self.page = 1
        self._issue(1, term)

    def _issue(self, page: int, search: str) -> asyncio.Task:
        self._latest_request_id += 1
        request_id = self._latest_request_id
        self.loading = True
        self.error = None
        task = asyncio.get_running_loop().create_task(self._run(request_id, page, search))
        self._latest_task = task
        return task

    def _is_latest(self, request_id: int) -> bool:
        return request_id == self._latest_request_id

    async def _run(self, request_id: int, page: int, search: str) -> None:
        try:
            result = await self._fetch(page, self.page_size, search)
        except Exception as e:
            if not self._is_latest(request_id):
                logger.debug(f"[{self.name}] Discarding failure of superseded request {request_id}")
                return
            logger.error(f"[{self.name}] Error fetching paginated data: {e}")
            self.error = str(e) or DEFAULT_ERROR_MESSAGE
            self.data = []
            self.total = 0
        else:
            if not self._is_latest(request_id):
                logger.debug(f"[{self.name}] Discarding stale response for request {request_id}")
                return
            self.data = list(result.data)
            self.total = result.total
        finally:
            if self._is_latest(request_id):
                self.loading = False
