"""Pull-based cursor pagination.

:class:`CursorPager` turns a single-page operation into an async iterator
of pages. Each ``__anext__`` performs exactly one network round trip;
nothing is fetched ahead of what the caller consumes. Iteration ends after
the first page that carries no cursor. A new pager always restarts from the
beginning, and :attr:`CursorPager.cursor` can be saved to resume later::

    pager = client.requests.iter_request_pages("default", "my-app", limit=50)
    async for page in pager:
        for request in page.items:
            ...
"""

from __future__ import annotations

from typing import Awaitable, Callable, Generic, Optional, Protocol, TypeVar


class CursorPage(Protocol):
    """Anything with an optional opaque continuation cursor."""

    @property
    def next_cursor(self) -> Optional[str]: ...


P = TypeVar("P", bound=CursorPage)


class CursorPager(Generic[P]):
    """Async iterator over cursor-paginated pages.

    Args:
        fetch: Coroutine function taking the cursor to send (``None`` for
            the first page) and returning one page.
        cursor: Cursor to resume from. ``None`` starts at the beginning.
    """

    def __init__(
        self,
        fetch: Callable[[Optional[str]], Awaitable[P]],
        cursor: Optional[str] = None,
    ) -> None:
        self._fetch = fetch
        self._cursor = cursor
        self._done = False
        self._pages_fetched = 0

    @property
    def cursor(self) -> Optional[str]:
        """The cursor the next fetch will send (``None`` before the first page)."""
        return self._cursor

    @property
    def done(self) -> bool:
        """``True`` once a page without a cursor has been returned."""
        return self._done

    @property
    def pages_fetched(self) -> int:
        """Number of pages returned so far."""
        return self._pages_fetched

    def __aiter__(self) -> CursorPager[P]:
        return self

    async def __anext__(self) -> P:
        if self._done:
            raise StopAsyncIteration
        page = await self._fetch(self._cursor)
        self._pages_fetched += 1
        if page.next_cursor:
            self._cursor = page.next_cursor
        else:
            self._done = True
        return page
