"""Tests for the pull-based cursor pager."""

from __future__ import annotations

from typing import Optional

import pytest

from tensorlake_cloud.exceptions import TransportError
from tensorlake_cloud.models import RequestPage
from tensorlake_cloud.pagination import CursorPager

# Three pages: cursor None -> "c1" -> "c2" -> end.
_PAGES = {
    None: {"requests": [{"id": "r1"}, {"id": "r2"}], "cursor": "c1"},
    "c1": {"requests": [{"id": "r3"}, {"id": "r4"}], "cursor": "c2"},
    "c2": {"requests": [{"id": "r5"}]},
}


class FakeServer:
    """Records every fetch and serves pages from ``_PAGES``."""

    def __init__(self) -> None:
        self.calls: list[Optional[str]] = []

    async def fetch(self, cursor: Optional[str]) -> RequestPage:
        self.calls.append(cursor)
        return RequestPage.model_validate(_PAGES[cursor])


@pytest.mark.asyncio
class TestCursorPager:
    async def test_walks_all_pages_without_duplicates(self) -> None:
        server = FakeServer()
        ids = []
        async for page in CursorPager(server.fetch):
            ids.extend(r.id for r in page.items)

        assert ids == ["r1", "r2", "r3", "r4", "r5"]
        assert len(ids) == len(set(ids))
        assert server.calls == [None, "c1", "c2"]

    async def test_one_round_trip_per_page(self) -> None:
        server = FakeServer()
        pager = CursorPager(server.fetch)
        assert server.calls == []

        await pager.__anext__()
        assert server.calls == [None]
        assert pager.cursor == "c1"
        assert pager.pages_fetched == 1
        assert not pager.done

        await pager.__anext__()
        assert server.calls == [None, "c1"]

    async def test_stops_after_page_without_cursor(self) -> None:
        server = FakeServer()
        pager = CursorPager(server.fetch)
        pages = [page async for page in pager]

        assert len(pages) == 3
        assert pager.done
        with pytest.raises(StopAsyncIteration):
            await pager.__anext__()
        assert len(server.calls) == 3

    async def test_empty_string_cursor_ends_iteration(self) -> None:
        async def fetch(cursor: Optional[str]) -> RequestPage:
            return RequestPage.model_validate({"requests": [], "cursor": ""})

        pages = [page async for page in CursorPager(fetch)]
        assert len(pages) == 1

    async def test_resume_from_saved_cursor(self) -> None:
        server = FakeServer()
        pager = CursorPager(server.fetch)
        await pager.__anext__()
        saved = pager.cursor

        resumed = CursorPager(server.fetch, cursor=saved)
        ids = [r.id async for page in resumed for r in page.items]

        assert ids == ["r3", "r4", "r5"]
        assert server.calls == [None, "c1", "c2"]

    async def test_new_pager_restarts(self) -> None:
        server = FakeServer()
        first = [page async for page in CursorPager(server.fetch)]
        second = [page async for page in CursorPager(server.fetch)]
        assert first == second
        assert server.calls == [None, "c1", "c2", None, "c1", "c2"]

    async def test_error_propagates_and_keeps_position(self) -> None:
        calls = []

        async def fetch(cursor: Optional[str]) -> RequestPage:
            calls.append(cursor)
            if cursor == "c1" and calls.count("c1") == 1:
                raise TransportError("connection reset")
            return RequestPage.model_validate(_PAGES[cursor])

        pager = CursorPager(fetch)
        await pager.__anext__()
        with pytest.raises(TransportError):
            await pager.__anext__()

        assert pager.cursor == "c1"
        page = await pager.__anext__()
        assert [r.id for r in page.items] == ["r3", "r4"]
