"""Tests for the query observer."""

import asyncio

from fleet_console.client.cache import QueryCache
from fleet_console.client.errors import FetchError
from fleet_console.client.observer import QueryObserver

PAGE_1 = ("/api/cars", "all", "", 1, 10)
PAGE_2 = ("/api/cars", "all", "", 2, 10)


def returning(value, delay: float = 0):
    async def query():
        if delay:
            await asyncio.sleep(delay)
        return value

    return query


def failing(message: str):
    async def query():
        raise FetchError(message, status_code=500)

    return query


class TestQueryObserver:
    """Test what a view sees while keys change."""

    async def test_result_before_any_query(self):
        observer = QueryObserver(QueryCache())
        result = observer.result
        assert result.data is None
        assert result.error is None
        assert not result.is_loading

    async def test_set_query_returns_data(self):
        observer = QueryObserver(QueryCache())
        result = await observer.set_query(PAGE_1, returning(["a"]))
        assert result.data == ["a"]
        assert not result.is_placeholder

    async def test_previous_page_shown_while_next_loads(self):
        """Old page stays visible, flagged as placeholder, until new data lands."""
        cache = QueryCache()
        observer = QueryObserver(cache)
        await observer.set_query(PAGE_1, returning(["page 1"]))

        pending = asyncio.ensure_future(observer.set_query(PAGE_2, returning(["page 2"], 0.01)))
        await asyncio.sleep(0)

        interim = observer.result
        assert interim.data == ["page 1"]
        assert interim.is_placeholder

        result = await pending
        assert result.data == ["page 2"]
        assert not result.is_placeholder

    async def test_without_keep_previous_data(self):
        cache = QueryCache()
        observer = QueryObserver(cache, keep_previous_data=False)
        await observer.set_query(PAGE_1, returning(["page 1"]))

        pending = asyncio.ensure_future(observer.set_query(PAGE_2, returning(["page 2"], 0.01)))
        await asyncio.sleep(0)

        assert observer.result.data is None
        await pending

    async def test_error_reported_not_raised(self):
        observer = QueryObserver(QueryCache())
        result = await observer.set_query(PAGE_1, failing("Failed to fetch cars"))
        assert result.data is None
        assert result.error.message == "Failed to fetch cars"

    async def test_error_hides_placeholder(self):
        observer = QueryObserver(QueryCache())
        await observer.set_query(PAGE_1, returning(["page 1"]))
        result = await observer.set_query(PAGE_2, failing("Failed to fetch cars"))
        assert result.data is None
        assert result.error is not None

    async def test_subscription_follows_key(self):
        cache = QueryCache()
        observer = QueryObserver(cache)
        await observer.set_query(PAGE_1, returning(["page 1"]))
        await observer.set_query(PAGE_2, returning(["page 2"]))

        assert cache.get_entry(PAGE_1).observers == 0
        assert cache.get_entry(PAGE_2).observers == 1

        observer.close()
        assert cache.get_entry(PAGE_2).observers == 0
        assert cache.get_data(PAGE_2) == ["page 2"]
