"""Property-based tests for list windows, filters, page sizes and the cache.

hypothesis generates filter sequences, record windows, stored page sizes
and interleavings of fetches with local writes; the invariants must hold
for every one of them.
"""

from __future__ import annotations

import asyncio
import math

from hypothesis import given, settings, strategies as st
from hypothesis.stateful import RuleBasedStateMachine, initialize, invariant, rule

from fleet_console.client.cache import QueryCache
from fleet_console.client.cache_state import CacheEntryStatus
from fleet_console.client.envelope import Pagination, paginate_locally
from fleet_console.client.pagination import PaginationController, parse_page_size
from fleet_console.client.preferences import MemoryPreferences
from fleet_console.client.query_keys import FilterState

statuses = st.sampled_from(["all", "ACTIVE", "INACTIVE", "available", "off_fleet"])
search_text = st.text(max_size=20)
page_sizes = st.integers(min_value=1, max_value=500)
pages = st.integers(min_value=1, max_value=1000)

filter_states = st.builds(
    FilterState,
    status_filter=statuses,
    search_query=search_text,
    page=pages,
    items_per_page=page_sizes,
)


class TestFilterStateProperties:
    """Any status, search or page size change lands on page 1."""

    @given(filters=filter_states, status=statuses)
    @settings(max_examples=100)
    def test_status_change(self, filters: FilterState, status: str):
        changed = filters.with_status(status)
        assert changed.page == 1
        assert changed.search_query == filters.search_query
        assert changed.items_per_page == filters.items_per_page

    @given(filters=filter_states, search=search_text)
    @settings(max_examples=100)
    def test_search_change(self, filters: FilterState, search: str):
        changed = filters.with_search(search)
        assert changed.page == 1
        assert changed.status_filter == filters.status_filter

    @given(filters=filter_states, size=page_sizes)
    @settings(max_examples=100)
    def test_page_size_change(self, filters: FilterState, size: int):
        changed = filters.with_items_per_page(size)
        assert changed.page == 1
        assert changed.items_per_page == size


class TestWindowProperties:
    """Every window respects the limit and the page count formula."""

    @given(
        count=st.integers(min_value=0, max_value=300),
        page=st.integers(min_value=1, max_value=40),
        limit=page_sizes,
    )
    @settings(max_examples=200)
    def test_local_window(self, count: int, page: int, limit: int):
        records = [{"id": i} for i in range(count)]

        envelope = paginate_locally(records, page, limit)

        pagination = envelope.pagination
        assert len(envelope.data) <= limit
        assert pagination.total == count
        assert pagination.total_pages == math.ceil(count / limit)
        assert envelope.data == records[(page - 1) * limit : page * limit]

    @given(
        page=st.integers(min_value=1, max_value=40),
        limit=page_sizes,
        total=st.integers(min_value=0, max_value=10_000),
    )
    @settings(max_examples=200)
    def test_showing_bounds(self, page: int, limit: int, total: int):
        pagination = Pagination.for_window(page, limit, total)

        assert pagination.total_pages == math.ceil(total / limit)
        if total == 0:
            assert pagination.start_item == 0
            assert pagination.end_item == 0
        elif page <= pagination.total_pages:
            assert 1 <= pagination.start_item <= pagination.end_item <= total
            assert pagination.end_item - pagination.start_item < limit


class TestPageSizeProperties:
    """Stored page sizes survive a round trip; anything else falls back."""

    @given(raw=st.text(max_size=12))
    @settings(max_examples=200)
    def test_any_text_parses_to_positive_size(self, raw: str):
        size = parse_page_size(raw)

        assert size > 0
        try:
            expected = int(raw.strip())
        except ValueError:
            expected = None
        if expected is None or expected <= 0:
            assert size == 10
        else:
            assert size == expected

    @given(size=page_sizes)
    @settings(max_examples=100)
    def test_round_trip_through_preferences(self, size: int):
        prefs = MemoryPreferences()
        PaginationController(prefs, "cars_limit").set_items_per_page(size)

        assert PaginationController(prefs, "cars_limit").items_per_page == size

    @given(raw=st.text(max_size=12).filter(lambda s: not s.strip().isdigit()))
    @settings(max_examples=100)
    def test_corrupt_value_replaced_by_default(self, raw: str):
        prefs = MemoryPreferences({"cars_limit": raw})

        controller = PaginationController(prefs, "cars_limit")

        assert controller.items_per_page == parse_page_size(raw)
        assert prefs.get("cars_limit") == str(controller.items_per_page)


class PaginationMachine(RuleBasedStateMachine):
    """Random sequences of list interactions on one controller."""

    def __init__(self):
        super().__init__()
        self.prefs = MemoryPreferences()
        self.controller = PaginationController(self.prefs, "cars_limit")

    @rule(page=pages)
    def go_to_page(self, page: int):
        assert self.controller.go_to_page(page).page == page

    @rule(status=statuses)
    def change_status(self, status: str):
        assert self.controller.set_status_filter(status).page == 1

    @rule(search=search_text)
    def change_search(self, search: str):
        assert self.controller.set_search_query(search).page == 1

    @rule(size=page_sizes)
    def change_page_size(self, size: int):
        assert self.controller.set_items_per_page(size).page == 1

    @rule(total=st.integers(min_value=0, max_value=5000))
    def response_arrives(self, total: int):
        self.controller.reconcile(
            Pagination.for_window(self.controller.page, self.controller.items_per_page, total)
        )
        total_pages = math.ceil(total / self.controller.items_per_page)
        if total_pages > 0:
            assert 1 <= self.controller.page <= total_pages

    @invariant()
    def page_size_persisted(self):
        assert self.prefs.get("cars_limit") == str(self.controller.items_per_page)


TestPaginationStateful = PaginationMachine.TestCase

KEY = ("/api/cars", "all", "", 1, 10)
FAMILY = ("/api/cars",)


class CacheWriteMachine(RuleBasedStateMachine):
    """Fetches, updates and seeds interleaved on one observed key.

    The backend holds a version number. A fetch reads the version when it
    starts and returns it once the gate opens, so a response can predate
    updates made while it was in flight. An update bumps the version,
    patches the cache and invalidates it, as the invalidator does.
    """

    def __init__(self):
        super().__init__()
        self.loop = asyncio.new_event_loop()
        self.cache = QueryCache()
        self.cache.subscribe(KEY)
        self.version = 0
        self.floor = 0
        self.calls = 0
        self.gate = asyncio.Event()
        self.tasks: list[asyncio.Future] = []

    async def query(self):
        self.calls += 1
        seen = self.version
        await self.gate.wait()
        return {"v": seen}

    def spin(self) -> None:
        for _ in range(10):
            self.loop.run_until_complete(asyncio.sleep(0))

    @initialize()
    def first_load(self):
        self.gate.set()
        data = self.loop.run_until_complete(self.cache.fetch_query(KEY, self.query))
        assert data == {"v": 0}
        self.gate = asyncio.Event()

    @rule()
    def start_fetch(self):
        calls = self.calls
        self.tasks.append(self.loop.create_task(self.cache.fetch_query(KEY, self.query)))
        self.spin()
        entry = self.cache.get_entry(KEY)
        assert entry.is_fetching or self.calls == calls

    async def apply_update(self, version: int) -> list:
        patched = self.cache.set_queries_data(FAMILY, lambda data: {"v": version})
        # Schedules background refetches, so it needs the running loop
        self.cache.invalidate(FAMILY)
        return patched

    @rule()
    def update(self):
        self.version += 1
        if self.loop.run_until_complete(self.apply_update(self.version)):
            self.floor = self.version
        self.spin()

    @rule()
    def seed(self):
        self.cache.set_query_data(KEY, {"v": self.version})
        self.floor = self.version

    @rule()
    def settle(self):
        self.gate.set()
        for task in self.tasks:
            # Raises if the entry hit an invalid transition
            self.loop.run_until_complete(task)
        self.tasks.clear()
        self.loop.run_until_complete(self.cache.wait_for_background())
        self.gate = asyncio.Event()

        entry = self.cache.get_entry(KEY)
        assert entry.data == {"v": self.version}
        assert entry.status == CacheEntryStatus.FRESH
        assert not entry.patched_during_fetch

    @invariant()
    def patch_never_rolled_back(self):
        data = self.cache.get_data(KEY)
        if data is not None:
            assert data["v"] >= self.floor

    def teardown(self):
        self.gate.set()
        for task in self.tasks:
            self.loop.run_until_complete(task)
        self.loop.run_until_complete(self.cache.wait_for_background())
        self.loop.close()


TestCacheWritesStateful = CacheWriteMachine.TestCase
