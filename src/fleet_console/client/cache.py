"""Process-wide query cache.

The cache holds the last known response per query key. Entries follow
``CacheEntryStateMachine``:

- a new entry is stale and empty; the first fetch moves it through
  refetching to fresh
- a local patch (optimistic update) moves fresh/stale data to optimistic
- invalidation marks data stale; observed entries are refetched in the
  background and replaced wholesale when the refetch lands
- a failed refetch returns the entry to stale and keeps its data

Concurrent requests for the same key share one in-flight fetch. The cache
is not thread-safe; it is meant to be used from one event loop.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable

from fleet_console.client.cache_state import CacheEntryStateMachine, CacheEntryStatus
from fleet_console.client.errors import ConsoleError
from fleet_console.client.query_keys import QueryKey, key_matches

logger = logging.getLogger(__name__)

QueryFn = Callable[[], Awaitable[Any]]
CacheListener = Callable[[QueryKey, "CacheEntry"], None]


@dataclass
class CacheEntry:
    """One cached response and its bookkeeping."""

    key: QueryKey
    status: CacheEntryStatus = CacheEntryStatus.STALE
    data: Any = None
    error: ConsoleError | None = None
    updated_at: datetime | None = None
    observers: int = 0
    query_fn: QueryFn | None = None
    inflight: asyncio.Future[Any] | None = field(default=None, repr=False)
    invalidated_during_fetch: bool = False
    patched_during_fetch: bool = False

    @property
    def has_data(self) -> bool:
        return self.data is not None

    @property
    def is_fetching(self) -> bool:
        return self.inflight is not None

    def transition_to(self, status: CacheEntryStatus) -> None:
        """Move to ``status``, raising InvalidTransitionError if not allowed."""
        CacheEntryStateMachine.validate_transition(self.status, status)
        self.status = status


class QueryCache:
    """Keyed response cache with in-flight deduplication."""

    def __init__(self) -> None:
        self._entries: dict[QueryKey, CacheEntry] = {}
        self._background: set[asyncio.Future[Any]] = set()
        self._listeners: list[CacheListener] = []

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    def get_entry(self, key: QueryKey) -> CacheEntry | None:
        """Get the entry for ``key`` if one exists."""
        return self._entries.get(key)

    def get_data(self, key: QueryKey) -> Any:
        """Get cached data for ``key`` (None when never fetched)."""
        entry = self._entries.get(key)
        return entry.data if entry else None

    def entries(self, prefix: QueryKey = ()) -> list[CacheEntry]:
        """List entries whose key starts with ``prefix``."""
        return [e for k, e in self._entries.items() if key_matches(k, prefix)]

    def _ensure(self, key: QueryKey) -> CacheEntry:
        entry = self._entries.get(key)
        if entry is None:
            entry = CacheEntry(key=key)
            self._entries[key] = entry
        return entry

    async def fetch_query(self, key: QueryKey, query_fn: QueryFn) -> Any:
        """Return data for ``key``, fetching only when needed.

        Fresh or optimistic data is returned as is. A fetch already in
        flight for the key is joined rather than duplicated.
        """
        entry = self._ensure(key)
        entry.query_fn = query_fn
        if entry.has_data and CacheEntryStateMachine.can_serve(entry.status):
            return entry.data
        return await self._join_or_start(entry)

    async def _join_or_start(self, entry: CacheEntry) -> Any:
        if entry.inflight is None:
            entry.inflight = asyncio.ensure_future(self._run_fetch(entry))
        return await asyncio.shield(entry.inflight)

    async def _run_fetch(self, entry: CacheEntry) -> Any:
        if entry.query_fn is None:
            raise RuntimeError(f"No query function registered for {entry.key!r}")
        entry.transition_to(CacheEntryStatus.REFETCHING)
        self._notify(entry)
        try:
            data = await entry.query_fn()
        except Exception as e:
            entry.inflight = None
            entry.invalidated_during_fetch = False
            entry.patched_during_fetch = False
            entry.error = e if isinstance(e, ConsoleError) else None
            entry.transition_to(CacheEntryStatus.STALE)
            self._notify(entry)
            raise

        entry.inflight = None
        entry.error = None
        if entry.patched_during_fetch:
            # The response predates the local patch; keep the patch until the
            # reconciling refetch lands
            self._settle(entry, CacheEntryStatus.STALE, reconcile=True)
        else:
            entry.data = data
            entry.updated_at = datetime.now(timezone.utc)
            if entry.invalidated_during_fetch:
                # The response may predate the mutation that invalidated it
                self._settle(entry, CacheEntryStatus.STALE, reconcile=True)
            else:
                self._settle(entry, CacheEntryStatus.FRESH)
        self._notify(entry)
        return entry.data

    def _settle(
        self, entry: CacheEntry, status: CacheEntryStatus, reconcile: bool = False
    ) -> None:
        """Finish a fetch in ``status``, scheduling a refetch when ``reconcile``."""
        entry.invalidated_during_fetch = False
        entry.patched_during_fetch = False
        if entry.status != status:
            entry.transition_to(status)
        if reconcile and entry.observers > 0:
            self._schedule(entry)

    # ------------------------------------------------------------------
    # Writing
    # ------------------------------------------------------------------

    def set_query_data(self, key: QueryKey, data: Any) -> None:
        """Seed or overwrite one entry with server data.

        With a fetch in flight the entry stays refetching and the landing
        response replaces the seeded data.
        """
        entry = self._ensure(key)
        entry.data = data
        entry.error = None
        entry.updated_at = datetime.now(timezone.utc)
        if entry.inflight is None and entry.status != CacheEntryStatus.FRESH:
            if entry.status != CacheEntryStatus.REFETCHING:
                entry.transition_to(CacheEntryStatus.REFETCHING)
            entry.transition_to(CacheEntryStatus.FRESH)
        self._notify(entry)

    def set_queries_data(
        self,
        prefix: QueryKey,
        updater: Callable[[Any], Any],
    ) -> list[QueryKey]:
        """Patch every cached entry under ``prefix`` in place.

        ``updater`` receives the current data and returns the new data, or
        None to leave the entry untouched. Patched entries become
        optimistic. An entry with a refetch in flight keeps its status and
        its patch; that response is discarded and refetched once it lands.
        """
        patched: list[QueryKey] = []
        for entry in self.entries(prefix):
            if not entry.has_data:
                continue
            new_data = updater(entry.data)
            if new_data is None:
                continue
            entry.data = new_data
            if entry.status == CacheEntryStatus.REFETCHING:
                entry.patched_during_fetch = True
            else:
                entry.transition_to(CacheEntryStatus.OPTIMISTIC)
            patched.append(entry.key)
            self._notify(entry)
        return patched

    def invalidate(self, prefix: QueryKey, refetch: bool = True) -> list[QueryKey]:
        """Mark every entry under ``prefix`` stale.

        Observed entries are refetched in the background when ``refetch``
        is set; unobserved ones are refetched on their next read.
        """
        invalidated: list[QueryKey] = []
        for entry in self.entries(prefix):
            if entry.status == CacheEntryStatus.REFETCHING:
                entry.invalidated_during_fetch = True
            elif entry.status != CacheEntryStatus.STALE:
                entry.transition_to(CacheEntryStatus.STALE)
                self._notify(entry)
            invalidated.append(entry.key)
            if (
                refetch
                and entry.observers > 0
                and entry.query_fn is not None
                and entry.inflight is None
            ):
                self._schedule(entry)
        return invalidated

    def clear(self) -> None:
        """Drop every entry."""
        self._entries.clear()

    # ------------------------------------------------------------------
    # Observers and background work
    # ------------------------------------------------------------------

    def subscribe(self, key: QueryKey) -> CacheEntry:
        """Register an observer of ``key``."""
        entry = self._ensure(key)
        entry.observers += 1
        return entry

    def unsubscribe(self, key: QueryKey) -> None:
        """Remove an observer of ``key``."""
        entry = self._entries.get(key)
        if entry and entry.observers > 0:
            entry.observers -= 1

    def add_listener(self, listener: CacheListener) -> None:
        """Register a callback fired whenever an entry changes."""
        self._listeners.append(listener)

    def remove_listener(self, listener: CacheListener) -> None:
        """Unregister a change callback."""
        self._listeners = [l for l in self._listeners if l != listener]

    def _notify(self, entry: CacheEntry) -> None:
        for listener in self._listeners:
            try:
                listener(entry.key, entry)
            except Exception:
                logger.exception("Cache listener %s failed for %s", listener, entry.key)

    def _schedule(self, entry: CacheEntry) -> asyncio.Future[Any]:
        task = asyncio.ensure_future(self._background_fetch(entry))
        self._background.add(task)
        task.add_done_callback(self._background.discard)
        return task

    async def _background_fetch(self, entry: CacheEntry) -> None:
        try:
            await self._join_or_start(entry)
        except ConsoleError as e:
            # Keep whatever is cached; the next successful fetch reconciles
            logger.warning("Background refetch of %s failed: %s", entry.key, e.message)
        except Exception:
            logger.exception("Background refetch of %s failed", entry.key)

    async def wait_for_background(self) -> None:
        """Wait until all background refetches started so far have settled."""
        while self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)
