"""Query observer with keep-previous-data behaviour."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from fleet_console.client.cache import QueryCache, QueryFn
from fleet_console.client.cache_state import CacheEntryStatus
from fleet_console.client.errors import ConsoleError
from fleet_console.client.query_keys import QueryKey


@dataclass(frozen=True)
class QueryResult:
    """What a view should show right now."""

    data: Any
    error: ConsoleError | None
    is_fetching: bool
    is_placeholder: bool
    status: CacheEntryStatus | None

    @property
    def is_loading(self) -> bool:
        """Nothing to show yet and a fetch is running."""
        return self.data is None and self.is_fetching


class QueryObserver:
    """Follows one query key at a time on behalf of a view.

    When the key changes, data of the previous key stays visible (flagged as
    placeholder) until the new key has data, so pages never blank out
    between filter or page changes. Results for keys the observer has since
    moved away from are cached but not shown.
    """

    def __init__(self, cache: QueryCache, keep_previous_data: bool = True):
        self.cache = cache
        self.keep_previous_data = keep_previous_data
        self.key: QueryKey | None = None
        self._previous: Any = None

    async def set_query(self, key: QueryKey, query_fn: QueryFn) -> QueryResult:
        """Point the observer at ``key`` and fetch it if needed.

        List fetch errors are reported through ``result.error`` rather than
        raised.
        """
        if key != self.key:
            if self.key is not None:
                old = self.cache.get_entry(self.key)
                if old is not None and old.has_data:
                    self._previous = old.data
                self.cache.unsubscribe(self.key)
            self.cache.subscribe(key)
            self.key = key

        try:
            await self.cache.fetch_query(key, query_fn)
        except ConsoleError:
            pass  # recorded on the cache entry
        return self.result

    @property
    def result(self) -> QueryResult:
        """Current result for the observed key."""
        if self.key is None:
            return QueryResult(None, None, False, False, None)

        entry = self.cache.get_entry(self.key)
        is_fetching = bool(entry and entry.is_fetching)
        error = entry.error if entry else None
        status = entry.status if entry else None

        if entry is not None and entry.has_data:
            return QueryResult(entry.data, error, is_fetching, False, status)
        if self.keep_previous_data and self._previous is not None and error is None:
            return QueryResult(self._previous, None, is_fetching, True, status)
        return QueryResult(None, error, is_fetching, False, status)

    def close(self) -> None:
        """Stop observing; pending results are still cached."""
        if self.key is not None:
            self.cache.unsubscribe(self.key)
        self.key = None
        self._previous = None
