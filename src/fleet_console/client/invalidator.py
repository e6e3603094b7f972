"""Cache invalidation after mutations."""

from __future__ import annotations

import logging
from typing import Any, Iterable

from fleet_console.client.cache import QueryCache
from fleet_console.client.envelope import ListEnvelope
from fleet_console.client.query_keys import QueryKey

logger = logging.getLogger(__name__)


class CacheInvalidator:
    """Applies the two-phase update after a successful mutation.

    Phase 1 (updates only) patches the returned record into every cached
    page of the family synchronously. Phase 2 marks the family and any
    related families stale and lets the cache refetch observed pages in
    the background; the refetched page replaces the patched one.
    """

    def __init__(self, cache: QueryCache):
        self.cache = cache

    def patch_record(
        self,
        family: QueryKey,
        id_field: str,
        record: dict[str, Any],
    ) -> list[QueryKey]:
        """Rewrite cached list pages that contain ``record``'s id."""

        def updater(data: Any) -> Any:
            if isinstance(data, ListEnvelope):
                return data.replace_record(id_field, record)
            if isinstance(data, dict) and data.get(id_field) == record.get(id_field):
                return {**data, **record}
            return None

        patched = self.cache.set_queries_data(family, updater)
        if patched:
            logger.debug("Patched %s in %d cached page(s)", record.get(id_field), len(patched))
        return patched

    def invalidate(self, families: Iterable[QueryKey]) -> list[QueryKey]:
        """Mark families stale and refetch the observed ones in the background."""
        invalidated: list[QueryKey] = []
        for family in families:
            invalidated.extend(self.cache.invalidate(family))
        return invalidated

    def on_update_success(
        self,
        family: QueryKey,
        id_field: str,
        record: dict[str, Any] | None,
        related: Iterable[QueryKey] = (),
    ) -> list[QueryKey]:
        """Patch then invalidate after an update.

        Returns the keys that were patched optimistically.
        """
        patched: list[QueryKey] = []
        if isinstance(record, dict) and record.get(id_field) is not None:
            patched = self.patch_record(family, id_field, record)
        self.invalidate([family, *related])
        return patched

    def on_create_success(self, family: QueryKey, related: Iterable[QueryKey] = ()) -> None:
        """Invalidate without patching after a create."""
        self.invalidate([family, *related])

    def on_delete_success(self, family: QueryKey, related: Iterable[QueryKey] = ()) -> None:
        """Invalidate without patching after a delete."""
        self.invalidate([family, *related])
