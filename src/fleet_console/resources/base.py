"""Generic schema-driven resource client."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from fleet_console.client.cache import QueryCache, QueryFn
from fleet_console.client.envelope import ListEnvelope
from fleet_console.client.fetcher import RemoteFetcher
from fleet_console.client.invalidator import CacheInvalidator
from fleet_console.client.mutations import FileSpec, MutationExecutor
from fleet_console.client.query_keys import FilterState, QueryKey, build_query_key
from fleet_console.resources.schema import ResourceSchema

logger = logging.getLogger(__name__)


class ResourceClient:
    """List, read and mutate one resource according to its schema.

    Reads go through the shared cache; every successful mutation hands the
    affected query families to the invalidator.
    """

    def __init__(
        self,
        schema: ResourceSchema,
        fetcher: RemoteFetcher,
        executor: MutationExecutor,
        cache: QueryCache,
        invalidator: CacheInvalidator,
    ):
        self.schema = schema
        self.fetcher = fetcher
        self.executor = executor
        self.cache = cache
        self.invalidator = invalidator

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_query(self, filters: FilterState) -> tuple[QueryKey, QueryFn]:
        """Key and fetch function for one list page."""
        self.schema.validate_status(filters.status_filter)
        key = build_query_key(self.schema.path, filters)

        async def query_fn() -> ListEnvelope:
            return await self.fetcher.fetch_list(
                self.schema.path, filters, self.schema.fetch_fallback
            )

        return key, query_fn

    async def list(self, filters: FilterState | None = None) -> ListEnvelope:
        """Fetch (or read from cache) one list page."""
        key, query_fn = self.list_query(filters or FilterState())
        return await self.cache.fetch_query(key, query_fn)

    def detail_key(self, record_id: Any) -> QueryKey:
        return (self.schema.path, record_id)

    async def get(self, record_id: Any) -> dict[str, Any]:
        """Fetch one record by id."""
        path = self.schema.record_path(record_id)
        fallback = f"Failed to fetch {self.schema.name}"

        async def query_fn() -> dict[str, Any]:
            body = await self.fetcher.get_json(path, fallback=fallback)
            return body.get("data", body) if isinstance(body, dict) else body

        return await self.cache.fetch_query(self.detail_key(record_id), query_fn)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def create(
        self,
        fields: Mapping[str, Any],
        files: Mapping[str, FileSpec] | None = None,
    ) -> Any:
        """Create a record; the list is invalidated, not patched."""
        record = await self.executor.post(
            self.schema.path,
            fields=fields,
            files=files,
            multipart=self.schema.multipart,
            fallback=self.schema.mutation_fallback("create"),
        )
        logger.info("Created %s %s", self.schema.name, _record_id(record, self.schema.id_field))
        self.invalidator.on_create_success(self.schema.family, self.schema.related)
        return record

    async def update(
        self,
        record_id: Any,
        fields: Mapping[str, Any],
        files: Mapping[str, FileSpec] | None = None,
    ) -> Any:
        """Update a record; cached pages are patched, then refetched."""
        record = await self.executor.execute(
            self.schema.update_method,
            self.schema.record_path(record_id),
            fields=fields,
            files=files,
            multipart=self.schema.multipart,
            fallback=self.schema.mutation_fallback("update"),
        )
        logger.info("Updated %s %s", self.schema.name, record_id)
        self.invalidator.on_update_success(
            self.schema.family, self.schema.id_field, record, self.schema.related
        )
        return record

    async def delete(self, record_id: Any) -> None:
        """Delete a record; the list is invalidated, not patched."""
        await self.executor.delete(
            self.schema.record_path(record_id),
            fallback=self.schema.mutation_fallback("delete"),
        )
        logger.info("Deleted %s %s", self.schema.name, record_id)
        self.invalidator.on_delete_success(self.schema.family, self.schema.related)

    async def transition(
        self,
        record_id: Any,
        action: str,
        fields: Mapping[str, Any] | None = None,
        method: str = "POST",
        fallback: str | None = None,
    ) -> Any:
        """Run a lifecycle sub-path such as ``/{id}/offboard``.

        A returned record is patched into the cache like an update.
        """
        record = await self.executor.execute(
            method,
            f"{self.schema.record_path(record_id)}/{action}",
            fields=fields,
            fallback=fallback or self.schema.mutation_fallback(action),
        )
        logger.info("%s %s: %s", self.schema.name.capitalize(), record_id, action)
        self.invalidator.on_update_success(
            self.schema.family,
            self.schema.id_field,
            record if isinstance(record, dict) else None,
            self.schema.related,
        )
        return record


def _record_id(record: Any, id_field: str) -> Any:
    if isinstance(record, dict):
        return record.get(id_field)
    return None
