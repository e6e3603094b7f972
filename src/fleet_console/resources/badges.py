"""Sidebar badge counts."""

from __future__ import annotations

from typing import Any

from fleet_console.client.cache import QueryCache
from fleet_console.client.fetcher import RemoteFetcher
from fleet_console.client.query_keys import QueryKey

SIDEBAR_BADGES_PATH = "/api/sidebar-badges"
SIDEBAR_BADGES_KEY: QueryKey = (SIDEBAR_BADGES_PATH,)


class SidebarBadgesClient:
    def __init__(self, fetcher: RemoteFetcher, cache: QueryCache):
        self.fetcher = fetcher
        self.cache = cache

    async def get(self) -> dict[str, Any]:
        """Counts shown next to navigation entries."""

        async def query_fn() -> dict[str, Any]:
            body = await self.fetcher.get_json(
                SIDEBAR_BADGES_PATH, fallback="Failed to fetch sidebar badges"
            )
            return body.get("data", {}) if isinstance(body, dict) else {}

        return await self.cache.fetch_query(SIDEBAR_BADGES_KEY, query_fn)
