"""Query keys and filter state for list resources."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

QueryKey = tuple[Any, ...]

ALL_STATUSES = "all"
DEFAULT_PAGE_SIZE = 10


@dataclass(frozen=True)
class FilterState:
    """Active filters of one list view."""

    status_filter: str = ALL_STATUSES
    search_query: str = ""
    page: int = 1
    items_per_page: int = DEFAULT_PAGE_SIZE

    @property
    def normalized_search(self) -> str:
        """Search text as sent to the backend."""
        return self.search_query.strip()

    def with_status(self, status_filter: str) -> FilterState:
        """Return a copy with a new status filter, back on page 1."""
        return replace(self, status_filter=status_filter, page=1)

    def with_search(self, search_query: str) -> FilterState:
        """Return a copy with a new search query, back on page 1."""
        return replace(self, search_query=search_query, page=1)

    def with_items_per_page(self, items_per_page: int) -> FilterState:
        """Return a copy with a new page size, back on page 1."""
        return replace(self, items_per_page=items_per_page, page=1)

    def with_page(self, page: int) -> FilterState:
        """Return a copy pointing at another page."""
        return replace(self, page=page)


def build_query_key(path: str, filters: FilterState) -> QueryKey:
    """Build the cache key for one list request.

    The key is order-sensitive: ``(path, status, search, page, limit)``.
    Every key of a resource family starts with the resource path, so
    ``(path,)`` is a prefix matching all of them.
    """
    return (
        path,
        filters.status_filter,
        filters.normalized_search,
        filters.page,
        filters.items_per_page,
    )


def build_query_params(filters: FilterState) -> dict[str, str]:
    """Serialize filters as query parameters.

    ``page`` and ``limit`` are always present; ``status`` and ``search``
    only when they differ from their defaults.
    """
    params: dict[str, str] = {}
    if filters.status_filter and filters.status_filter != ALL_STATUSES:
        params["status"] = filters.status_filter
    if filters.normalized_search:
        params["search"] = filters.normalized_search
    params["page"] = str(filters.page)
    params["limit"] = str(filters.items_per_page)
    return params


def key_matches(key: QueryKey, prefix: QueryKey) -> bool:
    """Check whether ``key`` belongs to the family addressed by ``prefix``."""
    return key[: len(prefix)] == prefix
