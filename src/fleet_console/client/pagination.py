"""Pagination controller for list views."""

from __future__ import annotations

import math
from typing import Callable

from fleet_console.client.envelope import Pagination
from fleet_console.client.preferences import PreferencesStore
from fleet_console.client.query_keys import DEFAULT_PAGE_SIZE, FilterState

ELLIPSIS = "ellipsis"
MAX_VISIBLE_PAGES = 7


def parse_page_size(raw: str | None, default: int = DEFAULT_PAGE_SIZE) -> int:
    """Parse a stored page size, falling back to ``default``."""
    if raw is None:
        return default
    try:
        value = int(raw.strip())
    except (TypeError, ValueError):
        return default
    return value if value > 0 else default


def page_numbers(current_page: int, total_pages: int) -> list[int | str]:
    """Page buttons to show: up to seven entries with ellipsis markers."""
    total_pages = max(1, total_pages)
    if total_pages <= MAX_VISIBLE_PAGES:
        return list(range(1, total_pages + 1))

    pages: list[int | str] = [1]
    if current_page <= 3:
        pages.extend(range(2, 5))
        pages.extend([ELLIPSIS, total_pages])
    elif current_page >= total_pages - 2:
        pages.append(ELLIPSIS)
        pages.extend(range(total_pages - 3, total_pages + 1))
    else:
        pages.append(ELLIPSIS)
        pages.extend(range(current_page - 1, current_page + 2))
        pages.extend([ELLIPSIS, total_pages])
    return pages


class PaginationController:
    """Tracks filters, page and page size for one resource list.

    The page size is read from the preferences store when the controller is
    created and written back on every change. Any change of status filter,
    search text or page size sends the view back to page 1.
    """

    def __init__(
        self,
        preferences: PreferencesStore,
        preference_key: str,
        default_page_size: int = DEFAULT_PAGE_SIZE,
        scroll_to_top: Callable[[], None] | None = None,
    ):
        self.preferences = preferences
        self.preference_key = preference_key
        self.default_page_size = default_page_size
        self.scroll_to_top = scroll_to_top
        size = parse_page_size(preferences.get(preference_key), default_page_size)
        self._filters = FilterState(items_per_page=size)
        self.preferences.set(preference_key, str(size))

    @property
    def filters(self) -> FilterState:
        return self._filters

    @property
    def page(self) -> int:
        return self._filters.page

    @property
    def items_per_page(self) -> int:
        return self._filters.items_per_page

    def set_status_filter(self, status_filter: str) -> FilterState:
        self._filters = self._filters.with_status(status_filter)
        return self._filters

    def set_search_query(self, search_query: str) -> FilterState:
        self._filters = self._filters.with_search(search_query)
        return self._filters

    def set_items_per_page(self, items_per_page: int) -> FilterState:
        if items_per_page < 1:
            raise ValueError("items_per_page must be at least 1")
        self._filters = self._filters.with_items_per_page(items_per_page)
        self.preferences.set(self.preference_key, str(items_per_page))
        return self._filters

    def go_to_page(self, page: int) -> FilterState:
        """Move to ``page`` and scroll the viewport to the top."""
        self._filters = self._filters.with_page(max(1, page))
        if self.scroll_to_top is not None:
            self.scroll_to_top()
        return self._filters

    def reconcile(self, pagination: Pagination | None) -> bool:
        """Clamp the page into the range the backend reported.

        Returns True when the page moved and the list must be fetched again.
        """
        if pagination is None or pagination.total_pages <= 0:
            return False
        clamped = min(max(1, self.page), pagination.total_pages)
        if clamped == self.page:
            return False
        self._filters = self._filters.with_page(clamped)
        return True

    def total_pages(self, total: int) -> int:
        return math.ceil(total / self.items_per_page)
