"""Tests for query keys and filter state."""

from fleet_console.client.query_keys import (
    FilterState,
    build_query_key,
    build_query_params,
    key_matches,
)


class TestFilterState:
    """Test filter changes and page resets."""

    def test_defaults(self):
        """A fresh filter shows page 1 of everything, ten per page."""
        filters = FilterState()
        assert filters.status_filter == "all"
        assert filters.search_query == ""
        assert filters.page == 1
        assert filters.items_per_page == 10

    def test_status_change_resets_page(self):
        filters = FilterState(page=4).with_status("INACTIVE")
        assert filters.page == 1
        assert filters.status_filter == "INACTIVE"

    def test_search_change_resets_page(self):
        filters = FilterState(page=3).with_search("Mercedes")
        assert filters.page == 1
        assert filters.search_query == "Mercedes"

    def test_page_size_change_resets_page(self):
        filters = FilterState(page=5).with_items_per_page(50)
        assert filters.page == 1
        assert filters.items_per_page == 50

    def test_page_change_keeps_filters(self):
        filters = FilterState(status_filter="ACTIVE", search_query="ford").with_page(2)
        assert filters.page == 2
        assert filters.status_filter == "ACTIVE"
        assert filters.search_query == "ford"


class TestQueryKey:
    """Test cache key derivation."""

    def test_key_order(self):
        """Keys are (path, status, search, page, limit)."""
        filters = FilterState("ACTIVE", "  bmw ", 2, 20)
        assert build_query_key("/api/cars", filters) == ("/api/cars", "ACTIVE", "bmw", 2, 20)

    def test_equal_filters_give_equal_keys(self):
        a = build_query_key("/api/cars", FilterState(search_query="bmw"))
        b = build_query_key("/api/cars", FilterState(search_query="bmw  "))
        assert a == b

    def test_family_prefix(self):
        key = build_query_key("/api/cars", FilterState())
        assert key_matches(key, ("/api/cars",))
        assert not key_matches(key, ("/api/employees",))
        assert key_matches(key, ())


class TestQueryParams:
    """Test query string encoding."""

    def test_defaults_send_only_page_and_limit(self):
        assert build_query_params(FilterState()) == {"page": "1", "limit": "10"}

    def test_status_and_search_sent_when_set(self):
        params = build_query_params(FilterState("INACTIVE", " Mercedes ", 3, 20))
        assert params == {
            "status": "INACTIVE",
            "search": "Mercedes",
            "page": "3",
            "limit": "20",
        }

    def test_blank_search_not_sent(self):
        assert "search" not in build_query_params(FilterState(search_query="   "))
