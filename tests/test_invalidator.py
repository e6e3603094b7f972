"""Tests for post-mutation cache invalidation."""

from fleet_console.client.cache import QueryCache
from fleet_console.client.cache_state import CacheEntryStatus
from fleet_console.client.envelope import ListEnvelope
from fleet_console.client.invalidator import CacheInvalidator

CARS_PAGE = ("/api/cars", "all", "", 1, 10)
CARS_ACTIVE = ("/api/cars", "ACTIVE", "", 1, 10)
CAR_DETAIL = ("/api/cars", 3)
BADGES = ("/api/sidebar-badges",)


def seed(cache: QueryCache) -> None:
    rows = [{"id": 3, "status": "ACTIVE", "vin": "A"}, {"id": 4, "status": "ACTIVE", "vin": "B"}]
    cache.set_query_data(CARS_PAGE, ListEnvelope(data=rows))
    cache.set_query_data(CARS_ACTIVE, ListEnvelope(data=rows[:1]))
    cache.set_query_data(CAR_DETAIL, {"id": 3, "status": "ACTIVE"})
    cache.set_query_data(BADGES, {"activeCars": 2})


class TestCacheInvalidator:
    """Test patch-then-invalidate after mutations."""

    async def test_update_patches_every_page_with_record(self):
        cache = QueryCache()
        seed(cache)

        patched = CacheInvalidator(cache).on_update_success(
            ("/api/cars",), "id", {"id": 3, "status": "INACTIVE"}
        )

        assert set(patched) == {CARS_PAGE, CARS_ACTIVE, CAR_DETAIL}
        assert cache.get_data(CARS_PAGE).data[0]["status"] == "INACTIVE"
        assert cache.get_data(CARS_PAGE).data[0]["vin"] == "A"
        assert cache.get_data(CARS_ACTIVE).data[0]["status"] == "INACTIVE"
        assert cache.get_data(CAR_DETAIL)["status"] == "INACTIVE"

    async def test_update_marks_family_and_related_stale(self):
        cache = QueryCache()
        seed(cache)

        CacheInvalidator(cache).on_update_success(
            ("/api/cars",), "id", {"id": 3, "status": "INACTIVE"}, related=[BADGES]
        )

        for key in (CARS_PAGE, CARS_ACTIVE, CAR_DETAIL, BADGES):
            assert cache.get_entry(key).status == CacheEntryStatus.STALE

    async def test_update_without_record_only_invalidates(self):
        cache = QueryCache()
        seed(cache)

        patched = CacheInvalidator(cache).on_update_success(("/api/cars",), "id", None)

        assert patched == []
        assert cache.get_data(CARS_PAGE).data[0]["status"] == "ACTIVE"
        assert cache.get_entry(CARS_PAGE).status == CacheEntryStatus.STALE

    async def test_other_families_untouched(self):
        cache = QueryCache()
        seed(cache)
        employees = ("/api/employees", "all", "", 1, 10)
        cache.set_query_data(employees, ListEnvelope(data=[{"employee_aid": 3}]))

        CacheInvalidator(cache).on_create_success(("/api/cars",))

        assert cache.get_entry(employees).status == CacheEntryStatus.FRESH
        assert cache.get_entry(BADGES).status == CacheEntryStatus.FRESH

    async def test_delete_invalidates_related(self):
        cache = QueryCache()
        seed(cache)

        CacheInvalidator(cache).on_delete_success(("/api/cars",), related=[BADGES])

        assert cache.get_entry(BADGES).status == CacheEntryStatus.STALE
        assert cache.get_data(CARS_PAGE) is not None
