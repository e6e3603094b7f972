"""Headless list and profile views."""

from __future__ import annotations

import logging
from typing import Any, Callable, TypeVar

from pydantic import BaseModel

from fleet_console.client.cache import QueryFn
from fleet_console.client.envelope import ListEnvelope, Pagination
from fleet_console.client.errors import ConsoleError
from fleet_console.client.observer import QueryObserver, QueryResult
from fleet_console.client.pagination import PaginationController, page_numbers
from fleet_console.client.preferences import PreferencesStore
from fleet_console.client.query_keys import DEFAULT_PAGE_SIZE, FilterState, QueryKey
from fleet_console.resources.base import ResourceClient
from fleet_console.resources.employees import EmployeeSection, EmployeesResource
from fleet_console.resources.rate_history import PayEditControl, RateHistoryService, current_rate
from fleet_console.resources.records import Employee, RateHistoryEntry, as_records
from fleet_console.resources.schema import Column

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

ListQueryFactory = Callable[[FilterState], "tuple[QueryKey, QueryFn]"]


class ListView:
    """One paginated, filterable resource list.

    Every filter or page change produces a new query key; the previous page
    stays visible until the new one arrives. Fetch errors end up in
    ``error`` and are not toasted.
    """

    def __init__(
        self,
        resource: ResourceClient,
        preferences: PreferencesStore,
        default_page_size: int = DEFAULT_PAGE_SIZE,
        query_factory: ListQueryFactory | None = None,
        scroll_to_top: Callable[[], None] | None = None,
    ):
        self.resource = resource
        self.schema = resource.schema
        self.controller = PaginationController(
            preferences,
            self.schema.preference_key or f"{self.schema.plural}_limit",
            default_page_size,
            scroll_to_top,
        )
        self.observer = QueryObserver(resource.cache)
        self.query_factory = query_factory or resource.list_query

    @property
    def filters(self) -> FilterState:
        return self.controller.filters

    async def load(self) -> QueryResult:
        """Fetch the current page, clamping the page number if needed."""
        result = await self.observer.set_query(*self.query_factory(self.filters))
        if not result.is_placeholder and self.controller.reconcile(self._pagination(result)):
            logger.debug("Page clamped to %s", self.controller.page)
            result = await self.observer.set_query(*self.query_factory(self.filters))
        return result

    async def set_status_filter(self, status_filter: str) -> QueryResult:
        self.schema.validate_status(status_filter)
        self.controller.set_status_filter(status_filter)
        return await self.load()

    async def set_search_query(self, search_query: str) -> QueryResult:
        self.controller.set_search_query(search_query)
        return await self.load()

    async def set_items_per_page(self, items_per_page: int) -> QueryResult:
        self.controller.set_items_per_page(items_per_page)
        return await self.load()

    async def go_to_page(self, page: int) -> QueryResult:
        self.controller.go_to_page(page)
        return await self.load()

    @property
    def result(self) -> QueryResult:
        return self.observer.result

    @property
    def records(self) -> list[dict[str, Any]]:
        data = self.result.data
        return list(data.data) if isinstance(data, ListEnvelope) else []

    def typed_records(self, model_cls: type[T]) -> list[T]:
        """Current rows as pydantic views, e.g. ``view.typed_records(Car)``."""
        return as_records(model_cls, self.records)

    @property
    def pagination(self) -> Pagination | None:
        return self._pagination(self.result)

    @property
    def error(self) -> ConsoleError | None:
        return self.result.error

    @property
    def is_loading(self) -> bool:
        return self.result.is_loading

    def page_numbers(self) -> list[int | str]:
        pagination = self.pagination
        total_pages = pagination.total_pages if pagination else 1
        return page_numbers(self.controller.page, total_pages)

    def showing(self) -> tuple[int, int, int]:
        """``(start, end, total)`` for the "Showing X to Y of Z" line."""
        pagination = self.pagination
        if pagination is None:
            return (0, 0, 0)
        return (pagination.start_item, pagination.end_item, pagination.total)

    def columns(self, is_admin: bool) -> list[Column]:
        return self.schema.visible_columns(is_admin)

    def close(self) -> None:
        self.observer.close()

    @staticmethod
    def _pagination(result: QueryResult) -> Pagination | None:
        data = result.data
        return data.pagination if isinstance(data, ListEnvelope) else None


class ProfileView:
    """Employee profile: the record plus lazily loaded sections.

    A section is fetched the first time it is opened; later opens are
    served from the cache until a mutation invalidates it.
    """

    def __init__(
        self,
        employees: EmployeesResource,
        rates: RateHistoryService,
        employee_aid: int,
    ):
        self.employees = employees
        self.rates = rates
        self.employee_aid = employee_aid
        self.record: dict[str, Any] | None = None
        self.error: ConsoleError | None = None
        self.sections: dict[EmployeeSection, list[dict[str, Any]]] = {}
        self.section_errors: dict[EmployeeSection, ConsoleError] = {}

    async def load(self) -> dict[str, Any] | None:
        try:
            self.record = await self.employees.get(self.employee_aid)
            self.error = None
        except ConsoleError as e:
            self.error = e
        return self.record

    async def open_section(self, section: EmployeeSection | str) -> list[dict[str, Any]]:
        section = EmployeeSection(section)
        try:
            rows = await self.employees.get_section(self.employee_aid, section)
        except ConsoleError as e:
            self.section_errors[section] = e
            return self.sections.get(section, [])
        self.section_errors.pop(section, None)
        self.sections[section] = rows
        return rows

    def is_loaded(self, section: EmployeeSection | str) -> bool:
        return EmployeeSection(section) in self.sections

    @property
    def employee(self) -> Employee | None:
        return Employee.model_validate(self.record) if self.record else None

    def current_rate(self) -> RateHistoryEntry | None:
        """Open-ended rate of the loaded rate-history section."""
        return current_rate(self.sections.get(EmployeeSection.RATE_HISTORY, []))

    async def pay_edit_control(self) -> PayEditControl:
        return await self.rates.pay_edit_control()
