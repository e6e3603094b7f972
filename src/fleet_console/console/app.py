"""Admin console wiring."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from fleet_console.client.cache import QueryCache
from fleet_console.client.fetcher import RemoteFetcher
from fleet_console.client.invalidator import CacheInvalidator
from fleet_console.client.mutations import MutationExecutor
from fleet_console.client.preferences import (
    JsonFilePreferences,
    MemoryPreferences,
    PreferencesStore,
)
from fleet_console.config import Settings, get_settings
from fleet_console.console.boundary import MutationBoundary
from fleet_console.console.forms import FormDialog
from fleet_console.console.notifications import Notifier
from fleet_console.console.views import ListView, ProfileView
from fleet_console.resources.badges import SidebarBadgesClient
from fleet_console.resources.cars import CARS_SCHEMA, FLEET_CARS_SCHEMA, CarsResource
from fleet_console.resources.employees import EMPLOYEES_SCHEMA, EmployeesResource
from fleet_console.resources.rate_history import RateHistoryService
from fleet_console.resources.records import SessionUser
from fleet_console.resources.schema import Column
from fleet_console.resources.session import SessionClient
from fleet_console.resources.settings import SlackSettingsClient

logger = logging.getLogger(__name__)


def create_http_client(settings: Settings, **kwargs: Any) -> httpx.AsyncClient:
    """HTTP client carrying the session cookie on every request."""
    cookies = {settings.session_cookie: settings.session_token} if settings.session_token else None
    kwargs.setdefault("base_url", settings.api_base_url)
    kwargs.setdefault("timeout", settings.http_timeout)
    return httpx.AsyncClient(cookies=cookies, **kwargs)


class AdminConsole:
    """Everything a console session needs, sharing one cache.

    Usage:
        async with AdminConsole() as console:
            cars = console.cars_view()
            await cars.load()
    """

    def __init__(
        self,
        settings: Settings | None = None,
        http: httpx.AsyncClient | None = None,
        preferences: PreferencesStore | None = None,
        notifier: Notifier | None = None,
    ):
        self.settings = settings or get_settings()
        self._owns_http = http is None
        self.http = http or create_http_client(self.settings)
        if preferences is None:
            preferences = (
                JsonFilePreferences(self.settings.preferences_path)
                if self.settings.preferences_path
                else MemoryPreferences()
            )
        self.preferences = preferences
        self.notifier = notifier or Notifier()
        self.boundary = MutationBoundary(self.notifier)

        # The HTTP client's own base_url applies to relative paths
        self.fetcher = RemoteFetcher(self.http)
        self.executor = MutationExecutor(self.http)
        self.cache = QueryCache()
        self.invalidator = CacheInvalidator(self.cache)

        self.cars = CarsResource(
            CARS_SCHEMA, self.fetcher, self.executor, self.cache, self.invalidator
        )
        self.fleet_cars = CarsResource(
            FLEET_CARS_SCHEMA, self.fetcher, self.executor, self.cache, self.invalidator
        )
        self.employees = EmployeesResource(
            EMPLOYEES_SCHEMA, self.fetcher, self.executor, self.cache, self.invalidator
        )
        self.rates = RateHistoryService(self.fetcher, self.executor, self.cache, self.invalidator)
        self.slack = SlackSettingsClient(self.fetcher, self.executor, self.cache, self.invalidator)
        self.session = SessionClient(self.fetcher, self.cache)
        self.badges = SidebarBadgesClient(self.fetcher, self.cache)

    async def __aenter__(self) -> AdminConsole:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.cache.wait_for_background()
        if self._owns_http:
            await self.http.aclose()

    async def current_user(self) -> SessionUser | None:
        return await self.session.me()

    async def is_admin(self) -> bool:
        user = await self.current_user()
        return bool(user and user.is_admin)

    async def visible_columns(self, view: ListView) -> list[Column]:
        """Columns of ``view`` the signed-in user may see."""
        return view.columns(await self.is_admin())

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def cars_view(self, fleet: bool = False) -> ListView:
        resource = self.fleet_cars if fleet else self.cars
        return ListView(resource, self.preferences, self.settings.default_page_size)

    def client_cars_view(self) -> ListView:
        """Car list for a signed-in client, filtered and paged locally."""
        return ListView(
            self.cars,
            self.preferences,
            self.settings.default_page_size,
            query_factory=self.cars.client_list_query,
        )

    def employees_view(self) -> ListView:
        return ListView(self.employees, self.preferences, self.settings.default_page_size)

    def employee_profile(self, employee_aid: int) -> ProfileView:
        return ProfileView(self.employees, self.rates, employee_aid)

    def car_edit_dialog(self, car_id: int, fleet: bool = False) -> FormDialog:
        resource = self.fleet_cars if fleet else self.cars
        return FormDialog(
            self.boundary,
            lambda values: resource.update_car(car_id, values),
            success_title="Success",
            success_description="Car updated successfully",
        )

    def car_create_dialog(self, fleet: bool = False) -> FormDialog:
        resource = self.fleet_cars if fleet else self.cars
        return FormDialog(
            self.boundary,
            resource.create_car,
            success_title="Success",
            success_description="Car created successfully",
        )

    def employee_create_dialog(self) -> FormDialog:
        return FormDialog(
            self.boundary,
            self.employees.create_employee,
            success_title="Success",
            success_description="Employee added successfully",
        )

    def employee_edit_dialog(self, employee_aid: int) -> FormDialog:
        return FormDialog(
            self.boundary,
            lambda values: self.employees.update(employee_aid, values),
            success_title="Success",
            success_description="Employee updated successfully",
        )
