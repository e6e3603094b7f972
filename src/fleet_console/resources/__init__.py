"""Concrete console resources built on the generic client."""

from fleet_console.resources.badges import SidebarBadgesClient
from fleet_console.resources.base import ResourceClient
from fleet_console.resources.cars import CARS_SCHEMA, FLEET_CARS_SCHEMA, CarsResource
from fleet_console.resources.employees import (
    EMPLOYEES_SCHEMA,
    DocumentAction,
    EmployeeSection,
    EmployeesResource,
)
from fleet_console.resources.rate_history import PayEditControl, PayType, RateHistoryService
from fleet_console.resources.records import OffboardReason, SlackFormType
from fleet_console.resources.schema import Column, ResourceSchema
from fleet_console.resources.session import SessionClient
from fleet_console.resources.settings import SlackSettingsClient

__all__ = [
    "CARS_SCHEMA",
    "EMPLOYEES_SCHEMA",
    "FLEET_CARS_SCHEMA",
    "CarsResource",
    "Column",
    "DocumentAction",
    "EmployeeSection",
    "EmployeesResource",
    "OffboardReason",
    "PayEditControl",
    "PayType",
    "RateHistoryService",
    "ResourceClient",
    "ResourceSchema",
    "SessionClient",
    "SidebarBadgesClient",
    "SlackFormType",
    "SlackSettingsClient",
]
