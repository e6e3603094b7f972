"""ORM models of the reference backend."""

from fleet_console.server.models.base import Base, TimestampMixin, UpdatedAtMixin
from fleet_console.server.models.fleet import Car, CarOwner
from fleet_console.server.models.hr import (
    Employee,
    EmployeeDocument,
    EmploymentHistory,
    PayItem,
    PayrollRun,
    Payslip,
    RateHistory,
)
from fleet_console.server.models.settings import AppSetting, SlackChannel

__all__ = [
    "AppSetting",
    "Base",
    "Car",
    "CarOwner",
    "Employee",
    "EmployeeDocument",
    "EmploymentHistory",
    "PayItem",
    "PayrollRun",
    "Payslip",
    "RateHistory",
    "SlackChannel",
    "TimestampMixin",
    "UpdatedAtMixin",
]
