"""Server-side business rules."""

from fleet_console.server.services.lifecycle import (
    CarStateMachine,
    EmployeeStateMachine,
    EmployeeStatus,
    InvalidTransitionError,
)
from fleet_console.server.services.listing import paginate, pagination_meta
from fleet_console.server.services.rate_history import RateHistoryError, RateHistoryService

__all__ = [
    "CarStateMachine",
    "EmployeeStateMachine",
    "EmployeeStatus",
    "InvalidTransitionError",
    "RateHistoryError",
    "RateHistoryService",
    "paginate",
    "pagination_meta",
]
