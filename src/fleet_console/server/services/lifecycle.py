"""Employee and car lifecycle state machines with transition validation."""

from __future__ import annotations

from enum import Enum


class EmployeeStatus(str, Enum):
    """Employee status values."""

    PENDING = "pending"
    ACTIVE = "active"
    OFFBOARDED = "offboarded"


class InvalidTransitionError(Exception):
    """Raised when an invalid status transition is attempted."""

    def __init__(self, from_status: str, to_status: str, reason: str | None = None):
        self.from_status = from_status
        self.to_status = to_status
        self.reason = reason
        msg = f"Invalid transition from '{from_status}' to '{to_status}'"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class _StateMachine:
    VALID_TRANSITIONS: dict[str, list[str]] = {}

    @classmethod
    def can_transition(cls, from_status: str, to_status: str) -> bool:
        """Check if a transition is valid."""
        allowed = cls.VALID_TRANSITIONS.get(from_status, [])
        return to_status in allowed

    @classmethod
    def validate_transition(cls, from_status: str, to_status: str) -> None:
        """Validate a transition, raising InvalidTransitionError if invalid."""
        if not cls.can_transition(from_status, to_status):
            raise InvalidTransitionError(from_status, to_status)


class EmployeeStateMachine(_StateMachine):
    """
    Allowed transitions:
    - pending → active (approve)
    - pending → offboarded
    - active → offboarded
    """

    VALID_TRANSITIONS: dict[str, list[str]] = {
        EmployeeStatus.PENDING: [EmployeeStatus.ACTIVE, EmployeeStatus.OFFBOARDED],
        EmployeeStatus.ACTIVE: [EmployeeStatus.OFFBOARDED],
        EmployeeStatus.OFFBOARDED: [],  # Terminal state
    }

    @classmethod
    def is_active(cls, status: str) -> bool:
        return status == EmployeeStatus.ACTIVE


# Admin console vocabulary and the fleet vocabulary share one table
ADMIN_CAR_STATUSES = ("ACTIVE", "INACTIVE")
FLEET_CAR_STATUSES = ("available", "in_use", "maintenance", "off_fleet")
CAR_STATUSES = ADMIN_CAR_STATUSES + FLEET_CAR_STATUSES
OFFBOARDED_CAR_STATUSES = {"INACTIVE", "off_fleet"}


class CarStateMachine(_StateMachine):
    """
    Offboarding moves ACTIVE → INACTIVE, or any in-fleet status → off_fleet.
    """

    VALID_TRANSITIONS: dict[str, list[str]] = {
        "ACTIVE": ["INACTIVE"],
        "INACTIVE": [],
        "available": ["off_fleet"],
        "in_use": ["off_fleet"],
        "maintenance": ["off_fleet"],
        "off_fleet": [],
    }

    @classmethod
    def offboarded_status(cls, current_status: str) -> str:
        """Status a car takes when it leaves the fleet."""
        return "INACTIVE" if current_status in ADMIN_CAR_STATUSES else "off_fleet"

    @classmethod
    def is_offboarded(cls, status: str) -> bool:
        return status in OFFBOARDED_CAR_STATUSES
