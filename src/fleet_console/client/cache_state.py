"""Cache entry state machine with transition validation."""

from __future__ import annotations

from enum import Enum


class CacheEntryStatus(str, Enum):
    """Cache entry status values."""

    FRESH = "fresh"
    OPTIMISTIC = "optimistic"
    STALE = "stale"
    REFETCHING = "refetching"


class InvalidTransitionError(Exception):
    """Raised when an invalid state transition is attempted."""

    def __init__(self, from_status: str, to_status: str, reason: str | None = None):
        self.from_status = from_status
        self.to_status = to_status
        self.reason = reason
        msg = f"Invalid transition from '{from_status}' to '{to_status}'"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class CacheEntryStateMachine:
    """State machine for cache entry status transitions.

    Allowed transitions:
    - fresh → optimistic (local patch)
    - fresh → stale (invalidate)
    - fresh → refetching (forced refetch)
    - optimistic → optimistic (another patch)
    - optimistic → stale
    - optimistic → refetching
    - stale → optimistic
    - stale → refetching
    - refetching → fresh (fetch succeeded)
    - refetching → stale (fetch failed, data kept)

    New entries start stale with no data.
    """

    VALID_TRANSITIONS: dict[str, list[str]] = {
        CacheEntryStatus.FRESH: [
            CacheEntryStatus.OPTIMISTIC,
            CacheEntryStatus.STALE,
            CacheEntryStatus.REFETCHING,
        ],
        CacheEntryStatus.OPTIMISTIC: [
            CacheEntryStatus.OPTIMISTIC,
            CacheEntryStatus.STALE,
            CacheEntryStatus.REFETCHING,
        ],
        CacheEntryStatus.STALE: [
            CacheEntryStatus.OPTIMISTIC,
            CacheEntryStatus.REFETCHING,
        ],
        CacheEntryStatus.REFETCHING: [
            CacheEntryStatus.FRESH,
            CacheEntryStatus.STALE,
        ],
    }

    # Statuses whose data can be served without a network call
    SERVABLE = {
        CacheEntryStatus.FRESH,
        CacheEntryStatus.OPTIMISTIC,
    }

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

    @classmethod
    def can_serve(cls, status: str) -> bool:
        """Check if cached data may be returned without refetching."""
        return status in cls.SERVABLE
