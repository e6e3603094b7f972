"""Tests for the cache entry state machine."""

import pytest

from fleet_console.client.cache_state import (
    CacheEntryStateMachine,
    CacheEntryStatus,
    InvalidTransitionError,
)


class TestCacheEntryStateMachine:
    """Test state machine transitions."""

    def test_valid_transitions(self):
        """Test that valid transitions are allowed."""
        # fresh → optimistic (patch)
        assert CacheEntryStateMachine.can_transition("fresh", "optimistic") is True

        # optimistic → stale (invalidate)
        assert CacheEntryStateMachine.can_transition("optimistic", "stale") is True

        # stale → refetching
        assert CacheEntryStateMachine.can_transition("stale", "refetching") is True

        # refetching → fresh (reconciliation)
        assert CacheEntryStateMachine.can_transition("refetching", "fresh") is True

        # refetching → stale (failed refetch)
        assert CacheEntryStateMachine.can_transition("refetching", "stale") is True

    def test_invalid_transitions(self):
        """Test that invalid transitions are blocked."""
        # Data only becomes fresh through a fetch
        assert CacheEntryStateMachine.can_transition("stale", "fresh") is False
        assert CacheEntryStateMachine.can_transition("optimistic", "fresh") is False

        # A running fetch is not patched into optimistic
        assert CacheEntryStateMachine.can_transition("refetching", "optimistic") is False
        assert CacheEntryStateMachine.can_transition("refetching", "refetching") is False

    def test_validate_transition_raises(self):
        with pytest.raises(InvalidTransitionError) as exc_info:
            CacheEntryStateMachine.validate_transition("stale", "fresh")

        assert exc_info.value.from_status == "stale"
        assert exc_info.value.to_status == "fresh"

    def test_can_serve(self):
        """Only fresh and optimistic data is served without a fetch."""
        assert CacheEntryStateMachine.can_serve(CacheEntryStatus.FRESH)
        assert CacheEntryStateMachine.can_serve(CacheEntryStatus.OPTIMISTIC)
        assert not CacheEntryStateMachine.can_serve(CacheEntryStatus.STALE)
        assert not CacheEntryStateMachine.can_serve(CacheEntryStatus.REFETCHING)
