"""Generic list/cache/mutation client shared by every console resource."""

from fleet_console.client.cache import CacheEntry, QueryCache
from fleet_console.client.cache_state import (
    CacheEntryStateMachine,
    CacheEntryStatus,
    InvalidTransitionError,
)
from fleet_console.client.envelope import ListEnvelope, Pagination
from fleet_console.client.errors import (
    ConsoleError,
    FetchError,
    MutationError,
    NetworkError,
    ServerError,
    ValidationError,
)
from fleet_console.client.fetcher import RemoteFetcher
from fleet_console.client.invalidator import CacheInvalidator
from fleet_console.client.mutations import MutationExecutor, UploadFile
from fleet_console.client.observer import QueryObserver, QueryResult
from fleet_console.client.pagination import PaginationController
from fleet_console.client.preferences import (
    JsonFilePreferences,
    MemoryPreferences,
    PreferencesStore,
)
from fleet_console.client.query_keys import FilterState, build_query_key, build_query_params

__all__ = [
    "CacheEntry",
    "CacheEntryStateMachine",
    "CacheEntryStatus",
    "CacheInvalidator",
    "ConsoleError",
    "FetchError",
    "FilterState",
    "InvalidTransitionError",
    "JsonFilePreferences",
    "ListEnvelope",
    "MemoryPreferences",
    "MutationError",
    "MutationExecutor",
    "NetworkError",
    "Pagination",
    "PaginationController",
    "PreferencesStore",
    "QueryCache",
    "QueryObserver",
    "QueryResult",
    "RemoteFetcher",
    "ServerError",
    "UploadFile",
    "ValidationError",
    "build_query_key",
    "build_query_params",
]
