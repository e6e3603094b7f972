"""Declarative resource schemas.

A schema says everything the generic list/mutation machinery needs to know
about one resource: where it lives, how records are identified, which
statuses can be filtered on, which columns are shown (and to whom), how
edits are encoded and which other query families a mutation touches.
Variants of one resource (for example the two car status vocabularies) are
separate schemas over the same endpoint.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from fleet_console.client.query_keys import ALL_STATUSES, QueryKey


@dataclass(frozen=True)
class Column:
    """One list column."""

    field: str
    label: str
    admin_only: bool = False


@dataclass(frozen=True)
class ResourceSchema:
    """
    Resource configuration.

    Attributes:
        name: Short resource name used in messages ("car", "employee").
        path: API path of the collection, also the query family prefix.
        id_field: Record field holding the identity.
        statuses: Closed set of status filter values (besides "all").
        columns: Visible list columns in display order.
        preference_key: Local preference key for the page size.
        update_method: HTTP method of record updates.
        multipart: If True, creates/updates are sent as multipart form data
            even without files.
        related: Other query families to invalidate after any mutation.
    """

    name: str
    path: str
    id_field: str = "id"
    statuses: tuple[str, ...] = ()
    columns: tuple[Column, ...] = ()
    preference_key: str = ""
    update_method: str = "PATCH"
    multipart: bool = False
    related: tuple[QueryKey, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        """Validate configuration."""
        if not self.path.startswith("/"):
            raise ValueError("path must start with '/'")
        if self.update_method not in {"PATCH", "PUT"}:
            raise ValueError("update_method must be PATCH or PUT")
        if ALL_STATUSES in self.statuses:
            raise ValueError(f"'{ALL_STATUSES}' is implicit and must not be listed")

    @property
    def family(self) -> QueryKey:
        """Prefix shared by every query key of this resource."""
        return (self.path,)

    @property
    def plural(self) -> str:
        return f"{self.name}s"

    @property
    def fetch_fallback(self) -> str:
        return f"Failed to fetch {self.plural}"

    def mutation_fallback(self, action: str) -> str:
        """Fallback message for a failed ``action`` ("create", "update", ...)."""
        return f"Failed to {action} {self.name}"

    def record_path(self, record_id: object) -> str:
        return f"{self.path}/{record_id}"

    def validate_status(self, status_filter: str) -> None:
        """Raise ValueError for a status outside the schema's vocabulary."""
        if status_filter != ALL_STATUSES and status_filter not in self.statuses:
            allowed = ", ".join((ALL_STATUSES, *self.statuses))
            raise ValueError(f"Unknown {self.name} status '{status_filter}' (expected one of: {allowed})")

    def visible_columns(self, is_admin: bool) -> list[Column]:
        """Columns shown to the current user."""
        return [c for c in self.columns if is_admin or not c.admin_only]
