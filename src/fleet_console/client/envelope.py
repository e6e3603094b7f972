"""Response envelope shared by every list endpoint."""

from __future__ import annotations

import logging
import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

logger = logging.getLogger(__name__)


class Pagination(BaseModel):
    """Pagination block of a list envelope."""

    model_config = ConfigDict(populate_by_name=True)

    page: int
    limit: int
    total: int
    total_pages: int = Field(alias="totalPages")

    @classmethod
    def for_window(cls, page: int, limit: int, total: int) -> Pagination:
        """Build the block for one page window over ``total`` records."""
        return cls(
            page=page,
            limit=limit,
            total=total,
            total_pages=math.ceil(total / limit) if limit > 0 else 0,
        )

    @property
    def start_item(self) -> int:
        """One-based index of the first record on this page (0 when empty)."""
        if self.total == 0:
            return 0
        return (self.page - 1) * self.limit + 1

    @property
    def end_item(self) -> int:
        """One-based index of the last record on this page."""
        return min(self.page * self.limit, self.total)

    def to_wire(self) -> dict[str, int]:
        """Serialize with the backend's camelCase names."""
        return self.model_dump(by_alias=True)


class ListEnvelope(BaseModel):
    """``{ success, data, pagination? }`` wrapper."""

    model_config = ConfigDict(extra="allow")

    success: bool = True
    data: list[dict[str, Any]] = Field(default_factory=list)
    pagination: Pagination | None = None

    @model_validator(mode="after")
    def check_window(self) -> ListEnvelope:
        """Log pagination blocks that disagree with the page they describe.

        The backend owns the numbers, so a mismatch is reported and kept.
        """
        pagination = self.pagination
        if pagination is None or pagination.limit <= 0:
            return self
        if len(self.data) > pagination.limit:
            logger.warning(
                "Envelope holds %d records for a limit of %d",
                len(self.data),
                pagination.limit,
            )
        expected = math.ceil(pagination.total / pagination.limit)
        if pagination.total_pages != expected:
            logger.warning(
                "Envelope reports %d pages for %d records at %d per page, expected %d",
                pagination.total_pages,
                pagination.total,
                pagination.limit,
                expected,
            )
        return self

    def replace_record(
        self, id_field: str, record: dict[str, Any]
    ) -> ListEnvelope | None:
        """Return a copy with ``record`` swapped in, or None if absent."""
        record_id = record.get(id_field)
        if record_id is None:
            return None
        found = False
        rows: list[dict[str, Any]] = []
        for row in self.data:
            if row.get(id_field) == record_id:
                rows.append({**row, **record})
                found = True
            else:
                rows.append(row)
        if not found:
            return None
        return self.model_copy(update={"data": rows})

    def to_wire(self) -> dict[str, Any]:
        """Serialize with the backend's field names."""
        return self.model_dump(by_alias=True, exclude_none=True)


def paginate_locally(
    records: list[dict[str, Any]], page: int, limit: int
) -> ListEnvelope:
    """Slice an already filtered record list into one envelope page."""
    start = (page - 1) * limit
    return ListEnvelope(
        success=True,
        data=records[start : start + limit],
        pagination=Pagination.for_window(page, limit, len(records)),
    )
