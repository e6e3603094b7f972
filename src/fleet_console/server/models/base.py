"""Declarative base and column mixins shared by the backend models."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    type_annotation_map = {
        datetime: DateTime(timezone=True),
    }

    def to_dict(self, exclude: Iterable[str] = ()) -> dict[str, Any]:
        """Row as a dict keyed by column name.

        HR tables name their columns after the wire fields, so this is
        their API shape as-is.
        """
        skipped = set(exclude)
        return {
            c.name: getattr(self, c.name)
            for c in self.__table__.columns
            if c.name not in skipped
        }


class TimestampMixin:
    """Row creation time, set by the database."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )


class UpdatedAtMixin:
    """Last modification time, refreshed on every UPDATE."""

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
