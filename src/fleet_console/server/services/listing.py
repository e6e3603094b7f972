"""Server-side pagination of list queries."""

from __future__ import annotations

import math
from typing import Any, Sequence

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession


def pagination_meta(page: int, limit: int, total: int) -> dict[str, int]:
    """Pagination block of a list envelope."""
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "totalPages": math.ceil(total / limit) if limit > 0 else 0,
    }


async def paginate(
    db: AsyncSession,
    stmt: Select[Any],
    page: int,
    limit: int,
) -> tuple[Sequence[Any], dict[str, int]]:
    """Run ``stmt`` for one page and count all matching rows.

    A page past the end yields no rows; the caller is expected to clamp.
    """
    total = await db.scalar(select(func.count()).select_from(stmt.order_by(None).subquery()))
    result = await db.execute(stmt.offset((page - 1) * limit).limit(limit))
    return result.scalars().all(), pagination_meta(page, limit, total or 0)


def like_pattern(search: str) -> str:
    """Case-insensitive substring pattern, with LIKE wildcards escaped."""
    escaped = search.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"
