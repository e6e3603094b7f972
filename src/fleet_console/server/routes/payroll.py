"""Payroll status endpoints."""

from typing import Any

from fastapi import APIRouter
from sqlalchemy import func, select

from fleet_console.server.dependencies import AdminUser, DbSession
from fleet_console.server.models import PayrollRun

router = APIRouter(tags=["payroll"])


async def count_unpaid_runs(db: DbSession) -> int:
    total = await db.scalar(
        select(func.count()).select_from(PayrollRun).where(PayrollRun.status != "paid")
    )
    return total or 0


@router.get("/api/payroll/unpaid-count")
async def unpaid_count(db: DbSession, user: AdminUser) -> dict[str, Any]:
    """Number of payroll runs not yet paid; pay edits wait until it is 0."""
    return {"success": True, "count": await count_unpaid_runs(db)}
