"""Sidebar badge counts."""

from typing import Any

from fastapi import APIRouter
from sqlalchemy import func, select

from fleet_console.server.dependencies import CurrentUser, DbSession
from fleet_console.server.models import Car, Employee
from fleet_console.server.routes.payroll import count_unpaid_runs

router = APIRouter(tags=["badges"])


@router.get("/api/sidebar-badges")
async def sidebar_badges(db: DbSession, user: CurrentUser) -> dict[str, Any]:
    pending = await db.scalar(
        select(func.count()).select_from(Employee).where(Employee.employee_status == "pending")
    )
    active_cars = await db.scalar(
        select(func.count()).select_from(Car).where(Car.is_active == 1)
    )
    return {
        "success": True,
        "data": {
            "pendingEmployees": pending or 0,
            "activeCars": active_cars or 0,
            "unpaidPayroll": await count_unpaid_runs(db),
        },
    }
