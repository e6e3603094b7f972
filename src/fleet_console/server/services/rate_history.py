"""Rate history auto-close."""

from __future__ import annotations

import logging
from datetime import date, timedelta
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fleet_console.server.models import Employee, RateHistory

logger = logging.getLogger(__name__)


class RateHistoryError(Exception):
    """Raised when a new rate cannot be added."""


class RateHistoryService:
    """Keeps at most one open-ended rate per employee.

    Adding a rate closes the current one on the day before the new rate
    starts.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_for(self, employee_aid: int) -> list[RateHistory]:
        result = await self.db.execute(
            select(RateHistory)
            .where(RateHistory.rate_history_employee_id == employee_aid)
            .order_by(
                RateHistory.rate_history_effective_start.desc(),
                RateHistory.rate_history_aid.desc(),
            )
        )
        return list(result.scalars().all())

    async def current(self, employee_aid: int) -> RateHistory | None:
        result = await self.db.execute(
            select(RateHistory).where(
                RateHistory.rate_history_employee_id == employee_aid,
                RateHistory.rate_history_effective_end.is_(None),
            )
        )
        return result.scalars().first()

    async def add_rate(
        self,
        employee: Employee,
        amount: Decimal,
        start: date,
        pay_type: str,
    ) -> RateHistory:
        """Close the current rate and open a new one from ``start``.

        Raises:
            RateHistoryError: ``start`` is not after the current rate's start.
        """
        current = await self.current(employee.employee_aid)
        if current is not None:
            if start <= current.rate_history_effective_start:
                raise RateHistoryError(
                    "Rate start date must be after the current rate's start date "
                    f"({current.rate_history_effective_start.isoformat()})"
                )
            current.rate_history_effective_end = start - timedelta(days=1)

        entry = RateHistory(
            rate_history_employee_id=employee.employee_aid,
            rate_history_amount=amount,
            rate_history_pay_type=pay_type,
            rate_history_date=start,
            rate_history_effective_start=start,
            rate_history_effective_end=None,
        )
        self.db.add(entry)

        employee.employee_job_pay_salary_rate = amount
        employee.employee_job_pay_pay_type = pay_type
        await self.db.flush()
        logger.info(
            "Employee %s rate set to %s (%s) from %s",
            employee.employee_aid,
            amount,
            pay_type,
            start,
        )
        return entry
