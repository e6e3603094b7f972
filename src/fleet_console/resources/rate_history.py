"""Rate history: list, add with auto-close, and the pay-edit gate."""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any

from fleet_console.client.cache import QueryCache
from fleet_console.client.fetcher import RemoteFetcher
from fleet_console.client.invalidator import CacheInvalidator
from fleet_console.client.mutations import MutationExecutor
from fleet_console.client.query_keys import QueryKey
from fleet_console.resources.employees import EMPLOYEES_PATH, EmployeeSection
from fleet_console.resources.records import RateHistoryEntry

logger = logging.getLogger(__name__)

UNPAID_PAYROLL_PATH = "/api/payroll/unpaid-count"
UNPAID_PAYROLL_KEY: QueryKey = (UNPAID_PAYROLL_PATH,)


class PayType(str, Enum):
    HOURLY = "hourly"
    SALARY = "salary"


class PayEditControl(str, Enum):
    """What the pay/rate panel shows instead of (or as) its edit button."""

    EDIT = "edit"
    ONGOING_PAYROLL = "On-going payroll"


def current_rate(entries: list[dict[str, Any]]) -> RateHistoryEntry | None:
    """The open-ended entry, if any."""
    for row in entries:
        entry = RateHistoryEntry.model_validate(row)
        if entry.is_current:
            return entry
    return None


class RateHistoryService:
    """Rate history of one employee at a time.

    The previous rate is closed by the backend; the client only submits the
    new amount, start date and pay type, then refetches.
    """

    def __init__(
        self,
        fetcher: RemoteFetcher,
        executor: MutationExecutor,
        cache: QueryCache,
        invalidator: CacheInvalidator,
    ):
        self.fetcher = fetcher
        self.executor = executor
        self.cache = cache
        self.invalidator = invalidator

    @staticmethod
    def history_key(employee_aid: int) -> QueryKey:
        return (EMPLOYEES_PATH, employee_aid, EmployeeSection.RATE_HISTORY.value)

    @staticmethod
    def history_path(employee_aid: int) -> str:
        return f"{EMPLOYEES_PATH}/{employee_aid}/{EmployeeSection.RATE_HISTORY.value}"

    async def list(self, employee_aid: int) -> list[dict[str, Any]]:
        async def query_fn() -> list[dict[str, Any]]:
            envelope = await self.fetcher.fetch_collection(
                self.history_path(employee_aid), fallback="Failed to fetch rate history"
            )
            return envelope.data

        return await self.cache.fetch_query(self.history_key(employee_aid), query_fn)

    async def add_rate(
        self,
        employee_aid: int,
        amount: Decimal | float | str,
        effective_date: date,
        pay_type: PayType | str = PayType.HOURLY,
    ) -> Any:
        """Add a new current rate starting at ``effective_date``."""
        record = await self.executor.post(
            self.history_path(employee_aid),
            fields={
                "rate_history_amount": str(amount),
                "rate_history_date": effective_date.isoformat(),
                "rate_history_pay_type": PayType(pay_type).value,
            },
            fallback="Failed to add rate",
        )
        logger.info("Added rate for employee %s from %s", employee_aid, effective_date)
        self.invalidator.invalidate(
            [self.history_key(employee_aid), (EMPLOYEES_PATH, employee_aid), (EMPLOYEES_PATH,)]
        )
        return record

    async def unpaid_payroll_count(self) -> int:
        """Number of payroll runs not yet paid."""

        async def query_fn() -> int:
            body = await self.fetcher.get_json(
                UNPAID_PAYROLL_PATH, fallback="Failed to fetch payroll status"
            )
            count = body.get("count", 0) if isinstance(body, dict) else 0
            return int(count or 0)

        return await self.cache.fetch_query(UNPAID_PAYROLL_KEY, query_fn)

    async def pay_edit_control(self) -> PayEditControl:
        """Edit is offered only while no payroll is outstanding."""
        if await self.unpaid_payroll_count() == 0:
            return PayEditControl.EDIT
        return PayEditControl.ONGOING_PAYROLL
