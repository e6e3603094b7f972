"""Typed read-only views over backend records.

Records travel through the cache as plain dicts; these models are used
where the console needs individual fields.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class OffboardReason(str, Enum):
    """Why a car left the fleet."""

    SOLD = "sold"
    DAMAGED = "damaged"
    END_LEASE = "end_lease"
    OTHER = "other"


class SlackFormType(str, Enum):
    """Notification categories that can be routed to a Slack channel."""

    LYC = "lyc"
    CAR_ONBOARDING = "car_onboarding"
    CAR_OFFBOARDING = "car_offboarding"
    EMPLOYEE_ONBOARDING = "employee_onboarding"
    EXPENSE_INCOME = "expense_income"
    EXPENSE_DIRECT_DELIVERY = "expense_direct_delivery"
    EXPENSE_COGS = "expense_cogs"
    EXPENSE_REIMBURSED_BILLS = "expense_reimbursed_bills"

    @property
    def label(self) -> str:
        return SLACK_FORM_TYPE_LABELS[self]


SLACK_FORM_TYPE_LABELS: dict[SlackFormType, str] = {
    SlackFormType.LYC: "Client Onboarding Form (LYC)",
    SlackFormType.CAR_ONBOARDING: "Car On-boarding",
    SlackFormType.CAR_OFFBOARDING: "Car Off-boarding",
    SlackFormType.EMPLOYEE_ONBOARDING: "Employee Onboarding",
    SlackFormType.EXPENSE_INCOME: "Income",
    SlackFormType.EXPENSE_DIRECT_DELIVERY: "Expenses - Direct Delivery",
    SlackFormType.EXPENSE_COGS: "Expenses - COGS",
    SlackFormType.EXPENSE_REIMBURSED_BILLS: "Reimbursed & Non-Reimbursed Bills",
}


class SessionUser(BaseModel):
    """The signed-in user as reported by ``/api/auth/me``."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: int | None = None
    email: str | None = None
    is_admin: bool = Field(default=False, alias="isAdmin")
    is_client: bool = Field(default=False, alias="isClient")
    is_employee: bool = Field(default=False, alias="isEmployee")


class CarOwner(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    first_name: str = Field(default="", alias="firstName")
    last_name: str = Field(default="", alias="lastName")
    email: str | None = None
    phone: str | None = None


class Car(BaseModel):
    """Car list/detail record."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: int
    vin: str
    make_model: str = Field(default="", alias="makeModel")
    make: str | None = None
    model: str | None = None
    year: int | None = None
    color: str | None = None
    mileage: int | None = None
    license_plate: str | None = Field(default=None, alias="licensePlate")
    status: str
    offboard_reason: OffboardReason | None = Field(default=None, alias="offboardReason")
    offboard_note: str | None = Field(default=None, alias="offboardNote")
    offboard_at: date | None = Field(default=None, alias="offboardAt")
    owner: CarOwner | None = None

    @property
    def is_offboarded(self) -> bool:
        return self.status in {"INACTIVE", "off_fleet"}


class Employee(BaseModel):
    """Employee registry record (subset of the ``employee_*`` fields)."""

    model_config = ConfigDict(extra="allow")

    employee_aid: int
    employee_first_name: str = ""
    employee_last_name: str = ""
    employee_email: str | None = None
    employee_status: str = "pending"
    employee_is_active: int = 0
    employee_job_pay_job_title_name: str | None = None
    employee_job_pay_department_name: str | None = None
    employee_job_pay_salary_rate: Decimal | None = None
    employee_job_pay_separated: date | None = None

    @property
    def full_name(self) -> str:
        """Registry display name ("Last, First")."""
        return f"{self.employee_last_name}, {self.employee_first_name}"

    @property
    def is_pending(self) -> bool:
        return self.employee_status == "pending"

    @property
    def is_offboarded(self) -> bool:
        return self.employee_status in {"offboarded", "separated"}

    @property
    def is_active(self) -> bool:
        return not self.is_pending and not self.is_offboarded and self.employee_is_active == 1


class RateHistoryEntry(BaseModel):
    """One row of an employee's rate history."""

    model_config = ConfigDict(extra="allow")

    rate_history_aid: int
    rate_history_amount: Decimal
    rate_history_pay_type: str = "hourly"
    rate_history_date: date | None = None
    rate_history_effective_start: date | None = None
    rate_history_effective_end: date | None = None
    rate_history_created: datetime | None = None

    @property
    def is_current(self) -> bool:
        return self.rate_history_effective_end is None

    @property
    def effective_start(self) -> date | None:
        return self.rate_history_effective_start or self.rate_history_date


class SlackChannelConfig(BaseModel):
    """Notification destination for one form type."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: int | None = None
    form_type: SlackFormType = Field(alias="formType")
    channel_id: str = Field(default="", alias="channelId")
    channel_name: str | None = Field(default=None, alias="channelName")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")


class SlackSettings(BaseModel):
    """Response of ``GET /api/settings/slack-channels``."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    success: bool = True
    data: list[SlackChannelConfig] = Field(default_factory=list)
    slack_bot_token_configured: bool = Field(default=False, alias="slackBotTokenConfigured")
    slack_bot_token_updated_at: datetime | None = Field(default=None, alias="slackBotTokenUpdatedAt")

    def channel_for(self, form_type: SlackFormType) -> SlackChannelConfig | None:
        for config in self.data:
            if config.form_type == form_type:
                return config
        return None


def as_records(model_cls: type[BaseModel], rows: list[dict[str, Any]]) -> list[Any]:
    """Validate plain rows into typed views."""
    return [model_cls.model_validate(row) for row in rows]
