"""Pydantic schemas for API request/response models."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from fleet_console.resources.records import OffboardReason, SlackFormType


# ============================================================================
# Session
# ============================================================================


class SessionUserResponse(BaseModel):
    """Signed-in user."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    email: str
    is_admin: bool = Field(serialization_alias="isAdmin")
    is_client: bool = Field(serialization_alias="isClient")
    is_employee: bool = Field(serialization_alias="isEmployee")


class MeResponse(BaseModel):
    user: SessionUserResponse | None = None


# ============================================================================
# Cars
# ============================================================================


class CarOffboardRequest(BaseModel):
    """Schema for taking a car out of the fleet."""

    model_config = ConfigDict(populate_by_name=True)

    offboard_reason: OffboardReason = Field(alias="offboardReason")
    offboard_note: str = Field(default="", alias="offboardNote")
    offboard_at: date | None = Field(default=None, alias="offboardAt")

    @field_validator("offboard_at", mode="before")
    @classmethod
    def empty_date_is_none(cls, value: object) -> object:
        return value or None


# ============================================================================
# Employees
# ============================================================================


class EmployeeCreate(BaseModel):
    """Onboarding form (camelCase)."""

    model_config = ConfigDict(populate_by_name=True)

    first_name: str = Field(alias="firstName", min_length=1)
    middle_name: str | None = Field(default=None, alias="middleName")
    last_name: str = Field(alias="lastName", min_length=1)
    personal_email: str | None = Field(default=None, alias="personalEmail")
    work_email: str | None = Field(default=None, alias="workEmail")
    mobile_number: str | None = Field(default=None, alias="mobileNumber")
    telephone: str | None = None
    ssn_ein: str | None = Field(default=None, alias="ssnEin")
    shirt_size: str | None = Field(default=None, alias="shirtSize")
    street: str | None = None
    city: str | None = None
    state: str | None = None
    country: str | None = None
    zip_code: str | None = Field(default=None, alias="zipCode")
    department_name: str | None = Field(default=None, alias="departmentName")
    job_title_name: str | None = Field(default=None, alias="jobTitleName")

    @field_validator("*", mode="before")
    @classmethod
    def strip_text(cls, value: object) -> object:
        if isinstance(value, str):
            value = value.strip()
        return value

    def to_columns(self) -> dict[str, str | None]:
        """Employee column values; empty strings are stored as NULL."""
        columns = {
            "employee_first_name": self.first_name,
            "employee_middle_name": self.middle_name,
            "employee_last_name": self.last_name,
            "employee_email": self.personal_email,
            "employee_work_email": self.work_email or self.personal_email,
            "employee_mobile_number": self.mobile_number,
            "employee_telephone": self.telephone,
            "employee_ssn_ein": self.ssn_ein,
            "employee_shirt_size": self.shirt_size,
            "employee_street": self.street,
            "employee_city": self.city,
            "employee_state": self.state,
            "employee_country": self.country,
            "employee_zip_code": self.zip_code,
            "employee_job_pay_department_name": self.department_name,
            "employee_job_pay_job_title_name": self.job_title_name,
        }
        return {key: (value or None) for key, value in columns.items()}


# camelCase names accepted on update alongside the column names
EMPLOYEE_FIELD_ALIASES: dict[str, str] = {
    "firstName": "employee_first_name",
    "middleName": "employee_middle_name",
    "lastName": "employee_last_name",
    "personalEmail": "employee_email",
    "workEmail": "employee_work_email",
    "mobileNumber": "employee_mobile_number",
    "telephone": "employee_telephone",
    "ssnEin": "employee_ssn_ein",
    "shirtSize": "employee_shirt_size",
    "street": "employee_street",
    "city": "employee_city",
    "state": "employee_state",
    "country": "employee_country",
    "zipCode": "employee_zip_code",
    "departmentName": "employee_job_pay_department_name",
    "jobTitleName": "employee_job_pay_job_title_name",
}


class EmployeeStatusUpdate(BaseModel):
    """Empty status means "approve"."""

    status: str = ""


class RateHistoryCreate(BaseModel):
    """Schema for adding a rate."""

    rate_history_amount: Decimal = Field(gt=0)
    rate_history_date: date
    rate_history_pay_type: Literal["hourly", "salary"] = "hourly"


class ImportSummary(BaseModel):
    total: int = 0
    successful: int = 0
    failed: int = 0
    errors: list[str] = Field(default_factory=list)


# ============================================================================
# Settings
# ============================================================================


class SlackChannelUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    form_type: SlackFormType = Field(alias="formType")
    channel_id: str = Field(alias="channelId")
    channel_name: str | None = Field(default=None, alias="channelName")

    @field_validator("channel_id")
    @classmethod
    def channel_id_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Channel ID is required")
        return value


class SlackBotTokenUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    bot_token: str = Field(alias="botToken")

    @field_validator("bot_token")
    @classmethod
    def token_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Bot token is required")
        return value


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    timestamp: datetime
    database: str
