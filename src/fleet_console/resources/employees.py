"""Employee resource: registry list, onboarding, approval, documents."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Mapping

from fleet_console.client.mutations import UploadFile
from fleet_console.client.query_keys import QueryKey
from fleet_console.resources.badges import SIDEBAR_BADGES_KEY
from fleet_console.resources.base import ResourceClient
from fleet_console.resources.schema import Column, ResourceSchema

logger = logging.getLogger(__name__)

EMPLOYEES_PATH = "/api/employees"
EMPLOYEE_IMPORT_PATH = "/api/admin/employees/import"

EMPLOYEES_SCHEMA = ResourceSchema(
    name="employee",
    path=EMPLOYEES_PATH,
    id_field="employee_aid",
    statuses=("pending", "active", "inactive"),
    columns=(
        Column("employee_last_name", "Name"),
        Column("employee_email", "Email"),
        Column("employee_job_pay_job_title_name", "Job Title"),
        Column("employee_job_pay_department_name", "Department"),
        Column("employee_status", "Status"),
        Column("employee_job_pay_salary_rate", "Rate", admin_only=True),
    ),
    preference_key="employees_limit",
    update_method="PUT",
    related=(SIDEBAR_BADGES_KEY,),
)


class EmployeeSection(str, Enum):
    """Profile sections fetched only when their tab is opened."""

    RATE_HISTORY = "rate-history"
    EMPLOYMENT_HISTORY = "employment-history"
    EARNINGS = "earnings"
    DEDUCTIONS = "deductions"
    PAYSLIPS = "payslips"


class DocumentAction(str, Enum):
    SAVE = "save"
    ARCHIVE = "archive"


# Onboarding form fields in the order the backend expects them
EMPLOYEE_CREATE_FIELDS = (
    "firstName",
    "middleName",
    "lastName",
    "personalEmail",
    "workEmail",
    "mobileNumber",
    "telephone",
    "ssnEin",
    "shirtSize",
    "street",
    "city",
    "state",
    "country",
    "zipCode",
    "departmentName",
    "jobTitleName",
)


def employee_create_fields(values: Mapping[str, Any]) -> dict[str, Any]:
    """Complete an onboarding form.

    Trims text values and falls back to the personal email when no work
    email is given.
    """
    fields: dict[str, Any] = {}
    for name in EMPLOYEE_CREATE_FIELDS:
        value = values.get(name)
        fields[name] = value.strip() if isinstance(value, str) else value
    if not fields.get("workEmail"):
        fields["workEmail"] = fields.get("personalEmail")
    return fields


class EmployeesResource(ResourceClient):
    """Employee registry operations."""

    async def create_employee(self, values: Mapping[str, Any]) -> Any:
        return await self.create(employee_create_fields(values))

    async def approve(self, employee_aid: int) -> Any:
        """Move a pending employee to active."""
        return await self.transition(
            employee_aid,
            "status",
            fields={"status": ""},
            method="PATCH",
            fallback="Failed to approve employee",
        )

    async def offboard(self, employee_aid: int) -> Any:
        return await self.transition(
            employee_aid, "offboard", fallback="Failed to offboard employee"
        )

    async def upload_documents(
        self,
        employee_aid: int,
        photo: UploadFile | None = None,
        action: DocumentAction | str = DocumentAction.SAVE,
    ) -> Any:
        """Save or archive the employee photo.

        The profile and its documents section are refreshed afterwards.
        """
        action_value = DocumentAction(action).value
        record = await self.executor.post(
            f"{self.schema.record_path(employee_aid)}/upload-documents",
            fields={"action": action_value},
            files={"employee_photo": photo} if photo is not None else None,
            multipart=True,
            fallback="Failed to upload documents",
        )
        self.invalidator.invalidate([self.detail_key(employee_aid)])
        return record

    async def import_csv(self, content: bytes, filename: str = "employees.csv") -> dict[str, Any]:
        """Bulk-create employees from a CSV file.

        Returns the import summary with ``total``, ``successful`` and
        ``failed`` counts.
        """
        summary = await self.executor.post(
            EMPLOYEE_IMPORT_PATH,
            files={"file": UploadFile(filename, content, "text/csv")},
            fallback="Failed to import employees",
        )
        logger.info("Employee import finished: %s", summary)
        self.invalidator.on_create_success(self.schema.family, self.schema.related)
        return summary if isinstance(summary, dict) else {}

    # ------------------------------------------------------------------
    # Profile sections
    # ------------------------------------------------------------------

    def section_key(self, employee_aid: int, section: EmployeeSection | str) -> QueryKey:
        return (self.schema.path, employee_aid, EmployeeSection(section).value)

    async def get_section(
        self, employee_aid: int, section: EmployeeSection | str
    ) -> list[dict[str, Any]]:
        """Fetch (or read from cache) one profile section."""
        section = EmployeeSection(section)
        path = f"{self.schema.record_path(employee_aid)}/{section.value}"
        fallback = f"Failed to fetch {section.value.replace('-', ' ')}"

        async def query_fn() -> list[dict[str, Any]]:
            envelope = await self.fetcher.fetch_collection(path, fallback=fallback)
            return envelope.data

        return await self.cache.fetch_query(self.section_key(employee_aid, section), query_fn)
