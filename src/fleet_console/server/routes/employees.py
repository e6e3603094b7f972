"""Employee API endpoints."""

import csv
import io
import logging
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Annotated, Any, Callable

from fastapi import APIRouter, File, Form, HTTPException, Path, Query, UploadFile, status
from pydantic import ValidationError
from sqlalchemy import and_, not_, or_, select, update

from fleet_console.server.dependencies import AdminUser, DbSession
from fleet_console.server.models import (
    Employee,
    EmployeeDocument,
    EmploymentHistory,
    PayItem,
    Payslip,
)
from fleet_console.server.schemas import (
    EMPLOYEE_FIELD_ALIASES,
    EmployeeCreate,
    EmployeeStatusUpdate,
    ImportSummary,
    RateHistoryCreate,
)
from fleet_console.server.services.lifecycle import (
    EmployeeStateMachine,
    EmployeeStatus,
    InvalidTransitionError,
)
from fleet_console.server.services.listing import like_pattern, paginate
from fleet_console.server.services.rate_history import RateHistoryError, RateHistoryService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["employees"])

# Columns an update may not touch directly
_PROTECTED_COLUMNS = {
    "employee_aid",
    "employee_status",
    "employee_is_active",
    "employee_created",
    "employee_photo",
}
_REQUIRED_COLUMNS = {
    "employee_first_name": "First name is required",
    "employee_last_name": "Last name is required",
}
_UPDATABLE_COLUMNS = {c.name for c in Employee.__table__.columns} - _PROTECTED_COLUMNS
_CONVERTERS: dict[str, Callable[[str], Any]] = {
    "employee_job_pay_hired": lambda v: date.fromisoformat(v[:10]),
    "employee_job_pay_separated": lambda v: date.fromisoformat(v[:10]),
    "employee_job_pay_salary_rate": Decimal,
}


async def load_employee(db: DbSession, employee_aid: int) -> Employee:
    employee = await db.get(Employee, employee_aid)
    if employee is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Employee not found",
        )
    return employee


def add_history(db: DbSession, employee_aid: int, event: str, note: str | None = None) -> None:
    db.add(
        EmploymentHistory(
            employee_aid=employee_aid,
            event=event,
            event_date=date.today(),
            note=note,
        )
    )


def status_condition(status_filter: str) -> Any:
    """WHERE clause of one employee status filter value."""
    if status_filter == EmployeeStatus.PENDING:
        return Employee.employee_status == EmployeeStatus.PENDING
    if status_filter == EmployeeStatus.ACTIVE:
        return and_(
            Employee.employee_is_active == 1,
            Employee.employee_status.not_in(
                [EmployeeStatus.PENDING, EmployeeStatus.OFFBOARDED]
            ),
        )
    if status_filter == "inactive":
        return and_(
            Employee.employee_status != EmployeeStatus.PENDING,
            not_(Employee.employee_is_active == 1),
        )
    raise HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=f"Invalid status '{status_filter}'",
    )


# ============================================================================
# Registry
# ============================================================================


@router.get("/api/employees")
async def list_employees(
    db: DbSession,
    user: AdminUser,
    status_filter: Annotated[str | None, Query(alias="status")] = None,
    search: str | None = None,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1)] = 10,
) -> dict[str, Any]:
    """List employees, newest first."""
    stmt = select(Employee).order_by(Employee.employee_aid.desc())
    if status_filter and status_filter != "all":
        stmt = stmt.where(status_condition(status_filter))
    needle = (search or "").strip()
    if needle:
        pattern = like_pattern(needle)
        stmt = stmt.where(
            or_(
                Employee.employee_first_name.ilike(pattern, escape="\\"),
                Employee.employee_last_name.ilike(pattern, escape="\\"),
                Employee.employee_email.ilike(pattern, escape="\\"),
                Employee.employee_work_email.ilike(pattern, escape="\\"),
                Employee.employee_job_pay_job_title_name.ilike(pattern, escape="\\"),
            )
        )

    employees, pagination = await paginate(db, stmt, page, limit)
    return {
        "success": True,
        "data": [e.to_dict() for e in employees],
        "pagination": pagination,
    }


@router.post("/api/employees", status_code=status.HTTP_201_CREATED)
async def create_employee(
    db: DbSession,
    user: AdminUser,
    payload: EmployeeCreate,
) -> dict[str, Any]:
    """Onboard an employee; new employees wait for approval."""
    employee = Employee(
        **payload.to_columns(),
        employee_status=EmployeeStatus.PENDING.value,
        employee_is_active=0,
        employee_job_pay_hired=date.today(),
    )
    db.add(employee)
    await db.flush()
    add_history(db, employee.employee_aid, "onboarded")
    await db.commit()
    await db.refresh(employee)
    logger.info("Created employee %s", employee.employee_aid)
    return {"success": True, "data": employee.to_dict()}


@router.get("/api/employees/{employee_aid}")
async def get_employee(
    db: DbSession,
    user: AdminUser,
    employee_aid: Annotated[int, Path()],
) -> dict[str, Any]:
    employee = await load_employee(db, employee_aid)
    return {"success": True, "data": employee.to_dict()}


@router.put("/api/employees/{employee_aid}")
async def update_employee(
    db: DbSession,
    user: AdminUser,
    payload: dict[str, Any],
    employee_aid: Annotated[int, Path()],
) -> dict[str, Any]:
    """Update employee fields given by column or camelCase name.

    Empty strings clear a field; unknown fields are ignored.
    """
    employee = await load_employee(db, employee_aid)
    for field, value in payload.items():
        column = EMPLOYEE_FIELD_ALIASES.get(field, field)
        if column not in _UPDATABLE_COLUMNS:
            continue
        if isinstance(value, str):
            value = value.strip() or None
        if value is None and column in _REQUIRED_COLUMNS:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=_REQUIRED_COLUMNS[column],
            )
        if value is not None and column in _CONVERTERS:
            try:
                value = _CONVERTERS[column](str(value))
            except (ValueError, InvalidOperation):
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=f"{column} is invalid",
                )
        setattr(employee, column, value)

    await db.commit()
    await db.refresh(employee)
    logger.info("Updated employee %s", employee_aid)
    return {"success": True, "data": employee.to_dict()}


@router.delete("/api/employees/{employee_aid}")
async def delete_employee(
    db: DbSession,
    user: AdminUser,
    employee_aid: Annotated[int, Path()],
) -> dict[str, Any]:
    employee = await load_employee(db, employee_aid)
    await db.delete(employee)
    await db.commit()
    logger.info("Deleted employee %s", employee_aid)
    return {"success": True}


# ============================================================================
# Lifecycle
# ============================================================================


@router.patch("/api/employees/{employee_aid}/status")
async def update_employee_status(
    db: DbSession,
    user: AdminUser,
    payload: EmployeeStatusUpdate,
    employee_aid: Annotated[int, Path()],
) -> dict[str, Any]:
    """Change status; an empty status approves a pending employee."""
    employee = await load_employee(db, employee_aid)
    target = payload.status.strip() or EmployeeStatus.ACTIVE.value
    try:
        EmployeeStateMachine.validate_transition(employee.employee_status, target)
    except InvalidTransitionError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )

    employee.employee_status = target
    employee.employee_is_active = 1 if EmployeeStateMachine.is_active(target) else 0
    if target == EmployeeStatus.OFFBOARDED:
        employee.employee_job_pay_separated = date.today()
    add_history(db, employee_aid, "approved" if target == EmployeeStatus.ACTIVE else target)
    await db.commit()
    await db.refresh(employee)
    logger.info("Employee %s is now %s", employee_aid, target)
    return {"success": True, "data": employee.to_dict()}


@router.post("/api/employees/{employee_aid}/offboard")
async def offboard_employee(
    db: DbSession,
    user: AdminUser,
    employee_aid: Annotated[int, Path()],
) -> dict[str, Any]:
    employee = await load_employee(db, employee_aid)
    try:
        EmployeeStateMachine.validate_transition(
            employee.employee_status, EmployeeStatus.OFFBOARDED
        )
    except InvalidTransitionError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Employee is already offboarded",
        )

    employee.employee_status = EmployeeStatus.OFFBOARDED.value
    employee.employee_is_active = 0
    employee.employee_job_pay_separated = date.today()
    add_history(db, employee_aid, "offboarded")
    await db.commit()
    await db.refresh(employee)
    logger.info("Offboarded employee %s", employee_aid)
    return {"success": True, "data": employee.to_dict()}


@router.post("/api/employees/{employee_aid}/upload-documents")
async def upload_documents(
    db: DbSession,
    user: AdminUser,
    employee_aid: Annotated[int, Path()],
    action: Annotated[str, Form()] = "save",
    employee_photo: Annotated[UploadFile | None, File()] = None,
) -> dict[str, Any]:
    """Save a new photo, or archive the current one (and save a new one if given)."""
    if action not in ("save", "archive"):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid action '{action}'",
        )
    employee = await load_employee(db, employee_aid)

    if action == "archive":
        await db.execute(
            update(EmployeeDocument)
            .where(
                EmployeeDocument.employee_aid == employee_aid,
                EmployeeDocument.field_name == "employee_photo",
            )
            .values(archived=True)
        )
        employee.employee_photo = None

    if employee_photo is not None and employee_photo.filename:
        content = await employee_photo.read()
        db.add(
            EmployeeDocument(
                employee_aid=employee_aid,
                field_name="employee_photo",
                filename=employee_photo.filename,
                content_type=employee_photo.content_type,
                size=len(content),
            )
        )
        employee.employee_photo = f"/uploads/employees/{employee_aid}/{employee_photo.filename}"
    elif action == "save":
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No file uploaded",
        )

    await db.commit()
    await db.refresh(employee)
    return {"success": True, "data": employee.to_dict()}


# ============================================================================
# Profile sections
# ============================================================================


@router.get("/api/employees/{employee_aid}/rate-history")
async def list_rate_history(
    db: DbSession,
    user: AdminUser,
    employee_aid: Annotated[int, Path()],
) -> dict[str, Any]:
    await load_employee(db, employee_aid)
    entries = await RateHistoryService(db).list_for(employee_aid)
    return {"success": True, "data": [e.to_dict() for e in entries]}


@router.post("/api/employees/{employee_aid}/rate-history", status_code=status.HTTP_201_CREATED)
async def add_rate_history(
    db: DbSession,
    user: AdminUser,
    payload: RateHistoryCreate,
    employee_aid: Annotated[int, Path()],
) -> dict[str, Any]:
    """Add a rate; the current one is closed the day before."""
    employee = await load_employee(db, employee_aid)
    try:
        entry = await RateHistoryService(db).add_rate(
            employee,
            payload.rate_history_amount,
            payload.rate_history_date,
            payload.rate_history_pay_type,
        )
    except RateHistoryError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    await db.commit()
    await db.refresh(entry)
    return {"success": True, "data": entry.to_dict()}


@router.get("/api/employees/{employee_aid}/employment-history")
async def list_employment_history(
    db: DbSession,
    user: AdminUser,
    employee_aid: Annotated[int, Path()],
) -> dict[str, Any]:
    await load_employee(db, employee_aid)
    result = await db.execute(
        select(EmploymentHistory)
        .where(EmploymentHistory.employee_aid == employee_aid)
        .order_by(EmploymentHistory.id.desc())
    )
    return {"success": True, "data": [h.to_dict() for h in result.scalars().all()]}


async def _pay_items(db: DbSession, employee_aid: int, kind: str) -> list[dict[str, Any]]:
    await load_employee(db, employee_aid)
    result = await db.execute(
        select(PayItem)
        .where(PayItem.employee_aid == employee_aid, PayItem.kind == kind)
        .order_by(PayItem.id)
    )
    return [item.to_dict() for item in result.scalars().all()]


@router.get("/api/employees/{employee_aid}/earnings")
async def list_earnings(
    db: DbSession,
    user: AdminUser,
    employee_aid: Annotated[int, Path()],
) -> dict[str, Any]:
    return {"success": True, "data": await _pay_items(db, employee_aid, "earning")}


@router.get("/api/employees/{employee_aid}/deductions")
async def list_deductions(
    db: DbSession,
    user: AdminUser,
    employee_aid: Annotated[int, Path()],
) -> dict[str, Any]:
    return {"success": True, "data": await _pay_items(db, employee_aid, "deduction")}


@router.get("/api/employees/{employee_aid}/payslips")
async def list_payslips(
    db: DbSession,
    user: AdminUser,
    employee_aid: Annotated[int, Path()],
) -> dict[str, Any]:
    await load_employee(db, employee_aid)
    result = await db.execute(
        select(Payslip)
        .where(Payslip.employee_aid == employee_aid)
        .order_by(Payslip.pay_date.desc())
    )
    return {"success": True, "data": [p.to_dict() for p in result.scalars().all()]}


# ============================================================================
# Import
# ============================================================================


@router.post("/api/admin/employees/import")
async def import_employees(
    db: DbSession,
    user: AdminUser,
    file: Annotated[UploadFile, File()],
) -> dict[str, Any]:
    """Create pending employees from a CSV with onboarding-form headers.

    Bad rows are counted and reported; good rows are kept.
    """
    raw = await file.read()
    try:
        text = raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="File must be UTF-8 encoded CSV",
        )

    summary = ImportSummary()
    for line_no, row in enumerate(csv.DictReader(io.StringIO(text)), start=2):
        summary.total += 1
        try:
            payload = EmployeeCreate.model_validate(
                {k.strip(): v for k, v in row.items() if k}
            )
        except ValidationError as e:
            summary.failed += 1
            fields = ", ".join(str(err["loc"][-1]) for err in e.errors())
            summary.errors.append(f"Row {line_no}: invalid {fields}")
            continue
        employee = Employee(
            **payload.to_columns(),
            employee_status=EmployeeStatus.PENDING.value,
            employee_is_active=0,
            employee_job_pay_hired=date.today(),
        )
        db.add(employee)
        summary.successful += 1

    await db.commit()
    logger.info(
        "Imported employees: %d total, %d ok, %d failed",
        summary.total,
        summary.successful,
        summary.failed,
    )
    return {"success": True, "data": summary.model_dump()}
