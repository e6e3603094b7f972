"""Employee, rate history and payroll models.

Column names are the wire field names, so ``to_dict`` is the API shape.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Integer, Numeric, String, func
from sqlalchemy.orm import Mapped, mapped_column

from fleet_console.server.models.base import Base, TimestampMixin


class Employee(Base):
    """Employee with personal and job/pay fields."""

    __tablename__ = "employee"

    employee_aid: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    employee_first_name: Mapped[str] = mapped_column(String, nullable=False)
    employee_middle_name: Mapped[str | None] = mapped_column(String, nullable=True)
    employee_last_name: Mapped[str] = mapped_column(String, nullable=False)
    employee_email: Mapped[str | None] = mapped_column(String, nullable=True)
    employee_work_email: Mapped[str | None] = mapped_column(String, nullable=True)
    employee_mobile_number: Mapped[str | None] = mapped_column(String, nullable=True)
    employee_telephone: Mapped[str | None] = mapped_column(String, nullable=True)
    employee_ssn_ein: Mapped[str | None] = mapped_column(String, nullable=True)
    employee_shirt_size: Mapped[str | None] = mapped_column(String, nullable=True)
    employee_street: Mapped[str | None] = mapped_column(String, nullable=True)
    employee_city: Mapped[str | None] = mapped_column(String, nullable=True)
    employee_state: Mapped[str | None] = mapped_column(String, nullable=True)
    employee_country: Mapped[str | None] = mapped_column(String, nullable=True)
    employee_zip_code: Mapped[str | None] = mapped_column(String, nullable=True)
    employee_photo: Mapped[str | None] = mapped_column(String, nullable=True)
    employee_status: Mapped[str] = mapped_column(String, nullable=False, default="pending")
    employee_is_active: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    employee_job_pay_job_title_name: Mapped[str | None] = mapped_column(String, nullable=True)
    employee_job_pay_department_name: Mapped[str | None] = mapped_column(String, nullable=True)
    employee_job_pay_salary_rate: Mapped[Decimal | None] = mapped_column(
        Numeric(12, 2), nullable=True
    )
    employee_job_pay_pay_type: Mapped[str | None] = mapped_column(String, nullable=True)
    employee_job_pay_hired: Mapped[date | None] = mapped_column(Date, nullable=True)
    employee_job_pay_separated: Mapped[date | None] = mapped_column(Date, nullable=True)
    employee_created: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )


class RateHistory(Base):
    """One pay rate with its effective window; a null end marks the current rate."""

    __tablename__ = "rate_history"

    rate_history_aid: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    rate_history_employee_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("employee.employee_aid", ondelete="CASCADE"),
        nullable=False,
    )
    rate_history_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    rate_history_pay_type: Mapped[str] = mapped_column(String, nullable=False, default="hourly")
    rate_history_date: Mapped[date] = mapped_column(Date, nullable=False)
    rate_history_effective_start: Mapped[date] = mapped_column(Date, nullable=False)
    rate_history_effective_end: Mapped[date | None] = mapped_column(Date, nullable=True)
    rate_history_created: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )


class EmploymentHistory(Base, TimestampMixin):
    """Lifecycle event of an employee (hired, approved, offboarded...)."""

    __tablename__ = "employment_history"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    employee_aid: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("employee.employee_aid", ondelete="CASCADE"),
        nullable=False,
    )
    event: Mapped[str] = mapped_column(String, nullable=False)
    event_date: Mapped[date] = mapped_column(Date, nullable=False)
    note: Mapped[str | None] = mapped_column(String, nullable=True)


class PayItem(Base, TimestampMixin):
    """Recurring earning or deduction line of an employee."""

    __tablename__ = "pay_item"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    employee_aid: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("employee.employee_aid", ondelete="CASCADE"),
        nullable=False,
    )
    kind: Mapped[str] = mapped_column(String, nullable=False)  # earning | deduction
    label: Mapped[str] = mapped_column(String, nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)


class Payslip(Base, TimestampMixin):
    __tablename__ = "payslip"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    employee_aid: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("employee.employee_aid", ondelete="CASCADE"),
        nullable=False,
    )
    period_start: Mapped[date] = mapped_column(Date, nullable=False)
    period_end: Mapped[date] = mapped_column(Date, nullable=False)
    pay_date: Mapped[date] = mapped_column(Date, nullable=False)
    gross_pay: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    net_pay: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)


class EmployeeDocument(Base, TimestampMixin):
    """Uploaded employee file (metadata only)."""

    __tablename__ = "employee_document"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    employee_aid: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("employee.employee_aid", ondelete="CASCADE"),
        nullable=False,
    )
    field_name: Mapped[str] = mapped_column(String, nullable=False)
    filename: Mapped[str] = mapped_column(String, nullable=False)
    content_type: Mapped[str | None] = mapped_column(String, nullable=True)
    size: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    archived: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)


class PayrollRun(Base, TimestampMixin):
    """Payroll run; anything not yet paid blocks pay edits."""

    __tablename__ = "payroll_run"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    period_start: Mapped[date] = mapped_column(Date, nullable=False)
    period_end: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[str] = mapped_column(String, nullable=False, default="unpaid")
