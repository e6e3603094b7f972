"""Demo data for a fresh development database."""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from fleet_console.server.models import (
    Car,
    CarOwner,
    Employee,
    EmploymentHistory,
    PayItem,
    PayrollRun,
    Payslip,
    RateHistory,
    SlackChannel,
)

logger = logging.getLogger(__name__)

DEMO_CARS = [
    # vin, make, model, year, plate, status
    ("1HGCM82633A004352", "Honda", "Accord", 2021, "ABC1234", "ACTIVE"),
    ("2T1BURHE5JC074120", "Toyota", "Corolla", 2019, "XYZ9876", "INACTIVE"),
    ("WDDWJ8EB2KF123456", "Mercedes", "C-Class", 2022, "MBZ2022", "ACTIVE"),
    ("5YJ3E1EA7KF317000", "Tesla", "Model 3", 2020, "EV00321", "INACTIVE"),
    ("1FTFW1E50JFB12345", "Ford", "F-150", 2018, "TRK1850", "ACTIVE"),
]

DEMO_EMPLOYEES = [
    # first, last, email, title, department, status
    ("Alice", "Nguyen", "alice@example.com", "Fleet Manager", "Operations", "active"),
    ("Brian", "Lopez", "brian@example.com", "Mechanic", "Maintenance", "active"),
    ("Carla", "Smith", "carla@example.com", "Driver", "Operations", "pending"),
]


async def seed_demo_data(db: AsyncSession) -> bool:
    """Insert demo rows into an empty database.

    Returns False (and does nothing) when cars already exist.
    """
    existing = await db.scalar(select(func.count()).select_from(Car))
    if existing:
        return False

    owner = CarOwner(first_name="Jordan", last_name="Reyes", email="jordan@example.com", phone="555-0100")
    db.add(owner)
    await db.flush()

    for vin, make, model, year, plate, status in DEMO_CARS:
        db.add(
            Car(
                vin=vin,
                make=make,
                model=model,
                make_model=f"{make} {model}",
                year=year,
                license_plate=plate,
                mileage=12000,
                status=status,
                is_active=1 if status == "ACTIVE" else 0,
                client_id=owner.id,
                offboard_reason="sold" if status == "INACTIVE" else None,
                offboard_at=date(2024, 6, 30) if status == "INACTIVE" else None,
            )
        )

    employees = []
    for first, last, email, title, department, status in DEMO_EMPLOYEES:
        employee = Employee(
            employee_first_name=first,
            employee_last_name=last,
            employee_email=email,
            employee_work_email=email,
            employee_job_pay_job_title_name=title,
            employee_job_pay_department_name=department,
            employee_status=status,
            employee_is_active=1 if status == "active" else 0,
            employee_job_pay_hired=date(2024, 1, 15),
        )
        db.add(employee)
        employees.append(employee)
    await db.flush()

    first = employees[0]
    db.add_all(
        [
            RateHistory(
                rate_history_employee_id=first.employee_aid,
                rate_history_amount=Decimal("22.00"),
                rate_history_pay_type="hourly",
                rate_history_date=date(2024, 1, 15),
                rate_history_effective_start=date(2024, 1, 15),
                rate_history_effective_end=date(2024, 12, 31),
            ),
            RateHistory(
                rate_history_employee_id=first.employee_aid,
                rate_history_amount=Decimal("25.00"),
                rate_history_pay_type="hourly",
                rate_history_date=date(2025, 1, 1),
                rate_history_effective_start=date(2025, 1, 1),
            ),
            EmploymentHistory(employee_aid=first.employee_aid, event="onboarded", event_date=date(2024, 1, 15)),
            PayItem(employee_aid=first.employee_aid, kind="earning", label="Regular", amount=Decimal("2000.00")),
            PayItem(employee_aid=first.employee_aid, kind="deduction", label="Health insurance", amount=Decimal("120.00")),
            Payslip(
                employee_aid=first.employee_aid,
                period_start=date(2025, 1, 1),
                period_end=date(2025, 1, 15),
                pay_date=date(2025, 1, 20),
                gross_pay=Decimal("2000.00"),
                net_pay=Decimal("1610.00"),
            ),
            PayrollRun(period_start=date(2025, 1, 1), period_end=date(2025, 1, 15), status="paid"),
            SlackChannel(form_type="car_onboarding", channel_id="C0FLEET01", channel_name="fleet-onboarding"),
        ]
    )
    first.employee_job_pay_salary_rate = Decimal("25.00")
    first.employee_job_pay_pay_type = "hourly"
    await db.commit()
    logger.info("Seeded %d cars and %d employees", len(DEMO_CARS), len(DEMO_EMPLOYEES))
    return True
