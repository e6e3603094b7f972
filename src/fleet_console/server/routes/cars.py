"""Car API endpoints."""

import json
import logging
from datetime import date
from typing import Annotated, Any

from fastapi import APIRouter, HTTPException, Path, Query, Request, status
from sqlalchemy import or_, select
from starlette.datastructures import FormData, UploadFile

from fleet_console.server.dependencies import AdminUser, ClientUser, DbSession
from fleet_console.server.models import Car
from fleet_console.server.schemas import CarOffboardRequest
from fleet_console.server.services.lifecycle import (
    CAR_STATUSES,
    CarStateMachine,
    InvalidTransitionError,
)
from fleet_console.server.services.listing import like_pattern, paginate

logger = logging.getLogger(__name__)

router = APIRouter(tags=["cars"])

VIN_LENGTH = 17

# Form field -> (column, kind)
CAR_FORM_COLUMNS: dict[str, tuple[str, str]] = {
    "vin": ("vin", "text"),
    "makeModel": ("make_model", "text"),
    "make": ("make", "text"),
    "model": ("model", "text"),
    "year": ("year", "int"),
    "color": ("color", "text"),
    "interiorColor": ("interior_color", "text"),
    "mileage": ("mileage", "int"),
    "licensePlate": ("license_plate", "text"),
    "status": ("status", "text"),
    "tireSize": ("tire_size", "text"),
    "oilType": ("oil_type", "text"),
    "lastOilChange": ("last_oil_change", "text"),
    "fuelType": ("fuel_type", "text"),
    "titleType": ("title_type", "text"),
    "turoLink": ("turo_link", "text"),
    "adminTuroLink": ("admin_turo_link", "text"),
    "offboardReason": ("offboard_reason", "text"),
    "offboardNote": ("offboard_note", "text"),
    "offboardAt": ("offboard_at", "date"),
}

_LABELS = {"year": "Year", "mileage": "Mileage", "offboardAt": "Offboard date"}


def parse_car_form(form: FormData) -> dict[str, Any]:
    """Column values from a car form; only fields present are returned.

    Empty strings clear the column.
    """
    values: dict[str, Any] = {}
    for field, (column, kind) in CAR_FORM_COLUMNS.items():
        if field not in form:
            continue
        raw = form.get(field)
        if isinstance(raw, UploadFile):
            continue
        text = (raw or "").strip()
        if not text:
            values[column] = None
            continue
        try:
            if kind == "int":
                values[column] = int(text)
            elif kind == "date":
                values[column] = date.fromisoformat(text[:10])
            else:
                values[column] = text
        except ValueError:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"{_LABELS.get(field, field)} is invalid",
            )
    return values


def validate_car_values(values: dict[str, Any], creating: bool) -> None:
    """Check VIN, status and make/model of a create or update."""
    if creating or "vin" in values:
        vin = values.get("vin") or ""
        if len(vin) != VIN_LENGTH:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="VIN must be exactly 17 characters",
            )
        values["vin"] = vin.upper()

    if "status" in values:
        if values["status"] is None:
            values["status"] = "ACTIVE"
        elif values["status"] not in CAR_STATUSES:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Invalid status '{values['status']}'",
            )

    if "make_model" in values and not values["make_model"]:
        derived = " ".join(p for p in (values.get("make"), values.get("model")) if p)
        values["make_model"] = derived


async def photo_paths(form: FormData, car_id: int) -> list[str]:
    """Stored paths of uploaded photos (content is not kept)."""
    paths = []
    for upload in form.getlist("photos"):
        if isinstance(upload, UploadFile) and upload.filename:
            await upload.read()
            paths.append(f"/uploads/cars/{car_id}/{upload.filename}")
    return paths


async def load_car(db: DbSession, car_id: int) -> Car:
    car = await db.get(Car, car_id)
    if car is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Car not found",
        )
    return car


# ============================================================================
# Admin car list and CRUD
# ============================================================================


@router.get("/api/cars")
async def list_cars(
    db: DbSession,
    user: AdminUser,
    status_filter: Annotated[str | None, Query(alias="status")] = None,
    search: str | None = None,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1)] = 10,
) -> dict[str, Any]:
    """List cars, newest first."""
    stmt = select(Car).order_by(Car.id.desc())
    if status_filter and status_filter != "all":
        stmt = stmt.where(Car.status == status_filter)
    needle = (search or "").strip()
    if needle:
        pattern = like_pattern(needle)
        stmt = stmt.where(
            or_(
                Car.make_model.ilike(pattern, escape="\\"),
                Car.make.ilike(pattern, escape="\\"),
                Car.model.ilike(pattern, escape="\\"),
                Car.vin.ilike(pattern, escape="\\"),
                Car.license_plate.ilike(pattern, escape="\\"),
            )
        )

    cars, pagination = await paginate(db, stmt, page, limit)
    return {
        "success": True,
        "data": [car.to_wire() for car in cars],
        "pagination": pagination,
    }


@router.post("/api/cars", status_code=status.HTTP_201_CREATED)
async def create_car(request: Request, db: DbSession, user: AdminUser) -> dict[str, Any]:
    """Create a car from a multipart form."""
    form = await request.form()
    values = parse_car_form(form)
    values.setdefault("status", None)
    values.setdefault("make_model", None)
    validate_car_values(values, creating=True)

    values["make_model"] = values["make_model"] or ""
    car = Car(**values)
    car.is_active = 0 if CarStateMachine.is_offboarded(car.status) else 1
    db.add(car)
    await db.flush()

    photos = await photo_paths(form, car.id)
    if photos:
        car.photos = json.dumps(photos)
    await db.commit()
    await db.refresh(car)
    logger.info("Created car %s (%s)", car.id, car.vin)
    return {"success": True, "data": car.to_wire()}


@router.get("/api/cars/{car_id}")
async def get_car(
    db: DbSession,
    user: AdminUser,
    car_id: Annotated[int, Path()],
) -> dict[str, Any]:
    car = await load_car(db, car_id)
    return {"success": True, "data": car.to_wire()}


@router.patch("/api/cars/{car_id}")
async def update_car(
    request: Request,
    db: DbSession,
    user: AdminUser,
    car_id: Annotated[int, Path()],
) -> dict[str, Any]:
    """Update a car; every field present in the form is written."""
    car = await load_car(db, car_id)
    form = await request.form()
    values = parse_car_form(form)
    validate_car_values(values, creating=False)

    for column, value in values.items():
        setattr(car, column, value)
    car.make_model = car.make_model or ""
    car.is_active = 0 if CarStateMachine.is_offboarded(car.status) else 1

    photos = await photo_paths(form, car.id)
    if photos:
        car.photos = json.dumps(car.photo_list + photos)
    await db.commit()
    await db.refresh(car)
    logger.info("Updated car %s", car.id)
    return {"success": True, "data": car.to_wire()}


@router.delete("/api/cars/{car_id}")
async def delete_car(
    db: DbSession,
    user: AdminUser,
    car_id: Annotated[int, Path()],
) -> dict[str, Any]:
    car = await load_car(db, car_id)
    await db.delete(car)
    await db.commit()
    logger.info("Deleted car %s", car_id)
    return {"success": True}


@router.post("/api/cars/{car_id}/offboard")
async def offboard_car(
    db: DbSession,
    user: AdminUser,
    payload: CarOffboardRequest,
    car_id: Annotated[int, Path()],
) -> dict[str, Any]:
    """Take a car out of the fleet."""
    car = await load_car(db, car_id)
    target = CarStateMachine.offboarded_status(car.status)
    try:
        CarStateMachine.validate_transition(car.status, target)
    except InvalidTransitionError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Car is already offboarded",
        )

    car.status = target
    car.is_active = 0
    car.offboard_reason = payload.offboard_reason.value
    car.offboard_note = payload.offboard_note or None
    car.offboard_at = payload.offboard_at or date.today()
    await db.commit()
    await db.refresh(car)
    logger.info("Offboarded car %s (%s)", car.id, car.offboard_reason)
    return {"success": True, "data": car.to_wire()}


# ============================================================================
# Client role
# ============================================================================


def client_car_row(car: Car) -> dict[str, Any]:
    """Row shape of the client car list."""
    if car.status in ("ACTIVE", "INACTIVE"):
        car_status = "available" if car.status == "ACTIVE" else "off_fleet"
    else:
        car_status = car.status
    photos = car.photo_list
    owner = car.owner
    return {
        "id": car.id,
        "vin": car.vin,
        "make": car.make,
        "model": car.model,
        "year": car.year,
        "makeModel": car.make_model,
        "plateNumber": car.license_plate,
        "mileage": car.mileage,
        "carStatus": car_status,
        "isActive": bool(car.is_active),
        "photo": photos[0] if photos else None,
        "returnedAt": car.offboard_at,
        "clientId": car.client_id,
        "turoLink": car.turo_link,
        "ownerFirstName": owner.first_name if owner else None,
        "ownerLastName": owner.last_name if owner else None,
        "contactPhone": owner.phone if owner else None,
    }


@router.get("/api/client/cars")
async def list_client_cars(
    db: DbSession,
    user: ClientUser,
    include_returned: Annotated[bool, Query(alias="includeReturned")] = False,
) -> dict[str, Any]:
    """All cars of the signed-in client; no server-side paging."""
    stmt = select(Car).order_by(Car.id.desc())
    if not user.is_admin:
        stmt = stmt.where(Car.client_id == user.id)
    if not include_returned:
        stmt = stmt.where(Car.is_active == 1)
    result = await db.execute(stmt)
    return {"success": True, "data": [client_car_row(car) for car in result.scalars().all()]}
