"""Car and car owner models."""

from __future__ import annotations

import json
from datetime import date
from typing import Any

from sqlalchemy import Date, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fleet_console.server.models.base import Base, TimestampMixin


class CarOwner(Base, TimestampMixin):
    """Client who owns one or more cars in the fleet."""

    __tablename__ = "car_owner"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    first_name: Mapped[str] = mapped_column(String, nullable=False)
    last_name: Mapped[str] = mapped_column(String, nullable=False)
    email: Mapped[str | None] = mapped_column(String, nullable=True)
    phone: Mapped[str | None] = mapped_column(String, nullable=True)

    cars: Mapped[list[Car]] = relationship(back_populates="owner")

    def to_wire(self) -> dict[str, Any]:
        return {
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
            "phone": self.phone,
        }


class Car(Base, TimestampMixin):
    """Fleet car."""

    __tablename__ = "car"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    vin: Mapped[str] = mapped_column(String(17), nullable=False)
    make_model: Mapped[str] = mapped_column(String, nullable=False, default="")
    make: Mapped[str | None] = mapped_column(String, nullable=True)
    model: Mapped[str | None] = mapped_column(String, nullable=True)
    year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    color: Mapped[str | None] = mapped_column(String, nullable=True)
    interior_color: Mapped[str | None] = mapped_column(String, nullable=True)
    mileage: Mapped[int | None] = mapped_column(Integer, nullable=True)
    license_plate: Mapped[str | None] = mapped_column(String, nullable=True)
    status: Mapped[str] = mapped_column(String, nullable=False, default="ACTIVE")
    tire_size: Mapped[str | None] = mapped_column(String, nullable=True)
    oil_type: Mapped[str | None] = mapped_column(String, nullable=True)
    last_oil_change: Mapped[str | None] = mapped_column(String, nullable=True)
    fuel_type: Mapped[str | None] = mapped_column(String, nullable=True)
    title_type: Mapped[str | None] = mapped_column(String, nullable=True)
    turo_link: Mapped[str | None] = mapped_column(String, nullable=True)
    admin_turo_link: Mapped[str | None] = mapped_column(String, nullable=True)
    photos: Mapped[str] = mapped_column(Text, nullable=False, default="[]")
    offboard_reason: Mapped[str | None] = mapped_column(String, nullable=True)
    offboard_note: Mapped[str | None] = mapped_column(Text, nullable=True)
    offboard_at: Mapped[date | None] = mapped_column(Date, nullable=True)
    client_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("car_owner.id", ondelete="SET NULL"),
        nullable=True,
    )
    is_active: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    owner: Mapped[CarOwner | None] = relationship(back_populates="cars", lazy="selectin")

    @property
    def photo_list(self) -> list[str]:
        try:
            photos = json.loads(self.photos or "[]")
        except ValueError:
            return []
        return photos if isinstance(photos, list) else []

    def to_wire(self) -> dict[str, Any]:
        """Admin list/detail shape (camelCase)."""
        return {
            "id": self.id,
            "vin": self.vin,
            "makeModel": self.make_model,
            "make": self.make,
            "model": self.model,
            "year": self.year,
            "color": self.color,
            "interiorColor": self.interior_color,
            "mileage": self.mileage,
            "licensePlate": self.license_plate,
            "status": self.status,
            "tireSize": self.tire_size,
            "oilType": self.oil_type,
            "lastOilChange": self.last_oil_change,
            "fuelType": self.fuel_type,
            "titleType": self.title_type,
            "turoLink": self.turo_link,
            "adminTuroLink": self.admin_turo_link,
            "photos": self.photo_list,
            "offboardReason": self.offboard_reason,
            "offboardNote": self.offboard_note,
            "offboardAt": self.offboard_at,
            "clientId": self.client_id,
            "isActive": self.is_active,
            "owner": self.owner.to_wire() if self.owner is not None else None,
            "createdAt": self.created_at,
        }
