"""Car resource: admin list, fleet list, client list, offboarding."""

from __future__ import annotations

import json
from datetime import date
from typing import Any, Mapping

from fleet_console.client.envelope import ListEnvelope, paginate_locally
from fleet_console.client.mutations import UploadFile
from fleet_console.client.query_keys import ALL_STATUSES, FilterState, QueryKey
from fleet_console.resources.base import ResourceClient
from fleet_console.resources.badges import SIDEBAR_BADGES_KEY
from fleet_console.resources.records import OffboardReason
from fleet_console.resources.schema import Column, ResourceSchema

CARS_PATH = "/api/cars"
CLIENT_CARS_PATH = "/api/client/cars"

CAR_COLUMNS = (
    Column("photos", "Photo"),
    Column("vin", "VIN"),
    Column("makeModel", "Make & Model"),
    Column("licensePlate", "Plate"),
    Column("year", "Year"),
    Column("mileage", "Mileage"),
    Column("status", "Status"),
    Column("owner", "Owner", admin_only=True),
    Column("adminTuroLink", "Admin Turo Link", admin_only=True),
)

CARS_SCHEMA = ResourceSchema(
    name="car",
    path=CARS_PATH,
    statuses=("ACTIVE", "INACTIVE"),
    columns=CAR_COLUMNS,
    preference_key="cars_limit",
    update_method="PATCH",
    multipart=True,
    related=((CLIENT_CARS_PATH,), SIDEBAR_BADGES_KEY),
)

FLEET_CARS_SCHEMA = ResourceSchema(
    name="car",
    path=CARS_PATH,
    statuses=("available", "in_use", "maintenance", "off_fleet"),
    columns=(
        Column("vin", "VIN"),
        Column("makeModel", "Make & Model"),
        Column("licensePlate", "Plate"),
        Column("status", "Status"),
        Column("owner", "Owner", admin_only=True),
    ),
    preference_key="fleet_cars_limit",
    update_method="PATCH",
    multipart=True,
    related=((CLIENT_CARS_PATH,), SIDEBAR_BADGES_KEY),
)

CAR_FORM_FIELDS = (
    "vin",
    "makeModel",
    "make",
    "model",
    "licensePlate",
    "year",
    "color",
    "interiorColor",
    "mileage",
    "status",
    "tireSize",
    "oilType",
    "lastOilChange",
    "fuelType",
    "titleType",
    "turoLink",
    "adminTuroLink",
    "offboardAt",
    "offboardReason",
    "offboardNote",
)

# Client statuses that still count as "in the fleet"
_CLIENT_ACTIVE_STATUSES = {"available", "in_use", "pending"}


def car_form_fields(values: Mapping[str, Any], default_status: str = "ACTIVE") -> dict[str, Any]:
    """Complete a car form: every field present, status never empty."""
    fields = {name: values.get(name) for name in CAR_FORM_FIELDS}
    fields["status"] = values.get("status") or default_status
    return fields


def parse_photos(raw: Any) -> list[str]:
    """Normalize the photo column (list, JSON text, or a single path)."""
    if not raw:
        return []
    if isinstance(raw, list):
        return [p for p in raw if isinstance(p, str)]
    if isinstance(raw, str):
        try:
            parsed = json.loads(raw)
        except ValueError:
            return [raw]
        if isinstance(parsed, list):
            return [p for p in parsed if isinstance(p, str)]
        if isinstance(parsed, str):
            return [parsed]
        return [raw]
    return []


def client_car_status(car_status: str | None, is_active: Any) -> str:
    """Map a client-facing car status onto ACTIVE/INACTIVE."""
    if car_status == "off_fleet":
        return "INACTIVE"
    if car_status in _CLIENT_ACTIVE_STATUSES:
        return "ACTIVE"
    return "ACTIVE" if is_active else "INACTIVE"


def normalize_client_car(row: Mapping[str, Any]) -> dict[str, Any]:
    """Reshape a ``/api/client/cars`` row into the admin car shape."""
    make_model = row.get("makeModel") or " ".join(
        str(part) for part in (row.get("make"), row.get("model"), row.get("year")) if part
    )
    has_owner = row.get("ownerFirstName") or row.get("ownerLastName")
    return {
        "id": row.get("id"),
        "vin": row.get("vin") or "",
        "makeModel": make_model or "N/A",
        "make": row.get("make") or None,
        "model": row.get("model") or None,
        "licensePlate": row.get("plateNumber") or None,
        "year": row.get("year") or None,
        "color": None,
        "mileage": row.get("mileage") if isinstance(row.get("mileage"), int) else 0,
        "status": client_car_status(row.get("carStatus"), row.get("isActive")),
        "photos": parse_photos(row.get("photo")),
        "offboardReason": None,
        "offboardNote": None,
        "offboardAt": row.get("returnedAt") or None,
        "clientId": row.get("clientId") or None,
        "turoLink": row.get("turoLink") or None,
        "isActive": 1 if row.get("isActive") else 0,
        "owner": (
            {
                "firstName": row.get("ownerFirstName") or "",
                "lastName": row.get("ownerLastName") or "",
                "email": None,
                "phone": row.get("contactPhone") or None,
            }
            if has_owner
            else None
        ),
    }


def filter_client_cars(
    cars: list[dict[str, Any]], filters: FilterState
) -> list[dict[str, Any]]:
    """Apply search (make/model or plate) and status filters locally."""
    needle = filters.normalized_search.lower()

    def matches(car: dict[str, Any]) -> bool:
        if needle and needle not in car["makeModel"].lower() and needle not in (
            car["licensePlate"] or ""
        ).lower():
            return False
        if filters.status_filter != ALL_STATUSES and car["status"] != filters.status_filter:
            return False
        return True

    return [car for car in cars if matches(car)]


class CarsResource(ResourceClient):
    """Cars as seen by admins, plus the client-role variant."""

    async def create_car(
        self,
        values: Mapping[str, Any],
        photos: list[UploadFile] | None = None,
    ) -> Any:
        files = {"photos": list(photos)} if photos else None
        return await self.create(car_form_fields(values, self._default_status()), files)

    async def update_car(self, car_id: int, values: Mapping[str, Any]) -> Any:
        return await self.update(car_id, car_form_fields(values, self._default_status()))

    async def offboard(
        self,
        car_id: int,
        reason: OffboardReason | str,
        note: str = "",
        offboard_at: date | None = None,
    ) -> Any:
        """Take a car out of the fleet with the required reason/note/date."""
        reason_value = OffboardReason(reason).value
        return await self.transition(
            car_id,
            "offboard",
            fields={
                "offboardReason": reason_value,
                "offboardNote": note,
                "offboardAt": (offboard_at or date.today()).isoformat(),
            },
            fallback="Failed to offboard car",
        )

    def _default_status(self) -> str:
        return self.schema.statuses[0] if self.schema.statuses else "ACTIVE"

    # ------------------------------------------------------------------
    # Client role
    # ------------------------------------------------------------------

    def client_list_query(self, filters: FilterState) -> tuple[QueryKey, Any]:
        """Key and fetch function for the client-role car list.

        Clients get their whole car list; search, status filter and
        pagination happen locally and yield the usual envelope.
        """
        CARS_SCHEMA.validate_status(filters.status_filter)
        key: QueryKey = (
            CLIENT_CARS_PATH,
            filters.status_filter,
            filters.normalized_search,
            filters.page,
            filters.items_per_page,
        )
        # Returned cars are only left out when listing active ones
        include_returned = "false" if filters.status_filter == "ACTIVE" else "true"

        async def query_fn() -> ListEnvelope:
            raw = await self.fetcher.fetch_collection(
                CLIENT_CARS_PATH,
                fallback="Failed to fetch client cars",
                params={"includeReturned": include_returned},
            )
            cars = [normalize_client_car(row) for row in raw.data]
            matching = filter_client_cars(cars, filters)
            return paginate_locally(matching, filters.page, filters.items_per_page)

        return key, query_fn

    async def list_for_client(self, filters: FilterState | None = None) -> ListEnvelope:
        key, query_fn = self.client_list_query(filters or FilterState())
        return await self.cache.fetch_query(key, query_fn)
