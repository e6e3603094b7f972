"""Tests for the reference backend's HTTP surface."""

import pytest

VALID_CAR = {
    "vin": "3VWFE21C04M000001",
    "makeModel": "",
    "make": "Volkswagen",
    "model": "Jetta",
    "year": "2004",
    "mileage": "150000",
    "status": "",
}


def as_form(fields):
    """Multipart parts for plain form fields."""
    return [(name, (None, value)) for name, value in fields.items()]


class TestHealthEndpoints:
    """Test health check endpoints."""

    async def test_health_check(self, anonymous_client):
        response = await anonymous_client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"] == "healthy"

    async def test_readiness_check(self, anonymous_client):
        response = await anonymous_client.get("/ready")
        assert response.status_code == 200
        assert response.json()["status"] == "ready"

    async def test_liveness_check(self, anonymous_client):
        response = await anonymous_client.get("/live")
        assert response.status_code == 200
        assert response.json()["status"] == "alive"


class TestAuth:
    """Test session resolution and role checks."""

    async def test_me_as_admin(self, client):
        response = await client.get("/api/auth/me")
        assert response.status_code == 200
        user = response.json()["user"]
        assert user["isAdmin"] is True
        assert user["isClient"] is False

    async def test_me_without_session(self, anonymous_client):
        response = await anonymous_client.get("/api/auth/me")
        assert response.status_code == 401
        assert response.json() == {"success": False, "error": "Not authenticated"}

    async def test_admin_endpoint_as_client(self, client_role_client):
        response = await client_role_client.get("/api/employees")
        assert response.status_code == 403
        assert response.json()["error"] == "Admin access required"

    async def test_client_cars_requires_session(self, anonymous_client):
        response = await anonymous_client.get("/api/client/cars")
        assert response.status_code == 401


class TestCarsApi:
    """Test car endpoints."""

    async def test_create_defaults(self, client):
        response = await client.post("/api/cars", files=as_form(VALID_CAR))

        assert response.status_code == 201
        car = response.json()["data"]
        assert car["status"] == "ACTIVE"
        assert car["makeModel"] == "Volkswagen Jetta"
        assert car["year"] == 2004
        assert car["isActive"] == 1

    async def test_create_uppercases_vin(self, client):
        fields = {**VALID_CAR, "vin": "3vwfe21c04m000001"}
        response = await client.post("/api/cars", files=as_form(fields))
        assert response.json()["data"]["vin"] == "3VWFE21C04M000001"

    async def test_create_with_photos(self, client):
        parts = as_form(VALID_CAR) + [
            ("photos", ("front.jpg", b"jpeg", "image/jpeg")),
            ("photos", ("back.jpg", b"jpeg", "image/jpeg")),
        ]
        response = await client.post("/api/cars", files=parts)

        car = response.json()["data"]
        assert [p.rsplit("/", 1)[-1] for p in car["photos"]] == ["front.jpg", "back.jpg"]

    @pytest.mark.parametrize(
        "fields,message",
        [
            ({"vin": "SHORT"}, "VIN must be exactly 17 characters"),
            ({"status": "SOLD"}, "Invalid status 'SOLD'"),
            ({"year": "next year"}, "Year is invalid"),
        ],
    )
    async def test_create_rejected(self, client, fields, message):
        response = await client.post("/api/cars", files=as_form({**VALID_CAR, **fields}))
        assert response.status_code == 400
        assert response.json() == {"success": False, "error": message}

    async def test_empty_string_clears_field(self, client):
        created = (await client.post("/api/cars", files=as_form({**VALID_CAR, "color": "Blue"}))).json()["data"]

        response = await client.patch(f"/api/cars/{created['id']}", files=as_form({"color": ""}))

        assert response.status_code == 200
        assert response.json()["data"]["color"] is None

    async def test_absent_field_left_unchanged(self, client):
        created = (await client.post("/api/cars", files=as_form({**VALID_CAR, "color": "Blue"}))).json()["data"]

        response = await client.patch(f"/api/cars/{created['id']}", files=as_form({"mileage": "151000"}))

        car = response.json()["data"]
        assert car["color"] == "Blue"
        assert car["mileage"] == 151000

    async def test_missing_car(self, client, seeded_db):
        response = await client.get("/api/cars/999")
        assert response.status_code == 404
        assert response.json()["error"] == "Car not found"

    async def test_search_escapes_wildcards(self, client, seeded_db):
        response = await client.get("/api/cars", params={"search": "%"})
        assert response.json()["pagination"]["total"] == 0

    async def test_invalid_page(self, client, seeded_db):
        response = await client.get("/api/cars", params={"page": "0"})
        assert response.status_code == 400
        assert response.json()["success"] is False

    async def test_page_past_end_is_empty(self, client, seeded_db):
        response = await client.get("/api/cars", params={"page": "5", "limit": "10"})
        body = response.json()
        assert response.status_code == 200
        assert body["data"] == []
        assert body["pagination"] == {"page": 5, "limit": 10, "total": 5, "totalPages": 1}

    async def test_offboard_requires_reason(self, client, seeded_db):
        response = await client.post("/api/cars/1/offboard", json={"offboardNote": "x"})
        assert response.status_code == 400

    async def test_client_list_hides_returned(self, client_role_client, seeded_db):
        response = await client_role_client.get("/api/client/cars")
        rows = response.json()["data"]
        assert len(rows) == 3
        assert {row["carStatus"] for row in rows} == {"available"}

        response = await client_role_client.get("/api/client/cars", params={"includeReturned": "true"})
        assert len(response.json()["data"]) == 5


class TestEmployeesApi:
    """Test employee endpoints."""

    async def test_create_requires_names(self, client):
        response = await client.post("/api/employees", json={"firstName": "", "lastName": "Ko"})
        assert response.status_code == 400
        assert response.json()["success"] is False

    async def test_created_employee_is_pending(self, client):
        response = await client.post(
            "/api/employees", json={"firstName": "Dana", "lastName": "Ko", "workEmail": ""}
        )
        assert response.status_code == 201
        employee = response.json()["data"]
        assert employee["employee_status"] == "pending"
        assert employee["employee_is_active"] == 0
        assert employee["employee_work_email"] is None

        history = await client.get(f"/api/employees/{employee['employee_aid']}/employment-history")
        assert [h["event"] for h in history.json()["data"]] == ["onboarded"]

    @pytest.mark.parametrize(
        "status_filter,names",
        [
            ("pending", ["Carla"]),
            ("active", ["Brian", "Alice"]),
            ("inactive", []),
        ],
    )
    async def test_status_filters(self, client, seeded_db, status_filter, names):
        response = await client.get("/api/employees", params={"status": status_filter})
        assert [e["employee_first_name"] for e in response.json()["data"]] == names

    async def test_unknown_status_filter(self, client, seeded_db):
        response = await client.get("/api/employees", params={"status": "retired"})
        assert response.status_code == 400

    async def test_offboarded_employee_is_inactive(self, client, seeded_db):
        response = await client.post("/api/employees/2/offboard")
        assert response.json()["data"]["employee_status"] == "offboarded"

        inactive = await client.get("/api/employees", params={"status": "inactive"})
        assert [e["employee_first_name"] for e in inactive.json()["data"]] == ["Brian"]

        again = await client.post("/api/employees/2/offboard")
        assert again.status_code == 400
        assert again.json()["error"] == "Employee is already offboarded"

    async def test_offboarded_cannot_be_approved(self, client, seeded_db):
        await client.post("/api/employees/3/offboard")
        response = await client.patch("/api/employees/3/status", json={"status": ""})
        assert response.status_code == 400

    async def test_update_converts_rate(self, client, seeded_db):
        response = await client.put("/api/employees/2", json={"employee_job_pay_salary_rate": "abc"})
        assert response.status_code == 400

        response = await client.put("/api/employees/2", json={"employee_job_pay_salary_rate": "19.75"})
        assert float(response.json()["data"]["employee_job_pay_salary_rate"]) == 19.75

    async def test_rate_amount_must_be_positive(self, client, seeded_db):
        response = await client.post(
            "/api/employees/1/rate-history",
            json={"rate_history_amount": "0", "rate_history_date": "2025-06-01"},
        )
        assert response.status_code == 400

    async def test_import_rejects_non_utf8(self, client, seeded_db):
        response = await client.post(
            "/api/admin/employees/import",
            files={"file": ("staff.csv", "firstName\n\xe9\n".encode("latin-1"), "text/csv")},
        )
        assert response.status_code == 400
        assert response.json()["error"] == "File must be UTF-8 encoded CSV"

    async def test_delete_employee(self, client):
        created = (await client.post("/api/employees", json={"firstName": "Temp", "lastName": "Worker"})).json()["data"]

        response = await client.delete(f"/api/employees/{created['employee_aid']}")
        assert response.json() == {"success": True}

        missing = await client.get(f"/api/employees/{created['employee_aid']}")
        assert missing.status_code == 404


class TestSettingsApi:
    """Test settings and counters."""

    async def test_channel_id_required(self, client, seeded_db):
        response = await client.put(
            "/api/settings/slack-channels", json={"formType": "lyc", "channelId": "  "}
        )
        assert response.status_code == 400
        assert response.json()["error"] == "Channel ID is required"

    async def test_unknown_form_type(self, client, seeded_db):
        response = await client.put(
            "/api/settings/slack-channels", json={"formType": "payroll", "channelId": "C1"}
        )
        assert response.status_code == 400

    async def test_token_never_returned(self, client, seeded_db):
        await client.put("/api/settings/slack-bot-token", json={"botToken": "xoxb-secret"})
        response = await client.get("/api/settings/slack-channels")
        assert "xoxb-secret" not in response.text
        assert response.json()["slackBotTokenConfigured"] is True

    async def test_unpaid_count(self, client, seeded_db):
        response = await client.get("/api/payroll/unpaid-count")
        assert response.json() == {"success": True, "count": 0}

    async def test_sidebar_badges(self, client_role_client, seeded_db):
        response = await client_role_client.get("/api/sidebar-badges")
        assert response.json()["data"] == {
            "pendingEmployees": 1,
            "activeCars": 3,
            "unpaidPayroll": 0,
        }
