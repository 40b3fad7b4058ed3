"""Contract tests for the /admin endpoints."""

import pytest
from fastapi.testclient import TestClient

from suvidha.api.admin import router as admin_router


@pytest.fixture
def pending_reading_id(client: TestClient, api_db, auth_headers) -> int:
    """Submit a reading as the demo citizen and return its ID."""
    response = client.post(
        "/meter-readings",
        json={"connectionId": api_db.electricity_id, "reading": 150},
        headers=auth_headers("citizen"),
    )
    assert response.status_code == 200
    return response.json()["data"]["id"]


ADMIN_GET_PATHS = [
    "/admin/meter-readings",
    "/admin/activities",
    "/admin/payments",
    "/admin/service-usage",
    "/admin/dashboard",
    "/admin/grievances",
    "/admin/connections",
    "/admin/reports?type=payments",
]


class TestAdminAccess:
    """Role checks shared by every admin endpoint."""

    @pytest.mark.parametrize("path", ADMIN_GET_PATHS)
    def test_citizen_is_forbidden(self, client: TestClient, auth_headers, path):
        response = client.get(path, headers=auth_headers("citizen"))

        assert response.status_code == 403
        assert response.json() == {"success": False, "error": "Forbidden"}

    @pytest.mark.parametrize("path", ADMIN_GET_PATHS)
    def test_missing_token_is_unauthorized(self, client: TestClient, api_db, path):
        response = client.get(path)

        assert response.status_code == 401

    def test_staff_allowed(self, client: TestClient, auth_headers):
        response = client.get("/admin/dashboard", headers=auth_headers("staff"))

        assert response.status_code == 200

    def test_citizen_cannot_verify(self, client: TestClient, auth_headers, pending_reading_id):
        response = client.post(
            f"/admin/meter-readings/{pending_reading_id}/verify",
            headers=auth_headers("citizen"),
        )

        assert response.status_code == 403


class TestAdminMeterReadings:
    """Tests for the review queue and verify/reject transitions."""

    def test_list_with_pagination(self, client: TestClient, auth_headers, pending_reading_id):
        response = client.get(
            "/admin/meter-readings?status=PENDING&page=1&limit=10",
            headers=auth_headers("admin"),
        )

        assert response.status_code == 200
        body = response.json()
        assert [r["id"] for r in body["data"]] == [pending_reading_id]
        assert body["pagination"] == {"page": 1, "limit": 10, "total": 1, "totalPages": 1}

    def test_invalid_status_filter(self, client: TestClient, auth_headers):
        response = client.get(
            "/admin/meter-readings?status=LOST", headers=auth_headers("admin")
        )

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Invalid filter value: LOST"}

    def test_invalid_filter_message_in_hindi(self, client: TestClient, auth_headers):
        response = client.get(
            "/admin/grievances?status=LOST&lang=hi", headers=auth_headers("admin")
        )

        assert response.status_code == 400
        assert response.json()["error"] == "अमान्य फ़िल्टर मान: LOST"

    @pytest.mark.parametrize("reading_id", ["0", str(2**70)])
    @pytest.mark.parametrize("action", ["verify", "reject"])
    def test_out_of_range_reading_id(self, client: TestClient, auth_headers, reading_id, action):
        response = client.post(
            f"/admin/meter-readings/{reading_id}/{action}", headers=auth_headers("admin")
        )

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Invalid request"}

    def test_verify_then_verify_again(self, client: TestClient, auth_headers, pending_reading_id):
        path = f"/admin/meter-readings/{pending_reading_id}/verify"

        first = client.post(path, headers=auth_headers("admin"))
        assert first.status_code == 200
        body = first.json()
        assert body["message"] == "Meter reading verified successfully"
        assert body["data"]["status"] == "VERIFIED"
        assert body["data"]["isVerified"] is True
        assert body["data"]["notes"] == "Reading verified by admin"
        assert body["data"]["verifiedAt"] is not None

        second = client.post(path, headers=auth_headers("admin"))
        assert second.status_code == 409
        assert second.json() == {
            "success": False,
            "error": "Meter reading has already been VERIFIED",
        }

    def test_conflict_message_in_hindi(self, client: TestClient, auth_headers, pending_reading_id):
        path = f"/admin/meter-readings/{pending_reading_id}/reject"
        client.post(path, headers=auth_headers("admin"))

        response = client.post(f"{path}?lang=hi", headers=auth_headers("admin"))

        assert response.status_code == 409
        assert response.json()["error"] == "मीटर रीडिंग पहले ही REJECTED हो चुकी है"

    def test_verified_reading_becomes_baseline(
        self, client: TestClient, api_db, auth_headers, pending_reading_id
    ):
        client.post(
            f"/admin/meter-readings/{pending_reading_id}/verify", headers=auth_headers("staff")
        )

        response = client.post(
            "/meter-readings",
            json={"connectionId": api_db.electricity_id, "reading": 180.5},
            headers=auth_headers("citizen"),
        )

        data = response.json()["data"]
        assert data["previousReading"] == 150.0
        assert data["consumption"] == 30.5

    def test_unknown_reading(self, client: TestClient, auth_headers):
        response = client.post("/admin/meter-readings/424242/verify", headers=auth_headers("admin"))

        assert response.status_code == 404
        assert response.json()["error"] == "Meter reading not found"

    def test_reject_with_reason(self, client: TestClient, auth_headers, pending_reading_id):
        response = client.post(
            f"/admin/meter-readings/{pending_reading_id}/reject",
            json={"reason": "Photo is blurry"},
            headers=auth_headers("admin"),
        )

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Meter reading rejected successfully"
        assert body["data"]["status"] == "REJECTED"
        assert body["data"]["isVerified"] is False
        assert body["data"]["notes"] == "Photo is blurry"

    def test_reject_without_body(self, client: TestClient, auth_headers, pending_reading_id):
        response = client.post(
            f"/admin/meter-readings/{pending_reading_id}/reject", headers=auth_headers("admin")
        )

        assert response.status_code == 200
        assert response.json()["data"]["notes"] == "Reading rejected by admin"


class TestAdminFeeds:
    """Tests for activities, payments and service usage."""

    def test_activities(self, client: TestClient, auth_headers, pending_reading_id):
        response = client.get("/admin/activities?limit=3", headers=auth_headers("admin"))

        assert response.status_code == 200
        activities = response.json()["data"]
        assert len(activities) == 3
        assert activities[0]["type"] == "METER_READING"
        assert activities[0]["kioskId"] == "WEB"
        assert activities[0]["user"] == "Demo User"
        assert {"id", "type", "description", "timestamp", "serviceType"} <= set(activities[0])

    def test_payments(self, client: TestClient, auth_headers):
        response = client.get("/admin/payments", headers=auth_headers("admin"))

        assert response.status_code == 200
        data = response.json()["data"]
        assert set(data["stats"]) == {
            "todayTotal",
            "todayCount",
            "weekTotal",
            "weekCount",
            "monthTotal",
            "monthCount",
        }
        statuses = {p["status"] for p in data["payments"]}
        assert statuses == {"SUCCESS", "FAILED"}
        failed = next(p for p in data["payments"] if p["status"] == "FAILED")
        assert failed["transactionId"] == "TXN-CARD-42"
        assert failed["bill"]["billNo"] == "BILL-WATER-2024-0001"
        assert failed["bill"]["serviceType"] == "WATER"
        assert failed["bill"]["connection"]["connectionNo"] == "WATER-2024-005678"

    def test_payments_status_filter(self, client: TestClient, auth_headers):
        response = client.get("/admin/payments?status=FAILED", headers=auth_headers("admin"))

        payments = response.json()["data"]["payments"]
        assert [p["status"] for p in payments] == ["FAILED"]

    def test_service_usage_keys(self, client: TestClient, auth_headers):
        response = client.get("/admin/service-usage", headers=auth_headers("admin"))

        assert response.status_code == 200
        usage = response.json()["data"]
        assert set(usage) == {"ELECTRICITY", "GAS", "WATER", "MUNICIPAL", "WASTE"}
        assert all(set(entry) == {"count", "revenue"} for entry in usage.values())
        assert usage["WASTE"]["revenue"] == 0


class TestAdminConsole:
    """Tests for dashboard, lists and reports."""

    def test_dashboard(self, client: TestClient, auth_headers):
        response = client.get("/admin/dashboard", headers=auth_headers("admin"))

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["stats"]["totalUsers"] == 2
        assert data["stats"]["totalConnections"] == 2
        assert data["stats"]["pendingGrievances"] == 2
        assert data["stats"]["activeServices"] == {"ELECTRICITY": 1, "WATER": 1}
        assert [g["ticketNo"] for g in data["recentGrievances"]] == [
            "GRV-2024-000001",
            "GRV-2024-000002",
        ]

    def test_grievances_filtered(self, client: TestClient, auth_headers):
        response = client.get(
            "/admin/grievances?serviceType=WATER", headers=auth_headers("admin")
        )

        body = response.json()
        assert [g["ticketNo"] for g in body["data"]] == ["GRV-2024-000002"]
        assert body["data"][0]["user"] == {"name": "Demo User", "phone": "9876543210"}
        assert body["pagination"]["total"] == 1

    def test_connections_search(self, client: TestClient, auth_headers):
        response = client.get("/admin/connections?search=wtr-543", headers=auth_headers("admin"))

        body = response.json()
        assert response.status_code == 200
        assert len(body["data"]) == 1
        connection = body["data"][0]
        assert connection["connectionNo"] == "WATER-2024-005678"
        assert connection["billCount"] == 1
        assert connection["readingCount"] == 0
        assert connection["user"]["name"] == "Demo User"
        assert body["pagination"] == {"page": 1, "limit": 10, "total": 1, "totalPages": 1}

    def test_report_grievances(self, client: TestClient, auth_headers):
        response = client.get("/admin/reports?type=grievances", headers=auth_headers("admin"))

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["type"] == "grievances"
        assert set(data["period"]) == {"start", "end"}
        assert {"serviceType": "WATER", "status": "SUBMITTED", "count": 1} in data["report"]

    def test_report_invalid_type(self, client: TestClient, auth_headers):
        response = client.get("/admin/reports?type=readings", headers=auth_headers("admin"))

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid report type"

    def test_report_bad_date(self, client: TestClient, auth_headers):
        response = client.get(
            "/admin/reports?type=payments&startDate=yesterday", headers=auth_headers("admin")
        )

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Invalid request"}


class TestHealth:
    def test_health(self, client: TestClient):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}


class TestAdminRouteDocs:
    @pytest.mark.parametrize("route", admin_router.routes, ids=lambda r: r.name)
    def test_every_admin_route_documents_errors(self, route):
        """Each handler's docstring carries a Raises block for the OpenAPI description."""
        assert route.description
        assert "403: Caller is not ADMIN or STAFF" in route.description
