"""Contract tests for the citizen meter reading endpoints."""

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient


class TestSubmitMeterReading:
    """Tests for POST /meter-readings."""

    def test_missing_token_returns_401(self, client: TestClient, api_db):
        response = client.post(
            "/meter-readings", json={"connectionId": api_db.electricity_id, "reading": 150}
        )

        assert response.status_code == 401
        assert response.json() == {"success": False, "error": "Unauthorized"}

    def test_invalid_token_returns_401(self, client: TestClient, api_db):
        response = client.post(
            "/meter-readings",
            json={"connectionId": api_db.electricity_id, "reading": 150},
            headers={"Authorization": "Bearer forged.token"},
        )

        assert response.status_code == 401
        assert response.json()["error"] == "Invalid token"

    def test_missing_fields_returns_400(self, client: TestClient, auth_headers):
        response = client.post("/meter-readings", json={}, headers=auth_headers("citizen"))

        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "error": "Connection ID and reading are required",
        }

    def test_non_numeric_reading_returns_400(self, client: TestClient, api_db, auth_headers):
        response = client.post(
            "/meter-readings",
            json={"connectionId": api_db.electricity_id, "reading": "lots"},
            headers=auth_headers("citizen"),
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Reading must be a non-negative number"

    @pytest.mark.parametrize("reading", ["1e30", 1e30, "1" * 29, 10_000_000_000])
    def test_out_of_range_reading_returns_400(
        self, client: TestClient, api_db, auth_headers, reading
    ):
        response = client.post(
            "/meter-readings",
            json={"connectionId": api_db.electricity_id, "reading": reading},
            headers=auth_headers("citizen"),
        )

        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "error": "Reading must be a non-negative number",
        }

    @pytest.mark.parametrize("connection_id", [0, -3, 2**70])
    def test_out_of_range_connection_id_returns_400(
        self, client: TestClient, auth_headers, connection_id
    ):
        response = client.post(
            "/meter-readings",
            json={"connectionId": connection_id, "reading": 5},
            headers=auth_headers("citizen"),
        )

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Invalid request"}

    def test_malformed_body_returns_400_envelope(self, client: TestClient, auth_headers):
        response = client.post(
            "/meter-readings",
            json={"connectionId": "not-a-number", "reading": 1},
            headers=auth_headers("citizen"),
        )

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Invalid request"}

    def test_unknown_connection_returns_404(self, client: TestClient, auth_headers):
        response = client.post(
            "/meter-readings",
            json={"connectionId": 9999, "reading": 150},
            headers=auth_headers("citizen"),
        )

        assert response.status_code == 404
        assert response.json()["error"] == "Connection not found"

    def test_foreign_connection_returns_403(self, client: TestClient, api_db, auth_headers):
        response = client.post(
            "/meter-readings",
            json={"connectionId": api_db.electricity_id, "reading": 150},
            headers=auth_headers("other"),
        )

        assert response.status_code == 403
        assert response.json()["error"] == "Forbidden"

    def test_success_returns_camel_case_reading(self, client: TestClient, api_db, auth_headers):
        response = client.post(
            "/meter-readings",
            json={
                "connectionId": api_db.electricity_id,
                "reading": "150",
                "photoUrl": "https://cdn.example.in/m/1.jpg",
            },
            headers=auth_headers("citizen"),
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        data = body["data"]
        assert data["connectionId"] == api_db.electricity_id
        assert data["userId"] == api_db.citizen_id
        assert data["serviceType"] == "ELECTRICITY"
        assert data["reading"] == 150.0
        assert data["previousReading"] == 0.0
        assert data["consumption"] == 150.0
        assert data["status"] == "PENDING"
        assert data["isVerified"] is False
        assert data["submittedBy"] == "CITIZEN"
        assert data["photoUrl"] == "https://cdn.example.in/m/1.jpg"
        assert data["connection"] == {
            "connectionNo": "ELEC-2024-001234",
            "address": "123 Gandhi Road",
        }
        assert data["user"] == {"name": "Demo User", "phone": "9876543210"}

    def test_localized_error(self, client: TestClient, auth_headers):
        response = client.post(
            "/meter-readings?lang=hi",
            json={"connectionId": 9999, "reading": 1},
            headers=auth_headers("citizen"),
        )

        assert response.status_code == 404
        assert response.json()["error"] == "कनेक्शन नहीं मिला"

    def test_unexpected_failure_returns_generic_500(self, client: TestClient, api_db, auth_headers):
        with patch(
            "suvidha.api.meter_readings.MeterReadingService.submit_reading",
            side_effect=Exception("database is locked"),
        ):
            response = client.post(
                "/meter-readings",
                json={"connectionId": api_db.electricity_id, "reading": 150},
                headers=auth_headers("citizen"),
            )

        assert response.status_code == 500
        assert response.json() == {
            "success": False,
            "error": "Something went wrong. Please try again later.",
        }


class TestListMyMeterReadings:
    """Tests for GET /meter-readings."""

    def test_lists_own_readings(self, client: TestClient, api_db, auth_headers):
        for value in (100, 110):
            client.post(
                "/meter-readings",
                json={"connectionId": api_db.water_id, "reading": value},
                headers=auth_headers("citizen"),
            )

        response = client.get(
            f"/meter-readings?connectionId={api_db.water_id}", headers=auth_headers("citizen")
        )

        assert response.status_code == 200
        readings = response.json()["data"]
        assert [r["reading"] for r in readings] == [110.0, 100.0]

    def test_other_users_connection_forbidden(self, client: TestClient, api_db, auth_headers):
        response = client.get(
            f"/meter-readings?connectionId={api_db.water_id}", headers=auth_headers("other")
        )

        assert response.status_code == 403

    def test_out_of_range_connection_filter(self, client: TestClient, auth_headers):
        response = client.get(
            f"/meter-readings?connectionId={2**70}", headers=auth_headers("citizen")
        )

        assert response.status_code == 400
