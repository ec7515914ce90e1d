"""End-to-end tests for the HTTP API."""

import io
import re
from datetime import datetime

import pandas as pd
import pytest

from civil_registry.api.v1 import stats as stats_routes
from civil_registry.core.exceptions import StatsUnavailableError
from civil_registry.models.user import UserRole

API = "/api/v1"

BIRTH = {
    "child_first_name": "Ama",
    "child_last_name": "Mensah",
    "child_sex": "Female",
    "birth_date": "2025-03-04",
    "birth_place": "Ridge Hospital, Greater Accra",
    "father_name": "Kwame Mensah",
    "father_national_id": "GHA-123456789-0",
    "mother_name": "Akosua Mensah",
    "mother_national_id": "GHA-987654321-0",
}

DEATH = {
    "deceased_name": "Yaw Boateng",
    "death_date": "2025-05-06",
    "death_place": "Komfo Anokye Hospital, Ashanti",
    "cause_of_death": "Heart failure",
    "kin_name": "Abena Boateng",
    "kin_relationship": "Daughter",
    "kin_phone": "+233 24 123 4567",
}


@pytest.fixture
def citizen(make_user):
    return make_user(UserRole.PUBLIC)


@pytest.fixture
def registrar(make_user):
    return make_user(UserRole.REGISTRAR)


@pytest.fixture
def admin(make_user):
    return make_user(UserRole.ADMIN)


@pytest.fixture
def health_worker(make_user):
    return make_user(UserRole.HEALTH_WORKER)


def submit_birth(client, headers, **overrides):
    response = client.post(f"{API}/birth-registrations/", json={**BIRTH, **overrides}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


class TestService:
    def test_root(self, client):
        assert client.get("/").json()["api"] == API

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "healthy"}


class TestAuth:
    def test_register_login_and_me(self, client):
        response = client.post(
            f"{API}/auth/register",
            json={"email": "Kojo@Example.com", "password": "long-enough", "full_name": "Kojo"},
        )
        assert response.status_code == 201
        assert response.json()["role"] == "public"

        response = client.post(f"{API}/auth/login", json={"email": "kojo@example.com", "password": "long-enough"})
        assert response.status_code == 200
        token = response.json()["access_token"]

        me = client.get(f"{API}/users/me", headers={"Authorization": f"Bearer {token}"})
        assert me.status_code == 200
        assert me.json()["email"] == "kojo@example.com"

    def test_duplicate_email_rejected(self, client, citizen):
        response = client.post(
            f"{API}/auth/register", json={"email": citizen.email, "password": "long-enough"}
        )
        assert response.status_code == 400

    def test_wrong_password(self, client, citizen):
        response = client.post(f"{API}/auth/login", json={"email": citizen.email, "password": "nope-nope"})
        assert response.status_code == 400

    def test_missing_token(self, client):
        assert client.get(f"{API}/users/me").status_code in (401, 403)

    def test_garbage_token(self, client):
        response = client.get(f"{API}/users/me", headers={"Authorization": "Bearer garbage"})
        assert response.status_code == 403


class TestRoles:
    def test_admin_changes_role(self, client, admin, citizen, auth_headers):
        response = client.put(
            f"{API}/users/{citizen.id}/role", json={"role": "registrar"}, headers=auth_headers(admin)
        )
        assert response.status_code == 200
        assert response.json()["role"] == "registrar"

    def test_invalid_role(self, client, admin, citizen, auth_headers):
        response = client.put(
            f"{API}/users/{citizen.id}/role", json={"role": "emperor"}, headers=auth_headers(admin)
        )
        assert response.status_code == 400

    def test_registrar_cannot_change_roles(self, client, registrar, citizen, auth_headers):
        response = client.put(
            f"{API}/users/{citizen.id}/role", json={"role": "admin"}, headers=auth_headers(registrar)
        )
        assert response.status_code == 403
        assert response.json()["detail"] == "Insufficient permissions to update user roles"


class TestBirthRegistrations:
    def test_submit(self, client, citizen, auth_headers):
        body = submit_birth(client, auth_headers(citizen))

        assert re.fullmatch(r"BR-\d{4}-\d{6}", body["application_id"])
        assert body["status"] == "pending"
        assert body["certificate_id"] is None
        assert body["submitted_by"] == citizen.id

    def test_registrar_cannot_submit(self, client, registrar, auth_headers):
        response = client.post(f"{API}/birth-registrations/", json=BIRTH, headers=auth_headers(registrar))
        assert response.status_code == 403

    def test_validation_error(self, client, citizen, auth_headers):
        response = client.post(
            f"{API}/birth-registrations/", json={**BIRTH, "child_sex": "unknown"}, headers=auth_headers(citizen)
        )
        assert response.status_code == 422

    def test_listing_depends_on_role(self, client, citizen, make_user, registrar, auth_headers):
        other = make_user(UserRole.PUBLIC)
        mine = submit_birth(client, auth_headers(citizen))
        theirs = submit_birth(client, auth_headers(other))

        own = client.get(f"{API}/birth-registrations/", headers=auth_headers(citizen)).json()
        queue = client.get(f"{API}/birth-registrations/", headers=auth_headers(registrar)).json()

        assert [r["id"] for r in own] == [mine["id"]]
        assert {r["id"] for r in queue} == {mine["id"], theirs["id"]}

    def test_only_owner_or_reviewer_can_read(self, client, citizen, make_user, registrar, auth_headers):
        record = submit_birth(client, auth_headers(citizen))
        url = f"{API}/birth-registrations/{record['id']}"

        assert client.get(url, headers=auth_headers(citizen)).status_code == 200
        assert client.get(url, headers=auth_headers(registrar)).status_code == 200
        assert client.get(url, headers=auth_headers(make_user(UserRole.PUBLIC))).status_code == 403

    def test_track_by_application_id(self, client, citizen, auth_headers):
        record = submit_birth(client, auth_headers(citizen))

        response = client.get(
            f"{API}/birth-registrations/application/{record['application_id']}", headers=auth_headers(citizen)
        )

        assert response.status_code == 200
        assert response.json()["id"] == record["id"]

    def test_unknown_record(self, client, citizen, auth_headers):
        assert client.get(f"{API}/birth-registrations/999", headers=auth_headers(citizen)).status_code == 404


class TestReview:
    def status_url(self, record):
        return f"{API}/birth-registrations/{record['id']}/status"

    def test_approve_then_verify(self, client, citizen, registrar, auth_headers):
        record = submit_birth(client, auth_headers(citizen))

        response = client.put(self.status_url(record), json={"status": "approved"}, headers=auth_headers(registrar))
        assert response.status_code == 200
        approved = response.json()
        assert re.fullmatch(r"BC-\d{4}-\d{6}", approved["certificate_id"])
        assert approved["approved_by"] == registrar.id
        assert approved["approved_at"] is not None

        verification = client.get(f"{API}/verify/{approved['certificate_id']}").json()
        assert verification["valid"] is True
        assert verification["type"] == "birth"
        assert verification["fullName"] == "Ama Mensah"
        assert verification["registrationOffice"] == "Ghana Births and Deaths Registry"

    def test_second_decision_conflicts(self, client, citizen, registrar, auth_headers):
        record = submit_birth(client, auth_headers(citizen))
        client.put(self.status_url(record), json={"status": "approved"}, headers=auth_headers(registrar))

        response = client.put(
            self.status_url(record),
            json={"status": "rejected", "rejection_reason": "Too late"},
            headers=auth_headers(registrar),
        )

        assert response.status_code == 409

    def test_reject_requires_reason(self, client, citizen, registrar, auth_headers):
        record = submit_birth(client, auth_headers(citizen))

        response = client.put(self.status_url(record), json={"status": "rejected"}, headers=auth_headers(registrar))

        assert response.status_code == 400
        assert response.json()["detail"] == "A rejection reason is required"

    def test_invalid_status(self, client, citizen, registrar, auth_headers):
        record = submit_birth(client, auth_headers(citizen))

        response = client.put(self.status_url(record), json={"status": "pending"}, headers=auth_headers(registrar))

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid status"

    def test_citizen_cannot_review(self, client, citizen, auth_headers):
        record = submit_birth(client, auth_headers(citizen))

        response = client.put(self.status_url(record), json={"status": "approved"}, headers=auth_headers(citizen))

        assert response.status_code == 403

    def test_rejected_certificate_does_not_verify(self, client, citizen, registrar, auth_headers):
        record = submit_birth(client, auth_headers(citizen))
        client.put(
            self.status_url(record),
            json={"status": "rejected", "rejection_reason": "Missing documents"},
            headers=auth_headers(registrar),
        )

        assert client.get(f"{API}/verify/BC-2026-000001").json() == {
            "valid": False,
            "message": "Certificate not found or not approved",
        }


class TestDeathRegistrations:
    def test_submit_and_approve(self, client, health_worker, admin, auth_headers):
        response = client.post(f"{API}/death-registrations/", json=DEATH, headers=auth_headers(health_worker))
        assert response.status_code == 201
        record = response.json()
        assert record["application_id"].startswith("DR-")

        response = client.put(
            f"{API}/death-registrations/{record['id']}/status",
            json={"status": "approved"},
            headers=auth_headers(admin),
        )
        assert response.status_code == 200
        certificate_id = response.json()["certificate_id"]
        assert certificate_id.startswith("DC-")

        verification = client.get(f"{API}/verify/{certificate_id}").json()
        assert verification["type"] == "death"
        assert verification["fullName"] == "Yaw Boateng"


class TestStatsEndpoint:
    def test_requires_reviewer(self, client, citizen, auth_headers):
        response = client.get(f"{API}/stats", headers=auth_headers(citizen))
        assert response.status_code == 403
        assert response.json() == {"detail": "Insufficient permissions to view statistics"}

    def test_payload(self, client, citizen, registrar, auth_headers):
        submit_birth(client, auth_headers(citizen))
        submit_birth(client, auth_headers(citizen))
        client.post(f"{API}/death-registrations/", json=DEATH, headers=auth_headers(citizen))

        response = client.get(f"{API}/stats", headers=auth_headers(registrar))

        assert response.status_code == 200
        body = response.json()
        assert body["pendingBirth"] == 2
        assert body["pendingDeath"] == 1
        assert body["totalRegistrations"] == 3
        assert body["registrationsByStatus"] == {"approved": 0, "pending": 3, "rejected": 0}
        assert body["processingTimes"] == {"averageApprovalTime": 0, "fastestApproval": 0}
        assert len(body["registrationTrends"]["labels"]) == 7
        assert len(body["recentRegistrations"]) == 3
        accra = next(row for row in body["regionalData"] if row["region"] == "Greater Accra")
        assert accra == {"region": "Greater Accra", "births": 2, "deaths": 0}

    def test_failure_surfaces_as_single_error(self, client, admin, auth_headers, monkeypatch):
        def broken(db):
            raise StatsUnavailableError()

        monkeypatch.setattr(stats_routes, "get_dashboard_stats", broken)

        response = client.get(f"{API}/stats", headers=auth_headers(admin))

        assert response.status_code == 500
        assert response.json() == {"detail": "Failed to fetch statistics"}


def excel_upload(rows):
    buffer = io.BytesIO()
    pd.DataFrame(rows).to_excel(buffer, index=False, engine="openpyxl")
    return {
        "file": (
            "register.xlsx",
            buffer.getvalue(),
            "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        )
    }


class TestBulkUpload:
    def rows(self):
        return [
            {**BIRTH, "birth_date": datetime(2025, 3, 4)},
            {**BIRTH, "child_first_name": "Kofi", "child_sex": "Male", "birth_date": datetime(2025, 3, 5)},
            {**BIRTH, "child_sex": "Unknown", "birth_date": datetime(2025, 3, 6)},
        ]

    def test_dry_run_creates_nothing(self, client, health_worker, registrar, auth_headers):
        response = client.post(
            f"{API}/birth-registrations/upload-excel/?dry_run=true",
            files=excel_upload(self.rows()),
            headers=auth_headers(health_worker),
        )

        assert response.status_code == 200
        body = response.json()
        assert body["dry_run"] is True
        assert body["success_count"] == 2
        assert body["error_count"] == 1
        assert client.get(f"{API}/birth-registrations/", headers=auth_headers(registrar)).json() == []

    def test_upload_creates_pending_registrations(self, client, health_worker, registrar, auth_headers):
        response = client.post(
            f"{API}/birth-registrations/upload-excel/",
            files=excel_upload(self.rows()),
            headers=auth_headers(health_worker),
        )

        body = response.json()
        assert body["success_count"] == 2
        assert len(body["errors"]["validation_errors"]) == 1
        assert body["errors"]["validation_errors"][0].startswith("Sheet1 row 4")
        queue = client.get(f"{API}/birth-registrations/", headers=auth_headers(registrar)).json()
        assert len(queue) == 2

    def test_rejects_non_excel(self, client, health_worker, auth_headers):
        response = client.post(
            f"{API}/birth-registrations/upload-excel/",
            files={"file": ("register.csv", b"a,b\n1,2\n", "text/csv")},
            headers=auth_headers(health_worker),
        )
        assert response.status_code == 400

    def test_citizen_cannot_upload(self, client, citizen, auth_headers):
        response = client.post(
            f"{API}/birth-registrations/upload-excel/",
            files=excel_upload(self.rows()),
            headers=auth_headers(citizen),
        )
        assert response.status_code == 403
