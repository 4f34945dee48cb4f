"""Tests for job API routes."""

from unittest.mock import MagicMock

import httpx

from app.database import get_job_storage
from app.main import app
from gigboard.errors import StoreUnavailableError


class TestCreateJob:
    """Tests for posting jobs."""

    def test_create_job_success(self, client, employer_headers, job_payload):
        response = client.post("/api/v1/jobs", json=job_payload, headers=employer_headers)

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "open"
        assert data["status_label"] == "Available"
        assert data["worker_id"] is None
        assert data["total_pay"] == 450
        assert data["category_label"] == "Retail"
        assert data["next_actions"] == ["cancelled"]

    def test_status_in_payload_is_ignored(self, client, employer_headers, job_payload):
        payload = {**job_payload, "status": "completed"}
        response = client.post("/api/v1/jobs", json=payload, headers=employer_headers)

        assert response.json()["status"] == "open"

    def test_zero_rate_rejected(self, client, employer_headers, job_storage, job_payload):
        payload = {**job_payload, "hourly_rate": 0, "duration_hours": 0}
        response = client.post("/api/v1/jobs", json=payload, headers=employer_headers)

        assert response.status_code == 422
        body = response.json()
        assert body["code"] == "validation_error"
        assert set(body["errors"]) == {"hourly_rate", "duration_hours"}
        assert job_storage.list_jobs() == []

    def test_split_start_fields(self, client, employer_headers, job_payload):
        payload = {**job_payload, "start_date": "2030-06-01", "start_clock": "18:00"}
        del payload["start_time"]
        response = client.post("/api/v1/jobs", json=payload, headers=employer_headers)

        assert response.status_code == 201
        assert response.json()["start_time"].startswith("2030-06-01T18:00")

    def test_worker_cannot_post(self, client, worker_headers, job_payload):
        response = client.post("/api/v1/jobs", json=job_payload, headers=worker_headers)

        assert response.status_code == 403
        assert response.json()["code"] == "unauthorized"

    def test_requires_token(self, client, job_payload):
        response = client.post("/api/v1/jobs", json=job_payload)

        assert response.status_code == 401


class TestListJobs:
    def test_open_jobs_with_employer(self, client, worker_headers, posted_job):
        response = client.get("/api/v1/jobs", headers=worker_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        job = data["jobs"][0]
        assert job["employer"]["full_name"] == "Emma Employer"
        assert job["next_actions"] == ["accepted"]

    def test_filters(self, client, worker_headers, posted_job):
        assert client.get(
            "/api/v1/jobs", params={"category": "warehouse"}, headers=worker_headers
        ).json()["total"] == 0
        assert client.get(
            "/api/v1/jobs", params={"q": "shelf"}, headers=worker_headers
        ).json()["total"] == 1

    def test_unknown_category(self, client, worker_headers):
        response = client.get("/api/v1/jobs", params={"category": "gardening"}, headers=worker_headers)
        assert response.status_code == 422

    def test_my_jobs(self, client, employer_headers, worker_headers, posted_job):
        client.post(f"/api/v1/jobs/{posted_job['id']}/accept", headers=worker_headers)

        mine = client.get("/api/v1/jobs/mine", headers=worker_headers).json()
        assert [j["id"] for j in mine["jobs"]] == [posted_job["id"]]

        posted = client.get(
            "/api/v1/jobs/mine", params={"group": "active"}, headers=employer_headers
        ).json()
        assert posted["jobs"][0]["worker"]["full_name"] == "Wendy Worker"

    def test_get_missing_job(self, client, worker_headers):
        response = client.get("/api/v1/jobs/nope", headers=worker_headers)

        assert response.status_code == 404
        assert "not found" in response.json()["detail"].lower()


class TestLifecycleRoutes:
    """Accept, start, complete, cancel."""

    def test_full_lifecycle(self, client, signup, token_for, employer_headers, worker_headers, posted_job):
        signup("usr_worker_2", "Walt Worker", "worker")
        job_id = posted_job["id"]

        accepted = client.post(f"/api/v1/jobs/{job_id}/accept", headers=worker_headers)
        assert accepted.status_code == 200
        assert accepted.json()["status"] == "accepted"

        late = client.post(f"/api/v1/jobs/{job_id}/accept", headers=token_for("usr_worker_2"))
        assert late.status_code == 409
        assert late.json()["code"] == "conflict"

        started = client.post(f"/api/v1/jobs/{job_id}/start", headers=employer_headers)
        assert started.json()["status"] == "in_progress"

        completed = client.post(f"/api/v1/jobs/{job_id}/complete", headers=employer_headers)
        assert completed.json()["status"] == "completed"
        assert completed.json()["next_actions"] == []

        stats = client.get("/api/v1/jobs/stats", headers=employer_headers).json()
        assert stats == {"total_jobs": 1, "completed_jobs": 1, "total_spend": 450.0}

    def test_cancel_accepted_job_is_illegal(self, client, employer_headers, worker_headers, posted_job):
        client.post(f"/api/v1/jobs/{posted_job['id']}/accept", headers=worker_headers)

        response = client.post(f"/api/v1/jobs/{posted_job['id']}/cancel", headers=employer_headers)

        assert response.status_code == 400
        assert response.json()["code"] == "illegal_transition"

    def test_other_employer_forbidden(self, client, signup, token_for, worker_headers, posted_job):
        signup("usr_employer_2", "Oscar Owner", "employer")
        client.post(f"/api/v1/jobs/{posted_job['id']}/accept", headers=worker_headers)

        response = client.post(
            f"/api/v1/jobs/{posted_job['id']}/start", headers=token_for("usr_employer_2")
        )

        assert response.status_code == 403
        assert response.json()["code"] == "forbidden"

    def test_employer_cannot_accept(self, client, employer_headers, posted_job):
        response = client.post(f"/api/v1/jobs/{posted_job['id']}/accept", headers=employer_headers)
        assert response.status_code == 403

    def test_worker_has_no_stats(self, client, worker_headers):
        assert client.get("/api/v1/jobs/stats", headers=worker_headers).status_code == 403


class TestRatingRoutes:
    def test_rate_completed_job(self, client, employer_headers, worker_headers, posted_job):
        job_id = posted_job["id"]
        client.post(f"/api/v1/jobs/{job_id}/accept", headers=worker_headers)
        client.post(f"/api/v1/jobs/{job_id}/start", headers=employer_headers)
        client.post(f"/api/v1/jobs/{job_id}/complete", headers=employer_headers)

        response = client.post(
            f"/api/v1/jobs/{job_id}/ratings",
            json={"rating": 5, "review": "Great"},
            headers=employer_headers,
        )
        assert response.status_code == 201
        rated_id = response.json()["rated_id"]

        again = client.post(
            f"/api/v1/jobs/{job_id}/ratings", json={"rating": 1}, headers=employer_headers
        )
        assert again.status_code == 409

        received = client.get(f"/api/v1/profiles/{rated_id}/ratings", headers=worker_headers)
        assert received.json()["total"] == 1

    def test_open_job_cannot_be_rated(self, client, employer_headers, posted_job):
        response = client.post(
            f"/api/v1/jobs/{posted_job['id']}/ratings", json={"rating": 4}, headers=employer_headers
        )
        assert response.status_code == 422


class TestStoreFailures:
    def test_store_unavailable_is_503(self, client, worker_headers):
        broken = MagicMock()
        broken.list_jobs.side_effect = StoreUnavailableError(
            "Failed to list jobs", cause=httpx.ConnectTimeout("timed out")
        )
        app.dependency_overrides[get_job_storage] = lambda: broken

        response = client.get("/api/v1/jobs", headers=worker_headers)

        assert response.status_code == 503
        assert response.json()["code"] == "store_unavailable"
