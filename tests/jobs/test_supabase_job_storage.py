"""Tests for the Supabase-backed job storage."""

import httpx
import pytest
from postgrest.exceptions import APIError

from gigboard.errors import StoreUnavailableError
from gigboard.jobs.storage import SupabaseJobStorage, open_job_row


@pytest.fixture
def storage(mock_supabase_client):
    return SupabaseJobStorage(mock_supabase_client)


class TestListJobs:
    def test_open_jobs_query(self, storage, mock_supabase_client, job_row):
        query = mock_supabase_client.query
        query.execute.return_value.data = [
            job_row(employer={"full_name": "Emma", "rating": 4, "is_verified": False})
        ]

        jobs = storage.list_jobs(statuses=["open"], joins=("employer",), limit=20)

        mock_supabase_client.table.assert_called_with("jobs")
        query.select.assert_called_once_with(
            "*, employer:employer_id (full_name, rating, is_verified)"
        )
        query.eq.assert_any_call("status", "open")
        query.order.assert_called_once_with("created_at", desc=True)
        query.limit.assert_called_once_with(20)
        assert jobs[0].employer.full_name == "Emma"

    def test_first_page_has_no_offset(self, storage, mock_supabase_client):
        storage.list_jobs(employer_id="emp-1", limit=50)

        mock_supabase_client.query.offset.assert_not_called()

    def test_later_pages_use_offset(self, storage, mock_supabase_client):
        storage.list_jobs(employer_id="emp-1", limit=50, offset=100)

        mock_supabase_client.query.limit.assert_called_once_with(50)
        mock_supabase_client.query.offset.assert_called_once_with(100)

    def test_status_group_uses_in(self, storage, mock_supabase_client):
        storage.list_jobs(statuses=["accepted", "in_progress", "open"], employer_id="emp-1")

        query = mock_supabase_client.query
        query.in_.assert_called_once_with("status", ["accepted", "in_progress", "open"])
        query.eq.assert_any_call("employer_id", "emp-1")

    def test_search_is_sanitised(self, storage, mock_supabase_client):
        storage.list_jobs(search_text="shelf,(stack)*")

        mock_supabase_client.query.or_.assert_called_once_with(
            "title.ilike.%shelfstack%,description.ilike.%shelfstack%,city.ilike.%shelfstack%"
        )

    def test_search_of_only_symbols_is_dropped(self, storage, mock_supabase_client):
        storage.list_jobs(search_text="%%,")
        mock_supabase_client.query.or_.assert_not_called()


class TestConditionalUpdate:
    def test_update_is_scoped_by_status(self, storage, mock_supabase_client, job_row):
        query = mock_supabase_client.query
        query.execute.return_value.data = [job_row(status="accepted", worker_id="w-1")]

        job = storage.update_job_if(
            "job-1", {"status": "accepted", "worker_id": "w-1"}, expected_status="open"
        )

        update_data = query.update.call_args[0][0]
        assert update_data["status"] == "accepted"
        assert "updated_at" in update_data
        query.eq.assert_any_call("id", "job-1")
        query.eq.assert_any_call("status", "open")
        assert job.worker_id == "w-1"

    def test_employer_scope(self, storage, mock_supabase_client):
        storage.update_job_if(
            "job-1", {"status": "cancelled"}, expected_status="open", employer_id="emp-1"
        )
        mock_supabase_client.query.eq.assert_any_call("employer_id", "emp-1")

    def test_zero_rows_returns_none(self, storage, mock_supabase_client):
        mock_supabase_client.query.execute.return_value.data = []
        assert storage.update_job_if("job-1", {"status": "cancelled"}, "open") is None


class TestStoreErrors:
    def test_api_error_becomes_store_unavailable(self, storage, mock_supabase_client):
        mock_supabase_client.query.execute.side_effect = APIError(
            {"message": "boom", "code": "500", "hint": None, "details": None}
        )

        with pytest.raises(StoreUnavailableError) as exc_info:
            storage.get_job("job-1")

        assert isinstance(exc_info.value.cause, APIError)

    def test_timeout_becomes_store_unavailable(self, storage, mock_supabase_client):
        mock_supabase_client.query.execute.side_effect = httpx.ReadTimeout("slow")

        with pytest.raises(StoreUnavailableError):
            storage.list_jobs()

    def test_insert_without_row(self, storage, mock_supabase_client):
        mock_supabase_client.query.execute.return_value.data = []
        with pytest.raises(StoreUnavailableError):
            storage.insert_job({"title": "x"})


def test_get_missing_job(storage, mock_supabase_client):
    assert storage.get_job("nope") is None


def test_open_job_row_forces_state():
    row = open_job_row("emp-1", {"title": "T", "status": "completed", "worker_id": "w"})
    assert row["status"] == "open"
    assert row["worker_id"] is None
    assert row["employer_id"] == "emp-1"
