"""
HTTP surface: user-triggered sync, background jobs and the service-to-service function.
"""
import pytest
from fastapi.testclient import TestClient

from app.core.config import settings
from app.core.dependencies import get_http_client, get_settings, get_supabase
from app.core.security import get_current_user_context
from app.middleware.rate_limit import limiter
from app.models.schemas.sync import SyncResult
from app.services.jobs.tasks import sync_hubspot_task
from app.services.sync.errors import InsertBatchError
from main import app

USER = {"user_id": "user-1", "organization_id": "org-1", "email": "recruiter@clearmatch.test"}


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setattr(settings, "sync_api_key", "sync-key")
    monkeypatch.setattr(settings, "hubspot_api_key", "hubspot-token")
    limiter.reset()

    app.dependency_overrides[get_supabase] = lambda: object()
    app.dependency_overrides[get_http_client] = lambda: object()
    app.dependency_overrides[get_current_user_context] = lambda: USER
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def sync_calls(monkeypatch):
    calls = []

    async def fake_sync(http_client, supabase, config, organization_id, actor_id):
        calls.append((organization_id, actor_id))
        return SyncResult(success=True, organization_id=organization_id, synced_count=2, inserted_count=2)

    monkeypatch.setattr("app.api.v1.routes.hubspot.sync_hubspot_contacts", fake_sync)
    monkeypatch.setattr("app.api.v1.routes.functions.sync_hubspot_contacts", fake_sync)
    return calls


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}
    assert client.get("/").json()["endpoints"]["sync"]["hubspot"] == "/api/hubspot/sync"


def test_sync_uses_callers_organization(client, sync_calls):
    response = client.post("/api/hubspot/sync")

    assert response.status_code == 200
    assert response.json()["success"] is True
    assert response.json()["synced_count"] == 2
    assert sync_calls == [("org-1", "user-1")]


def test_sync_failure_is_returned_as_result(client, monkeypatch):
    async def failing_sync(*args):
        return SyncResult(success=False, organization_id="org-1", error="HubSpot API error: 401", failed_stage="fetching")

    monkeypatch.setattr("app.api.v1.routes.hubspot.sync_hubspot_contacts", failing_sync)

    response = client.post("/api/hubspot/sync")

    assert response.status_code == 200
    assert response.json()["success"] is False
    assert response.json()["failed_stage"] == "fetching"


def test_sync_without_hubspot_token(client, sync_calls):
    app.dependency_overrides[get_settings] = lambda: settings.model_copy(update={"hubspot_api_key": ""})

    response = client.post("/api/hubspot/sync")

    assert response.status_code == 503
    assert sync_calls == []


def test_background_sync_enqueues_job(client, monkeypatch):
    sent = []

    async def fake_create_job(supabase, organization_id, user_id):
        return "job-1"

    monkeypatch.setattr("app.api.v1.routes.hubspot.create_sync_job", fake_create_job)
    monkeypatch.setattr(sync_hubspot_task, "send", lambda *args: sent.append(args))

    response = client.post("/api/hubspot/sync/background")

    assert response.status_code == 202
    assert response.json()["job_id"] == "job-1"
    assert response.json()["status"] == "queued"
    assert sent == [("org-1", "user-1", "job-1")]


def test_background_sync_enqueue_failure(client, monkeypatch):
    async def broken_create_job(*args):
        raise RuntimeError("database unavailable")

    monkeypatch.setattr("app.api.v1.routes.hubspot.create_sync_job", broken_create_job)

    response = client.post("/api/hubspot/sync/background")

    assert response.status_code == 500
    assert response.json()["detail"] == "Could not start HubSpot sync"


def test_job_status(client, monkeypatch):
    jobs = {"job-1": {"id": "job-1", "status": "completed", "organization_id": "org-1"}}

    async def fake_get_job(supabase, job_id, organization_id):
        assert organization_id == "org-1"
        return jobs.get(job_id)

    monkeypatch.setattr("app.api.v1.routes.hubspot.get_sync_job", fake_get_job)

    assert client.get("/api/hubspot/sync/jobs/job-1").json()["status"] == "completed"
    assert client.get("/api/hubspot/sync/jobs/other").status_code == 404


def test_sync_requires_authentication(client):
    del app.dependency_overrides[get_current_user_context]

    response = client.post("/api/hubspot/sync")

    assert response.status_code == 401


def test_function_sync_with_api_key(client, sync_calls):
    response = client.post(
        "/functions/v1/sync-hubspot",
        json={"organization_id": "org-9", "actor_id": "svc"},
        headers={"X-API-Key": "sync-key"},
    )

    assert response.status_code == 200
    assert response.json()["organization_id"] == "org-9"
    assert sync_calls == [("org-9", "svc")]


def test_function_sync_actor_is_optional(client, sync_calls):
    response = client.post(
        "/functions/v1/sync-hubspot",
        json={"organization_id": "org-9"},
        headers={"X-API-Key": "sync-key"},
    )

    assert response.status_code == 200
    assert sync_calls == [("org-9", None)]


@pytest.mark.parametrize("headers", [{}, {"X-API-Key": "wrong-key"}])
def test_function_sync_rejects_bad_api_key(client, sync_calls, headers):
    response = client.post("/functions/v1/sync-hubspot", json={"organization_id": "org-9"}, headers=headers)

    assert response.status_code == 401
    assert sync_calls == []


def test_function_sync_requires_organization(client, sync_calls):
    response = client.post("/functions/v1/sync-hubspot", json={"organization_id": ""}, headers={"X-API-Key": "sync-key"})

    assert response.status_code == 422
    assert sync_calls == []


def test_escaped_sync_error_becomes_json_500(client, monkeypatch):
    async def raising_sync(*args):
        raise InsertBatchError("Candidate insert failed: boom", record_count=3)

    monkeypatch.setattr("app.api.v1.routes.hubspot.sync_hubspot_contacts", raising_sync)

    response = client.post("/api/hubspot/sync", headers={"X-Request-ID": "req-123"})

    assert response.status_code == 500
    body = response.json()
    assert body["error_code"] == "insert_batch_failed"
    assert body["request_id"] == "req-123"
