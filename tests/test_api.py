from __future__ import annotations

import base64

from fastapi.testclient import TestClient

from queue_monitor.app import create_app
from queue_monitor.config import BACKEND_IN_MEMORY, Settings
from queue_monitor.core.errors import BackendTimeoutError, BackendUnavailableError
from queue_monitor.core.schema import ChainMessage, GroupMessage


def _decode(value: str) -> bytes:
    return base64.b64decode(value, validate=True)


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_dashboard_stats(client):
    response = client.get("/api/stats")

    assert response.status_code == 200
    assert response.json() == {
        "total_pending": 1,
        "total_success": 1,
        "total_failed": 1,
        "queue_stats": {"default": 1},
        "registered_tasks": ["add", "multiply"],
    }


def test_dashboard_reports_outage_as_service_unavailable(client, seeded_backend, monkeypatch):
    def unavailable(_status):
        raise BackendUnavailableError("redis list status failed: connection refused")

    monkeypatch.setattr(seeded_backend, "list_by_status", unavailable)

    response = client.get("/api/stats")

    assert response.status_code == 503
    assert "connection refused" in response.json()["detail"]


def test_timeout_maps_to_gateway_timeout(client, seeded_backend, monkeypatch):
    def timeout(_job_id):
        raise BackendTimeoutError("redis get job timed out")

    monkeypatch.setattr(seeded_backend, "fetch_job", timeout)

    response = client.get("/api/jobs/j1")

    assert response.status_code == 504


def test_get_job_includes_result_and_payload(client):
    response = client.get("/api/jobs/j1")

    assert response.status_code == 200
    body = response.json()
    assert body["id"] == "j1"
    assert body["status"] == "successful"
    assert _decode(body["result_data"]) == b'{"result": 3}'
    assert _decode(body["payload"]) == b'{"arg1": 1, "arg2": 2}'


def test_get_missing_job(client):
    response = client.get("/api/jobs/nope")

    assert response.status_code == 404
    assert response.json()["detail"] == "job not found: nope"


def test_jobs_by_status(client):
    response = client.get("/api/jobs", params={"status": "successful"})

    assert response.status_code == 200
    assert response.json() == {"status": "successful", "job_ids": ["j1"], "count": 1}


def test_jobs_by_status_requires_valid_filter(client):
    assert client.get("/api/jobs").status_code == 400

    response = client.get("/api/jobs", params={"status": "processing"})
    assert response.status_code == 400
    assert response.json()["detail"] == "unsupported status filter: processing"


def test_pending_endpoints(client, seeded_backend, make_job):
    for index in range(4):
        seeded_backend.enqueue(make_job(f"extra-{index}"))

    legacy = client.get("/api/jobs/pending/default")
    assert [job["id"] for job in legacy.json()] == ["j3", "extra-0", "extra-1", "extra-2", "extra-3"]

    count = client.get("/api/jobs/pending/default/count")
    assert count.json() == {"queue": "default", "count": 5}

    page = client.get("/api/jobs/pending/default/paginated", params={"offset": 3, "limit": 10}).json()
    assert [job["id"] for job in page["jobs"]] == ["extra-2", "extra-3"]
    assert (page["total"], page["offset"], page["limit"]) == (5, 3, 10)


def test_paginated_pending_normalises_window(client):
    page = client.get("/api/jobs/pending/default/paginated", params={"offset": -4, "limit": 0}).json()

    assert page["offset"] == 0
    assert page["limit"] == 20
    assert page["total"] == 1


def test_delete_job(client):
    response = client.delete("/api/jobs/j2")
    assert response.status_code == 200
    assert response.json() == {"message": "job deleted successfully"}

    assert client.get("/api/jobs/j2").status_code == 404
    assert client.delete("/api/jobs/j2").status_code == 404


def test_chain_endpoints(client, seeded_backend):
    seeded_backend.add_chain(ChainMessage(id="chain-1", job_id="j3", prev_jobs=["j1", "lost"]))

    listing = client.get("/api/chains").json()
    assert listing == {"chains": ["chain-1"], "count": 1}

    detail = client.get("/api/chains/chain-1").json()
    assert [job["id"] for job in detail["jobs"]] == ["j1", "j3"]
    assert detail["prev_jobs"] == ["j1", "lost"]

    assert client.get("/api/chains/missing").status_code == 404


def test_group_endpoints(client, seeded_backend):
    seeded_backend.add_group(GroupMessage(id="group-1", job_status={"j1": "successful", "j2": "failed"}))

    assert client.get("/api/groups").json() == {"groups": ["group-1"], "count": 1}

    detail = client.get("/api/groups/group-1").json()
    assert sorted(job["id"] for job in detail["jobs"]) == ["j1", "j2"]
    assert detail["job_status"] == {"j1": "successful", "j2": "failed"}


def test_search_group(client, seeded_backend):
    seeded_backend.add_group(GroupMessage(id="group-9", job_status={"j3": "queued"}))

    response = client.get("/api/search", params={"q": "group-9"})

    assert response.status_code == 200
    body = response.json()
    assert body["type"] == "group"
    assert body["group"]["id"] == "group-9"
    assert "job" not in body
    assert "chain" not in body


def test_search_job(client):
    body = client.get("/api/search", params={"q": "j1"}).json()

    assert body["type"] == "job"
    assert body["job"]["id"] == "j1"


def test_search_not_found_and_missing_query(client):
    response = client.get("/api/search", params={"q": "ghost"})
    assert response.status_code == 404
    assert response.json()["detail"] == "no job, chain, or group found with ID: ghost"

    assert client.get("/api/search").status_code == 400


def test_app_builds_backend_from_settings():
    app = create_app(Settings(backend=BACKEND_IN_MEMORY, registered_tasks=["resize"]))

    with TestClient(app) as test_client:
        stats = test_client.get("/api/stats").json()

    assert stats["total_pending"] == 0
    assert stats["queue_stats"] == {"tasqueue:tasks": 0}
    assert stats["registered_tasks"] == ["resize"]


def test_bytes_use_standard_base64_alphabet(client, seeded_backend, make_job):
    seeded_backend.add_job(make_job("binary", payload=b"\xfb\xff\xfe"))
    seeded_backend.save_result("binary", b"\xfb\xff\xfe")

    body = client.get("/api/jobs/binary").json()

    assert body["payload"] == "+//+"
    assert body["result_data"] == "+//+"
