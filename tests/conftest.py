from __future__ import annotations

from collections.abc import Callable

import pytest
from fastapi.testclient import TestClient

from queue_monitor.application import MonitorService, reset_monitor_service
from queue_monitor.config import BACKEND_IN_MEMORY, Settings
from queue_monitor.core.schema import JobMessage
from queue_monitor.domain import STATUS_QUEUED
from queue_monitor.infrastructure import InMemoryBackend

QUEUE = "default"


@pytest.fixture(autouse=True)
def reset_state():
    reset_monitor_service()
    yield
    reset_monitor_service()


@pytest.fixture()
def make_job() -> Callable[..., JobMessage]:
    def _make(job_id: str, status: str = STATUS_QUEUED, **fields) -> JobMessage:
        fields.setdefault("task", "add")
        fields.setdefault("queue", QUEUE)
        fields.setdefault("payload", b'{"arg1": 1, "arg2": 2}')
        return JobMessage(id=job_id, status=status, **fields)

    return _make


@pytest.fixture()
def backend() -> InMemoryBackend:
    return InMemoryBackend(registered_tasks=["multiply", "add"])


@pytest.fixture()
def seeded_backend(backend, make_job) -> InMemoryBackend:
    """j1 successful, j2 failed, j3 waiting in the default queue."""

    j1 = backend.add_job(make_job("j1", "successful"))
    backend.mark_status(j1.id, "successful")
    backend.save_result(j1.id, b'{"result": 3}')
    j2 = backend.add_job(make_job("j2", "failed", prev_err="boom"))
    backend.mark_status(j2.id, "failed")
    j3 = backend.add_job(make_job("j3"))
    backend.enqueue(j3)
    return backend


@pytest.fixture()
def service(seeded_backend) -> MonitorService:
    return MonitorService(seeded_backend, default_queue=QUEUE)


@pytest.fixture()
def client(service):
    from queue_monitor.app import create_app

    settings = Settings(backend=BACKEND_IN_MEMORY, default_queue=QUEUE)
    app = create_app(settings, service=service)
    with TestClient(app) as test_client:
        yield test_client
