"""Process-wide monitor service used by the HTTP routes."""
from __future__ import annotations

from queue_monitor.infrastructure import InMemoryBackend

from .monitor import MonitorService


def _default_service() -> MonitorService:
    return MonitorService(InMemoryBackend())


_service: MonitorService = _default_service()


def configure_monitor_service(service: MonitorService) -> None:
    """Install the service answering API requests."""

    global _service
    _service = service


def get_monitor_service() -> MonitorService:
    """Return the singleton monitor service for the process."""

    return _service


def reset_monitor_service() -> None:
    """Restore an empty in-memory service (used in tests)."""

    configure_monitor_service(_default_service())
