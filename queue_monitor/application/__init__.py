"""Application services."""

from .monitor import MonitorService
from .repository import JobRepository
from .service import configure_monitor_service, get_monitor_service, reset_monitor_service

__all__ = [
    "JobRepository",
    "MonitorService",
    "configure_monitor_service",
    "get_monitor_service",
    "reset_monitor_service",
]
