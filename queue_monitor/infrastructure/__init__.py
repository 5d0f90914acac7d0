"""Infrastructure layer exports."""

from __future__ import annotations

import logging

from queue_monitor.config import BACKEND_IN_MEMORY, BACKEND_REDIS, Settings
from queue_monitor.core.errors import InvalidArgumentError

from .backend import EnumerableBackend, TaskQueueBackend
from .memory import InMemoryBackend
from .redis_backend import RedisBackend

logger = logging.getLogger(__name__)


def create_backend(settings: Settings) -> TaskQueueBackend:
    """Build the backend selected by ``settings.backend``."""

    if settings.backend == BACKEND_REDIS:
        logger.info("Using redis backend at %s (db=%s)", settings.redis.addr, settings.redis.db)
        return RedisBackend(
            settings.redis.addr,
            password=settings.redis.password,
            db=settings.redis.db,
            timeout=settings.request_timeout,
            registered_tasks=settings.registered_tasks,
        )
    if settings.backend == BACKEND_IN_MEMORY:
        logger.info("Using in-memory backend")
        return InMemoryBackend(registered_tasks=settings.registered_tasks)
    raise InvalidArgumentError(f"unsupported broker type: {settings.backend}")


__all__ = [
    "EnumerableBackend",
    "InMemoryBackend",
    "RedisBackend",
    "TaskQueueBackend",
    "create_backend",
]
