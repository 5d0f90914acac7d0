"""Vocabulary of the task-queue engine as seen by the monitor."""
from __future__ import annotations

from dataclasses import dataclass

from queue_monitor.core.errors import InvalidArgumentError

STATUS_QUEUED = "queued"
STATUS_PROCESSING = "processing"
STATUS_RETRYING = "retrying"
STATUS_SUCCESSFUL = "successful"
STATUS_FAILED = "failed"

DEFAULT_QUEUE = "tasqueue:tasks"
DEFAULT_PAGE_LIMIT = 20

_STATUS_ALIASES: dict[str, str] = {
    STATUS_SUCCESSFUL: STATUS_SUCCESSFUL,
    "success": STATUS_SUCCESSFUL,
    STATUS_FAILED: STATUS_FAILED,
}


def normalise_status_filter(status: str) -> str:
    """Map a caller-supplied status filter onto a terminal status.

    Only terminal statuses can be listed; anything else is a caller error.
    """

    key = (status or "").strip().lower()
    try:
        return _STATUS_ALIASES[key]
    except KeyError:
        raise InvalidArgumentError(f"unsupported status filter: {status}") from None


@dataclass(slots=True, frozen=True)
class PageWindow:
    """Normalised offset/limit pair for a pending-queue page."""

    offset: int
    limit: int

    @classmethod
    def normalise(cls, offset: int, limit: int) -> "PageWindow":
        # No upper bound on limit: large pages are passed through as requested.
        if limit <= 0:
            limit = DEFAULT_PAGE_LIMIT
        if offset < 0:
            offset = 0
        return cls(offset=offset, limit=limit)
