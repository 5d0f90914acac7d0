"""Domain layer definitions."""

from .jobs import (
    DEFAULT_PAGE_LIMIT,
    DEFAULT_QUEUE,
    STATUS_FAILED,
    STATUS_PROCESSING,
    STATUS_QUEUED,
    STATUS_RETRYING,
    STATUS_SUCCESSFUL,
    PageWindow,
    normalise_status_filter,
)

__all__ = [
    "DEFAULT_PAGE_LIMIT",
    "DEFAULT_QUEUE",
    "STATUS_FAILED",
    "STATUS_PROCESSING",
    "STATUS_QUEUED",
    "STATUS_RETRYING",
    "STATUS_SUCCESSFUL",
    "PageWindow",
    "normalise_status_filter",
]
