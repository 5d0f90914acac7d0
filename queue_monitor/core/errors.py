"""Error taxonomy shared by the backends, the service layer and the API."""
from __future__ import annotations


class QueueMonitorError(RuntimeError):
    """Base class for every error raised by the monitor."""


class NotFoundError(QueueMonitorError):
    """Raised when a job, chain, group or result has no backing record."""

    def __init__(self, kind: str, identifier: str) -> None:
        super().__init__(f"{kind} not found: {identifier}")
        self.kind = kind
        self.identifier = identifier


class InvalidArgumentError(QueueMonitorError, ValueError):
    """Raised for empty identifiers, unknown status filters and bad settings."""


class BackendUnavailableError(QueueMonitorError):
    """Raised when the underlying store cannot be reached or read."""


class BackendTimeoutError(BackendUnavailableError):
    """Raised when a store call exceeds the configured timeout."""
