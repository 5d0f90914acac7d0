"""Storage contract shared by every task-queue backend."""
from __future__ import annotations

from typing import Protocol, runtime_checkable

from queue_monitor.core.schema import ChainMessage, GroupMessage, JobMessage


class TaskQueueBackend(Protocol):
    """Read access to the broker and result store of the task-queue engine.

    Every ``fetch_*`` method raises :class:`~queue_monitor.core.errors.NotFoundError`
    when the record is absent.  Transport failures surface as
    :class:`~queue_monitor.core.errors.BackendUnavailableError`.
    """

    def fetch_job(self, job_id: str) -> JobMessage: ...

    def fetch_chain(self, chain_id: str) -> ChainMessage: ...

    def fetch_group(self, group_id: str) -> GroupMessage: ...

    def fetch_result(self, job_id: str) -> bytes: ...

    def list_by_status(self, status: str) -> list[str]: ...

    def count_pending(self, queue: str) -> int: ...

    def list_pending(
        self, queue: str, offset: int = 0, limit: int | None = None
    ) -> tuple[list[JobMessage], int]:
        """Return one window of a queue plus the queue's total length.

        ``limit=None`` reads to the end of the queue.  An offset past the end
        yields an empty list and the unchanged total.
        """

    def delete_job(self, job_id: str) -> None:
        """Remove a job's stored metadata; raises ``NotFoundError`` when absent."""

    def list_registered_tasks(self) -> list[str]: ...


@runtime_checkable
class EnumerableBackend(Protocol):
    """Optional capability: backends able to list every chain and group id."""

    def scan_chain_ids(self) -> list[str]: ...

    def scan_group_ids(self) -> list[str]: ...
