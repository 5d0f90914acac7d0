"""Application service answering dashboard, listing and search queries."""
from __future__ import annotations

import logging
from collections.abc import Sequence

from queue_monitor.core.errors import NotFoundError, QueueMonitorError
from queue_monitor.core.schema import (
    ChainDetail,
    ChainMatch,
    DashboardStats,
    GroupDetail,
    GroupMatch,
    JobDetail,
    JobMatch,
    JobMessage,
    NoMatch,
    PendingJobsPage,
    SearchResult,
)
from queue_monitor.domain import (
    DEFAULT_QUEUE,
    STATUS_FAILED,
    STATUS_SUCCESSFUL,
    PageWindow,
    normalise_status_filter,
)
from queue_monitor.infrastructure import EnumerableBackend, TaskQueueBackend

from .repository import JobRepository, require_id

logger = logging.getLogger(__name__)


class MonitorService:
    """Read-only queries over a task-queue backend.

    The service keeps no state besides the backend reference; every call
    reads the store afresh and the results of separate calls are not
    mutually consistent.
    """

    def __init__(
        self,
        backend: TaskQueueBackend,
        *,
        default_queue: str = DEFAULT_QUEUE,
        queues: Sequence[str] = (),
    ) -> None:
        self._backend = backend
        self._repository = JobRepository(backend)
        self._default_queue = default_queue
        self._queues = [default_queue]
        for queue in queues:
            if queue not in self._queues:
                self._queues.append(queue)

    def _queue_name(self, queue: str) -> str:
        return queue or self._default_queue

    # ------------------------------------------------------------------
    # dashboard
    # ------------------------------------------------------------------
    def get_dashboard_stats(self) -> DashboardStats:
        """Combine status lists, pending counts and task names into one snapshot.

        Failing to list successful or failed jobs fails the snapshot.  Pending
        counts are best-effort: a queue whose count cannot be read is left out
        of ``queue_stats`` and adds nothing to ``total_pending``.
        """

        stats = DashboardStats()
        stats.total_success = len(self._backend.list_by_status(STATUS_SUCCESSFUL))
        stats.total_failed = len(self._backend.list_by_status(STATUS_FAILED))

        for queue in self._queues:
            try:
                count = self._backend.count_pending(queue)
            except QueueMonitorError as exc:
                logger.warning("Pending count unavailable for queue %s: %s", queue, exc)
                continue
            stats.queue_stats[queue] = count
            stats.total_pending += count

        stats.registered_tasks = self._backend.list_registered_tasks()
        return stats

    # ------------------------------------------------------------------
    # jobs
    # ------------------------------------------------------------------
    def get_job(self, job_id: str) -> JobDetail:
        return self._repository.get_job_detail(job_id)

    def get_pending_jobs(self, queue: str = "") -> list[JobMessage]:
        """Return every pending job of a queue; prefer the paginated variant."""

        jobs, _ = self._backend.list_pending(self._queue_name(queue))
        return jobs

    def get_pending_jobs_page(self, queue: str = "", offset: int = 0, limit: int = 0) -> PendingJobsPage:
        window = PageWindow.normalise(offset, limit)
        jobs, total = self._backend.list_pending(self._queue_name(queue), window.offset, window.limit)
        return PendingJobsPage(jobs=jobs, total=total, offset=window.offset, limit=window.limit)

    def get_pending_count(self, queue: str = "") -> int:
        return self._backend.count_pending(self._queue_name(queue))

    def get_jobs_by_status(self, status: str) -> list[str]:
        return self._backend.list_by_status(normalise_status_filter(status))

    def delete_job(self, job_id: str) -> None:
        self._backend.delete_job(require_id("job", job_id))
        logger.info("Deleted job metadata for %s", job_id)

    # ------------------------------------------------------------------
    # chains and groups
    # ------------------------------------------------------------------
    def get_chain(self, chain_id: str) -> ChainDetail:
        return self._repository.get_chain_detail(chain_id)

    def get_group(self, group_id: str) -> GroupDetail:
        return self._repository.get_group_detail(group_id)

    def list_chains(self) -> list[str]:
        # Backends without a key-scan primitive cannot enumerate chains.
        if isinstance(self._backend, EnumerableBackend):
            return self._backend.scan_chain_ids()
        return []

    def list_groups(self) -> list[str]:
        if isinstance(self._backend, EnumerableBackend):
            return self._backend.scan_group_ids()
        return []

    # ------------------------------------------------------------------
    # search
    # ------------------------------------------------------------------
    def search(self, identifier: str) -> SearchResult:
        """Resolve an id to a job, chain or group, probing in that order.

        Ids are assumed not to collide across kinds; when they do, the job
        wins.  Only ``NotFoundError`` moves on to the next probe.
        """

        require_id("search", identifier)
        try:
            return JobMatch(job=self._repository.get_job_detail(identifier))
        except NotFoundError:
            pass
        try:
            return ChainMatch(chain=self._repository.get_chain_detail(identifier))
        except NotFoundError:
            pass
        try:
            return GroupMatch(group=self._repository.get_group_detail(identifier))
        except NotFoundError:
            pass
        return NoMatch(error=f"no job, chain, or group found with ID: {identifier}")
