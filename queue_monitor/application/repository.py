"""Typed accessors that join backend records into detail views."""
from __future__ import annotations

from queue_monitor.core.errors import InvalidArgumentError, NotFoundError
from queue_monitor.core.schema import ChainDetail, GroupDetail, JobDetail, JobMessage
from queue_monitor.infrastructure import TaskQueueBackend


def require_id(kind: str, identifier: str) -> str:
    if not identifier or not identifier.strip():
        raise InvalidArgumentError(f"{kind} ID is required")
    return identifier


class JobRepository:
    """Fetch-by-id for jobs, chains and groups, enriched with child data."""

    def __init__(self, backend: TaskQueueBackend) -> None:
        self._backend = backend

    def _resolve_jobs(self, job_ids: list[str]) -> list[JobMessage]:
        # Members that no longer resolve are skipped; the view stays partial.
        jobs: list[JobMessage] = []
        for job_id in job_ids:
            if not job_id:
                continue
            try:
                jobs.append(self._backend.fetch_job(job_id))
            except NotFoundError:
                continue
        return jobs

    def get_job_detail(self, job_id: str) -> JobDetail:
        job = self._backend.fetch_job(require_id("job", job_id))
        try:
            result_data: bytes | None = self._backend.fetch_result(job_id)
        except NotFoundError:
            result_data = None
        return JobDetail(**job.model_dump(), result_data=result_data)

    def get_chain_detail(self, chain_id: str) -> ChainDetail:
        chain = self._backend.fetch_chain(require_id("chain", chain_id))
        job_ids = [*chain.prev_jobs, chain.job_id]
        return ChainDetail(**chain.model_dump(), jobs=self._resolve_jobs(job_ids))

    def get_group_detail(self, group_id: str) -> GroupDetail:
        group = self._backend.fetch_group(require_id("group", group_id))
        return GroupDetail(**group.model_dump(), jobs=self._resolve_jobs(list(group.job_status)))
