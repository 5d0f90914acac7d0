"""In-process backend holding queue and result state in plain dictionaries."""
from __future__ import annotations

from collections.abc import Iterable

from queue_monitor.core.errors import NotFoundError
from queue_monitor.core.schema import ChainMessage, GroupMessage, JobMessage
from queue_monitor.domain import DEFAULT_QUEUE, normalise_status_filter


class InMemoryBackend:
    """Dictionary-backed backend for tests, demos and single-process setups."""

    def __init__(self, registered_tasks: Iterable[str] = ()) -> None:
        self._registered_tasks = sorted(set(registered_tasks))
        self._jobs: dict[str, JobMessage] = {}
        self._chains: dict[str, ChainMessage] = {}
        self._groups: dict[str, GroupMessage] = {}
        self._results: dict[str, bytes] = {}
        self._by_status: dict[str, list[str]] = {}
        self._queues: dict[str, list[JobMessage]] = {}

    # ------------------------------------------------------------------
    # seeding helpers
    # ------------------------------------------------------------------
    def add_job(self, job: JobMessage) -> JobMessage:
        self._jobs[job.id] = job
        return job

    def add_chain(self, chain: ChainMessage) -> ChainMessage:
        self._chains[chain.id] = chain
        return chain

    def add_group(self, group: GroupMessage) -> GroupMessage:
        self._groups[group.id] = group
        return group

    def save_result(self, job_id: str, data: bytes) -> None:
        self._results[job_id] = data

    def mark_status(self, job_id: str, status: str) -> None:
        """Record a job id under a terminal status list."""

        self._by_status.setdefault(normalise_status_filter(status), []).append(job_id)

    def enqueue(self, job: JobMessage, queue: str | None = None) -> None:
        name = queue or job.queue or DEFAULT_QUEUE
        self._queues.setdefault(name, []).append(job)

    # ------------------------------------------------------------------
    # backend contract
    # ------------------------------------------------------------------
    def fetch_job(self, job_id: str) -> JobMessage:
        try:
            return self._jobs[job_id]
        except KeyError:
            raise NotFoundError("job", job_id) from None

    def fetch_chain(self, chain_id: str) -> ChainMessage:
        try:
            return self._chains[chain_id]
        except KeyError:
            raise NotFoundError("chain", chain_id) from None

    def fetch_group(self, group_id: str) -> GroupMessage:
        try:
            return self._groups[group_id]
        except KeyError:
            raise NotFoundError("group", group_id) from None

    def fetch_result(self, job_id: str) -> bytes:
        try:
            return self._results[job_id]
        except KeyError:
            raise NotFoundError("result", job_id) from None

    def list_by_status(self, status: str) -> list[str]:
        return list(self._by_status.get(normalise_status_filter(status), []))

    def count_pending(self, queue: str) -> int:
        return len(self._queues.get(queue, []))

    def list_pending(
        self, queue: str, offset: int = 0, limit: int | None = None
    ) -> tuple[list[JobMessage], int]:
        entries = self._queues.get(queue, [])
        end = None if limit is None else offset + limit
        return list(entries[offset:end]), len(entries)

    def delete_job(self, job_id: str) -> None:
        if self._jobs.pop(job_id, None) is None:
            raise NotFoundError("job", job_id)
        self._results.pop(job_id, None)
        for ids in self._by_status.values():
            while job_id in ids:
                ids.remove(job_id)

    def list_registered_tasks(self) -> list[str]:
        return list(self._registered_tasks)

    # ------------------------------------------------------------------
    # enumeration capability
    # ------------------------------------------------------------------
    def scan_chain_ids(self) -> list[str]:
        return sorted(self._chains)

    def scan_group_ids(self) -> list[str]:
        return sorted(self._groups)
