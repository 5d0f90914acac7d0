"""Redis-backed access to the task-queue broker and result store."""
from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from typing import TypeVar

import redis
from pydantic import BaseModel, ValidationError

from queue_monitor.core.errors import (
    BackendTimeoutError,
    BackendUnavailableError,
    NotFoundError,
)
from queue_monitor.core.schema import ChainMessage, GroupMessage, JobMessage
from queue_monitor.domain import STATUS_FAILED, STATUS_SUCCESSFUL, normalise_status_filter

logger = logging.getLogger(__name__)

RESULTS_PREFIX = "tq:res:"
JOB_PREFIX = f"{RESULTS_PREFIX}job:msg:"
CHAIN_PREFIX = f"{RESULTS_PREFIX}chain:msg:"
GROUP_PREFIX = f"{RESULTS_PREFIX}group:msg:"
RESULT_PREFIX = f"{RESULTS_PREFIX}job:result:"
STATUS_KEYS = {
    STATUS_SUCCESSFUL: f"{RESULTS_PREFIX}success",
    STATUS_FAILED: f"{RESULTS_PREFIX}failed",
}

SCAN_BATCH = 500

_Model = TypeVar("_Model", bound=BaseModel)


def job_key(job_id: str) -> str:
    return f"{JOB_PREFIX}{job_id}"


def chain_key(chain_id: str) -> str:
    return f"{CHAIN_PREFIX}{chain_id}"


def group_key(group_id: str) -> str:
    return f"{GROUP_PREFIX}{group_id}"


def result_key(job_id: str) -> str:
    return f"{RESULT_PREFIX}{job_id}"


def status_key(status: str) -> str:
    return STATUS_KEYS[normalise_status_filter(status)]


def split_addr(addr: str) -> tuple[str, int]:
    """Split ``host:port`` into its parts, defaulting the port to 6379."""

    host, sep, port = addr.rpartition(":")
    if not sep:
        return addr, 6379
    return host or "localhost", int(port)


@contextmanager
def _translate_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except redis.exceptions.TimeoutError as exc:
        logger.warning("Redis %s timed out: %s", operation, exc)
        raise BackendTimeoutError(f"redis {operation} timed out") from exc
    except redis.exceptions.RedisError as exc:
        logger.warning("Redis %s failed: %s", operation, exc)
        raise BackendUnavailableError(f"redis {operation} failed: {exc}") from exc


class RedisBackend:
    """Reads the key layout written by the task-queue engine's Redis stores."""

    def __init__(
        self,
        addr: str = "localhost:6379",
        *,
        password: str | None = None,
        db: int = 0,
        timeout: float = 5.0,
        registered_tasks: Iterable[str] = (),
        client: redis.Redis | None = None,
    ) -> None:
        if client is None:
            host, port = split_addr(addr)
            client = redis.Redis(
                host=host,
                port=port,
                password=password or None,
                db=db,
                socket_timeout=timeout,
                socket_connect_timeout=timeout,
            )
        self._client = client
        self._registered_tasks = sorted(set(registered_tasks))

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _decode(model: type[_Model], raw: bytes, key: str) -> _Model:
        try:
            return model.model_validate_json(raw)
        except ValidationError as exc:
            logger.warning("Unreadable record at %s: %s", key, exc)
            raise BackendUnavailableError(f"unreadable record at {key}") from exc

    def _fetch(self, model: type[_Model], kind: str, identifier: str, key: str) -> _Model:
        with _translate_errors(f"get {kind}"):
            raw = self._client.get(key)
        if raw is None:
            raise NotFoundError(kind, identifier)
        return self._decode(model, raw, key)

    def _scan_ids(self, prefix: str) -> list[str]:
        ids: list[str] = []
        with _translate_errors("scan"):
            for key in self._client.scan_iter(match=f"{prefix}*", count=SCAN_BATCH):
                name = key.decode("utf-8") if isinstance(key, bytes) else key
                ids.append(name.removeprefix(prefix))
        return sorted(ids)

    # ------------------------------------------------------------------
    # backend contract
    # ------------------------------------------------------------------
    def fetch_job(self, job_id: str) -> JobMessage:
        return self._fetch(JobMessage, "job", job_id, job_key(job_id))

    def fetch_chain(self, chain_id: str) -> ChainMessage:
        return self._fetch(ChainMessage, "chain", chain_id, chain_key(chain_id))

    def fetch_group(self, group_id: str) -> GroupMessage:
        return self._fetch(GroupMessage, "group", group_id, group_key(group_id))

    def fetch_result(self, job_id: str) -> bytes:
        with _translate_errors("get result"):
            raw = self._client.get(result_key(job_id))
        if raw is None:
            raise NotFoundError("result", job_id)
        return raw

    def list_by_status(self, status: str) -> list[str]:
        with _translate_errors("list status"):
            raw_ids = self._client.lrange(status_key(status), 0, -1)
        return [item.decode("utf-8") if isinstance(item, bytes) else item for item in raw_ids]

    def count_pending(self, queue: str) -> int:
        with _translate_errors("count pending"):
            return int(self._client.llen(queue))

    def list_pending(
        self, queue: str, offset: int = 0, limit: int | None = None
    ) -> tuple[list[JobMessage], int]:
        if limit is not None and limit <= 0:
            return [], self.count_pending(queue)
        stop = -1 if limit is None else offset + limit - 1
        with _translate_errors("list pending"):
            pipe = self._client.pipeline(transaction=True)
            pipe.llen(queue)
            pipe.lrange(queue, offset, stop)
            total, entries = pipe.execute()
        jobs = [self._decode(JobMessage, raw, queue) for raw in entries]
        return jobs, int(total)

    def delete_job(self, job_id: str) -> None:
        key = job_key(job_id)
        with _translate_errors("delete job"), self._client.pipeline() as pipe:
            # WATCH aborts the transaction if the record changes after the check.
            pipe.watch(key)
            if not pipe.exists(key):
                raise NotFoundError("job", job_id)
            pipe.multi()
            pipe.delete(key)
            pipe.delete(result_key(job_id))
            for status_list in STATUS_KEYS.values():
                pipe.lrem(status_list, 0, job_id)
            pipe.execute()

    def list_registered_tasks(self) -> list[str]:
        return list(self._registered_tasks)

    # ------------------------------------------------------------------
    # enumeration capability
    # ------------------------------------------------------------------
    def scan_chain_ids(self) -> list[str]:
        return self._scan_ids(CHAIN_PREFIX)

    def scan_group_ids(self) -> list[str]:
        return self._scan_ids(GROUP_PREFIX)

    def close(self) -> None:
        self._client.close()
