from __future__ import annotations

import base64
from datetime import datetime
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer

from queue_monitor.domain import STATUS_QUEUED


def _encode_bytes(value: bytes) -> str:
    return base64.b64encode(value).decode("ascii")


# Standard-alphabet base64 in JSON, the same way the queue engine writes byte slices.
EncodedBytes = Annotated[bytes, PlainSerializer(_encode_bytes, return_type=str, when_used="json")]


class _Record(BaseModel):
    model_config = ConfigDict(val_json_bytes="base64")


class JobMessage(_Record):
    id: str
    task: str = ""
    payload: EncodedBytes = b""
    status: str = STATUS_QUEUED
    queue: str = ""
    max_retry: int = 0
    retried: int = 0
    prev_err: str = ""
    processed_at: datetime | None = None
    on_success_ids: list[str] = Field(default_factory=list)
    prev_job_result: EncodedBytes | None = None


class JobDetail(JobMessage):
    result_data: EncodedBytes | None = None


class ChainMessage(_Record):
    id: str
    job_id: str = ""
    prev_jobs: list[str] = Field(default_factory=list)
    status: str = STATUS_QUEUED


class ChainDetail(ChainMessage):
    jobs: list[JobMessage] = Field(default_factory=list)


class GroupMessage(_Record):
    id: str
    job_status: dict[str, str] = Field(default_factory=dict)
    status: str = STATUS_QUEUED


class GroupDetail(GroupMessage):
    jobs: list[JobMessage] = Field(default_factory=list)


class DashboardStats(BaseModel):
    total_pending: int = 0
    total_success: int = 0
    total_failed: int = 0
    queue_stats: dict[str, int] = Field(default_factory=dict)
    registered_tasks: list[str] = Field(default_factory=list)


class PendingJobsPage(_Record):
    jobs: list[JobMessage] = Field(default_factory=list)
    total: int = 0
    offset: int = 0
    limit: int = 0


class JobMatch(_Record):
    type: Literal["job"] = "job"
    job: JobDetail


class ChainMatch(_Record):
    type: Literal["chain"] = "chain"
    chain: ChainDetail


class GroupMatch(_Record):
    type: Literal["group"] = "group"
    group: GroupDetail


class NoMatch(BaseModel):
    type: Literal["not_found"] = "not_found"
    error: str


SearchResult = Annotated[
    Union[JobMatch, ChainMatch, GroupMatch, NoMatch],
    Field(discriminator="type"),
]
