#!/usr/bin/env python
from __future__ import annotations

import argparse
import json
from datetime import datetime, timezone

import redis

from queue_monitor.core.schema import ChainMessage, GroupMessage, JobMessage
from queue_monitor.domain import (
    DEFAULT_QUEUE,
    STATUS_FAILED,
    STATUS_PROCESSING,
    STATUS_QUEUED,
    STATUS_SUCCESSFUL,
)
from queue_monitor.infrastructure.redis_backend import (
    chain_key,
    group_key,
    job_key,
    result_key,
    split_addr,
    status_key,
)


def _payload(arg1: int, arg2: int) -> bytes:
    return json.dumps({"arg1": arg1, "arg2": arg2}).encode("utf-8")


def sample_records(queue: str) -> tuple[list[JobMessage], list[ChainMessage], list[GroupMessage]]:
    now = datetime.now(timezone.utc)
    jobs = [
        JobMessage(id="sample-add", task="add", payload=_payload(2, 3), status=STATUS_SUCCESSFUL, queue=queue, processed_at=now),
        JobMessage(id="sample-fail", task="fail", payload=_payload(1, 1), status=STATUS_FAILED, queue=queue, max_retry=2, retried=2, prev_err="intentional failure for testing", processed_at=now),
        JobMessage(id="sample-chain-1", task="add", payload=_payload(1, 2), status=STATUS_SUCCESSFUL, queue=queue, processed_at=now),
        JobMessage(id="sample-chain-3", task="multiply", payload=_payload(3, 4), status=STATUS_PROCESSING, queue=queue),
        JobMessage(id="sample-group-1", task="add", payload=_payload(5, 5), status=STATUS_SUCCESSFUL, queue=queue, processed_at=now),
        JobMessage(id="sample-group-2", task="multiply", payload=_payload(6, 7), status=STATUS_QUEUED, queue=queue),
    ]
    # sample-chain-2 is never written, so the chain view shows a gap.
    chains = [
        ChainMessage(id="sample-chain", job_id="sample-chain-3", prev_jobs=["sample-chain-1", "sample-chain-2"], status=STATUS_PROCESSING),
    ]
    groups = [
        GroupMessage(
            id="sample-group",
            job_status={"sample-group-1": STATUS_SUCCESSFUL, "sample-group-2": STATUS_QUEUED},
            status=STATUS_PROCESSING,
        ),
    ]
    return jobs, chains, groups


def main() -> None:
    parser = argparse.ArgumentParser(description="Write sample jobs, a chain and a group into Redis")
    parser.add_argument("--redis-addr", default="localhost:6379", help="Redis address (host:port)")
    parser.add_argument("--redis-pass", default="", help="Redis password")
    parser.add_argument("--redis-db", type=int, default=0, help="Redis database index")
    parser.add_argument("--queue", default=DEFAULT_QUEUE, help="Queue receiving the pending jobs")
    parser.add_argument("--pending", type=int, default=25, help="Number of pending jobs to enqueue")
    args = parser.parse_args()

    host, port = split_addr(args.redis_addr)
    client = redis.Redis(host=host, port=port, password=args.redis_pass or None, db=args.redis_db)
    jobs, chains, groups = sample_records(args.queue)

    pipe = client.pipeline(transaction=True)
    for job in jobs:
        pipe.set(job_key(job.id), job.model_dump_json())
        if job.status in {STATUS_SUCCESSFUL, STATUS_FAILED}:
            pipe.rpush(status_key(job.status), job.id)
    pipe.set(result_key("sample-add"), json.dumps({"result": 5}).encode("utf-8"))
    for chain in chains:
        pipe.set(chain_key(chain.id), chain.model_dump_json())
    for group in groups:
        pipe.set(group_key(group.id), group.model_dump_json())
    for index in range(args.pending):
        pending = JobMessage(id=f"sample-pending-{index:03d}", task="add", payload=_payload(index, index), queue=args.queue)
        pipe.set(job_key(pending.id), pending.model_dump_json())
        pipe.rpush(args.queue, pending.model_dump_json())
    pipe.execute()
    client.close()

    print(f"Seeded {len(jobs) + args.pending} jobs, {len(chains)} chain and {len(groups)} group into {args.redis_addr}")


if __name__ == "__main__":
    main()
