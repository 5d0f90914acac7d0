from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query

from queue_monitor.application import get_monitor_service
from queue_monitor.core.schema import JobDetail, JobMessage, PendingJobsPage

router = APIRouter(prefix="/jobs", tags=["jobs"])


@router.get("")
def list_jobs_by_status(status: str | None = Query(default=None)) -> dict:
    if not status:
        raise HTTPException(status_code=400, detail="status parameter is required")
    job_ids = get_monitor_service().get_jobs_by_status(status)
    return {"status": status, "job_ids": job_ids, "count": len(job_ids)}


@router.get("/pending/{queue}/paginated")
def list_pending_jobs_paginated(
    queue: str,
    offset: int = Query(default=0),
    limit: int = Query(default=20),
) -> PendingJobsPage:
    return get_monitor_service().get_pending_jobs_page(queue, offset, limit)


@router.get("/pending/{queue}/count")
def get_pending_count(queue: str) -> dict:
    count = get_monitor_service().get_pending_count(queue)
    return {"queue": queue, "count": count}


@router.get("/pending/{queue}")
def list_pending_jobs(queue: str) -> list[JobMessage]:
    """Unpaginated pending listing kept for older clients."""
    return get_monitor_service().get_pending_jobs(queue)


@router.get("/{job_id}")
def get_job(job_id: str) -> JobDetail:
    return get_monitor_service().get_job(job_id)


@router.delete("/{job_id}")
def delete_job(job_id: str) -> dict:
    get_monitor_service().delete_job(job_id)
    return {"message": "job deleted successfully"}
