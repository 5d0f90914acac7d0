from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query

from queue_monitor.application import get_monitor_service
from queue_monitor.core.schema import DashboardStats, NoMatch, SearchResult

router = APIRouter(tags=["overview"])


@router.get("/stats")
def get_dashboard_stats() -> DashboardStats:
    return get_monitor_service().get_dashboard_stats()


@router.get("/search")
def search(q: str | None = Query(default=None)) -> SearchResult:
    """Look an id up as a job, then a chain, then a group."""
    if not q:
        raise HTTPException(status_code=400, detail="query parameter 'q' is required")
    result = get_monitor_service().search(q)
    if isinstance(result, NoMatch):
        raise HTTPException(status_code=404, detail=result.error)
    return result
