from __future__ import annotations

from fastapi import APIRouter

from queue_monitor.application import get_monitor_service
from queue_monitor.core.schema import ChainDetail, GroupDetail

router = APIRouter(tags=["chains"])


@router.get("/chains")
def list_chains() -> dict:
    chains = get_monitor_service().list_chains()
    return {"chains": chains, "count": len(chains)}


@router.get("/chains/{chain_id}")
def get_chain(chain_id: str) -> ChainDetail:
    return get_monitor_service().get_chain(chain_id)


@router.get("/groups")
def list_groups() -> dict:
    groups = get_monitor_service().list_groups()
    return {"groups": groups, "count": len(groups)}


@router.get("/groups/{group_id}")
def get_group(group_id: str) -> GroupDetail:
    return get_monitor_service().get_group(group_id)
