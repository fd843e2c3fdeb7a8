"""
Sync trigger router.

This router contains endpoints for:
- GET /sync/status - Last successful sync and in-flight state per family
- POST /sync/foreground - Application came to the foreground
- POST /sync/{family} - Explicit user action (force sync)
- POST /sync/{family}/if-needed - Sync only if the family is stale or empty

Results are RunOutcome values. A RETRY_SCHEDULED outcome means the request
returned after the first attempt; the retry continues in the background.
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException

from api.deps import get_scheduler
from application.sync import SyncScheduler
from domain.models import SyncFamily

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/sync",
    tags=["Sync"],
)


def _parse_family(family: str) -> SyncFamily:
    try:
        return SyncFamily.parse(family)
    except ValueError:
        valid = ", ".join(f.value for f in SyncFamily)
        raise HTTPException(
            status_code=404,
            detail=f"Unknown sync family '{family}'. Must be one of: {valid}",
        )


@router.get("/status")
async def sync_status(scheduler: SyncScheduler = Depends(get_scheduler)) -> Dict[str, Any]:
    """Per-family last successful sync time and whether a pass is in flight."""
    report = await scheduler.status()
    return {
        "athlete_id": scheduler.context.athlete_id,
        "families": {
            family.value: {
                "last_sync": state["last_sync"].isoformat() if state["last_sync"] else None,
                "in_flight": state["in_flight"],
                "threshold_seconds": state["threshold_seconds"],
            }
            for family, state in report.items()
        },
    }


# Must be declared before /{family} so "foreground" is not taken as a family
@router.post("/foreground")
async def sync_on_foreground(scheduler: SyncScheduler = Depends(get_scheduler)) -> Dict[str, Any]:
    """Run sync_if_needed for every family."""
    outcomes = await scheduler.on_foreground()
    return {"outcomes": [outcome.to_dict() for outcome in outcomes.values()]}


@router.post("/{family}")
async def force_sync(family: str, scheduler: SyncScheduler = Depends(get_scheduler)) -> Dict[str, Any]:
    """Sync a family now, regardless of staleness."""
    sync_family = _parse_family(family)
    outcome = await scheduler.force_sync(sync_family)
    return outcome.to_dict()


@router.post("/{family}/if-needed")
async def sync_if_needed(family: str, scheduler: SyncScheduler = Depends(get_scheduler)) -> Dict[str, Any]:
    """Sync a family only if its cache is empty or its last sync is stale."""
    sync_family = _parse_family(family)
    outcome = await scheduler.sync_if_needed(sync_family)
    return outcome.to_dict()
