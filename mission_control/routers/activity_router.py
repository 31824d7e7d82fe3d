from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from ..dependencies import get_activity_logger
from ..schemas.activity import ActivityResponse
from ..services.activity_service import ActivityLogger

router = APIRouter(tags=["Activities"])


@router.get("", response_model=List[ActivityResponse])
def recent_activities(
    limit: Optional[int] = Query(None, ge=1, le=500),
    svc: ActivityLogger = Depends(get_activity_logger),
):
    """Most recent activities, newest first."""
    return svc.recent(limit)


@router.get("/today", response_model=List[ActivityResponse])
def todays_activities(svc: ActivityLogger = Depends(get_activity_logger)):
    return svc.today()


@router.get("/agent/{agent_id}", response_model=List[ActivityResponse])
def activities_by_agent(
    agent_id: str,
    limit: Optional[int] = Query(None, ge=1, le=500),
    svc: ActivityLogger = Depends(get_activity_logger),
):
    return svc.by_agent(agent_id, limit)


@router.get("/task/{task_id}", response_model=List[ActivityResponse])
def activities_by_task(task_id: str, svc: ActivityLogger = Depends(get_activity_logger)):
    """Audit trail of a single task, newest first."""
    return svc.by_task(task_id)
