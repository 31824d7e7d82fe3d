from typing import List

from fastapi import APIRouter, Depends, Query

from ..dependencies import get_notification_service
from ..schemas.notification import (
    CreateNotificationRequest,
    MarkedResponse,
    NotificationResponse,
)
from ..services.notification_service import NotificationService

router = APIRouter(tags=["Notifications"])


@router.post("", response_model=NotificationResponse, status_code=201)
def create_notification(
    req: CreateNotificationRequest,
    svc: NotificationService = Depends(get_notification_service),
):
    """Notify an agent from free text (e.g. a comment mention). Content is truncated."""
    return svc.create_notification(req)


@router.get("/{agent_id}/undelivered", response_model=List[NotificationResponse])
def undelivered_notifications(
    agent_id: str,
    svc: NotificationService = Depends(get_notification_service),
):
    return svc.undelivered(agent_id)


@router.get("/{agent_id}", response_model=List[NotificationResponse])
def notifications_for_agent(
    agent_id: str,
    limit: int = Query(50, ge=1, le=500),
    svc: NotificationService = Depends(get_notification_service),
):
    return svc.by_agent(agent_id, limit)


@router.post("/{notification_id}/delivered", response_model=NotificationResponse)
def mark_delivered(
    notification_id: int,
    svc: NotificationService = Depends(get_notification_service),
):
    return svc.mark_delivered(notification_id)


@router.post("/{agent_id}/delivered-all", response_model=MarkedResponse)
def mark_all_delivered(
    agent_id: str,
    svc: NotificationService = Depends(get_notification_service),
):
    return MarkedResponse(marked=svc.mark_all_delivered(agent_id))
