"""FastAPI dependency injection providers."""

from fastapi import Depends
from sqlalchemy.orm import Session

from .database import get_db
from .services.activity_service import ActivityLogger
from .services.agent_service import AgentService
from .services.notification_service import NotificationService
from .services.task_service import TaskService


def get_agent_service(db: Session = Depends(get_db)) -> AgentService:
    return AgentService(db)


def get_task_service(db: Session = Depends(get_db)) -> TaskService:
    return TaskService(db)


def get_activity_logger(db: Session = Depends(get_db)) -> ActivityLogger:
    return ActivityLogger(db)


def get_notification_service(db: Session = Depends(get_db)) -> NotificationService:
    return NotificationService(db)
