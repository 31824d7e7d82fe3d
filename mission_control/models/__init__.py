"""SQLAlchemy models — import all models here so Alembic can discover them."""

from .agent import Agent
from .task import Task
from .activity import Activity
from .notification import Notification

__all__ = ["Agent", "Task", "Activity", "Notification"]
