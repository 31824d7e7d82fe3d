"""Notification fan-out — per-recipient inbox rows plus delivery acknowledgement."""

from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..config import settings
from ..database import now_ms, storage_errors, transaction
from ..exceptions import InvalidState, NotFound
from ..models.notification import Notification
from ..repositories.agent_repository import AgentRepository, AgentRoster
from ..schemas.notification import CreateNotificationRequest

logger = logging.getLogger("mission_control.services.notification_service")


def truncate_content(content: str, limit: Optional[int] = None) -> str:
    limit = settings.NOTIFICATION_MAX_CHARS if limit is None else limit
    return content[:limit]


class NotificationService:
    def __init__(self, db: Session, roster: Optional[AgentRoster] = None):
        self.db = db
        self.roster = roster if roster is not None else AgentRepository(db)

    # ── Write primitive ─────────────────────────────────────────────────────────

    def notify(
        self,
        recipient_id: str,
        sender_id: str,
        content: str,
        *,
        task_id: Optional[str] = None,
        message_id: Optional[str] = None,
        truncate: bool = False,
    ) -> Notification:
        """Stage an undelivered notification in the caller's transaction.

        ``truncate`` is for content derived from free text (comments); the
        templates used for assignment and rejection are short already.
        """
        if truncate:
            content = truncate_content(content)
        notification = Notification(
            recipient_id=recipient_id,
            sender_id=sender_id,
            task_id=task_id,
            message_id=message_id,
            content=content,
            delivered=False,
            created_at=now_ms(),
        )
        self.db.add(notification)
        self.db.flush()
        logger.debug("Notification %s staged for %s from %s", notification.id, recipient_id, sender_id)
        return notification

    def create_notification(self, req: CreateNotificationRequest) -> Notification:
        """Standalone entry point for the comment/mention component (free text)."""
        if not req.content.strip():
            raise InvalidState("Notification content must not be empty.")
        with transaction(self.db):
            for agent_id in (req.recipient_id, req.sender_id):
                if self.roster.get_by_id(agent_id) is None:
                    raise NotFound(f"Agent '{agent_id}' not found.")
            notification = self.notify(
                req.recipient_id,
                req.sender_id,
                req.content,
                task_id=req.task_id,
                message_id=req.message_id,
                truncate=True,
            )
        logger.info("Notification %s created for agent '%s'", notification.id, req.recipient_id)
        return notification

    # ── Read / ack side ─────────────────────────────────────────────────────────

    def undelivered(self, agent_id: str) -> List[Notification]:
        stmt = (
            select(Notification)
            .where(Notification.recipient_id == agent_id, Notification.delivered.is_(False))
            .order_by(Notification.created_at, Notification.id)
        )
        with storage_errors():
            return list(self.db.execute(stmt).scalars().all())

    def by_agent(self, agent_id: str, limit: int = 50) -> List[Notification]:
        stmt = (
            select(Notification)
            .where(Notification.recipient_id == agent_id)
            .order_by(Notification.created_at.desc(), Notification.id.desc())
            .limit(limit)
        )
        with storage_errors():
            return list(self.db.execute(stmt).scalars().all())

    def mark_delivered(self, notification_id: int) -> Notification:
        with transaction(self.db):
            notification = self.db.get(Notification, notification_id)
            if notification is None:
                raise NotFound(f"Notification {notification_id} not found.")
            notification.delivered = True
        return notification

    def mark_all_delivered(self, agent_id: str) -> int:
        with transaction(self.db):
            pending = self.db.execute(
                select(Notification).where(
                    Notification.recipient_id == agent_id,
                    Notification.delivered.is_(False),
                )
            ).scalars().all()
            for notification in pending:
                notification.delivered = True
        logger.info("Marked %d notification(s) delivered for agent '%s'", len(pending), agent_id)
        return len(pending)
