"""Activity logger — append-only audit trail for every task mutation."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..config import settings
from ..database import now_ms, storage_errors
from ..exceptions import InvalidState
from ..lifecycle import ACTIVITY_TYPES, require_member
from ..models.activity import Activity

logger = logging.getLogger("mission_control.services.activity_service")


class ActivityLogger:
    def __init__(self, db: Session):
        self.db = db

    def append(
        self,
        type: str,
        agent_id: str,
        message: str,
        task_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Activity:
        """Stage one immutable activity row in the caller's transaction.

        Does not commit: the activity is written together with the mutation
        that caused it, or not at all.
        """
        require_member(type, ACTIVITY_TYPES, "activity type")
        activity = Activity(
            type=type,
            agent_id=agent_id,
            task_id=task_id,
            message=message,
            meta=metadata,
            created_at=now_ms(),
        )
        self.db.add(activity)
        self.db.flush()
        logger.debug("Activity %s staged: %s by %s (task=%s)", activity.id, type, agent_id, task_id)
        return activity

    # ── Read side ───────────────────────────────────────────────────────────────

    def recent(self, limit: Optional[int] = None) -> List[Activity]:
        """Most recent activities, newest first."""
        stmt = self._newest_first(select(Activity)).limit(self._limit(limit))
        with storage_errors():
            return list(self.db.execute(stmt).scalars().all())

    def by_agent(self, agent_id: str, limit: Optional[int] = None) -> List[Activity]:
        stmt = self._newest_first(select(Activity).where(Activity.agent_id == agent_id))
        with storage_errors():
            return list(self.db.execute(stmt.limit(self._limit(limit))).scalars().all())

    def by_task(self, task_id: str) -> List[Activity]:
        stmt = self._newest_first(select(Activity).where(Activity.task_id == task_id))
        with storage_errors():
            return list(self.db.execute(stmt).scalars().all())

    def today(self) -> List[Activity]:
        """Everything since local midnight, newest first."""
        midnight = datetime.now().replace(hour=0, minute=0, second=0, microsecond=0)
        since = int(midnight.timestamp() * 1000)
        stmt = self._newest_first(select(Activity).where(Activity.created_at >= since))
        with storage_errors():
            return list(self.db.execute(stmt).scalars().all())

    @staticmethod
    def _newest_first(stmt):
        # id breaks ties between rows written in the same millisecond
        return stmt.order_by(Activity.created_at.desc(), Activity.id.desc())

    @staticmethod
    def _limit(limit: Optional[int]) -> int:
        if limit is None:
            return settings.ACTIVITY_DEFAULT_LIMIT
        if limit < 1:
            raise InvalidState(f"limit must be positive, got {limit}.")
        return limit
