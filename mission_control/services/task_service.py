"""Task lifecycle service — state transitions, audit trail and fan-out with WebSocket broadcast.

Each mutating call is one transaction: the task row, exactly one activity and
any notifications commit together. Subscribers on ``/ws/tasks`` hear about the
change only after the commit succeeded.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from .. import lifecycle
from ..config import settings
from ..database import now_ms, storage_errors, transaction
from ..exceptions import InvalidState, NotFound
from ..lifecycle import PRIORITIES, TASK_STATUSES, require_member
from ..models.task import Task
from ..repositories.agent_repository import AgentRepository, AgentRoster
from ..repositories.task_repository import TaskRepository
from ..schemas.task import (
    AssignTaskRequest,
    CreateTaskRequest,
    QuickCreateTaskRequest,
    ReviewDecisionRequest,
    SubmitForReviewRequest,
    TaskResponse,
    UpdateStatusRequest,
    UpdateTaskRequest,
)
from ..ws_manager import task_ws_manager
from .activity_service import ActivityLogger
from .notification_service import NotificationService

logger = logging.getLogger("mission_control.services.task_service")


def _row_to_dict(row: Task) -> dict:
    """Convert an ORM row to a plain dict for WS broadcast."""
    return TaskResponse.model_validate(row).model_dump(mode="json")


def _transition_metadata(old: str, new: str, **extra) -> dict:
    return {"oldStatus": old, "newStatus": new, **extra}


def _unique(ids: Iterable[str]) -> List[str]:
    """Drop duplicates, keeping first-seen order (the first id is the primary)."""
    return list(dict.fromkeys(ids))


class TaskService:
    def __init__(self, db: Session, roster: Optional[AgentRoster] = None):
        self.db = db
        self.roster = roster if roster is not None else AgentRepository(db)
        self.tasks = TaskRepository(db)
        self.activity = ActivityLogger(db)
        self.notifications = NotificationService(db, self.roster)

    # ── Helpers ─────────────────────────────────────────────────────────────────

    def _require_agents(self, *agent_ids: Optional[str]) -> None:
        for agent_id in agent_ids:
            if agent_id is None:
                continue
            if self.roster.get_by_id(agent_id) is None:
                raise NotFound(f"Agent '{agent_id}' not found.")

    def _load_for_update(self, task_id: str) -> Task:
        task = self.tasks.get_for_update(task_id)
        if not task:
            raise NotFound(f"Task {task_id} not found.")
        return task

    def _mention_for(self, agent_id: str) -> str:
        agent = self.roster.get_by_id(agent_id)
        return agent.mention if agent is not None else f"@{agent_id}"

    async def _publish(self, event: str, task: Task) -> None:
        await task_ws_manager.broadcast(event, _row_to_dict(task))

    # ── Create ──────────────────────────────────────────────────────────────────

    async def create_task(self, req: CreateTaskRequest) -> Task:
        require_member(req.priority, PRIORITIES, "priority")
        title = req.title.strip()
        if not title:
            raise InvalidState("Task title must not be empty.")
        assignees = _unique(req.assignee_ids)

        with transaction(self.db):
            self._require_agents(req.created_by, *assignees)
            now = now_ms()
            task = self.tasks.add(
                Task(
                    title=title,
                    description=req.description,
                    priority=req.priority,
                    status="assigned" if assignees else "inbox",
                    assignee_ids=assignees,
                    created_by=req.created_by,
                    due_date=req.due_date,
                    is_blocked=False,
                    original_status=None,
                    state_changed_at=now,
                    created_at=now,
                    updated_at=now,
                )
            )
            # Assignment notifications belong to assign_task, not creation.
            if req.created_by:
                self.activity.append(
                    "task_created", req.created_by, f"Created task: {title}", task_id=task.id
                )

        await self._publish("task_created", task)
        logger.info("Task '%s' created (status=%s, assignees=%s)", task.id, task.status, assignees)
        return task

    async def quick_create(self, req: QuickCreateTaskRequest) -> Task:
        require_member(req.priority, PRIORITIES, "priority")
        title = req.title.strip()
        if not title:
            raise InvalidState("Task title must not be empty.")
        assignees = [req.assignee_id] if req.assignee_id else []

        with transaction(self.db):
            self._require_agents(req.created_by, *assignees)
            now = now_ms()
            task = self.tasks.add(
                Task(
                    title=title,
                    description="",
                    priority=req.priority,
                    status="assigned" if assignees else "inbox",
                    assignee_ids=assignees,
                    created_by=req.created_by,
                    is_blocked=False,
                    original_status=None,
                    state_changed_at=now,
                    created_at=now,
                    updated_at=now,
                )
            )
            self.activity.append(
                "task_created", req.created_by, f"Quick-created task: {title}", task_id=task.id
            )
            if req.assignee_id:
                self.notifications.notify(
                    req.assignee_id,
                    req.created_by,
                    f'You have been assigned a new task: "{title}"',
                    task_id=task.id,
                )

        await self._publish("task_created", task)
        logger.info("Task '%s' quick-created by '%s'", task.id, req.created_by)
        return task

    # ── Assign ──────────────────────────────────────────────────────────────────

    async def assign_task(self, task_id: str, req: AssignTaskRequest) -> Task:
        assignees = _unique(req.assignee_ids)

        with transaction(self.db):
            task = self._load_for_update(task_id)
            self._require_agents(req.assigned_by, *assignees)
            previous = list(task.assignee_ids or [])
            old, new = lifecycle.assign(task, assignees, now_ms())
            self.activity.append(
                "task_assigned",
                req.assigned_by,
                f"Assigned task: {task.title}",
                task_id=task.id,
                metadata=_transition_metadata(
                    old, new, assigneeIds=assignees, previousAssigneeIds=previous
                ),
            )
            for agent_id in assignees:
                self.notifications.notify(
                    agent_id,
                    req.assigned_by,
                    f'You have been assigned the task: "{task.title}"',
                    task_id=task.id,
                )

        await self._publish("task_updated", task)
        logger.info("Task '%s' assigned to %s by '%s'", task_id, assignees, req.assigned_by)
        return task

    # ── Status transitions ──────────────────────────────────────────────────────

    async def update_status(self, task_id: str, req: UpdateStatusRequest) -> Task:
        require_member(req.status, TASK_STATUSES, "status")

        with transaction(self.db):
            task = self._load_for_update(task_id)
            self._require_agents(req.updated_by)
            old, new = lifecycle.apply_status(task, req.status, now_ms())
            if req.status == lifecycle.BLOCKED:
                message = f"Task blocked at stage: {old} → {new}"
                metadata = _transition_metadata(old, new, blocked=True)
            else:
                message = f"Task status: {old} → {new}"
                metadata = _transition_metadata(old, new)
            self.activity.append(
                "status_changed", req.updated_by, message, task_id=task.id, metadata=metadata
            )

        await self._publish("task_updated", task)
        logger.info("Task '%s' status %s -> %s (blocked=%s)", task_id, old, new, task.is_blocked)
        return task

    async def submit_for_review(self, task_id: str, req: SubmitForReviewRequest) -> Task:
        with transaction(self.db):
            task = self._load_for_update(task_id)
            self._require_agents(req.updated_by, req.reviewer_id)
            old, new = lifecycle.submit(task, now_ms(), req.review_comment, req.reviewer_id)
            self.activity.append(
                "status_changed",
                req.updated_by,
                f"Submitted for review: {task.title}",
                task_id=task.id,
                metadata=_transition_metadata(old, new),
            )

        await self._publish("task_updated", task)
        logger.info("Task '%s' submitted for review by '%s'", task_id, req.updated_by)
        return task

    async def approve_review(self, task_id: str, req: ReviewDecisionRequest) -> Task:
        if not req.reviewer_id:
            raise InvalidState("An approval requires a reviewer id.")

        with transaction(self.db):
            task = self._load_for_update(task_id)
            self._require_agents(req.reviewer_id)
            old, new = lifecycle.approve(task, now_ms(), req.reviewer_id, req.review_comment)
            self.activity.append(
                "status_changed",
                req.reviewer_id,
                f"Review approved: {task.title}",
                task_id=task.id,
                metadata=_transition_metadata(old, new),
            )

        await self._publish("task_updated", task)
        logger.info("Task '%s' approved by '%s'", task_id, req.reviewer_id)
        return task

    async def reject_review(self, task_id: str, req: ReviewDecisionRequest) -> Task:
        if not req.reviewer_id:
            raise InvalidState("A rejection requires a reviewer id.")
        reason = req.review_comment or settings.DEFAULT_REJECTION_REASON

        with transaction(self.db):
            task = self._load_for_update(task_id)
            self._require_agents(req.reviewer_id)
            old, new = lifecycle.reject(task, now_ms(), req.reviewer_id, reason)
            self.activity.append(
                "status_changed",
                req.reviewer_id,
                f"Review rejected: {task.title}",
                task_id=task.id,
                metadata=_transition_metadata(old, new, reason=reason),
            )
            recipient_id = lifecycle.primary_recipient(task.assignee_ids or [], task.created_by)
            if recipient_id:
                self.notifications.notify(
                    recipient_id,
                    req.reviewer_id,
                    f'{self._mention_for(recipient_id)} Review rejected for "{task.title}": {reason}',
                    task_id=task.id,
                )

        await self._publish("task_updated", task)
        logger.info("Task '%s' rejected by '%s' (notified=%s)", task_id, req.reviewer_id, recipient_id)
        return task

    # ── Non-lifecycle patch ─────────────────────────────────────────────────────

    async def update_task(self, task_id: str, req: UpdateTaskRequest) -> Task:
        updates = req.model_dump(exclude_unset=True, exclude={"updated_by"})
        if updates.get("priority") is not None:
            require_member(updates["priority"], PRIORITIES, "priority")
        if updates.get("title") is not None and not updates["title"].strip():
            raise InvalidState("Task title must not be empty.")

        with transaction(self.db):
            task = self._load_for_update(task_id)
            self._require_agents(req.updated_by)

            changed: List[str] = []
            for key in ("title", "description", "priority"):
                value = updates.get(key)
                if key == "title" and value is not None:
                    value = value.strip()
                if value is not None and value != getattr(task, key):
                    setattr(task, key, value)
                    changed.append(key)
            # due_date may be cleared explicitly with null
            if "due_date" in updates and updates["due_date"] != task.due_date:
                task.due_date = updates["due_date"]
                changed.append("due_date")

            # Priority and due date drive urgency display, so they count as state.
            lifecycle.touch(
                task, now_ms(), state=bool({"priority", "due_date"} & set(changed))
            )
            self.activity.append(
                "task_updated",
                req.updated_by,
                f"Updated task: {task.title}",
                task_id=task.id,
                metadata={"changed": changed},
            )

        await self._publish("task_updated", task)
        logger.info("Task '%s' updated (%s)", task_id, ", ".join(changed) or "no field changes")
        return task

    # ── Read projections ────────────────────────────────────────────────────────

    async def get_task(self, task_id: str) -> Task:
        with storage_errors():
            task = self.tasks.get_by_id(task_id)
        if not task:
            raise NotFound(f"Task {task_id} not found.")
        return task

    async def list_tasks(self) -> List[Task]:
        with storage_errors():
            return self.tasks.list_tasks()

    async def get_by_status(self, status: str) -> List[Task]:
        """Filter on the *stored* status; blocked tasks stay under their stage."""
        require_member(status, TASK_STATUSES, "status")
        with storage_errors():
            return self.tasks.list_by_status(status)

    async def get_assigned(self, agent_id: str) -> List[Task]:
        with storage_errors():
            return self.tasks.list_assigned(agent_id)

    async def get_inbox(self) -> List[Task]:
        return await self.get_by_status("inbox")

    async def get_blocked(self) -> List[Task]:
        """Tasks under the block overlay, whatever their stage."""
        with storage_errors():
            return self.tasks.list_blocked()
