"""Task lifecycle rules — the block overlay and review metadata state machine.

A task carries two pieces of state: the stored lifecycle ``status`` and a
reversible block overlay (``is_blocked`` / ``original_status``). External
consumers see the *effective* status::

    effective = original_status if is_blocked else status

Functions here mutate a task object in place and never touch the database;
``TaskService`` runs them inside a transaction together with the activity and
notification rows they imply.
"""

from __future__ import annotations

from typing import Literal, Optional, Protocol, get_args

from .exceptions import InvalidState

TaskStatus = Literal["inbox", "assigned", "in_progress", "review", "blocked", "done"]
Priority = Literal["P0", "P1", "P2", "P3"]
AgentStatus = Literal["idle", "active", "blocked"]
ActivityType = Literal[
    "task_created",
    "task_assigned",
    "task_updated",
    "status_changed",
    "message_sent",
    "document_created",
    "agent_heartbeat",
]

TASK_STATUSES: tuple[str, ...] = get_args(TaskStatus)
PRIORITIES: tuple[str, ...] = get_args(Priority)
AGENT_STATUSES: tuple[str, ...] = get_args(AgentStatus)
ACTIVITY_TYPES: tuple[str, ...] = get_args(ActivityType)

BLOCKED = "blocked"
# A legacy row may carry "blocked" as its stored status; the overlay never
# records that token, it records the stage work resumes in.
_BLOCKED_FALLBACK = "in_progress"


class LifecycleTask(Protocol):
    status: str
    assignee_ids: list[str]
    is_blocked: bool
    original_status: Optional[str]
    reviewer_id: Optional[str]
    review_comment: Optional[str]
    reviewed_at: Optional[int]
    state_changed_at: int
    updated_at: int


def require_member(value: str, allowed: tuple[str, ...], field: str) -> str:
    if value not in allowed:
        raise InvalidState(f"Invalid {field} '{value}'. Expected one of: {', '.join(allowed)}.")
    return value


def effective_status(task: LifecycleTask) -> str:
    if task.is_blocked and task.original_status:
        return task.original_status
    return task.status


def touch(task: LifecycleTask, now: int, *, state: bool = True) -> None:
    task.updated_at = now
    if state:
        task.state_changed_at = now


def clear_block(task: LifecycleTask) -> None:
    task.is_blocked = False
    task.original_status = None


def clear_review(task: LifecycleTask) -> None:
    task.reviewer_id = None
    task.review_comment = None
    task.reviewed_at = None


def enter_block(task: LifecycleTask, now: int) -> tuple[str, str]:
    """Apply the block overlay. Returns the effective (old, new) status pair.

    Re-blocking an already blocked task keeps the captured ``original_status``.
    The stored ``status`` is left untouched.
    """
    old = effective_status(task)
    if not task.is_blocked:
        captured = old if old != BLOCKED else _BLOCKED_FALLBACK
        task.original_status = captured
        task.is_blocked = True
        old = captured
    touch(task, now)
    return old, old


def move_to(task: LifecycleTask, target: str, now: int) -> tuple[str, str]:
    """Generic status change (any target except ``blocked``).

    Leaves the block overlay. Landing on ``in_progress`` this way drops review
    metadata; only ``reject`` keeps it.
    """
    old = effective_status(task)
    task.status = target
    clear_block(task)
    if target == "in_progress":
        clear_review(task)
    touch(task, now)
    return old, target


def apply_status(task: LifecycleTask, target: str, now: int) -> tuple[str, str]:
    require_member(target, TASK_STATUSES, "status")
    if target == BLOCKED:
        return enter_block(task, now)
    return move_to(task, target, now)


def assign(task: LifecycleTask, assignee_ids: list[str], now: int) -> tuple[str, str]:
    """Replace the assignee sequence and force ``assigned``, leaving any block."""
    old = effective_status(task)
    task.assignee_ids = list(assignee_ids)
    task.status = "assigned"
    clear_block(task)
    touch(task, now)
    return old, "assigned"


def submit(task: LifecycleTask, now: int, comment: Optional[str], reviewer_id: Optional[str]) -> tuple[str, str]:
    old = effective_status(task)
    task.status = "review"
    task.review_comment = comment
    if reviewer_id:
        task.reviewer_id = reviewer_id
    task.reviewed_at = None
    clear_block(task)
    touch(task, now)
    return old, "review"


def approve(task: LifecycleTask, now: int, reviewer_id: str, comment: Optional[str]) -> tuple[str, str]:
    old = effective_status(task)
    task.status = "done"
    task.reviewer_id = reviewer_id
    if comment is not None:
        task.review_comment = comment
    task.reviewed_at = now
    clear_block(task)
    touch(task, now)
    return old, "done"


def reject(task: LifecycleTask, now: int, reviewer_id: str, reason: str) -> tuple[str, str]:
    """Send the task back to ``in_progress`` keeping the reviewer's note visible."""
    if not reviewer_id:
        raise InvalidState("A rejection requires a reviewer id.")
    old = effective_status(task)
    task.status = "in_progress"
    task.reviewer_id = reviewer_id
    task.review_comment = reason
    task.reviewed_at = now
    clear_block(task)
    touch(task, now)
    return old, "in_progress"


def primary_recipient(assignee_ids: list[str], created_by: Optional[str]) -> Optional[str]:
    """First assignee, else the creator, else nobody.

    ``assignee_ids`` is an ordered sequence; its first entry is the primary
    assignee.
    """
    if assignee_ids:
        return assignee_ids[0]
    return created_by or None
