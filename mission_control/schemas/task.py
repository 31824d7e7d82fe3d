"""Pydantic schemas for the task lifecycle API."""

from __future__ import annotations

from typing import Optional, List

from pydantic import BaseModel, ConfigDict, Field

from ..lifecycle import Priority, TaskStatus


# ── Request models ──────────────────────────────────────────────────────────────

class CreateTaskRequest(BaseModel):
    title: str = Field(..., min_length=1)
    description: str = ""
    priority: Priority
    assignee_ids: List[str] = []
    created_by: Optional[str] = None
    due_date: Optional[int] = Field(None, description="Epoch milliseconds")


class QuickCreateTaskRequest(BaseModel):
    title: str = Field(..., min_length=1)
    priority: Priority = "P2"
    assignee_id: Optional[str] = None
    created_by: str


class AssignTaskRequest(BaseModel):
    assignee_ids: List[str] = Field(..., description="Ordered; the first entry is the primary assignee")
    assigned_by: str


class UpdateStatusRequest(BaseModel):
    status: TaskStatus
    updated_by: str


class SubmitForReviewRequest(BaseModel):
    updated_by: str
    review_comment: Optional[str] = None
    reviewer_id: Optional[str] = None


class ReviewDecisionRequest(BaseModel):
    reviewer_id: str
    review_comment: Optional[str] = None


class UpdateTaskRequest(BaseModel):
    updated_by: str
    title: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[Priority] = None
    due_date: Optional[int] = None


# ── Response models ─────────────────────────────────────────────────────────────

class TaskResponse(BaseModel):
    id: str
    title: str
    description: str = ""
    status: str
    effective_status: str
    priority: str
    assignee_ids: List[str] = []
    created_by: Optional[str] = None
    reviewer_id: Optional[str] = None
    review_comment: Optional[str] = None
    reviewed_at: Optional[int] = None
    due_date: Optional[int] = None
    is_blocked: bool = False
    original_status: Optional[str] = None
    state_changed_at: int
    created_at: int
    updated_at: int

    model_config = ConfigDict(from_attributes=True)


class TaskCreatedResponse(BaseModel):
    task_id: str
