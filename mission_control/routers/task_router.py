"""Task lifecycle routes plus the ``/ws/tasks`` push channel."""

from typing import List, Optional

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from ..dependencies import get_task_service
from ..schemas.task import (
    AssignTaskRequest,
    CreateTaskRequest,
    QuickCreateTaskRequest,
    ReviewDecisionRequest,
    SubmitForReviewRequest,
    TaskCreatedResponse,
    TaskResponse,
    TaskStatus,
    UpdateStatusRequest,
    UpdateTaskRequest,
)
from ..services.task_service import TaskService
from ..ws_manager import task_ws_manager

router = APIRouter(tags=["Tasks"])
ws_router = APIRouter(tags=["Tasks"])


# -- Create --

@router.post("", response_model=TaskCreatedResponse, status_code=201)
async def create_task(
    req: CreateTaskRequest,
    svc: TaskService = Depends(get_task_service),
):
    """Create a task. It starts in ``assigned`` when assignees are given, else ``inbox``."""
    task = await svc.create_task(req)
    return TaskCreatedResponse(task_id=task.id)


@router.post("/quick", response_model=TaskCreatedResponse, status_code=201)
async def quick_create_task(
    req: QuickCreateTaskRequest,
    svc: TaskService = Depends(get_task_service),
):
    """Create a task with a single optional assignee and notify that assignee."""
    task = await svc.quick_create(req)
    return TaskCreatedResponse(task_id=task.id)


# -- Read projections --

@router.get("", response_model=List[TaskResponse])
async def list_tasks(
    status: Optional[TaskStatus] = None,
    agent_id: Optional[str] = None,
    svc: TaskService = Depends(get_task_service),
):
    """List tasks, optionally by stored status or by assignee."""
    if agent_id and not status:
        return await svc.get_assigned(agent_id)
    if not status:
        return await svc.list_tasks()
    tasks = await svc.get_by_status(status)
    if agent_id:
        tasks = [t for t in tasks if agent_id in (t.assignee_ids or [])]
    return tasks


@router.get("/inbox", response_model=List[TaskResponse])
async def list_inbox(svc: TaskService = Depends(get_task_service)):
    """Tasks waiting to be assigned."""
    return await svc.get_inbox()


@router.get("/blocked", response_model=List[TaskResponse])
async def list_blocked(svc: TaskService = Depends(get_task_service)):
    """Tasks under the block overlay, at any stage."""
    return await svc.get_blocked()


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(task_id: str, svc: TaskService = Depends(get_task_service)):
    return await svc.get_task(task_id)


# -- Lifecycle --

@router.post("/{task_id}/assign", response_model=TaskResponse)
async def assign_task(
    task_id: str,
    req: AssignTaskRequest,
    svc: TaskService = Depends(get_task_service),
):
    """Replace the assignees, move to ``assigned`` and notify every assignee."""
    return await svc.assign_task(task_id, req)


@router.post("/{task_id}/status", response_model=TaskResponse)
async def update_task_status(
    task_id: str,
    req: UpdateStatusRequest,
    svc: TaskService = Depends(get_task_service),
):
    """General transition. ``blocked`` applies the overlay; anything else lifts it."""
    return await svc.update_status(task_id, req)


@router.post("/{task_id}/review/submit", response_model=TaskResponse)
async def submit_for_review(
    task_id: str,
    req: SubmitForReviewRequest,
    svc: TaskService = Depends(get_task_service),
):
    return await svc.submit_for_review(task_id, req)


@router.post("/{task_id}/review/approve", response_model=TaskResponse)
async def approve_review(
    task_id: str,
    req: ReviewDecisionRequest,
    svc: TaskService = Depends(get_task_service),
):
    return await svc.approve_review(task_id, req)


@router.post("/{task_id}/review/reject", response_model=TaskResponse)
async def reject_review(
    task_id: str,
    req: ReviewDecisionRequest,
    svc: TaskService = Depends(get_task_service),
):
    """Back to ``in_progress`` with the rejection note kept; notifies the primary assignee."""
    return await svc.reject_review(task_id, req)


@router.patch("/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: str,
    req: UpdateTaskRequest,
    svc: TaskService = Depends(get_task_service),
):
    """Patch title, description, priority or due date."""
    return await svc.update_task(task_id, req)


# -- Push --

@ws_router.websocket("/ws/tasks")
async def task_events(ws: WebSocket):
    await task_ws_manager.connect(ws)
    try:
        while True:
            await ws.receive_text()
    except WebSocketDisconnect:
        task_ws_manager.disconnect(ws)
