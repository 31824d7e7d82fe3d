from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..models.task import Task


class TaskRepository:
    def __init__(self, db: Session):
        self.db = db

    def add(self, task: Task) -> Task:
        self.db.add(task)
        self.db.flush()
        return task

    def get_by_id(self, task_id: str) -> Optional[Task]:
        return self.db.execute(select(Task).where(Task.id == task_id)).scalar_one_or_none()

    def get_for_update(self, task_id: str) -> Optional[Task]:
        """Load a task for a read-modify-write, row-locked where the backend supports it.

        The mapper's ``version`` column catches writers that slipped past the lock.
        """
        stmt = select(Task).where(Task.id == task_id).with_for_update()
        stmt = stmt.execution_options(populate_existing=True)
        return self.db.execute(stmt).scalar_one_or_none()

    def list_tasks(self) -> List[Task]:
        return list(self.db.execute(select(Task).order_by(Task.created_at.desc())).scalars().all())

    def list_by_status(self, status: str) -> List[Task]:
        stmt = select(Task).where(Task.status == status).order_by(Task.created_at.desc())
        return list(self.db.execute(stmt).scalars().all())

    def list_blocked(self) -> List[Task]:
        stmt = select(Task).where(Task.is_blocked.is_(True)).order_by(Task.updated_at.desc())
        return list(self.db.execute(stmt).scalars().all())

    def list_assigned(self, agent_id: str) -> List[Task]:
        # JSON containment differs per backend; the roster is small, filter in Python.
        return [t for t in self.list_tasks() if agent_id in (t.assignee_ids or [])]
