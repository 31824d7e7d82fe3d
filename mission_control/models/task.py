"""Task model — lifecycle status plus the reversible block overlay."""

import uuid

from sqlalchemy import Column, String, Text, Boolean, Integer, BigInteger, JSON, Enum as SAEnum

from ..database import Base, now_ms
from ..lifecycle import PRIORITIES, TASK_STATUSES, effective_status


class Task(Base):
    __tablename__ = "tasks"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False, default="")

    status = Column(
        SAEnum(*TASK_STATUSES, name="task_status", validate_strings=True),
        nullable=False,
        default="inbox",
        index=True,
    )
    priority = Column(
        SAEnum(*PRIORITIES, name="task_priority", validate_strings=True),
        nullable=False,
    )

    assignee_ids = Column(JSON, nullable=False, default=list)  # ordered; [0] is primary
    created_by = Column(String, nullable=True, index=True)

    # Review metadata
    reviewer_id = Column(String, nullable=True)
    review_comment = Column(Text, nullable=True)
    reviewed_at = Column(BigInteger, nullable=True)

    due_date = Column(BigInteger, nullable=True)

    # Block overlay: NULL original_status means "not blocked", never "" or 0
    is_blocked = Column(Boolean, nullable=False, default=False)
    original_status = Column(
        SAEnum(*TASK_STATUSES, name="task_original_status", validate_strings=True),
        nullable=True,
    )

    state_changed_at = Column(BigInteger, nullable=False, default=now_ms)
    created_at = Column(BigInteger, nullable=False, default=now_ms)
    updated_at = Column(BigInteger, nullable=False, default=now_ms)

    version = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    @property
    def effective_status(self) -> str:
        return effective_status(self)
