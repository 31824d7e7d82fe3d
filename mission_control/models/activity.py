"""Activity model — append-only audit trail."""

from sqlalchemy import Column, String, Text, Integer, BigInteger, JSON, Enum as SAEnum

from ..database import Base, now_ms
from ..lifecycle import ACTIVITY_TYPES


class Activity(Base):
    __tablename__ = "activities"

    id = Column(Integer, primary_key=True, autoincrement=True)
    type = Column(
        SAEnum(*ACTIVITY_TYPES, name="activity_type", validate_strings=True),
        nullable=False,
    )
    agent_id = Column(String, nullable=False, index=True)
    task_id = Column(String, nullable=True, index=True)
    message = Column(Text, nullable=False)
    # "metadata" is reserved on declarative classes
    meta = Column("metadata", JSON, nullable=True)  # e.g. {"oldStatus": ..., "newStatus": ...}
    created_at = Column(BigInteger, nullable=False, default=now_ms, index=True)
