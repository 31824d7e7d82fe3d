"""Agent model — the roster of named workers."""

import uuid

from sqlalchemy import Column, String, BigInteger, JSON, Enum as SAEnum

from ..database import Base, now_ms
from ..lifecycle import AGENT_STATUSES


class Agent(Base):
    __tablename__ = "agents"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String, unique=True, index=True, nullable=False)
    role = Column(String, nullable=False)
    status = Column(
        SAEnum(*AGENT_STATUSES, name="agent_status", validate_strings=True),
        nullable=False,
        default="idle",
    )
    mention_patterns = Column(JSON, nullable=False, default=list)  # ["@nova", "@lead"]
    session_key = Column(String, unique=True, nullable=True)       # "agent:nova:main"
    model = Column(String, nullable=True)
    current_task_id = Column(String, nullable=True)

    last_heartbeat = Column(BigInteger, nullable=True)              # epoch ms
    created_at = Column(BigInteger, nullable=False, default=now_ms)

    @property
    def mention(self) -> str:
        """Preferred mention handle for addressing this agent."""
        if self.mention_patterns:
            return self.mention_patterns[0]
        return f"@{self.name}"
