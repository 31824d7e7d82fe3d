from typing import List, Optional, Protocol

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..models.agent import Agent


class AgentRoster(Protocol):
    """Read-only view of the roster consumed by the task and notification services."""

    def get_by_id(self, agent_id: str) -> Optional[Agent]: ...


class AgentRepository:
    """Roster persistence. Writes are flushed, never committed; the caller's
    transaction decides."""

    def __init__(self, db: Session):
        self.db = db

    def add(self, agent: Agent) -> Agent:
        self.db.add(agent)
        self.db.flush()
        return agent

    def get_by_id(self, agent_id: str) -> Optional[Agent]:
        return self.db.execute(select(Agent).where(Agent.id == agent_id)).scalar_one_or_none()

    def get_by_name(self, name: str) -> Optional[Agent]:
        return self.db.execute(select(Agent).where(Agent.name == name)).scalar_one_or_none()

    def get_by_session_key(self, session_key: str) -> Optional[Agent]:
        return self.db.execute(
            select(Agent).where(Agent.session_key == session_key)
        ).scalar_one_or_none()

    def list_agents(self) -> List[Agent]:
        return list(self.db.execute(select(Agent).order_by(Agent.created_at, Agent.name)).scalars().all())
