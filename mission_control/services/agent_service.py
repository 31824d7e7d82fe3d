from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ..database import now_ms, storage_errors, transaction
from ..exceptions import InvalidState, NotFound
from ..lifecycle import AGENT_STATUSES, require_member
from ..models.agent import Agent
from ..repositories.agent_repository import AgentRepository
from ..schemas.agent import RegisterAgentRequest, UpdateAgentStatusRequest
from .activity_service import ActivityLogger

logger = logging.getLogger("mission_control.services.agent_service")

# ── Default roster ──────────────────────────────────────────────────────────────

DEFAULT_TEAM: tuple[dict, ...] = (
    {
        "name": "Nova",
        "role": "Project lead",
        "session_key": "agent:nova:main",
        "mention_patterns": ["@nova", "@lead"],
        "model": "claude-opus",
    },
    {
        "name": "Sage",
        "role": "Research & analysis",
        "session_key": "agent:sage:main",
        "mention_patterns": ["@sage", "@research"],
        "model": "gpt-codex",
    },
    {
        "name": "Atlas",
        "role": "Product manager",
        "session_key": "agent:atlas:main",
        "mention_patterns": ["@atlas", "@pm"],
        "model": "gpt-codex",
    },
    {
        "name": "Jarvis",
        "role": "Hardware",
        "session_key": "agent:jarvis:main",
        "mention_patterns": ["@jarvis", "@hw"],
        "model": "gpt-codex",
    },
    {
        "name": "Friday",
        "role": "Software development",
        "session_key": "agent:friday:main",
        "mention_patterns": ["@friday", "@sw", "@dev"],
        "model": "gpt-codex",
    },
    {
        "name": "Vision",
        "role": "Testing & verification",
        "session_key": "agent:vision:main",
        "mention_patterns": ["@vision", "@qa"],
        "model": "gpt-codex",
    },
)


class AgentService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = AgentRepository(db)
        self.activity = ActivityLogger(db)

    # ── Registration ────────────────────────────────────────────────────────────

    def register_agent(self, req: RegisterAgentRequest) -> Agent:
        with transaction(self.db):
            if self.repo.get_by_name(req.name):
                raise InvalidState(f"Agent with name '{req.name}' already exists.")
            if req.session_key and self.repo.get_by_session_key(req.session_key):
                raise InvalidState(f"Session key '{req.session_key}' is already registered.")
            agent = self.repo.add(
                Agent(
                    name=req.name,
                    role=req.role,
                    status="idle",
                    mention_patterns=list(req.mention_patterns),
                    session_key=req.session_key,
                    model=req.model,
                    created_at=now_ms(),
                )
            )
        logger.info("Agent '%s' registered as %s", agent.name, agent.id)
        return agent

    def init_team(self) -> List[dict]:
        """Seed the default roster; agents that already exist are left alone."""
        results: List[dict] = []
        with transaction(self.db):
            for member in DEFAULT_TEAM:
                existing = self.repo.get_by_name(member["name"])
                if existing:
                    results.append({"name": member["name"], "id": existing.id, "action": "exists"})
                    continue
                agent = self.repo.add(Agent(status="idle", created_at=now_ms(), **member))
                results.append({"name": member["name"], "id": agent.id, "action": "created"})
        created = sum(1 for r in results if r["action"] == "created")
        logger.info("Team initialised: %d created, %d existing", created, len(results) - created)
        return results

    # ── Lookups ─────────────────────────────────────────────────────────────────

    def list_agents(self) -> List[Agent]:
        with storage_errors():
            return self.repo.list_agents()

    def get_agent(self, agent_id: str) -> Agent:
        with storage_errors():
            agent = self.repo.get_by_id(agent_id)
        if not agent:
            raise NotFound(f"Agent '{agent_id}' not found.")
        return agent

    def get_by_name(self, name: str) -> Agent:
        with storage_errors():
            agent = self.repo.get_by_name(name)
        if not agent:
            raise NotFound(f"Agent named '{name}' not found.")
        return agent

    def get_by_session_key(self, session_key: str) -> Agent:
        with storage_errors():
            agent = self.repo.get_by_session_key(session_key)
        if not agent:
            raise NotFound(f"No agent registered for session '{session_key}'.")
        return agent

    # ── Mutations ───────────────────────────────────────────────────────────────

    def update_status(self, agent_id: str, req: UpdateAgentStatusRequest) -> Agent:
        require_member(req.status, AGENT_STATUSES, "agent status")
        with transaction(self.db):
            agent = self.get_agent(agent_id)
            agent.status = req.status
            agent.current_task_id = req.current_task_id
        logger.info("Agent '%s' status -> %s (task=%s)", agent.name, req.status, req.current_task_id)
        return agent

    def heartbeat(self, agent_id: str, at: Optional[int] = None) -> Agent:
        """Stamp the heartbeat and record it in the activity feed, atomically."""
        with transaction(self.db):
            agent = self.get_agent(agent_id)
            agent.last_heartbeat = at or now_ms()
            self.activity.append("agent_heartbeat", agent.id, f"{agent.name} heartbeat")
        return agent
