"""Pydantic schemas for the agent registry."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..lifecycle import AgentStatus


class RegisterAgentRequest(BaseModel):
    name: str = Field(..., min_length=1, description="Unique display name")
    role: str
    mention_patterns: List[str] = Field(default_factory=list)
    session_key: Optional[str] = None
    model: Optional[str] = None


class UpdateAgentStatusRequest(BaseModel):
    status: AgentStatus
    current_task_id: Optional[str] = None


class AgentResponse(BaseModel):
    id: str
    name: str
    role: str
    status: str
    mention_patterns: List[str] = []
    session_key: Optional[str] = None
    model: Optional[str] = None
    current_task_id: Optional[str] = None
    last_heartbeat: Optional[int] = None
    created_at: int

    model_config = ConfigDict(from_attributes=True)


class SeededAgent(BaseModel):
    name: str
    id: str
    action: Literal["created", "exists"]
