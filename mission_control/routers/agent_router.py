from typing import List

from fastapi import APIRouter, Depends

from ..dependencies import get_agent_service
from ..schemas.agent import (
    AgentResponse,
    RegisterAgentRequest,
    SeededAgent,
    UpdateAgentStatusRequest,
)
from ..services.agent_service import AgentService

router = APIRouter(tags=["Agents"])


@router.post("", response_model=AgentResponse, status_code=201)
def register_agent(
    req: RegisterAgentRequest,
    svc: AgentService = Depends(get_agent_service),
):
    """Add an agent to the roster."""
    return svc.register_agent(req)


@router.post("/init-team", response_model=List[SeededAgent])
def init_team(svc: AgentService = Depends(get_agent_service)):
    """Seed the default team. Safe to call repeatedly."""
    return svc.init_team()


@router.get("", response_model=List[AgentResponse])
def list_agents(svc: AgentService = Depends(get_agent_service)):
    return svc.list_agents()


@router.get("/by-name/{name}", response_model=AgentResponse)
def get_agent_by_name(name: str, svc: AgentService = Depends(get_agent_service)):
    return svc.get_by_name(name)


@router.get("/by-session/{session_key}", response_model=AgentResponse)
def get_agent_by_session(session_key: str, svc: AgentService = Depends(get_agent_service)):
    return svc.get_by_session_key(session_key)


@router.get("/{agent_id}", response_model=AgentResponse)
def get_agent(agent_id: str, svc: AgentService = Depends(get_agent_service)):
    return svc.get_agent(agent_id)


@router.patch("/{agent_id}/status", response_model=AgentResponse)
def update_agent_status(
    agent_id: str,
    req: UpdateAgentStatusRequest,
    svc: AgentService = Depends(get_agent_service),
):
    """Set idle/active/blocked and the task the agent is working on."""
    return svc.update_status(agent_id, req)


@router.post("/{agent_id}/heartbeat", response_model=AgentResponse)
def heartbeat(agent_id: str, svc: AgentService = Depends(get_agent_service)):
    """Record that the agent is alive (also written to the activity feed)."""
    return svc.heartbeat(agent_id)
