from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class ActivityResponse(BaseModel):
    id: int
    type: str
    agent_id: str
    task_id: Optional[str] = None
    message: str
    metadata: Optional[Dict[str, Any]] = Field(None, validation_alias="meta")
    created_at: int

    model_config = ConfigDict(from_attributes=True)
