from typing import Optional

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str
    database: str
    agents_count: int
    ws_clients: int
    version: str
    error: Optional[str] = None
