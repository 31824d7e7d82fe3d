from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CreateNotificationRequest(BaseModel):
    recipient_id: str
    sender_id: str
    content: str = Field(..., description="Free text; truncated to the configured maximum")
    task_id: Optional[str] = None
    message_id: Optional[str] = None


class NotificationResponse(BaseModel):
    id: int
    recipient_id: str
    sender_id: str
    task_id: Optional[str] = None
    message_id: Optional[str] = None
    content: str
    delivered: bool
    created_at: int

    model_config = ConfigDict(from_attributes=True)


class MarkedResponse(BaseModel):
    marked: int
