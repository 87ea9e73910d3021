from pydantic import BaseModel, ConfigDict, field_serializer
from datetime import datetime
from typing import Optional

from poll_app.core.timeutils import as_utc


class NotificationRead(BaseModel):
    id: int
    message: str
    type: str
    poll_id: Optional[int] = None
    read: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_serializer('created_at')
    def serialize_timestamp(self, value: datetime) -> str:
        return as_utc(value).isoformat()


class UnreadCount(BaseModel):
    count: int


class MessageResponse(BaseModel):
    message: str
