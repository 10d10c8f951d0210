from typing import Optional
from pydantic import BaseModel
from datetime import datetime

class NotificationResponse(BaseModel):
    id: int
    title: str
    message: str
    document_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    user_id: int
    read: bool = False

    model_config = {"from_attributes": True}
