"""
Pydantic schemas for notifications
"""

from pydantic import BaseModel, ConfigDict
from typing import Any, Dict, Optional
from datetime import datetime
import uuid


class NotificationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    kind: str
    title: str
    message: str
    payload: Optional[Dict[str, Any]]
    is_read: bool
    created_at: datetime
