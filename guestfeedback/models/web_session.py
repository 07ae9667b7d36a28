"""
Server-side web session keyed by an opaque cookie value
"""

from sqlmodel import Field, SQLModel
from datetime import datetime
from typing import Optional
import uuid

from guestfeedback.models.user import UserRole


class WebSession(SQLModel, table=True):
    """Cookie-backed session; role and hotel are copies taken at login"""

    __tablename__ = "web_sessions"

    id: str = Field(primary_key=True, max_length=128)
    user_id: uuid.UUID = Field(foreign_key="users.id", index=True)
    role: UserRole
    hotel_id: Optional[uuid.UUID] = None

    created_at: datetime = Field(default_factory=datetime.utcnow)
    expires_at: datetime = Field(index=True)
