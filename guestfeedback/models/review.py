"""
Guest review (one submission against a form)
"""

from sqlmodel import Field, SQLModel
from sqlalchemy import Column, JSON, Text
from datetime import datetime
from typing import Any, Dict, Optional
from enum import Enum
import uuid


class ReviewStatus(str, Enum):
    """Moderation status of a review"""
    PENDING = "PENDING"                         # Awaiting internal follow-up
    APPROVED = "APPROVED"                       # Eligible for external sharing prompts
    REJECTED = "REJECTED"
    SHARED_EXTERNALLY = "SHARED_EXTERNALLY"


class Review(SQLModel, table=True):
    """Guest review with verbatim responses"""

    __tablename__ = "reviews"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    hotel_id: uuid.UUID = Field(foreign_key="hotels.id", index=True, description="Hotel ID for multi-tenant isolation")
    form_id: uuid.UUID = Field(foreign_key="forms.id", index=True)

    # Guest details derived from free-text answers, so unbounded
    guest_name: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    guest_email: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    guest_phone: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))

    responses: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    overall_rating: Optional[int] = Field(default=None, index=True)

    status: ReviewStatus = Field(default=ReviewStatus.PENDING, index=True)

    # Moderation
    is_deleted: bool = Field(default=False, index=True)
    is_checked: bool = Field(default=False)
    is_urgent: bool = Field(default=False)
    is_replied: bool = Field(default=False)
    admin_notes: Optional[str] = None
    reply_text: Optional[str] = None
    replied_at: Optional[datetime] = None

    submitted_at: datetime = Field(default_factory=datetime.utcnow, index=True)
    updated_at: Optional[datetime] = None
