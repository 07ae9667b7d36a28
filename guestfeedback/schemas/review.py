"""
Pydantic schemas for guest submissions and review moderation
"""

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from typing import Any, Dict, Optional
from datetime import datetime
import uuid

from guestfeedback.models import ReviewStatus


class SubmissionIn(BaseModel):
    """Guest answers keyed by form field id"""
    form_id: uuid.UUID = Field(..., validation_alias=AliasChoices("form_id", "formId"))
    responses: Dict[str, Any]


class SubmissionResponse(BaseModel):
    message: str = "Feedback submitted successfully"
    review_id: uuid.UUID
    status: ReviewStatus
    overall_rating: Optional[int]


class ReviewStatusUpdate(BaseModel):
    status: ReviewStatus


class ReviewFlagsUpdate(BaseModel):
    is_checked: Optional[bool] = None
    is_urgent: Optional[bool] = None
    is_replied: Optional[bool] = None


class ReviewNotesUpdate(BaseModel):
    admin_notes: Optional[str] = Field(default=None, max_length=5000)


class ReviewReply(BaseModel):
    message: str = Field(..., min_length=1, max_length=5000)


class ReviewResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    hotel_id: uuid.UUID
    form_id: uuid.UUID
    guest_name: Optional[str]
    guest_email: Optional[str]
    guest_phone: Optional[str]
    responses: Dict[str, Any]
    overall_rating: Optional[int]
    status: ReviewStatus
    is_deleted: bool
    is_checked: bool
    is_urgent: bool
    is_replied: bool
    admin_notes: Optional[str]
    reply_text: Optional[str]
    replied_at: Optional[datetime]
    submitted_at: datetime
