"""
Pydantic schemas for hotels (tenants)
"""

from pydantic import BaseModel, ConfigDict, Field, EmailStr
from typing import Optional
from datetime import datetime
import uuid

from guestfeedback.models import SubscriptionPlan, SubscriptionStatus

SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"


class HotelRegistration(BaseModel):
    """Self-service hotel sign-up: hotel plus its owner account"""
    hotel_name: str = Field(..., min_length=1, max_length=255)
    slug: str = Field(..., min_length=3, max_length=60, pattern=SLUG_PATTERN)
    hotel_email: EmailStr
    phone: Optional[str] = Field(default=None, max_length=50)
    address: Optional[str] = Field(default=None, max_length=500)
    plan: SubscriptionPlan = SubscriptionPlan.BASIC

    email: EmailStr
    password: str = Field(..., min_length=8, max_length=100)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)


class HotelResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    slug: str
    email: str
    phone: Optional[str]
    address: Optional[str]
    owner_id: Optional[uuid.UUID]
    subscription_plan: SubscriptionPlan
    subscription_status: SubscriptionStatus
    subscription_end: Optional[datetime]
    is_active: bool
    created_at: datetime


class PublicHotelResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    slug: str


class SlugAvailability(BaseModel):
    slug: str
    valid: bool
    available: bool


class HotelPlanUpdate(BaseModel):
    plan: SubscriptionPlan


class ContactMessage(BaseModel):
    subject: str = Field(..., min_length=1, max_length=255)
    message: str = Field(..., min_length=1, max_length=5000)
