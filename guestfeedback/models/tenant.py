"""
Hotel model - the tenant and unit of data isolation
"""

from sqlmodel import Field, SQLModel
from datetime import datetime
from typing import Optional
from enum import Enum
import uuid


class SubscriptionPlan(str, Enum):
    """Subscription tiers, least to most permissive"""
    BASIC = "basic"
    PREMIUM = "premium"
    ENTERPRISE = "enterprise"


class SubscriptionStatus(str, Enum):
    """Billing state as reported by the billing provider"""
    TRIAL = "TRIAL"
    ACTIVE = "ACTIVE"
    PAST_DUE = "PAST_DUE"
    CANCELLED = "CANCELLED"


class Hotel(SQLModel, table=True):
    """Hotel account (tenant)"""

    __tablename__ = "hotels"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    name: str = Field(index=True, max_length=255)
    slug: str = Field(unique=True, index=True, max_length=60, description="Globally unique, URL-safe identifier")
    email: str = Field(index=True, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=50)
    address: Optional[str] = Field(default=None, max_length=500)

    # Owning tenant admin; not a foreign key because users already reference hotels
    owner_id: Optional[uuid.UUID] = Field(default=None, index=True)

    # Subscription
    subscription_plan: SubscriptionPlan = Field(default=SubscriptionPlan.BASIC)
    subscription_status: SubscriptionStatus = Field(default=SubscriptionStatus.TRIAL, index=True)
    subscription_id: Optional[str] = Field(default=None, index=True, max_length=255)
    subscription_end: Optional[datetime] = None

    # Timestamps
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: Optional[datetime] = None
    is_active: bool = Field(default=True, index=True)
