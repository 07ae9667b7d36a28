"""
User model with roles, account status and tenant linkage
"""

from sqlmodel import Field, SQLModel
from datetime import datetime
from typing import Optional
import uuid
from enum import Enum


class UserRole(str, Enum):
    """User roles for RBAC"""
    PLATFORM_ADMIN = "PLATFORM_ADMIN"
    TENANT_ADMIN = "TENANT_ADMIN"


class UserStatus(str, Enum):
    """Account status; users are soft-deleted through DELETED"""
    ACTIVE = "ACTIVE"
    DEACTIVATED = "DEACTIVATED"
    DELETED = "DELETED"


class User(SQLModel, table=True):
    """User account, linked to a hotel for tenant admins"""

    __tablename__ = "users"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    hotel_id: Optional[uuid.UUID] = Field(
        default=None,
        foreign_key="hotels.id",
        index=True,
        description="Hotel this tenant admin belongs to",
    )

    # Authentication
    email: str = Field(unique=True, index=True, nullable=False, max_length=255)
    password_hash: str = Field(nullable=False)

    # Profile
    first_name: str = Field(nullable=False, max_length=100)
    last_name: str = Field(nullable=False, max_length=100)
    phone: Optional[str] = Field(default=None, max_length=50)

    # RBAC
    role: UserRole = Field(default=UserRole.TENANT_ADMIN, nullable=False, index=True)

    # Status
    status: UserStatus = Field(default=UserStatus.ACTIVE, nullable=False, index=True)
    email_verified: bool = Field(default=False)
    verification_token: Optional[str] = Field(default=None, index=True, max_length=128)
    reset_token: Optional[str] = Field(default=None, index=True, max_length=128)
    reset_token_expires_at: Optional[datetime] = None

    # Timestamps
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: Optional[datetime] = None
    last_login_at: Optional[datetime] = None
