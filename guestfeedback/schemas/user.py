"""
Pydantic schemas for users and authentication requests
"""

from pydantic import BaseModel, ConfigDict, Field, EmailStr
from typing import Optional
from datetime import datetime
import uuid

from guestfeedback.models import UserRole, UserStatus


class UserLogin(BaseModel):
    """Email and password login"""
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=100)


class VerifyEmail(BaseModel):
    token: str = Field(..., min_length=1)


class UserStatusUpdate(BaseModel):
    status: UserStatus


class UserResponse(BaseModel):
    """User response model"""
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    email: str
    first_name: str
    last_name: str
    role: UserRole
    status: UserStatus
    hotel_id: Optional[uuid.UUID]
    email_verified: bool
    created_at: datetime
    last_login_at: Optional[datetime]


class IdentityResponse(BaseModel):
    """Current authenticated identity"""
    model_config = ConfigDict(from_attributes=True)

    user_id: uuid.UUID
    email: str
    role: UserRole
    status: UserStatus
    email_verified: bool
    first_name: str
    last_name: str
    tenant_id: Optional[uuid.UUID]
    tenant_slug: Optional[str]
    tenant_name: Optional[str]


class LoginResponse(BaseModel):
    """Login result for both web and mobile clients"""
    success: bool = True
    message: str = "Login successful"
    access_token: Optional[str] = None
    token_type: Optional[str] = None
    expires_in: Optional[int] = None
    user: UserResponse


class EmailOnly(BaseModel):
    """Forgot-password and resend-verification requests"""
    email: EmailStr


class PasswordChange(BaseModel):
    current_password: str = Field(..., min_length=1, max_length=100)
    new_password: str = Field(..., min_length=8, max_length=100)


class PasswordReset(BaseModel):
    token: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=8, max_length=100)
