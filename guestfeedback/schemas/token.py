"""
Pydantic schemas for authentication and tokens
"""

from pydantic import BaseModel, Field, EmailStr
from typing import Optional
from datetime import datetime


class TokenPayload(BaseModel):
    """Bearer token claims"""
    userId: str = Field(..., description="User ID")
    email: EmailStr
    role: str = Field(..., description="User role")
    firstName: str
    lastName: str
    status: str
    hotelId: Optional[str] = None
    hotelSlug: Optional[str] = None
    hotelName: Optional[str] = None
    iat: datetime = Field(..., description="Issued at")
    exp: datetime = Field(..., description="Expiration time")

