"""
Schemas module
"""

from guestfeedback.schemas.token import TokenPayload
from guestfeedback.schemas.user import IdentityResponse, LoginResponse, UserLogin, UserResponse

__all__ = [
    "IdentityResponse",
    "LoginResponse",
    "TokenPayload",
    "UserLogin",
    "UserResponse",
]
