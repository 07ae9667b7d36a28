"""
Password hashing and JWT utilities
"""

from datetime import datetime, timedelta
from jose import JWTError, jwt
from passlib.context import CryptContext
from pydantic import ValidationError as PydanticValidationError
from typing import Any, Dict, Optional
import secrets

from guestfeedback.core.config import get_settings
from guestfeedback.core.errors import Unauthenticated
from guestfeedback.models import Hotel, User
from guestfeedback.schemas.token import TokenPayload

settings = get_settings()

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)


def hash_password(password: str) -> str:
    """Hash a password with bcrypt"""
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Constant-time password check"""
    return pwd_context.verify(password, password_hash)


def dummy_verify() -> None:
    """Spend the same time as a real check when the user does not exist"""
    pwd_context.dummy_verify()


def new_opaque_token() -> str:
    """Random URL-safe value for session cookies and verification links"""
    return secrets.token_urlsafe(32)


def create_access_token(
    user: User,
    hotel: Optional[Hotel] = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Create a signed bearer token for mobile clients"""
    issued_at = datetime.utcnow()
    if expires_delta is None:
        expires_delta = timedelta(days=settings.JWT_ACCESS_TOKEN_EXPIRE_DAYS)

    to_encode: Dict[str, Any] = {
        "sub": str(user.id),
        "userId": str(user.id),
        "email": user.email,
        "role": user.role.value,
        "firstName": user.first_name,
        "lastName": user.last_name,
        "status": user.status.value,
        "iat": issued_at,
        "exp": issued_at + expires_delta,
    }
    if hotel is not None:
        to_encode.update({
            "hotelId": str(hotel.id),
            "hotelSlug": hotel.slug,
            "hotelName": hotel.name,
        })

    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> TokenPayload:
    """Verify signature and expiry; raise Unauthenticated on any failure"""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
        return TokenPayload.model_validate(payload)
    except (JWTError, PydanticValidationError):
        raise Unauthenticated("Invalid or expired token")
