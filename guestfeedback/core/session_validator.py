"""
Session validation for web (cookie) and mobile (bearer token) clients

Both credential kinds only identify a user. Role, tenant and account status
always come from the stored user record, so a deactivated account is
rejected even while its token or session is still unexpired.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional
import uuid

from fastapi import Request
import structlog

from guestfeedback.core.config import get_settings
from guestfeedback.core.credentials import BearerToken, Credential, SessionCookie, extract_credential
from guestfeedback.core.errors import (
    AccountDeactivated,
    AccountDeleted,
    EmailNotVerified,
    Unauthenticated,
)
from guestfeedback.core.security import decode_access_token
from guestfeedback.core.store import Store
from guestfeedback.models import Hotel, User, UserRole, UserStatus

logger = structlog.get_logger(__name__)
settings = get_settings()


@dataclass(frozen=True)
class Identity:
    """Authenticated user as seen by authorization checks"""
    user_id: uuid.UUID
    email: str
    role: UserRole
    status: UserStatus
    email_verified: bool
    first_name: str
    last_name: str
    tenant_id: Optional[uuid.UUID] = None
    tenant_slug: Optional[str] = None
    tenant_name: Optional[str] = None

    @classmethod
    def from_user(cls, user: User, hotel: Optional[Hotel] = None) -> "Identity":
        return cls(
            user_id=user.id,
            email=user.email,
            role=user.role,
            status=user.status,
            email_verified=user.email_verified,
            first_name=user.first_name,
            last_name=user.last_name,
            tenant_id=user.hotel_id,
            tenant_slug=hotel.slug if hotel else None,
            tenant_name=hotel.name if hotel else None,
        )


def check_account(user: User) -> None:
    """Reject accounts that may not act, whatever credential they present"""
    if user.status == UserStatus.DELETED:
        raise AccountDeleted()
    if user.status == UserStatus.DEACTIVATED:
        raise AccountDeactivated()
    if settings.REQUIRE_EMAIL_VERIFICATION and not user.email_verified:
        raise EmailNotVerified(user.email)


def _user_id_for(credential: Credential, store: Store) -> uuid.UUID:
    if isinstance(credential, SessionCookie):
        record = store.get_web_session(credential.session_id)
        if record is None or record.expires_at <= datetime.utcnow():
            raise Unauthenticated("Session expired or invalid")
        return record.user_id

    if isinstance(credential, BearerToken):
        claims = decode_access_token(credential.token)
        try:
            return uuid.UUID(claims.userId)
        except ValueError:
            raise Unauthenticated("Invalid or expired token")

    raise Unauthenticated()


def resolve(credential: Credential, store: Store) -> Identity:
    """Turn a credential into an Identity using the current user record"""
    user = store.get_user(_user_id_for(credential, store))
    if user is None:
        raise Unauthenticated()

    check_account(user)

    hotel = store.get_hotel(user.hotel_id) if user.hotel_id else None
    return Identity.from_user(user, hotel)


def authenticate(request: Request, store: Store) -> Identity:
    """Authenticate an inbound request or raise an auth error"""
    credential = extract_credential(request)
    if credential is None:
        raise Unauthenticated()

    identity = resolve(credential, store)
    logger.debug("Request authenticated", user_id=str(identity.user_id), via=type(credential).__name__)
    return identity
