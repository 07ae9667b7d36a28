"""
Password login, web sessions, hotel registration, email verification
and password changes
"""

from datetime import datetime, timedelta
from typing import Optional, Tuple
import re

from sqlalchemy.exc import IntegrityError
import structlog

from guestfeedback.core.config import get_settings
from guestfeedback.core.errors import Conflict, NotFound, Unauthenticated, ValidationError
from guestfeedback.core.security import dummy_verify, hash_password, new_opaque_token, verify_password
from guestfeedback.core.session_validator import check_account
from guestfeedback.core.store import Store
from guestfeedback.models import (
    Hotel,
    SubscriptionStatus,
    User,
    UserRole,
    UserStatus,
    WebSession,
)
from guestfeedback.schemas.hotel import SLUG_PATTERN, HotelRegistration

logger = structlog.get_logger(__name__)
settings = get_settings()

_slug_re = re.compile(SLUG_PATTERN)


def login(store: Store, email: str, password: str) -> Tuple[User, Optional[Hotel]]:
    """
    Check credentials and account state, then record the login.

    Unknown emails and wrong passwords fail identically. `last_login_at` is
    written once per successful call and never on failure.
    """
    user = store.get_user_by_email(email)
    if user is None:
        dummy_verify()
        raise Unauthenticated("Invalid email or password")

    if not verify_password(password, user.password_hash):
        logger.info("Login failed", user_id=str(user.id))
        raise Unauthenticated("Invalid email or password")

    check_account(user)

    user.last_login_at = datetime.utcnow()
    store.add(user)
    store.commit()
    store.refresh(user)

    logger.info(f"User logged in: {user.id}")
    hotel = store.get_hotel(user.hotel_id) if user.hotel_id else None
    return user, hotel


def create_web_session(store: Store, user: User) -> WebSession:
    """Open a cookie session for a user that just logged in"""
    now = datetime.utcnow()
    store.delete_expired_web_sessions(user.id, now)

    record = WebSession(
        id=new_opaque_token(),
        user_id=user.id,
        role=user.role,
        hotel_id=user.hotel_id,
        expires_at=now + timedelta(days=settings.SESSION_EXPIRE_DAYS),
    )
    store.add(record)
    store.commit()
    return record


def end_web_session(store: Store, session_id: str) -> None:
    record = store.get_web_session(session_id)
    if record is not None:
        store.delete(record)
        store.commit()


def slug_is_valid(slug: str) -> bool:
    return 3 <= len(slug) <= 60 and bool(_slug_re.match(slug))


def register_hotel(store: Store, data: HotelRegistration) -> Tuple[Hotel, User]:
    """Create a hotel and its owner account in one transaction"""
    email = data.email.strip().lower()

    if store.get_hotel_by_slug(data.slug) is not None:
        raise Conflict("Hotel slug is already taken", field="slug")
    if store.get_user_by_email(email) is not None:
        raise Conflict("Email already registered", field="email")

    hotel = Hotel(
        name=data.hotel_name,
        slug=data.slug,
        email=data.hotel_email,
        phone=data.phone,
        address=data.address,
        subscription_plan=data.plan,
        subscription_status=SubscriptionStatus.TRIAL,
    )
    owner = User(
        email=email,
        password_hash=hash_password(data.password),
        first_name=data.first_name,
        last_name=data.last_name,
        role=UserRole.TENANT_ADMIN,
        status=UserStatus.ACTIVE,
        email_verified=False,
        verification_token=new_opaque_token(),
        hotel_id=hotel.id,
    )
    hotel.owner_id = owner.id

    try:
        store.add(hotel)
        store.flush()
        store.add(owner)
        store.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration; the session is rolled back
        store.rollback()
        field = "email" if store.get_user_by_email(email) is not None else "slug"
        logger.info("Registration conflict at commit", slug=data.slug, field=field)
        raise Conflict(
            "Email already registered" if field == "email" else "Hotel slug is already taken",
            field=field,
        )
    store.refresh(hotel)
    store.refresh(owner)

    logger.info("Hotel registered", hotel_id=str(hotel.id), slug=hotel.slug, owner_id=str(owner.id))
    return hotel, owner


def verify_email(store: Store, token: str) -> User:
    user = store.get_user_by_verification_token(token)
    if user is None:
        raise NotFound("Invalid or expired verification link")

    user.email_verified = True
    user.verification_token = None
    user.updated_at = datetime.utcnow()
    store.add(user)
    store.commit()
    store.refresh(user)

    logger.info("Email verified", user_id=str(user.id))
    return user


def set_user_status(store: Store, user: User, status: UserStatus) -> User:
    """Platform admin action; takes effect on the user's next request"""
    user.status = status
    user.updated_at = datetime.utcnow()
    store.add(user)
    store.commit()
    store.refresh(user)

    logger.info("User status changed", user_id=str(user.id), status=status.value)
    return user


def resend_verification(store: Store, email: str) -> Optional[User]:
    """
    Issue a fresh verification token.

    Returns None when there is nothing to send (unknown or already verified
    account); callers answer the same way in every case.
    """
    user = store.get_user_by_email(email)
    if user is None or user.email_verified or user.status == UserStatus.DELETED:
        return None

    user.verification_token = new_opaque_token()
    user.updated_at = datetime.utcnow()
    store.add(user)
    store.commit()
    store.refresh(user)

    logger.info("Verification token reissued", user_id=str(user.id))
    return user


def _password_problem(field: str, code: str, message: str) -> ValidationError:
    return ValidationError([{"field": field, "code": code, "message": message}], message=message)


def change_password(store: Store, user: User, current_password: str, new_password: str) -> User:
    """Replace the password of a signed-in user"""
    if not verify_password(current_password, user.password_hash):
        raise _password_problem("current_password", "invalid_password", "Current password is incorrect")
    if verify_password(new_password, user.password_hash):
        raise _password_problem(
            "new_password", "password_reuse", "New password must be different from current password"
        )

    user.password_hash = hash_password(new_password)
    user.updated_at = datetime.utcnow()
    store.add(user)
    store.commit()
    store.refresh(user)

    logger.info("Password changed", user_id=str(user.id))
    return user


def request_password_reset(store: Store, email: str) -> Optional[User]:
    """Store a short-lived reset token; None when the account cannot reset"""
    user = store.get_user_by_email(email)
    if user is None or user.status == UserStatus.DELETED:
        return None

    user.reset_token = new_opaque_token()
    user.reset_token_expires_at = datetime.utcnow() + timedelta(minutes=settings.PASSWORD_RESET_EXPIRE_MINUTES)
    store.add(user)
    store.commit()
    store.refresh(user)

    logger.info("Password reset requested", user_id=str(user.id))
    return user


def reset_password(store: Store, token: str, new_password: str) -> User:
    """
    Set a new password from a reset link.

    The token is single use. Every web session of the user is ended.
    """
    user = store.get_user_by_reset_token(token)
    if user is None or user.reset_token_expires_at is None or user.reset_token_expires_at <= datetime.utcnow():
        raise NotFound("Invalid or expired reset link")

    user.password_hash = hash_password(new_password)
    user.reset_token = None
    user.reset_token_expires_at = None
    user.updated_at = datetime.utcnow()
    store.delete_web_sessions(user.id)
    store.add(user)
    store.commit()
    store.refresh(user)

    logger.info("Password reset", user_id=str(user.id))
    return user
