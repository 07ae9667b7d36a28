"""
Tests for cookie and bearer-token session validation
"""

import pytest
from datetime import datetime, timedelta
from starlette.requests import Request

from guestfeedback.core.config import get_settings
from guestfeedback.core.credentials import BearerToken, SessionCookie, extract_credential
from guestfeedback.core.errors import (
    AccountDeactivated,
    AccountDeleted,
    EmailNotVerified,
    Unauthenticated,
)
from guestfeedback.core.security import create_access_token
from guestfeedback.core.session_validator import authenticate, resolve
from guestfeedback.models import UserRole, UserStatus, WebSession
from guestfeedback.services import auth as auth_service

from conftest import make_hotel, make_user

settings = get_settings()


def _request(headers=None, cookies=None) -> Request:
    raw = [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()]
    if cookies:
        raw.append((b"cookie", "; ".join(f"{k}={v}" for k, v in cookies.items()).encode()))
    return Request({"type": "http", "method": "GET", "path": "/", "headers": raw, "query_string": b""})


def test_extract_bearer_token():
    credential = extract_credential(_request(headers={"Authorization": "Bearer abc.def.ghi"}))
    assert credential == BearerToken("abc.def.ghi")


def test_extract_prefers_session_cookie():
    request = _request(
        headers={"Authorization": "Bearer abc.def.ghi"},
        cookies={settings.SESSION_COOKIE_NAME: "session-123"},
    )
    assert extract_credential(request) == SessionCookie("session-123")


def test_extract_without_credential():
    assert extract_credential(_request()) is None
    assert extract_credential(_request(headers={"Authorization": "Basic dXNlcjpwYXNz"})) is None


def test_authenticate_without_credential(store):
    with pytest.raises(Unauthenticated):
        authenticate(_request(), store)


def test_bearer_token_resolves_identity(db, store):
    hotel = make_hotel(db)
    user = make_user(db, hotel)

    identity = resolve(BearerToken(create_access_token(user, hotel)), store)

    assert identity.user_id == user.id
    assert identity.role == UserRole.TENANT_ADMIN
    assert identity.tenant_id == hotel.id
    assert identity.tenant_slug == "grand-hotel"


def test_web_session_resolves_identity(db, store):
    hotel = make_hotel(db)
    user = make_user(db, hotel)
    record = auth_service.create_web_session(store, user)

    identity = resolve(SessionCookie(record.id), store)

    assert identity.user_id == user.id
    assert identity.tenant_name == hotel.name
    assert record.expires_at - record.created_at >= timedelta(days=29, hours=23)


def test_expired_web_session_rejected(db, store):
    user = make_user(db, make_hotel(db))
    record = WebSession(
        id="stale-session",
        user_id=user.id,
        role=user.role,
        hotel_id=user.hotel_id,
        expires_at=datetime.utcnow() - timedelta(minutes=1),
    )
    db.add(record)
    db.commit()

    with pytest.raises(Unauthenticated):
        resolve(SessionCookie("stale-session"), store)


def test_unknown_web_session_rejected(store):
    with pytest.raises(Unauthenticated):
        resolve(SessionCookie("does-not-exist"), store)


def test_expired_token_rejected(db, store):
    user = make_user(db, make_hotel(db))
    token = create_access_token(user, expires_delta=timedelta(seconds=-1))

    with pytest.raises(Unauthenticated):
        resolve(BearerToken(token), store)


def test_token_for_missing_user_rejected(db, store):
    user = make_user(db, make_hotel(db))
    token = create_access_token(user)
    db.delete(user)
    db.commit()

    with pytest.raises(Unauthenticated):
        resolve(BearerToken(token), store)


@pytest.mark.parametrize(
    "status, error",
    [
        (UserStatus.DEACTIVATED, AccountDeactivated),
        (UserStatus.DELETED, AccountDeleted),
    ],
)
def test_inactive_account_rejected_with_valid_token(db, store, status, error):
    """Status is read from the user record, not from the token"""
    hotel = make_hotel(db)
    user = make_user(db, hotel)
    token = create_access_token(user, hotel)

    user.status = status
    db.add(user)
    db.commit()

    with pytest.raises(error):
        resolve(BearerToken(token), store)


def test_deactivated_account_rejected_with_valid_session(db, store):
    user = make_user(db, make_hotel(db))
    record = auth_service.create_web_session(store, user)

    auth_service.set_user_status(store, user, UserStatus.DEACTIVATED)

    with pytest.raises(AccountDeactivated):
        resolve(SessionCookie(record.id), store)


def test_unverified_email_rejected(db, store):
    user = make_user(db, make_hotel(db), email_verified=False)

    with pytest.raises(EmailNotVerified) as exc_info:
        resolve(BearerToken(create_access_token(user)), store)

    body = exc_info.value.to_dict()
    assert body["requires_verification"] is True
    assert body["email"] == user.email


def test_role_comes_from_user_record(db, store):
    hotel = make_hotel(db)
    user = make_user(db, hotel)
    token = create_access_token(user, hotel)

    user.role = UserRole.PLATFORM_ADMIN
    db.add(user)
    db.commit()

    assert resolve(BearerToken(token), store).role == UserRole.PLATFORM_ADMIN


def test_token_with_non_uuid_user_id_rejected(store):
    from jose import jwt

    now = datetime.utcnow()
    token = jwt.encode(
        {
            "sub": "x",
            "userId": "not-a-uuid",
            "email": "a@example.com",
            "role": "TENANT_ADMIN",
            "firstName": "A",
            "lastName": "B",
            "status": "ACTIVE",
            "iat": now,
            "exp": now + timedelta(days=1),
        },
        settings.JWT_SECRET_KEY,
        algorithm=settings.JWT_ALGORITHM,
    )

    with pytest.raises(Unauthenticated):
        resolve(BearerToken(token), store)


def test_login_records_last_login(db, store):
    user = make_user(db, make_hotel(db))
    assert user.last_login_at is None

    logged_in, hotel = auth_service.login(store, user.email.upper(), "correct-horse-battery")

    assert logged_in.id == user.id
    assert hotel is not None
    assert logged_in.last_login_at is not None


def test_login_failures_are_indistinguishable(db, store):
    user = make_user(db, make_hotel(db))

    with pytest.raises(Unauthenticated) as wrong_password:
        auth_service.login(store, user.email, "wrong-password")
    with pytest.raises(Unauthenticated) as unknown_email:
        auth_service.login(store, "nobody@example.com", "wrong-password")

    assert wrong_password.value.to_dict() == unknown_email.value.to_dict()
    db.refresh(user)
    assert user.last_login_at is None


def test_login_rejects_deleted_account(db, store):
    user = make_user(db, make_hotel(db), status=UserStatus.DELETED)

    with pytest.raises(AccountDeleted):
        auth_service.login(store, user.email, "correct-horse-battery")


def test_end_web_session(db, store):
    user = make_user(db, make_hotel(db))
    record = auth_service.create_web_session(store, user)
    session_id = record.id

    auth_service.end_web_session(store, session_id)

    with pytest.raises(Unauthenticated):
        resolve(SessionCookie(session_id), store)
    assert store.get_web_session(session_id) is None
