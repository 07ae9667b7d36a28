"""
Unit tests for password hashing and bearer tokens
"""

import base64
import json
import pytest
from datetime import datetime, timedelta
import uuid
from jose import jwt

from guestfeedback.core.config import get_settings
from guestfeedback.core.errors import Unauthenticated
from guestfeedback.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    new_opaque_token,
    verify_password,
)
from guestfeedback.models import Hotel, User, UserRole, UserStatus

settings = get_settings()


def _user(**overrides) -> User:
    values = dict(
        id=uuid.uuid4(),
        email="owner@example.com",
        password_hash="x",
        first_name="Ada",
        last_name="Lovelace",
        role=UserRole.TENANT_ADMIN,
        status=UserStatus.ACTIVE,
    )
    values.update(overrides)
    return User(**values)


def test_hash_and_verify_password():
    """Test bcrypt hashing round trip"""
    hashed = hash_password("s3cret-pass")

    assert hashed != "s3cret-pass"
    assert hashed.startswith("$2")
    assert verify_password("s3cret-pass", hashed)
    assert not verify_password("wrong-pass", hashed)


def test_default_cost_factor_is_twelve():
    assert type(settings).model_fields["BCRYPT_ROUNDS"].default == 12


def test_opaque_tokens_are_unique():
    assert new_opaque_token() != new_opaque_token()
    assert len(new_opaque_token()) >= 32


def test_create_access_token_claims():
    """Test JWT token creation"""
    user = _user()
    hotel = Hotel(id=uuid.uuid4(), name="Grand Hotel", slug="grand-hotel", email="info@example.com")

    token = create_access_token(user, hotel)
    payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=["HS256"])

    assert jwt.get_unverified_header(token)["alg"] == "HS256"
    assert payload["sub"] == str(user.id)
    assert payload["userId"] == str(user.id)
    assert payload["role"] == "TENANT_ADMIN"
    assert payload["hotelId"] == str(hotel.id)
    assert payload["hotelSlug"] == "grand-hotel"


def test_default_lifetime_is_thirty_days():
    token = create_access_token(_user(role=UserRole.PLATFORM_ADMIN))
    payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=["HS256"])

    assert payload["exp"] - payload["iat"] == 30 * 24 * 60 * 60
    assert "hotelId" not in payload


def test_decode_valid_token():
    user = _user()
    claims = decode_access_token(create_access_token(user))

    assert claims.userId == str(user.id)
    assert claims.email == "owner@example.com"
    assert claims.hotelId is None


def test_expired_token_rejected():
    """Test that expired tokens are rejected"""
    token = create_access_token(_user(), expires_delta=timedelta(seconds=-60))

    with pytest.raises(Unauthenticated):
        decode_access_token(token)


def test_tampered_token_rejected():
    """Changing a claim without re-signing invalidates the token"""
    token = create_access_token(_user())
    header, payload, signature = token.split(".")

    claims = json.loads(base64.urlsafe_b64decode(payload + "=" * (-len(payload) % 4)))
    claims["role"] = "PLATFORM_ADMIN"
    forged_payload = base64.urlsafe_b64encode(json.dumps(claims).encode()).rstrip(b"=").decode()

    with pytest.raises(Unauthenticated):
        decode_access_token(".".join([header, forged_payload, signature]))


def test_token_signed_with_other_key_rejected():
    now = datetime.utcnow()
    token = jwt.encode(
        {
            "sub": "x",
            "userId": str(uuid.uuid4()),
            "email": "a@example.com",
            "role": "PLATFORM_ADMIN",
            "firstName": "A",
            "lastName": "B",
            "status": "ACTIVE",
            "iat": now,
            "exp": now + timedelta(days=1),
        },
        "not-the-server-key",
        algorithm="HS256",
    )

    with pytest.raises(Unauthenticated):
        decode_access_token(token)


def test_token_missing_claims_rejected():
    now = datetime.utcnow()
    token = jwt.encode(
        {"sub": "x", "iat": now, "exp": now + timedelta(days=1)},
        settings.JWT_SECRET_KEY,
        algorithm="HS256",
    )

    with pytest.raises(Unauthenticated):
        decode_access_token(token)


def test_garbage_token_rejected():
    with pytest.raises(Unauthenticated):
        decode_access_token("invalid.token.string.here")
