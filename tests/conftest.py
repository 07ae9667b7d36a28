"""
Test configuration for pytest
"""

import pytest
import os
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session
from typing import Generator, Optional

# Test environment variables
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["JWT_SECRET_KEY"] = "test-jwt-secret"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["AUTO_CREATE_TABLES"] = "false"
os.environ["DEBUG"] = "false"
os.environ["BILLING_WEBHOOK_SECRET"] = "whsec_MfKQ9r8GKYqrTwjUPD8ILPZIo2LaLaSw"

from fastapi.testclient import TestClient  # noqa: E402

from guestfeedback.core.database import get_session  # noqa: E402
from guestfeedback.core.notifications import NotificationDispatcher  # noqa: E402
from guestfeedback.core.security import create_access_token, hash_password  # noqa: E402
from guestfeedback.core.store import Store  # noqa: E402
from guestfeedback.main import app, build_dispatcher  # noqa: E402
from guestfeedback.models import (  # noqa: E402
    FieldType,
    Form,
    FormField,
    Hotel,
    SemanticRole,
    SubscriptionPlan,
    User,
    UserRole,
    UserStatus,
)

PASSWORD = "correct-horse-battery"


# Shared in-memory SQLite so the app and the test see the same data
test_engine = create_engine(
    "sqlite:///:memory:",
    echo=False,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Create a clean database session for each test"""
    SQLModel.metadata.create_all(test_engine)

    with Session(test_engine) as session:
        yield session

    SQLModel.metadata.drop_all(test_engine)


@pytest.fixture
def store(db: Session) -> Store:
    return Store(db)


@pytest.fixture
def dispatcher() -> NotificationDispatcher:
    return NotificationDispatcher()


@pytest.fixture
def client(db: Session) -> Generator[TestClient, None, None]:
    """API client bound to the test database"""

    def override_get_session():
        yield db

    app.dependency_overrides[get_session] = override_get_session
    app.state.dispatcher = build_dispatcher()

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


def make_hotel(
    db: Session,
    slug: str = "grand-hotel",
    plan: SubscriptionPlan = SubscriptionPlan.BASIC,
    is_active: bool = True,
) -> Hotel:
    hotel = Hotel(
        name=slug.replace("-", " ").title(),
        slug=slug,
        email=f"info@{slug}.example.com",
        subscription_plan=plan,
        is_active=is_active,
    )
    db.add(hotel)
    db.commit()
    db.refresh(hotel)
    return hotel


def make_user(
    db: Session,
    hotel: Optional[Hotel] = None,
    email: Optional[str] = None,
    role: UserRole = UserRole.TENANT_ADMIN,
    status: UserStatus = UserStatus.ACTIVE,
    email_verified: bool = True,
) -> User:
    user = User(
        email=email or f"{role.value.lower()}-{hotel.slug if hotel else 'platform'}@example.com",
        password_hash=hash_password(PASSWORD),
        first_name="Test",
        last_name="User",
        role=role,
        status=status,
        email_verified=email_verified,
        hotel_id=hotel.id if hotel else None,
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    if hotel is not None and role == UserRole.TENANT_ADMIN and hotel.owner_id is None:
        hotel.owner_id = user.id
        db.add(hotel)
        db.commit()
        db.refresh(hotel)
    return user


def make_form(db: Session, hotel: Hotel, fields=None, is_active: bool = True, is_public: bool = True) -> Form:
    """Form with a name, an email and one rating question unless `fields` is given"""
    if fields is None:
        fields = [
            FormField(label="Your name", type=FieldType.TEXT, semantic_role=SemanticRole.GUEST_NAME),
            FormField(label="Email", type=FieldType.EMAIL),
            FormField(label="Overall stay", type=FieldType.RATING, required=True),
        ]
    for position, field in enumerate(fields):
        field.position = position

    form = Form(hotel_id=hotel.id, name="Checkout survey", is_active=is_active, is_public=is_public)
    form.fields = fields
    db.add(form)
    db.commit()
    db.refresh(form)
    return form


def auth_headers(user: User, hotel: Optional[Hotel] = None) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user, hotel)}"}


def field_id(form: Form, label: str) -> str:
    return next(str(f.id) for f in form.fields if f.label == label)
