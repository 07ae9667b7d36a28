"""
API tests for in-app notifications
"""

import uuid

import pytest
from sqlmodel import select
from structlog.testing import capture_logs

from guestfeedback.core.config import get_settings
from guestfeedback.core.notifications import PasswordResetRequested, log_delivery
from guestfeedback.models import Notification

from conftest import auth_headers, make_hotel, make_user


@pytest.fixture
def inbox(db):
    hotel = make_hotel(db)
    user = make_user(db, hotel)
    other = make_user(db, make_hotel(db, slug="other-hotel"))
    for i in range(3):
        db.add(Notification(user_id=user.id, kind="new_review", title="New Guest Review", message=f"Review {i}"))
    db.add(Notification(user_id=other.id, kind="new_review", title="New Guest Review", message="Not yours"))
    db.commit()
    return user, auth_headers(user, hotel), other


def test_list_only_own_notifications(client, inbox):
    _, headers, _ = inbox

    listed = client.get("/api/v1/notifications/", headers=headers).json()

    assert len(listed) == 3
    assert "Not yours" not in {n["message"] for n in listed}


def test_mark_read_and_unread_filter(client, inbox):
    _, headers, _ = inbox
    first = client.get("/api/v1/notifications/", headers=headers).json()[0]

    marked = client.post(f"/api/v1/notifications/{first['id']}/read", headers=headers)
    assert marked.json()["is_read"] is True

    unread = client.get("/api/v1/notifications/", params={"unread_only": True}, headers=headers).json()
    assert len(unread) == 2


def test_mark_all_read(client, inbox):
    _, headers, _ = inbox

    response = client.post("/api/v1/notifications/read-all", headers=headers)

    assert response.json()["updated"] == 3
    assert client.get("/api/v1/notifications/", params={"unread_only": True}, headers=headers).json() == []


def test_delete_notification(client, inbox):
    _, headers, _ = inbox
    first = client.get("/api/v1/notifications/", headers=headers).json()[0]

    assert client.delete(f"/api/v1/notifications/{first['id']}", headers=headers).status_code == 200
    assert len(client.get("/api/v1/notifications/", headers=headers).json()) == 2


def test_other_users_notification_looks_missing(client, db, inbox):
    _, headers, other = inbox
    foreign = db.exec(select(Notification).where(Notification.user_id == other.id)).one()

    assert client.post(f"/api/v1/notifications/{foreign.id}/read", headers=headers).status_code == 404
    assert client.delete(f"/api/v1/notifications/{foreign.id}", headers=headers).status_code == 404


@pytest.mark.asyncio
async def test_outbound_messages_carry_configured_sender():
    event = PasswordResetRequested(user_id=uuid.uuid4(), email="guest@example.com", token="reset-token")

    with capture_logs() as logs:
        await log_delivery(event)

    assert len(logs) == 1
    assert logs[0]["event"] == "Outbound notification"
    assert logs[0]["sender"] == get_settings().EMAIL_FROM
    assert logs[0]["email"] == "guest@example.com"
