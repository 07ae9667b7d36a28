"""
In-app notification endpoints; every user sees only their own
"""

from typing import List
import uuid

from fastapi import APIRouter, Depends

from guestfeedback.core.dependencies import get_current_identity, get_store
from guestfeedback.core.errors import NotFound
from guestfeedback.core.session_validator import Identity
from guestfeedback.core.store import Store
from guestfeedback.models import Notification
from guestfeedback.schemas.notification import NotificationResponse

router = APIRouter()


def _own_notification(identity: Identity, store: Store, notification_id: uuid.UUID) -> Notification:
    notification = store.get_notification(notification_id)
    if notification is None or notification.user_id != identity.user_id:
        raise NotFound("Notification not found")
    return notification


@router.get("/", response_model=List[NotificationResponse])
async def list_notifications(
    unread_only: bool = False,
    limit: int = 50,
    identity: Identity = Depends(get_current_identity),
    store: Store = Depends(get_store),
):
    return store.list_notifications(identity.user_id, unread_only=unread_only, limit=min(limit, 200))


@router.post("/read-all")
async def mark_all_read(
    identity: Identity = Depends(get_current_identity),
    store: Store = Depends(get_store),
):
    unread = store.list_notifications(identity.user_id, unread_only=True, limit=10_000)
    for notification in unread:
        notification.is_read = True
        store.add(notification)
    store.commit()
    return {"success": True, "updated": len(unread)}


@router.post("/{notification_id}/read", response_model=NotificationResponse)
async def mark_read(
    notification_id: uuid.UUID,
    identity: Identity = Depends(get_current_identity),
    store: Store = Depends(get_store),
):
    notification = _own_notification(identity, store, notification_id)
    notification.is_read = True
    store.add(notification)
    store.commit()
    store.refresh(notification)
    return notification


@router.delete("/{notification_id}")
async def delete_notification(
    notification_id: uuid.UUID,
    identity: Identity = Depends(get_current_identity),
    store: Store = Depends(get_store),
):
    notification = _own_notification(identity, store, notification_id)
    store.delete(notification)
    store.commit()
    return {"success": True, "message": "Notification deleted"}
