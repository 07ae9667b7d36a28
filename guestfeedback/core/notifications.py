"""
Domain events and notification dispatch

Domain actions describe what happened as a `DomainEvent`. The dispatcher
stores one in-app notification per recipient and then hands the event to
delivery subscribers (email, push). Callers use `signal`, which never lets a
notification failure reach the primary operation.
"""

from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, List, Optional
import uuid

import structlog

from guestfeedback.core.config import get_settings
from guestfeedback.core.store import Store
from guestfeedback.models import Notification

logger = structlog.get_logger(__name__)
settings = get_settings()

Handler = Callable[["DomainEvent"], Awaitable[None]]


class DomainEvent:
    """Base class for domain events"""

    kind = "event"
    title = ""

    def __init__(self, event_id: uuid.UUID = None):
        self.event_id = event_id or uuid.uuid4()
        self.occurred_at = datetime.utcnow()

    def recipients(self) -> List[uuid.UUID]:
        """Users that get an in-app notification"""
        return []

    def message(self) -> str:
        return ""

    def payload(self) -> Dict[str, Any]:
        return {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary"""
        data = {
            "event_id": str(self.event_id),
            "occurred_at": self.occurred_at.isoformat(),
            "event_type": self.__class__.__name__,
        }
        data.update(self.payload())
        return data


class NewReview(DomainEvent):
    """A guest submitted a review"""

    kind = "new_review"
    title = "New Guest Review"

    def __init__(
        self,
        hotel_id: uuid.UUID,
        review_id: uuid.UUID,
        owner_id: Optional[uuid.UUID],
        guest_name: Optional[str],
        rating: Optional[int],
        event_id: uuid.UUID = None,
    ):
        super().__init__(event_id)
        self.hotel_id = hotel_id
        self.review_id = review_id
        self.owner_id = owner_id
        self.guest_name = guest_name
        self.rating = rating

    def recipients(self) -> List[uuid.UUID]:
        return [self.owner_id] if self.owner_id else []

    def message(self) -> str:
        return f"{self.guest_name or 'Anonymous Guest'} left a {self.rating or 0}-star review"

    def payload(self) -> Dict[str, Any]:
        return {
            "hotel_id": str(self.hotel_id),
            "review_id": str(self.review_id),
            "rating": self.rating,
            "guest_name": self.guest_name or "Anonymous Guest",
        }


class NewContactMessage(DomainEvent):
    """A hotel sent a support message to the platform operators"""

    kind = "new_contact_message"
    title = "New Contact Message"

    def __init__(
        self,
        hotel_id: uuid.UUID,
        sender_id: uuid.UUID,
        admin_ids: List[uuid.UUID],
        subject: str,
        body: str,
        event_id: uuid.UUID = None,
    ):
        super().__init__(event_id)
        self.hotel_id = hotel_id
        self.sender_id = sender_id
        self.admin_ids = admin_ids
        self.subject = subject
        self.body = body

    def recipients(self) -> List[uuid.UUID]:
        return list(self.admin_ids)

    def message(self) -> str:
        return self.subject

    def payload(self) -> Dict[str, Any]:
        return {
            "hotel_id": str(self.hotel_id),
            "sender_id": str(self.sender_id),
            "subject": self.subject,
            "body": self.body,
        }


class PaymentMethodAdded(DomainEvent):
    """A card was attached to a hotel account"""

    kind = "payment_method_added"
    title = "Payment Method Added"

    def __init__(
        self,
        hotel_id: uuid.UUID,
        payment_method_id: uuid.UUID,
        owner_id: Optional[uuid.UUID],
        brand: str,
        last4: str,
        event_id: uuid.UUID = None,
    ):
        super().__init__(event_id)
        self.hotel_id = hotel_id
        self.payment_method_id = payment_method_id
        self.owner_id = owner_id
        self.brand = brand
        self.last4 = last4

    def recipients(self) -> List[uuid.UUID]:
        return [self.owner_id] if self.owner_id else []

    def message(self) -> str:
        return f"{self.brand} card ending in {self.last4} was added to your account"

    def payload(self) -> Dict[str, Any]:
        return {
            "hotel_id": str(self.hotel_id),
            "payment_method_id": str(self.payment_method_id),
            "brand": self.brand,
            "last4": self.last4,
        }


class GuestReplySent(DomainEvent):
    """A hotel replied to a guest; delivered by email only"""

    kind = "guest_reply_sent"

    def __init__(
        self,
        hotel_id: uuid.UUID,
        review_id: uuid.UUID,
        guest_email: str,
        reply_text: str,
        event_id: uuid.UUID = None,
    ):
        super().__init__(event_id)
        self.hotel_id = hotel_id
        self.review_id = review_id
        self.guest_email = guest_email
        self.reply_text = reply_text

    def payload(self) -> Dict[str, Any]:
        return {
            "hotel_id": str(self.hotel_id),
            "review_id": str(self.review_id),
            "guest_email": self.guest_email,
            "reply_text": self.reply_text,
        }


class EmailVerificationRequested(DomainEvent):
    """A new account needs to confirm its email address"""

    kind = "email_verification_requested"

    def __init__(self, user_id: uuid.UUID, email: str, token: str, event_id: uuid.UUID = None):
        super().__init__(event_id)
        self.user_id = user_id
        self.email = email
        self.token = token

    def payload(self) -> Dict[str, Any]:
        return {"user_id": str(self.user_id), "email": self.email, "token": self.token}



class PasswordResetRequested(DomainEvent):
    """A user asked for a password reset link"""

    kind = "password_reset_requested"

    def __init__(self, user_id: uuid.UUID, email: str, token: str, event_id: uuid.UUID = None):
        super().__init__(event_id)
        self.user_id = user_id
        self.email = email
        self.token = token

    def payload(self) -> Dict[str, Any]:
        return {"user_id": str(self.user_id), "email": self.email, "token": self.token}

EVENT_TYPES = (
    NewReview,
    NewContactMessage,
    PaymentMethodAdded,
    GuestReplySent,
    EmailVerificationRequested,
    PasswordResetRequested,
)


class NotificationDispatcher:
    """Stores in-app notifications and publishes events to delivery handlers"""

    def __init__(self):
        self._subscribers: Dict[str, List[Handler]] = {}

    def subscribe(self, event_type: str, handler: Handler):
        """Subscribe to a specific event type"""
        self._subscribers.setdefault(event_type, []).append(handler)
        logger.debug(f"Subscribed handler to event type: {event_type}")

    async def dispatch(self, store: Store, event: DomainEvent):
        """Persist notifications for the event's recipients, then publish it"""
        recipients = event.recipients()
        if recipients:
            store.add(*[
                Notification(
                    user_id=user_id,
                    kind=event.kind,
                    title=event.title,
                    message=event.message(),
                    payload=event.payload(),
                )
                for user_id in recipients
            ])
            store.commit()

        await self.publish(event)

    async def publish(self, event: DomainEvent):
        """Publish an event to all subscribers"""
        event_type = event.__class__.__name__
        handlers = self._subscribers.get(event_type, [])

        if not handlers:
            logger.debug(f"No subscribers for event type: {event_type}")
            return

        logger.info(f"Publishing event {event_type}: {event.event_id}")

        for handler in handlers:
            try:
                await handler(event)
            except Exception as e:
                logger.error(f"Error in event handler for {event_type}: {e}", exc_info=True)


async def signal(dispatcher: NotificationDispatcher, store: Store, event: DomainEvent) -> bool:
    """
    Fire-and-forget dispatch.

    Returns False when the notification could not be stored or published;
    the failure is logged and the primary operation is unaffected.
    """
    try:
        await dispatcher.dispatch(store, event)
        return True
    except Exception:
        store.rollback()
        logger.exception("Notification dispatch failed", event_type=event.__class__.__name__)
        return False


async def log_delivery(event: DomainEvent):
    """Stand-in transport: record the outbound message instead of sending it"""
    logger.info("Outbound notification", sender=settings.EMAIL_FROM, **event.to_dict())
