"""
Billing provider webhooks

Payloads are signed with the Standard Webhooks scheme. Nothing is read
from a payload before its signature has been verified.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional
import uuid

from standardwebhooks import Webhook, WebhookVerificationError
import structlog

from guestfeedback.core.errors import DependencyFailure, Unauthenticated
from guestfeedback.core.store import Store
from guestfeedback.models import Hotel, SubscriptionPlan, SubscriptionStatus

logger = structlog.get_logger(__name__)

SIGNATURE_HEADERS = ("webhook-id", "webhook-timestamp", "webhook-signature")

PROVIDER_STATUSES = {
    "trialing": SubscriptionStatus.TRIAL,
    "active": SubscriptionStatus.ACTIVE,
    "past_due": SubscriptionStatus.PAST_DUE,
    "unpaid": SubscriptionStatus.PAST_DUE,
    "canceled": SubscriptionStatus.CANCELLED,
    "cancelled": SubscriptionStatus.CANCELLED,
    "incomplete_expired": SubscriptionStatus.CANCELLED,
}


def verify_webhook(secret: str, body: bytes, headers: Mapping[str, str]) -> Dict[str, Any]:
    """Return the decoded payload, or raise Unauthenticated for bad signatures"""
    if not secret:
        logger.error("Billing webhook secret is not configured")
        raise DependencyFailure("Billing webhooks are not configured")

    signed_headers = {name: headers.get(name, "") for name in SIGNATURE_HEADERS}
    try:
        payload = Webhook(secret).verify(data=body, headers=signed_headers)
    except WebhookVerificationError as e:
        logger.warning(f"Webhook verification failed: {e}")
        raise Unauthenticated("Invalid webhook signature")

    if not isinstance(payload, dict):
        raise Unauthenticated("Invalid webhook payload")
    return payload


def _find_hotel(store: Store, data: Dict[str, Any]) -> Optional[Hotel]:
    metadata = data.get("metadata")
    hotel_id = metadata.get("hotel_id") if isinstance(metadata, dict) else None
    if hotel_id:
        try:
            return store.get_hotel(uuid.UUID(str(hotel_id)))
        except ValueError:
            return None

    subscription_id = data.get("subscription") or data.get("id")
    if subscription_id:
        return store.get_hotel_by_subscription(str(subscription_id))
    return None


def _apply_subscription(hotel: Hotel, data: Dict[str, Any], deleted: bool = False) -> None:
    if deleted:
        hotel.subscription_status = SubscriptionStatus.CANCELLED
        return

    if data.get("id"):
        hotel.subscription_id = str(data["id"])

    status = PROVIDER_STATUSES.get(str(data.get("status", "")).lower())
    if status is not None:
        hotel.subscription_status = status

    plan = data.get("plan")
    if plan in {p.value for p in SubscriptionPlan}:
        hotel.subscription_plan = SubscriptionPlan(plan)

    period_end = data.get("current_period_end")
    if isinstance(period_end, (int, float)):
        hotel.subscription_end = datetime.fromtimestamp(period_end, tz=timezone.utc).replace(tzinfo=None)


def apply_billing_event(store: Store, payload: Dict[str, Any]) -> str:
    """
    Apply a verified billing event to the hotel it concerns.

    Returns a short outcome string; unknown events and unknown hotels are
    acknowledged without changes so the provider stops retrying.
    """
    event_type = str(payload.get("type", ""))
    data = payload.get("data") or {}
    if not isinstance(data, dict):
        logger.warning("Billing event without an object payload", event_type=event_type)
        return "ignored"

    hotel = _find_hotel(store, data)
    if hotel is None:
        logger.warning("Billing event for unknown hotel", event_type=event_type)
        return "ignored"

    if event_type in ("subscription.created", "subscription.updated"):
        _apply_subscription(hotel, data)
    elif event_type == "subscription.deleted":
        _apply_subscription(hotel, data, deleted=True)
    elif event_type == "invoice.payment_succeeded":
        hotel.subscription_status = SubscriptionStatus.ACTIVE
    elif event_type == "invoice.payment_failed":
        hotel.subscription_status = SubscriptionStatus.PAST_DUE
    else:
        logger.info(f"Unhandled billing event type: {event_type}")
        return "ignored"

    hotel.updated_at = datetime.utcnow()
    store.add(hotel)
    store.commit()

    logger.info(
        "Billing event applied",
        event_type=event_type,
        hotel_id=str(hotel.id),
        subscription_status=hotel.subscription_status.value,
        plan=hotel.subscription_plan.value,
    )
    return "processed"
