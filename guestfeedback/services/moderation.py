"""
Review moderation actions for tenant admins
"""

from datetime import datetime
from typing import Dict, FrozenSet

import structlog

from guestfeedback.core.errors import ValidationError
from guestfeedback.core.notifications import GuestReplySent, NotificationDispatcher, signal
from guestfeedback.core.store import Store
from guestfeedback.models import Review, ReviewStatus
from guestfeedback.schemas.review import ReviewFlagsUpdate

logger = structlog.get_logger(__name__)

ALLOWED_TRANSITIONS: Dict[ReviewStatus, FrozenSet[ReviewStatus]] = {
    ReviewStatus.PENDING: frozenset({ReviewStatus.APPROVED, ReviewStatus.REJECTED}),
    ReviewStatus.APPROVED: frozenset({ReviewStatus.REJECTED, ReviewStatus.SHARED_EXTERNALLY}),
    ReviewStatus.REJECTED: frozenset(),
    ReviewStatus.SHARED_EXTERNALLY: frozenset(),
}


def can_transition(current: ReviewStatus, target: ReviewStatus) -> bool:
    return target in ALLOWED_TRANSITIONS[current]


def _save(store: Store, review: Review) -> Review:
    review.updated_at = datetime.utcnow()
    store.add(review)
    store.commit()
    store.refresh(review)
    return review


def change_status(store: Store, review: Review, target: ReviewStatus) -> Review:
    """Move a review along its lifecycle; same status is a no-op"""
    if review.status == target:
        return review

    if not can_transition(review.status, target):
        raise ValidationError(
            [{
                "field": "status",
                "code": "invalid_transition",
                "message": f"Cannot change status from {review.status.value} to {target.value}",
            }],
            message="Invalid status transition",
        )

    previous = review.status
    review.status = target
    _save(store, review)
    logger.info("Review status changed", review_id=str(review.id), previous=previous.value, status=target.value)
    return review


def update_flags(store: Store, review: Review, flags: ReviewFlagsUpdate) -> Review:
    for key, value in flags.model_dump(exclude_none=True).items():
        setattr(review, key, value)
    return _save(store, review)


def update_notes(store: Store, review: Review, notes) -> Review:
    review.admin_notes = notes
    return _save(store, review)


def soft_delete(store: Store, review: Review) -> Review:
    review.is_deleted = True
    _save(store, review)
    logger.info(f"Review deleted: {review.id}")
    return review


async def reply(
    store: Store,
    dispatcher: NotificationDispatcher,
    review: Review,
    message: str,
) -> Review:
    """Store the hotel's reply and email it to the guest when we have an address"""
    review.reply_text = message
    review.replied_at = datetime.utcnow()
    review.is_replied = True
    _save(store, review)

    if review.guest_email:
        await signal(dispatcher, store, GuestReplySent(
            hotel_id=review.hotel_id,
            review_id=review.id,
            guest_email=review.guest_email,
            reply_text=message,
        ))
    return review
