"""
Review moderation API endpoints for tenant admins
"""

from typing import List, Optional
import uuid

from fastapi import APIRouter, Depends
import structlog

from guestfeedback.core.dependencies import get_dispatcher, get_store, require_tenant_admin
from guestfeedback.core.errors import NotFound
from guestfeedback.core.notifications import NotificationDispatcher
from guestfeedback.core.permissions import owned
from guestfeedback.core.session_validator import Identity
from guestfeedback.core.store import Store
from guestfeedback.models import Review, ReviewStatus
from guestfeedback.schemas.review import (
    ReviewFlagsUpdate,
    ReviewNotesUpdate,
    ReviewReply,
    ReviewResponse,
    ReviewStatusUpdate,
)
from guestfeedback.services import moderation

logger = structlog.get_logger(__name__)
router = APIRouter()


def _load_review(identity: Identity, store: Store, review_id: uuid.UUID) -> Review:
    review = owned(identity, store.get_review(review_id), "Review")
    if review.is_deleted:
        raise NotFound("Review not found")
    return review


@router.get("/", response_model=List[ReviewResponse])
async def list_reviews(
    status: Optional[ReviewStatus] = None,
    skip: int = 0,
    limit: int = 100,
    identity: Identity = Depends(require_tenant_admin),
    store: Store = Depends(get_store),
):
    """List reviews of the caller's hotel, newest first"""
    return store.list_reviews(identity.tenant_id, status=status, skip=skip, limit=min(limit, 500))


@router.get("/{review_id}", response_model=ReviewResponse)
async def get_review(
    review_id: uuid.UUID,
    identity: Identity = Depends(require_tenant_admin),
    store: Store = Depends(get_store),
):
    return _load_review(identity, store, review_id)


@router.patch("/{review_id}/status", response_model=ReviewResponse)
async def update_review_status(
    review_id: uuid.UUID,
    data: ReviewStatusUpdate,
    identity: Identity = Depends(require_tenant_admin),
    store: Store = Depends(get_store),
):
    """Move a review to another moderation status"""
    review = _load_review(identity, store, review_id)
    return moderation.change_status(store, review, data.status)


@router.patch("/{review_id}/flags", response_model=ReviewResponse)
async def update_review_flags(
    review_id: uuid.UUID,
    data: ReviewFlagsUpdate,
    identity: Identity = Depends(require_tenant_admin),
    store: Store = Depends(get_store),
):
    """Set checked / urgent / replied markers"""
    review = _load_review(identity, store, review_id)
    return moderation.update_flags(store, review, data)


@router.patch("/{review_id}/notes", response_model=ReviewResponse)
async def update_review_notes(
    review_id: uuid.UUID,
    data: ReviewNotesUpdate,
    identity: Identity = Depends(require_tenant_admin),
    store: Store = Depends(get_store),
):
    review = _load_review(identity, store, review_id)
    return moderation.update_notes(store, review, data.admin_notes)


@router.post("/{review_id}/reply", response_model=ReviewResponse)
async def reply_to_review(
    review_id: uuid.UUID,
    data: ReviewReply,
    identity: Identity = Depends(require_tenant_admin),
    store: Store = Depends(get_store),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    """Reply to the guest; emailed when the review has a guest email"""
    review = _load_review(identity, store, review_id)
    return await moderation.reply(store, dispatcher, review, data.message)


@router.delete("/{review_id}")
async def delete_review(
    review_id: uuid.UUID,
    identity: Identity = Depends(require_tenant_admin),
    store: Store = Depends(get_store),
):
    """Soft-delete a review"""
    review = _load_review(identity, store, review_id)
    moderation.soft_delete(store, review)
    return {"success": True, "message": "Review deleted"}
