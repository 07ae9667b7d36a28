"""
Platform admin endpoints: tenant oversight and account status
"""

from datetime import datetime
from typing import List, Optional
import uuid

from fastapi import APIRouter, Depends
import structlog

from guestfeedback.core.dependencies import get_store, require_platform_admin
from guestfeedback.core.errors import NotFound
from guestfeedback.core.session_validator import Identity
from guestfeedback.core.store import Store
from guestfeedback.models import ReviewStatus
from guestfeedback.schemas.form import FormResponse
from guestfeedback.schemas.hotel import HotelPlanUpdate, HotelResponse
from guestfeedback.schemas.review import ReviewResponse
from guestfeedback.schemas.user import UserResponse, UserStatusUpdate
from guestfeedback.services import auth as auth_service

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.get("/hotels", response_model=List[HotelResponse])
async def list_hotels(
    skip: int = 0,
    limit: int = 100,
    identity: Identity = Depends(require_platform_admin),
    store: Store = Depends(get_store),
):
    """List all hotels"""
    return store.list_hotels(skip=skip, limit=min(limit, 500))


@router.get("/hotels/{hotel_id}", response_model=HotelResponse)
async def get_hotel(
    hotel_id: uuid.UUID,
    identity: Identity = Depends(require_platform_admin),
    store: Store = Depends(get_store),
):
    hotel = store.get_hotel(hotel_id)
    if hotel is None:
        raise NotFound("Hotel not found")
    return hotel


@router.post("/hotels/{hotel_id}/toggle-active", response_model=HotelResponse)
async def toggle_hotel_active(
    hotel_id: uuid.UUID,
    identity: Identity = Depends(require_platform_admin),
    store: Store = Depends(get_store),
):
    """Suspend or reinstate a hotel; suspended hotels accept no feedback"""
    hotel = store.get_hotel(hotel_id)
    if hotel is None:
        raise NotFound("Hotel not found")

    hotel.is_active = not hotel.is_active
    hotel.updated_at = datetime.utcnow()
    store.add(hotel)
    store.commit()
    store.refresh(hotel)

    logger.info("Hotel active flag changed", hotel_id=str(hotel.id), is_active=hotel.is_active, by=str(identity.user_id))
    return hotel


@router.put("/hotels/{hotel_id}/plan", response_model=HotelResponse)
async def update_hotel_plan(
    hotel_id: uuid.UUID,
    data: HotelPlanUpdate,
    identity: Identity = Depends(require_platform_admin),
    store: Store = Depends(get_store),
):
    """Change a hotel's plan; existing forms are left as they are"""
    hotel = store.get_hotel(hotel_id)
    if hotel is None:
        raise NotFound("Hotel not found")

    hotel.subscription_plan = data.plan
    hotel.updated_at = datetime.utcnow()
    store.add(hotel)
    store.commit()
    store.refresh(hotel)

    logger.info("Hotel plan changed", hotel_id=str(hotel.id), plan=data.plan.value, by=str(identity.user_id))
    return hotel


@router.put("/users/{user_id}/status", response_model=UserResponse)
async def update_user_status(
    user_id: uuid.UUID,
    data: UserStatusUpdate,
    identity: Identity = Depends(require_platform_admin),
    store: Store = Depends(get_store),
):
    """Activate, deactivate or soft-delete an account"""
    user = store.get_user(user_id)
    if user is None:
        raise NotFound("User not found")
    return auth_service.set_user_status(store, user, data.status)


@router.get("/reviews", response_model=List[ReviewResponse])
async def list_reviews(
    hotel_id: Optional[uuid.UUID] = None,
    status: Optional[ReviewStatus] = None,
    rating: Optional[int] = None,
    skip: int = 0,
    limit: int = 100,
    identity: Identity = Depends(require_platform_admin),
    store: Store = Depends(get_store),
):
    """Reviews across all hotels, newest first"""
    return store.search_reviews(
        hotel_id=hotel_id, status=status, rating=rating, skip=skip, limit=min(limit, 500)
    )


@router.get("/reviews/{review_id}", response_model=ReviewResponse)
async def get_review(
    review_id: uuid.UUID,
    identity: Identity = Depends(require_platform_admin),
    store: Store = Depends(get_store),
):
    review = store.get_review(review_id)
    if review is None or review.is_deleted:
        raise NotFound("Review not found")
    return review


@router.get("/forms", response_model=List[FormResponse])
async def list_forms(
    hotel_id: Optional[uuid.UUID] = None,
    skip: int = 0,
    limit: int = 100,
    identity: Identity = Depends(require_platform_admin),
    store: Store = Depends(get_store),
):
    """Forms across all hotels"""
    return store.list_all_forms(hotel_id=hotel_id, skip=skip, limit=min(limit, 500))


@router.get("/forms/{form_id}", response_model=FormResponse)
async def get_form(
    form_id: uuid.UUID,
    identity: Identity = Depends(require_platform_admin),
    store: Store = Depends(get_store),
):
    form = store.find_form(form_id)
    if form is None:
        raise NotFound("Form not found")
    return form
