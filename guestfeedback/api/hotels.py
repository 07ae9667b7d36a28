"""
Hotel (tenant) API endpoints for registration and the hotel's own account
"""

from fastapi import APIRouter, Depends, Query, status
import structlog

from guestfeedback.core.dependencies import (
    get_current_hotel,
    get_dispatcher,
    get_store,
    require_tenant_admin,
)
from guestfeedback.core.notifications import (
    EmailVerificationRequested,
    NewContactMessage,
    NotificationDispatcher,
    signal,
)
from guestfeedback.core.session_validator import Identity
from guestfeedback.core.store import Store
from guestfeedback.models import Hotel
from guestfeedback.schemas.hotel import (
    ContactMessage,
    HotelRegistration,
    HotelResponse,
    SlugAvailability,
)
from guestfeedback.schemas.user import UserResponse
from guestfeedback.services import auth as auth_service

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register_hotel(
    data: HotelRegistration,
    store: Store = Depends(get_store),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    """Register a hotel and its owner; the owner must verify their email"""
    hotel, owner = auth_service.register_hotel(store, data)

    await signal(dispatcher, store, EmailVerificationRequested(
        user_id=owner.id,
        email=owner.email,
        token=owner.verification_token,
    ))

    return {
        "message": "Registration successful. Please check your email to verify your account.",
        "hotel": HotelResponse.model_validate(hotel),
        "user": UserResponse.model_validate(owner),
    }


@router.get("/validate-slug", response_model=SlugAvailability)
async def validate_slug(
    slug: str = Query(..., min_length=1, max_length=100),
    store: Store = Depends(get_store),
):
    """Check whether a slug can be used for a new hotel"""
    valid = auth_service.slug_is_valid(slug)
    available = valid and store.get_hotel_by_slug(slug) is None
    return SlugAvailability(slug=slug, valid=valid, available=available)


@router.get("/current", response_model=HotelResponse)
async def get_current_hotel_info(
    hotel: Hotel = Depends(get_current_hotel),
):
    """Hotel of the signed-in tenant admin"""
    return hotel


@router.post("/contact", status_code=status.HTTP_202_ACCEPTED)
async def contact_platform(
    data: ContactMessage,
    identity: Identity = Depends(require_tenant_admin),
    hotel: Hotel = Depends(get_current_hotel),
    store: Store = Depends(get_store),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    """Send a support message to every platform admin"""
    admins = store.list_platform_admins()
    delivered = await signal(dispatcher, store, NewContactMessage(
        hotel_id=hotel.id,
        sender_id=identity.user_id,
        admin_ids=[admin.id for admin in admins],
        subject=data.subject,
        body=data.message,
    ))
    logger.info("Contact message sent", hotel_id=str(hotel.id), recipients=len(admins), delivered=delivered)
    return {"success": True, "message": "Message sent"}
