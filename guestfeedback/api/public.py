"""
Public guest-facing endpoints: hotel and form lookup, feedback submission
"""

from typing import List
import uuid

from fastapi import APIRouter, Depends, status
import structlog

from guestfeedback.core.dependencies import get_dispatcher, get_store
from guestfeedback.core.errors import NotFound
from guestfeedback.core.notifications import NotificationDispatcher
from guestfeedback.core.store import Store
from guestfeedback.models import Form, Hotel
from guestfeedback.schemas.form import FormResponse
from guestfeedback.schemas.hotel import PublicHotelResponse
from guestfeedback.schemas.review import SubmissionIn, SubmissionResponse
from guestfeedback.services import submission

logger = structlog.get_logger(__name__)
router = APIRouter()


def _active_hotel(store: Store, hotel_slug: str) -> Hotel:
    hotel = store.get_hotel_by_slug(hotel_slug)
    if hotel is None or not hotel.is_active:
        raise NotFound("Hotel not found or inactive")
    return hotel


def _public_form(store: Store, hotel: Hotel, form_id: uuid.UUID) -> Form:
    form = store.get_form(form_id, hotel.id)
    if form is None or not form.is_active or not form.is_public:
        raise NotFound("Form not found or inactive")
    return form


@router.get("/hotels/{hotel_slug}", response_model=PublicHotelResponse)
async def get_public_hotel(
    hotel_slug: str,
    store: Store = Depends(get_store),
):
    return _active_hotel(store, hotel_slug)


@router.get("/hotels/{hotel_slug}/forms", response_model=List[FormResponse])
async def list_public_forms(
    hotel_slug: str,
    store: Store = Depends(get_store),
):
    """Active public forms of a hotel"""
    hotel = _active_hotel(store, hotel_slug)
    return store.list_forms(hotel.id, public_only=True)


@router.get("/hotels/{hotel_slug}/forms/{form_id}", response_model=FormResponse)
async def get_public_form(
    hotel_slug: str,
    form_id: uuid.UUID,
    store: Store = Depends(get_store),
):
    hotel = _active_hotel(store, hotel_slug)
    return _public_form(store, hotel, form_id)


@router.post(
    "/hotels/{hotel_slug}/submit",
    response_model=SubmissionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def submit_feedback(
    hotel_slug: str,
    data: SubmissionIn,
    store: Store = Depends(get_store),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    """Guest feedback submission"""
    review = await submission.submit(store, dispatcher, hotel_slug, data.form_id, data.responses)
    return SubmissionResponse(
        review_id=review.id,
        status=review.status,
        overall_rating=review.overall_rating,
    )
