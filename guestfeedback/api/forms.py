"""
Feedback form API endpoints for tenant admins
"""

from typing import List
import uuid

from fastapi import APIRouter, Depends, status
import structlog

from guestfeedback.core.dependencies import get_current_hotel, get_store, require_tenant_admin
from guestfeedback.core.permissions import owned
from guestfeedback.core.session_validator import Identity
from guestfeedback.core.store import Store
from guestfeedback.models import Hotel
from guestfeedback.schemas.form import FormCreate, FormResponse, FormUpdate
from guestfeedback.services import forms as form_service

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.get("/", response_model=List[FormResponse])
async def list_forms(
    hotel: Hotel = Depends(get_current_hotel),
    store: Store = Depends(get_store),
):
    """List all forms of the caller's hotel"""
    return store.list_forms(hotel.id)


@router.post("/", response_model=FormResponse, status_code=status.HTTP_201_CREATED)
async def create_form(
    form_data: FormCreate,
    hotel: Hotel = Depends(get_current_hotel),
    store: Store = Depends(get_store),
):
    """Create a form within the limits of the hotel's current plan"""
    return form_service.create_form(store, hotel, form_data)


@router.get("/{form_id}", response_model=FormResponse)
async def get_form(
    form_id: uuid.UUID,
    identity: Identity = Depends(require_tenant_admin),
    hotel: Hotel = Depends(get_current_hotel),
    store: Store = Depends(get_store),
):
    """Get form by ID"""
    return owned(identity, store.get_form(form_id, hotel.id), "Form")


@router.put("/{form_id}", response_model=FormResponse)
async def update_form(
    form_id: uuid.UUID,
    form_data: FormUpdate,
    identity: Identity = Depends(require_tenant_admin),
    hotel: Hotel = Depends(get_current_hotel),
    store: Store = Depends(get_store),
):
    """Update form details, optionally replacing all fields"""
    form = owned(identity, store.get_form(form_id, hotel.id), "Form")
    return form_service.update_form(store, hotel, form, form_data)


@router.post("/{form_id}/toggle-active", response_model=FormResponse)
async def toggle_form_active(
    form_id: uuid.UUID,
    identity: Identity = Depends(require_tenant_admin),
    hotel: Hotel = Depends(get_current_hotel),
    store: Store = Depends(get_store),
):
    """Enable or disable guest submissions for a form"""
    form = owned(identity, store.get_form(form_id, hotel.id), "Form")
    return form_service.toggle_form_active(store, form)
