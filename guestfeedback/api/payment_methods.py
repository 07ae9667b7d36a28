"""
Payment method endpoints for tenant admins
"""

from typing import List
import uuid

from fastapi import APIRouter, Depends, status

from guestfeedback.core.dependencies import (
    get_current_hotel,
    get_dispatcher,
    get_store,
    require_tenant_admin,
)
from guestfeedback.core.notifications import NotificationDispatcher
from guestfeedback.core.permissions import owned
from guestfeedback.core.session_validator import Identity
from guestfeedback.core.store import Store
from guestfeedback.models import Hotel
from guestfeedback.schemas.payment_method import PaymentMethodCreate, PaymentMethodResponse
from guestfeedback.services import payment_methods as payment_service

router = APIRouter()


@router.get("/", response_model=List[PaymentMethodResponse])
async def list_payment_methods(
    hotel: Hotel = Depends(get_current_hotel),
    store: Store = Depends(get_store),
):
    return store.list_payment_methods(hotel.id)


@router.post("/", response_model=PaymentMethodResponse, status_code=status.HTTP_201_CREATED)
async def add_payment_method(
    data: PaymentMethodCreate,
    hotel: Hotel = Depends(get_current_hotel),
    store: Store = Depends(get_store),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    return await payment_service.add_payment_method(store, dispatcher, hotel, data)


@router.post("/{method_id}/default", response_model=PaymentMethodResponse)
async def set_default_payment_method(
    method_id: uuid.UUID,
    identity: Identity = Depends(require_tenant_admin),
    store: Store = Depends(get_store),
):
    method = owned(identity, store.get_payment_method(method_id), "Payment method")
    return payment_service.set_default(store, method)


@router.delete("/{method_id}")
async def delete_payment_method(
    method_id: uuid.UUID,
    identity: Identity = Depends(require_tenant_admin),
    store: Store = Depends(get_store),
):
    method = owned(identity, store.get_payment_method(method_id), "Payment method")
    payment_service.remove_payment_method(store, method)
    return {"success": True, "message": "Payment method removed"}
