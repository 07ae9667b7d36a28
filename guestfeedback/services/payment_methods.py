"""
Cards on file for a hotel's subscription
"""

import structlog

from guestfeedback.core.notifications import NotificationDispatcher, PaymentMethodAdded, signal
from guestfeedback.core.store import Store
from guestfeedback.models import Hotel, PaymentMethod
from guestfeedback.schemas.payment_method import PaymentMethodCreate

logger = structlog.get_logger(__name__)


async def add_payment_method(
    store: Store,
    dispatcher: NotificationDispatcher,
    hotel: Hotel,
    data: PaymentMethodCreate,
) -> PaymentMethod:
    """Attach a card; the first card on file becomes the default"""
    is_first = not store.list_payment_methods(hotel.id)
    method = PaymentMethod(
        hotel_id=hotel.id,
        brand=data.brand,
        last4=data.last4,
        exp_month=data.exp_month,
        exp_year=data.exp_year,
        is_default=is_first,
    )
    store.add(method)
    store.commit()
    store.refresh(method)

    logger.info("Payment method added", payment_method_id=str(method.id), hotel_id=str(hotel.id))

    await signal(dispatcher, store, PaymentMethodAdded(
        hotel_id=hotel.id,
        payment_method_id=method.id,
        owner_id=hotel.owner_id,
        brand=method.brand,
        last4=method.last4,
    ))
    return method


def set_default(store: Store, method: PaymentMethod) -> PaymentMethod:
    for other in store.list_payment_methods(method.hotel_id):
        other.is_default = other.id == method.id
        store.add(other)
    store.commit()
    store.refresh(method)
    return method


def remove_payment_method(store: Store, method: PaymentMethod) -> None:
    """Delete a card; another card inherits the default flag"""
    method_id, hotel_id, was_default = method.id, method.hotel_id, method.is_default
    store.delete(method)
    store.flush()

    if was_default:
        remaining = store.list_payment_methods(hotel_id)
        if remaining:
            remaining[0].is_default = True
            store.add(remaining[0])
    store.commit()
    logger.info(f"Payment method removed: {method_id}")
