"""
Authentication and data-access dependencies for FastAPI
"""

from fastapi import Depends, Request
from sqlmodel import Session

from guestfeedback.core.database import get_session
from guestfeedback.core.errors import NotFound
from guestfeedback.core.notifications import NotificationDispatcher
from guestfeedback.core.permissions import enforce
from guestfeedback.core.session_validator import Identity, authenticate
from guestfeedback.core.store import Store
from guestfeedback.models import Hotel, UserRole


def get_store(session: Session = Depends(get_session)) -> Store:
    """Repository bound to the request's database session"""
    return Store(session)


def get_dispatcher(request: Request) -> NotificationDispatcher:
    """Dispatcher built once by the application factory"""
    return request.app.state.dispatcher


async def get_current_identity(
    request: Request,
    store: Store = Depends(get_store),
) -> Identity:
    """Authenticated identity from session cookie or bearer token"""
    return authenticate(request, store)


async def require_platform_admin(
    identity: Identity = Depends(get_current_identity),
) -> Identity:
    return enforce(identity, UserRole.PLATFORM_ADMIN)


async def require_tenant_admin(
    identity: Identity = Depends(get_current_identity),
) -> Identity:
    return enforce(identity, UserRole.TENANT_ADMIN)


async def get_current_hotel(
    identity: Identity = Depends(require_tenant_admin),
    store: Store = Depends(get_store),
) -> Hotel:
    """Hotel of the calling tenant admin, read fresh for this request"""
    hotel = store.get_hotel(identity.tenant_id)
    if hotel is None:
        raise NotFound("Hotel not found")
    return hotel
