"""
Account endpoints for the signed-in user
"""

from fastapi import APIRouter, Depends

from guestfeedback.core.dependencies import get_current_identity, get_store
from guestfeedback.core.errors import Unauthenticated
from guestfeedback.core.session_validator import Identity
from guestfeedback.core.store import Store
from guestfeedback.schemas.user import PasswordChange
from guestfeedback.services import auth as auth_service

router = APIRouter()


@router.put("/change-password")
async def change_password(
    data: PasswordChange,
    identity: Identity = Depends(get_current_identity),
    store: Store = Depends(get_store),
):
    """Change password after confirming the current one"""
    user = store.get_user(identity.user_id)
    if user is None:
        raise Unauthenticated()

    auth_service.change_password(store, user, data.current_password, data.new_password)
    return {"success": True, "message": "Password changed successfully"}
