"""
Authentication API endpoints
"""

from datetime import timedelta

from fastapi import APIRouter, Depends, Request, Response
import structlog

from guestfeedback.core.config import get_settings
from guestfeedback.core.dependencies import get_current_identity, get_dispatcher, get_store
from guestfeedback.core.notifications import (
    EmailVerificationRequested,
    NotificationDispatcher,
    PasswordResetRequested,
    signal,
)
from guestfeedback.core.security import create_access_token
from guestfeedback.core.session_validator import Identity
from guestfeedback.core.store import Store
from guestfeedback.schemas.user import (
    EmailOnly,
    IdentityResponse,
    LoginResponse,
    PasswordReset,
    UserLogin,
    UserResponse,
    VerifyEmail,
)
from guestfeedback.services import auth as auth_service

logger = structlog.get_logger(__name__)
router = APIRouter()
settings = get_settings()


@router.post("/login", response_model=LoginResponse)
async def login(
    login_data: UserLogin,
    store: Store = Depends(get_store),
):
    """Password login for mobile clients; returns a 30-day bearer token"""
    user, hotel = auth_service.login(store, login_data.email, login_data.password)

    lifetime = timedelta(days=settings.JWT_ACCESS_TOKEN_EXPIRE_DAYS)
    access_token = create_access_token(user, hotel, expires_delta=lifetime)

    return LoginResponse(
        access_token=access_token,
        token_type="bearer",
        expires_in=int(lifetime.total_seconds()),
        user=UserResponse.model_validate(user),
    )


@router.post("/session", response_model=LoginResponse)
async def create_session(
    login_data: UserLogin,
    response: Response,
    store: Store = Depends(get_store),
):
    """Password login for the web dashboard; sets the session cookie"""
    user, _ = auth_service.login(store, login_data.email, login_data.password)
    record = auth_service.create_web_session(store, user)

    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=record.id,
        max_age=settings.SESSION_EXPIRE_DAYS * 24 * 60 * 60,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
    )
    return LoginResponse(user=UserResponse.model_validate(user))


@router.post("/logout")
async def logout(
    request: Request,
    response: Response,
    store: Store = Depends(get_store),
):
    """End the web session, if any"""
    session_id = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if session_id:
        auth_service.end_web_session(store, session_id)
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return {"success": True, "message": "Logged out"}


@router.get("/me", response_model=IdentityResponse)
async def get_current_user_info(
    identity: Identity = Depends(get_current_identity),
):
    """Get current user info"""
    return IdentityResponse.model_validate(identity)


@router.post("/verify-email")
async def verify_email(
    data: VerifyEmail,
    store: Store = Depends(get_store),
):
    """Confirm an email address from the verification link"""
    user = auth_service.verify_email(store, data.token)
    return {"success": True, "email": user.email}


@router.post("/resend-verification")
async def resend_verification(
    data: EmailOnly,
    store: Store = Depends(get_store),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    """Send a new verification link; the answer never reveals whether the email exists"""
    user = auth_service.resend_verification(store, data.email)
    if user is not None:
        await signal(dispatcher, store, EmailVerificationRequested(
            user_id=user.id,
            email=user.email,
            token=user.verification_token,
        ))
    return {
        "success": True,
        "message": "If an account with this email exists and is not verified, a verification email has been sent.",
    }


@router.post("/forgot-password")
async def forgot_password(
    data: EmailOnly,
    store: Store = Depends(get_store),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    """Email a password reset link"""
    user = auth_service.request_password_reset(store, data.email)
    if user is not None:
        await signal(dispatcher, store, PasswordResetRequested(
            user_id=user.id,
            email=user.email,
            token=user.reset_token,
        ))
    return {
        "success": True,
        "message": "If an account with that email exists, we have sent a password reset link.",
    }


@router.post("/reset-password")
async def reset_password(
    data: PasswordReset,
    store: Store = Depends(get_store),
):
    auth_service.reset_password(store, data.token, data.new_password)
    return {"success": True, "message": "Password has been reset"}
