"""
Webhook handlers for the billing provider
"""

from fastapi import APIRouter, Depends, Request
import structlog

from guestfeedback.core.config import get_settings
from guestfeedback.core.dependencies import get_store
from guestfeedback.core.store import Store
from guestfeedback.services.billing import apply_billing_event, verify_webhook

logger = structlog.get_logger(__name__)
router = APIRouter()
settings = get_settings()


@router.post("/billing")
async def billing_webhook(
    request: Request,
    store: Store = Depends(get_store),
):
    """
    Handle subscription and invoice events.

    The raw body is verified before it is parsed; a bad or missing
    signature is rejected without touching any hotel.
    """
    body = await request.body()
    payload = verify_webhook(settings.BILLING_WEBHOOK_SECRET, body, request.headers)

    logger.info(f"Received billing webhook: {payload.get('type')}")
    outcome = apply_billing_event(store, payload)
    return {"received": True, "status": outcome}
