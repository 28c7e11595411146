"""
Razorpay integration for the one-time Pro upgrade.
Creates orders through the Orders REST API and verifies checkout signatures.
"""
import hashlib
import hmac
import logging
import time

import httpx
from fastapi import APIRouter, Depends

from postcraft.core import config
from postcraft.core.errors import (
    AccountNotFound,
    PaymentGatewayError,
    PaymentNotConfigured,
    PaymentVerificationFailed,
)
from postcraft.dependencies.auth import get_current_user_id
from postcraft.schemas.payment import OrderResponse, PaymentVerifyRequest
from postcraft.store import Store, get_store

logger = logging.getLogger(__name__)

router = APIRouter()


def _razorpay_configured() -> bool:
    return bool(config.RAZORPAY_KEY_ID and config.RAZORPAY_KEY_SECRET)


def verify_razorpay_signature(order_id: str, payment_id: str, signature: str, key_secret: str) -> bool:
    """
    Razorpay Checkout signs "<order_id>|<payment_id>" with HMAC-SHA256 using the
    key secret and sends the hex digest.
    """
    if not (order_id and payment_id and signature and key_secret):
        return False
    expected = hmac.new(
        key_secret.encode(),
        f"{order_id}|{payment_id}".encode(),
        hashlib.sha256,
    ).hexdigest()
    return hmac.compare_digest(expected, signature.strip())


@router.post("/create-order", response_model=OrderResponse)
async def create_order(user_id: str = Depends(get_current_user_id)):
    """Create a Razorpay order for the Pro upgrade and return what Checkout needs."""
    if not _razorpay_configured():
        logger.warning("Razorpay keys missing; cannot create order")
        raise PaymentNotConfigured()

    payload = {
        "amount": config.PRO_AMOUNT_PAISE,
        "currency": config.PRO_CURRENCY,
        "receipt": f"rcpt_{user_id[:8]}_{int(time.time() * 1000)}",  # max 40 chars
        "notes": {"user_id": user_id},
    }
    try:
        async with httpx.AsyncClient(timeout=15.0) as client:
            r = await client.post(
                f"{config.RAZORPAY_BASE_URL}/orders",
                json=payload,
                auth=(config.RAZORPAY_KEY_ID, config.RAZORPAY_KEY_SECRET),
            )
    except httpx.HTTPError as e:
        logger.error("Razorpay order request failed: %s", e)
        raise PaymentGatewayError() from e

    if r.status_code != 200:
        logger.error("Razorpay order creation returned %s: %s", r.status_code, r.text[:500])
        raise PaymentGatewayError()

    order = r.json()
    logger.info("Created Razorpay order %s for user %s", order.get("id"), user_id)
    return OrderResponse(
        order_id=order["id"],
        amount=order.get("amount", config.PRO_AMOUNT_PAISE),
        currency=order.get("currency", config.PRO_CURRENCY),
        key_id=config.RAZORPAY_KEY_ID,
    )


@router.post("/verify")
def verify_payment(
    data: PaymentVerifyRequest,
    store: Store = Depends(get_store),
    user_id: str = Depends(get_current_user_id),
):
    """Verify the Checkout signature and upgrade the account to Pro."""
    if not (data.razorpay_order_id and data.razorpay_payment_id and data.razorpay_signature):
        raise PaymentVerificationFailed("Missing payment details")
    if not _razorpay_configured():
        raise PaymentNotConfigured()

    if not verify_razorpay_signature(
        data.razorpay_order_id,
        data.razorpay_payment_id,
        data.razorpay_signature,
        config.RAZORPAY_KEY_SECRET,
    ):
        logger.warning("Invalid Razorpay signature for user %s", user_id)
        raise PaymentVerificationFailed()

    account = store.get_user_by_id(user_id)
    if not account:
        raise AccountNotFound()
    if account.plan_tier != "pro":
        store.upgrade_plan(user_id)
        logger.info("User %s upgraded to pro (payment %s)", user_id, data.razorpay_payment_id)
    return {"success": True}
