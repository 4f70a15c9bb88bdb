"""Checkout API routes for the storefront"""

import logging
from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool

from ..models.checkout import CheckoutOptions, CheckoutRequest, CheckoutResponse
from ..database.carts import CartStore, get_cart_store
from ..services.checkout import CheckoutService, get_checkout_service
from ..security.auth import ShopperSession, optional_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/checkout", tags=["Checkout"])


@router.post("", response_model=CheckoutResponse)
async def checkout(
    request: CheckoutRequest,
    session: ShopperSession = Depends(optional_user),
    store: CartStore = Depends(get_cart_store),
    service: CheckoutService = Depends(get_checkout_service),
):
    """
    Check out a cart.

    Guests can check out; orders are only stored for signed-in shoppers.
    The cart is cleared once the order has been processed.
    """
    items = await run_in_threadpool(store.load, request.cart_id)

    result = await service.process_checkout(
        items,
        CheckoutOptions(email=request.email, address=request.address),
        user=session.user,
        access_token=session.access_token,
    )

    if result.success:
        await run_in_threadpool(store.clear_cart, request.cart_id)
        logger.info(
            f"Order {result.order_id} processed: ${result.total_amount:.2f} - "
            f"{'member' if session.is_authenticated else 'guest'} checkout"
        )

    return result
