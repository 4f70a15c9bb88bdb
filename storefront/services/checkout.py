"""
Checkout Service

Turns a cart into an order: totals the lines, builds the order summary and,
for signed-in shoppers, stores the order in the hosted database. Storing the
order is best effort; checkout succeeds even if the insert fails.
"""

import asyncio
import logging
import random
import time
from typing import Optional

from ..core.config import settings
from ..database.carts import calculate_subtotal, parse_price
from ..models.cart import CartItem
from ..models.checkout import (
    CheckoutOptions,
    CheckoutResponse,
    OrderStatus,
    OrderSummaryItem,
)
from .supabase_client import AuthUser, BackendError, SupabaseClient, supabase_client

logger = logging.getLogger(__name__)

ORDERS_TABLE = "orders"


class CheckoutError(Exception):
    """Raised when a cart cannot be checked out"""


def generate_order_id() -> str:
    return f"ORD-{int(time.time() * 1000)}-{random.randint(0, 999)}"


def build_order_summary(items: list[CartItem]) -> list[OrderSummaryItem]:
    """Flatten cart lines into the summary stored with the order"""
    summary = []
    for item in items:
        customizations = item.customizations
        container = customizations.container if customizations else None
        summary.append(
            OrderSummaryItem(
                title=item.title,
                quantity=item.quantity,
                price=item.price,
                container=container.name if container else None,
                toppings=customizations.topping_names if customizations else None,
                total=f"{parse_price(item.price) * item.quantity:.3f}",
            )
        )
    return summary


class CheckoutService:
    """Processes checkouts against the hosted database"""

    def __init__(
        self,
        client: Optional[SupabaseClient] = None,
        processing_delay: float = 1.0,
    ):
        self.client = client
        self.processing_delay = processing_delay

    async def process_checkout(
        self,
        items: list[CartItem],
        options: Optional[CheckoutOptions] = None,
        user: Optional[AuthUser] = None,
        access_token: Optional[str] = None,
    ) -> CheckoutResponse:
        """
        Process a checkout.

        Never raises; failures come back as ``success=False`` with the reason
        in ``error``.
        """
        options = options or CheckoutOptions()
        try:
            if not items:
                raise CheckoutError("Cannot create checkout with empty cart")

            logger.info(f"Processing checkout with {len(items)} item(s)")
            logger.debug(f"Checkout items: {[item.model_dump(exclude_none=True) for item in items]}")
            logger.debug(f"Checkout options: {options.model_dump(exclude_none=True)}")

            if self.processing_delay > 0:
                await asyncio.sleep(self.processing_delay)

            total_amount = calculate_subtotal(items)
            logger.info(f"Total order amount: {total_amount}")

            order_summary = build_order_summary(items)
            order_id = generate_order_id()

            if user:
                await self._store_order(order_id, user, total_amount, order_summary, options, access_token)

            return CheckoutResponse(
                success=True,
                order_id=order_id,
                total_amount=total_amount,
                order_summary=order_summary,
                message="Order processed successfully",
            )
        except Exception as e:
            logger.error(f"Error processing checkout: {e}")
            return CheckoutResponse(success=False, error=str(e) or "Unknown error occurred")

    async def _store_order(
        self,
        order_id: str,
        user: AuthUser,
        total_amount: float,
        order_summary: list[OrderSummaryItem],
        options: CheckoutOptions,
        access_token: Optional[str],
    ) -> None:
        if not self.client:
            logger.warning(f"Hosted database not configured, order {order_id} not stored")
            return

        row = {
            "id": order_id,
            "user_id": user.id,
            "total_amount": total_amount,
            "items": [line.model_dump() for line in order_summary],
            "status": OrderStatus.PENDING.value,
            "delivery_address": options.address.model_dump() if options.address else None,
            "special_instructions": "",
        }
        try:
            await self.client.insert(ORDERS_TABLE, row, access_token=access_token)
            logger.info(f"Order {order_id} stored for user {user.id}")
        except BackendError as e:
            logger.error(f"Error saving order {order_id} to database: {e}")


# Singleton instance
checkout_service = CheckoutService(
    client=supabase_client,
    processing_delay=settings.checkout_processing_delay,
)


def get_checkout_service() -> CheckoutService:
    return checkout_service
