"""Cart storage for the storefront"""

import json
import logging
import uuid
from typing import Optional

from pydantic import ValidationError

from ..core.config import settings
from ..core.events import CartEventBus, CartUpdatedEvent, cart_events
from ..models.cart import Cart, CartItem
from .storage import KeyValueStore, StorageError, build_storage

logger = logging.getLogger(__name__)


class CartError(Exception):
    """Raised when a cart operation is rejected"""


def parse_price(price: Optional[str]) -> float:
    """Parse a decimal price string; missing or malformed prices count as 0"""
    if not price:
        return 0.0
    try:
        return float(price)
    except (TypeError, ValueError):
        logger.warning(f"Ignoring unparsable price {price!r}")
        return 0.0


def calculate_subtotal(items: list[CartItem]) -> float:
    """Sum of price * quantity over all lines"""
    return sum(parse_price(item.price) * item.quantity for item in items)


def item_count(items: list[CartItem]) -> int:
    """Total number of units in the cart"""
    return sum(item.quantity for item in items)


def new_cart_id() -> str:
    return str(uuid.uuid4())


class CartStore:
    """
    Carts persisted in a key-value store.

    Each cart is a JSON array of line items stored under
    ``"{storage_key}:{cart_id}"``. Every write is followed by a
    ``cart-updated`` broadcast carrying the new snapshot.
    """

    def __init__(
        self,
        storage: KeyValueStore,
        events: CartEventBus,
        storage_key: str = "gelatico-cart",
    ):
        self.storage = storage
        self.events = events
        self.storage_key = storage_key

    def _key(self, cart_id: str) -> str:
        return f"{self.storage_key}:{cart_id}"

    def load(self, cart_id: str) -> list[CartItem]:
        """Load a cart; unreadable contents are discarded"""
        key = self._key(cart_id)
        raw = self.storage.get_item(key)
        if not raw:
            return []

        try:
            data = json.loads(raw)
            if not isinstance(data, list):
                return []
            return [CartItem.model_validate(entry) for entry in data]
        except (ValueError, ValidationError) as e:
            logger.error(f"Error loading cart {cart_id} from storage: {e}")
            self.storage.remove_item(key)
            return []

    def save(self, cart_id: str, items: list[CartItem]) -> None:
        """Persist a cart and broadcast the change"""
        payload = json.dumps([item.model_dump(exclude_none=True) for item in items])
        try:
            self.storage.set_item(self._key(cart_id), payload)
        except StorageError as e:
            logger.error(f"Error saving cart {cart_id} to storage: {e}")
            return
        self.events.publish(CartUpdatedEvent(cart_id=cart_id, items=list(items)))

    def snapshot(self, cart_id: str, items: Optional[list[CartItem]] = None) -> Cart:
        """Build the API view of a cart"""
        if items is None:
            items = self.load(cart_id)
        return Cart(
            cart_id=cart_id,
            items=items,
            subtotal=calculate_subtotal(items),
            item_count=item_count(items),
        )

    def add_item(self, cart_id: str, item: CartItem) -> tuple[list[CartItem], str]:
        """
        Add an item, merging quantities with an existing line for the same variant.

        Returns:
            Tuple of (updated items, notice for the shopper)
        """
        if not item.variant_id:
            logger.error(f"Cannot add item without variant_id: {item!r}")
            raise CartError("Could not add item to cart - missing information")

        items = self.load(cart_id)
        index = next(
            (i for i, existing in enumerate(items) if existing.variant_id == item.variant_id),
            None,
        )

        if index is not None:
            existing = items[index]
            items[index] = existing.model_copy(
                update={"quantity": existing.quantity + item.quantity}
            )
        else:
            items.append(item)

        self.save(cart_id, items)
        return items, f"{item.title or 'Product'} added to cart"

    def update_quantity(
        self,
        cart_id: str,
        variant_id: str,
        quantity: int,
    ) -> tuple[list[CartItem], Optional[str]]:
        """Set a line's quantity; zero or less removes the line"""
        if quantity <= 0:
            return self.remove_item(cart_id, variant_id)

        items = [
            item.model_copy(update={"quantity": quantity})
            if item.variant_id == variant_id
            else item
            for item in self.load(cart_id)
        ]
        self.save(cart_id, items)
        return items, None

    def remove_item(self, cart_id: str, variant_id: str) -> tuple[list[CartItem], str]:
        items = [item for item in self.load(cart_id) if item.variant_id != variant_id]
        self.save(cart_id, items)
        return items, "Item removed from cart"

    def clear_cart(self, cart_id: str) -> tuple[list[CartItem], str]:
        """Empty the cart and drop its storage key"""
        try:
            self.storage.remove_item(self._key(cart_id))
        except StorageError as e:
            logger.error(f"Error clearing cart {cart_id} in storage: {e}")
        self.events.publish(CartUpdatedEvent(cart_id=cart_id, items=[]))
        return [], "Cart cleared"


# Singleton instance
cart_store = CartStore(
    storage=build_storage(settings),
    events=cart_events,
    storage_key=settings.cart_storage_key,
)


def get_cart_store() -> CartStore:
    return cart_store
