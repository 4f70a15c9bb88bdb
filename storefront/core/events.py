"""
Cart update broadcast.

Every write to a cart publishes a ``CartUpdatedEvent`` so that all clients
looking at the same cart (several browser tabs, a WebSocket feed) pick up the
new snapshot. Delivery is synchronous and in-process; the last write wins.
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Callable

logger = logging.getLogger(__name__)

CART_UPDATED = "cart-updated"


@dataclass
class CartUpdatedEvent:
    """Snapshot of a cart after a write"""
    cart_id: str
    items: list = field(default_factory=list)
    name: str = CART_UPDATED


Subscriber = Callable[[CartUpdatedEvent], None]


class CartEventBus:
    """Fan-out of cart updates to per-cart subscribers"""

    def __init__(self):
        self._subscribers: dict[str, list[Subscriber]] = {}
        self._lock = threading.Lock()

    def subscribe(self, cart_id: str, callback: Subscriber) -> Callable[[], None]:
        """
        Register a callback for updates to one cart.

        Returns:
            A function that removes the subscription
        """
        with self._lock:
            self._subscribers.setdefault(cart_id, []).append(callback)

        def unsubscribe() -> None:
            with self._lock:
                callbacks = self._subscribers.get(cart_id, [])
                if callback in callbacks:
                    callbacks.remove(callback)
                if not callbacks:
                    self._subscribers.pop(cart_id, None)

        return unsubscribe

    def publish(self, event: CartUpdatedEvent) -> int:
        """
        Deliver an event to every subscriber of its cart.

        A failing subscriber is logged and does not stop delivery to the rest.

        Returns:
            Number of subscribers notified successfully
        """
        with self._lock:
            callbacks = list(self._subscribers.get(event.cart_id, []))

        delivered = 0
        for callback in callbacks:
            try:
                callback(event)
                delivered += 1
            except Exception:
                logger.exception(f"Cart subscriber failed for cart {event.cart_id}")

        logger.debug(f"{event.name} for cart {event.cart_id} delivered to {delivered} subscriber(s)")
        return delivered

    def subscriber_count(self, cart_id: str) -> int:
        with self._lock:
            return len(self._subscribers.get(cart_id, []))


# Singleton instance
cart_events = CartEventBus()
