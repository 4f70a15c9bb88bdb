# Core modules

from .config import settings, get_settings, Settings
from .events import cart_events, CartEventBus, CartUpdatedEvent

__all__ = [
    "settings",
    "get_settings",
    "Settings",
    "cart_events",
    "CartEventBus",
    "CartUpdatedEvent",
]
