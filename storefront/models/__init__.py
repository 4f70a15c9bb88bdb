# Storefront Models

from .product import Product, ProductImage, ProductVariant, ProductSearchResponse
from .cart import (
    Cart,
    CartItem,
    ContainerOption,
    Customizations,
    Topping,
    UpdateCartItemRequest,
    CartResponse,
)
from .checkout import (
    Order,
    OrderStatus,
    OrderSummaryItem,
    CheckoutAddress,
    CheckoutOptions,
    CheckoutRequest,
    CheckoutResponse,
)
from .profile import Profile, UpdateProfileRequest, ProfileResponse

__all__ = [
    "Product",
    "ProductImage",
    "ProductVariant",
    "ProductSearchResponse",
    "Cart",
    "CartItem",
    "ContainerOption",
    "Customizations",
    "Topping",
    "UpdateCartItemRequest",
    "CartResponse",
    "Order",
    "OrderStatus",
    "OrderSummaryItem",
    "CheckoutAddress",
    "CheckoutOptions",
    "CheckoutRequest",
    "CheckoutResponse",
    "Profile",
    "UpdateProfileRequest",
    "ProfileResponse",
]
