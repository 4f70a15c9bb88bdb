"""Cart models for the storefront"""

from pydantic import BaseModel, Field
from typing import Optional


class ContainerOption(BaseModel):
    """Cup or cone the gelato is served in"""
    id: str
    name: str
    price: float = 0.0


class Topping(BaseModel):
    """Topping added to an item"""
    id: str
    name: str
    price: float = 0.0
    category: str = ""


class Customizations(BaseModel):
    """Per-line customizations"""
    container: Optional[ContainerOption] = None
    toppings: list[Topping] = []
    topping_names: Optional[str] = None


class CartItem(BaseModel):
    """Line item in a shopping cart"""
    variant_id: Optional[str] = None
    quantity: int = Field(default=1, gt=0)
    title: Optional[str] = None
    price: Optional[str] = None  # decimal string, e.g. "4.50"
    image: Optional[str] = None
    variant_title: Optional[str] = None
    customizations: Optional[Customizations] = None


class Cart(BaseModel):
    """Shopping cart snapshot"""
    cart_id: str
    items: list[CartItem] = []
    subtotal: float = 0.0
    item_count: int = 0


class UpdateCartItemRequest(BaseModel):
    """Request to set an item's quantity; zero or less removes it"""
    quantity: int


class CartResponse(BaseModel):
    """Cart API response"""
    cart: Cart
    message: Optional[str] = None
