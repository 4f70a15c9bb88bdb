"""Checkout models for the storefront"""

from pydantic import BaseModel
from typing import Optional
from enum import Enum


class OrderStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class CheckoutAddress(BaseModel):
    """Delivery address for an order"""
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    address1: Optional[str] = None
    address2: Optional[str] = None
    city: Optional[str] = None
    province: Optional[str] = None
    country: Optional[str] = None
    zip: Optional[str] = None
    phone: Optional[str] = None


class CheckoutOptions(BaseModel):
    email: Optional[str] = None
    address: Optional[CheckoutAddress] = None


class CheckoutRequest(BaseModel):
    """Request to check out a cart"""
    cart_id: str
    email: Optional[str] = None
    address: Optional[CheckoutAddress] = None


class OrderSummaryItem(BaseModel):
    """One line of the order summary stored with the order"""
    title: Optional[str] = None
    quantity: int
    price: Optional[str] = None
    container: Optional[str] = None
    toppings: Optional[str] = None
    total: str  # price * quantity, three decimals


class CheckoutResponse(BaseModel):
    """Response from checkout"""
    success: bool
    order_id: Optional[str] = None
    total_amount: Optional[float] = None
    order_summary: list[OrderSummaryItem] = []
    message: Optional[str] = None
    error: Optional[str] = None


class Order(BaseModel):
    """Order row as stored in the hosted database"""
    id: str
    user_id: str
    total_amount: float
    items: list[OrderSummaryItem] = []
    status: OrderStatus = OrderStatus.PENDING
    delivery_address: Optional[CheckoutAddress] = None
    special_instructions: str = ""
    created_at: Optional[str] = None
