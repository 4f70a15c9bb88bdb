# Service modules

from .supabase_client import SupabaseClient, AuthUser, BackendError, supabase_client
from .checkout import CheckoutService, CheckoutError, checkout_service

__all__ = [
    "SupabaseClient",
    "AuthUser",
    "BackendError",
    "supabase_client",
    "CheckoutService",
    "CheckoutError",
    "checkout_service",
]
