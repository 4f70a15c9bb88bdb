# Database modules

from .storage import KeyValueStore, MemoryStorage, FileStorage, StorageError, build_storage
from .products import product_catalog, ProductCatalog, to_cart_item
from .carts import cart_store, CartStore, CartError

__all__ = [
    "KeyValueStore",
    "MemoryStorage",
    "FileStorage",
    "StorageError",
    "build_storage",
    "product_catalog",
    "ProductCatalog",
    "to_cart_item",
    "cart_store",
    "CartStore",
    "CartError",
]
