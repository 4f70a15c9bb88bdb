"""Product catalog for the storefront"""

import json
import logging
from typing import Optional

from pydantic import ValidationError

from ..core.config import settings
from ..models.cart import CartItem
from ..models.product import Product, ProductImage, ProductVariant

logger = logging.getLogger(__name__)


def _product(
    id: str,
    title: str,
    description: str,
    price: str,
    tags: str,
    image: str,
    variant_title: str = "Regular",
) -> Product:
    return Product(
        id=id,
        title=title,
        description=description,
        handle=id.removeprefix("prod-"),
        images=[ProductImage(src=image)],
        variants=[ProductVariant(id=f"{id}-v1", price=price, title=variant_title)],
        tags=tags,
    )


# Store catalog
PRODUCTS: list[Product] = [
    _product(
        "prod-pistachio",
        "Sicilian Pistachio",
        "Slow-churned gelato made with roasted Bronte pistachios.",
        "6.50",
        "Gelato, Classics",
        "/images/products/pistachio.jpg",
        "Medium Cup",
    ),
    _product(
        "prod-stracciatella",
        "Stracciatella",
        "Fior di latte base with ribbons of dark chocolate.",
        "5.90",
        "Gelato, Classics",
        "/images/products/stracciatella.jpg",
        "Medium Cup",
    ),
    _product(
        "prod-hazelnut",
        "Piedmont Hazelnut",
        "Toasted IGP hazelnuts blended into a creamy gelato.",
        "6.20",
        "Gelato",
        "/images/products/hazelnut.jpg",
        "Medium Cup",
    ),
    _product(
        "prod-mango-sorbet",
        "Alphonso Mango Sorbet",
        "Dairy-free sorbet made with ripe Alphonso mangoes.",
        "5.50",
        "Sorbet, Vegan",
        "/images/products/mango-sorbet.jpg",
        "Medium Cup",
    ),
    _product(
        "prod-lemon-sorbet",
        "Amalfi Lemon Sorbet",
        "Bright and zesty sorbet from Amalfi coast lemons.",
        "5.50",
        "Sorbet, Vegan",
        "/images/products/lemon-sorbet.jpg",
        "Medium Cup",
    ),
    _product(
        "prod-family-tub",
        "Family Tub",
        "One litre of any three flavours, packed to take home.",
        "18.00",
        "Take Home",
        "/images/products/family-tub.jpg",
        "1 Litre",
    ),
    _product(
        "prod-affogato",
        "Affogato Kit",
        "Vanilla gelato with a double shot of our house espresso.",
        "7.40",
        "Desserts",
        "/images/products/affogato.jpg",
    ),
    _product(
        "prod-gift-25",
        "Gelatico Gift Card",
        "A treat for someone sweet, redeemable in store and online.",
        "25.00",
        "Gift Cards",
        "/images/products/gift-card.jpg",
        "$25",
    ),
    _product(
        "prod-gift-50",
        "Gelatico Gift Card",
        "A treat for someone sweet, redeemable in store and online.",
        "50.00",
        "Gift Cards",
        "/images/products/gift-card.jpg",
        "$50",
    ),
]

# Shown when the store catalog cannot be loaded
DEMO_PRODUCTS: list[Product] = [
    _product(
        "demo-vanilla",
        "Madagascar Vanilla",
        "Classic vanilla gelato with real bean specks.",
        "5.00",
        "Gelato",
        "/images/products/vanilla.jpg",
    ),
    _product(
        "demo-chocolate",
        "Dark Chocolate",
        "Rich 70% cacao gelato.",
        "5.00",
        "Gelato",
        "/images/products/chocolate.jpg",
    ),
    _product(
        "demo-raspberry",
        "Raspberry Sorbet",
        "Tart and fruity, dairy free.",
        "4.50",
        "Sorbet",
        "/images/products/raspberry.jpg",
    ),
]


def load_catalog(path: Optional[str]) -> list[Product]:
    """
    Load products from a JSON file, or the built-in catalog when no path is set.

    Raises:
        ValueError: if the file cannot be read or parsed
    """
    if not path:
        return list(PRODUCTS)

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise ValueError(f"Cannot read catalog {path}: {e}") from e

    if not isinstance(data, list):
        raise ValueError(f"Catalog {path} must be a list of products")

    try:
        return [Product.model_validate(entry) for entry in data]
    except ValidationError as e:
        raise ValueError(f"Invalid product in catalog {path}: {e}") from e


class ProductCatalog:
    """In-memory product catalog"""

    def __init__(self, products: list[Product]):
        self.products = list(products)

    @classmethod
    def from_path(cls, path: Optional[str] = None) -> "ProductCatalog":
        """Load the store catalog, falling back to demo products on failure"""
        try:
            products = load_catalog(path)
            if not products:
                raise ValueError("No products found")
            logger.info(f"Loaded {len(products)} products")
        except ValueError as e:
            logger.error(f"Error loading products: {e}")
            products = list(DEMO_PRODUCTS)
            logger.warning(f"Loaded {len(products)} demo products instead")
        return cls(products)

    def get_product(self, product_id: str) -> Optional[Product]:
        """Get a product by ID or handle"""
        return next(
            (p for p in self.products if p.id == product_id or p.handle == product_id),
            None,
        )

    def categories(self) -> list[str]:
        """Distinct product tags in catalog order"""
        seen: dict[str, None] = {}
        for product in self.products:
            for tag in product.tag_list:
                seen.setdefault(tag, None)
        return list(seen)

    def search_products(
        self,
        query: Optional[str] = None,
        category: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[Product], int]:
        """
        Search products with filters.

        Returns:
            Tuple of (matching products, total count)
        """
        results = list(self.products)

        if query:
            query_lower = query.lower()
            results = [
                p for p in results
                if query_lower in p.title.lower() or query_lower in p.description.lower()
            ]

        if category:
            results = [p for p in results if category in p.tag_list]

        total = len(results)
        results = results[offset : offset + limit]

        return results, total


def to_cart_item(product: Product) -> CartItem:
    """Cart line for one unit of a product's first variant"""
    variant = product.variants[0] if product.variants else None
    return CartItem(
        variant_id=variant.id if variant else product.id,
        quantity=1,
        title=product.title,
        price=variant.price if variant else "0",
        image=product.images[0].src if product.images else None,
        variant_title=variant.title if variant else "Regular",
    )


# Singleton instance
product_catalog = ProductCatalog.from_path(settings.catalog_path)


def get_product_catalog() -> ProductCatalog:
    return product_catalog
