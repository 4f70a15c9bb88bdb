"""Product models for the storefront"""

from pydantic import BaseModel


class ProductImage(BaseModel):
    src: str


class ProductVariant(BaseModel):
    """Purchasable variant of a product"""
    id: str
    price: str
    title: str = "Regular"


class Product(BaseModel):
    """Product in the catalog"""
    id: str
    title: str
    description: str = ""
    handle: str
    images: list[ProductImage] = []
    variants: list[ProductVariant] = []
    tags: str = ""  # comma separated, doubles as categories

    @property
    def tag_list(self) -> list[str]:
        return [tag.strip() for tag in self.tags.split(",") if tag.strip()]


class ProductSearchResponse(BaseModel):
    """Response from product search"""
    products: list[Product]
    total: int
    limit: int
    offset: int
