"""Product API routes for the storefront"""

from typing import Optional
from fastapi import APIRouter, HTTPException, Query, Depends

from ..models.product import Product, ProductSearchResponse
from ..database.products import ProductCatalog, get_product_catalog

router = APIRouter(prefix="/api/products", tags=["Products"])


@router.get("", response_model=ProductSearchResponse)
async def search_products(
    query: Optional[str] = Query(None, description="Search query"),
    category: Optional[str] = Query(None, description="Filter by category tag"),
    limit: int = Query(20, ge=1, le=100, description="Max results"),
    offset: int = Query(0, ge=0, description="Offset for pagination"),
    catalog: ProductCatalog = Depends(get_product_catalog),
):
    """Search products in the catalog"""
    products, total = catalog.search_products(
        query=query,
        category=category,
        limit=limit,
        offset=offset,
    )

    return ProductSearchResponse(
        products=products,
        total=total,
        limit=limit,
        offset=offset,
    )


@router.get("/categories", response_model=list[str])
async def list_categories(catalog: ProductCatalog = Depends(get_product_catalog)):
    """List product categories, taken from product tags"""
    return catalog.categories()


@router.get("/{product_id}", response_model=Product)
async def get_product(
    product_id: str,
    catalog: ProductCatalog = Depends(get_product_catalog),
):
    """Get a product by ID or handle"""
    product = catalog.get_product(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product
