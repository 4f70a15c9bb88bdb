"""
Gelatico Storefront Application

Storefront API for the Gelatico ice-cream shop: product browsing, a shared
shopping cart, checkout and customer profiles.
"""

import os
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.templating import Jinja2Templates
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

# Load environment variables
load_dotenv(os.path.join(os.path.dirname(__file__), "..", "config", ".env"))

from .core.config import settings
from .database.products import product_catalog
from .routes import products_router, cart_router, checkout_router, profile_router
from .services.supabase_client import supabase_client

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info(f"{settings.app_name} starting up...")
    logger.info(f"Catalog: {len(product_catalog.products)} products")
    logger.info(f"Hosted database: {'configured' if settings.backend_configured else 'disabled'}")

    yield

    logger.info(f"{settings.app_name} shutting down...")
    if supabase_client:
        await supabase_client.close()


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Storefront API: catalog, cart, checkout and profile",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

templates = Jinja2Templates(directory=os.path.join(os.path.dirname(__file__), "templates"))

# Include API routers
app.include_router(products_router)
app.include_router(cart_router)
app.include_router(checkout_router)
app.include_router(profile_router)


@app.get("/")
async def home(request: Request):
    """Storefront home page"""
    return templates.TemplateResponse(
        request,
        "index.html",
        {"title": settings.app_name, "categories": product_catalog.categories()},
    )


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": "storefront",
        "backend_configured": settings.backend_configured,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "storefront.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
