from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from storefront.core.events import CartEventBus
from storefront.database.carts import CartStore, get_cart_store
from storefront.database.products import ProductCatalog, PRODUCTS, get_product_catalog
from storefront.database.storage import MemoryStorage
from storefront.main import app
from storefront.models.cart import CartItem
from storefront.services.checkout import CheckoutService, get_checkout_service
from storefront.services.supabase_client import AuthUser, SupabaseClient, get_supabase_client

GOOD_TOKEN = "good-token"
TEST_USER = AuthUser(id="user-123", email="shopper@example.com")


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def events():
    return CartEventBus()


@pytest.fixture
def store(storage, events):
    return CartStore(storage=storage, events=events, storage_key="test-cart")


@pytest.fixture
def catalog():
    return ProductCatalog(PRODUCTS)


@pytest.fixture
def backend():
    """Hosted database double; only GOOD_TOKEN resolves to a user"""
    client = AsyncMock(spec=SupabaseClient)

    async def get_user(token):
        return TEST_USER if token == GOOD_TOKEN else None

    client.get_user.side_effect = get_user
    client.select.return_value = []
    client.select_one.return_value = None
    return client


@pytest.fixture
def checkout_service(backend):
    return CheckoutService(client=backend, processing_delay=0)


@pytest.fixture
def client(store, catalog, backend, checkout_service):
    app.dependency_overrides[get_cart_store] = lambda: store
    app.dependency_overrides[get_product_catalog] = lambda: catalog
    app.dependency_overrides[get_supabase_client] = lambda: backend
    app.dependency_overrides[get_checkout_service] = lambda: checkout_service
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {GOOD_TOKEN}"}


@pytest.fixture
def scoop():
    return CartItem(
        variant_id="prod-pistachio-v1",
        quantity=2,
        title="Sicilian Pistachio",
        price="6.50",
        variant_title="Medium Cup",
    )
