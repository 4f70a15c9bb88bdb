"""Cart API routes for the storefront"""

import asyncio
import logging

import anyio
from fastapi import APIRouter, HTTPException, Depends, WebSocket, WebSocketDisconnect
from fastapi.concurrency import run_in_threadpool

from ..core.events import CartUpdatedEvent
from ..models.cart import CartItem, UpdateCartItemRequest, CartResponse
from ..database.carts import CartError, CartStore, get_cart_store, new_cart_id
from ..database.products import ProductCatalog, get_product_catalog, to_cart_item

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/cart", tags=["Cart"])


@router.post("", response_model=CartResponse)
def create_cart(store: CartStore = Depends(get_cart_store)):
    """Issue a new cart ID; the cart starts empty"""
    cart_id = new_cart_id()
    return CartResponse(cart=store.snapshot(cart_id, []), message="Cart created")


@router.get("/{cart_id}", response_model=CartResponse)
def get_cart(cart_id: str, store: CartStore = Depends(get_cart_store)):
    """Get cart by ID; unknown IDs are empty carts"""
    return CartResponse(cart=store.snapshot(cart_id))


@router.post("/{cart_id}/items", response_model=CartResponse)
def add_to_cart(
    cart_id: str,
    item: CartItem,
    store: CartStore = Depends(get_cart_store),
):
    """Add an item, with any customizations, to the cart"""
    try:
        items, message = store.add_item(cart_id, item)
    except CartError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return CartResponse(cart=store.snapshot(cart_id, items), message=message)


@router.post("/{cart_id}/products/{product_id}", response_model=CartResponse)
def add_product_to_cart(
    cart_id: str,
    product_id: str,
    store: CartStore = Depends(get_cart_store),
    catalog: ProductCatalog = Depends(get_product_catalog),
):
    """Add one unit of a catalog product to the cart"""
    product = catalog.get_product(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")

    try:
        items, message = store.add_item(cart_id, to_cart_item(product))
    except CartError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return CartResponse(cart=store.snapshot(cart_id, items), message=message)


@router.put("/{cart_id}/items/{variant_id}", response_model=CartResponse)
def update_cart_item(
    cart_id: str,
    variant_id: str,
    request: UpdateCartItemRequest,
    store: CartStore = Depends(get_cart_store),
):
    """Set item quantity; zero or less removes the item"""
    items, message = store.update_quantity(cart_id, variant_id, request.quantity)
    return CartResponse(cart=store.snapshot(cart_id, items), message=message or "Cart updated")


@router.delete("/{cart_id}/items/{variant_id}", response_model=CartResponse)
def remove_from_cart(
    cart_id: str,
    variant_id: str,
    store: CartStore = Depends(get_cart_store),
):
    """Remove an item from the cart"""
    items, message = store.remove_item(cart_id, variant_id)
    return CartResponse(cart=store.snapshot(cart_id, items), message=message)


@router.delete("/{cart_id}", response_model=CartResponse)
def clear_cart(cart_id: str, store: CartStore = Depends(get_cart_store)):
    """Clear all items from cart"""
    items, message = store.clear_cart(cart_id)
    return CartResponse(cart=store.snapshot(cart_id, items), message=message)


@router.websocket("/{cart_id}/ws")
async def cart_updates(
    websocket: WebSocket,
    cart_id: str,
    store: CartStore = Depends(get_cart_store),
):
    """
    Live cart feed.

    Sends the current cart on connect, then a new snapshot after every write
    to the cart from any client.
    """
    await websocket.accept()

    loop = asyncio.get_running_loop()
    queue: asyncio.Queue[CartUpdatedEvent] = asyncio.Queue()

    # Writers publish from the threadpool
    def on_update(event: CartUpdatedEvent) -> None:
        loop.call_soon_threadsafe(queue.put_nowait, event)

    unsubscribe = store.events.subscribe(cart_id, on_update)
    logger.info(f"Cart feed opened for {cart_id}")

    async def send_updates(cancel_scope: anyio.CancelScope) -> None:
        try:
            cart = await run_in_threadpool(store.snapshot, cart_id)
            await websocket.send_json(cart.model_dump(mode="json"))
            while True:
                event = await queue.get()
                cart = store.snapshot(cart_id, event.items)
                await websocket.send_json(cart.model_dump(mode="json"))
        except WebSocketDisconnect:
            cancel_scope.cancel()

    async def wait_for_disconnect(cancel_scope: anyio.CancelScope) -> None:
        try:
            while True:
                await websocket.receive_text()
        except WebSocketDisconnect:
            pass
        cancel_scope.cancel()

    try:
        async with anyio.create_task_group() as tg:
            tg.start_soon(send_updates, tg.cancel_scope)
            tg.start_soon(wait_for_disconnect, tg.cancel_scope)
    finally:
        unsubscribe()
        logger.info(f"Cart feed closed for {cart_id}")
