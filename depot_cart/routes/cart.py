"""Cart API routes"""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Depends
from pydantic import BaseModel
from pydantic.alias_generators import to_camel

from ..core.errors import CatalogLookupError
from ..database.carts import CartStore
from ..engine import CartEngine
from ..models.cart import AddToCartRequest, CartResponse, CheckoutSummary
from ..models.product import Product
from ..services.checkout import checkout_summary
from .deps import get_engine

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/cart", tags=["Cart"])


class ValidateCartRequest(BaseModel):
    """Request to reconcile the cart against a depot"""
    depot_id: Optional[int] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True


def _cart_response(store: CartStore, message: Optional[str] = None) -> CartResponse:
    return CartResponse(
        items=store.items,
        subtotal=store.subtotal,
        available_subtotal=store.available_subtotal,
        total_quantity=store.total_quantity,
        message=message,
    )


@router.get("", response_model=CartResponse)
async def get_cart(engine: CartEngine = Depends(get_engine)):
    """Get the cart with totals"""
    return _cart_response(engine.store)


@router.post("/items", response_model=CartResponse)
async def add_to_cart(
    request: AddToCartRequest,
    depot_id: Optional[int] = None,
    engine: CartEngine = Depends(get_engine),
):
    """Add a variant of the current depot to the cart"""
    depot_id = depot_id if depot_id is not None else engine.delivery.depot_id
    if depot_id is None:
        raise HTTPException(status_code=400, detail="Select a delivery location first")

    try:
        variants = await engine.catalog.get_variants_for_product(request.product_id, depot_id)
    except CatalogLookupError as e:
        logger.error(f"Variant lookup failed: {e}")
        raise HTTPException(status_code=503, detail="Catalog unavailable, please retry")

    variant = next((v for v in variants if v.id == request.variant_id), None)
    if not variant:
        raise HTTPException(status_code=404, detail="Variant not found")

    if not variant.is_enabled:
        raise HTTPException(status_code=400, detail="Variant is not available")

    product = variant.product or Product(id=request.product_id, name="Product")
    item = engine.store.add_variant(product, variant, request.quantity)
    return _cart_response(
        engine.store,
        message=f"Added {request.quantity}x {item.name} ({item.variant_name}) to cart",
    )


@router.post("/items/{variant_id}/increment", response_model=CartResponse)
async def increment_item(variant_id: int, engine: CartEngine = Depends(get_engine)):
    """Increase item quantity by one"""
    if engine.store.increment(variant_id) is None:
        raise HTTPException(status_code=404, detail="Item not in cart")
    return _cart_response(engine.store)


@router.post("/items/{variant_id}/decrement", response_model=CartResponse)
async def decrement_item(variant_id: int, engine: CartEngine = Depends(get_engine)):
    """Decrease item quantity by one, never below one"""
    if engine.store.decrement(variant_id) is None:
        raise HTTPException(status_code=404, detail="Item not in cart")
    return _cart_response(engine.store)


@router.delete("/items/{variant_id}", response_model=CartResponse)
async def remove_from_cart(variant_id: int, engine: CartEngine = Depends(get_engine)):
    """Remove an item from the cart"""
    engine.store.remove(variant_id)
    return _cart_response(engine.store, message="Item removed")


@router.delete("", response_model=CartResponse)
async def clear_cart(engine: CartEngine = Depends(get_engine)):
    """Clear all items from cart"""
    engine.store.clear()
    return _cart_response(engine.store, message="Cart cleared")


@router.post("/validate", response_model=CartResponse)
async def validate_cart(
    request: Optional[ValidateCartRequest] = None,
    engine: CartEngine = Depends(get_engine),
):
    """Reconcile the cart against a depot (default: the current one)"""
    depot_id = request.depot_id if request and request.depot_id is not None else None
    if depot_id is None:
        depot_id = engine.delivery.depot_id
    if depot_id is None:
        raise HTTPException(status_code=400, detail="Select a delivery location first")

    await engine.reconciler.validate_cart(depot_id)
    summary = engine.reconciler.validation_summary()
    return _cart_response(engine.store, message=summary.message)


@router.get("/summary", response_model=CheckoutSummary)
async def get_checkout_summary(engine: CartEngine = Depends(get_engine)):
    """Items checkout may consume"""
    return checkout_summary(engine.store)
