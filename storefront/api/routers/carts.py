# storefront/api/routers/carts.py
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from storefront.api.dependencies import get_cart_service, get_current_user_id
from storefront.api.responses import envelope
from storefront.domain.schemas import BatchDeleteIn, CartItemIn, QuantityIn
from storefront.services.cart_service import CartService

router = APIRouter(prefix="/api/cart", tags=["cart"])


@router.post("/create")
def add_to_cart(
    payload: CartItemIn,
    user_id: UUID = Depends(get_current_user_id),
    svc: CartService = Depends(get_cart_service),
):
    item, created = svc.add_item(user_id, payload.product_id, payload.quantity, payload.variant)
    if created:
        return envelope("Item added to cart successfully", data=item, status_code=201)
    return envelope("Cart item quantity updated successfully", data=item)


@router.get("")
def get_cart(
    status: Optional[str] = Query("active"),
    user_id: UUID = Depends(get_current_user_id),
    svc: CartService = Depends(get_cart_service),
):
    return envelope("Cart items retrieved successfully", data=svc.get_cart(user_id, status))


def _set_quantity(svc: CartService, user_id: UUID, item_id: str, payload: QuantityIn):
    result = svc.set_quantity(user_id, item_id, payload.quantity)
    if result["changes"] is None:
        return envelope("Quantity is already set to this value", data=result["cartItem"])
    return envelope("Cart quantity updated successfully", data=result)


@router.put("/update-quantity/{item_id}")
def update_quantity(
    item_id: str,
    payload: QuantityIn,
    user_id: UUID = Depends(get_current_user_id),
    svc: CartService = Depends(get_cart_service),
):
    return _set_quantity(svc, user_id, item_id, payload)


@router.delete("/clear")
def clear_cart(
    status: Optional[str] = Query(None),
    user_id: UUID = Depends(get_current_user_id),
    svc: CartService = Depends(get_cart_service),
):
    result = svc.clear(user_id, status)
    label = status.replace("_", " ").upper() if status else "All"
    return envelope(f"{label} cart items cleared successfully", data=result)


@router.delete("/batch")
def delete_batch(
    payload: Optional[BatchDeleteIn] = None,
    user_id: UUID = Depends(get_current_user_id),
    svc: CartService = Depends(get_cart_service),
):
    result = svc.delete_batch(user_id, payload.cart_item_ids if payload else None)
    return envelope(f"{result['deletedCount']} cart item(s) deleted successfully", data=result)


@router.post("/reconcile")
def reconcile_cart_set(
    user_id: UUID = Depends(get_current_user_id),
    svc: CartService = Depends(get_cart_service),
):
    return envelope("Shopping cart set reconciled", data=svc.reconcile_mirror(user_id))


# ===== /{item_id} - po trasach statycznych =====
@router.delete("/{item_id}")
def delete_item(
    item_id: str,
    user_id: UUID = Depends(get_current_user_id),
    svc: CartService = Depends(get_cart_service),
):
    return envelope("Cart item deleted successfully", data=svc.delete_item(user_id, item_id))


@router.patch("/{item_id}/quantity")
def patch_quantity(
    item_id: str,
    payload: QuantityIn,
    user_id: UUID = Depends(get_current_user_id),
    svc: CartService = Depends(get_cart_service),
):
    return _set_quantity(svc, user_id, item_id, payload)


@router.patch("/{item_id}/increment")
def increment(
    item_id: str,
    user_id: UUID = Depends(get_current_user_id),
    svc: CartService = Depends(get_cart_service),
):
    return envelope("Quantity incremented successfully", data=svc.increment(user_id, item_id))


@router.patch("/{item_id}/decrement")
def decrement(
    item_id: str,
    user_id: UUID = Depends(get_current_user_id),
    svc: CartService = Depends(get_cart_service),
):
    return envelope("Quantity decremented successfully", data=svc.decrement(user_id, item_id))


@router.patch("/{item_id}/save-for-later")
def save_for_later(
    item_id: str,
    user_id: UUID = Depends(get_current_user_id),
    svc: CartService = Depends(get_cart_service),
):
    return envelope("Item saved for later successfully", data=svc.save_for_later(user_id, item_id))


@router.patch("/{item_id}/move-to-cart")
def move_to_cart(
    item_id: str,
    user_id: UUID = Depends(get_current_user_id),
    svc: CartService = Depends(get_cart_service),
):
    return envelope("Item moved to cart successfully", data=svc.move_to_cart(user_id, item_id))
