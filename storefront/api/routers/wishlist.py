# storefront/api/routers/wishlist.py
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from storefront.api.dependencies import get_current_user_id, get_wishlist_service
from storefront.api.responses import envelope
from storefront.domain.schemas import WishlistItemIn
from storefront.services.wishlist_service import WishlistService

router = APIRouter(prefix="/api/mylist", tags=["wishlist"])


@router.post("/add")
def add_to_wishlist(
    payload: WishlistItemIn,
    user_id: UUID = Depends(get_current_user_id),
    svc: WishlistService = Depends(get_wishlist_service),
):
    item = svc.add(user_id, payload.product_id)
    return envelope("Product added to wishlist successfully", data=item, status_code=201)


@router.get("")
def get_wishlist(
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    sort_by: str = Query("createdAt", alias="sortBy"),
    order: str = Query("desc"),
    brand: Optional[str] = Query(None),
    user_id: UUID = Depends(get_current_user_id),
    svc: WishlistService = Depends(get_wishlist_service),
):
    data = svc.list_items(user_id, page=page, limit=limit, sort_by=sort_by, order=order, brand=brand)
    return envelope("Wishlist retrieved successfully", data=data)


@router.delete("/remove/{product_id}")
def remove_from_wishlist(
    product_id: str,
    user_id: UUID = Depends(get_current_user_id),
    svc: WishlistService = Depends(get_wishlist_service),
):
    return envelope("Product removed from wishlist successfully", data=svc.remove(user_id, product_id))


@router.delete("/clear")
def clear_wishlist(
    user_id: UUID = Depends(get_current_user_id),
    svc: WishlistService = Depends(get_wishlist_service),
):
    return envelope("Wishlist cleared successfully", data=svc.clear(user_id))


@router.get("/check/{product_id}")
def check_wishlist(
    product_id: str,
    user_id: UUID = Depends(get_current_user_id),
    svc: WishlistService = Depends(get_wishlist_service),
):
    return envelope("Wishlist status retrieved successfully", data=svc.check(user_id, product_id))


@router.get("/count")
def wishlist_count(
    user_id: UUID = Depends(get_current_user_id),
    svc: WishlistService = Depends(get_wishlist_service),
):
    return envelope("Wishlist count retrieved successfully", data=svc.count(user_id))


@router.get("/stats")
def wishlist_stats(
    user_id: UUID = Depends(get_current_user_id),
    svc: WishlistService = Depends(get_wishlist_service),
):
    return envelope("Wishlist stats retrieved successfully", data=svc.stats(user_id))


@router.post("/sync")
def sync_wishlist(
    user_id: UUID = Depends(get_current_user_id),
    svc: WishlistService = Depends(get_wishlist_service),
):
    return envelope("Wishlist sync completed", data=svc.sync(user_id))
