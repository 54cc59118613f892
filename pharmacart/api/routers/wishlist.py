# pharmacart/api/routers/wishlist.py
from fastapi import APIRouter, Depends, Query

from pharmacart.api.deps import get_wishlist_service
from pharmacart.domain.schemas import WishlistItemIn, WishlistOut
from pharmacart.services.wishlist_service import WishlistService

router = APIRouter(prefix="/wishlist", tags=["wishlist"])


@router.post("", response_model=WishlistOut)
def add_to_wishlist(
    payload: WishlistItemIn,
    user_id: int = Query(..., gt=0),
    svc: WishlistService = Depends(get_wishlist_service),
):
    return svc.add(user_id, payload.product_id, payload.variant_id)


@router.delete("", response_model=WishlistOut)
def remove_from_wishlist(
    payload: WishlistItemIn,
    user_id: int = Query(..., gt=0),
    svc: WishlistService = Depends(get_wishlist_service),
):
    return svc.remove(user_id, payload.product_id, payload.variant_id)


@router.get("", response_model=WishlistOut)
def get_wishlist(
    user_id: int = Query(..., gt=0),
    svc: WishlistService = Depends(get_wishlist_service),
):
    return svc.get(user_id)
