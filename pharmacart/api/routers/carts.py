#pharmacart/api/routers/carts.py
from fastapi import APIRouter, Depends, Query

from pharmacart.api.deps import get_cart_service, pricing_context
from pharmacart.domain.schemas import CartItemIn, CartOut, QuantityIn, WishlistImportIn
from pharmacart.services.cart_service import CartService
from pharmacart.services.pricing import PricingContext

router = APIRouter(prefix="/cart", tags=["cart"])


@router.post("", response_model=CartOut)
def add_item(
    payload: CartItemIn,
    user_id: int = Query(..., gt=0),
    svc: CartService = Depends(get_cart_service),
):
    context = PricingContext(payload.country, payload.currency)
    return svc.add_or_update_item(
        user_id=user_id,
        product_id=payload.product_id,
        variant_id=payload.variant_id,
        quantity=payload.quantity,
        context=context,
    ).to_dict()


@router.get("", response_model=CartOut)
def get_cart(
    user_id: int = Query(..., gt=0),
    context: PricingContext = Depends(pricing_context),
    svc: CartService = Depends(get_cart_service),
):
    return svc.get_cart(user_id, context).to_dict()


@router.post("/from-wishlist", response_model=CartOut)
def add_from_wishlist(
    payload: WishlistImportIn,
    user_id: int = Query(..., gt=0),
    svc: CartService = Depends(get_cart_service),
):
    context = PricingContext(payload.country, payload.currency)
    return svc.import_from_wishlist(
        user_id=user_id,
        product_id=payload.product_id,
        variant_id=payload.variant_id,
        quantity=payload.quantity,
        context=context,
    ).to_dict()


@router.patch("/{line_item_id}", response_model=CartOut)
def update_quantity(
    line_item_id: int,
    payload: QuantityIn,
    user_id: int = Query(..., gt=0),
    svc: CartService = Depends(get_cart_service),
):
    context = PricingContext(payload.country, payload.currency)
    return svc.set_quantity(user_id, line_item_id, payload.quantity, context).to_dict()


@router.delete("/{line_item_id}", response_model=CartOut)
def remove_item(
    line_item_id: int,
    user_id: int = Query(..., gt=0),
    context: PricingContext = Depends(pricing_context),
    svc: CartService = Depends(get_cart_service),
):
    return svc.remove_item(user_id, line_item_id, context).to_dict()


@router.delete("")
def clear_cart(
    user_id: int = Query(..., gt=0),
    svc: CartService = Depends(get_cart_service),
):
    svc.clear(user_id)
    return {"msg": "Cart deleted"}
