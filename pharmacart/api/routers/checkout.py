# pharmacart/api/routers/checkout.py
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from pharmacart.api.deps import get_checkout_service, require_admin
from pharmacart.domain.schemas import (
    CreateOrderOut,
    OrderOut,
    OrderSummaryOut,
    OrderUpdateIn,
    PaymentCallbackIn,
    PaymentCallbackOut,
    ShippingInfo,
)
from pharmacart.services.order_service import CheckoutService, order_as_dict
from pharmacart.services.pricing import PricingContext, fmt
from pharmacart.utils.uploads import UploadedFile

router = APIRouter(prefix="/checkout", tags=["checkout"])


def shipping_form(
    name: str = Form(...),
    company_name: Optional[str] = Form(None),
    street_address: str = Form(...),
    city: str = Form(...),
    state: str = Form(...),
    pincode: str = Form(...),
    mobile: str = Form(...),
    email: str = Form(...),
    age: int = Form(...),
    blood_pressure: Optional[int] = Form(None),
    weight: Optional[str] = Form(None),
    weight_unit: Optional[str] = Form(None),
    order_notes: Optional[str] = Form(None),
) -> ShippingInfo:
    try:
        return ShippingInfo(
            name=name,
            company_name=company_name,
            street_address=street_address,
            city=city,
            state=state,
            pincode=pincode,
            mobile=mobile,
            email=email,
            age=age,
            blood_pressure=blood_pressure,
            weight=weight,
            weight_unit=weight_unit.upper() if weight_unit else None,
            order_notes=order_notes,
        )
    except ValidationError as e:
        raise RequestValidationError(e.errors()) from e


def _read_upload(upload: Optional[UploadFile]) -> Optional[UploadedFile]:
    if upload is None or not upload.filename:
        return None
    content = upload.file.read()
    if not content:
        return None
    return UploadedFile(
        filename=upload.filename,
        content_type=upload.content_type or "",
        content=content,
    )


@router.post("/create-order", response_model=CreateOrderOut, response_model_by_alias=True)
def create_order(
    user_id: int = Query(..., gt=0),
    country: str = Form("INDIA"),
    currency: str = Form("INR"),
    shipping: ShippingInfo = Depends(shipping_form),
    prescription_image: Optional[UploadFile] = File(None, alias="prescriptionImage"),
    passport_image: Optional[UploadFile] = File(None, alias="passportImage"),
    svc: CheckoutService = Depends(get_checkout_service),
):
    return svc.create_order(
        user_id=user_id,
        shipping=shipping,
        context=PricingContext(country, currency),
        prescription=_read_upload(prescription_image),
        passport=_read_upload(passport_image),
    )


@router.post("/payment-callback", response_model=PaymentCallbackOut)
def payment_callback(
    payload: PaymentCallbackIn,
    svc: CheckoutService = Depends(get_checkout_service),
):
    return svc.confirm_payment(payload.order_id, payload.payment_id, payload.signature)


@router.patch(
    "/update-order/{order_id}",
    response_model=OrderOut,
    dependencies=[Depends(require_admin)],
)
def update_order(
    order_id: int,
    payload: OrderUpdateIn,
    svc: CheckoutService = Depends(get_checkout_service),
):
    return order_as_dict(svc.update_order(order_id, payload.status, payload.tracking_link))


@router.get("/orders/{order_id}", response_model=OrderOut)
def get_order(
    order_id: int,
    user_id: int = Query(..., gt=0),
    svc: CheckoutService = Depends(get_checkout_service),
):
    return order_as_dict(svc.get_order(order_id, user_id))


@router.get("/payment-history", response_model=List[OrderSummaryOut])
def payment_history(
    user_id: int = Query(..., gt=0),
    status: Optional[Literal["success", "unsuccess"]] = Query(None),
    svc: CheckoutService = Depends(get_checkout_service),
):
    return [
        {
            "id": order.id,
            "currency": order.currency,
            "total_price": fmt(order.total_price),
            "delivery_charge": fmt(order.delivery_charge),
            "total_cart_price": fmt(order.total_cart_price),
            "status": order.status,
            "created_at": order.created_at,
        }
        for order in svc.payment_history(user_id, status)
    ]
