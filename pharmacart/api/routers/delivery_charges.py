# pharmacart/api/routers/delivery_charges.py
from decimal import Decimal
from typing import List

from fastapi import APIRouter, Depends, Query

from pharmacart.api.deps import get_delivery_service, get_rate_provider, require_admin
from pharmacart.domain.schemas import DeliveryChargeIn, DeliveryChargeOut, DeliveryQuoteOut
from pharmacart.services.delivery import DeliverySlab
from pharmacart.services.delivery_charge_service import DeliveryChargeService
from pharmacart.services.exchange_rates import ExchangeRateProvider

router = APIRouter(prefix="/delivery-charges", tags=["delivery-charges"])


@router.get("", response_model=List[DeliveryChargeOut])
def list_delivery_charges(svc: DeliveryChargeService = Depends(get_delivery_service)):
    return svc.list_all()


@router.get("/{country}", response_model=DeliveryChargeOut)
def get_delivery_charge(country: str, svc: DeliveryChargeService = Depends(get_delivery_service)):
    return svc.get(country)


@router.get("/{country}/quote", response_model=DeliveryQuoteOut)
def quote_delivery_charge(
    country: str,
    amount: Decimal = Query(..., ge=0),
    currency: str = Query("INR", min_length=3, max_length=3),
    svc: DeliveryChargeService = Depends(get_delivery_service),
    rates: ExchangeRateProvider = Depends(get_rate_provider),
):
    return svc.quote(amount, country, rates.resolve(currency))


@router.put("/{country}", response_model=DeliveryChargeOut, dependencies=[Depends(require_admin)])
def replace_delivery_charge(
    country: str,
    payload: DeliveryChargeIn,
    svc: DeliveryChargeService = Depends(get_delivery_service),
):
    slabs = [DeliverySlab(s.min_amount, s.max_amount, s.charge) for s in payload.slabs]
    return svc.upsert(country, slabs)


@router.delete("/{country}", dependencies=[Depends(require_admin)])
def delete_delivery_charge(country: str, svc: DeliveryChargeService = Depends(get_delivery_service)):
    svc.delete(country)
    return {"msg": "Delivery charge deleted"}
