# pharmacart/api/routers/exchange_rates.py
from typing import List

from fastapi import APIRouter, Depends

from pharmacart.api.deps import get_rate_feed, get_rate_provider, require_admin
from pharmacart.domain.schemas import ExchangeRateIn, ExchangeRateOut
from pharmacart.services.exchange_rates import ExchangeRateProvider, RateFeedClient

router = APIRouter(prefix="/exchange-rates", tags=["exchange-rates"])


@router.get("", response_model=List[ExchangeRateOut])
def list_rates(provider: ExchangeRateProvider = Depends(get_rate_provider)):
    return provider.list_rates()


@router.get("/{currency}", response_model=ExchangeRateOut)
def get_rate(currency: str, provider: ExchangeRateProvider = Depends(get_rate_provider)):
    return provider.get_rate(currency)


@router.post("", response_model=ExchangeRateOut, dependencies=[Depends(require_admin)])
def upsert_rate(payload: ExchangeRateIn, provider: ExchangeRateProvider = Depends(get_rate_provider)):
    return provider.upsert(payload.currency, payload.rate, payload.symbol)


@router.delete("/{currency}", dependencies=[Depends(require_admin)])
def delete_rate(currency: str, provider: ExchangeRateProvider = Depends(get_rate_provider)):
    provider.delete(currency)
    return {"msg": "Exchange rate deleted"}


@router.post("/refresh", dependencies=[Depends(require_admin)])
def refresh_rates(
    provider: ExchangeRateProvider = Depends(get_rate_provider),
    feed: RateFeedClient = Depends(get_rate_feed),
):
    updated = provider.refresh(feed)
    return {"updated": {currency: str(rate) for currency, rate in updated.items()}}
