# pharmacart/api/routers/pricing.py
from fastapi import APIRouter, Depends

from pharmacart.api.deps import get_catalog_pricing_service, pricing_context
from pharmacart.domain.schemas import ProductPriceOut
from pharmacart.services.catalog_pricing import CatalogPricingService
from pharmacart.services.pricing import PricingContext

router = APIRouter(prefix="/pricing", tags=["pricing"])


@router.get("/products/{product_id}", response_model=ProductPriceOut)
def price_product(
    product_id: int,
    context: PricingContext = Depends(pricing_context),
    svc: CatalogPricingService = Depends(get_catalog_pricing_service),
):
    return svc.price_product(product_id, context)
