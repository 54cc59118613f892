# pharmacart/services/catalog_pricing.py
from pharmacart.domain.errors import ProductNotFound
from pharmacart.services.exchange_rates import ExchangeRateProvider
from pharmacart.services.pricing import PricingContext, PricingEngine, PricingPath, fmt
from pharmacart.services.product_client import ProductClient


class CatalogPricingService:
    """Listing prices for every variant of one product."""

    def __init__(
        self,
        product_client: ProductClient,
        rates: ExchangeRateProvider,
        engine: PricingEngine | None = None,
    ):
        self.product_client = product_client
        self.rates = rates
        self.engine = engine or PricingEngine()

    def price_product(self, product_id: int, context: PricingContext) -> dict:
        quote = self.rates.resolve(context.currency)

        product = self.product_client.fetch_product(product_id)
        if not product:
            raise ProductNotFound(product_id)

        variants = []
        for variant in product.variants:
            priced = self.engine.price_variant(variant, context, quote, PricingPath.CATALOG)
            variants.append(
                {
                    "variant_id": variant.id,
                    "pack_size": variant.pack_size,
                    "price": fmt(priced.price),
                    "sale_price": fmt(priced.sale_price),
                    "currency_symbol": priced.display_symbol,
                }
            )

        return {
            "product_id": product.id,
            "title": product.title,
            "country": context.country,
            "currency": quote.currency,
            "variants": variants,
        }
