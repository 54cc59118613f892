# pharmacart/api/deps.py
import hmac

from fastapi import Depends, Header, Query
from sqlalchemy.orm import Session

from pharmacart.data.database import get_db
from pharmacart.domain.errors import AdminRequired
from pharmacart.services.cart_pricing import CartPricingService
from pharmacart.services.cart_service import CartService
from pharmacart.services.catalog_pricing import CatalogPricingService
from pharmacart.services.delivery_charge_service import DeliveryChargeService
from pharmacart.services.exchange_rates import ExchangeRateProvider, RateFeedClient
from pharmacart.services.notification_service import NotificationService
from pharmacart.services.order_service import CheckoutService
from pharmacart.services.payment_gateway import PaymentGatewayClient
from pharmacart.services.payment_verifier import PaymentVerifier
from pharmacart.services.pricing import PricingContext
from pharmacart.services.product_client import ProductClient
from pharmacart.services.rate_cache import RateCache
from pharmacart.services.storage import StorageService
from pharmacart.services.wishlist_service import WishlistService
from pharmacart.utils import settings


# external collaborators, overridden in tests
def get_product_client() -> ProductClient:
    return ProductClient()


def get_rate_cache() -> RateCache:
    return RateCache()


def get_rate_feed() -> RateFeedClient:
    return RateFeedClient()


def get_payment_gateway() -> PaymentGatewayClient:
    return PaymentGatewayClient()


def get_storage() -> StorageService:
    return StorageService()


def get_verifier() -> PaymentVerifier:
    return PaymentVerifier()


def get_notifier() -> NotificationService:
    return NotificationService()


def pricing_context(
    country: str = Query("INDIA", min_length=2, max_length=64),
    currency: str = Query("INR", min_length=3, max_length=3),
) -> PricingContext:
    return PricingContext(country=country, currency=currency)


def require_admin(x_admin_key: str | None = Header(None)) -> None:
    expected = settings.ADMIN_API_KEY
    if not expected or not x_admin_key or not hmac.compare_digest(expected, x_admin_key):
        raise AdminRequired("Admin access required")


# services
def get_rate_provider(
    db: Session = Depends(get_db),
    cache: RateCache = Depends(get_rate_cache),
) -> ExchangeRateProvider:
    return ExchangeRateProvider(db, cache)


def get_delivery_service(db: Session = Depends(get_db)) -> DeliveryChargeService:
    return DeliveryChargeService(db)


def get_pricing_service(
    rates: ExchangeRateProvider = Depends(get_rate_provider),
    delivery: DeliveryChargeService = Depends(get_delivery_service),
) -> CartPricingService:
    return CartPricingService(rates, delivery)


def get_cart_service(
    db: Session = Depends(get_db),
    product_client: ProductClient = Depends(get_product_client),
    pricing: CartPricingService = Depends(get_pricing_service),
) -> CartService:
    return CartService(db, product_client, pricing)


def get_wishlist_service(
    db: Session = Depends(get_db),
    product_client: ProductClient = Depends(get_product_client),
) -> WishlistService:
    return WishlistService(db, product_client)


def get_checkout_service(
    db: Session = Depends(get_db),
    pricing: CartPricingService = Depends(get_pricing_service),
    product_client: ProductClient = Depends(get_product_client),
    gateway: PaymentGatewayClient = Depends(get_payment_gateway),
    storage: StorageService = Depends(get_storage),
    verifier: PaymentVerifier = Depends(get_verifier),
    notifier: NotificationService = Depends(get_notifier),
) -> CheckoutService:
    return CheckoutService(db, pricing, product_client, gateway, storage, verifier, notifier)


def get_catalog_pricing_service(
    product_client: ProductClient = Depends(get_product_client),
    rates: ExchangeRateProvider = Depends(get_rate_provider),
) -> CatalogPricingService:
    return CatalogPricingService(product_client, rates)
