"""
Pytest configuration and fixtures for the pharmacart tests.
"""
import os

# Set test environment before importing pharmacart modules
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "true"
os.environ["CELERY_BROKER_URL"] = "memory://"
os.environ["CELERY_RESULT_BACKEND"] = "cache+memory://"
os.environ["RAZORPAY_KEY_ID"] = "rzp_test_key"
os.environ["RAZORPAY_KEY_SECRET"] = "test-secret"
os.environ["ADMIN_API_KEY"] = "test-admin-key"

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from pharmacart.data.database import Base, get_db
from pharmacart.data import models  # noqa: F401
from pharmacart.domain.schemas import CatalogProduct
from pharmacart.services.cart_pricing import CartPricingService
from pharmacart.services.cart_service import CartService
from pharmacart.services.delivery_charge_service import DeliveryChargeService
from pharmacart.services.exchange_rates import ExchangeRateProvider
from pharmacart.services.order_service import CheckoutService
from pharmacart.services.payment_verifier import PaymentVerifier
from pharmacart.services.storage import StorageService
from pharmacart.services.wishlist_service import WishlistService

TEST_SECRET = "test-secret"


class FakeCatalog:
    """In-memory product service."""

    def __init__(self, products):
        self.products = {p["id"]: p for p in products}
        self.requested = []

    def fetch_product(self, product_id):
        self.requested.append(product_id)
        data = self.products.get(product_id)
        if data is None:
            return None
        return CatalogProduct.model_validate(data)


class FakeRateCache:
    def __init__(self):
        self.store = {}
        self.invalidated = []

    def get(self, currency):
        return self.store.get(currency)

    def set(self, currency, rate, symbol):
        self.store[currency] = {"rate": rate, "symbol": symbol}

    def invalidate(self, currency):
        self.invalidated.append(currency)
        self.store.pop(currency, None)


class FakeGateway:
    key_id = "rzp_test_key"

    def __init__(self):
        self.orders = []

    def create_order(self, amount_minor, currency, receipt=None):
        order = {
            "id": f"order_test_{len(self.orders) + 1}",
            "amount": amount_minor,
            "currency": currency,
            "receipt": receipt,
        }
        self.orders.append(order)
        return order


class FakeStorage:
    generate_key = staticmethod(StorageService.generate_key)

    def __init__(self):
        self.uploads = {}

    def upload(self, content, key, content_type):
        self.uploads[key] = (content, content_type)
        return f"https://test-bucket.s3.amazonaws.com/{key}"


class FakeNotifier:
    def __init__(self):
        self.sent = []

    def send_order_notification(self, user_id, order_id):
        self.sent.append((user_id, order_id))


def make_products():
    return [
        {
            "id": 1,
            "title": "Paracetamol 500mg",
            "slug": "paracetamol-500mg",
            "is_visible": True,
            "is_prescription_required": False,
            "variants": [
                {"id": 11, "pack_size": "10 tablets", "price": "1000.00", "sale_price": None,
                 "margin": "10", "is_stock_available": True, "min_order_quantity": 1, "max_order_quantity": 10},
                {"id": 12, "pack_size": "30 tablets", "price": "250.00", "sale_price": "200.00",
                 "margin": "10", "is_stock_available": True, "min_order_quantity": 2, "max_order_quantity": 5},
            ],
        },
        {
            "id": 2,
            "title": "Imatinib 400mg",
            "slug": "imatinib-400mg",
            "is_visible": True,
            "is_prescription_required": True,
            "variants": [
                {"id": 21, "pack_size": "30 tablets", "price": "2000.00", "sale_price": None,
                 "margin": "15", "is_stock_available": True, "min_order_quantity": 1, "max_order_quantity": 5},
            ],
        },
        {
            "id": 3,
            "title": "Vitamin D3",
            "slug": "vitamin-d3",
            "is_visible": True,
            "is_prescription_required": False,
            "variants": [
                {"id": 31, "pack_size": "4 capsules", "price": "120.00", "sale_price": None,
                 "margin": "20", "is_stock_available": False, "min_order_quantity": 1, "max_order_quantity": 12},
            ],
        },
        {
            "id": 4,
            "title": "Discontinued Syrup",
            "slug": "discontinued-syrup",
            "is_visible": False,
            "is_prescription_required": False,
            "variants": [
                {"id": 41, "pack_size": "100 ml", "price": "80.00", "sale_price": None,
                 "margin": "10", "is_stock_available": True, "min_order_quantity": 1, "max_order_quantity": 10},
            ],
        },
    ]


@pytest.fixture
def db_session():
    """Fresh in-memory SQLite database per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def catalog():
    return FakeCatalog(make_products())


@pytest.fixture
def rate_cache():
    return FakeRateCache()


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def verifier():
    return PaymentVerifier(TEST_SECRET)


@pytest.fixture
def rates(db_session, rate_cache):
    provider = ExchangeRateProvider(db_session, rate_cache)
    provider.upsert("USD", Decimal("0.012"), "$")
    provider.upsert("AED", Decimal("0.04397"), "د.إ")
    return provider


@pytest.fixture
def pricing(db_session, rates):
    return CartPricingService(rates, DeliveryChargeService(db_session))


@pytest.fixture
def cart_service(db_session, catalog, pricing):
    return CartService(db_session, catalog, pricing)


@pytest.fixture
def wishlist_service(db_session, catalog):
    return WishlistService(db_session, catalog)


@pytest.fixture
def checkout_service(db_session, pricing, catalog, gateway, storage, verifier, notifier):
    return CheckoutService(db_session, pricing, catalog, gateway, storage, verifier, notifier)


@pytest.fixture
def shipping_form():
    return {
        "name": "Asha Rao",
        "street_address": "12 MG Road",
        "city": "Bengaluru",
        "state": "Karnataka",
        "pincode": "560001",
        "mobile": "+919800000000",
        "email": "asha@example.com",
        "age": "42",
        "weight": "60",
        "weight_unit": "KG",
    }


@pytest.fixture
def client(db_session, catalog, rate_cache, gateway, storage, verifier, notifier, rates):
    from pharmacart.api import create_app
    from pharmacart.api import deps

    app = create_app()

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[deps.get_product_client] = lambda: catalog
    app.dependency_overrides[deps.get_rate_cache] = lambda: rate_cache
    app.dependency_overrides[deps.get_payment_gateway] = lambda: gateway
    app.dependency_overrides[deps.get_storage] = lambda: storage
    app.dependency_overrides[deps.get_verifier] = lambda: verifier
    app.dependency_overrides[deps.get_notifier] = lambda: notifier

    with TestClient(app) as c:
        yield c
