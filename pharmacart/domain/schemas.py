# pharmacart/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import List, Literal, Optional
from decimal import Decimal
from datetime import datetime


def _upper(value: str) -> str:
    return value.strip().upper()


# =====================================================
# CATALOG (product-service payloads and cart snapshots)
# =====================================================
class CatalogVariant(BaseModel):
    """Purchasable pack of a product, priced in INR."""

    model_config = ConfigDict(extra="ignore")

    id: int
    sku: str = ""
    pack_size: str = ""
    price: Decimal = Decimal("0")
    sale_price: Optional[Decimal] = None
    margin: Decimal = Decimal("0")
    is_stock_available: bool = True
    min_order_quantity: int = 0
    max_order_quantity: int = 100

    @property
    def effective_price(self) -> Decimal:
        if self.sale_price:
            return self.sale_price
        return self.price


class CatalogProduct(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int
    title: str
    slug: str = ""
    is_visible: bool = False
    is_prescription_required: bool = False
    variants: List[CatalogVariant] = Field(default_factory=list)

    def find_variant(self, variant_id: int) -> Optional[CatalogVariant]:
        return next((v for v in self.variants if v.id == variant_id), None)

    def snapshot(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "slug": self.slug,
            "is_visible": self.is_visible,
            "is_prescription_required": self.is_prescription_required,
        }


# =====================================================
# CART
# =====================================================
class PricingIn(BaseModel):
    country: str = Field("INDIA", min_length=2, max_length=64)
    currency: str = Field("INR", min_length=3, max_length=3)

    @field_validator("country", "currency")
    @classmethod
    def normalize_codes(cls, value: str) -> str:
        return _upper(value)


class CartItemIn(PricingIn):
    """Add a product variant to the cart, or overwrite its quantity."""

    product_id: int = Field(..., gt=0)
    variant_id: int = Field(..., gt=0)
    quantity: int = Field(..., gt=0)


class QuantityIn(PricingIn):
    quantity: int = Field(..., gt=0)


class WishlistImportIn(PricingIn):
    """Move a wishlist entry into the cart."""

    product_id: int = Field(..., gt=0)
    variant_id: int = Field(..., gt=0)
    quantity: Optional[int] = Field(None, gt=0)


class CartLineOut(BaseModel):
    line_item_id: int
    product_id: int
    variant_id: int
    title: str
    pack_size: str
    quantity: int
    unit_price: str
    line_total: str
    is_prescription_required: bool


class CartOut(BaseModel):
    cart_id: int
    user_id: int
    status: str
    country: str
    currency: str
    currency_symbol: str
    items: List[CartLineOut]
    total_price: str
    delivery_charge: str
    total_cart_price: str
    requires_prescription: bool


# =====================================================
# WISHLIST
# =====================================================
class WishlistItemIn(BaseModel):
    product_id: int = Field(..., gt=0)
    variant_id: int = Field(..., gt=0)


class WishlistItemOut(BaseModel):
    product_id: int
    variant_id: int

    model_config = ConfigDict(from_attributes=True)


class WishlistOut(BaseModel):
    wishlist_id: int
    user_id: int
    items: List[WishlistItemOut]


# =====================================================
# CHECKOUT / ORDERS
# =====================================================
class ShippingInfo(BaseModel):
    """Contact and shipping details captured at checkout."""

    name: str = Field(..., min_length=1, max_length=200)
    company_name: Optional[str] = Field(None, max_length=200)
    street_address: str = Field(..., min_length=1, max_length=500)
    city: str = Field(..., min_length=1, max_length=100)
    state: str = Field(..., min_length=1, max_length=100)
    pincode: str = Field(..., min_length=3, max_length=20)
    mobile: str = Field(..., min_length=5, max_length=32)
    email: str = Field(..., pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$", max_length=254)
    age: int = Field(..., ge=1, le=130)
    blood_pressure: Optional[int] = Field(None, gt=0)
    weight: Optional[str] = Field(None, max_length=20)
    weight_unit: Optional[Literal["KG", "IB"]] = None
    order_notes: Optional[str] = None


class CreateOrderOut(BaseModel):
    order_id: str = Field(..., serialization_alias="orderId")
    currency: str
    amount: int
    key_id: str


class PaymentCallbackIn(BaseModel):
    order_id: str = Field(..., min_length=1)
    payment_id: str = Field(..., min_length=1)
    signature: str = Field(..., min_length=1)


class PaymentCallbackOut(BaseModel):
    msg: str
    order_found: bool
    order_status: Optional[str] = None


class OrderUpdateIn(BaseModel):
    status: str
    tracking_link: Optional[str] = Field(None, max_length=1024)


class OrderProductOut(BaseModel):
    product_id: int
    variant_id: int
    title: str
    pack_size: str = ""
    quantity: int
    unit_price: str


class PaymentOut(BaseModel):
    order_id: str
    payment_id: Optional[str] = None
    signature: Optional[str] = None


class OrderOut(BaseModel):
    id: int
    user_id: int
    name: str
    country: str
    city: str
    status: str
    currency: str
    currency_symbol: str
    products: List[OrderProductOut]
    total_price: str
    delivery_charge: str
    total_cart_price: str
    payment: PaymentOut
    tracking_link: Optional[str] = None
    passport_url: str
    prescription_url: Optional[str] = None
    created_at: datetime


class OrderSummaryOut(BaseModel):
    """Row of the payment history list."""

    id: int
    currency: str
    total_price: str
    delivery_charge: str
    total_cart_price: str
    status: str
    created_at: datetime


# =====================================================
# EXCHANGE RATES / DELIVERY CHARGES / PRICING
# =====================================================
class ExchangeRateIn(BaseModel):
    currency: str = Field(..., min_length=3, max_length=3)
    rate: Decimal = Field(..., gt=0)
    symbol: Optional[str] = Field(None, max_length=8)

    @field_validator("currency")
    @classmethod
    def normalize_currency(cls, value: str) -> str:
        return _upper(value)


class ExchangeRateOut(BaseModel):
    currency: str
    rate: Decimal
    symbol: Optional[str] = None
    last_updated: datetime

    model_config = ConfigDict(from_attributes=True)


class DeliverySlabIn(BaseModel):
    min_amount: Decimal = Field(..., ge=0)
    max_amount: Optional[Decimal] = Field(None, ge=0)
    charge: Decimal = Field(..., ge=0)


class DeliveryChargeIn(BaseModel):
    slabs: List[DeliverySlabIn] = Field(..., min_length=1)


class DeliveryChargeOut(BaseModel):
    country: str
    slabs: List[DeliverySlabIn]

    model_config = ConfigDict(from_attributes=True)


class DeliveryQuoteOut(BaseModel):
    country: str
    currency: str
    currency_symbol: str
    amount: str
    delivery_charge: str


class VariantPriceOut(BaseModel):
    variant_id: int
    pack_size: str
    price: str
    sale_price: str
    currency_symbol: str


class ProductPriceOut(BaseModel):
    product_id: int
    title: str
    country: str
    currency: str
    variants: List[VariantPriceOut]
