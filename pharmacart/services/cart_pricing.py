# pharmacart/services/cart_pricing.py
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List

from pharmacart.data.models.cart import CartModel
from pharmacart.domain.schemas import CatalogVariant
from pharmacart.services.delivery_charge_service import DeliveryChargeService
from pharmacart.services.exchange_rates import ExchangeRateProvider
from pharmacart.services.pricing import (
    ExchangeQuote,
    PricingContext,
    PricingEngine,
    PricingPath,
    fmt,
    money,
)


@dataclass
class PricedLine:
    line_item_id: int
    product_id: int
    variant_id: int
    title: str
    pack_size: str
    quantity: int
    is_prescription_required: bool
    unit_price_inr: Decimal
    unit_price: Decimal
    line_total: Decimal

    def to_dict(self) -> dict:
        return {
            "line_item_id": self.line_item_id,
            "product_id": self.product_id,
            "variant_id": self.variant_id,
            "title": self.title,
            "pack_size": self.pack_size,
            "quantity": self.quantity,
            "unit_price": fmt(self.unit_price),
            "line_total": fmt(self.line_total),
            "is_prescription_required": self.is_prescription_required,
        }


@dataclass
class PricedCart:
    cart_id: int
    user_id: int
    status: str
    context: PricingContext
    quote: ExchangeQuote
    subtotal_inr: Decimal
    delivery_charge_inr: Decimal
    total_price: Decimal
    delivery_charge: Decimal
    total_cart_price: Decimal
    lines: List[PricedLine] = field(default_factory=list)

    @property
    def requires_prescription(self) -> bool:
        return any(line.is_prescription_required for line in self.lines)

    def to_dict(self) -> dict:
        return {
            "cart_id": self.cart_id,
            "user_id": self.user_id,
            "status": self.status,
            "country": self.context.country,
            "currency": self.quote.currency,
            "currency_symbol": self.quote.display_symbol,
            "items": [line.to_dict() for line in self.lines],
            "total_price": fmt(self.total_price),
            "delivery_charge": fmt(self.delivery_charge),
            "total_cart_price": fmt(self.total_cart_price),
            "requires_prescription": self.requires_prescription,
        }


class CartPricingService:
    """
    Totals for a cart in the caller's (country, currency).

    Prices come from the line snapshots, never from the live catalog. The
    subtotal and the delivery slab are evaluated in INR; each of the two is
    then converted once, and ``total_cart_price`` is their sum.
    """

    def __init__(
        self,
        rates: ExchangeRateProvider,
        delivery: DeliveryChargeService,
        engine: PricingEngine | None = None,
    ):
        self.rates = rates
        self.delivery = delivery
        self.engine = engine or PricingEngine()

    def quote(self, context: PricingContext) -> ExchangeQuote:
        return self.rates.resolve(context.currency)

    def price_cart(
        self,
        cart: CartModel,
        context: PricingContext,
        quote: ExchangeQuote | None = None,
    ) -> PricedCart:
        quote = quote or self.quote(context)

        lines: List[PricedLine] = []
        subtotal_inr = Decimal("0")

        for item in cart.items:
            variant = CatalogVariant.model_validate(item.variant_snapshot)
            product = item.product_snapshot or {}

            unit_inr = self.engine.unit_price_inr(variant, context, PricingPath.CHECKOUT)
            line_inr = unit_inr * item.quantity
            subtotal_inr += line_inr

            lines.append(
                PricedLine(
                    line_item_id=item.id,
                    product_id=item.product_id,
                    variant_id=item.variant_id,
                    title=product.get("title", ""),
                    pack_size=variant.pack_size,
                    quantity=item.quantity,
                    is_prescription_required=bool(product.get("is_prescription_required")),
                    unit_price_inr=money(unit_inr),
                    unit_price=quote.convert(unit_inr),
                    line_total=quote.convert(line_inr),
                )
            )

        subtotal_inr = money(subtotal_inr)
        delivery_inr = self.delivery.charge_inr(subtotal_inr, context.country)

        total_price = quote.convert(subtotal_inr)
        delivery_charge = quote.convert(delivery_inr)

        return PricedCart(
            cart_id=cart.id,
            user_id=cart.user_id,
            status=cart.status,
            context=context,
            quote=quote,
            subtotal_inr=subtotal_inr,
            delivery_charge_inr=delivery_inr,
            total_price=total_price,
            delivery_charge=delivery_charge,
            total_cart_price=total_price + delivery_charge,
            lines=lines,
        )
