# pharmacart/services/pricing.py
"""
Customer-facing prices for catalog variants.

Base prices are stored in INR. A price for a (country, currency) pair is
produced in two steps: the country rule from ``PricingRuleTable`` adjusts the
INR base, then the INR amount is converted with the currency's exchange rate
and rounded half-up to 2 decimals.

Two pricing paths exist: CATALOG (product listings) and CHECKOUT (cart totals
and orders). They share the table and differ only in their rows.
"""
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Optional

from pharmacart.domain.schemas import CatalogVariant

INDIA = "INDIA"
BASE_CURRENCY = "INR"
BASE_SYMBOL = "₹"

CENT = Decimal("0.01")
HUNDRED = Decimal("100")

# currencies whose code is shown instead of the stored symbol
CODE_AS_SYMBOL = {"AED"}


def money(value) -> Decimal:
    """Round half-up to 2 decimal places."""
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def fmt(value) -> str:
    return f"{money(value):.2f}"


class PricingPath:
    CATALOG = "catalog"
    CHECKOUT = "checkout"


class Adjustment:
    NONE = "none"
    DISCOUNT = "discount"
    FLAT_MARKUP = "flat_markup"
    MARGIN = "margin"


@dataclass(frozen=True)
class PricingContext:
    country: str = INDIA
    currency: str = BASE_CURRENCY

    def __post_init__(self):
        object.__setattr__(self, "country", self.country.strip().upper())
        object.__setattr__(self, "currency", self.currency.strip().upper())

    @property
    def is_domestic(self) -> bool:
        return self.country == INDIA


@dataclass(frozen=True)
class ExchangeQuote:
    currency: str
    rate: Decimal
    symbol: Optional[str] = None

    @classmethod
    def base(cls) -> "ExchangeQuote":
        return cls(currency=BASE_CURRENCY, rate=Decimal("1"), symbol=BASE_SYMBOL)

    @property
    def display_symbol(self) -> str:
        if self.currency in CODE_AS_SYMBOL or not self.symbol:
            return self.currency
        return self.symbol

    def convert(self, amount_inr) -> Decimal:
        return money(Decimal(amount_inr) * self.rate)


@dataclass(frozen=True)
class CountryRule:
    adjustment: str
    percent: Decimal = Decimal("0")

    def apply(self, base: Decimal, margin: Decimal) -> Decimal:
        if self.adjustment == Adjustment.DISCOUNT:
            return base * (1 - self.percent / HUNDRED)
        if self.adjustment == Adjustment.FLAT_MARKUP:
            return base * (1 + self.percent / HUNDRED)
        if self.adjustment == Adjustment.MARGIN:
            return base * (1 + (margin or Decimal("0")) / HUNDRED)
        return base


@dataclass
class PricingRuleTable:
    """Per-path country rules; ``default`` covers every unlisted country."""

    rules: Dict[str, Dict[str, CountryRule]] = field(default_factory=dict)
    default: CountryRule = CountryRule(Adjustment.MARGIN)

    def rule_for(self, path: str, country: str) -> CountryRule:
        return self.rules.get(path, {}).get(country.upper(), self.default)


DEFAULT_RULES = PricingRuleTable(
    rules={
        PricingPath.CATALOG: {
            INDIA: CountryRule(Adjustment.DISCOUNT, Decimal("12")),
            "BANGLADESH": CountryRule(Adjustment.FLAT_MARKUP, Decimal("20")),
            "NEPAL": CountryRule(Adjustment.FLAT_MARKUP, Decimal("20")),
        },
        PricingPath.CHECKOUT: {
            INDIA: CountryRule(Adjustment.NONE),
        },
    },
)


@dataclass(frozen=True)
class PricedVariant:
    price: Decimal
    sale_price: Decimal
    display_symbol: str


class PricingEngine:
    def __init__(self, rules: PricingRuleTable = DEFAULT_RULES):
        self.rules = rules

    def adjust_inr(
        self,
        amount: Decimal,
        margin: Decimal,
        context: PricingContext,
        path: str = PricingPath.CHECKOUT,
    ) -> Decimal:
        """Apply the country rule to an INR amount, without rounding."""
        rule = self.rules.rule_for(path, context.country)
        return rule.apply(Decimal(amount), Decimal(margin or 0))

    def unit_price_inr(
        self,
        variant: CatalogVariant,
        context: PricingContext,
        path: str = PricingPath.CHECKOUT,
    ) -> Decimal:
        return self.adjust_inr(variant.effective_price, variant.margin, context, path)

    def price_variant(
        self,
        variant: CatalogVariant,
        context: PricingContext,
        quote: ExchangeQuote,
        path: str = PricingPath.CATALOG,
    ) -> PricedVariant:
        price = self.adjust_inr(variant.price, variant.margin, context, path)
        sale_price = self.unit_price_inr(variant, context, path)

        return PricedVariant(
            price=quote.convert(price),
            sale_price=quote.convert(sale_price),
            display_symbol=quote.display_symbol,
        )
