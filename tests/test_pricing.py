from decimal import Decimal

from pharmacart.domain.schemas import CatalogVariant
from pharmacart.services.pricing import (
    CountryRule,
    Adjustment,
    ExchangeQuote,
    PricingContext,
    PricingEngine,
    PricingPath,
    PricingRuleTable,
    fmt,
    money,
)

USD = ExchangeQuote("USD", Decimal("0.012"), "$")
INR = ExchangeQuote.base()


def _variant(**overrides):
    data = {"id": 1, "price": "1000.00", "sale_price": None, "margin": "10"}
    data.update(overrides)
    return CatalogVariant.model_validate(data)


def test_money_rounds_half_up():
    assert money("2.345") == Decimal("2.35")
    assert money("2.344") == Decimal("2.34")
    assert money("0.005") == Decimal("0.01")
    assert fmt(2000) == "2000.00"


def test_context_normalizes_codes():
    ctx = PricingContext(" usa ", "usd")
    assert ctx.country == "USA"
    assert ctx.currency == "USD"
    assert not ctx.is_domestic
    assert PricingContext().is_domestic


def test_effective_price_prefers_non_zero_sale_price():
    assert _variant(sale_price="800").effective_price == Decimal("800")
    assert _variant(sale_price="0").effective_price == Decimal("1000.00")
    assert _variant().effective_price == Decimal("1000.00")


def test_checkout_path_india_uses_base_price():
    engine = PricingEngine()
    assert engine.unit_price_inr(_variant(), PricingContext("INDIA", "INR")) == Decimal("1000.00")


def test_checkout_path_abroad_applies_variant_margin():
    engine = PricingEngine()
    ctx = PricingContext("USA", "USD")
    assert engine.unit_price_inr(_variant(), ctx) == Decimal("1100")


def test_checkout_path_ignores_flat_markup_countries():
    engine = PricingEngine()
    ctx = PricingContext("NEPAL", "INR")
    assert engine.unit_price_inr(_variant(margin="5"), ctx, PricingPath.CHECKOUT) == Decimal("1050")


def test_catalog_path_india_discount():
    priced = PricingEngine().price_variant(_variant(sale_price="500"), PricingContext("INDIA", "INR"), INR)
    assert priced.price == Decimal("880.00")
    assert priced.sale_price == Decimal("440.00")
    assert priced.display_symbol == "₹"


def test_catalog_path_flat_markup_overrides_margin():
    for country in ("BANGLADESH", "NEPAL"):
        priced = PricingEngine().price_variant(_variant(margin="35"), PricingContext(country, "INR"), INR)
        assert priced.price == Decimal("1200.00")


def test_catalog_path_margin_and_conversion():
    priced = PricingEngine().price_variant(_variant(), PricingContext("USA", "USD"), USD)
    assert priced.price == Decimal("13.20")
    assert priced.sale_price == Decimal("13.20")
    assert priced.display_symbol == "$"


def test_display_symbol_falls_back_to_code():
    assert ExchangeQuote("AED", Decimal("0.04397"), "د.إ").display_symbol == "AED"
    assert ExchangeQuote("EUR", Decimal("0.011"), None).display_symbol == "EUR"


def test_conversion_rounds_once():
    assert USD.convert(Decimal("4178.62")) == Decimal("50.14")
    assert USD.convert(Decimal("2200")) == Decimal("26.40")


def test_converted_price_maps_back_within_one_cent():
    engine = PricingEngine()
    ctx = PricingContext("RUSSIA", "RUB")
    quote = ExchangeQuote("RUB", Decimal("1.0573"), "₽")
    for price in ("1000.00", "999.99", "1234.56", "17.35"):
        variant = _variant(price=price)
        adjusted = money(engine.unit_price_inr(variant, ctx, PricingPath.CATALOG))
        converted = engine.price_variant(variant, ctx, quote).price
        assert abs(money(converted / quote.rate) - adjusted) <= Decimal("0.01")


def test_custom_rule_table():
    table = PricingRuleTable(
        rules={PricingPath.CHECKOUT: {"UAE": CountryRule(Adjustment.FLAT_MARKUP, Decimal("5"))}},
    )
    engine = PricingEngine(table)
    assert engine.unit_price_inr(_variant(), PricingContext("UAE", "AED")) == Decimal("1050")
    # unlisted countries fall back to the margin rule
    assert engine.unit_price_inr(_variant(), PricingContext("USA", "USD")) == Decimal("1100")
