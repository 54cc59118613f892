from decimal import Decimal

import pytest

from pharmacart.domain.errors import DeliveryChargeNotFound
from pharmacart.services.delivery import DeliveryChargeCalculator, DeliverySlab
from pharmacart.services.delivery_charge_service import DeliveryChargeService
from pharmacart.services.pricing import ExchangeQuote


@pytest.mark.parametrize(
    "subtotal, expected",
    [
        ("0", "0.00"),
        ("0.01", "99.00"),
        ("499.99", "99.00"),
        ("500.00", "59.00"),
        ("999.99", "59.00"),
        ("1000.00", "0.00"),
        ("25000", "0.00"),
    ],
)
def test_domestic_slabs(subtotal, expected):
    calc = DeliveryChargeCalculator()
    assert calc.compute_charge(Decimal(subtotal), "INDIA") == Decimal(expected)


@pytest.mark.parametrize(
    "subtotal, expected",
    [
        ("0.01", "4178.62"),
        ("4177.77", "4178.62"),
        ("4177.78", "3342.90"),
        ("16713.64", "3342.90"),
        ("16713.65", "0.00"),
    ],
)
def test_international_slabs(subtotal, expected):
    calc = DeliveryChargeCalculator()
    assert calc.compute_charge(Decimal(subtotal), "USA") == Decimal(expected)


def test_subtotal_is_rounded_before_slab_lookup():
    calc = DeliveryChargeCalculator()
    # 499.994 rounds to 499.99, 499.995 rounds to 500.00
    assert calc.compute_charge(Decimal("499.994"), "INDIA") == Decimal("99.00")
    assert calc.compute_charge(Decimal("499.995"), "INDIA") == Decimal("59.00")


def test_charge_conversion():
    calc = DeliveryChargeCalculator()
    usd = ExchangeQuote("USD", Decimal("0.012"), "$")
    assert calc.convert(Decimal("4178.62"), usd) == Decimal("50.14")


def test_custom_slabs_override_defaults(db_session):
    svc = DeliveryChargeService(db_session)
    svc.upsert(
        "usa",
        [
            DeliverySlab(Decimal("1000"), None, Decimal("0")),
            DeliverySlab(Decimal("0.01"), Decimal("999.99"), Decimal("250")),
        ],
    )

    row = svc.get("USA")
    assert row.country == "USA"
    # stored in ascending order
    assert [s["min_amount"] for s in row.slabs] == ["0.01", "1000"]

    assert svc.charge_inr(Decimal("500"), "USA") == Decimal("250.00")
    assert svc.charge_inr(Decimal("1500"), "USA") == Decimal("0.00")
    # other countries keep the built-in table
    assert svc.charge_inr(Decimal("500"), "UK") == Decimal("4178.62")


def test_delete_restores_defaults(db_session):
    svc = DeliveryChargeService(db_session)
    svc.upsert("INDIA", [DeliverySlab(Decimal("0.01"), None, Decimal("10"))])
    assert svc.charge_inr(Decimal("2000"), "INDIA") == Decimal("10.00")

    svc.delete("INDIA")
    assert svc.charge_inr(Decimal("2000"), "INDIA") == Decimal("0.00")

    with pytest.raises(DeliveryChargeNotFound):
        svc.get("INDIA")


def test_quote_in_target_currency(db_session):
    svc = DeliveryChargeService(db_session)
    quote = svc.quote(Decimal("2200"), "usa", ExchangeQuote("USD", Decimal("0.012"), "$"))
    assert quote == {
        "country": "USA",
        "currency": "USD",
        "currency_symbol": "$",
        "amount": "26.40",
        "delivery_charge": "50.14",
    }
