# pharmacart/services/delivery.py
"""
Delivery fee as a step function of the INR subtotal.

Slabs are inclusive on both ends and compared against the subtotal rounded
to 2 decimals, so adjacent slabs meet at consecutive cents
(499.99 / 500.00). A subtotal that matches no slab, including 0, ships free.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, List, Optional

from pharmacart.services.pricing import INDIA, ExchangeQuote, money


@dataclass(frozen=True)
class DeliverySlab:
    min_amount: Decimal
    max_amount: Optional[Decimal]
    charge: Decimal

    def matches(self, amount: Decimal) -> bool:
        if amount < self.min_amount:
            return False
        return self.max_amount is None or amount <= self.max_amount

    @classmethod
    def from_dict(cls, data: dict) -> "DeliverySlab":
        max_amount = data.get("max_amount")
        return cls(
            min_amount=Decimal(str(data["min_amount"])),
            max_amount=None if max_amount is None else Decimal(str(max_amount)),
            charge=Decimal(str(data["charge"])),
        )

    def to_dict(self) -> dict:
        return {
            "min_amount": str(self.min_amount),
            "max_amount": None if self.max_amount is None else str(self.max_amount),
            "charge": str(self.charge),
        }


def _slabs(*rows) -> List[DeliverySlab]:
    return [
        DeliverySlab(Decimal(lo), None if hi is None else Decimal(hi), Decimal(charge))
        for lo, hi, charge in rows
    ]


DOMESTIC_SLABS = _slabs(
    ("0.01", "499.99", "99"),
    ("500.00", "999.99", "59"),
    ("1000.00", None, "0"),
)

INTERNATIONAL_SLABS = _slabs(
    ("0.01", "4177.77", "4178.62"),
    ("4177.78", "16713.64", "3342.90"),
    ("16713.65", None, "0"),
)


class DeliveryChargeCalculator:
    def default_slabs(self, country: str) -> List[DeliverySlab]:
        return DOMESTIC_SLABS if country.upper() == INDIA else INTERNATIONAL_SLABS

    def compute_charge(
        self,
        subtotal_inr,
        country: str,
        slabs: Optional[Iterable[DeliverySlab]] = None,
    ) -> Decimal:
        """INR fee for ``subtotal_inr``; ``slabs`` overrides the built-in table."""
        amount = money(subtotal_inr)
        if amount <= 0:
            return Decimal("0.00")

        table = list(slabs) if slabs else self.default_slabs(country)
        for slab in table:
            if slab.matches(amount):
                return money(slab.charge)
        return Decimal("0.00")

    def convert(self, charge_inr: Decimal, quote: ExchangeQuote) -> Decimal:
        return quote.convert(charge_inr)
