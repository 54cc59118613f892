# pharmacart/services/delivery_charge_service.py
from decimal import Decimal
from typing import List

from sqlalchemy.orm import Session

from pharmacart.data.models.delivery_charge import DeliveryChargeModel
from pharmacart.domain.errors import DeliveryChargeNotFound
from pharmacart.repos.delivery_charge_repo import DeliveryChargeRepo
from pharmacart.services.delivery import DeliveryChargeCalculator, DeliverySlab
from pharmacart.services.pricing import ExchangeQuote, fmt
from pharmacart.utils.logging import get_logger

logger = get_logger(__name__)


class DeliveryChargeService:
    """Per-country slab tables stored in the database, over the built-in defaults."""

    def __init__(self, db: Session, calculator: DeliveryChargeCalculator | None = None):
        self.repo = DeliveryChargeRepo(db)
        self.calculator = calculator or DeliveryChargeCalculator()

    def slabs_for(self, country: str) -> List[DeliverySlab]:
        row = self.repo.get(country.upper())
        if row and row.slabs:
            return [DeliverySlab.from_dict(s) for s in row.slabs]
        return self.calculator.default_slabs(country)

    def charge_inr(self, subtotal_inr: Decimal, country: str) -> Decimal:
        return self.calculator.compute_charge(subtotal_inr, country, self.slabs_for(country))

    def list_all(self) -> list[DeliveryChargeModel]:
        return self.repo.list_all()

    def get(self, country: str) -> DeliveryChargeModel:
        row = self.repo.get(country.upper())
        if not row:
            raise DeliveryChargeNotFound("Delivery charge not found", details={"country": country})
        return row

    def upsert(self, country: str, slabs: List[DeliverySlab]) -> DeliveryChargeModel:
        country = country.upper()
        ordered = sorted(slabs, key=lambda s: s.min_amount)

        row = self.repo.get(country) or DeliveryChargeModel(country=country)
        row.slabs = [s.to_dict() for s in ordered]
        saved = self.repo.save(row)

        logger.info(f"Delivery charge slabs for {country} replaced ({len(ordered)} slabs)")
        return saved

    def delete(self, country: str) -> None:
        row = self.get(country)
        self.repo.delete(row)
        logger.info(f"Delivery charge slabs for {row.country} deleted")

    def quote(self, subtotal_inr: Decimal, country: str, quote: ExchangeQuote) -> dict:
        """Fee for an INR subtotal, both shown in the quote's currency."""
        charge = self.charge_inr(subtotal_inr, country)
        return {
            "country": country.upper(),
            "currency": quote.currency,
            "currency_symbol": quote.display_symbol,
            "amount": fmt(quote.convert(subtotal_inr)),
            "delivery_charge": fmt(self.calculator.convert(charge, quote)),
        }
