# pharmacart/data/seed.py
from datetime import datetime, timezone
from decimal import Decimal

from pharmacart.data.database import SessionLocal
from pharmacart.data.models import ExchangeRateModel
from pharmacart.services.exchange_rates import DEFAULT_SYMBOLS
from pharmacart.utils.logging import get_logger

logger = get_logger(__name__)

# INR -> currency, used until the first feed refresh
DEFAULT_RATES = {
    "USD": Decimal("0.01197"),
    "EUR": Decimal("0.01106"),
    "GBP": Decimal("0.009342"),
    "RUB": Decimal("1.0573"),
    "AED": Decimal("0.04397"),
}


def seed(session_factory=SessionLocal) -> int:
    db = session_factory()
    try:
        # not forcing: only seed if empty
        if db.query(ExchangeRateModel).first():
            return 0
        now = datetime.now(timezone.utc)
        for currency, rate in DEFAULT_RATES.items():
            db.add(
                ExchangeRateModel(
                    currency=currency,
                    rate=rate,
                    symbol=DEFAULT_SYMBOLS.get(currency),
                    last_updated=now,
                )
            )
        db.commit()
        logger.info(f"Seeded exchange rates: {sorted(DEFAULT_RATES)}")
        return len(DEFAULT_RATES)
    finally:
        db.close()
