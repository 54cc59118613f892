from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, Numeric

from pharmacart.data.database import Base


class ExchangeRateModel(Base):
    __tablename__ = "exchange_rates"

    id = Column(Integer, primary_key=True)
    currency = Column(String(3), nullable=False, unique=True, index=True)
    rate = Column(Numeric(18, 8), nullable=False)  # INR -> currency multiplier
    symbol = Column(String(8), nullable=True)
    last_updated = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
