from sqlalchemy import Column, Integer, String, DateTime, Numeric, JSON, Text
from datetime import datetime, timezone

from pharmacart.data.database import Base


def _utcnow():
    return datetime.now(timezone.utc)


class OrderStatus:
    PENDING = "Pending"
    COMPLETED = "Completed"
    FAILED = "Failed"

    ALL = (PENDING, COMPLETED, FAILED)


class OrderModel(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, nullable=False, index=True)

    # shipping / contact
    name = Column(String(200), nullable=False)
    company_name = Column(String(200), nullable=True)
    country = Column(String(64), nullable=False)
    street_address = Column(String(500), nullable=False)
    city = Column(String(100), nullable=False)
    state = Column(String(100), nullable=False)
    pincode = Column(String(20), nullable=False)
    mobile = Column(String(32), nullable=False)
    email = Column(String(254), nullable=False)
    age = Column(Integer, nullable=False)
    blood_pressure = Column(Integer, nullable=True)
    weight = Column(String(20), nullable=True)
    weight_unit = Column(String(4), nullable=True)
    order_notes = Column(Text, nullable=True)

    passport_url = Column(String(1024), nullable=False)
    prescription_url = Column(String(1024), nullable=True)

    products = Column(JSON, nullable=False)
    currency = Column(String(3), nullable=False)
    currency_symbol = Column(String(8), nullable=False)
    total_price = Column(Numeric(14, 2), nullable=False)
    delivery_charge = Column(Numeric(14, 2), nullable=False)
    total_cart_price = Column(Numeric(14, 2), nullable=False)

    status = Column(String(20), nullable=False, default=OrderStatus.PENDING)  # Pending, Completed, Failed
    payment_order_id = Column(String(64), nullable=False, unique=True, index=True)
    payment_id = Column(String(64), nullable=True)
    payment_signature = Column(String(128), nullable=True)
    tracking_link = Column(String(1024), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)
