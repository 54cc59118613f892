from sqlalchemy import Column, Integer, String, JSON

from pharmacart.data.database import Base


class DeliveryChargeModel(Base):
    __tablename__ = "delivery_charges"

    id = Column(Integer, primary_key=True)
    country = Column(String(64), nullable=False, unique=True, index=True)
    # [{"min_amount": "0.01", "max_amount": "499.99", "charge": "99"}, ...]
    slabs = Column(JSON, nullable=False, default=list)
