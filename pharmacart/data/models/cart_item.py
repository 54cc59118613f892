from sqlalchemy import Column, Integer, ForeignKey, JSON, UniqueConstraint
from sqlalchemy.orm import relationship

from pharmacart.data.database import Base


class CartItemModel(Base):
    __tablename__ = "cart_items"
    __table_args__ = (
        UniqueConstraint("cart_id", "product_id", "variant_id", name="u_cart_product_variant"),
    )

    id = Column(Integer, primary_key=True)
    cart_id = Column(Integer, ForeignKey("carts.id", ondelete="CASCADE"), nullable=False)
    product_id = Column(Integer, nullable=False)
    variant_id = Column(Integer, nullable=False)

    quantity = Column(Integer, nullable=False)

    # copies of catalog data taken when the line was added, never live references
    product_snapshot = Column(JSON, nullable=False)
    variant_snapshot = Column(JSON, nullable=False)

    cart = relationship("CartModel", back_populates="items")
