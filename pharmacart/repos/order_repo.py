# pharmacart/repos/order_repo.py
from sqlalchemy import select
from sqlalchemy.orm import Session

from pharmacart.data.models.order import OrderModel, OrderStatus


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def create_order(self, order: OrderModel) -> OrderModel:
        self.db.add(order)
        self.db.commit()
        self.db.refresh(order)
        return order

    def get_order(self, order_id: int) -> OrderModel | None:
        return self.db.get(OrderModel, order_id)

    def get_by_payment_order_id(self, payment_order_id: str) -> OrderModel | None:
        return self.db.execute(
            select(OrderModel).where(OrderModel.payment_order_id == payment_order_id)
        ).scalar_one_or_none()

    def list_for_user(self, user_id: int, status_filter: str | None = None) -> list[OrderModel]:
        query = select(OrderModel).where(OrderModel.user_id == user_id)

        if status_filter == "success":
            query = query.where(OrderModel.status == OrderStatus.COMPLETED)
        elif status_filter == "unsuccess":
            query = query.where(OrderModel.status != OrderStatus.COMPLETED)

        query = query.order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
        return list(self.db.execute(query).scalars().all())

    def save(self, order: OrderModel) -> OrderModel:
        self.db.add(order)
        self.db.commit()
        self.db.refresh(order)
        return order

    def rollback(self) -> None:
        self.db.rollback()
