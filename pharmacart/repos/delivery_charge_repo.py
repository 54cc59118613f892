# pharmacart/repos/delivery_charge_repo.py
from sqlalchemy import select
from sqlalchemy.orm import Session

from pharmacart.data.models.delivery_charge import DeliveryChargeModel


class DeliveryChargeRepo:
    def __init__(self, db: Session):
        self.db = db

    def get(self, country: str) -> DeliveryChargeModel | None:
        return self.db.execute(
            select(DeliveryChargeModel).where(DeliveryChargeModel.country == country)
        ).scalar_one_or_none()

    def list_all(self) -> list[DeliveryChargeModel]:
        return list(
            self.db.execute(select(DeliveryChargeModel).order_by(DeliveryChargeModel.country)).scalars().all()
        )

    def save(self, row: DeliveryChargeModel) -> DeliveryChargeModel:
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        return row

    def delete(self, row: DeliveryChargeModel) -> None:
        self.db.delete(row)
        self.db.commit()
