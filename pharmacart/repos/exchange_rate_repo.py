# pharmacart/repos/exchange_rate_repo.py
from sqlalchemy import select
from sqlalchemy.orm import Session

from pharmacart.data.models.exchange_rate import ExchangeRateModel


class ExchangeRateRepo:
    def __init__(self, db: Session):
        self.db = db

    def get(self, currency: str) -> ExchangeRateModel | None:
        return self.db.execute(
            select(ExchangeRateModel).where(ExchangeRateModel.currency == currency)
        ).scalar_one_or_none()

    def list_all(self) -> list[ExchangeRateModel]:
        return list(
            self.db.execute(select(ExchangeRateModel).order_by(ExchangeRateModel.currency)).scalars().all()
        )

    def save(self, rate: ExchangeRateModel) -> ExchangeRateModel:
        self.db.add(rate)
        self.db.commit()
        self.db.refresh(rate)
        return rate

    def delete(self, rate: ExchangeRateModel) -> None:
        self.db.delete(rate)
        self.db.commit()
