# pharmacart/tasks/rates.py
from pharmacart.celery_worker import celery_app
from pharmacart.data.database import SessionLocal
from pharmacart.services.exchange_rates import ExchangeRateProvider, RateFeedClient
from pharmacart.services.rate_cache import RateCache
from pharmacart.utils.logging import get_logger

logger = get_logger(__name__)


def refresh_exchange_rates(session_factory=SessionLocal, feed=None, cache=None) -> dict:
    db = session_factory()
    try:
        provider = ExchangeRateProvider(db, cache if cache is not None else RateCache())
        updated = provider.refresh(feed or RateFeedClient())
        return {currency: str(rate) for currency, rate in updated.items()}
    finally:
        db.close()


@celery_app.task(name="pharmacart.tasks.rates.refresh_exchange_rates_task")
def refresh_exchange_rates_task():
    logger.info("Exchange rate refresh task started")
    return refresh_exchange_rates()
