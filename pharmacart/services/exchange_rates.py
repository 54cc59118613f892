# pharmacart/services/exchange_rates.py
from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, Iterable

import redis
import requests
from requests import RequestException
from sqlalchemy.orm import Session

from pharmacart.data.models.exchange_rate import ExchangeRateModel
from pharmacart.domain.errors import ExchangeRateNotFound, RateFeedError, UnsupportedCurrency
from pharmacart.repos.exchange_rate_repo import ExchangeRateRepo
from pharmacart.services.pricing import BASE_CURRENCY, ExchangeQuote
from pharmacart.services.rate_cache import RateCache
from pharmacart.utils.retry import http_retry
from pharmacart.utils.settings import EXCHANGE_RATE_FEED_URL, SUPPORTED_CURRENCIES
from pharmacart.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "RUB": "₽",
    "AED": "د.إ",
}


class RateFeedClient:
    """INR-based rate feed: ``{"rates": {"USD": 0.012, ...}}``."""

    def __init__(self, url: str | None = None, timeout: int = 5):
        self.url = url or EXCHANGE_RATE_FEED_URL
        self.timeout = timeout

    @http_retry()
    def _get(self) -> requests.Response:
        return requests.get(self.url, timeout=self.timeout)

    def fetch_rates(self) -> Dict[str, Decimal]:
        logger.info(f"RateFeedClient GET {self.url}")
        try:
            resp = self._get()
            resp.raise_for_status()
            payload = resp.json()
        except (RequestException, ValueError) as e:
            logger.error(f"Exchange rate feed request failed: {e}")
            raise RateFeedError("Exchange rate feed unavailable") from e

        rates = payload.get("rates") or payload.get("conversion_rates")
        if not isinstance(rates, dict):
            raise RateFeedError("Exchange rate feed returned no rates")

        return {code.upper(): Decimal(str(value)) for code, value in rates.items()}


class ExchangeRateProvider:
    """
    Maps a currency code to its INR multiplier and display symbol.

    Reads go through the Redis cache; every write invalidates the cached key
    so the next lookup sees the new row.
    """

    def __init__(self, db: Session, cache: RateCache | None = None):
        self.repo = ExchangeRateRepo(db)
        self.cache = cache

    #query
    def find_by_currency(self, currency: str) -> ExchangeQuote | None:
        currency = currency.upper()

        cached = self._cache_get(currency)
        if cached is not None:
            return ExchangeQuote(currency, Decimal(cached["rate"]), cached.get("symbol"))

        row = self.repo.get(currency)
        if not row:
            return None

        quote = ExchangeQuote(currency, Decimal(str(row.rate)), row.symbol)
        self._cache_set(quote)
        return quote

    def resolve(self, currency: str) -> ExchangeQuote:
        """Quote for ``currency``; INR never needs a stored row."""
        if currency.upper() == BASE_CURRENCY:
            return ExchangeQuote.base()

        quote = self.find_by_currency(currency)
        if quote is None:
            raise UnsupportedCurrency(currency)
        return quote

    def list_rates(self) -> list[ExchangeRateModel]:
        return self.repo.list_all()

    def get_rate(self, currency: str) -> ExchangeRateModel:
        row = self.repo.get(currency.upper())
        if not row:
            raise ExchangeRateNotFound("Currency not found", details={"currency": currency})
        return row

    #commands
    def upsert(self, currency: str, rate: Decimal, symbol: str | None = None) -> ExchangeRateModel:
        currency = currency.upper()
        row = self.repo.get(currency)

        if row:
            row.rate = rate
            if symbol is not None:
                row.symbol = symbol
            row.last_updated = datetime.now(timezone.utc)
        else:
            row = ExchangeRateModel(
                currency=currency,
                rate=rate,
                symbol=symbol or DEFAULT_SYMBOLS.get(currency),
                last_updated=datetime.now(timezone.utc),
            )

        saved = self.repo.save(row)
        self._cache_invalidate(currency)

        logger.info(f"Exchange rate {currency} set to {rate}")
        return saved

    def delete(self, currency: str) -> None:
        row = self.get_rate(currency)
        self.repo.delete(row)
        self._cache_invalidate(row.currency)
        logger.info(f"Exchange rate {row.currency} deleted")

    def refresh(
        self,
        feed: RateFeedClient,
        currencies: Iterable[str] = SUPPORTED_CURRENCIES,
    ) -> Dict[str, Decimal]:
        """Pull the feed and upsert every supported currency it carries."""
        rates = feed.fetch_rates()
        updated: Dict[str, Decimal] = {}

        for currency in currencies:
            rate = rates.get(currency)
            if rate is None or rate <= 0:
                logger.warning(f"Rate feed has no usable rate for {currency}, keeping stored value")
                continue
            self.upsert(currency, rate)
            updated[currency] = rate

        logger.info(f"Exchange rates refreshed: {sorted(updated)}")
        return updated

    # cache failures fall back to the database

    def _cache_get(self, currency: str) -> dict | None:
        if self.cache is None:
            return None
        try:
            return self.cache.get(currency)
        except redis.RedisError as e:
            logger.warning(f"Rate cache read for {currency} failed, using database: {e}")
            return None

    def _cache_set(self, quote: ExchangeQuote) -> None:
        if self.cache is None:
            return
        try:
            self.cache.set(quote.currency, str(quote.rate), quote.symbol)
        except redis.RedisError as e:
            logger.warning(f"Rate cache write for {quote.currency} failed: {e}")

    def _cache_invalidate(self, currency: str) -> None:
        if self.cache is None:
            return
        try:
            self.cache.invalidate(currency)
        except redis.RedisError as e:
            logger.error(f"Rate cache invalidation for {currency} failed, stale for up to the cache TTL: {e}")
