# pharmacart/services/payment_gateway.py
import uuid

import requests
from requests import RequestException

from pharmacart.domain.errors import PaymentGatewayError
from pharmacart.utils.retry import http_retry
from pharmacart.utils.settings import RAZORPAY_API_URL, RAZORPAY_KEY_ID, RAZORPAY_KEY_SECRET
from pharmacart.utils.logging import get_logger

logger = get_logger(__name__)


class PaymentGatewayClient:
    """Razorpay orders API; amounts are in the currency's minor unit."""

    def __init__(
        self,
        base_url: str | None = None,
        key_id: str | None = None,
        key_secret: str | None = None,
        timeout: int = 5,
    ):
        self.base_url = (base_url or RAZORPAY_API_URL).rstrip("/")
        self.key_id = key_id if key_id is not None else RAZORPAY_KEY_ID
        self.key_secret = key_secret if key_secret is not None else RAZORPAY_KEY_SECRET
        self.timeout = timeout

    @http_retry()
    def _post(self, url: str, payload: dict) -> requests.Response:
        return requests.post(
            url,
            json=payload,
            auth=(self.key_id, self.key_secret),
            timeout=self.timeout,
        )

    def create_order(self, amount_minor: int, currency: str, receipt: str | None = None) -> dict:
        url = f"{self.base_url}/orders"
        payload = {
            "amount": amount_minor,
            "currency": currency,
            "receipt": receipt or uuid.uuid4().hex,
            "payment_capture": 1,
        }
        logger.info(f"PaymentGatewayClient POST {url} amount={amount_minor} {currency}")

        try:
            resp = self._post(url, payload)
            resp.raise_for_status()
            order = resp.json()
        except (RequestException, ValueError) as e:
            logger.error(f"Gateway order creation failed: {e}")
            raise PaymentGatewayError("Payment gateway order creation failed") from e

        if not order.get("id"):
            raise PaymentGatewayError("Payment gateway returned no order id")
        return order
