# pharmacart/services/payment_verifier.py
import hashlib
import hmac

from pharmacart.domain.errors import SignatureMismatch
from pharmacart.utils.settings import RAZORPAY_KEY_SECRET
from pharmacart.utils.logging import get_logger

logger = get_logger(__name__)


class PaymentVerifier:
    """Checks that a payment callback was signed with the gateway secret."""

    def __init__(self, secret: str | None = None):
        self.secret = (secret if secret is not None else RAZORPAY_KEY_SECRET).encode()

    def expected_signature(self, gateway_order_id: str, payment_id: str) -> str:
        message = f"{gateway_order_id}|{payment_id}".encode()
        return hmac.new(self.secret, message, hashlib.sha256).hexdigest()

    def verify(self, gateway_order_id: str, payment_id: str, signature: str) -> None:
        if not self.secret:
            logger.error("RAZORPAY_KEY_SECRET is not set, rejecting payment callback")
            raise SignatureMismatch()
        expected = self.expected_signature(gateway_order_id, payment_id)
        if not hmac.compare_digest(expected, signature or ""):
            logger.warning(f"Signature mismatch for gateway order {gateway_order_id}")
            raise SignatureMismatch()
