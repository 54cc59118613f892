import hashlib
import hmac

import pytest

from pharmacart.domain.errors import SignatureMismatch
from pharmacart.services.payment_verifier import PaymentVerifier


def test_expected_signature_is_hmac_sha256_of_order_and_payment():
    verifier = PaymentVerifier("s3cret")
    expected = hmac.new(b"s3cret", b"order_1|pay_1", hashlib.sha256).hexdigest()

    assert verifier.expected_signature("order_1", "pay_1") == expected
    verifier.verify("order_1", "pay_1", expected)


@pytest.mark.parametrize(
    "order_id, payment_id",
    [("order_2", "pay_1"), ("order_1", "pay_2"), ("order_1|pay_1", "")],
)
def test_any_changed_field_breaks_signature(order_id, payment_id):
    verifier = PaymentVerifier("s3cret")
    signature = verifier.expected_signature("order_1", "pay_1")

    with pytest.raises(SignatureMismatch) as exc:
        verifier.verify(order_id, payment_id, signature)
    assert exc.value.message == "Invalid Signature"
    assert exc.value.status_code == 400


def test_empty_signature_rejected():
    with pytest.raises(SignatureMismatch):
        PaymentVerifier("s3cret").verify("order_1", "pay_1", "")


@pytest.mark.parametrize("secret", ["", None])
def test_missing_secret_rejects_every_signature(monkeypatch, secret):
    import pharmacart.services.payment_verifier as payment_verifier

    monkeypatch.setattr(payment_verifier, "RAZORPAY_KEY_SECRET", "")
    verifier = PaymentVerifier(secret)
    forged = hmac.new(b"", b"order_1|pay_1", hashlib.sha256).hexdigest()

    with pytest.raises(SignatureMismatch):
        verifier.verify("order_1", "pay_1", forged)
