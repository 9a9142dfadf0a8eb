"""Configurable fake payment gateway for development and testing.

Simulates the processor without any external calls. It can be configured at
runtime to succeed or fail intent creation, and it signs confirmations with
the same HMAC scheme as the real processor so tests can produce valid (and
tampered) signatures.
"""

from uuid import uuid4

from payments.gateway.port import GatewayError, PaymentGateway, PaymentIntent
from payments.signature import PaymentSignatureVerifier


class FakeGateway(PaymentGateway):
    """Configurable fake payment gateway."""

    def __init__(self, secret: str = "fake-signing-secret") -> None:
        self.verifier = PaymentSignatureVerifier(secret)
        self.should_succeed: bool = True
        self.failure_reason: str = "Processor unavailable"
        self.calls: list[dict] = []

    def configure(self, should_succeed: bool, failure_reason: str = "Processor unavailable") -> None:
        """Configure gateway behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def create_payment_intent(
        self,
        amount_minor_units: int,
        currency: str,
        receipt: str,
        notes: dict | None = None,
    ) -> PaymentIntent:
        self.calls.append(
            {
                "method": "create_payment_intent",
                "amount_minor_units": amount_minor_units,
                "currency": currency,
                "receipt": receipt,
                "notes": notes or {},
            }
        )

        if not self.should_succeed:
            raise GatewayError(self.failure_reason)

        return PaymentIntent(
            intent_id=f"order_fake{uuid4().hex[:14]}",
            amount_minor_units=amount_minor_units,
            currency=currency,
            receipt=receipt,
            key_id="rzp_test_fake",
        )

    def verify_payment_signature(self, processor_order_id: str, processor_payment_id: str, signature: str) -> bool:
        self.calls.append(
            {
                "method": "verify_payment_signature",
                "processor_order_id": processor_order_id,
                "processor_payment_id": processor_payment_id,
            }
        )
        return self.verifier.verify(processor_order_id, processor_payment_id, signature)

    def sign(self, processor_order_id: str, processor_payment_id: str) -> str:
        """Produce the signature the processor would send back on success."""
        return self.verifier.expected_signature(processor_order_id, processor_payment_id)

    @property
    def intents_created(self) -> int:
        return sum(1 for call in self.calls if call["method"] == "create_payment_intent")
