"""Payment signature verification.

The processor signs ``"<processor_order_id>|<processor_payment_id>"`` with
HMAC-SHA256 keyed by the merchant secret. The secret is supplied by whoever
constructs the verifier; nothing here reads configuration.
"""

import hashlib
import hmac


class PaymentSignatureVerifier:
    def __init__(self, secret: str) -> None:
        if not secret:
            raise ValueError("A signing secret is required")
        self._secret = secret.encode("utf-8")

    def expected_signature(self, processor_order_id: str, processor_payment_id: str) -> str:
        message = f"{processor_order_id}|{processor_payment_id}".encode()
        return hmac.new(self._secret, message, hashlib.sha256).hexdigest()

    def verify(self, processor_order_id: str, processor_payment_id: str, signature: str | None) -> bool:
        """Constant-time comparison against the expected hex digest."""
        if not signature:
            return False
        expected = self.expected_signature(processor_order_id, processor_payment_id)
        return hmac.compare_digest(expected.encode(), signature.encode())

    def __repr__(self) -> str:
        return "PaymentSignatureVerifier(secret=***)"
