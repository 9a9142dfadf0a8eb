"""Razorpay payment gateway adapter.

Uses the official ``razorpay`` SDK both to create processor orders and to
verify checkout signatures; the SDK signs with the key secret held by the
client.
"""

import razorpay
import structlog
from razorpay.errors import BadRequestError, ServerError, SignatureVerificationError
from razorpay.errors import GatewayError as RazorpaySDKError

from payments.gateway.port import GatewayError, PaymentGateway, PaymentIntent

logger = structlog.get_logger(__name__)


class RazorpayGateway(PaymentGateway):
    """Production Razorpay adapter."""

    def __init__(self, key_id: str, key_secret: str, client=None) -> None:
        self.key_id = key_id
        self.client = client or razorpay.Client(auth=(key_id, key_secret))

    def create_payment_intent(
        self,
        amount_minor_units: int,
        currency: str,
        receipt: str,
        notes: dict | None = None,
    ) -> PaymentIntent:
        try:
            response = self.client.order.create(
                {
                    "amount": amount_minor_units,
                    "currency": currency,
                    "receipt": receipt,
                    "notes": notes or {},
                }
            )
        except BadRequestError as exc:
            logger.warning("Razorpay rejected order creation", receipt=receipt, error=str(exc))
            raise GatewayError("Payment processor rejected the request") from exc
        except (ServerError, RazorpaySDKError) as exc:
            logger.error("Razorpay order creation failed", receipt=receipt, error=str(exc))
            raise GatewayError("Payment processor is unavailable") from exc
        except OSError as exc:
            logger.error("Razorpay unreachable", receipt=receipt, error=str(exc))
            raise GatewayError("Payment processor is unreachable") from exc

        if not response or "id" not in response:
            raise GatewayError("Payment processor returned an unusable response")

        return PaymentIntent(
            intent_id=response["id"],
            amount_minor_units=int(response.get("amount", amount_minor_units)),
            currency=response.get("currency", currency),
            receipt=response.get("receipt", receipt),
            key_id=self.key_id,
            status=response.get("status", "created"),
            raw=response,
        )

    def verify_payment_signature(self, processor_order_id: str, processor_payment_id: str, signature: str) -> bool:
        if not signature:
            return False
        try:
            self.client.utility.verify_payment_signature(
                {
                    "razorpay_order_id": processor_order_id,
                    "razorpay_payment_id": processor_payment_id,
                    "razorpay_signature": signature,
                }
            )
        except SignatureVerificationError:
            return False
        return True
