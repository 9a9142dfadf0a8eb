"""Payment gateway factory.

Provides get_gateway() / set_gateway() to swap implementations:
- FakeGateway for development and testing (default)
- RazorpayGateway for production

This is the only place that reads gateway credentials from the environment.
"""

import os

from payments.gateway.fake_adapter import FakeGateway
from payments.gateway.port import GatewayError, PaymentGateway, PaymentIntent

_current_gateway: PaymentGateway | None = None


def _build_gateway() -> PaymentGateway:
    kind = os.environ.get("PAYMENT_GATEWAY", "fake")
    if kind == "fake":
        return FakeGateway(secret=os.environ.get("PAYMENT_SIGNING_SECRET", "fake-signing-secret"))
    if kind == "razorpay":
        from payments.gateway.razorpay_adapter import RazorpayGateway

        key_id = os.environ.get("RAZORPAY_KEY_ID")
        key_secret = os.environ.get("RAZORPAY_KEY_SECRET")
        if not key_id or not key_secret:
            raise ValueError("RAZORPAY_KEY_ID and RAZORPAY_KEY_SECRET must be set")
        return RazorpayGateway(key_id=key_id, key_secret=key_secret)
    raise ValueError(f"Unknown payment gateway: {kind}")


def get_gateway() -> PaymentGateway:
    """Return the configured payment gateway (singleton)."""
    global _current_gateway
    if _current_gateway is None:
        _current_gateway = _build_gateway()
    return _current_gateway


def set_gateway(gateway: PaymentGateway) -> None:
    """Override the active payment gateway (useful for tests)."""
    global _current_gateway
    _current_gateway = gateway


def reset_gateway() -> None:
    """Reset to default gateway."""
    global _current_gateway
    _current_gateway = None


__all__ = ["GatewayError", "PaymentGateway", "PaymentIntent", "get_gateway", "set_gateway", "reset_gateway"]
