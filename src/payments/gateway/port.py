"""Payment gateway port (abstract interface).

Defines the contract every payment processor adapter implements. The ordering
core requests a payment intent at checkout and verifies the processor's
signed confirmation locally; it never calls back to the processor to verify.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


class GatewayError(Exception):
    """The processor call failed or returned an unusable response."""


@dataclass(frozen=True)
class PaymentIntent:
    """A processor-side reservation of an amount to be collected."""

    intent_id: str
    amount_minor_units: int
    currency: str
    receipt: str
    key_id: str | None = None
    status: str = "created"
    raw: dict = field(default_factory=dict)


class PaymentGateway(ABC):
    """Abstract payment gateway interface."""

    @abstractmethod
    def create_payment_intent(
        self,
        amount_minor_units: int,
        currency: str,
        receipt: str,
        notes: dict | None = None,
    ) -> PaymentIntent:
        """Reserve ``amount_minor_units`` with the processor.

        Raises:
            GatewayError: when the processor rejects or fails the request.
        """
        ...

    @abstractmethod
    def verify_payment_signature(
        self,
        processor_order_id: str,
        processor_payment_id: str,
        signature: str,
    ) -> bool:
        """Check the processor's signed payment confirmation."""
        ...
