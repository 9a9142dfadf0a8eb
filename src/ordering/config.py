"""Checkout business constants, loaded from the environment."""

import os
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum


class MOQPolicy(Enum):
    """How a line quantity is compared against the product's MOQ.

    ``maximum`` treats the MOQ as a ceiling (a line may not exceed it).
    ``minimum`` treats it as the conventional B2B floor. The storefront has
    always enforced ``maximum``; the product owner has not confirmed which
    reading is intended.
    """

    MAXIMUM = "maximum"
    MINIMUM = "minimum"

    def violated_by(self, quantity: int, moq_quantity: int | None) -> bool:
        if moq_quantity is None:
            return False
        if self is MOQPolicy.MAXIMUM:
            return quantity > moq_quantity
        return quantity < moq_quantity

    def describe(self, moq_quantity: int, unit: str | None) -> str:
        label = "Maximum" if self is MOQPolicy.MAXIMUM else "Minimum"
        return f"{label} order quantity is {moq_quantity} {unit or ''}".rstrip()


@dataclass(frozen=True)
class CheckoutSettings:
    tax_rate: Decimal = Decimal("0.18")
    free_shipping_threshold: Decimal = Decimal("5000")
    flat_shipping_fee: Decimal = Decimal("100")
    currency: str = "INR"
    moq_policy: MOQPolicy = MOQPolicy.MAXIMUM
    pending_order_ttl_minutes: int = 60

    @classmethod
    def from_env(cls) -> "CheckoutSettings":
        return cls(
            tax_rate=Decimal(os.getenv("TAX_RATE", "0.18")),
            free_shipping_threshold=Decimal(os.getenv("FREE_SHIPPING_THRESHOLD", "5000")),
            flat_shipping_fee=Decimal(os.getenv("FLAT_SHIPPING_FEE", "100")),
            currency=os.getenv("ORDER_CURRENCY", "INR"),
            moq_policy=MOQPolicy(os.getenv("MOQ_POLICY", MOQPolicy.MAXIMUM.value)),
            pending_order_ttl_minutes=int(os.getenv("PENDING_ORDER_TTL_MINUTES", "60")),
        )


_settings: CheckoutSettings | None = None


def get_settings() -> CheckoutSettings:
    global _settings
    if _settings is None:
        _settings = CheckoutSettings.from_env()
    return _settings


def set_settings(settings: CheckoutSettings) -> None:
    """Override the active settings (useful for tests)."""
    global _settings
    _settings = settings


def reset_settings() -> None:
    global _settings
    _settings = None
