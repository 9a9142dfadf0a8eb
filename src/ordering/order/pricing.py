"""Order pricing: subtotal, tax, shipping and total from checkout constants."""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from ordering.config import CheckoutSettings


@dataclass(frozen=True)
class PricingBreakdown:
    subtotal: float
    tax: float
    shipping_cost: float
    total: float
    currency: str

    @property
    def amount_minor_units(self) -> int:
        """Total expressed in the currency's minor unit (paise for INR)."""
        return int((Decimal(str(self.total)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def compute_pricing(subtotal, settings: CheckoutSettings) -> PricingBreakdown:
    """Pure function of the subtotal and the checkout constants.

    Tax rounds half-up to whole currency units. Shipping is free only when the
    subtotal is strictly above the threshold.
    """
    subtotal = Decimal(str(subtotal))
    tax = (subtotal * settings.tax_rate).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    shipping = Decimal("0") if subtotal > settings.free_shipping_threshold else settings.flat_shipping_fee
    total = subtotal + tax + shipping
    return PricingBreakdown(
        subtotal=float(subtotal),
        tax=float(tax),
        shipping_cost=float(shipping),
        total=float(total),
        currency=settings.currency,
    )
