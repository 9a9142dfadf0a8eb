"""Ordering bounded context: Shopping Cart and Order lifecycle.

Handles the buyer's cart, checkout into a pending order, payment
verification against the processor's signature, and the order's status
timeline through delivery or cancellation.
"""

import structlog
from protean.domain import Domain

ordering = Domain(name="ordering")

logger = structlog.get_logger(__name__)
