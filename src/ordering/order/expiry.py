"""Pending order expiry: reconciliation sweep for abandoned payments.

Designed to be triggered periodically by an external scheduler via the admin
maintenance endpoint. Gateway orders still ``pending`` beyond the payment
window are cancelled on the system's behalf with their payment marked failed.
"""

from datetime import UTC, datetime, timedelta

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import DateTime, Integer
from protean.utils.globals import current_domain

from ordering.config import get_settings
from ordering.domain import ordering
from ordering.order.order import Order

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class ExpirePendingOrders:
    """Cancel gateway orders left pending beyond the payment window."""

    ttl_minutes = Integer(min_value=1)  # Defaults to PENDING_ORDER_TTL_MINUTES
    as_of = DateTime()  # Optional: defaults to now


@ordering.command_handler(part_of=Order)
class ExpirePendingOrdersHandler:
    @handle(ExpirePendingOrders)
    def expire_pending_orders(self, command):
        as_of = command.as_of or datetime.now(UTC)
        ttl_minutes = command.ttl_minutes or get_settings().pending_order_ttl_minutes
        cutoff = (as_of - timedelta(minutes=ttl_minutes)).replace(tzinfo=None)

        logger.info("Checking for expired pending orders", cutoff=cutoff.isoformat(), ttl_minutes=ttl_minutes)

        repo = current_domain.repository_for(Order)
        stale = [
            order
            for order in repo.pending_gateway_orders()
            if order.created_at and order.created_at.replace(tzinfo=None) <= cutoff
        ]

        expired_count = 0
        for order in stale:
            try:
                order.expire()
            except ValidationError as exc:
                logger.warning("Failed to expire order", order_id=str(order.id), error=str(exc))
                continue
            repo.add(order)
            expired_count += 1
            logger.info("Expired pending order", order_id=str(order.id), order_number=order.order_number)

        logger.info("Pending order expiry complete", expired_count=expired_count)
        return expired_count
