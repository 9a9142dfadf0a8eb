"""Order cancellation: command and handler.

Only pending or confirmed orders can be cancelled, by their owner or an
admin. A refund is marked pending when the payment had already completed.
"""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Boolean, Identifier, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import CancelledBy, Order
from shared.errors import InvalidRequest, NotFound, Unauthorized

logger = structlog.get_logger(__name__)

DEFAULT_CANCELLATION_REASON = "Cancelled by user"


@ordering.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)
    requested_by = Identifier(required=True)
    by_admin = Boolean(default=False)
    reason = String(max_length=500)


@ordering.command_handler(part_of=Order)
class CancelOrderHandler:
    @handle(CancelOrder)
    def cancel_order(self, command):
        repo = current_domain.repository_for(Order)
        try:
            order = repo.get(command.order_id)
        except ObjectNotFoundError as exc:
            raise NotFound("Order not found") from exc

        if not command.by_admin and not order.is_owned_by(command.requested_by):
            raise Unauthorized("Not authorized to cancel this order")

        if not order.can_be_cancelled:
            raise InvalidRequest(f"Order cannot be cancelled once it is {order.status}")

        cancelled_by = CancelledBy.ADMIN if command.by_admin else CancelledBy.USER
        order.cancel(
            reason=command.reason or DEFAULT_CANCELLATION_REASON,
            cancelled_by=cancelled_by.value,
            updated_by=str(command.requested_by),
        )
        repo.add(order)

        logger.info(
            "Order cancelled",
            order_id=str(order.id),
            order_number=order.order_number,
            cancelled_by=cancelled_by.value,
            refund_status=order.cancellation.refund_status,
        )
        return str(order.id)
