"""Order fulfilment: admin or carrier driven status updates."""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order, OrderStatus
from shared.errors import InvalidRequest, NotFound

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, max_length=50)
    note = String(max_length=500)
    updated_by = Identifier(required=True)
    tracking_number = String(max_length=255)
    carrier = String(max_length=100)


@ordering.command_handler(part_of=Order)
class UpdateOrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_order_status(self, command):
        try:
            target = OrderStatus(command.status)
        except ValueError as exc:
            raise InvalidRequest(f"Unknown order status: {command.status}") from exc

        if target == OrderStatus.CANCELLED:
            raise InvalidRequest("Use order cancellation to cancel an order")

        repo = current_domain.repository_for(Order)
        try:
            order = repo.get(command.order_id)
        except ObjectNotFoundError as exc:
            raise NotFound("Order not found") from exc

        if not order.can_advance_to(target):
            raise InvalidRequest(f"Cannot move order from {order.status} to {target.value}")

        previous = order.status
        order.advance_status(
            target.value,
            note=command.note,
            updated_by=str(command.updated_by),
            tracking_number=command.tracking_number,
            carrier=command.carrier,
        )
        repo.add(order)

        logger.info(
            "Order status changed",
            order_id=str(order.id),
            order_number=order.order_number,
            previous_status=previous,
            new_status=target.value,
        )
        return str(order.id)
