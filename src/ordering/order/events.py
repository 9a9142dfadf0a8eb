"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from ordering.domain import ordering


@ordering.event(part_of="Order")
class OrderPlaced:
    """A cart was materialised into an order at checkout."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    customer_id = Identifier(required=True)
    payment_method = String(required=True)
    status = String(required=True)
    item_count = Integer(required=True)
    subtotal = Float(required=True)
    tax = Float(required=True)
    shipping_cost = Float(required=True)
    total = Float(required=True)
    currency = String(default="INR")
    placed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderStatusChanged:
    """The order moved along its status timeline."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    note = String(max_length=500)
    updated_by = Identifier()
    changed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class PaymentVerified:
    """The processor's signature matched and the order was confirmed."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    customer_id = Identifier(required=True)
    processor_order_id = String(required=True)
    processor_payment_id = String(required=True)
    amount = Float(required=True)
    paid_at = DateTime(required=True)


@ordering.event(part_of="Order")
class PaymentVerificationFailed:
    """The processor's signature did not match; the order was cancelled."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    customer_id = Identifier(required=True)
    processor_order_id = String()
    reason = String(required=True)
    failed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderCancelled:
    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    customer_id = Identifier(required=True)
    reason = String(required=True)
    cancelled_by = String(required=True)
    refund_status = String(required=True)
    refund_amount = Float(default=0.0)
    cancelled_at = DateTime(required=True)


@ordering.event(part_of="Order")
class PendingOrderExpired:
    """A gateway order never completed payment within the allowed window."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    customer_id = Identifier(required=True)
    pending_since = DateTime(required=True)
    expired_at = DateTime(required=True)
