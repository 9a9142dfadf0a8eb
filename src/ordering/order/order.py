"""Order aggregate (CQRS): a cart materialised at checkout.

Line items, shipping address and pricing are frozen when the order is placed
and never change afterwards. Payment and cancellation details are embedded
value objects, replaced whole on every change. Every status change appends
exactly one entry to ``status_history``; the history is never rewritten.

State Machine:
    pending → confirmed → processing → shipped → delivered
    pending/confirmed → cancelled (CancelOrder, payment failure, expiry)
"""

from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import (
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)
from protean.utils.reflection import declared_fields

from ordering.domain import ordering
from ordering.order.events import (
    OrderCancelled,
    OrderPlaced,
    OrderStatusChanged,
    PaymentVerificationFailed,
    PaymentVerified,
    PendingOrderExpired,
)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentMethod(Enum):
    RAZORPAY = "razorpay"
    COD = "cod"
    BANK_TRANSFER = "bank_transfer"


class PaymentStatus(Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"


class CancelledBy(Enum):
    USER = "user"
    ADMIN = "admin"
    SYSTEM = "system"


class RefundStatus(Enum):
    NOT_APPLICABLE = "not_applicable"
    PENDING = "pending"
    PROCESSED = "processed"
    FAILED = "failed"


# Transitions reachable through UpdateOrderStatus. Cancellation has its own
# entry points.
_FORWARD_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED},
    OrderStatus.CONFIRMED: {OrderStatus.PROCESSING, OrderStatus.SHIPPED, OrderStatus.DELIVERED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.DELIVERED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),
    OrderStatus.CANCELLED: set(),
}

_CANCELLABLE_STATES = {OrderStatus.PENDING, OrderStatus.CONFIRMED}

PAYMENT_SIGNATURE_FAILURE = "Signature verification failed"
PAYMENT_WINDOW_EXPIRED = "Payment window expired"


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@ordering.value_object(part_of="Order")
class ShippingAddress:
    """Delivery address captured at checkout, independent of saved addresses."""

    full_name = String(required=True, max_length=255)
    phone = String(required=True, max_length=20)
    address_line1 = String(required=True, max_length=255)
    address_line2 = String(max_length=255)
    city = String(required=True, max_length=100)
    state = String(required=True, max_length=100)
    pincode = String(required=True, max_length=20)
    country = String(max_length=100, default="India")


@ordering.value_object(part_of="Order")
class OrderPricing:
    subtotal = Float(default=0.0)
    tax = Float(default=0.0)
    shipping_cost = Float(default=0.0)
    total = Float(default=0.0)
    currency = String(max_length=3, default="INR")


@ordering.value_object(part_of="Order")
class ItemSnapshot:
    """Catalogue display fields copied when the order was placed."""

    name = String(required=True, max_length=255)
    image = String(max_length=1000)
    description = Text()
    category = String(max_length=255, default="Uncategorized")


@ordering.value_object(part_of="Order")
class PaymentDetails:
    method = String(choices=PaymentMethod, required=True)
    status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    razorpay_order_id = String(max_length=255)
    razorpay_payment_id = String(max_length=255)
    razorpay_signature = String(max_length=255)
    paid_at = DateTime()
    failure_reason = String(max_length=500)


@ordering.value_object(part_of="Order")
class Cancellation:
    reason = String(required=True, max_length=500)
    cancelled_by = String(choices=CancelledBy, required=True)
    refund_status = String(choices=RefundStatus, default=RefundStatus.NOT_APPLICABLE.value)
    refund_amount = Float(default=0.0)


@ordering.value_object(part_of="Order")
class Tracking:
    carrier = String(max_length=100)
    tracking_number = String(max_length=255)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ordering.entity(part_of="Order")
class OrderItem:
    product_id = Identifier(required=True)
    snapshot = ValueObject(ItemSnapshot)
    quantity = Integer(required=True, min_value=1)
    price = Float(required=True, min_value=0.0)
    subtotal = Float(required=True, min_value=0.0)


@ordering.entity(part_of="Order")
class StatusEntry:
    """One entry of the order's append-only status timeline."""

    sequence = Integer(required=True, min_value=1)
    status = String(choices=OrderStatus, required=True)
    note = String(max_length=500)
    updated_by = String(max_length=255)
    timestamp = DateTime(required=True)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@ordering.aggregate
class Order:
    order_number = String(required=True, max_length=50, unique=True)
    customer_id = Identifier(required=True)
    items = HasMany(OrderItem)
    shipping_address = ValueObject(ShippingAddress)
    pricing = ValueObject(OrderPricing)
    payment = ValueObject(PaymentDetails)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    status_history = HasMany(StatusEntry)
    tracking = ValueObject(Tracking)
    cancellation = ValueObject(Cancellation)
    confirmed_at = DateTime()
    shipped_at = DateTime()
    delivered_at = DateTime()
    cancelled_at = DateTime()
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def total_must_equal_sum_of_parts(self):
        if self.pricing is None:
            return
        expected = (self.pricing.subtotal or 0.0) + (self.pricing.tax or 0.0) + (self.pricing.shipping_cost or 0.0)
        if abs((self.pricing.total or 0.0) - expected) > 0.005:
            raise ValidationError({"pricing": ["Order total must equal subtotal plus tax plus shipping"]})

    @invariant.post
    def cancellation_only_on_cancelled_orders(self):
        if self.cancellation is not None and self.status != OrderStatus.CANCELLED.value:
            raise ValidationError({"cancellation": ["Only cancelled orders carry cancellation details"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        customer_id,
        order_number,
        items_data,
        shipping_address,
        pricing,
        payment_method,
        razorpay_order_id=None,
    ):
        """Materialise a checkout into an order.

        Gateway orders start ``pending`` until their payment is verified.
        Cash-on-delivery orders are confirmed straight away with payment left
        ``pending`` until delivery.

        Args:
            items_data: list of dicts with product_id, name, image,
                description, category, quantity, price.
            shipping_address: dict of ShippingAddress fields.
            pricing: a ``PricingBreakdown``.
        """
        now = datetime.now(UTC)
        method = PaymentMethod(payment_method)
        initial_status = OrderStatus.CONFIRMED if method == PaymentMethod.COD else OrderStatus.PENDING

        order = cls(
            order_number=order_number,
            customer_id=customer_id,
            shipping_address=ShippingAddress(**shipping_address),
            pricing=OrderPricing(
                subtotal=pricing.subtotal,
                tax=pricing.tax,
                shipping_cost=pricing.shipping_cost,
                total=pricing.total,
                currency=pricing.currency,
            ),
            payment=PaymentDetails(
                method=method.value,
                status=PaymentStatus.PENDING.value,
                razorpay_order_id=razorpay_order_id,
            ),
            status=initial_status.value,
            confirmed_at=now if initial_status == OrderStatus.CONFIRMED else None,
            created_at=now,
            updated_at=now,
        )

        for item in items_data:
            order.add_items(
                OrderItem(
                    product_id=item["product_id"],
                    snapshot=ItemSnapshot(
                        name=item["name"],
                        image=item.get("image"),
                        description=item.get("description"),
                        category=item.get("category") or "Uncategorized",
                    ),
                    quantity=item["quantity"],
                    price=item["price"],
                    subtotal=round(item["price"] * item["quantity"], 2),
                )
            )

        note = "Cash on delivery order placed" if method == PaymentMethod.COD else "Order placed, awaiting payment"
        order._append_history(initial_status, note=note, updated_by=str(customer_id), at=now)

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                order_number=order_number,
                customer_id=str(customer_id),
                payment_method=method.value,
                status=initial_status.value,
                item_count=len(items_data),
                subtotal=pricing.subtotal,
                tax=pricing.tax,
                shipping_cost=pricing.shipping_cost,
                total=pricing.total,
                currency=pricing.currency,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------
    @property
    def timeline(self):
        """Status history in the order it was appended."""
        return sorted(self.status_history, key=lambda entry: entry.sequence)

    @property
    def can_be_cancelled(self) -> bool:
        return OrderStatus(self.status) in _CANCELLABLE_STATES

    def can_advance_to(self, new_status) -> bool:
        return OrderStatus(new_status) in _FORWARD_TRANSITIONS.get(OrderStatus(self.status), set())

    def is_owned_by(self, customer_id) -> bool:
        return str(self.customer_id) == str(customer_id)

    def _append_history(self, status, note=None, updated_by=None, at=None):
        self.add_status_history(
            StatusEntry(
                sequence=len(self.status_history) + 1,
                status=status.value,
                note=note,
                updated_by=updated_by,
                timestamp=at or datetime.now(UTC),
            )
        )

    def _change_status(self, new_status, note=None, updated_by=None):
        """Set the status and record exactly one history entry for the change."""
        previous = self.status
        now = datetime.now(UTC)
        self.status = new_status.value
        self._append_history(new_status, note=note, updated_by=updated_by, at=now)
        self.updated_at = now

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                order_number=self.order_number,
                previous_status=previous,
                new_status=new_status.value,
                note=note,
                updated_by=updated_by,
                changed_at=now,
            )
        )
        return now

    def _update_payment(self, **changes):
        values = {name: getattr(self.payment, name) for name in declared_fields(self.payment)}
        values.update(changes)
        self.payment = PaymentDetails(**values)

    def _assert_cancellable(self):
        if OrderStatus(self.status) not in _CANCELLABLE_STATES:
            raise ValidationError({"status": [f"Order cannot be cancelled once it is {self.status}"]})

    def _cancel(self, reason, cancelled_by, note, updated_by):

        refund_pending = self.payment is not None and self.payment.status == PaymentStatus.COMPLETED.value
        refund_status = RefundStatus.PENDING if refund_pending else RefundStatus.NOT_APPLICABLE
        refund_amount = self.pricing.total if refund_pending else 0.0

        now = self._change_status(OrderStatus.CANCELLED, note=note, updated_by=updated_by)
        self.cancellation = Cancellation(
            reason=reason,
            cancelled_by=cancelled_by.value,
            refund_status=refund_status.value,
            refund_amount=refund_amount,
        )
        self.cancelled_at = now
        return now

    # -------------------------------------------------------------------
    # Payment
    # -------------------------------------------------------------------
    def confirm_payment(self, razorpay_payment_id, razorpay_signature):
        """Record a verified payment and move the order to confirmed."""
        if OrderStatus(self.status) != OrderStatus.PENDING:
            raise ValidationError({"status": ["Only pending orders can be confirmed by payment"]})

        with atomic_change(self):
            now = self._change_status(OrderStatus.CONFIRMED, note="Payment verified", updated_by="system")
            self._update_payment(
                status=PaymentStatus.COMPLETED.value,
                razorpay_payment_id=razorpay_payment_id,
                razorpay_signature=razorpay_signature,
                paid_at=now,
                failure_reason=None,
            )
            self.confirmed_at = now

        self.raise_(
            PaymentVerified(
                order_id=str(self.id),
                order_number=self.order_number,
                customer_id=str(self.customer_id),
                processor_order_id=self.payment.razorpay_order_id,
                processor_payment_id=razorpay_payment_id,
                amount=self.pricing.total,
                paid_at=now,
            )
        )

    def fail_payment(self, reason=PAYMENT_SIGNATURE_FAILURE):
        """Mark the payment failed and cancel the order on the system's behalf."""
        self._assert_cancellable()
        with atomic_change(self):
            self._update_payment(status=PaymentStatus.FAILED.value, failure_reason=reason)
            now = self._cancel(
                reason="Payment verification failed",
                cancelled_by=CancelledBy.SYSTEM,
                note=reason,
                updated_by="system",
            )

        self.raise_(
            PaymentVerificationFailed(
                order_id=str(self.id),
                order_number=self.order_number,
                customer_id=str(self.customer_id),
                processor_order_id=self.payment.razorpay_order_id,
                reason=reason,
                failed_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Cancellation
    # -------------------------------------------------------------------
    def cancel(self, reason, cancelled_by, updated_by=None):
        """Cancel a pending or confirmed order.

        The refund is marked ``pending`` only when the payment had already
        completed; otherwise there is nothing to refund.
        """
        cancelled_by = CancelledBy(cancelled_by)
        self._assert_cancellable()
        with atomic_change(self):
            now = self._cancel(reason=reason, cancelled_by=cancelled_by, note=reason, updated_by=updated_by)

        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                order_number=self.order_number,
                customer_id=str(self.customer_id),
                reason=reason,
                cancelled_by=cancelled_by.value,
                refund_status=self.cancellation.refund_status,
                refund_amount=self.cancellation.refund_amount,
                cancelled_at=now,
            )
        )

    def expire(self):
        """Cancel a gateway order whose payment never arrived."""
        if OrderStatus(self.status) != OrderStatus.PENDING:
            raise ValidationError({"status": ["Only pending orders can expire"]})

        pending_since = self.created_at
        with atomic_change(self):
            self._update_payment(status=PaymentStatus.FAILED.value, failure_reason=PAYMENT_WINDOW_EXPIRED)
            now = self._cancel(
                reason=PAYMENT_WINDOW_EXPIRED,
                cancelled_by=CancelledBy.SYSTEM,
                note=PAYMENT_WINDOW_EXPIRED,
                updated_by="system",
            )

        self.raise_(
            PendingOrderExpired(
                order_id=str(self.id),
                order_number=self.order_number,
                customer_id=str(self.customer_id),
                pending_since=pending_since,
                expired_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Fulfilment
    # -------------------------------------------------------------------
    def advance_status(self, new_status, note=None, updated_by=None, tracking_number=None, carrier=None):
        """Move the order forward along its timeline (admin or carrier driven)."""
        target = OrderStatus(new_status)
        current = OrderStatus(self.status)
        if target == OrderStatus.CANCELLED:
            raise ValidationError({"status": ["Use order cancellation to cancel an order"]})
        if target not in _FORWARD_TRANSITIONS.get(current, set()):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target.value}"]})

        with atomic_change(self):
            now = self._change_status(target, note=note, updated_by=updated_by)

            if target == OrderStatus.CONFIRMED and self.confirmed_at is None:
                self.confirmed_at = now

            if target == OrderStatus.SHIPPED:
                if self.shipped_at is None:
                    self.shipped_at = now
                if tracking_number or carrier:
                    self.tracking = Tracking(
                        carrier=carrier or (self.tracking.carrier if self.tracking else None),
                        tracking_number=tracking_number or (self.tracking.tracking_number if self.tracking else None),
                    )

            if target == OrderStatus.DELIVERED:
                if self.delivered_at is None:
                    self.delivered_at = now
                if self.payment.method == PaymentMethod.COD.value and self.payment.status != PaymentStatus.COMPLETED.value:
                    self._update_payment(status=PaymentStatus.COMPLETED.value, paid_at=now)

    # -------------------------------------------------------------------
    # Projections
    # -------------------------------------------------------------------
    def tracking_view(self) -> dict:
        """Public tracking projection: no pricing, address or payment detail."""
        return {
            "order_number": self.order_number,
            "status": self.status,
            "status_history": [_entry_view(entry) for entry in self.timeline],
            "tracking": {
                "carrier": self.tracking.carrier if self.tracking else None,
                "tracking_number": self.tracking.tracking_number if self.tracking else None,
            },
            "created_at": self.created_at,
            "shipped_at": self.shipped_at,
            "delivered_at": self.delivered_at,
        }

    def to_dict_view(self) -> dict:
        address = self.shipping_address
        return {
            "order_id": str(self.id),
            "order_number": self.order_number,
            "customer_id": str(self.customer_id),
            "status": self.status,
            "items": [
                {
                    "product_id": str(item.product_id),
                    "name": item.snapshot.name,
                    "image": item.snapshot.image,
                    "description": item.snapshot.description,
                    "category": item.snapshot.category,
                    "quantity": item.quantity,
                    "price": item.price,
                    "subtotal": item.subtotal,
                }
                for item in self.items
            ],
            "shipping_address": {name: getattr(address, name) for name in declared_fields(address)} if address else None,
            "pricing": {
                "subtotal": self.pricing.subtotal,
                "tax": self.pricing.tax,
                "shipping_cost": self.pricing.shipping_cost,
                "total": self.pricing.total,
                "currency": self.pricing.currency,
            },
            "payment": {
                "method": self.payment.method,
                "status": self.payment.status,
                "razorpay_order_id": self.payment.razorpay_order_id,
                "razorpay_payment_id": self.payment.razorpay_payment_id,
                "paid_at": self.payment.paid_at,
                "failure_reason": self.payment.failure_reason,
            },
            "status_history": [_entry_view(entry) for entry in self.timeline],
            "tracking": {
                "carrier": self.tracking.carrier if self.tracking else None,
                "tracking_number": self.tracking.tracking_number if self.tracking else None,
            },
            "cancellation": (
                {
                    "reason": self.cancellation.reason,
                    "cancelled_by": self.cancellation.cancelled_by,
                    "refund_status": self.cancellation.refund_status,
                    "refund_amount": self.cancellation.refund_amount,
                }
                if self.cancellation
                else None
            ),
            "confirmed_at": self.confirmed_at,
            "shipped_at": self.shipped_at,
            "delivered_at": self.delivered_at,
            "cancelled_at": self.cancelled_at,
            "created_at": self.created_at,
        }


def _entry_view(entry) -> dict:
    return {
        "status": entry.status,
        "note": entry.note,
        "updated_by": entry.updated_by,
        "timestamp": entry.timestamp,
    }


def _naive(value):
    return value.replace(tzinfo=None) if value is not None else datetime.min


@ordering.repository(part_of=Order)
class OrderRepository:
    def find_by_order_number(self, order_number):
        results = self._dao.query.filter(order_number=order_number).all().items
        return results[0] if results else None

    def for_customer(self, customer_id):
        """Orders placed by a customer, newest first."""
        orders = self._dao.query.filter(customer_id=str(customer_id)).limit(None).all().items
        return sorted(orders, key=lambda o: _naive(o.created_at), reverse=True)

    def all_orders(self, status=None):
        """Every order, optionally restricted to one status, newest first."""
        query = self._dao.query
        if status:
            query = query.filter(status=status)
        orders = query.limit(None).all().items
        return sorted(orders, key=lambda o: _naive(o.created_at), reverse=True)

    def pending_gateway_orders(self):
        orders = self._dao.query.filter(status=OrderStatus.PENDING.value).limit(None).all().items
        return [o for o in orders if o.payment and o.payment.method != PaymentMethod.COD.value]
