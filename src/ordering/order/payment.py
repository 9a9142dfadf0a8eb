"""Payment verification gate: command, handler and caller helper.

The handler records the outcome (confirmed or cancelled) and returns it
instead of raising, so the compensating cancel on a bad signature is
committed with the unit of work. ``verify_payment()`` raises
VerificationFailed to the caller after that commit.
"""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from ordering.cart.cart import Cart
from ordering.domain import ordering
from ordering.order.order import Order, OrderStatus
from payments.gateway import get_gateway
from shared.errors import InvalidRequest, NotFound, Unauthorized, VerificationFailed

logger = structlog.get_logger(__name__)

CONFIRMED = "confirmed"
ALREADY_CONFIRMED = "already_confirmed"
FAILED = "failed"


@ordering.command(part_of="Order")
class VerifyPayment:
    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    razorpay_order_id = String(required=True, max_length=255)
    razorpay_payment_id = Text(required=True)
    razorpay_signature = Text()


@ordering.command_handler(part_of=Order)
class VerifyPaymentHandler:
    @handle(VerifyPayment)
    def verify_payment(self, command):
        repo = current_domain.repository_for(Order)
        try:
            order = repo.get(command.order_id)
        except ObjectNotFoundError as exc:
            raise NotFound("Order not found") from exc

        if not order.is_owned_by(command.customer_id):
            raise Unauthorized("Not authorized to access this order")

        if order.payment.razorpay_order_id != command.razorpay_order_id:
            raise InvalidRequest("Payment does not belong to this order")

        if OrderStatus(order.status) != OrderStatus.PENDING:
            if (
                OrderStatus(order.status) == OrderStatus.CONFIRMED
                and order.payment.razorpay_payment_id == command.razorpay_payment_id
            ):
                return ALREADY_CONFIRMED
            raise InvalidRequest("Order is not awaiting payment")

        verified = get_gateway().verify_payment_signature(
            command.razorpay_order_id,
            command.razorpay_payment_id,
            command.razorpay_signature,
        )

        if not verified:
            order.fail_payment()
            repo.add(order)
            logger.warning("Payment verification failed", order_id=str(order.id), order_number=order.order_number)
            return FAILED

        order.confirm_payment(
            razorpay_payment_id=command.razorpay_payment_id,
            razorpay_signature=command.razorpay_signature,
        )
        repo.add(order)

        cart_repo = current_domain.repository_for(Cart)
        cart = cart_repo.find_for_customer(order.customer_id)
        if cart is not None:
            cart.clear(reason="order_confirmed")
            cart_repo.add(cart)

        logger.info("Payment verified", order_id=str(order.id), order_number=order.order_number)
        return CONFIRMED


def verify_payment(order_id, customer_id, razorpay_order_id, razorpay_payment_id, razorpay_signature) -> Order:
    """Run VerifyPayment and return the updated order.

    Raises:
        VerificationFailed: the signature did not match; the order has been
            cancelled.
    """
    outcome = current_domain.process(
        VerifyPayment(
            order_id=str(order_id),
            customer_id=str(customer_id),
            razorpay_order_id=razorpay_order_id,
            razorpay_payment_id=razorpay_payment_id,
            razorpay_signature=razorpay_signature,
        ),
        asynchronous=False,
    )
    if outcome == FAILED:
        raise VerificationFailed("Payment verification failed")
    return current_domain.repository_for(Order).get(str(order_id))
