"""Checkout: materialise the buyer's cart into an order.

Gateway checkout reserves the amount with the payment processor and leaves
the order ``pending`` with the cart untouched. Cash-on-delivery checkout
confirms the order straight away and clears the cart. Every precondition is
checked before the processor is called or anything is written.
"""

import json
import time

import structlog
from protean import handle
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain

from ordering.cart.cart import Cart
from ordering.config import get_settings
from ordering.domain import ordering
from ordering.order.numbering import OrderSequence, format_order_number
from ordering.order.order import Order, PaymentMethod
from ordering.order.pricing import compute_pricing
from ordering.products import get_product_lookup
from payments.gateway import GatewayError, get_gateway
from shared.errors import InvalidRequest, Unavailable, UpstreamFailure

logger = structlog.get_logger(__name__)

REQUIRED_ADDRESS_FIELDS = ("full_name", "phone", "address_line1", "city", "state", "pincode")
OPTIONAL_ADDRESS_FIELDS = ("address_line2", "country")


@ordering.command(part_of="Order")
class InitiateCheckout:
    customer_id = Identifier(required=True)
    shipping_address = Text(required=True)  # JSON: address dict


@ordering.command(part_of="Order")
class PlaceCashOnDeliveryOrder:
    customer_id = Identifier(required=True)
    shipping_address = Text(required=True)  # JSON: address dict


def clean_shipping_address(raw) -> dict:
    """Validate and normalise a shipping address, or raise InvalidRequest."""
    address = json.loads(raw) if isinstance(raw, str) else dict(raw or {})

    missing = [name for name in REQUIRED_ADDRESS_FIELDS if not str(address.get(name) or "").strip()]
    if missing:
        raise InvalidRequest(f"Please provide complete shipping address (missing: {', '.join(missing)})")

    cleaned = {name: str(address[name]).strip() for name in REQUIRED_ADDRESS_FIELDS}
    cleaned["address_line2"] = (address.get("address_line2") or "").strip() or None
    cleaned["country"] = (address.get("country") or "").strip() or "India"
    return cleaned


def prepare_checkout(customer_id, raw_address):
    """Everything checkout needs, validated, with no side effects.

    Returns:
        ``(cart, items_data, pricing, address)``
    """
    address = clean_shipping_address(raw_address)

    cart = current_domain.repository_for(Cart).find_for_customer(customer_id)
    if cart is None or not cart.items:
        raise InvalidRequest("Cart is empty")

    lookup = get_product_lookup()
    items_data = []
    for item in sorted(cart.items, key=lambda i: i.added_at or cart.created_at):
        product = lookup.find_product(str(item.product_id))
        if product is None or not product.is_active:
            name = item.product_snapshot.name if item.product_snapshot else "A product"
            raise Unavailable(f"{name} is no longer available")

        items_data.append(
            {
                "product_id": str(item.product_id),
                "name": product.name,
                "image": product.primary_image,
                "description": product.description,
                "category": product.category_name or "Uncategorized",
                "quantity": item.quantity,
                "price": item.price,
            }
        )

    subtotal = sum(line["price"] * line["quantity"] for line in items_data)
    pricing = compute_pricing(subtotal, get_settings())
    return cart, items_data, pricing, address


def allocate_order_number() -> str:
    value = current_domain.repository_for(OrderSequence).next_value()
    return format_order_number(value)


@ordering.command_handler(part_of=Order)
class CheckoutHandler:
    @handle(InitiateCheckout)
    def initiate_checkout(self, command):
        _, items_data, pricing, address = prepare_checkout(command.customer_id, command.shipping_address)

        try:
            intent = get_gateway().create_payment_intent(
                amount_minor_units=pricing.amount_minor_units,
                currency=pricing.currency,
                receipt=f"receipt_{int(time.time() * 1000)}",
                notes={"customer_id": str(command.customer_id)},
            )
        except GatewayError as exc:
            logger.error("Payment intent creation failed", customer_id=str(command.customer_id), error=str(exc))
            raise UpstreamFailure("Could not start payment, please try again") from exc

        order = Order.place(
            customer_id=command.customer_id,
            order_number=allocate_order_number(),
            items_data=items_data,
            shipping_address=address,
            pricing=pricing,
            payment_method=PaymentMethod.RAZORPAY.value,
            razorpay_order_id=intent.intent_id,
        )
        current_domain.repository_for(Order).add(order)

        logger.info(
            "Checkout initiated",
            order_id=str(order.id),
            order_number=order.order_number,
            total=pricing.total,
            razorpay_order_id=intent.intent_id,
        )
        return {
            "order_id": str(order.id),
            "order_number": order.order_number,
            "razorpay_order_id": intent.intent_id,
            "amount": intent.amount_minor_units,
            "currency": intent.currency,
            "key_id": intent.key_id,
        }

    @handle(PlaceCashOnDeliveryOrder)
    def place_cash_on_delivery_order(self, command):
        cart, items_data, pricing, address = prepare_checkout(command.customer_id, command.shipping_address)

        order = Order.place(
            customer_id=command.customer_id,
            order_number=allocate_order_number(),
            items_data=items_data,
            shipping_address=address,
            pricing=pricing,
            payment_method=PaymentMethod.COD.value,
        )
        current_domain.repository_for(Order).add(order)

        cart.clear(reason="order_placed")
        current_domain.repository_for(Cart).add(cart)

        logger.info(
            "Cash on delivery order placed",
            order_id=str(order.id),
            order_number=order.order_number,
            total=pricing.total,
        )
        return {
            "order_id": str(order.id),
            "order_number": order.order_number,
            "amount": pricing.amount_minor_units,
            "currency": pricing.currency,
        }
