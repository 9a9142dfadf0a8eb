"""Shared BDD fixtures and step definitions for the Ordering domain."""

import json

import pytest
from ordering.cart.cart import Cart
from ordering.cart.items import AddToCart
from ordering.order.order import Order
from protean import current_domain
from pytest_bdd import given, parsers, then


@pytest.fixture()
def context():
    """Mutable scenario state: the customer, checkout result and captured error."""
    return {"customer_id": None, "checkout": None, "error": None}


def current_order(context) -> Order:
    return current_domain.repository_for(Order).get(context["checkout"]["order_id"])


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('the buyer "{customer_id}" has {quantity:d} of "{product_id}" in the cart'))
def _(context, customer_id, quantity, product_id):
    context["customer_id"] = customer_id
    current_domain.process(
        AddToCart(customer_id=customer_id, product_id=product_id, quantity=quantity),
        asynchronous=False,
    )


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order is "{status}"'))
def _(context, status):
    assert current_order(context).status == status


@then(parsers.cfparse("the order total is {total:f}"))
def _(context, total):
    assert current_order(context).pricing.total == total


@then(parsers.cfparse('the payment is "{status}"'))
def _(context, status):
    assert current_order(context).payment.status == status


@then(parsers.cfparse('the refund is "{status}"'))
def _(context, status):
    assert current_order(context).cancellation.refund_status == status


@then(parsers.cfparse('the status history reads "{statuses}"'))
def _(context, statuses):
    expected = [s.strip() for s in statuses.split(",")]
    assert [entry.status for entry in current_order(context).timeline] == expected


@then("the cart is empty")
def _(context):
    cart = current_domain.repository_for(Cart).find_for_customer(context["customer_id"])
    assert len(cart.items) == 0
    assert cart.total_items == 0


@then(parsers.cfparse("the cart still holds {count:d} items"))
def _(context, count):
    cart = current_domain.repository_for(Cart).find_for_customer(context["customer_id"])
    assert cart.total_items == count


@then("the request is refused")
def _(context):
    assert context["error"] is not None


@pytest.fixture()
def address_json():
    return json.dumps(
        {
            "full_name": "Asha Rao",
            "phone": "9876543210",
            "address_line1": "12 MG Road",
            "city": "Bengaluru",
            "state": "Karnataka",
            "pincode": "560001",
        }
    )
