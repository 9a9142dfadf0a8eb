"""Tests for the Cart aggregate: line management and cached totals."""

import pytest
from ordering.cart.cart import Cart, CartItem, compute_totals
from ordering.cart.events import CartCleared, CartItemAdded, CartItemRemoved, CartItemUpdated, CartPruned
from ordering.products import ProductRecord
from protean.exceptions import ValidationError


def _product(product_id="prod-001", price=100.0, **overrides):
    values = {
        "id": product_id,
        "name": f"Product {product_id}",
        "price_min": price,
        "price_max": price + 50,
        "images": ("front.jpg", "back.jpg"),
        "moq_quantity": 10,
        "moq_unit": "pcs",
    }
    values.update(overrides)
    return ProductRecord(**values)


class TestComputeTotals:
    def test_single_line(self):
        totals = compute_totals([CartItem(product_id="prod-001", quantity=3, price=100.0)])
        assert totals.total_items == 3
        assert totals.total_price == 300.0

    def test_multiple_lines(self):
        totals = compute_totals(
            [
                CartItem(product_id="prod-001", quantity=2, price=49.5),
                CartItem(product_id="prod-002", quantity=1, price=10.0),
            ]
        )
        assert totals.total_items == 3
        assert totals.total_price == 109.0

    def test_empty(self):
        totals = compute_totals([])
        assert totals.total_items == 0
        assert totals.total_price == 0.0


class TestCartCreation:
    def test_create_for_customer(self):
        cart = Cart.create(customer_id="cust-001")
        assert str(cart.customer_id) == "cust-001"
        assert len(cart.items) == 0
        assert cart.total_items == 0
        assert cart.total_price == 0.0

    def test_create_sets_timestamps(self):
        cart = Cart.create(customer_id="cust-001")
        assert cart.created_at is not None
        assert cart.updated_at is not None


class TestAddProduct:
    def test_one_line_totals(self):
        cart = Cart.create(customer_id="cust-001")
        cart.add_product(_product(), 3)
        assert cart.total_items == 3
        assert cart.total_price == 300.0

    def test_captures_price_and_snapshot(self):
        cart = Cart.create(customer_id="cust-001")
        cart.add_product(_product(price=120.0), 2)

        item = cart.items[0]
        assert item.price == 120.0
        assert item.product_snapshot.name == "Product prod-001"
        assert item.product_snapshot.image == "front.jpg"
        assert item.product_snapshot.moq_quantity == 10
        assert item.product_snapshot.moq_unit == "pcs"

    def test_same_product_sums_quantities(self):
        cart = Cart.create(customer_id="cust-001")
        cart.add_product(_product(), 2)
        cart.add_product(_product(), 3)
        assert len(cart.items) == 1
        assert cart.items[0].quantity == 5
        assert cart.total_items == 5

    def test_existing_line_keeps_original_price(self):
        cart = Cart.create(customer_id="cust-001")
        cart.add_product(_product(price=100.0), 1)
        cart.add_product(_product(price=150.0), 1)
        assert cart.items[0].price == 100.0
        assert cart.total_price == 200.0

    def test_raises_item_added_event(self):
        cart = Cart.create(customer_id="cust-001")
        cart.add_product(_product(), 2)
        event = cart._events[-1]
        assert isinstance(event, CartItemAdded)
        assert event.quantity == 2
        assert event.unit_price == 100.0


class TestChangeQuantity:
    def test_replaces_quantity(self):
        cart = Cart.create(customer_id="cust-001")
        cart.add_product(_product(), 2)
        cart.change_quantity("prod-001", 7)
        assert cart.items[0].quantity == 7
        assert cart.total_items == 7
        assert cart.total_price == 700.0
        assert isinstance(cart._events[-1], CartItemUpdated)

    def test_zero_removes_line(self):
        cart = Cart.create(customer_id="cust-001")
        cart.add_product(_product(), 2)
        cart.change_quantity("prod-001", 0)
        assert len(cart.items) == 0
        assert cart.total_items == 0
        assert isinstance(cart._events[-1], CartItemRemoved)

    def test_absent_line_rejected(self):
        cart = Cart.create(customer_id="cust-001")
        with pytest.raises(ValidationError):
            cart.change_quantity("prod-404", 2)


class TestRemoveAndClear:
    def test_remove_absent_product_is_noop(self):
        cart = Cart.create(customer_id="cust-001")
        cart.add_product(_product(), 2)
        cart.remove_product("prod-404")
        assert len(cart.items) == 1
        assert cart.total_items == 2

    def test_clear_empty_cart_is_noop(self):
        cart = Cart.create(customer_id="cust-001")
        cart.clear()
        assert len(cart.items) == 0
        assert not any(isinstance(e, CartCleared) for e in cart._events)

    def test_clear_resets_totals(self):
        cart = Cart.create(customer_id="cust-001")
        cart.add_product(_product("prod-001"), 2)
        cart.add_product(_product("prod-002", price=50.0), 1)
        cart.clear()
        assert len(cart.items) == 0
        assert cart.total_items == 0
        assert cart.total_price == 0.0
        assert isinstance(cart._events[-1], CartCleared)


class TestMergeAndPrune:
    def test_merge_is_additive(self):
        cart = Cart.create(customer_id="cust-001")
        cart.add_product(_product("prod-001"), 2)
        cart.merge_guest_lines([(_product("prod-001"), 3), (_product("prod-002", price=20.0), 1)])

        quantities = {str(i.product_id): i.quantity for i in cart.items}
        assert quantities == {"prod-001": 5, "prod-002": 1}
        assert cart.total_items == 6
        assert cart.total_price == 520.0

    def test_prune_drops_listed_products(self):
        cart = Cart.create(customer_id="cust-001")
        cart.add_product(_product("prod-001"), 2)
        cart.add_product(_product("prod-002", price=20.0), 1)
        cart.prune(["prod-002"])

        assert [str(i.product_id) for i in cart.items] == ["prod-001"]
        assert cart.total_items == 2
        assert isinstance(cart._events[-1], CartPruned)

    def test_totals_cannot_be_set_out_of_sync(self):
        cart = Cart.create(customer_id="cust-001")
        cart.add_product(_product(), 2)
        with pytest.raises(ValidationError):
            cart.total_items = 99
