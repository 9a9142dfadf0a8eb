"""Cart aggregate (CQRS): the buyer's single, lazily created shopping cart.

Each line captures the unit price and a display snapshot of the product at
the moment it was added. The cached ``total_items`` / ``total_price`` are
recomputed by ``compute_totals()`` on every mutation and checked by a post
invariant, so they can never drift from the lines.
"""

import json
from dataclasses import dataclass
from datetime import UTC, datetime

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, ValueObject

from ordering.cart.events import (
    CartCleared,
    CartItemAdded,
    CartItemRemoved,
    CartItemUpdated,
    CartPruned,
    GuestCartSynced,
)
from ordering.domain import ordering


@dataclass(frozen=True)
class CartTotals:
    total_items: int
    total_price: float


def compute_totals(items) -> CartTotals:
    """Totals of any iterable of lines exposing ``quantity`` and ``price``."""
    total_items = 0
    total_price = 0.0
    for item in items:
        total_items += item.quantity
        total_price += item.price * item.quantity
    return CartTotals(total_items=total_items, total_price=round(total_price, 2))


@ordering.value_object(part_of="Cart")
class ProductSnapshot:
    """Display fields of the product frozen at add-time."""

    name = String(required=True, max_length=255)
    image = String(max_length=1000)
    moq_quantity = Integer()
    moq_unit = String(max_length=50)


@ordering.entity(part_of="Cart")
class CartItem:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    price = Float(required=True, min_value=0.0)
    product_snapshot = ValueObject(ProductSnapshot)
    added_at = DateTime()


@ordering.aggregate
class Cart:
    customer_id = Identifier(required=True)
    items = HasMany(CartItem)
    total_items = Integer(default=0)
    total_price = Float(default=0.0)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def cached_totals_must_match_lines(self):
        totals = compute_totals(self.items)
        if self.total_items != totals.total_items or round(self.total_price or 0.0, 2) != totals.total_price:
            raise ValidationError({"totals": ["Cart totals are out of sync with its items"]})

    @classmethod
    def create(cls, customer_id):
        now = datetime.now(UTC)
        return cls(
            customer_id=customer_id,
            total_items=0,
            total_price=0.0,
            created_at=now,
            updated_at=now,
        )

    # -------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------
    def line_for(self, product_id):
        return next((i for i in self.items if str(i.product_id) == str(product_id)), None)

    def _touch(self):
        totals = compute_totals(self.items)
        self.total_items = totals.total_items
        self.total_price = totals.total_price
        self.updated_at = datetime.now(UTC)

    @staticmethod
    def snapshot_of(product) -> ProductSnapshot:
        return ProductSnapshot(
            name=product.name,
            image=product.primary_image,
            moq_quantity=product.moq_quantity,
            moq_unit=product.moq_unit,
        )

    # -------------------------------------------------------------------
    # Line management
    # -------------------------------------------------------------------
    def add_product(self, product, quantity):
        """Add ``quantity`` of a catalogue product, summing into an existing line.

        An existing line keeps the price and snapshot it was first added with.
        """
        with atomic_change(self):
            existing = self.line_for(product.id)
            if existing:
                existing.quantity += quantity
                unit_price = existing.price
            else:
                unit_price = product.price_min
                self.add_items(
                    CartItem(
                        product_id=product.id,
                        quantity=quantity,
                        price=unit_price,
                        product_snapshot=self.snapshot_of(product),
                        added_at=datetime.now(UTC),
                    )
                )
            self._touch()

        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                customer_id=str(self.customer_id),
                product_id=str(product.id),
                quantity=quantity,
                unit_price=unit_price,
            )
        )

    def change_quantity(self, product_id, quantity):
        """Replace a line's quantity. Zero removes the line."""
        item = self.line_for(product_id)
        if item is None:
            raise ValidationError({"product_id": ["Item not found in cart"]})

        if quantity == 0:
            self.remove_product(product_id)
            return

        previous_quantity = item.quantity
        with atomic_change(self):
            item.quantity = quantity
            self._touch()

        self.raise_(
            CartItemUpdated(
                cart_id=str(self.id),
                customer_id=str(self.customer_id),
                product_id=str(product_id),
                previous_quantity=previous_quantity,
                new_quantity=quantity,
            )
        )

    def remove_product(self, product_id):
        """Drop a line. Removing an absent product is a no-op."""
        item = self.line_for(product_id)
        if item is None:
            return

        with atomic_change(self):
            self.remove_items(item)
            self._touch()

        self.raise_(
            CartItemRemoved(
                cart_id=str(self.id),
                customer_id=str(self.customer_id),
                product_id=str(product_id),
            )
        )

    def clear(self, reason="cleared_by_buyer"):
        """Empty the cart. Clearing an empty cart is a no-op."""
        if not self.items:
            return

        with atomic_change(self):
            for item in list(self.items):
                self.remove_items(item)
            self._touch()

        self.raise_(
            CartCleared(
                cart_id=str(self.id),
                customer_id=str(self.customer_id),
                reason=reason,
            )
        )

    def merge_guest_lines(self, lines):
        """Additively merge guest lines.

        Args:
            lines: list of ``(product, quantity)`` pairs for products that
                exist and are active.
        """
        with atomic_change(self):
            for product, quantity in lines:
                existing = self.line_for(product.id)
                if existing:
                    existing.quantity += quantity
                else:
                    self.add_items(
                        CartItem(
                            product_id=product.id,
                            quantity=quantity,
                            price=product.price_min,
                            product_snapshot=self.snapshot_of(product),
                            added_at=datetime.now(UTC),
                        )
                    )
            self._touch()

    def record_sync(self, items_merged, items_skipped):
        self.raise_(
            GuestCartSynced(
                cart_id=str(self.id),
                customer_id=str(self.customer_id),
                items_merged=items_merged,
                items_skipped=items_skipped,
            )
        )

    def prune(self, product_ids):
        """Drop lines for the given product ids (vanished or inactive products)."""
        doomed = [i for i in self.items if str(i.product_id) in {str(p) for p in product_ids}]
        if not doomed:
            return

        with atomic_change(self):
            for item in doomed:
                self.remove_items(item)
            self._touch()

        self.raise_(
            CartPruned(
                cart_id=str(self.id),
                customer_id=str(self.customer_id),
                product_ids=json.dumps([str(i.product_id) for i in doomed]),
            )
        )

    def to_dict_view(self) -> dict:
        """Cart projection returned by the API."""
        return {
            "cart_id": str(self.id),
            "customer_id": str(self.customer_id),
            "items": [
                {
                    "product_id": str(item.product_id),
                    "quantity": item.quantity,
                    "price": item.price,
                    "subtotal": round(item.price * item.quantity, 2),
                    "product_snapshot": {
                        "name": item.product_snapshot.name if item.product_snapshot else None,
                        "image": item.product_snapshot.image if item.product_snapshot else None,
                        "moq_quantity": item.product_snapshot.moq_quantity if item.product_snapshot else None,
                        "moq_unit": item.product_snapshot.moq_unit if item.product_snapshot else None,
                    },
                }
                for item in sorted(self.items, key=lambda i: i.added_at or self.created_at)
            ],
            "total_items": self.total_items,
            "total_price": self.total_price,
        }


@ordering.repository(part_of=Cart)
class CartRepository:
    def find_for_customer(self, customer_id):
        results = self._dao.query.filter(customer_id=str(customer_id)).all().items
        return results[0] if results else None

    def get_or_create(self, customer_id):
        """Return the buyer's cart, creating and persisting an empty one if absent."""
        cart = self.find_for_customer(customer_id)
        if cart is None:
            cart = Cart.create(customer_id=customer_id)
            self.add(cart)
        return cart
