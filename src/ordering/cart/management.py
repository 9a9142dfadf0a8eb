"""Cart management: load (with lazy pruning), clear and guest-cart sync."""

import json

import structlog
from protean import handle
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain

from ordering.cart.cart import Cart
from ordering.domain import ordering
from ordering.products import get_product_lookup

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Cart")
class LoadCart:
    """Fetch the buyer's cart, dropping lines for vanished or inactive products."""

    customer_id = Identifier(required=True)


@ordering.command(part_of="Cart")
class ClearCart:
    customer_id = Identifier(required=True)


@ordering.command(part_of="Cart")
class SyncGuestCart:
    """Merge lines held by a guest session into the buyer's cart."""

    customer_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of {product_id, quantity}


@ordering.command_handler(part_of=Cart)
class ManageCartHandler:
    @handle(LoadCart)
    def load_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.get_or_create(command.customer_id)

        lookup = get_product_lookup()
        stale = []
        for item in cart.items:
            product = lookup.find_product(str(item.product_id))
            if product is None or not product.is_active:
                stale.append(str(item.product_id))

        if stale:
            cart.prune(stale)
            repo.add(cart)
            logger.info("Pruned unavailable products from cart", cart_id=str(cart.id), product_ids=stale)

        return str(cart.id)

    @handle(ClearCart)
    def clear_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.get_or_create(command.customer_id)
        cart.clear()
        repo.add(cart)
        return str(cart.id)

    @handle(SyncGuestCart)
    def sync_guest_cart(self, command):
        guest_items = json.loads(command.items) if isinstance(command.items, str) else command.items

        lookup = get_product_lookup()
        lines = []
        skipped = 0
        for guest_item in guest_items:
            product = lookup.find_product(str(guest_item["product_id"]))
            quantity = int(guest_item.get("quantity", 1))
            if product is None or not product.is_active or quantity < 1:
                skipped += 1
                continue
            lines.append((product, quantity))

        repo = current_domain.repository_for(Cart)
        cart = repo.get_or_create(command.customer_id)
        cart.merge_guest_lines(lines)
        cart.record_sync(items_merged=len(lines), items_skipped=skipped)
        repo.add(cart)

        logger.info(
            "Guest cart synced",
            customer_id=str(command.customer_id),
            items_merged=len(lines),
            items_skipped=skipped,
        )
        return str(cart.id)


def cart_view(customer_id) -> dict:
    """Load the buyer's cart through LoadCart and return its projection."""
    cart_id = current_domain.process(LoadCart(customer_id=str(customer_id)), asynchronous=False)
    return current_domain.repository_for(Cart).get(cart_id).to_dict_view()
