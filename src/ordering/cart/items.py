"""Cart line management: commands and handler.

Prices and display snapshots come from the catalogue at the moment of the
call; the MOQ bound is checked through the configured ``MOQPolicy``.
"""

import structlog
from protean import handle
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from ordering.cart.cart import Cart
from ordering.config import get_settings
from ordering.domain import ordering
from ordering.products import get_product_lookup
from shared.errors import MOQExceeded, NotFound, Unavailable

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Cart")
class AddToCart:
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@ordering.command(part_of="Cart")
class UpdateCartItem:
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=0)


@ordering.command(part_of="Cart")
class RemoveFromCart:
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)


def available_product(product_id):
    """Current catalogue record for a product, or raise NotFound / Unavailable."""
    product = get_product_lookup().find_product(str(product_id))
    if product is None:
        raise NotFound("Product not found")
    if not product.is_active:
        raise Unavailable("Product is not available")
    return product


def check_moq(product, quantity):
    policy = get_settings().moq_policy
    if policy.violated_by(quantity, product.moq_quantity):
        raise MOQExceeded(policy.describe(product.moq_quantity, product.moq_unit))


@ordering.command_handler(part_of=Cart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        product = available_product(command.product_id)
        check_moq(product, command.quantity)

        repo = current_domain.repository_for(Cart)
        cart = repo.get_or_create(command.customer_id)
        cart.add_product(product, command.quantity)
        repo.add(cart)

        logger.info(
            "Item added to cart",
            customer_id=str(command.customer_id),
            product_id=str(command.product_id),
            quantity=command.quantity,
        )
        return str(cart.id)

    @handle(UpdateCartItem)
    def update_cart_item(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.find_for_customer(command.customer_id)
        if cart is None or cart.line_for(command.product_id) is None:
            raise NotFound("Item not found in cart")

        # A delisted product's line may still be reduced; loading the cart prunes it.
        product = get_product_lookup().find_product(str(command.product_id))
        if command.quantity > 0 and product is not None:
            check_moq(product, command.quantity)

        cart.change_quantity(command.product_id, command.quantity)
        repo.add(cart)
        return str(cart.id)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.get_or_create(command.customer_id)
        cart.remove_product(command.product_id)
        repo.add(cart)
        return str(cart.id)
