"""Cart item management: commands and handler.

A cart belongs to the customer who is acting; the cart id is the
customer's user id, so no command carries a cart id of its own.
"""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from marketplace.access.principal import require_customer, resolve_principal
from marketplace.cart.cart import Cart
from marketplace.catalogue import get_catalog
from marketplace.domain import marketplace

logger = structlog.get_logger(__name__)


@marketplace.command(part_of="Cart")
class AddToCart:
    actor_id = Identifier(required=True)
    shop_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@marketplace.command(part_of="Cart")
class UpdateCartQuantity:
    actor_id = Identifier(required=True)
    item_id = Identifier(required=True)
    new_quantity = Integer(required=True, min_value=1)


@marketplace.command(part_of="Cart")
class RemoveCartItem:
    actor_id = Identifier(required=True)
    item_id = Identifier(required=True)


def _cart_for(customer_id):
    repo = current_domain.repository_for(Cart)
    try:
        return repo.get(customer_id)
    except ObjectNotFoundError:
        return Cart.create(customer_id)


@marketplace.command_handler(part_of=Cart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        principal = resolve_principal(command.actor_id)
        require_customer(principal, "add to cart")

        # Raises ObjectNotFoundError when the shop has no such product
        variant = get_catalog().get_variant(command.shop_id, command.product_id)

        cart = _cart_for(principal.user_id)
        item = cart.add_item(
            product_id=variant.product_id,
            shop_id=command.shop_id,
            name=variant.name,
            unit_price=variant.price,
            quantity=command.quantity,
            image_url=variant.image_url,
        )
        current_domain.repository_for(Cart).add(cart)
        return str(item.id)

    @handle(UpdateCartQuantity)
    def update_cart_quantity(self, command):
        principal = resolve_principal(command.actor_id)
        require_customer(principal, "change cart quantities")

        repo = current_domain.repository_for(Cart)
        cart = repo.get(principal.user_id)
        cart.update_item_quantity(
            item_id=command.item_id,
            new_quantity=command.new_quantity,
        )
        repo.add(cart)

    @handle(RemoveCartItem)
    def remove_cart_item(self, command):
        principal = resolve_principal(command.actor_id)
        require_customer(principal, "remove cart items")

        repo = current_domain.repository_for(Cart)
        try:
            cart = repo.get(principal.user_id)
        except ObjectNotFoundError:
            raise ObjectNotFoundError(f"Cart item {command.item_id} not found") from None
        cart.remove_item(item_id=command.item_id)
        repo.add(cart)
        logger.info("Cart item removed", customer_id=principal.user_id, item_id=str(command.item_id))
