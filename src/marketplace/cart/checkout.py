"""Checkout: turn the customer's cart lines for one shop into an Order.

The order and the removal of the ordered cart lines are written by the
same unit of work, so either both land or neither does. Tax comes from
the shop's rate; checkout never applies a discount. The caller may
name the cart lines it saw; if any of them has already left the cart
(a second submission of the same checkout), the checkout is refused
instead of producing a duplicate order.
"""

import json

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from marketplace.access.principal import require_customer, resolve_principal
from marketplace.account.user import ConnectionStatus, User
from marketplace.cart.cart import Cart
from marketplace.domain import marketplace
from marketplace.errors import InvalidCartError, NoActiveShopError
from marketplace.order.order import Order, PaymentMethod
from marketplace.shop.shop import Shop

logger = structlog.get_logger(__name__)

# Cart line fields copied onto the order
_ORDER_LINE_FIELDS = ("product_id", "name", "unit_price", "quantity", "image_url")


@marketplace.command(part_of="Cart")
class PlaceOrder:
    actor_id = Identifier(required=True)
    shop_id = Identifier()
    item_ids = Text()  # JSON array of cart item ids; all of the shop's lines when absent
    payment_method = String(max_length=50, default=PaymentMethod.CASH_ON_DELIVERY.value)
    delivery_address = String(max_length=500)


def eligible_shop(user, shop_id=None):
    """Return the shop ``user`` may order from.

    Online shops take orders from anyone. Physical shops need an active
    connection. Without ``shop_id`` the customer's only active connection
    is used.
    """
    if shop_id is None:
        active = user.active_connections
        if len(active) != 1:
            reason = "Several active shop connections; choose a shop" if active else "No active shop connection"
            raise NoActiveShopError({"shop_id": [reason]})
        shop_id = active[0].shop_id

    try:
        shop = current_domain.repository_for(Shop).get(shop_id)
    except ObjectNotFoundError:
        raise NoActiveShopError({"shop_id": [f"Shop {shop_id} does not exist"]}) from None

    if not shop.is_open:
        raise NoActiveShopError({"shop_id": [f"Shop {shop_id} is not accepting orders"]})

    if shop.requires_connection:
        connection = user.connection_for(shop.id)
        if connection is None or connection.status != ConnectionStatus.ACTIVE.value:
            raise NoActiveShopError({"shop_id": [f"No active connection to shop {shop_id}"]})

    return shop


@marketplace.command_handler(part_of=Cart)
class CheckoutHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        principal = resolve_principal(command.actor_id)
        require_customer(principal, "place an order")

        user = current_domain.repository_for(User).get(principal.user_id)
        shop = eligible_shop(user, command.shop_id)

        cart_repo = current_domain.repository_for(Cart)
        try:
            cart = cart_repo.get(user.id)
        except ObjectNotFoundError:
            raise InvalidCartError({"cart": ["Cart is empty"]}) from None

        item_ids = json.loads(command.item_ids) if command.item_ids else None
        lines = cart.snapshot(shop.id, item_ids)

        delivery_address = command.delivery_address or user.delivery_address
        if not delivery_address or not user.phone:
            raise ValidationError(
                {"delivery_address": ["Add a phone number and delivery address before placing an order"]}
            )

        subtotal = sum(line["unit_price"] * line["quantity"] for line in lines)
        order = Order.place(
            shop_id=shop.id,
            customer_id=user.id,
            customer_name=user.name,
            lines=[{field: line[field] for field in _ORDER_LINE_FIELDS} for line in lines],
            delivery_charge=shop.delivery_charge,
            currency=shop.currency,
            payment_method=command.payment_method or PaymentMethod.CASH_ON_DELIVERY.value,
            delivery_address=delivery_address,
            phone=user.phone,
            tax=shop.tax_on(subtotal),
        )
        cart.check_out([line["item_id"] for line in lines], order.id)

        current_domain.repository_for(Order).add(order)
        cart_repo.add(cart)

        logger.info(
            "Order placed",
            order_id=str(order.id),
            shop_id=str(shop.id),
            customer_id=str(user.id),
            total=order.pricing.total,
            lines=len(lines),
        )
        return str(order.id)
