"""Order status changes: commands and handler.

Only the shop's owner and staff, or a platform admin naming the shop, may
move an order. Setting a status the order already has is accepted and
writes nothing.
"""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from marketplace.access.principal import require_shop_staff, resolve_principal
from marketplace.domain import marketplace
from marketplace.order.order import Order

logger = structlog.get_logger(__name__)


@marketplace.command(part_of="Order")
class SetOrderStatus:
    actor_id = Identifier(required=True)
    shop_id = Identifier(required=True)
    order_id = Identifier(required=True)
    new_status = String(required=True, max_length=50)


@marketplace.command(part_of="Order")
class SetPaymentStatus:
    actor_id = Identifier(required=True)
    shop_id = Identifier(required=True)
    order_id = Identifier(required=True)
    new_status = String(required=True, max_length=50)


@marketplace.command_handler(part_of=Order)
class OrderStatusHandler:
    @handle(SetOrderStatus)
    def set_order_status(self, command):
        principal = resolve_principal(command.actor_id)
        require_shop_staff(principal, command.shop_id, "change order status")

        repo = current_domain.repository_for(Order)
        order = repo.get_for_shop(command.shop_id, command.order_id)
        if order.set_order_status(command.new_status):
            repo.add(order)
            logger.info(
                "Order status changed",
                order_id=str(order.id),
                shop_id=str(command.shop_id),
                new_status=order.order_status,
                actor_id=principal.user_id,
            )

    @handle(SetPaymentStatus)
    def set_payment_status(self, command):
        principal = resolve_principal(command.actor_id)
        require_shop_staff(principal, command.shop_id, "change payment status")

        repo = current_domain.repository_for(Order)
        order = repo.get_for_shop(command.shop_id, command.order_id)
        if order.set_payment_status(command.new_status):
            repo.add(order)
            logger.info(
                "Payment status changed",
                order_id=str(order.id),
                shop_id=str(command.shop_id),
                new_status=order.payment_status,
                actor_id=principal.user_id,
            )
