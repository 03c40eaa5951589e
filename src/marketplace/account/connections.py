"""Shop connection requests: commands and handler.

A customer asks to join a physical shop; the shop's owner approves or
rejects the request. Approval flips the pending connection to active in
place. Rejection removes it, so the customer may ask again later.
"""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, Identifier, String
from protean.utils.globals import current_domain

from marketplace.access.principal import require_customer, require_shop_owner, resolve_principal
from marketplace.account.user import User
from marketplace.domain import marketplace
from marketplace.shop.shop import Shop, ShopStatus

logger = structlog.get_logger(__name__)


@marketplace.command(part_of="User")
class RequestConnection:
    actor_id: Identifier(required=True)
    shop_id: Identifier(required=True)
    shop_name: String(max_length=255)


@marketplace.command(part_of="User")
class ResolveConnection:
    actor_id: Identifier(required=True)
    customer_id: Identifier(required=True)
    shop_id: Identifier(required=True)
    approve: Boolean(required=True)


@marketplace.command(part_of="User")
class LeaveShop:
    actor_id: Identifier(required=True)
    shop_id: Identifier(required=True)


@marketplace.command_handler(part_of=User)
class ShopConnectionHandler:
    @handle(RequestConnection)
    def request_connection(self, command):
        principal = resolve_principal(command.actor_id)
        require_customer(principal, "request a shop connection")

        shop = current_domain.repository_for(Shop).get(command.shop_id)
        if shop.status == ShopStatus.BLOCKED.value:
            raise ValidationError({"shop_id": [f"Shop {shop.id} is not accepting connection requests"]})

        repo = current_domain.repository_for(User)
        user = repo.get(principal.user_id)
        user.request_connection(shop.id, command.shop_name or shop.name)
        repo.add(user)
        logger.info("Connection requested", user_id=str(user.id), shop_id=str(shop.id))

    @handle(ResolveConnection)
    def resolve_connection(self, command):
        principal = resolve_principal(command.actor_id)
        require_shop_owner(principal, command.shop_id, "resolve connection requests")

        repo = current_domain.repository_for(User)
        user = repo.get(command.customer_id)
        user.resolve_connection(command.shop_id, approve=command.approve)
        repo.add(user)
        logger.info(
            "Connection resolved",
            user_id=str(user.id),
            shop_id=str(command.shop_id),
            approved=command.approve,
        )

    @handle(LeaveShop)
    def leave_shop(self, command):
        principal = resolve_principal(command.actor_id)

        repo = current_domain.repository_for(User)
        user = repo.get(principal.user_id)
        user.leave_shop(command.shop_id)
        repo.add(user)
