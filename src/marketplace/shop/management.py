"""Shop management: commands and handler.

Registering a shop also makes the named user its owner. Both changes go
out in the same unit of work, so a shop never exists without an owner
who can act for it.
"""

import structlog
from protean import handle
from protean.fields import Float, Identifier, String
from protean.utils.globals import current_domain

from marketplace.access.principal import require_admin, require_shop_owner, resolve_principal
from marketplace.account.user import Role, User
from marketplace.domain import marketplace
from marketplace.shop.shop import Shop, ShopType

logger = structlog.get_logger(__name__)


def _shop_defaults():
    custom = current_domain.config.get("custom", {}) or {}
    return (
        custom.get("default_currency", "PKR"),
        float(custom.get("default_delivery_charge", 0.0)),
    )


@marketplace.command(part_of="Shop")
class RegisterShop:
    actor_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    owner_id = Identifier(required=True)
    shop_type = String(max_length=20, default=ShopType.PHYSICAL.value)
    currency = String(max_length=10)
    delivery_charge = Float(min_value=0.0)
    tax_rate = Float(min_value=0.0, default=0.0)


@marketplace.command(part_of="Shop")
class UpdateShopSettings:
    actor_id = Identifier(required=True)
    shop_id = Identifier(required=True)
    name = String(max_length=255)
    shop_type = String(max_length=20)
    currency = String(max_length=10)
    delivery_charge = Float(min_value=0.0)
    tax_rate = Float(min_value=0.0)


@marketplace.command(part_of="Shop")
class ChangeShopStatus:
    actor_id = Identifier(required=True)
    shop_id = Identifier(required=True)
    status = String(required=True, max_length=20)


@marketplace.command_handler(part_of=Shop)
class ShopManagementHandler:
    @handle(RegisterShop)
    def register_shop(self, command):
        principal = resolve_principal(command.actor_id)
        require_admin(principal, "register shops")

        user_repo = current_domain.repository_for(User)
        owner = user_repo.get(command.owner_id)

        default_currency, default_delivery_charge = _shop_defaults()
        shop = Shop.register(
            name=command.name,
            owner_id=owner.id,
            shop_type=command.shop_type or ShopType.PHYSICAL.value,
            currency=command.currency or default_currency,
            delivery_charge=(
                command.delivery_charge if command.delivery_charge is not None else default_delivery_charge
            ),
            tax_rate=command.tax_rate or 0.0,
        )
        owner.change_role(Role.OWNER.value, shop_id=shop.id)

        current_domain.repository_for(Shop).add(shop)
        user_repo.add(owner)

        logger.info("Shop registered", shop_id=str(shop.id), owner_id=str(owner.id), shop_type=shop.shop_type)
        return str(shop.id)

    @handle(UpdateShopSettings)
    def update_shop_settings(self, command):
        principal = resolve_principal(command.actor_id)
        if not principal.is_admin:
            require_shop_owner(principal, command.shop_id, "change shop settings")

        repo = current_domain.repository_for(Shop)
        shop = repo.get(command.shop_id)
        shop.update_settings(
            name=command.name,
            shop_type=command.shop_type,
            currency=command.currency,
            delivery_charge=command.delivery_charge,
            tax_rate=command.tax_rate,
        )
        repo.add(shop)

    @handle(ChangeShopStatus)
    def change_shop_status(self, command):
        principal = resolve_principal(command.actor_id)
        require_admin(principal, "change shop status")

        repo = current_domain.repository_for(Shop)
        shop = repo.get(command.shop_id)
        shop.change_status(command.status)
        repo.add(shop)
        logger.info("Shop status changed", shop_id=str(shop.id), status=shop.status)
