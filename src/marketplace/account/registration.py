"""User registration and profile: commands and handler."""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from marketplace.access.principal import require_admin, resolve_principal
from marketplace.account.user import Role, User
from marketplace.domain import marketplace
from marketplace.shop.shop import Shop

logger = structlog.get_logger(__name__)


@marketplace.command(part_of="User")
class RegisterUser:
    """Create a customer account for a person who has just signed in."""

    name: String(required=True, max_length=255)
    email: String(required=True, max_length=254)
    phone: String(max_length=20)
    delivery_address: String(max_length=500)


@marketplace.command(part_of="User")
class ChangeUserRole:
    """Assign a role, and for owners and staff the shop they work for."""

    actor_id: Identifier(required=True)
    user_id: Identifier(required=True)
    role: String(required=True, max_length=20)
    shop_id: Identifier()


@marketplace.command(part_of="User")
class UpdateContactDetails:
    actor_id: Identifier(required=True)
    phone: String(max_length=20)
    delivery_address: String(max_length=500)


def _keep_shop_owners(user, role, shop_id):
    """Refuse a role change that would leave a shop without its owner."""
    for shop in current_domain.repository_for(Shop).owned_by(user.id):
        if role != Role.OWNER.value or str(shop_id) != str(shop.id):
            raise ValidationError({"role": [f"User still owns shop {shop.id}"]})


@marketplace.command_handler(part_of=User)
class UserAccountHandler:
    @handle(RegisterUser)
    def register_user(self, command):
        user = User.register(
            name=command.name,
            email=command.email,
            phone=command.phone,
            delivery_address=command.delivery_address,
        )
        current_domain.repository_for(User).add(user)
        logger.info("User registered", user_id=str(user.id))
        return str(user.id)

    @handle(ChangeUserRole)
    def change_user_role(self, command):
        principal = resolve_principal(command.actor_id)
        require_admin(principal, "change user roles")

        if command.shop_id:
            # Raises ObjectNotFoundError for an unknown shop
            current_domain.repository_for(Shop).get(command.shop_id)

        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        _keep_shop_owners(user, command.role, command.shop_id)
        user.change_role(command.role, shop_id=command.shop_id)
        repo.add(user)
        logger.info("User role changed", user_id=str(user.id), role=user.role, shop_id=user.shop_id)

    @handle(UpdateContactDetails)
    def update_contact_details(self, command):
        principal = resolve_principal(command.actor_id)

        repo = current_domain.repository_for(User)
        user = repo.get(principal.user_id)
        user.update_contact_details(phone=command.phone, delivery_address=command.delivery_address)
        repo.add(user)
