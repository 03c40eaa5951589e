"""Identity/role resolution and the role guards every workflow applies.

Sign-in and token issuance happen upstream. The bearer token that reaches
this service is the id of the already-authenticated user; resolving it
loads the user's role, shop assignment and shop memberships.
"""

from dataclasses import dataclass

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from marketplace.account.user import Role, User
from marketplace.errors import AuthorizationError

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Membership:
    """A customer's connection to one shop, as seen by the caller."""

    shop_id: str
    shop_name: str
    status: str


@dataclass(frozen=True)
class Principal:
    """The acting user, scoped to their tenant."""

    user_id: str
    role: str
    shop_id: str | None = None
    memberships: tuple[Membership, ...] = ()

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value

    def works_for(self, shop_id: str) -> bool:
        """True when the principal is owner or staff of ``shop_id``."""
        return self.role in (Role.OWNER.value, Role.STAFF.value) and str(self.shop_id) == str(shop_id)

    def membership_for(self, shop_id: str) -> Membership | None:
        return next((m for m in self.memberships if m.shop_id == str(shop_id)), None)


def resolve_principal(token: str | None) -> Principal:
    """Map a presented token to the principal it identifies."""
    if not token:
        raise AuthorizationError("No credentials presented")

    user_id = token.removeprefix("Bearer ").strip()
    try:
        user = current_domain.repository_for(User).get(user_id)
    except ObjectNotFoundError:
        logger.warning("Unknown principal", user_id=user_id)
        raise AuthorizationError(f"Unknown principal {user_id}") from None

    return Principal(
        user_id=str(user.id),
        role=user.role,
        shop_id=str(user.shop_id) if user.shop_id else None,
        memberships=tuple(
            Membership(shop_id=str(c.shop_id), shop_name=c.shop_name, status=c.status) for c in user.connections
        ),
    )


def _deny(principal: Principal, action: str, **context) -> None:
    logger.warning(
        "Operation denied",
        action=action,
        user_id=principal.user_id,
        role=principal.role,
        **context,
    )
    raise AuthorizationError(f"{principal.role} {principal.user_id} may not {action}")


def require_admin(principal: Principal, action: str) -> None:
    if not principal.is_admin:
        _deny(principal, action)


def require_customer(principal: Principal, action: str) -> None:
    if principal.role != Role.CUSTOMER.value:
        _deny(principal, action)


def require_shop_staff(principal: Principal, shop_id: str, action: str) -> None:
    """Owner or staff of ``shop_id``; admins may act on any shop they name."""
    if principal.is_admin or principal.works_for(shop_id):
        return
    _deny(principal, action, shop_id=str(shop_id))


def require_shop_owner(principal: Principal, shop_id: str, action: str) -> None:
    if principal.role == Role.OWNER.value and str(principal.shop_id) == str(shop_id):
        return
    _deny(principal, action, shop_id=str(shop_id))
