"""User aggregate: a person on the platform, their role, and their shop connections.

A customer's relationship to each shop is a ``ShopConnection`` entity keyed
by ``shop_id``. Resolving a request finds the connection by that key and
changes it in place, so there is never a window where a stale copy of the
connection fails to match and a second one gets added next to it.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import DateTime, HasMany, Identifier, String

from marketplace.account.events import (
    ConnectionApproved,
    ConnectionRejected,
    ConnectionRequested,
    ContactDetailsUpdated,
    ShopLeft,
    UserRegistered,
    UserRoleChanged,
)
from marketplace.domain import marketplace


class Role(Enum):
    ADMIN = "admin"
    OWNER = "owner"
    STAFF = "staff"
    CUSTOMER = "customer"


class ConnectionStatus(Enum):
    PENDING = "pending"
    ACTIVE = "active"


# Roles that only make sense together with a shop assignment
_SHOP_SCOPED_ROLES = {Role.OWNER.value, Role.STAFF.value}


@marketplace.entity(part_of="User")
class ShopConnection:
    """A customer's membership in one shop, pending until the owner resolves it."""

    shop_id = Identifier(required=True)
    shop_name = String(required=True, max_length=255)
    status = String(choices=ConnectionStatus, default=ConnectionStatus.PENDING.value)
    requested_at = DateTime()
    resolved_at = DateTime()


@marketplace.aggregate
class User:
    """A registered person, identified by the id their sign-in token resolves to.

    Owners and staff carry the ``shop_id`` they work for. Customers carry
    their shop connections; at most one connection exists per shop.
    """

    name = String(required=True, max_length=255)
    email = String(required=True, max_length=254)
    role = String(choices=Role, default=Role.CUSTOMER.value)
    shop_id = Identifier()
    phone = String(max_length=20)
    delivery_address = String(max_length=500)
    connections = HasMany(ShopConnection)
    registered_at = DateTime()

    @invariant.post
    def one_connection_per_shop(self):
        shop_ids = [str(c.shop_id) for c in self.connections]
        if len(shop_ids) != len(set(shop_ids)):
            raise ValidationError({"connections": ["Only one connection per shop is allowed"]})

    @invariant.post
    def shop_scoped_roles_need_a_shop(self):
        if self.role in _SHOP_SCOPED_ROLES and not self.shop_id:
            raise ValidationError({"shop_id": [f"A user with role {self.role} must be assigned to a shop"]})

    @classmethod
    def register(cls, name, email, phone=None, delivery_address=None):
        now = datetime.now(UTC)
        user = cls(
            name=name,
            email=email,
            role=Role.CUSTOMER.value,
            phone=phone,
            delivery_address=delivery_address,
            registered_at=now,
        )
        user.raise_(
            UserRegistered(
                user_id=str(user.id),
                name=name,
                email=email,
                role=user.role,
                registered_at=now,
            )
        )
        return user

    # -------------------------------------------------------------------
    # Role and profile
    # -------------------------------------------------------------------
    def change_role(self, role, shop_id=None):
        """Assign a new role. Owner and staff roles require a shop."""
        try:
            new_role = Role(role)
        except ValueError:
            raise ValidationError({"role": [f"Unknown role: {role}"]}) from None

        previous_role = self.role
        with atomic_change(self):
            self.role = new_role.value
            self.shop_id = shop_id if new_role.value in _SHOP_SCOPED_ROLES else None

        self.raise_(
            UserRoleChanged(
                user_id=str(self.id),
                previous_role=previous_role,
                new_role=new_role.value,
                shop_id=str(shop_id) if self.shop_id else None,
            )
        )

    def update_contact_details(self, phone=None, delivery_address=None):
        if phone is not None:
            self.phone = phone
        if delivery_address is not None:
            self.delivery_address = delivery_address

        self.raise_(
            ContactDetailsUpdated(
                user_id=str(self.id),
                phone=self.phone,
                delivery_address=self.delivery_address,
            )
        )

    @property
    def can_receive_deliveries(self):
        return bool(self.phone and self.delivery_address)

    # -------------------------------------------------------------------
    # Shop connections
    # -------------------------------------------------------------------
    def connection_for(self, shop_id):
        """Return the connection for ``shop_id``, or None."""
        return next((c for c in self.connections if str(c.shop_id) == str(shop_id)), None)

    @property
    def active_connections(self):
        return [c for c in self.connections if c.status == ConnectionStatus.ACTIVE.value]

    def request_connection(self, shop_id, shop_name):
        if self.role != Role.CUSTOMER.value:
            raise ValidationError({"role": ["Only customers can request shop connections"]})

        existing = self.connection_for(shop_id)
        if existing is not None:
            raise ValidationError({"shop_id": [f"A {existing.status} connection to this shop already exists"]})

        now = datetime.now(UTC)
        self.add_connections(
            ShopConnection(
                shop_id=shop_id,
                shop_name=shop_name,
                status=ConnectionStatus.PENDING.value,
                requested_at=now,
            )
        )

        self.raise_(
            ConnectionRequested(
                user_id=str(self.id),
                shop_id=str(shop_id),
                shop_name=shop_name,
                requested_at=now,
            )
        )

    def resolve_connection(self, shop_id, approve):
        """Approve a pending request in place, or discard it."""
        connection = self.connection_for(shop_id)
        if connection is None or connection.status != ConnectionStatus.PENDING.value:
            raise ObjectNotFoundError(f"No pending connection request from user {self.id} for shop {shop_id}")

        now = datetime.now(UTC)
        if approve:
            connection.status = ConnectionStatus.ACTIVE.value
            connection.resolved_at = now
            self.raise_(
                ConnectionApproved(
                    user_id=str(self.id),
                    shop_id=str(shop_id),
                    approved_at=now,
                )
            )
        else:
            self.remove_connections(connection)
            self.raise_(
                ConnectionRejected(
                    user_id=str(self.id),
                    shop_id=str(shop_id),
                    rejected_at=now,
                )
            )

    def leave_shop(self, shop_id):
        connection = self.connection_for(shop_id)
        if connection is None:
            raise ObjectNotFoundError(f"User {self.id} has no connection to shop {shop_id}")

        self.remove_connections(connection)
        self.raise_(ShopLeft(user_id=str(self.id), shop_id=str(shop_id)))
