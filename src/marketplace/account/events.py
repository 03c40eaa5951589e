"""Domain events for the User aggregate."""

from protean.fields import DateTime, Identifier, String

from marketplace.domain import marketplace


@marketplace.event(part_of="User")
class UserRegistered:
    """A person signed up and was given the customer role."""

    __version__ = 1

    user_id = Identifier(required=True)
    name = String(required=True)
    email = String(required=True)
    role = String(required=True)
    registered_at = DateTime(required=True)


@marketplace.event(part_of="User")
class UserRoleChanged:
    """A platform admin changed a user's role or shop assignment."""

    __version__ = 1

    user_id = Identifier(required=True)
    previous_role = String(required=True)
    new_role = String(required=True)
    shop_id = Identifier()


@marketplace.event(part_of="User")
class ContactDetailsUpdated:
    """A customer's phone number or delivery address changed."""

    __version__ = 1

    user_id = Identifier(required=True)
    phone = String()
    delivery_address = String()


@marketplace.event(part_of="User")
class ConnectionRequested:
    """A customer asked to be connected to a shop."""

    __version__ = 1

    user_id = Identifier(required=True)
    shop_id = Identifier(required=True)
    shop_name = String(required=True)
    requested_at = DateTime(required=True)


@marketplace.event(part_of="User")
class ConnectionApproved:
    """A shop owner accepted a customer's pending connection request."""

    __version__ = 1

    user_id = Identifier(required=True)
    shop_id = Identifier(required=True)
    approved_at = DateTime(required=True)


@marketplace.event(part_of="User")
class ConnectionRejected:
    """A shop owner declined a pending request; the request was discarded."""

    __version__ = 1

    user_id = Identifier(required=True)
    shop_id = Identifier(required=True)
    rejected_at = DateTime(required=True)


@marketplace.event(part_of="User")
class ShopLeft:
    """A customer dropped their connection to a shop."""

    __version__ = 1

    user_id = Identifier(required=True)
    shop_id = Identifier(required=True)
