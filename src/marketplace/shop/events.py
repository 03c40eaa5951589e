"""Domain events for the Shop aggregate."""

from protean.fields import DateTime, Float, Identifier, String

from marketplace.domain import marketplace


@marketplace.event(part_of="Shop")
class ShopRegistered:
    """A platform admin opened a new shop and assigned its owner."""

    __version__ = 1

    shop_id = Identifier(required=True)
    name = String(required=True)
    shop_type = String(required=True)
    owner_id = Identifier(required=True)
    currency = String(required=True)
    delivery_charge = Float(required=True)
    tax_rate = Float(required=True)
    registered_at = DateTime(required=True)


@marketplace.event(part_of="Shop")
class ShopSettingsUpdated:
    """A shop's name, type or financial defaults changed."""

    __version__ = 1

    shop_id = Identifier(required=True)
    name = String(required=True)
    shop_type = String(required=True)
    currency = String(required=True)
    delivery_charge = Float(required=True)
    tax_rate = Float(required=True)


@marketplace.event(part_of="Shop")
class ShopStatusChanged:
    """A shop was activated, put on hold, or blocked."""

    __version__ = 1

    shop_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
