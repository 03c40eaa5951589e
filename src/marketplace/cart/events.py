"""Domain events for the Cart aggregate."""

from protean.fields import Float, Identifier, Integer, String, Text

from marketplace.domain import marketplace


@marketplace.event(part_of="Cart")
class CartItemAdded:
    """A product was put into the customer's cart, or its line grew."""

    __version__ = 1

    customer_id = Identifier(required=True)
    item_id = Identifier(required=True)
    product_id = Identifier(required=True)
    name = String(required=True)
    unit_price = Float(required=True)
    quantity = Integer(required=True)


@marketplace.event(part_of="Cart")
class CartQuantityUpdated:
    """The quantity of a cart line was changed."""

    __version__ = 1

    customer_id = Identifier(required=True)
    item_id = Identifier(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)


@marketplace.event(part_of="Cart")
class CartItemRemoved:
    """A line was taken out of the cart by the customer."""

    __version__ = 1

    customer_id = Identifier(required=True)
    item_id = Identifier(required=True)


@marketplace.event(part_of="Cart")
class CartCheckedOut:
    """Cart lines were handed over to an order and removed from the cart."""

    __version__ = 1

    customer_id = Identifier(required=True)
    order_id = Identifier(required=True)
    item_ids = Text(required=True)  # JSON array of cart item ids
