"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Float, Identifier, String, Text

from marketplace.domain import marketplace


@marketplace.event(part_of="Order")
class OrderPlaced:
    """A customer's cart was turned into an order for a shop."""

    __version__ = 1

    order_id = Identifier(required=True)
    shop_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of {product_id, name, unit_price, quantity}
    subtotal = Float(required=True)
    delivery_charge = Float(required=True)
    tax = Float(required=True)
    discount = Float(required=True)
    total = Float(required=True)
    currency = String(required=True)
    payment_method = String(required=True)
    placed_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class OrderStatusChanged:
    """Shop staff moved the order along its fulfilment path, or cancelled it."""

    __version__ = 1

    order_id = Identifier(required=True)
    shop_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    changed_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class PaymentStatusChanged:
    """Shop staff marked the order as paid or unpaid."""

    __version__ = 1

    order_id = Identifier(required=True)
    shop_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    changed_at = DateTime(required=True)
