"""Order aggregate: an immutable snapshot of a checkout plus two status axes.

Line items and money are copied by value from the cart when the order is
placed and never change afterwards. Only ``order_status``,
``payment_status`` and ``updated_at`` move after creation.

Order status (fulfilment axis):
    Pending → Accepted → Preparing → Out for Delivery → Delivered
    Cancelled from any non-terminal state. Delivered and Cancelled are terminal.
    Staff may skip ahead along the path but never move back.

Payment status (independent axis):
    Unpaid ↔ Paid, regardless of order status.
"""

import json
from datetime import UTC, datetime
from enum import Enum
from uuid import uuid4

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, ValueObject

from marketplace.domain import marketplace
from marketplace.errors import InvalidCartError, InvalidStatusError
from marketplace.order.events import OrderPlaced, OrderStatusChanged, PaymentStatusChanged


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "Pending"
    ACCEPTED = "Accepted"
    PREPARING = "Preparing"
    OUT_FOR_DELIVERY = "Out for Delivery"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


class PaymentStatus(Enum):
    UNPAID = "Unpaid"
    PAID = "Paid"


class PaymentMethod(Enum):
    CASH_ON_DELIVERY = "Cash on Delivery"
    END_OF_MONTH = "Pay at End of Month"


# State machine transition map
_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {
        OrderStatus.ACCEPTED,
        OrderStatus.PREPARING,
        OrderStatus.OUT_FOR_DELIVERY,
        OrderStatus.DELIVERED,
        OrderStatus.CANCELLED,
    },
    OrderStatus.ACCEPTED: {
        OrderStatus.PREPARING,
        OrderStatus.OUT_FOR_DELIVERY,
        OrderStatus.DELIVERED,
        OrderStatus.CANCELLED,
    },
    OrderStatus.PREPARING: {
        OrderStatus.OUT_FOR_DELIVERY,
        OrderStatus.DELIVERED,
        OrderStatus.CANCELLED,
    },
    OrderStatus.OUT_FOR_DELIVERY: {OrderStatus.DELIVERED, OrderStatus.CANCELLED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}

_PAYMENT_TRANSITIONS = {
    PaymentStatus.UNPAID: {PaymentStatus.PAID},
    PaymentStatus.PAID: {PaymentStatus.UNPAID},
}


def _parse_status(enum_cls, value, field_name):
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(s.value for s in enum_cls)
        raise InvalidStatusError({field_name: [f"Unknown status {value!r}. Expected one of: {allowed}"]}) from None


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@marketplace.value_object(part_of="Order")
class OrderPricing:
    """Money captured at checkout: ``total = subtotal + delivery_charge + tax - discount``."""

    subtotal = Float(default=0.0)
    delivery_charge = Float(default=0.0)
    tax = Float(default=0.0)
    discount = Float(default=0.0)
    total = Float(default=0.0)
    currency = String(max_length=10, default="PKR")


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@marketplace.entity(part_of="Order")
class OrderItem:
    product_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    unit_price = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=1)
    image_url = String(max_length=1000)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@marketplace.aggregate
class Order:
    shop_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    customer_name = String(max_length=255)
    items = HasMany(OrderItem)
    pricing = ValueObject(OrderPricing)
    order_status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.UNPAID.value)
    payment_method = String(choices=PaymentMethod, default=PaymentMethod.CASH_ON_DELIVERY.value)
    delivery_address = String(max_length=500)
    phone = String(max_length=20)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def total_must_balance(self):
        p = self.pricing
        if p is None:
            return
        expected = p.subtotal + p.delivery_charge + p.tax - p.discount
        if abs(expected - p.total) > 0.005:
            raise ValidationError({"pricing": ["Total must equal subtotal + delivery charge + tax - discount"]})

    @invariant.post
    def total_cannot_be_negative(self):
        if self.pricing is not None and self.pricing.total < 0:
            raise ValidationError({"pricing": ["Discount cannot exceed the order amount"]})

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        shop_id,
        customer_id,
        lines,
        delivery_charge,
        currency,
        payment_method,
        delivery_address,
        customer_name=None,
        phone=None,
        tax=0.0,
        discount=0.0,
    ):
        """Create an order from a cart snapshot.

        Args:
            lines: List of dicts with product_id, name, unit_price, quantity
                   and optionally image_url, copied from the cart.
            delivery_charge: The shop's delivery charge at checkout time.
        """
        if not lines:
            raise InvalidCartError({"cart": ["Cannot place an order from an empty cart"]})
        try:
            method = PaymentMethod(payment_method)
        except ValueError:
            raise ValidationError({"payment_method": [f"Unsupported payment method: {payment_method}"]}) from None

        subtotal = round(sum(line["unit_price"] * line["quantity"] for line in lines), 2)
        total = round(subtotal + delivery_charge + tax - discount, 2)
        now = datetime.now(UTC)

        order = cls(
            id=f"ORD-{str(uuid4()).upper()}",
            shop_id=shop_id,
            customer_id=customer_id,
            customer_name=customer_name,
            items=[OrderItem(**line) for line in lines],
            pricing=OrderPricing(
                subtotal=subtotal,
                delivery_charge=delivery_charge,
                tax=tax,
                discount=discount,
                total=total,
                currency=currency,
            ),
            order_status=OrderStatus.PENDING.value,
            payment_status=PaymentStatus.UNPAID.value,
            payment_method=method.value,
            delivery_address=delivery_address,
            phone=phone,
            created_at=now,
            updated_at=now,
        )
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                shop_id=str(shop_id),
                customer_id=str(customer_id),
                items=json.dumps(lines),
                subtotal=subtotal,
                delivery_charge=delivery_charge,
                tax=tax,
                discount=discount,
                total=total,
                currency=currency,
                payment_method=method.value,
                placed_at=now,
            )
        )
        return order

    @property
    def is_terminal(self):
        return not _VALID_TRANSITIONS[OrderStatus(self.order_status)]

    # -------------------------------------------------------------------
    # Status transitions
    # -------------------------------------------------------------------
    def set_order_status(self, new_status):
        """Move the order to ``new_status``.

        Returns False, without touching the order, when it is already there.
        """
        target = _parse_status(OrderStatus, new_status, "order_status")
        current = OrderStatus(self.order_status)
        if target == current:
            return False
        if target not in _VALID_TRANSITIONS[current]:
            raise ValidationError({"order_status": [f"Cannot transition from {current.value} to {target.value}"]})

        now = datetime.now(UTC)
        self.order_status = target.value
        self.updated_at = now

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                shop_id=str(self.shop_id),
                previous_status=current.value,
                new_status=target.value,
                changed_at=now,
            )
        )
        return True

    def set_payment_status(self, new_status):
        """Mark the order paid or unpaid. Same-value requests are no-ops."""
        target = _parse_status(PaymentStatus, new_status, "payment_status")
        current = PaymentStatus(self.payment_status)
        if target == current:
            return False
        if target not in _PAYMENT_TRANSITIONS[current]:
            raise ValidationError({"payment_status": [f"Cannot transition from {current.value} to {target.value}"]})

        now = datetime.now(UTC)
        self.payment_status = target.value
        self.updated_at = now

        self.raise_(
            PaymentStatusChanged(
                order_id=str(self.id),
                shop_id=str(self.shop_id),
                previous_status=current.value,
                new_status=target.value,
                changed_at=now,
            )
        )
        return True
