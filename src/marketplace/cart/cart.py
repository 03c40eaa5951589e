"""Cart aggregate: a customer's mutable basket, emptied into an Order at checkout.

There is one cart per customer, identified by the customer's id. Each line
copies the product's name and price when it is added; the order later
copies them again from the cart, never from the catalogue.
"""

import json
from datetime import UTC, datetime

from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String

from marketplace.cart.events import CartCheckedOut, CartItemAdded, CartItemRemoved, CartQuantityUpdated
from marketplace.domain import marketplace
from marketplace.errors import InvalidCartError


@marketplace.entity(part_of="Cart")
class CartItem:
    product_id = Identifier(required=True)
    shop_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    unit_price = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=1)
    image_url = String(max_length=1000)
    added_at = DateTime()


@marketplace.aggregate
class Cart:
    customer_id = Identifier(identifier=True, required=True)
    items = HasMany(CartItem)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def create(cls, customer_id):
        now = datetime.now(UTC)
        return cls(customer_id=customer_id, created_at=now, updated_at=now)

    def _find(self, item_id):
        return next((i for i in self.items if str(i.id) == str(item_id)), None)

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def add_item(self, product_id, shop_id, name, unit_price, quantity, image_url=None):
        """Add a product line, or grow the existing line for the same product."""
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        existing = next(
            (i for i in self.items if str(i.product_id) == str(product_id) and str(i.shop_id) == str(shop_id)),
            None,
        )
        now = datetime.now(UTC)

        if existing:
            existing.quantity += quantity
            item = existing
        else:
            item = CartItem(
                product_id=product_id,
                shop_id=shop_id,
                name=name,
                unit_price=unit_price,
                quantity=quantity,
                image_url=image_url,
                added_at=now,
            )
            self.add_items(item)

        self.updated_at = now

        self.raise_(
            CartItemAdded(
                customer_id=str(self.customer_id),
                item_id=str(item.id),
                product_id=str(product_id),
                name=name,
                unit_price=unit_price,
                quantity=quantity,
            )
        )
        return item

    def update_item_quantity(self, item_id, new_quantity):
        item = self._find(item_id)
        if item is None:
            raise ValidationError({"item_id": ["Item not found in cart"]})
        if new_quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        previous_quantity = item.quantity
        item.quantity = new_quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartQuantityUpdated(
                customer_id=str(self.customer_id),
                item_id=str(item_id),
                previous_quantity=previous_quantity,
                new_quantity=new_quantity,
            )
        )

    def remove_item(self, item_id):
        item = self._find(item_id)
        if item is None:
            raise ObjectNotFoundError(f"Cart item {item_id} not found")

        self.remove_items(item)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartItemRemoved(
                customer_id=str(self.customer_id),
                item_id=str(item_id),
            )
        )

    # -------------------------------------------------------------------
    # Checkout
    # -------------------------------------------------------------------
    def snapshot(self, shop_id, item_ids=None):
        """Return the lines a checkout for ``shop_id`` would order, as plain dicts.

        Without ``item_ids`` every line from that shop is taken. With
        ``item_ids`` the snapshot is exactly those lines; a line the caller
        saw that is no longer in the cart makes the snapshot invalid, which is
        how a resubmitted checkout is told apart from a fresh one.
        """
        if item_ids is None:
            selected = [i for i in self.items if str(i.shop_id) == str(shop_id)]
        else:
            selected = []
            for item_id in item_ids:
                item = self._find(item_id)
                if item is None:
                    raise InvalidCartError({"cart": [f"Cart item {item_id} is no longer in the cart"]})
                if str(item.shop_id) != str(shop_id):
                    raise InvalidCartError({"cart": [f"Cart item {item_id} belongs to another shop"]})
                selected.append(item)

        if not selected:
            raise InvalidCartError({"cart": ["Cart is empty"]})

        return [
            {
                "item_id": str(item.id),
                "product_id": str(item.product_id),
                "shop_id": str(item.shop_id),
                "name": item.name,
                "unit_price": item.unit_price,
                "quantity": item.quantity,
                "image_url": item.image_url,
            }
            for item in selected
        ]

    def check_out(self, item_ids, order_id):
        """Remove the ordered lines from the cart."""
        for item_id in item_ids:
            item = self._find(item_id)
            if item is None:
                raise InvalidCartError({"cart": [f"Cart item {item_id} is no longer in the cart"]})
            self.remove_items(item)

        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartCheckedOut(
                customer_id=str(self.customer_id),
                order_id=str(order_id),
                item_ids=json.dumps([str(i) for i in item_ids]),
            )
        )
