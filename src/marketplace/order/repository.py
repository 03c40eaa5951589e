"""Repository for the Order aggregate."""

from protean.exceptions import ObjectNotFoundError

from marketplace.domain import marketplace
from marketplace.order.order import Order


@marketplace.repository(part_of=Order)
class OrderRepository:
    """Shop-scoped order queries. Every query names the shop it reads."""

    def for_shop(self, shop_id: str) -> list[Order]:
        return self._dao.query.filter(shop_id=str(shop_id)).all().items

    def for_customer(self, shop_id: str, customer_id: str) -> list[Order]:
        return self._dao.query.filter(shop_id=str(shop_id), customer_id=str(customer_id)).all().items

    def get_for_shop(self, shop_id: str, order_id: str) -> Order:
        """Load an order, treating another shop's order as missing."""
        order = self.get(order_id)
        if str(order.shop_id) != str(shop_id):
            raise ObjectNotFoundError(f"Shop {shop_id} has no order {order_id}")
        return order
