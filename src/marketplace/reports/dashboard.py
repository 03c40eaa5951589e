"""Shop-scoped read models for the owner dashboard.

Every query takes the shop it reads explicitly; nothing here assumes a
current or default shop.
"""

from datetime import UTC, datetime, timedelta

from protean.utils.globals import current_domain

from marketplace.access.principal import Principal, require_shop_staff
from marketplace.account.user import ConnectionStatus, Role, User
from marketplace.order.order import Order, OrderStatus, PaymentStatus

RECENT_WINDOW_DAYS = 30


def _as_aware(value):
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def shop_summary(principal: Principal, shop_id: str, now: datetime | None = None) -> dict:
    """Revenue and order counts for one shop.

    ``paid_revenue`` only counts orders marked Paid; cancelled orders are
    left out of every figure except their own status count.
    """
    require_shop_staff(principal, shop_id, "view the shop dashboard")

    now = now or datetime.now(UTC)
    since = now - timedelta(days=RECENT_WINDOW_DAYS)
    orders = current_domain.repository_for(Order).for_shop(shop_id)

    by_status = {status.value: 0 for status in OrderStatus}
    paid_revenue = 0.0
    outstanding = 0.0
    recent = 0
    for order in orders:
        by_status[order.order_status] += 1
        if order.order_status == OrderStatus.CANCELLED.value:
            continue
        if order.payment_status == PaymentStatus.PAID.value:
            paid_revenue += order.pricing.total
        else:
            outstanding += order.pricing.total
        created_at = _as_aware(order.created_at)
        if created_at is not None and created_at >= since:
            recent += 1

    return {
        "shop_id": str(shop_id),
        "paid_revenue": round(paid_revenue, 2),
        "outstanding": round(outstanding, 2),
        "recent_orders": recent,
        "orders_by_status": by_status,
    }


def customer_statement(principal: Principal, shop_id: str, customer_id: str) -> dict:
    """What one customer has been billed by a shop and what they have paid.

    Customers may read their own statement; shop staff may read anyone's.
    """
    if principal.user_id != str(customer_id):
        require_shop_staff(principal, shop_id, "view customer statements")

    orders = current_domain.repository_for(Order).for_customer(shop_id, customer_id)
    billed = [o for o in orders if o.order_status != OrderStatus.CANCELLED.value]
    total_billed = sum(o.pricing.total for o in billed)
    total_paid = sum(o.pricing.total for o in billed if o.payment_status == PaymentStatus.PAID.value)

    return {
        "shop_id": str(shop_id),
        "customer_id": str(customer_id),
        "order_count": len(billed),
        "total_billed": round(total_billed, 2),
        "total_paid": round(total_paid, 2),
        "balance": round(total_billed - total_paid, 2),
    }


def order_history(principal: Principal, shop_id: str) -> list[dict]:
    """The caller's own orders with one shop, newest first."""
    orders = current_domain.repository_for(Order).for_customer(shop_id, principal.user_id)
    orders = sorted(orders, key=lambda o: _as_aware(o.created_at) or datetime.min.replace(tzinfo=UTC), reverse=True)
    return [order.to_dict() for order in orders]


def pending_requests(principal: Principal, shop_id: str) -> list[dict]:
    """Customers waiting for the shop to resolve their connection request."""
    require_shop_staff(principal, shop_id, "view connection requests")

    customers = current_domain.repository_for(User)._dao.query.filter(role=Role.CUSTOMER.value).all().items
    requests = []
    for customer in customers:
        connection = customer.connection_for(shop_id)
        if connection is not None and connection.status == ConnectionStatus.PENDING.value:
            requests.append(
                {
                    "customer_id": str(customer.id),
                    "name": customer.name,
                    "email": customer.email,
                    "requested_at": connection.requested_at,
                }
            )
    return sorted(requests, key=lambda r: r["requested_at"] or datetime.min.replace(tzinfo=UTC))
