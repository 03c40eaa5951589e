"""Application tests for checkout: cart lines become exactly one order."""

import json

import pytest
from marketplace.account.registration import UpdateContactDetails
from marketplace.account.user import User
from marketplace.cart.cart import Cart
from marketplace.cart.checkout import PlaceOrder
from marketplace.cart.items import AddToCart
from marketplace.dispatch import execute
from marketplace.errors import BatchCommitError, InvalidCartError, NoActiveShopError
from marketplace.order.order import Order, OrderStatus, PaymentStatus
from marketplace.order.repository import OrderRepository
from marketplace.shop.management import ChangeShopStatus, UpdateShopSettings
from protean import current_domain
from protean.exceptions import ValidationError


def _process(command):
    return current_domain.process(command, asynchronous=False)


def _add(customer_id, shop_id, product_id, quantity=2):
    return _process(AddToCart(actor_id=customer_id, shop_id=shop_id, product_id=product_id, quantity=quantity))


class TestPlaceOrder:
    def test_order_total_and_initial_statuses(self, connected_customer_id, shop_id, product_id):
        _add(connected_customer_id, shop_id, product_id, quantity=2)

        order_id = _process(PlaceOrder(actor_id=connected_customer_id, shop_id=shop_id))

        order = current_domain.repository_for(Order).get(order_id)
        assert order.pricing.subtotal == 2000.0
        assert order.pricing.total == 2150.0
        assert order.order_status == OrderStatus.PENDING.value
        assert order.payment_status == PaymentStatus.UNPAID.value
        assert order.delivery_address == "House 12, Street 4, Lahore"

    def test_cart_lines_are_removed(self, connected_customer_id, shop_id, product_id):
        _add(connected_customer_id, shop_id, product_id)

        _process(PlaceOrder(actor_id=connected_customer_id, shop_id=shop_id))

        cart = current_domain.repository_for(Cart).get(connected_customer_id)
        assert len(cart.items) == 0

    def test_exactly_one_order(self, connected_customer_id, shop_id, product_id):
        _add(connected_customer_id, shop_id, product_id)
        _process(PlaceOrder(actor_id=connected_customer_id, shop_id=shop_id))
        assert len(current_domain.repository_for(Order).for_shop(shop_id)) == 1

    def test_uses_single_active_connection_when_no_shop_named(self, connected_customer_id, shop_id, product_id):
        _add(connected_customer_id, shop_id, product_id)
        order_id = _process(PlaceOrder(actor_id=connected_customer_id))
        assert str(current_domain.repository_for(Order).get(order_id).shop_id) == shop_id

    def test_order_keeps_price_at_checkout(self, connected_customer_id, shop_id, product_factory):
        product_id = product_factory(shop_id, name="Tea", price=450.0)
        _add(connected_customer_id, shop_id, product_id, quantity=1)

        order_id = _process(PlaceOrder(actor_id=connected_customer_id, shop_id=shop_id))

        order = current_domain.repository_for(Order).get(order_id)
        assert order.items[0].unit_price == 450.0
        assert order.pricing.total == 450.0 + 150.0

    def test_tax_comes_from_the_shop_rate(self, admin_id, connected_customer_id, shop_id, product_id):
        _process(UpdateShopSettings(actor_id=admin_id, shop_id=shop_id, tax_rate=10.0))
        _add(connected_customer_id, shop_id, product_id, quantity=2)

        order_id = _process(PlaceOrder(actor_id=connected_customer_id, shop_id=shop_id))

        pricing = current_domain.repository_for(Order).get(order_id).pricing
        assert pricing.tax == 200.0
        assert pricing.discount == 0.0
        assert pricing.total == 2000.0 + 150.0 + 200.0

    def test_resubmitted_checkout_is_refused(self, connected_customer_id, shop_id, product_id):
        item_id = _add(connected_customer_id, shop_id, product_id)
        command = PlaceOrder(actor_id=connected_customer_id, shop_id=shop_id, item_ids=json.dumps([item_id]))

        _process(command)
        with pytest.raises(InvalidCartError):
            _process(command)

        assert len(current_domain.repository_for(Order).for_shop(shop_id)) == 1

    def test_only_named_lines_are_ordered(self, connected_customer_id, shop_id, product_id, product_factory):
        first = _add(connected_customer_id, shop_id, product_id)
        _add(connected_customer_id, shop_id, product_factory(shop_id, name="Sugar 1kg", price=180.0))

        order_id = _process(PlaceOrder(actor_id=connected_customer_id, shop_id=shop_id, item_ids=json.dumps([first])))

        order = current_domain.repository_for(Order).get(order_id)
        assert len(order.items) == 1
        cart = current_domain.repository_for(Cart).get(connected_customer_id)
        assert [i.name for i in cart.items] == ["Sugar 1kg"]

    def test_empty_cart(self, connected_customer_id, shop_id):
        with pytest.raises(InvalidCartError):
            _process(PlaceOrder(actor_id=connected_customer_id, shop_id=shop_id))

    def test_needs_delivery_details(self, user_factory, owner_id, shop_id, product_id):
        from marketplace.account.connections import RequestConnection, ResolveConnection

        customer = user_factory("No Address", "noaddress@shopsy.test")
        _process(RequestConnection(actor_id=customer, shop_id=shop_id))
        _process(ResolveConnection(actor_id=owner_id, customer_id=customer, shop_id=shop_id, approve=True))
        _add(customer, shop_id, product_id)

        with pytest.raises(ValidationError):
            _process(PlaceOrder(actor_id=customer, shop_id=shop_id))

        _process(UpdateContactDetails(actor_id=customer, phone="+923210000000", delivery_address="Karachi"))
        assert _process(PlaceOrder(actor_id=customer, shop_id=shop_id))


class TestShopEligibility:
    def test_physical_shop_needs_active_connection(self, customer_id, shop_id, product_id):
        _add(customer_id, shop_id, product_id)
        with pytest.raises(NoActiveShopError):
            _process(PlaceOrder(actor_id=customer_id, shop_id=shop_id))

    def test_online_shop_needs_no_connection(self, customer_id, online_shop_id, product_factory):
        product_id = product_factory(online_shop_id, name="Headphones", price=3500.0)
        _add(customer_id, online_shop_id, product_id, quantity=1)

        order_id = _process(PlaceOrder(actor_id=customer_id, shop_id=online_shop_id))

        assert current_domain.repository_for(Order).get(order_id).pricing.total == 3700.0

    def test_blocked_shop(self, admin_id, connected_customer_id, shop_id, product_id):
        _add(connected_customer_id, shop_id, product_id)
        _process(ChangeShopStatus(actor_id=admin_id, shop_id=shop_id, status="blocked"))

        with pytest.raises(NoActiveShopError):
            _process(PlaceOrder(actor_id=connected_customer_id, shop_id=shop_id))

    def test_unknown_shop(self, customer_id):
        with pytest.raises(NoActiveShopError):
            _process(PlaceOrder(actor_id=customer_id, shop_id="SHOP-MISSING"))

    def test_no_shop_named_and_no_connection(self, customer_id):
        with pytest.raises(NoActiveShopError):
            _process(PlaceOrder(actor_id=customer_id))


class TestCheckoutCommitFailure:
    def test_failed_commit_leaves_cart_untouched(self, monkeypatch, connected_customer_id, shop_id, product_id):
        _add(connected_customer_id, shop_id, product_id)

        def _store_down(self, aggregate, *args, **kwargs):
            raise ConnectionError("document store unavailable")

        monkeypatch.setattr(OrderRepository, "add", _store_down)

        with pytest.raises(BatchCommitError) as exc:
            execute(PlaceOrder(actor_id=connected_customer_id, shop_id=shop_id))
        assert exc.value.operation == "PlaceOrder"

        monkeypatch.undo()
        cart = current_domain.repository_for(Cart).get(connected_customer_id)
        assert len(cart.items) == 1
        assert current_domain.repository_for(Order).for_shop(shop_id) == []

    def test_request_errors_pass_through(self, connected_customer_id, shop_id):
        with pytest.raises(InvalidCartError):
            execute(PlaceOrder(actor_id=connected_customer_id, shop_id=shop_id))


class TestProfile:
    def test_update_contact_details(self, customer_id):
        _process(UpdateContactDetails(actor_id=customer_id, phone="+923331112222"))
        user = current_domain.repository_for(User).get(customer_id)
        assert user.phone == "+923331112222"
        assert user.delivery_address == "House 12, Street 4, Lahore"
