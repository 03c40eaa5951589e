"""Tests for the User aggregate's roles and shop connections."""

import pytest
from marketplace.account.events import ConnectionApproved, ConnectionRejected, ConnectionRequested
from marketplace.account.user import ConnectionStatus, Role, User
from protean.exceptions import ObjectNotFoundError, ValidationError


def _customer():
    user = User.register(name="Ayesha Khan", email="ayesha@shopsy.test")
    user._events.clear()
    return user


class TestRegistration:
    def test_new_users_are_customers(self):
        assert User.register(name="A", email="a@shopsy.test").role == Role.CUSTOMER.value

    def test_can_receive_deliveries_needs_phone_and_address(self):
        user = _customer()
        assert not user.can_receive_deliveries
        user.update_contact_details(phone="+92300", delivery_address="Lahore")
        assert user.can_receive_deliveries


class TestRoles:
    def test_owner_needs_a_shop(self):
        with pytest.raises(ValidationError):
            _customer().change_role("owner")

    def test_owner_with_shop(self):
        user = _customer()
        user.change_role("owner", shop_id="SHOP-A")
        assert user.role == Role.OWNER.value
        assert str(user.shop_id) == "SHOP-A"

    def test_admin_drops_shop_assignment(self):
        user = _customer()
        user.change_role("staff", shop_id="SHOP-A")
        user.change_role("admin", shop_id="SHOP-A")
        assert user.shop_id is None

    def test_unknown_role_rejected(self):
        with pytest.raises(ValidationError):
            _customer().change_role("superuser")


class TestConnections:
    def test_request_adds_pending_connection(self):
        user = _customer()
        user.request_connection("SHOP-A", "Corner Store")
        connection = user.connection_for("SHOP-A")
        assert connection.status == ConnectionStatus.PENDING.value
        assert connection.shop_name == "Corner Store"
        assert isinstance(user._events[-1], ConnectionRequested)

    def test_second_request_for_same_shop_rejected(self):
        user = _customer()
        user.request_connection("SHOP-A", "Corner Store")
        with pytest.raises(ValidationError):
            user.request_connection("SHOP-A", "Corner Store (renamed)")
        assert len(user.connections) == 1

    def test_only_customers_request(self):
        user = _customer()
        user.change_role("staff", shop_id="SHOP-B")
        with pytest.raises(ValidationError):
            user.request_connection("SHOP-A", "Corner Store")

    def test_approve_leaves_exactly_one_active_connection(self):
        user = _customer()
        user.request_connection("SHOP-A", "Corner Store")
        user.resolve_connection("SHOP-A", approve=True)
        matching = [c for c in user.connections if str(c.shop_id) == "SHOP-A"]
        assert len(matching) == 1
        assert matching[0].status == ConnectionStatus.ACTIVE.value
        assert isinstance(user._events[-1], ConnectionApproved)

    def test_approve_ignores_renamed_shop(self):
        user = _customer()
        user.request_connection("SHOP-A", "Corner Store")
        user.connection_for("SHOP-A").shop_name = "Corner Store & Co"
        user.resolve_connection("SHOP-A", approve=True)
        assert len(user.connections) == 1

    def test_reject_removes_connection(self):
        user = _customer()
        user.request_connection("SHOP-A", "Corner Store")
        user.resolve_connection("SHOP-A", approve=False)
        assert user.connection_for("SHOP-A") is None
        assert isinstance(user._events[-1], ConnectionRejected)

    def test_rejected_customer_may_ask_again(self):
        user = _customer()
        user.request_connection("SHOP-A", "Corner Store")
        user.resolve_connection("SHOP-A", approve=False)
        user.request_connection("SHOP-A", "Corner Store")
        assert user.connection_for("SHOP-A").status == ConnectionStatus.PENDING.value

    def test_resolve_without_pending_request(self):
        with pytest.raises(ObjectNotFoundError):
            _customer().resolve_connection("SHOP-A", approve=True)

    def test_resolve_active_connection_again(self):
        user = _customer()
        user.request_connection("SHOP-A", "Corner Store")
        user.resolve_connection("SHOP-A", approve=True)
        with pytest.raises(ObjectNotFoundError):
            user.resolve_connection("SHOP-A", approve=False)

    def test_leave_shop(self):
        user = _customer()
        user.request_connection("SHOP-A", "Corner Store")
        user.resolve_connection("SHOP-A", approve=True)
        user.leave_shop("SHOP-A")
        assert user.active_connections == []
