"""Shared fixtures for marketplace tests: people, a shop and its products."""

import pytest
from marketplace.account.connections import RequestConnection, ResolveConnection
from marketplace.account.user import User
from marketplace.catalogue.product import Product, ProductVariant
from marketplace.shop.management import RegisterShop
from protean import current_domain


def _process(command):
    return current_domain.process(command, asynchronous=False)


def make_user(name, email, role=None, shop_id=None, phone=None, delivery_address=None):
    """Persist a user directly; role changes bypass the admin-only command."""
    user = User.register(name=name, email=email, phone=phone, delivery_address=delivery_address)
    if role is not None:
        user.change_role(role, shop_id=shop_id)
    current_domain.repository_for(User).add(user)
    return str(user.id)


def make_product(shop_id, name="Basmati Rice 5kg", price=1000.0, stock_qty=20):
    product = Product(
        shop_id=shop_id,
        name=name,
        category="Groceries",
        variants=[ProductVariant(sku=f"SKU-{name[:8].upper().replace(' ', '-')}", price=price, stock_qty=stock_qty)],
    )
    current_domain.repository_for(Product).add(product)
    return str(product.id)


@pytest.fixture()
def admin_id():
    return make_user("Platform Admin", "admin@shopsy.test", role="admin")


@pytest.fixture()
def owner_id():
    return make_user("Bilal Ahmed", "bilal@shopsy.test")


@pytest.fixture()
def shop_id(admin_id, owner_id):
    return _process(
        RegisterShop(
            actor_id=admin_id,
            name="Corner Store",
            owner_id=owner_id,
            shop_type="physical",
            currency="PKR",
            delivery_charge=150.0,
        )
    )


@pytest.fixture()
def online_shop_id(admin_id):
    online_owner = make_user("Sana Tariq", "sana@shopsy.test")
    return _process(
        RegisterShop(
            actor_id=admin_id,
            name="Web Bazaar",
            owner_id=online_owner,
            shop_type="online",
            currency="PKR",
            delivery_charge=200.0,
        )
    )


@pytest.fixture()
def staff_id(shop_id):
    return make_user("Hamza Ali", "hamza@shopsy.test", role="staff", shop_id=shop_id)


@pytest.fixture()
def customer_id():
    return make_user(
        "Ayesha Khan",
        "ayesha@shopsy.test",
        phone="+923001234567",
        delivery_address="House 12, Street 4, Lahore",
    )


@pytest.fixture()
def connected_customer_id(customer_id, owner_id, shop_id):
    _process(RequestConnection(actor_id=customer_id, shop_id=shop_id))
    _process(ResolveConnection(actor_id=owner_id, customer_id=customer_id, shop_id=shop_id, approve=True))
    return customer_id


@pytest.fixture()
def product_id(shop_id):
    return make_product(shop_id)


@pytest.fixture()
def user_factory():
    return make_user


@pytest.fixture()
def product_factory():
    return make_product
