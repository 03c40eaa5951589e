"""BDD tests for checkout."""

import json

from marketplace.account.connections import RequestConnection, ResolveConnection
from marketplace.cart.cart import Cart
from marketplace.cart.checkout import PlaceOrder
from marketplace.cart.items import AddToCart
from marketplace.errors import InvalidCartError, NoActiveShopError
from marketplace.order.order import Order
from marketplace.shop.management import RegisterShop
from protean import current_domain
from pytest_bdd import given, parsers, scenarios, then, when

scenarios("features/checkout.feature")


def process(command):
    return current_domain.process(command, asynchronous=False)

_WHO = {"customer": "customer", "second customer": "second_customer"}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.parse("a physical shop with a delivery charge of {charge:g}"))
def _(ctx, admin_id, owner_id, charge):
    ctx["owner"] = owner_id
    ctx["shop"] = process(
        RegisterShop(
            actor_id=admin_id,
            name="Corner Store",
            owner_id=owner_id,
            shop_type="physical",
            delivery_charge=charge,
        )
    )


@given("a customer with an active connection to the shop")
def _(ctx, user_factory):
    customer = user_factory("Ayesha Khan", "ayesha@shopsy.test", phone="+923001234567", delivery_address="Lahore")
    process(RequestConnection(actor_id=customer, shop_id=ctx["shop"]))
    process(ResolveConnection(actor_id=ctx["owner"], customer_id=customer, shop_id=ctx["shop"], approve=True))
    ctx["customer"] = customer


@given("a second customer without a connection")
def _(ctx, user_factory):
    ctx["second_customer"] = user_factory(
        "Usman Raza", "usman@shopsy.test", phone="+923451234567", delivery_address="Multan"
    )


@given(parsers.parse('the shop sells "{name}" at {price:g}'))
def _(ctx, product_factory, name, price):
    ctx["products"][name] = product_factory(ctx["shop"], name=name, price=price)


@given(parsers.parse('the {who} has {quantity:d} of "{name}" in the cart'))
def _(ctx, who, quantity, name):
    process(
        AddToCart(
            actor_id=ctx[_WHO[who]],
            shop_id=ctx["shop"],
            product_id=ctx["products"][name],
            quantity=quantity,
        )
    )


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.parse("the {who} places an order"))
def _(ctx, attempt, who):
    attempt(PlaceOrder(actor_id=ctx[_WHO[who]], shop_id=ctx["shop"]))
    ctx["order"] = ctx.get("result")


@when("the customer places an order for the lines in the cart")
def _(ctx):
    cart = current_domain.repository_for(Cart).get(ctx["customer"])
    ctx["checkout"] = PlaceOrder(
        actor_id=ctx["customer"],
        shop_id=ctx["shop"],
        item_ids=json.dumps([str(item.id) for item in cart.items]),
    )
    ctx["order"] = process(ctx["checkout"])


@when("the customer submits the same checkout again")
def _(ctx, attempt):
    attempt(ctx["checkout"])


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.parse("the order total is {total:g}"))
def _(ctx, total):
    assert current_domain.repository_for(Order).get(ctx["order"]).pricing.total == total


@then("the customer's cart is empty")
def _(ctx):
    assert current_domain.repository_for(Cart).get(ctx["customer"]).items == []


@then("the checkout is refused as an invalid cart")
def _(ctx):
    assert isinstance(ctx["error"], InvalidCartError)


@then("the checkout is refused for lack of an active shop")
def _(ctx):
    assert isinstance(ctx["error"], NoActiveShopError)


@then(parsers.parse("the shop has {count:d} orders"))
def _(ctx, count):
    assert len(current_domain.repository_for(Order).for_shop(ctx["shop"])) == count
