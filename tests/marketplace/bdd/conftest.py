"""Shared BDD fixtures and step definitions for the Marketplace domain."""

import pytest
from marketplace.order.order import Order
from protean import current_domain
from pytest_bdd import parsers, then


@pytest.fixture()
def ctx():
    """Scenario state shared between steps."""
    return {"error": None, "products": {}, "banners": {}}


@pytest.fixture()
def attempt(ctx):
    """Run a command and keep any error for a later Then step."""

    def _attempt(command):
        try:
            ctx["result"] = current_domain.process(command, asynchronous=False)
            ctx["error"] = None
        except Exception as exc:
            ctx["result"] = None
            ctx["error"] = exc

    return _attempt


# ---------------------------------------------------------------------------
# Then steps: Order
# ---------------------------------------------------------------------------
@then(parsers.parse('the order status is "{status}"'))
def _(ctx, status):
    assert current_domain.repository_for(Order).get(ctx["order"]).order_status == status


@then(parsers.parse('the payment status is "{status}"'))
def _(ctx, status):
    assert current_domain.repository_for(Order).get(ctx["order"]).payment_status == status


@then("no error is raised")
def _(ctx):
    assert ctx["error"] is None
