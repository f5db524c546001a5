"""Shared BDD fixtures and step definitions for orders."""

import json

import pytest
from protean import current_domain
from pytest_bdd import given, parsers, then

from storefront.ordering.order import Order
from storefront.ordering.placement import PlaceOrder


def _place_order(sub_total, method, coupon_code=None):
    return current_domain.process(
        PlaceOrder(
            customer_id="cust-bdd-001",
            line_items=json.dumps(
                [
                    {
                        "product_id": "prod-001",
                        "title": "Canvas Tote Bag",
                        "quantity": 1,
                        "unit_price": {"bdt": float(sub_total), "usd": sub_total / 121.5, "cny": sub_total / 17.5},
                    }
                ]
            ),
            shipping_method=method,
            coupon_code=coupon_code,
        ),
        asynchronous=False,
    )


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def error():
    """Container for captured domain errors."""
    return {"exc": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(
    parsers.cfparse('a placed order of {sub_total:d} BDT shipped by "{method}"'),
    target_fixture="order_id",
)
def placed_order(sub_total, method):
    return _place_order(sub_total, method)


@given(
    parsers.cfparse('a placed order of {sub_total:d} BDT with coupon "{coupon_code}" shipped by "{method}"'),
    target_fixture="order_id",
)
def placed_order_with_coupon(sub_total, method, coupon_code):
    return _place_order(sub_total, method, coupon_code)


# ---------------------------------------------------------------------------
# Then steps (shared)
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order status is "{status}"'))
def order_status_is(order_id, status):
    assert current_domain.repository_for(Order).get(order_id).status == status


@then(parsers.cfparse("the order total is {amount:d} BDT"))
def order_total_is(order_id, amount):
    assert current_domain.repository_for(Order).get(order_id).total_amount.bdt == amount
