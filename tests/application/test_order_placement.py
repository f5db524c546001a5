"""Application tests for placing orders."""

import json
from unittest.mock import patch

import pytest
from protean import current_domain
from protean.exceptions import ValidationError

from storefront.exceptions import EmptyOrderError, InvalidCouponError
from storefront.ordering.order import Order
from storefront.ordering.placement import PlaceOrder
from storefront.ordering.repository import OrderRepository

from factories import ADDRESS


def _line_items(bdt=5000.0):
    return json.dumps(
        [
            {
                "product_id": "prod-001",
                "title": "Canvas Tote Bag",
                "color": "Black",
                "quantity": 2,
                "unit_price": {"bdt": bdt / 2, "usd": 20.0, "cny": 140.0},
            }
        ]
    )


def _place(line_items=None, **kwargs):
    defaults = {
        "customer_id": "cust-001",
        "line_items": _line_items() if line_items is None else line_items,
        "shipping_method": "air",
        "payment_currency": "BDT",
        "shipping_address": json.dumps(ADDRESS),
    }
    defaults.update(kwargs)
    return current_domain.process(PlaceOrder(**defaults), asynchronous=False)


class TestPlaceOrder:
    def test_order_persisted(self):
        order_id = _place()
        order = current_domain.repository_for(Order).get(order_id)
        assert order.status == "pending"
        assert order.total_amount.bdt == 6500.0
        assert order.shipping_address.city == "Dhaka"
        assert len(order.line_items) == 1
        assert len(order.tracking_history) == 1

    def test_valid_coupon_discounts(self):
        order_id = _place(coupon_code="BSM5")
        order = current_domain.repository_for(Order).get(order_id)
        assert order.total_discount.bdt == 250.0
        assert order.total_amount.bdt == 6250.0

    def test_invalid_coupon_is_no_discount(self):
        order_id = _place(coupon_code="FREE50")
        order = current_domain.repository_for(Order).get(order_id)
        assert order.total_discount.bdt == 0.0
        assert order.coupon_code is None

    def test_strict_coupon_rejects_invalid_code(self):
        with pytest.raises(InvalidCouponError):
            _place(coupon_code="FREE50", strict_coupon=True)

    def test_custom_rates_snapshotted(self):
        order_id = _place(usd_to_bdt=125.0, cny_to_bdt=18.0)
        order = current_domain.repository_for(Order).get(order_id)
        assert order.currency_rates.usd_to_bdt == 125.0
        assert order.shipping_rate.usd == round(1500 / 125.0, 2)

    def test_found_by_order_number(self):
        order_id = _place()
        order = current_domain.repository_for(Order).get(order_id)
        found = current_domain.repository_for(Order).get_by_reference(order.order_number)
        assert found.id == order.id


class TestEmptyOrder:
    def test_raises_and_writes_nothing(self):
        with patch.object(OrderRepository, "add") as mock_add:
            with pytest.raises(EmptyOrderError):
                _place(line_items=json.dumps([]))
        mock_add.assert_not_called()

    def test_no_order_stored(self):
        with pytest.raises(EmptyOrderError):
            _place(line_items=json.dumps([]))
        assert current_domain.repository_for(Order)._dao.query.all().total == 0


class TestIncompleteLineItems:
    def test_title_not_required(self):
        items = json.dumps(
            [{"product_id": "prod-001", "quantity": 1, "unit_price": {"bdt": 5000.0, "usd": 41.15, "cny": 285.71}}]
        )
        order_id = _place(line_items=items)
        order = current_domain.repository_for(Order).get(order_id)
        assert order.line_items[0].title is None
        assert order.total_amount.bdt == 6500.0

    def test_missing_unit_price_is_a_validation_error(self):
        items = json.dumps([{"product_id": "prod-001", "title": "Canvas Tote Bag", "quantity": 1}])
        with pytest.raises(ValidationError) as exc:
            _place(line_items=items)
        assert exc.value.messages == {"line_items": ["Line item is missing unit_price"]}
        assert current_domain.repository_for(Order)._dao.query.all().total == 0
