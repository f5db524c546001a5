"""Integration tests for the OrdersByStatus read model."""

import json

from protean import current_domain

from storefront.ordering.payment import RecordPayment
from storefront.ordering.placement import PlaceOrder
from storefront.ordering.revision import ReviseOrderPricing
from storefront.ordering.status import UpdateOrderStatus
from storefront.projections.orders_by_status import OrdersByStatus


def _place_order():
    return current_domain.process(
        PlaceOrder(
            customer_id="cust-001",
            line_items=json.dumps(
                [
                    {
                        "product_id": "prod-001",
                        "title": "Canvas Tote Bag",
                        "quantity": 1,
                        "unit_price": {"bdt": 5000.0, "usd": 41.15, "cny": 285.71},
                    }
                ]
            ),
            shipping_method="air",
        ),
        asynchronous=False,
    )


def _view(order_id):
    return current_domain.repository_for(OrdersByStatus).get(order_id)


class TestOrdersByStatusProjection:
    def test_created_on_placement(self):
        order_id = _place_order()
        view = _view(order_id)
        assert view.status == "pending"
        assert view.payment_status == "pending"
        assert view.total_bdt == 6500.0
        assert view.order_number.startswith("BSM-ORD-")

    def test_follows_status_changes(self):
        order_id = _place_order()
        current_domain.process(UpdateOrderStatus(order_reference=order_id, status="canceled"), asynchronous=False)
        view = _view(order_id)
        assert view.status == "canceled"
        assert view.payment_status == "cancelled"

    def test_follows_payments(self):
        order_id = _place_order()
        current_domain.process(
            RecordPayment(order_reference=order_id, amount=1000.0, transaction_id="BK-1"),
            asynchronous=False,
        )
        assert _view(order_id).payment_status == "partially_paid"

    def test_follows_pricing_revisions(self):
        order_id = _place_order()
        current_domain.process(
            ReviseOrderPricing(order_reference=order_id, shipping_method="sea"),
            asynchronous=False,
        )
        assert _view(order_id).total_bdt == 6000.0
