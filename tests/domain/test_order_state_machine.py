"""Tests for Order status transitions and the tracking history they append."""

import pytest

from storefront.exceptions import InvalidStatusError
from storefront.ordering.events import OrderStatusChanged
from storefront.ordering.tracking import (
    ALLOWED_TRANSITIONS,
    TERMINAL_STATES,
    OrderStatus,
    PaymentStatus,
    tracking_details_for,
)

from factories import place_order


def _order_at(*statuses):
    order = place_order()
    for status in statuses:
        order.apply_status(status)
    order._events.clear()
    return order


# ---------------------------------------------------------------
# Happy path transitions
# ---------------------------------------------------------------
class TestValidTransitions:
    def test_pending_to_confirmed_appends_entry(self):
        order = _order_at()
        assert order.apply_status("confirmed") is True
        assert order.status == "confirmed"
        timeline = order.timeline()
        assert len(timeline) == 2
        assert timeline[-1].status == "Order Confirmed"
        assert timeline[-1].location == "Order System"
        assert timeline[-1].code == "confirmed"

    def test_full_main_path(self):
        order = _order_at()
        path = ["confirmed", "processing", "shipped", "in-transit", "out-for-delivery", "delivered"]
        for status in path:
            order.apply_status(status)
        assert order.status == "delivered"
        assert [entry.code for entry in order.timeline()] == ["pending", *path]

    def test_forward_skip_allowed(self):
        order = _order_at()
        order.apply_status("shipped")
        assert order.status == "shipped"
        assert order.timeline()[-1].location == "China"

    def test_accepts_enum_member(self):
        order = _order_at()
        order.apply_status(OrderStatus.PROCESSING)
        assert order.status == "processing"

    @pytest.mark.parametrize("status", ["canceled", "returned"])
    def test_side_branches_from_any_open_state(self, status):
        order = _order_at("confirmed", "processing", "shipped")
        order.apply_status(status)
        assert order.status == status


# ---------------------------------------------------------------
# Idempotence and rejection
# ---------------------------------------------------------------
class TestSameStatus:
    def test_same_status_is_a_no_op(self):
        order = _order_at("confirmed")
        before = len(order.timeline())
        assert order.apply_status("confirmed") is False
        assert len(order.timeline()) == before
        assert not order._events


class TestInvalidTransitions:
    def test_unknown_status(self):
        order = _order_at()
        with pytest.raises(InvalidStatusError) as exc:
            order.apply_status("teleported")
        assert "status" in exc.value.messages
        assert len(order.timeline()) == 1

    def test_backward_move(self):
        order = _order_at("confirmed", "shipped")
        with pytest.raises(InvalidStatusError):
            order.apply_status("processing")
        assert order.status == "shipped"

    @pytest.mark.parametrize("terminal", ["delivered", "canceled", "returned"])
    def test_terminal_states_allow_nothing(self, terminal):
        order = _order_at(terminal)
        for status in ("pending", "confirmed", "shipped", "canceled", "returned", "delivered"):
            if status == terminal:
                continue
            with pytest.raises(InvalidStatusError):
                order.apply_status(status)

    def test_table_matches_terminal_states(self):
        for status in TERMINAL_STATES:
            assert ALLOWED_TRANSITIONS[status] == set()
        for status in set(OrderStatus) - TERMINAL_STATES:
            assert {OrderStatus.CANCELED, OrderStatus.RETURNED} <= ALLOWED_TRANSITIONS[status]


# ---------------------------------------------------------------
# Tracking history
# ---------------------------------------------------------------
class TestTrackingHistory:
    def test_prior_entries_unchanged(self):
        order = _order_at("confirmed")
        snapshot = [(e.sequence, e.status, e.timestamp, e.location, e.notes) for e in order.timeline()]
        order.apply_status("processing")
        after = [(e.sequence, e.status, e.timestamp, e.location, e.notes) for e in order.timeline()]
        assert after[: len(snapshot)] == snapshot

    def test_sequences_and_timestamps_increase(self):
        order = _order_at("confirmed", "processing", "shipped", "in-transit")
        timeline = order.timeline()
        assert [e.sequence for e in timeline] == [1, 2, 3, 4, 5]
        timestamps = [e.timestamp for e in timeline]
        assert all(earlier < later for earlier, later in zip(timestamps, timestamps[1:]))

    def test_confirm_then_deliver_gives_three_entries(self):
        order = _order_at("confirmed", "delivered")
        timeline = order.timeline()
        assert [e.code for e in timeline] == ["pending", "confirmed", "delivered"]
        assert timeline[0].timestamp < timeline[1].timestamp < timeline[2].timestamp

    def test_event_raised_per_transition(self):
        order = _order_at()
        order.apply_status("confirmed")
        order.apply_status("processing")
        events = [e for e in order._events if isinstance(e, OrderStatusChanged)]
        assert [(e.previous_status, e.new_status) for e in events] == [
            ("pending", "confirmed"),
            ("confirmed", "processing"),
        ]
        assert events[-1].tracking_sequence == 3


class TestSideEffects:
    def test_delivered_stamps_delivery_time(self):
        order = _order_at("confirmed")
        assert order.delivered_at is None
        order.apply_status("delivered")
        assert order.delivered_at is not None

    def test_cancel_cancels_pending_payment(self):
        order = _order_at()
        order.apply_status("canceled")
        assert order.payment_status == PaymentStatus.CANCELLED.value

    def test_return_refunds_paid_order(self):
        order = _order_at("confirmed")
        order.record_payment(order.total_amount.bdt, "TXN-1")
        order.apply_status("returned")
        assert order.payment_status == PaymentStatus.REFUNDED.value

    def test_return_leaves_unpaid_order_pending(self):
        order = _order_at("confirmed")
        order.apply_status("returned")
        assert order.payment_status == PaymentStatus.PENDING.value


class TestTrackingLookup:
    @pytest.mark.parametrize(
        "status, label, location",
        [
            ("pending", "Order Placed", "Order System"),
            ("processing", "Processing", "Warehouse"),
            ("in-transit", "In Transit", "International Shipping"),
            ("out-for-delivery", "Out for Delivery", "Local Delivery"),
            ("delivered", "Delivered", "Destination"),
            ("returned", "Order Returned", "Return Center"),
        ],
    )
    def test_known_statuses(self, status, label, location):
        details = tracking_details_for(status)
        assert details.status == label
        assert details.location == location

    def test_unknown_status_gets_generic_entry(self):
        details = tracking_details_for("on-hold")
        assert details.status == "Status: on-hold"
        assert details.location == "Order System"
        assert details.notes == "Order status updated to on-hold."
