"""BDD tests for the order status and tracking lifecycle."""

from protean import current_domain
from pytest_bdd import parsers, scenarios, then, when

from storefront.exceptions import InvalidStatusError
from storefront.ordering.order import Order
from storefront.ordering.status import UpdateOrderStatus

scenarios("features/order_lifecycle.feature")


def _order(order_id):
    return current_domain.repository_for(Order).get(order_id)


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse('the order status is set to "{status}"'))
def set_status(order_id, status, error):
    try:
        current_domain.process(UpdateOrderStatus(order_reference=order_id, status=status), asynchronous=False)
    except InvalidStatusError as exc:
        error["exc"] = exc


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the order has {count:d} tracking entries"))
def order_has_n_tracking_entries(order_id, count):
    assert len(_order(order_id).tracking_history) == count


@then(parsers.cfparse('the latest tracking entry is at "{location}"'))
def latest_entry_location(order_id, location):
    assert _order(order_id).timeline()[-1].location == location


@then(parsers.cfparse('the latest tracking entry reads "{label}" at "{location}"'))
def latest_entry_reads(order_id, label, location):
    entry = _order(order_id).timeline()[-1]
    assert entry.status == label
    assert entry.location == location


@then("the order has a delivery time")
def order_has_delivery_time(order_id):
    assert _order(order_id).delivered_at is not None


@then("the status change is rejected")
def status_change_rejected(error):
    assert error["exc"] is not None, "Expected an InvalidStatusError but none was raised"
    assert isinstance(error["exc"], InvalidStatusError)


@then(parsers.cfparse('the order payment status is "{payment_status}"'))
def order_payment_status_is(order_id, payment_status):
    assert _order(order_id).payment_status == payment_status
