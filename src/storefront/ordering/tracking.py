"""Order status state machine and the tracking lookup table.

Main path (forward moves may skip steps):
    pending → confirmed → processing → shipped → in-transit →
    out-for-delivery → delivered
Side branches: canceled, returned — reachable from any non-terminal state.
Terminal: delivered, canceled, returned.
"""

from enum import Enum
from typing import NamedTuple

from storefront.exceptions import InvalidStatusError


class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    IN_TRANSIT = "in-transit"
    OUT_FOR_DELIVERY = "out-for-delivery"
    DELIVERED = "delivered"
    CANCELED = "canceled"
    RETURNED = "returned"


class PaymentStatus(Enum):
    PENDING = "pending"
    PAID = "paid"
    PARTIALLY_PAID = "partially_paid"
    FAILED = "failed"
    REFUNDED = "refunded"
    CANCELLED = "cancelled"


_MAIN_PATH = [
    OrderStatus.PENDING,
    OrderStatus.CONFIRMED,
    OrderStatus.PROCESSING,
    OrderStatus.SHIPPED,
    OrderStatus.IN_TRANSIT,
    OrderStatus.OUT_FOR_DELIVERY,
    OrderStatus.DELIVERED,
]

TERMINAL_STATES = frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELED, OrderStatus.RETURNED})


def _build_transitions():
    transitions = {}
    for index, status in enumerate(_MAIN_PATH):
        if status in TERMINAL_STATES:
            continue
        transitions[status] = set(_MAIN_PATH[index + 1 :]) | {OrderStatus.CANCELED, OrderStatus.RETURNED}
    for status in TERMINAL_STATES:
        transitions[status] = set()
    return transitions


ALLOWED_TRANSITIONS = _build_transitions()


class TrackingDetails(NamedTuple):
    status: str
    location: str
    notes: str


SEED_TRACKING = TrackingDetails(
    status=OrderStatus.PENDING.value,
    location="Order Processing Center",
    notes="Order received and pending processing",
)

_TRACKING_DETAILS = {
    OrderStatus.PENDING: TrackingDetails(
        "Order Placed",
        "Order System",
        "Your order has been successfully placed. Our representative will contact you soon.",
    ),
    OrderStatus.CONFIRMED: TrackingDetails(
        "Order Confirmed",
        "Order System",
        "Your order has been confirmed and is being processed.",
    ),
    OrderStatus.PROCESSING: TrackingDetails(
        "Processing",
        "Warehouse",
        "Your order is being prepared and is ready to ship.",
    ),
    OrderStatus.SHIPPED: TrackingDetails(
        "Shipped",
        "China",
        "Your order has been shipped from China.",
    ),
    OrderStatus.IN_TRANSIT: TrackingDetails(
        "In Transit",
        "International Shipping",
        "Your order is currently in transit.",
    ),
    OrderStatus.OUT_FOR_DELIVERY: TrackingDetails(
        "Out for Delivery",
        "Local Delivery",
        "Your order is out for delivery.",
    ),
    OrderStatus.DELIVERED: TrackingDetails(
        "Delivered",
        "Destination",
        "Successfully delivered to your address.",
    ),
    OrderStatus.CANCELED: TrackingDetails(
        "Order Canceled",
        "Order System",
        "Order has been canceled.",
    ),
    OrderStatus.RETURNED: TrackingDetails(
        "Order Returned",
        "Return Center",
        "Order has been returned.",
    ),
}


def tracking_details_for(status):
    """Tracking label, location and notes for a status.

    Accepts an ``OrderStatus`` or a raw value. Values outside the enum get a
    generic entry; this is how tracking rows written by older admin tooling
    are rendered.
    """
    if isinstance(status, OrderStatus):
        return _TRACKING_DETAILS[status]
    try:
        return _TRACKING_DETAILS[OrderStatus(status)]
    except ValueError:
        return TrackingDetails(
            status=f"Status: {status}",
            location="Order System",
            notes=f"Order status updated to {status}.",
        )


def parse_status(value):
    """Return the ``OrderStatus`` for ``value`` or raise ``InvalidStatusError``."""
    if isinstance(value, OrderStatus):
        return value
    try:
        return OrderStatus(value)
    except ValueError:
        raise InvalidStatusError(
            {"status": [f"Unknown order status `{value}`. Expected one of: {', '.join(s.value for s in OrderStatus)}"]}
        ) from None


def assert_can_transition(current, target):
    """Raise ``InvalidStatusError`` unless ``current → target`` is in the table."""
    if target not in ALLOWED_TRANSITIONS.get(current, set()):
        raise InvalidStatusError({"status": [f"Cannot transition from {current.value} to {target.value}"]})
