"""Storefront error types.

Validation failures extend Protean's ``ValidationError`` so they carry the
usual ``{field: [messages]}`` payload; lookup failures extend
``ObjectNotFoundError`` and set the same ``messages`` payload themselves.
"""

from protean.exceptions import ObjectNotFoundError, ValidationError


class EmptyOrderError(ValidationError):
    """An order was requested without any line items."""

    def __init__(self, messages=None):
        super().__init__(messages or {"line_items": ["No items to order"]})


class InvalidStatusError(ValidationError):
    """An order status is unknown or not reachable from the current one."""


class InvalidCouponError(ValidationError):
    """A coupon code was rejected while strict coupon checking was requested."""


class OrderNotFoundError(ObjectNotFoundError):
    """No order matches the given id or order number."""

    def __init__(self, reference):
        self.reference = reference
        self.messages = {"order": [f"Order `{reference}` was not found"]}
        super().__init__(self.messages)
