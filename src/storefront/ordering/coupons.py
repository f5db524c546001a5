"""Coupon lookup.

The storefront runs a single coupon at a time, configured through
``STOREFRONT_COUPON_CODE`` and ``STOREFRONT_COUPON_RATE``.
"""

from storefront import settings
from storefront.exceptions import InvalidCouponError


def validate_coupon(code, strict=False):
    """Return the discount rate for ``code``.

    An empty or unknown code gives ``0.0``. With ``strict=True`` an unknown
    (non-empty) code raises ``InvalidCouponError`` instead.
    """
    if not code:
        return 0.0

    code = code.strip()
    if code == settings.COUPON_CODE:
        return settings.COUPON_RATE

    if strict:
        raise InvalidCouponError({"coupon_code": [f"Coupon `{code}` is not valid"]})
    return 0.0
