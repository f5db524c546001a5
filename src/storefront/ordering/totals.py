"""Order totals engine.

Totals are kept per currency:

    total_amount = sub_total + shipping_rate - total_discount

Shipping is a flat BDT charge per order, spread over USD and CNY with the
conversion rates the order was placed with.
"""

from enum import Enum
from typing import NamedTuple

from protean.exceptions import ValidationError

from storefront.pricing.conversion import normalize
from storefront.settings import AIR_SHIPPING_BDT, SEA_SHIPPING_BDT
from storefront.shared.money import Currency, Money, sum_money


class ShippingMethod(Enum):
    AIR = "air"
    SEA = "sea"


SHIPPING_RATES_BDT = {
    ShippingMethod.AIR: AIR_SHIPPING_BDT,
    ShippingMethod.SEA: SEA_SHIPPING_BDT,
}


class OrderTotals(NamedTuple):
    sub_total: Money
    shipping_rate: Money
    total_discount: Money
    total_amount: Money


def as_shipping_method(value):
    if isinstance(value, ShippingMethod):
        return value
    try:
        return ShippingMethod(str(value).lower())
    except ValueError:
        raise ValidationError({"shipping_method": ["Shipping method must be air or sea"]}) from None


def shipping_rate_for(shipping_method, rates):
    """Flat shipping charge for ``shipping_method`` in all three currencies."""
    method = as_shipping_method(shipping_method)
    return normalize(SHIPPING_RATES_BDT[method], Currency.BDT, rates)


def calculate_totals(line_items, shipping_method, discount_rate, rates):
    """Price a set of line items.

    Each line item must carry a ``total_price`` ``Money``. The discount is a
    fraction of the sub total and never applies to shipping. Every amount in
    the result is rounded to two decimal places.
    """
    sub_total = sum_money(item.total_price for item in line_items).rounded()
    shipping_rate = shipping_rate_for(shipping_method, rates).rounded()
    total_discount = sub_total.times(discount_rate or 0.0).rounded()
    total_amount = sub_total.plus(shipping_rate).minus(total_discount).rounded()

    return OrderTotals(
        sub_total=sub_total,
        shipping_rate=shipping_rate,
        total_discount=total_discount,
        total_amount=total_amount,
    )
