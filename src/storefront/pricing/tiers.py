"""Quantity-tiered pricing.

A tier is anything with ``min_quantity``, ``max_quantity`` (``None`` for
open-ended) and ``price`` attributes: ``QuantityRange`` entities on a product,
or plain ``PriceTier`` tuples in tests and quotes.
"""

import math
from typing import NamedTuple

from storefront.shared.money import Money


class PriceTier(NamedTuple):
    min_quantity: int
    max_quantity: int | None
    price: Money


def _upper_bound(tier):
    return math.inf if not tier.max_quantity else tier.max_quantity


def tier_matches(tier, quantity):
    return quantity >= tier.min_quantity and (not tier.max_quantity or quantity <= tier.max_quantity)


def resolve_unit_price(quantity, tiers, base_price):
    """Return the unit price for ``quantity``.

    Tiers are checked in the order given and the first one whose range holds
    ``quantity`` wins, so overlapping tiers resolve to the earlier entry.
    Falls back to ``base_price`` when nothing matches or ``quantity`` is not
    a number.
    """
    try:
        quantity = int(quantity)
    except (TypeError, ValueError):
        return base_price

    for tier in tiers or []:
        if tier_matches(tier, quantity):
            return tier.price
    return base_price


def ranges_overlap(tiers):
    """True when any two tiers share at least one quantity."""
    tiers = list(tiers)
    for i, first in enumerate(tiers):
        for second in tiers[i + 1 :]:
            if first.min_quantity <= _upper_bound(second) and _upper_bound(first) >= second.min_quantity:
                return True
    return False
