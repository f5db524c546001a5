"""Currency normalization — derive BDT/USD/CNY amounts from one input amount.

Product prices are entered in CNY or USD and BDT follows from the product's
own conversion rates. USD and CNY are tied by a fixed factor of 7 that does
not follow those rates, so the BDT figure of a CNY-entered price and of the
equivalent USD-entered price can disagree.
"""

import math
from numbers import Real

from storefront.shared.money import Currency, Money, as_currency

USD_TO_CNY = 7


def _coerce_amount(amount):
    """Return ``amount`` as a usable non-negative float, or ``None``."""
    if isinstance(amount, bool) or not isinstance(amount, Real | str):
        return None
    try:
        value = float(amount)
    except ValueError:
        return None
    if not math.isfinite(value) or value <= 0:
        return None
    return value


def normalize(amount, input_currency, rates):
    """Spread ``amount`` given in ``input_currency`` over all three currencies.

    Missing, non-numeric, NaN, infinite, zero or negative amounts produce a
    zero ``Money``. No rounding happens here; use ``Money.rounded`` for display.

    Raises:
        ValidationError: ``input_currency`` is not CNY, USD or BDT. Amounts
            never raise; a bad currency code is a caller error, not bad data.
    """
    value = _coerce_amount(amount)
    if value is None:
        return Money.zero()

    currency = as_currency(input_currency)
    if currency is Currency.CNY:
        return Money(bdt=value * rates.cny_to_bdt, usd=value / USD_TO_CNY, cny=value)
    if currency is Currency.USD:
        return Money(bdt=value * rates.usd_to_bdt, usd=value, cny=value * USD_TO_CNY)
    return Money(bdt=value, usd=value / rates.usd_to_bdt, cny=value / rates.cny_to_bdt)
