"""Money and conversion-rate value objects.

Every monetary amount in the storefront is carried in all three supported
currencies at once. The three fields describe the same nominal value at the
rates in force when the amount was created; nothing re-checks them later.
"""

from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Float

from storefront.domain import storefront
from storefront.settings import DEFAULT_CNY_TO_BDT, DEFAULT_USD_TO_BDT


class Currency(Enum):
    BDT = "BDT"
    USD = "USD"
    CNY = "CNY"


# Currencies a product price can be entered in
INPUT_CURRENCIES = (Currency.CNY, Currency.USD)


def as_currency(value):
    """Coerce a currency code (any case) or member to a ``Currency``."""
    if isinstance(value, Currency):
        return value
    try:
        return Currency(str(value).upper())
    except ValueError:
        raise ValidationError({"currency": [f"Unsupported currency: {value}"]}) from None


@storefront.value_object
class Money:
    """An amount expressed in BDT, USD and CNY."""

    bdt = Float(default=0.0, min_value=0.0)
    usd = Float(default=0.0, min_value=0.0)
    cny = Float(default=0.0, min_value=0.0)

    @classmethod
    def zero(cls):
        return cls(bdt=0.0, usd=0.0, cny=0.0)

    def amount_in(self, currency):
        """Return the amount held for ``currency``."""
        currency = as_currency(currency)
        if currency is Currency.BDT:
            return self.bdt
        if currency is Currency.USD:
            return self.usd
        if currency is Currency.CNY:
            return self.cny
        raise ValidationError({"currency": [f"Unsupported currency: {currency}"]})

    def plus(self, other):
        return Money(bdt=self.bdt + other.bdt, usd=self.usd + other.usd, cny=self.cny + other.cny)

    def minus(self, other):
        """Subtract per currency, flooring each field at zero."""
        return Money(
            bdt=max(self.bdt - other.bdt, 0.0),
            usd=max(self.usd - other.usd, 0.0),
            cny=max(self.cny - other.cny, 0.0),
        )

    def times(self, factor):
        return Money(bdt=self.bdt * factor, usd=self.usd * factor, cny=self.cny * factor)

    def rounded(self, places=2):
        return Money(bdt=round(self.bdt, places), usd=round(self.usd, places), cny=round(self.cny, places))

    def as_dict(self):
        return {"bdt": self.bdt, "usd": self.usd, "cny": self.cny}


def sum_money(amounts):
    """Add up an iterable of ``Money`` per currency."""
    total = Money.zero()
    for amount in amounts:
        total = total.plus(amount)
    return total


@storefront.value_object
class ConversionRates:
    """How many BDT one USD and one CNY are worth."""

    usd_to_bdt = Float(default=DEFAULT_USD_TO_BDT)
    cny_to_bdt = Float(default=DEFAULT_CNY_TO_BDT)

    @classmethod
    def default(cls):
        return cls(usd_to_bdt=DEFAULT_USD_TO_BDT, cny_to_bdt=DEFAULT_CNY_TO_BDT)

    @invariant.post
    def rates_must_be_positive(self):
        if self.usd_to_bdt is None or self.usd_to_bdt <= 0:
            raise ValidationError({"usd_to_bdt": ["Conversion rate must be positive"]})
        if self.cny_to_bdt is None or self.cny_to_bdt <= 0:
            raise ValidationError({"cny_to_bdt": ["Conversion rate must be positive"]})
