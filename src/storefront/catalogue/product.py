"""Product aggregate — catalogue pricing that orders and carts read from.

Prices are entered in the product's input currency (CNY or USD) and stored
normalized into BDT/USD/CNY with the product's own conversion rates. Bulk
buyers get the price of the first quantity range that holds their quantity.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Integer, String, ValueObject

from storefront.catalogue.events import ProductCreated, ProductRatesUpdated, QuantityPricingSet
from storefront.domain import storefront
from storefront.pricing.conversion import normalize
from storefront.pricing.tiers import PriceTier, ranges_overlap, resolve_unit_price
from storefront.shared.money import ConversionRates, Money


class InputCurrency(Enum):
    CNY = "CNY"
    USD = "USD"


@storefront.entity(part_of="Product")
class QuantityRange:
    """Unit price for orders of ``min_quantity`` up to ``max_quantity`` pieces."""

    min_quantity = Integer(required=True, min_value=1)
    max_quantity = Integer(min_value=1)  # Open-ended when unset
    price = ValueObject(Money, required=True)

    @invariant.post
    def max_quantity_cannot_be_below_min(self):
        if self.max_quantity and self.min_quantity and self.max_quantity < self.min_quantity:
            raise ValidationError(
                {"max_quantity": ["Max quantity must be greater than or equal to minimum quantity"]}
            )


@storefront.aggregate
class Product:
    sku = String(required=True, max_length=50)
    title = String(required=True, max_length=200)
    input_currency = String(choices=InputCurrency, default=InputCurrency.CNY.value)
    price = ValueObject(Money)
    expense = ValueObject(Money)
    currency_rates = ValueObject(ConversionRates)
    minimum_order_quantity = Integer(default=1, min_value=1)
    quantity_ranges = HasMany(QuantityRange)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def quantity_ranges_cannot_overlap(self):
        if self.quantity_ranges and ranges_overlap(self.quantity_ranges):
            raise ValidationError({"quantity_ranges": ["Quantity ranges cannot overlap"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        sku,
        title,
        price,
        input_currency=InputCurrency.CNY.value,
        expense=0.0,
        rates=None,
        minimum_order_quantity=1,
        quantity_ranges=None,
    ):
        """Create a product from amounts given in ``input_currency``.

        Args:
            price: Unit price in the input currency.
            expense: Sourcing cost in the input currency.
            rates: ``ConversionRates``; the configured defaults when omitted.
            quantity_ranges: List of dicts with min_quantity, max_quantity
                and price (in the input currency).
        """
        try:
            currency = InputCurrency(str(input_currency).upper()).value
        except ValueError:
            raise ValidationError({"input_currency": ["Input currency must be CNY or USD"]}) from None
        rates = rates or ConversionRates.default()
        now = datetime.now(UTC)

        product = cls(
            sku=sku,
            title=title,
            input_currency=currency,
            price=normalize(price, currency, rates),
            expense=normalize(expense, currency, rates),
            currency_rates=rates,
            minimum_order_quantity=minimum_order_quantity or 1,
            created_at=now,
            updated_at=now,
        )
        if quantity_ranges:
            product._replace_ranges(quantity_ranges)

        product.raise_(
            ProductCreated(
                product_id=str(product.id),
                sku=sku,
                title=title,
                input_currency=currency,
                price_bdt=product.price.bdt,
                price_usd=product.price.usd,
                price_cny=product.price.cny,
                minimum_order_quantity=product.minimum_order_quantity,
                created_at=now,
            )
        )
        return product

    # -------------------------------------------------------------------
    # Pricing
    # -------------------------------------------------------------------
    def unit_price_for(self, quantity):
        """Unit price for ``quantity`` pieces after quantity tiers."""
        return resolve_unit_price(quantity, self.quantity_ranges, self.price or Money.zero())

    def _to_money(self, amount):
        return normalize(amount, self.input_currency, self.currency_rates)

    def _replace_ranges(self, ranges_data):
        tiers = []
        for data in ranges_data:
            min_quantity = data.get("min_quantity")
            max_quantity = data.get("max_quantity") or None
            if not min_quantity or min_quantity < 1:
                raise ValidationError({"min_quantity": ["Minimum quantity must be at least 1"]})
            if max_quantity is not None and max_quantity < min_quantity:
                raise ValidationError(
                    {"max_quantity": ["Max quantity must be greater than or equal to minimum quantity"]}
                )
            tiers.append(PriceTier(min_quantity, max_quantity, self._to_money(data.get("price"))))

        if ranges_overlap(tiers):
            raise ValidationError({"quantity_ranges": ["Quantity ranges cannot overlap"]})

        for existing in list(self.quantity_ranges):
            self.remove_quantity_ranges(existing)
        for tier in tiers:
            self.add_quantity_ranges(
                QuantityRange(
                    min_quantity=tier.min_quantity,
                    max_quantity=tier.max_quantity,
                    price=tier.price,
                )
            )
        return tiers

    def set_quantity_pricing(self, ranges_data):
        """Replace the quantity ranges; prices are in the input currency."""
        tiers = self._replace_ranges(ranges_data)
        now = datetime.now(UTC)
        self.updated_at = now

        self.raise_(
            QuantityPricingSet(
                product_id=str(self.id),
                ranges=json.dumps(
                    [
                        {
                            "min_quantity": tier.min_quantity,
                            "max_quantity": tier.max_quantity,
                            "price": tier.price.as_dict(),
                        }
                        for tier in tiers
                    ]
                ),
                updated_at=now,
            )
        )

    def update_currency_rates(self, usd_to_bdt, cny_to_bdt):
        """Switch to new rates and re-derive every price from its input-currency amount."""
        rates = ConversionRates(usd_to_bdt=usd_to_bdt, cny_to_bdt=cny_to_bdt)
        price_input = self.price.amount_in(self.input_currency) if self.price else 0.0
        expense_input = self.expense.amount_in(self.input_currency) if self.expense else 0.0

        self.currency_rates = rates
        self.price = self._to_money(price_input)
        self.expense = self._to_money(expense_input)
        for quantity_range in self.quantity_ranges:
            quantity_range.price = self._to_money(quantity_range.price.amount_in(self.input_currency))

        now = datetime.now(UTC)
        self.updated_at = now

        self.raise_(
            ProductRatesUpdated(
                product_id=str(self.id),
                usd_to_bdt=usd_to_bdt,
                cny_to_bdt=cny_to_bdt,
                price_bdt=self.price.bdt,
                updated_at=now,
            )
        )
