"""Shopping Cart aggregate — session-scoped lines waiting to become an order.

A cart is keyed by the shopper's session id and created on first use. Lines of
the same product, color and size are merged. All lines of a product share the
unit price of the quantity tier their combined quantity falls in.
"""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer, String, ValueObject

from storefront.cart.events import CartCleared, CartLineAdded, CartLineRemoved
from storefront.domain import storefront
from storefront.shared.money import ConversionRates, Money, sum_money


@storefront.entity(part_of="ShoppingCart")
class CartLine:
    product_id = Identifier(required=True)
    title = String(required=True, max_length=200)
    color = String(max_length=50)
    size = String(max_length=50)
    quantity = Integer(required=True, min_value=1)
    unit_price = ValueObject(Money, required=True)
    total_price = ValueObject(Money, required=True)
    added_at = DateTime()

    def as_line_item(self):
        return {
            "product_id": str(self.product_id),
            "title": self.title,
            "color": self.color,
            "size": self.size,
            "quantity": self.quantity,
            "unit_price": self.unit_price,
            "total_price": self.total_price,
        }


@storefront.aggregate
class ShoppingCart:
    customer_id = Identifier()  # Nullable for guest carts
    lines = HasMany(CartLine)
    currency_rates = ValueObject(ConversionRates)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def start(cls, session_id, customer_id=None):
        now = datetime.now(UTC)
        return cls(
            id=session_id,
            customer_id=customer_id,
            currency_rates=ConversionRates.default(),
            created_at=now,
            updated_at=now,
        )

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def lines_for(self, product_id):
        return [line for line in self.lines or [] if str(line.product_id) == str(product_id)]

    def quantity_of(self, product_id):
        """Combined quantity of ``product_id`` over all its lines."""
        return sum(line.quantity for line in self.lines_for(product_id))

    def sub_total(self):
        return sum_money(line.total_price for line in self.lines or [])

    def checkout_lines(self):
        return [line.as_line_item() for line in self.lines or []]

    # -------------------------------------------------------------------
    # Line management
    # -------------------------------------------------------------------
    def add_line(
        self,
        product_id,
        title,
        quantity,
        unit_price,
        color=None,
        size=None,
        minimum_order_quantity=1,
        customer_id=None,
    ):
        """Add ``quantity`` pieces of a product variant.

        ``unit_price`` is the tier price for the product's combined quantity
        after this addition; every line of the product is repriced with it.
        """
        if not quantity or quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        product_quantity = self.quantity_of(product_id) + quantity
        if product_quantity < (minimum_order_quantity or 1):
            raise ValidationError(
                {"quantity": [f"Minimum order quantity for this product is {minimum_order_quantity}"]}
            )

        now = datetime.now(UTC)
        existing = next(
            (line for line in self.lines_for(product_id) if line.color == color and line.size == size),
            None,
        )
        if existing:
            existing.quantity += quantity
            line = existing
        else:
            line = CartLine(
                product_id=product_id,
                title=title,
                color=color,
                size=size,
                quantity=quantity,
                unit_price=unit_price,
                total_price=unit_price.times(quantity),
                added_at=now,
            )
            self.add_lines(line)

        self.reprice(product_id, unit_price)
        if customer_id and not self.customer_id:
            self.customer_id = customer_id
        self.updated_at = now

        self.raise_(
            CartLineAdded(
                cart_id=str(self.id),
                line_id=str(line.id),
                product_id=str(product_id),
                color=color,
                size=size,
                quantity=quantity,
                product_quantity=product_quantity,
                unit_price_bdt=unit_price.bdt,
            )
        )
        return line

    def reprice(self, product_id, unit_price):
        for line in self.lines_for(product_id):
            line.unit_price = unit_price
            line.total_price = unit_price.times(line.quantity)

    def remove_line(self, line_id):
        """Drop a line and return its product id."""
        line = next((line for line in self.lines or [] if str(line.id) == str(line_id)), None)
        if line is None:
            raise ValidationError({"line_id": ["Line not found in cart"]})

        product_id = str(line.product_id)
        self.remove_lines(line)
        self.updated_at = datetime.now(UTC)

        self.raise_(CartLineRemoved(cart_id=str(self.id), line_id=str(line_id), product_id=product_id))
        return product_id

    def clear(self, order_id=None):
        lines = list(self.lines or [])
        for line in lines:
            self.remove_lines(line)
        self.updated_at = datetime.now(UTC)

        self.raise_(CartCleared(cart_id=str(self.id), line_count=len(lines), order_id=order_id))
