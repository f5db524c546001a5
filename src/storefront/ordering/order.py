"""Order aggregate — priced line items plus an admin-driven tracking lifecycle.

An order is priced once when it is placed. Totals are only recomputed through
``revise_pricing`` while the order is still pending. Every status change
appends one ``TrackingEntry``; entries are never edited or removed.
"""

import random
from datetime import UTC, datetime, timedelta
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import (
    Boolean,
    DateTime,
    HasMany,
    Identifier,
    Integer,
    String,
    ValueObject,
)

from storefront.domain import storefront
from storefront.exceptions import EmptyOrderError
from storefront.ordering.coupons import validate_coupon
from storefront.ordering.events import (
    OrderNoteAdded,
    OrderPlaced,
    OrderPricingRevised,
    OrderStatusChanged,
    PaymentRecorded,
)
from storefront.ordering.totals import ShippingMethod, as_shipping_method, calculate_totals
from storefront.ordering.tracking import (
    SEED_TRACKING,
    OrderStatus,
    PaymentStatus,
    assert_can_transition,
    parse_status,
    tracking_details_for,
)
from storefront.pricing.conversion import normalize
from storefront.settings import ORDER_NUMBER_PREFIX
from storefront.shared.money import ConversionRates, Currency, Money, as_currency, sum_money


class PaymentMethod(Enum):
    CASH = "cash"
    CARD = "card"
    BKASH = "bkash"


def generate_order_number(now=None):
    """Human-facing order reference, e.g. ``BSM-ORD-19-10-26-4821``."""
    now = now or datetime.now(UTC)
    return f"{ORDER_NUMBER_PREFIX}-{now:%d-%m-%y}-{random.randint(1000, 9999)}"


def _as_money(value):
    if value is None:
        return None
    if isinstance(value, Money):
        return value
    if not isinstance(value, dict):
        raise ValidationError({"line_items": [f"Price must be a bdt/usd/cny mapping, got {value!r}"]})
    return Money(**value)


_REQUIRED_LINE_KEYS = ("product_id", "quantity", "unit_price")


def _line_item_from(data):
    """Build a ``LineItem`` from a checkout dict, rejecting incomplete rows."""
    if not isinstance(data, dict):
        raise ValidationError({"line_items": ["Each line item must be an object"]})
    missing = [key for key in _REQUIRED_LINE_KEYS if data.get(key) is None]
    if missing:
        raise ValidationError({"line_items": [f"Line item is missing {', '.join(missing)}"]})

    quantity = data["quantity"]
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
        raise ValidationError({"line_items": ["Line item quantity must be a whole number of at least 1"]})

    unit_price = _as_money(data["unit_price"])
    return LineItem(
        product_id=data["product_id"],
        title=data.get("title"),
        color=data.get("color"),
        size=data.get("size"),
        quantity=quantity,
        unit_price=unit_price,
        total_price=_as_money(data.get("total_price")) or unit_price.times(quantity),
    )


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@storefront.value_object(part_of="Order")
class ShippingAddress:
    street = String(required=True, max_length=255)
    city = String(required=True, max_length=100)
    state = String(max_length=100)
    postal_code = String(max_length=20)
    country = String(max_length=100, default="Bangladesh")


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@storefront.entity(part_of="Order")
class LineItem:
    """A product, variant and quantity at the unit price in force at checkout."""

    product_id = Identifier(required=True)
    title = String(max_length=200)
    color = String(max_length=50)
    size = String(max_length=50)
    quantity = Integer(required=True, min_value=1)
    unit_price = ValueObject(Money, required=True)
    total_price = ValueObject(Money, required=True)


@storefront.entity(part_of="Order")
class TrackingEntry:
    sequence = Integer(required=True, min_value=1)
    code = String(required=True, max_length=50)  # Status value the entry was written for
    status = String(required=True, max_length=100)
    timestamp = DateTime(required=True)
    location = String(max_length=200)
    notes = String(max_length=500)


@storefront.entity(part_of="Order")
class PaymentTransaction:
    transaction_id = String(required=True, max_length=255)
    amount = ValueObject(Money, required=True)
    payment_date = DateTime(required=True)
    receipt_url = String(max_length=500)
    notes = String(max_length=500)


@storefront.entity(part_of="Order")
class OrderNote:
    text = String(required=True, max_length=2000)
    created_by = String(required=True, max_length=100)
    is_internal = Boolean(default=True)
    created_at = DateTime(required=True)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@storefront.aggregate
class Order:
    order_number = String(required=True, max_length=50)
    customer_id = Identifier(required=True)
    line_items = HasMany(LineItem)
    shipping_address = ValueObject(ShippingAddress)
    shipping_method = String(choices=ShippingMethod, default=ShippingMethod.AIR.value)
    delivery_type = String(max_length=50)
    payment_method = String(choices=PaymentMethod, default=PaymentMethod.CASH.value)
    payment_currency = String(choices=Currency, default=Currency.BDT.value)
    currency_rates = ValueObject(ConversionRates)
    coupon_code = String(max_length=50)
    sub_total = ValueObject(Money)
    shipping_rate = ValueObject(Money)
    total_discount = ValueObject(Money)
    total_amount = ValueObject(Money)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    tracking_history = HasMany(TrackingEntry)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    transactions = HasMany(PaymentTransaction)
    notes = HasMany(OrderNote)
    delivered_at = DateTime()
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        customer_id,
        line_items,
        shipping_method,
        payment_currency,
        discount_rate=0.0,
        rates=None,
        coupon_code=None,
        delivery_type=None,
        payment_method=PaymentMethod.CASH.value,
        shipping_address=None,
    ):
        """Price ``line_items`` and create a pending order.

        Args:
            line_items: List of dicts with product_id, quantity and
                unit_price (``Money`` or a bdt/usd/cny dict), plus optional
                title, color and size.
                ``total_price`` is computed from the unit price when absent.
            discount_rate: Fraction of the sub total taken off, usually the
                result of ``validate_coupon``.
            rates: ``ConversionRates`` snapshotted onto the order; the
                configured defaults when omitted.

        Raises:
            EmptyOrderError: ``line_items`` is empty.
            ValidationError: a line item lacks product_id, quantity or
                unit_price, or its quantity is below 1.
        """
        if not line_items:
            raise EmptyOrderError()

        discount_rate = discount_rate or 0.0
        if not 0.0 <= discount_rate <= 1.0:
            raise ValidationError({"discount_rate": ["Discount rate must be between 0 and 1"]})

        method = as_shipping_method(shipping_method)
        currency = as_currency(payment_currency)
        rates = rates or ConversionRates.default()

        items = [_line_item_from(data) for data in line_items]

        totals = calculate_totals(items, method, discount_rate, rates)
        now = datetime.now(UTC)

        order = cls(
            order_number=generate_order_number(now),
            customer_id=customer_id,
            line_items=items,
            shipping_address=ShippingAddress(**shipping_address) if shipping_address else None,
            shipping_method=method.value,
            delivery_type=delivery_type,
            payment_method=payment_method or PaymentMethod.CASH.value,
            payment_currency=currency.value,
            currency_rates=rates,
            coupon_code=coupon_code if discount_rate else None,
            sub_total=totals.sub_total,
            shipping_rate=totals.shipping_rate,
            total_discount=totals.total_discount,
            total_amount=totals.total_amount,
            status=OrderStatus.PENDING.value,
            payment_status=PaymentStatus.PENDING.value,
            created_at=now,
            updated_at=now,
        )
        order._append_tracking(SEED_TRACKING.status, SEED_TRACKING, now)

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                order_number=order.order_number,
                customer_id=str(customer_id),
                shipping_method=method.value,
                payment_currency=currency.value,
                coupon_code=order.coupon_code,
                item_count=len(items),
                sub_total_bdt=totals.sub_total.bdt,
                shipping_rate_bdt=totals.shipping_rate.bdt,
                total_discount_bdt=totals.total_discount.bdt,
                total_amount_bdt=totals.total_amount.bdt,
                total_amount_usd=totals.total_amount.usd,
                total_amount_cny=totals.total_amount.cny,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Tracking
    # -------------------------------------------------------------------
    def timeline(self):
        """Tracking entries, oldest first."""
        return sorted(self.tracking_history or [], key=lambda entry: entry.sequence)

    def _append_tracking(self, code, details, now):
        history = self.timeline()
        sequence = history[-1].sequence + 1 if history else 1
        timestamp = now
        if history and timestamp <= history[-1].timestamp:
            timestamp = history[-1].timestamp + timedelta(microseconds=1)

        entry = TrackingEntry(
            sequence=sequence,
            code=code,
            status=details.status,
            timestamp=timestamp,
            location=details.location,
            notes=details.notes,
        )
        self.add_tracking_history(entry)
        return entry

    def apply_status(self, new_status):
        """Move the order to ``new_status`` and append its tracking entry.

        Returns ``False`` without touching the order when it is already in
        ``new_status``.

        Raises:
            InvalidStatusError: ``new_status`` is unknown, or not reachable
                from the current status.
        """
        target = parse_status(new_status)
        current = OrderStatus(self.status)
        if target is current:
            return False

        assert_can_transition(current, target)

        now = datetime.now(UTC)
        entry = self._append_tracking(target.value, tracking_details_for(target), now)

        self.status = target.value
        if target is OrderStatus.DELIVERED:
            self.delivered_at = now
        elif target is OrderStatus.CANCELED and self.payment_status == PaymentStatus.PENDING.value:
            self.payment_status = PaymentStatus.CANCELLED.value
        elif target is OrderStatus.RETURNED and self.payment_status in (
            PaymentStatus.PAID.value,
            PaymentStatus.PARTIALLY_PAID.value,
        ):
            self.payment_status = PaymentStatus.REFUNDED.value
        self.updated_at = now

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                order_number=self.order_number,
                previous_status=current.value,
                new_status=target.value,
                payment_status=self.payment_status,
                tracking_sequence=entry.sequence,
                location=entry.location,
                notes=entry.notes,
                changed_at=now,
            )
        )
        return True

    # -------------------------------------------------------------------
    # Payments
    # -------------------------------------------------------------------
    def amount_paid(self):
        """Sum of recorded transactions, per currency."""
        return sum_money(transaction.amount for transaction in self.transactions or [])

    def record_payment(self, amount, transaction_id, receipt_url=None, notes=None):
        """Record a payment of ``amount`` in the order's payment currency."""
        if self.status in (OrderStatus.CANCELED.value, OrderStatus.RETURNED.value):
            raise ValidationError({"status": [f"Cannot record a payment on a {self.status} order"]})

        if any(t.transaction_id == transaction_id for t in self.transactions or []):
            raise ValidationError({"transaction_id": [f"Transaction `{transaction_id}` is already recorded"]})

        money = normalize(amount, self.payment_currency, self.currency_rates).rounded()
        if not money.amount_in(self.payment_currency):
            raise ValidationError({"amount": ["Payment amount must be positive"]})

        now = datetime.now(UTC)
        self.add_transactions(
            PaymentTransaction(
                transaction_id=transaction_id,
                amount=money,
                payment_date=now,
                receipt_url=receipt_url,
                notes=notes,
            )
        )

        paid = round(self.amount_paid().amount_in(self.payment_currency), 2)
        due = self.total_amount.amount_in(self.payment_currency)
        self.payment_status = PaymentStatus.PAID.value if paid >= due else PaymentStatus.PARTIALLY_PAID.value
        self.updated_at = now

        self.raise_(
            PaymentRecorded(
                order_id=str(self.id),
                transaction_id=transaction_id,
                amount_bdt=money.bdt,
                amount_usd=money.usd,
                amount_cny=money.cny,
                payment_status=self.payment_status,
                paid_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Pricing revision (only while pending)
    # -------------------------------------------------------------------
    def revise_pricing(self, shipping_method=None, coupon_code=None, strict_coupon=False):
        """Recompute totals from the stored line items.

        ``coupon_code=None`` keeps the current coupon; an empty string removes it.
        """
        if self.status != OrderStatus.PENDING.value:
            raise ValidationError({"status": ["Pricing can only be revised while the order is pending"]})

        method = as_shipping_method(shipping_method or self.shipping_method)
        code = self.coupon_code if coupon_code is None else coupon_code
        discount_rate = validate_coupon(code, strict=strict_coupon)

        totals = calculate_totals(self.line_items, method, discount_rate, self.currency_rates)
        now = datetime.now(UTC)

        self.shipping_method = method.value
        self.coupon_code = code if discount_rate else None
        self.sub_total = totals.sub_total
        self.shipping_rate = totals.shipping_rate
        self.total_discount = totals.total_discount
        self.total_amount = totals.total_amount
        self.updated_at = now

        self.raise_(
            OrderPricingRevised(
                order_id=str(self.id),
                shipping_method=method.value,
                coupon_code=self.coupon_code,
                shipping_rate_bdt=totals.shipping_rate.bdt,
                total_discount_bdt=totals.total_discount.bdt,
                total_amount_bdt=totals.total_amount.bdt,
                revised_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Notes
    # -------------------------------------------------------------------
    def add_note(self, text, created_by, is_internal=True):
        text = (text or "").strip()
        if not text:
            raise ValidationError({"text": ["Note text cannot be empty"]})

        now = datetime.now(UTC)
        self.add_notes(OrderNote(text=text, created_by=created_by, is_internal=is_internal, created_at=now))
        self.updated_at = now

        self.raise_(
            OrderNoteAdded(
                order_id=str(self.id),
                text=text,
                created_by=created_by,
                is_internal=is_internal,
                added_at=now,
            )
        )
