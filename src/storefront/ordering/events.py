"""Domain events for the Order aggregate."""

from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Order")
class OrderPlaced:
    """An order was priced and created from a set of line items."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    customer_id = Identifier(required=True)
    shipping_method = String(required=True)
    payment_currency = String(required=True)
    coupon_code = String()
    item_count = Integer(required=True)
    sub_total_bdt = Float(required=True)
    shipping_rate_bdt = Float(required=True)
    total_discount_bdt = Float(required=True)
    total_amount_bdt = Float(required=True)
    total_amount_usd = Float(required=True)
    total_amount_cny = Float(required=True)
    placed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderStatusChanged:
    """An admin moved the order to a new status and a tracking entry was appended."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    payment_status = String(required=True)
    tracking_sequence = Integer(required=True)
    location = String()
    notes = String()
    changed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class PaymentRecorded:
    """A payment transaction was recorded against the order."""

    __version__ = 1

    order_id = Identifier(required=True)
    transaction_id = String(required=True)
    amount_bdt = Float(required=True)
    amount_usd = Float(required=True)
    amount_cny = Float(required=True)
    payment_status = String(required=True)
    paid_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderPricingRevised:
    """Totals were recomputed after a change of shipping method or coupon."""

    __version__ = 1

    order_id = Identifier(required=True)
    shipping_method = String(required=True)
    coupon_code = String()
    shipping_rate_bdt = Float(required=True)
    total_discount_bdt = Float(required=True)
    total_amount_bdt = Float(required=True)
    revised_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderNoteAdded:
    __version__ = 1

    order_id = Identifier(required=True)
    text = String(required=True, max_length=2000)
    created_by = String(required=True)
    is_internal = Boolean(default=True)
    added_at = DateTime(required=True)
