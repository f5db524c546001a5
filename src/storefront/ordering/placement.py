"""Order placement — command and handler.

Prices line items that were already resolved against the catalogue (unit and
total price per currency) and stores the new order. Nothing is written when
the order turns out to be empty.
"""

import json

import structlog
from protean import handle
from protean.fields import Boolean, Float, Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.ordering.coupons import validate_coupon
from storefront.ordering.order import Order
from storefront.shared.money import ConversionRates

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Order")
class PlaceOrder:
    customer_id = Identifier(required=True)
    line_items = Text(required=True)  # JSON: list of line item dicts
    shipping_method = String(required=True, max_length=10)
    payment_currency = String(max_length=3, default="BDT")
    payment_method = String(max_length=20, default="cash")
    delivery_type = String(max_length=50)
    coupon_code = String(max_length=50)
    strict_coupon = Boolean(default=False)
    shipping_address = Text()  # JSON: address dict
    usd_to_bdt = Float()
    cny_to_bdt = Float()


def load_json(value, default=None):
    if not value:
        return default
    return json.loads(value) if isinstance(value, str) else value


def rates_from(usd_to_bdt=None, cny_to_bdt=None):
    """Conversion rates with configured defaults for the missing side."""
    rates = ConversionRates.default()
    if not (usd_to_bdt or cny_to_bdt):
        return rates
    return ConversionRates(
        usd_to_bdt=usd_to_bdt or rates.usd_to_bdt,
        cny_to_bdt=cny_to_bdt or rates.cny_to_bdt,
    )


@storefront.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        discount_rate = validate_coupon(command.coupon_code, strict=bool(command.strict_coupon))

        order = Order.place(
            customer_id=command.customer_id,
            line_items=load_json(command.line_items, []),
            shipping_method=command.shipping_method,
            payment_currency=command.payment_currency or "BDT",
            discount_rate=discount_rate,
            rates=rates_from(command.usd_to_bdt, command.cny_to_bdt),
            coupon_code=command.coupon_code,
            delivery_type=command.delivery_type,
            payment_method=command.payment_method,
            shipping_address=load_json(command.shipping_address),
        )
        current_domain.repository_for(Order).add(order)

        logger.info(
            "Order placed",
            order_id=str(order.id),
            order_number=order.order_number,
            customer_id=str(command.customer_id),
            total_bdt=order.total_amount.bdt,
        )
        return str(order.id)
