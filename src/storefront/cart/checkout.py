"""Cart checkout — turns the session's cart into a pending order.

The order is stored first and the cart is cleared afterwards, in the same
unit of work. An empty cart raises ``EmptyOrderError`` and nothing is written.
"""

import structlog
from protean import handle
from protean.fields import Boolean, Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.cart.cart import ShoppingCart
from storefront.domain import storefront
from storefront.ordering.coupons import validate_coupon
from storefront.ordering.order import Order
from storefront.ordering.placement import load_json

logger = structlog.get_logger(__name__)


@storefront.command(part_of="ShoppingCart")
class CheckoutCart:
    session_id = String(required=True, max_length=255)
    customer_id = Identifier(required=True)
    shipping_method = String(required=True, max_length=10)
    delivery_type = String(max_length=50)
    payment_method = String(max_length=20, default="cash")
    payment_currency = String(max_length=3, default="BDT")
    coupon_code = String(max_length=50)
    strict_coupon = Boolean(default=False)
    shipping_address = Text()  # JSON: address dict


@storefront.command_handler(part_of=ShoppingCart)
class CheckoutCartHandler:
    @handle(CheckoutCart)
    def checkout_cart(self, command):
        cart_repo = current_domain.repository_for(ShoppingCart)
        cart = cart_repo.get_or_start(command.session_id)

        order = Order.place(
            customer_id=command.customer_id,
            line_items=cart.checkout_lines(),
            shipping_method=command.shipping_method,
            payment_currency=command.payment_currency or "BDT",
            discount_rate=validate_coupon(command.coupon_code, strict=bool(command.strict_coupon)),
            rates=cart.currency_rates,
            coupon_code=command.coupon_code,
            delivery_type=command.delivery_type,
            payment_method=command.payment_method,
            shipping_address=load_json(command.shipping_address),
        )
        current_domain.repository_for(Order).add(order)

        cart.clear(order_id=str(order.id))
        cart_repo.add(cart)

        logger.info(
            "Cart checked out",
            session_id=command.session_id,
            order_id=str(order.id),
            order_number=order.order_number,
            total_bdt=order.total_amount.bdt,
        )
        return str(order.id)
