"""Cart line management — commands and handler."""

import structlog
from protean import handle
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from storefront.cart.cart import ShoppingCart
from storefront.catalogue.product import Product
from storefront.domain import storefront

logger = structlog.get_logger(__name__)


@storefront.command(part_of="ShoppingCart")
class AddToCart:
    session_id = String(required=True, max_length=255)
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    color = String(max_length=50)
    size = String(max_length=50)
    customer_id = Identifier()


@storefront.command(part_of="ShoppingCart")
class RemoveFromCart:
    session_id = String(required=True, max_length=255)
    line_id = Identifier(required=True)


@storefront.command(part_of="ShoppingCart")
class ClearCart:
    session_id = String(required=True, max_length=255)


@storefront.command_handler(part_of=ShoppingCart)
class ManageCartHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.get_or_start(command.session_id)
        product = current_domain.repository_for(Product).get(command.product_id)

        product_quantity = cart.quantity_of(product.id) + command.quantity
        line = cart.add_line(
            product_id=product.id,
            title=product.title,
            quantity=command.quantity,
            unit_price=product.unit_price_for(product_quantity),
            color=command.color,
            size=command.size,
            minimum_order_quantity=product.minimum_order_quantity,
            customer_id=command.customer_id,
        )
        repo.add(cart)

        logger.info(
            "Cart line added",
            session_id=command.session_id,
            product_id=str(product.id),
            product_quantity=product_quantity,
        )
        return str(line.id)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.get(command.session_id)
        product_id = cart.remove_line(command.line_id)

        # Remaining lines of the product drop back to the tier of their new total
        remaining = cart.quantity_of(product_id)
        if remaining:
            product = current_domain.repository_for(Product).get(product_id)
            cart.reprice(product_id, product.unit_price_for(remaining))
        repo.add(cart)

    @handle(ClearCart)
    def clear_cart(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.get(command.session_id)
        cart.clear()
        repo.add(cart)
