"""Domain events for the ShoppingCart aggregate."""

from protean.fields import Float, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="ShoppingCart")
class CartLineAdded:
    __version__ = 1

    cart_id = Identifier(required=True)
    line_id = Identifier(required=True)
    product_id = Identifier(required=True)
    color = String()
    size = String()
    quantity = Integer(required=True)
    product_quantity = Integer(required=True)  # Quantity of the product across all its lines
    unit_price_bdt = Float(required=True)


@storefront.event(part_of="ShoppingCart")
class CartLineRemoved:
    __version__ = 1

    cart_id = Identifier(required=True)
    line_id = Identifier(required=True)
    product_id = Identifier(required=True)


@storefront.event(part_of="ShoppingCart")
class CartCleared:
    """All lines were dropped, either by the shopper or because the cart was checked out."""

    __version__ = 1

    cart_id = Identifier(required=True)
    line_count = Integer(required=True)
    order_id = Identifier()  # Set when the cart was cleared by checkout
