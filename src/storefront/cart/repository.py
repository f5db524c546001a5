"""Repository for the ShoppingCart aggregate."""

from protean.exceptions import ObjectNotFoundError

from storefront.cart.cart import ShoppingCart
from storefront.domain import storefront


@storefront.repository(part_of=ShoppingCart)
class CartRepository:
    def get_or_start(self, session_id: str) -> ShoppingCart:
        """The session's cart, or a new unsaved one when it has none yet."""
        try:
            return self.get(session_id)
        except ObjectNotFoundError:
            return ShoppingCart.start(session_id)
