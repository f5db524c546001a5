"""Repository for the Order aggregate."""

from protean.exceptions import ObjectNotFoundError

from storefront.domain import storefront
from storefront.exceptions import OrderNotFoundError
from storefront.ordering.order import Order


@storefront.repository(part_of=Order)
class OrderRepository:
    """Orders are addressed by aggregate id or by their ``BSM-ORD-…`` number."""

    def find_by_order_number(self, order_number: str) -> Order | None:
        return self._dao.query.filter(order_number=order_number).all().first

    def find_by_status(self, status: str) -> list[Order]:
        return self._dao.query.filter(status=status).order_by("-created_at").all().items

    def find_by_customer(self, customer_id: str) -> list[Order]:
        return self._dao.query.filter(customer_id=customer_id).order_by("-created_at").all().items

    def get_by_reference(self, reference: str) -> Order:
        """Load an order by order number, falling back to its id.

        Raises:
            OrderNotFoundError: Neither lookup matches.
        """
        order = self.find_by_order_number(reference)
        if order is not None:
            return order
        try:
            return self.get(reference)
        except ObjectNotFoundError:
            raise OrderNotFoundError(reference) from None
