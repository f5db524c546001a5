"""Order status updates — command and handler for the admin tracking flow."""

import structlog
from protean import handle
from protean.fields import String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.ordering.order import Order

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Order")
class UpdateOrderStatus:
    order_reference = String(required=True, max_length=255)  # Order id or order number
    status = String(required=True, max_length=50)


@storefront.command_handler(part_of=Order)
class UpdateOrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_order_status(self, command):
        """Returns ``True`` when a tracking entry was appended."""
        repo = current_domain.repository_for(Order)
        order = repo.get_by_reference(command.order_reference)
        previous = order.status

        if not order.apply_status(command.status):
            logger.info("Order status unchanged", order_id=str(order.id), status=previous)
            return False

        repo.add(order)
        logger.info(
            "Order status changed",
            order_id=str(order.id),
            order_number=order.order_number,
            previous_status=previous,
            new_status=order.status,
        )
        return True
