"""Order payments — command and handler."""

import structlog
from protean import handle
from protean.fields import Float, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.ordering.order import Order

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Order")
class RecordPayment:
    order_reference = String(required=True, max_length=255)
    amount = Float(required=True)  # In the order's payment currency
    transaction_id = String(required=True, max_length=255)
    receipt_url = String(max_length=500)
    notes = String(max_length=500)


@storefront.command_handler(part_of=Order)
class RecordPaymentHandler:
    @handle(RecordPayment)
    def record_payment(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get_by_reference(command.order_reference)
        order.record_payment(
            amount=command.amount,
            transaction_id=command.transaction_id,
            receipt_url=command.receipt_url,
            notes=command.notes,
        )
        repo.add(order)

        logger.info(
            "Payment recorded",
            order_id=str(order.id),
            transaction_id=command.transaction_id,
            amount=command.amount,
            currency=order.payment_currency,
            payment_status=order.payment_status,
        )
        return order.payment_status
