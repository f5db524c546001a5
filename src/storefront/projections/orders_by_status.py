"""Orders by status — admin dashboard view for filtering orders by status."""

from protean.core.projector import on
from protean.fields import DateTime, Float, Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.ordering.events import (
    OrderPlaced,
    OrderPricingRevised,
    OrderStatusChanged,
    PaymentRecorded,
)
from storefront.ordering.order import Order


@storefront.projection
class OrdersByStatus:
    order_id = Identifier(identifier=True, required=True)
    order_number = String(required=True, max_length=50)
    customer_id = Identifier(required=True)
    status = String(required=True)
    payment_status = String()
    total_bdt = Float()
    created_at = DateTime()
    updated_at = DateTime()


@storefront.projector(projector_for=OrdersByStatus, aggregates=[Order])
class OrdersByStatusProjector:
    @on(OrderPlaced)
    def on_order_placed(self, event):
        current_domain.repository_for(OrdersByStatus).add(
            OrdersByStatus(
                order_id=event.order_id,
                order_number=event.order_number,
                customer_id=event.customer_id,
                status="pending",
                payment_status="pending",
                total_bdt=event.total_amount_bdt,
                created_at=event.placed_at,
                updated_at=event.placed_at,
            )
        )

    def _update(self, order_id, updated_at=None, **changes):
        repo = current_domain.repository_for(OrdersByStatus)
        record = repo.get(order_id)
        for attr, value in changes.items():
            setattr(record, attr, value)
        if updated_at:
            record.updated_at = updated_at
        repo.add(record)

    @on(OrderStatusChanged)
    def on_order_status_changed(self, event):
        self._update(
            event.order_id,
            event.changed_at,
            status=event.new_status,
            payment_status=event.payment_status,
        )

    @on(PaymentRecorded)
    def on_payment_recorded(self, event):
        self._update(event.order_id, event.paid_at, payment_status=event.payment_status)

    @on(OrderPricingRevised)
    def on_order_pricing_revised(self, event):
        self._update(event.order_id, event.revised_at, total_bdt=event.total_amount_bdt)
