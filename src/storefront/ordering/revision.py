"""Order pricing revision and admin notes — commands and handler."""

from protean import handle
from protean.fields import Boolean, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.ordering.order import Order


@storefront.command(part_of="Order")
class ReviseOrderPricing:
    order_reference = String(required=True, max_length=255)
    shipping_method = String(max_length=10)
    coupon_code = String(max_length=50)
    remove_coupon = Boolean(default=False)
    strict_coupon = Boolean(default=False)


@storefront.command(part_of="Order")
class AddOrderNote:
    order_reference = String(required=True, max_length=255)
    text = String(required=True, max_length=2000)
    created_by = String(required=True, max_length=100)
    is_internal = Boolean(default=True)


@storefront.command_handler(part_of=Order)
class ReviseOrderHandler:
    @handle(ReviseOrderPricing)
    def revise_order_pricing(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get_by_reference(command.order_reference)
        order.revise_pricing(
            shipping_method=command.shipping_method,
            coupon_code="" if command.remove_coupon else command.coupon_code,
            strict_coupon=bool(command.strict_coupon),
        )
        repo.add(order)

    @handle(AddOrderNote)
    def add_order_note(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get_by_reference(command.order_reference)
        order.add_note(
            text=command.text,
            created_by=command.created_by,
            is_internal=command.is_internal if command.is_internal is not None else True,
        )
        repo.add(order)
