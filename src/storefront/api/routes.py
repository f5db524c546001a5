"""FastAPI routes for the storefront — products, orders and carts."""

import json

from fastapi import APIRouter, Query
from protean.utils.globals import current_domain

from storefront.api.schemas import (
    AddNoteRequest,
    AddToCartRequest,
    CartResponse,
    CheckoutRequest,
    CreateProductRequest,
    LineIdResponse,
    LineItemResponse,
    MoneySchema,
    NoteResponse,
    OrderIdResponse,
    OrderResponse,
    OrderSummaryResponse,
    PaymentResponse,
    PlaceOrderRequest,
    PriceQuoteResponse,
    ProductIdResponse,
    RecordPaymentRequest,
    RevisePricingRequest,
    SetQuantityPricingRequest,
    StatusChangeResponse,
    StatusResponse,
    TrackingEntryResponse,
    TransactionResponse,
    UpdateRatesRequest,
    UpdateStatusRequest,
)
from storefront.cart.cart import ShoppingCart
from storefront.cart.checkout import CheckoutCart
from storefront.cart.items import AddToCart, ClearCart, RemoveFromCart
from storefront.catalogue.management import CreateProduct, SetQuantityPricing, UpdateCurrencyRates
from storefront.catalogue.product import Product
from storefront.ordering.order import Order
from storefront.ordering.payment import RecordPayment
from storefront.ordering.placement import PlaceOrder
from storefront.ordering.revision import AddOrderNote, ReviseOrderPricing
from storefront.ordering.status import UpdateOrderStatus
from storefront.projections.orders_by_status import OrdersByStatus


# ---------------------------------------------------------------------------
# Serialization helpers
# ---------------------------------------------------------------------------
def _money(value) -> MoneySchema:
    return MoneySchema(**value.as_dict()) if value else MoneySchema()


def _iso(value) -> str | None:
    return value.isoformat() if value else None


def _line(line) -> LineItemResponse:
    return LineItemResponse(
        id=str(line.id),
        product_id=str(line.product_id),
        title=line.title,
        color=line.color,
        size=line.size,
        quantity=line.quantity,
        unit_price=_money(line.unit_price),
        total_price=_money(line.total_price),
    )


def _order_response(order: Order) -> OrderResponse:
    return OrderResponse(
        id=str(order.id),
        order_number=order.order_number,
        customer_id=str(order.customer_id),
        status=order.status,
        payment_status=order.payment_status,
        shipping_method=order.shipping_method,
        delivery_type=order.delivery_type,
        payment_method=order.payment_method,
        payment_currency=order.payment_currency,
        coupon_code=order.coupon_code,
        sub_total=_money(order.sub_total),
        shipping_rate=_money(order.shipping_rate),
        total_discount=_money(order.total_discount),
        total_amount=_money(order.total_amount),
        line_items=[_line(item) for item in order.line_items],
        tracking_history=[
            TrackingEntryResponse(
                sequence=entry.sequence,
                code=entry.code,
                status=entry.status,
                timestamp=_iso(entry.timestamp),
                location=entry.location,
                notes=entry.notes,
            )
            for entry in order.timeline()
        ],
        transactions=[
            TransactionResponse(
                transaction_id=t.transaction_id,
                amount=_money(t.amount),
                payment_date=_iso(t.payment_date),
                receipt_url=t.receipt_url,
                notes=t.notes,
            )
            for t in sorted(order.transactions, key=lambda t: t.payment_date)
        ],
        notes=[
            NoteResponse(
                text=note.text,
                created_by=note.created_by,
                is_internal=note.is_internal,
                created_at=_iso(note.created_at),
            )
            for note in sorted(order.notes, key=lambda n: n.created_at)
        ],
        delivered_at=_iso(order.delivered_at),
        created_at=_iso(order.created_at),
    )


def _load_order(reference: str) -> Order:
    return current_domain.repository_for(Order).get_by_reference(reference)


# ---------------------------------------------------------------------------
# Product Router
# ---------------------------------------------------------------------------
product_router = APIRouter(prefix="/products", tags=["products"])


@product_router.post("", status_code=201, response_model=ProductIdResponse)
async def create_product(body: CreateProductRequest) -> ProductIdResponse:
    command = CreateProduct(
        sku=body.sku,
        title=body.title,
        input_currency=body.input_currency,
        price=body.price,
        expense=body.expense,
        usd_to_bdt=body.usd_to_bdt,
        cny_to_bdt=body.cny_to_bdt,
        minimum_order_quantity=body.minimum_order_quantity,
        quantity_ranges=json.dumps([r.model_dump() for r in body.quantity_ranges]),
    )
    result = current_domain.process(command, asynchronous=False)
    return ProductIdResponse(product_id=result)


@product_router.get("/{product_id}/price", response_model=PriceQuoteResponse)
async def quote_price(product_id: str, quantity: int = Query(default=1, ge=1)) -> PriceQuoteResponse:
    """Unit and line price for ``quantity`` pieces after quantity tiers."""
    product = current_domain.repository_for(Product).get(product_id)
    unit_price = product.unit_price_for(quantity)
    return PriceQuoteResponse(
        product_id=product_id,
        quantity=quantity,
        unit_price=_money(unit_price.rounded()),
        total_price=_money(unit_price.times(quantity).rounded()),
    )


@product_router.put("/{product_id}/rates", response_model=StatusResponse)
async def update_rates(product_id: str, body: UpdateRatesRequest) -> StatusResponse:
    command = UpdateCurrencyRates(
        product_id=product_id,
        usd_to_bdt=body.usd_to_bdt,
        cny_to_bdt=body.cny_to_bdt,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@product_router.put("/{product_id}/quantity-pricing", response_model=StatusResponse)
async def set_quantity_pricing(product_id: str, body: SetQuantityPricingRequest) -> StatusResponse:
    command = SetQuantityPricing(
        product_id=product_id,
        ranges=json.dumps([r.model_dump() for r in body.ranges]),
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=OrderIdResponse)
async def place_order(body: PlaceOrderRequest) -> OrderIdResponse:
    command = PlaceOrder(
        customer_id=body.customer_id,
        line_items=json.dumps([item.model_dump() for item in body.line_items]),
        shipping_method=body.shipping_method,
        payment_currency=body.payment_currency,
        payment_method=body.payment_method,
        delivery_type=body.delivery_type,
        coupon_code=body.coupon_code,
        strict_coupon=body.strict_coupon,
        shipping_address=json.dumps(body.shipping_address.model_dump()) if body.shipping_address else None,
        usd_to_bdt=body.usd_to_bdt,
        cny_to_bdt=body.cny_to_bdt,
    )
    order_id = current_domain.process(command, asynchronous=False)
    order = current_domain.repository_for(Order).get(order_id)
    return OrderIdResponse(order_id=order_id, order_number=order.order_number)


@order_router.get("", response_model=list[OrderSummaryResponse])
async def list_orders(status: str | None = None, customer_id: str | None = None) -> list[OrderSummaryResponse]:
    """Admin listing, newest first, served from the ``OrdersByStatus`` view."""
    filters = {}
    if status:
        filters["status"] = status
    if customer_id:
        filters["customer_id"] = customer_id

    query = current_domain.repository_for(OrdersByStatus)._dao.query
    if filters:
        query = query.filter(**filters)
    records = query.order_by("-created_at").all().items

    return [
        OrderSummaryResponse(
            order_id=str(record.order_id),
            order_number=record.order_number,
            customer_id=str(record.customer_id),
            status=record.status,
            payment_status=record.payment_status,
            total_bdt=record.total_bdt,
            created_at=_iso(record.created_at),
            updated_at=_iso(record.updated_at),
        )
        for record in records
    ]


@order_router.get("/{reference}", response_model=OrderResponse)
async def get_order(reference: str) -> OrderResponse:
    return _order_response(_load_order(reference))


@order_router.patch("/{reference}", response_model=StatusChangeResponse)
async def update_order_status(reference: str, body: UpdateStatusRequest) -> StatusChangeResponse:
    command = UpdateOrderStatus(order_reference=reference, status=body.status)
    changed = current_domain.process(command, asynchronous=False)
    order = _load_order(reference)
    return StatusChangeResponse(order_id=str(order.id), status=order.status, changed=bool(changed))


@order_router.post("/{reference}/payments", status_code=201, response_model=PaymentResponse)
async def record_payment(reference: str, body: RecordPaymentRequest) -> PaymentResponse:
    command = RecordPayment(
        order_reference=reference,
        amount=body.amount,
        transaction_id=body.transaction_id,
        receipt_url=body.receipt_url,
        notes=body.notes,
    )
    payment_status = current_domain.process(command, asynchronous=False)
    order = _load_order(reference)
    return PaymentResponse(order_id=str(order.id), payment_status=payment_status)


@order_router.put("/{reference}/pricing", response_model=OrderResponse)
async def revise_pricing(reference: str, body: RevisePricingRequest) -> OrderResponse:
    command = ReviseOrderPricing(
        order_reference=reference,
        shipping_method=body.shipping_method,
        coupon_code=body.coupon_code,
        remove_coupon=body.remove_coupon,
        strict_coupon=body.strict_coupon,
    )
    current_domain.process(command, asynchronous=False)
    return _order_response(_load_order(reference))


@order_router.post("/{reference}/notes", status_code=201, response_model=StatusResponse)
async def add_note(reference: str, body: AddNoteRequest) -> StatusResponse:
    command = AddOrderNote(
        order_reference=reference,
        text=body.text,
        created_by=body.created_by,
        is_internal=body.is_internal,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/carts", tags=["carts"])


@cart_router.get("/{session_id}", response_model=CartResponse)
async def get_cart(session_id: str) -> CartResponse:
    cart = current_domain.repository_for(ShoppingCart).get_or_start(session_id)
    return CartResponse(
        session_id=str(cart.id),
        customer_id=str(cart.customer_id) if cart.customer_id else None,
        lines=[_line(line) for line in sorted(cart.lines, key=lambda line: line.added_at)],
        sub_total=_money(cart.sub_total().rounded()),
    )


@cart_router.post("/{session_id}/items", response_model=LineIdResponse)
async def add_cart_item(session_id: str, body: AddToCartRequest) -> LineIdResponse:
    command = AddToCart(
        session_id=session_id,
        product_id=body.product_id,
        quantity=body.quantity,
        color=body.color,
        size=body.size,
        customer_id=body.customer_id,
    )
    line_id = current_domain.process(command, asynchronous=False)
    return LineIdResponse(line_id=line_id)


@cart_router.delete("/{session_id}/items/{line_id}", response_model=StatusResponse)
async def remove_cart_item(session_id: str, line_id: str) -> StatusResponse:
    command = RemoveFromCart(session_id=session_id, line_id=line_id)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@cart_router.delete("/{session_id}", response_model=StatusResponse)
async def clear_cart(session_id: str) -> StatusResponse:
    current_domain.process(ClearCart(session_id=session_id), asynchronous=False)
    return StatusResponse()


@cart_router.post("/{session_id}/checkout", status_code=201, response_model=OrderIdResponse)
async def checkout_cart(session_id: str, body: CheckoutRequest) -> OrderIdResponse:
    command = CheckoutCart(
        session_id=session_id,
        customer_id=body.customer_id,
        shipping_method=body.shipping_method,
        payment_currency=body.payment_currency,
        payment_method=body.payment_method,
        delivery_type=body.delivery_type,
        coupon_code=body.coupon_code,
        strict_coupon=body.strict_coupon,
        shipping_address=json.dumps(body.shipping_address.model_dump()) if body.shipping_address else None,
    )
    order_id = current_domain.process(command, asynchronous=False)
    order = current_domain.repository_for(Order).get(order_id)
    return OrderIdResponse(order_id=order_id, order_number=order.order_number)
