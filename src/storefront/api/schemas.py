"""Pydantic request/response schemas for the storefront API.

These are external contracts, kept separate from the internal Protean
commands they are translated into.
"""

from typing import Literal

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class MoneySchema(BaseModel):
    bdt: float = 0.0
    usd: float = 0.0
    cny: float = 0.0


class AddressSchema(BaseModel):
    street: str
    city: str
    state: str | None = None
    postal_code: str | None = None
    country: str = "Bangladesh"


class QuantityRangeSchema(BaseModel):
    min_quantity: int = Field(ge=1)
    max_quantity: int | None = Field(default=None, ge=1)
    price: float = Field(ge=0)


class LineItemSchema(BaseModel):
    product_id: str
    title: str | None = None
    color: str | None = None
    size: str | None = None
    quantity: int = Field(ge=1)
    unit_price: MoneySchema


# ---------------------------------------------------------------------------
# Product Request Schemas
# ---------------------------------------------------------------------------
class CreateProductRequest(BaseModel):
    sku: str
    title: str
    input_currency: Literal["CNY", "USD"] = "CNY"
    price: float = Field(ge=0)
    expense: float = Field(default=0.0, ge=0)
    usd_to_bdt: float | None = Field(default=None, gt=0)
    cny_to_bdt: float | None = Field(default=None, gt=0)
    minimum_order_quantity: int = Field(default=1, ge=1)
    quantity_ranges: list[QuantityRangeSchema] = []

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "sku": "BAG-001",
                    "title": "Canvas Tote Bag",
                    "input_currency": "CNY",
                    "price": 100.0,
                    "minimum_order_quantity": 2,
                    "quantity_ranges": [
                        {"min_quantity": 10, "max_quantity": 49, "price": 90.0},
                        {"min_quantity": 50, "price": 80.0},
                    ],
                }
            ]
        }
    }


class UpdateRatesRequest(BaseModel):
    usd_to_bdt: float = Field(gt=0)
    cny_to_bdt: float = Field(gt=0)


class SetQuantityPricingRequest(BaseModel):
    ranges: list[QuantityRangeSchema]


# ---------------------------------------------------------------------------
# Order Request Schemas
# ---------------------------------------------------------------------------
class PlaceOrderRequest(BaseModel):
    customer_id: str
    line_items: list[LineItemSchema]
    shipping_method: Literal["air", "sea"]
    payment_currency: Literal["BDT", "USD", "CNY"] = "BDT"
    payment_method: Literal["cash", "card", "bkash"] = "cash"
    delivery_type: str | None = None
    coupon_code: str | None = None
    strict_coupon: bool = False
    shipping_address: AddressSchema | None = None
    usd_to_bdt: float | None = Field(default=None, gt=0)
    cny_to_bdt: float | None = Field(default=None, gt=0)


class UpdateStatusRequest(BaseModel):
    status: str


class RecordPaymentRequest(BaseModel):
    amount: float = Field(gt=0)
    transaction_id: str
    receipt_url: str | None = None
    notes: str | None = None


class RevisePricingRequest(BaseModel):
    shipping_method: Literal["air", "sea"] | None = None
    coupon_code: str | None = None
    remove_coupon: bool = False
    strict_coupon: bool = False


class AddNoteRequest(BaseModel):
    text: str
    created_by: str
    is_internal: bool = True


# ---------------------------------------------------------------------------
# Cart Request Schemas
# ---------------------------------------------------------------------------
class AddToCartRequest(BaseModel):
    product_id: str
    quantity: int = Field(ge=1, default=1)
    color: str | None = None
    size: str | None = None
    customer_id: str | None = None


class CheckoutRequest(BaseModel):
    customer_id: str
    shipping_method: Literal["air", "sea"]
    payment_currency: Literal["BDT", "USD", "CNY"] = "BDT"
    payment_method: Literal["cash", "card", "bkash"] = "cash"
    delivery_type: str | None = None
    coupon_code: str | None = None
    strict_coupon: bool = False
    shipping_address: AddressSchema | None = None


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class StatusResponse(BaseModel):
    status: str = "ok"


class ProductIdResponse(BaseModel):
    product_id: str


class PriceQuoteResponse(BaseModel):
    product_id: str
    quantity: int
    unit_price: MoneySchema
    total_price: MoneySchema


class OrderIdResponse(BaseModel):
    order_id: str
    order_number: str


class StatusChangeResponse(BaseModel):
    order_id: str
    status: str
    changed: bool


class PaymentResponse(BaseModel):
    order_id: str
    payment_status: str


class LineIdResponse(BaseModel):
    line_id: str


class TrackingEntryResponse(BaseModel):
    sequence: int
    code: str
    status: str
    timestamp: str
    location: str | None = None
    notes: str | None = None


class LineItemResponse(BaseModel):
    id: str
    product_id: str
    title: str | None = None
    color: str | None = None
    size: str | None = None
    quantity: int
    unit_price: MoneySchema
    total_price: MoneySchema


class TransactionResponse(BaseModel):
    transaction_id: str
    amount: MoneySchema
    payment_date: str
    receipt_url: str | None = None
    notes: str | None = None


class NoteResponse(BaseModel):
    text: str
    created_by: str
    is_internal: bool
    created_at: str


class OrderResponse(BaseModel):
    id: str
    order_number: str
    customer_id: str
    status: str
    payment_status: str
    shipping_method: str
    delivery_type: str | None = None
    payment_method: str
    payment_currency: str
    coupon_code: str | None = None
    sub_total: MoneySchema
    shipping_rate: MoneySchema
    total_discount: MoneySchema
    total_amount: MoneySchema
    line_items: list[LineItemResponse]
    tracking_history: list[TrackingEntryResponse]
    transactions: list[TransactionResponse]
    notes: list[NoteResponse]
    delivered_at: str | None = None
    created_at: str


class OrderSummaryResponse(BaseModel):
    order_id: str
    order_number: str
    customer_id: str
    status: str
    payment_status: str | None = None
    total_bdt: float | None = None
    created_at: str | None = None
    updated_at: str | None = None


class CartResponse(BaseModel):
    session_id: str
    customer_id: str | None = None
    lines: list[LineItemResponse]
    sub_total: MoneySchema
