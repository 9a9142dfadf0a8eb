"""Pydantic request/response schemas for the Ordering API.

These are external contracts (anti-corruption layer), separate from
internal Protean commands.
"""

from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class ShippingAddressSchema(BaseModel):
    full_name: str | None = None
    phone: str | None = None
    address_line1: str | None = None
    address_line2: str | None = None
    city: str | None = None
    state: str | None = None
    pincode: str | None = None
    country: str | None = "India"


class ProductSnapshotSchema(BaseModel):
    name: str | None = None
    image: str | None = None
    moq_quantity: int | None = None
    moq_unit: str | None = None


class CartLineSchema(BaseModel):
    product_id: str
    quantity: int
    price: float
    subtotal: float
    product_snapshot: ProductSnapshotSchema


# ---------------------------------------------------------------------------
# Cart Request Schemas
# ---------------------------------------------------------------------------
class AddToCartRequest(BaseModel):
    product_id: str
    quantity: int = Field(ge=1, default=1)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "product_id": "prod-001",
                    "quantity": 5,
                }
            ]
        }
    }


class UpdateCartItemRequest(BaseModel):
    quantity: int = Field(ge=0)


class GuestCartItem(BaseModel):
    product_id: str
    quantity: int = Field(ge=1, default=1)


class SyncCartRequest(BaseModel):
    items: list[GuestCartItem] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Order Request Schemas
# ---------------------------------------------------------------------------
class CheckoutRequest(BaseModel):
    shipping_address: ShippingAddressSchema

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "shipping_address": {
                        "full_name": "Asha Rao",
                        "phone": "9876543210",
                        "address_line1": "12 MG Road",
                        "address_line2": "Near City Mall",
                        "city": "Bengaluru",
                        "state": "Karnataka",
                        "pincode": "560001",
                        "country": "India",
                    }
                }
            ]
        }
    }


class VerifyPaymentRequest(BaseModel):
    razorpay_order_id: str
    razorpay_payment_id: str
    razorpay_signature: str


class CancelOrderRequest(BaseModel):
    reason: str | None = None


class UpdateOrderStatusRequest(BaseModel):
    status: str
    note: str | None = None
    tracking_number: str | None = None
    carrier: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "status": "shipped",
                    "note": "Handed over to courier",
                    "tracking_number": "BLR123456789",
                    "carrier": "BlueDart",
                }
            ]
        }
    }


class ExpirePendingOrdersRequest(BaseModel):
    ttl_minutes: int | None = Field(default=None, ge=1)
    as_of: datetime | None = None


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class CartResponse(BaseModel):
    cart_id: str
    customer_id: str
    items: list[CartLineSchema]
    total_items: int
    total_price: float


class CheckoutResponse(BaseModel):
    order_id: str
    order_number: str
    razorpay_order_id: str
    amount: int
    currency: str
    key_id: str | None = None


class CashOnDeliveryResponse(BaseModel):
    order_id: str
    order_number: str
    amount: int
    currency: str


class OrderIdResponse(BaseModel):
    order_id: str


class ExpirePendingOrdersResponse(BaseModel):
    expired_count: int
