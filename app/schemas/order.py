# app/schemas/order.py
import uuid
from datetime import datetime
from typing import Literal

from pydantic import ConfigDict, field_validator, model_validator
from sqlmodel import SQLModel, Field

from app.core.malaysia import MalaysianPhone, StateCode, validate_postal_code
from app.schemas.cart import Notice

OrderStatus = Literal[
    "pending", "confirmed", "processing", "shipped", "delivered", "cancelled"
]
PaymentMethod = Literal["card", "fpx", "ewallet"]


class CheckoutRequest(SQLModel):
    """
    Payload for creating an order from the current cart.

    Backend derives:
      - user_id from token
      - status = 'pending'
      - items + unit prices from the cart and live product prices
      - delivery fee from the destination state
    """

    model_config = ConfigDict(extra="forbid")

    recipient_name: str | None = None
    phone: MalaysianPhone
    shipping_address: str
    city: str
    state_code: StateCode
    postal_code: str
    express_delivery: bool = False
    notes: str | None = None

    @field_validator("shipping_address", "city", "postal_code")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v

    @field_validator("recipient_name", "notes")
    @classmethod
    def normalize_optional(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        return v or None

    @model_validator(mode="after")
    def postal_code_matches_state(self) -> "CheckoutRequest":
        if not validate_postal_code(self.postal_code, self.state_code):
            raise ValueError(
                f"postal code {self.postal_code} is not valid for state {self.state_code}"
            )
        return self


class CardDetails(SQLModel):
    number: str = Field(min_length=12, max_length=19)
    expiry: str = Field(regex=r"^(0[1-9]|1[0-2])/\d{2}$")
    cvv: str = Field(regex=r"^\d{3,4}$")
    name: str = Field(min_length=1)


class PaymentRequest(SQLModel):
    """
    Payment for a pending order. Card payments need card details.
    """

    model_config = ConfigDict(extra="forbid")

    method: PaymentMethod
    card: CardDetails | None = None

    @model_validator(mode="after")
    def card_required_for_card_method(self) -> "PaymentRequest":
        if self.method == "card" and self.card is None:
            raise ValueError("card details are required for card payments")
        return self


class OrderCancel(SQLModel):
    model_config = ConfigDict(extra="forbid")

    reason: str = Field(min_length=1, max_length=500)


class OrderRead(SQLModel):
    """
    Lightweight representation of an order (without items).
    """

    id: uuid.UUID
    user_id: uuid.UUID
    status: OrderStatus
    total_amount: float
    delivery_fee: float
    recipient_name: str | None
    phone: str
    shipping_address: str
    city: str
    state_code: str
    postal_code: str
    payment_method: str | None
    paid_at: datetime | None
    tracking_number: str | None
    notes: str | None
    cancellation_reason: str | None
    cancelled_at: datetime | None
    created_at: datetime
    updated_at: datetime | None


class OrderItemRead(SQLModel):
    """
    Representation of a single order line item.
    """

    id: uuid.UUID
    order_id: uuid.UUID
    product_id: uuid.UUID
    quantity: int
    price: float
    product_name: str | None
    product_brand: str | None
    line_total: float


class OrderWithItemsRead(OrderRead):
    """
    Full order view including items.
    """

    items: list[OrderItemRead]
    subtotal: float
    notices: list[Notice] = []


class OrderStatusUpdate(SQLModel):
    """
    Admin payload to change order status.
    """

    model_config = ConfigDict(extra="forbid")

    status: OrderStatus
    tracking_number: str | None = None
    notes: str | None = None


class VendorOrderLine(SQLModel):
    """
    An order line for one of the vendor's products.
    """

    order_id: uuid.UUID
    order_status: OrderStatus
    ordered_at: datetime
    product_id: uuid.UUID
    product_name: str | None
    quantity: int
    price: float
    line_total: float
