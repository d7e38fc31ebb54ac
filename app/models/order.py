# app/models/order.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class Order(SQLModel, table=True):
    """
    Customer order created at checkout.

    Status lifecycle:
      pending -> confirmed -> processing -> shipped -> delivered
      pending | confirmed -> cancelled
    """

    __tablename__ = "orders"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    user_id: uuid.UUID = Field(
        foreign_key="profiles.id",
        index=True,
    )

    status: str = Field(
        default="pending",
        index=True,
        description="Order status lifecycle",
    )

    # Subtotal + delivery charge, in RM
    total_amount: float = Field(
        description="Final amount for this order",
    )
    delivery_fee: float = Field(default=0.0)

    # Shipping
    recipient_name: str | None = None
    phone: str
    shipping_address: str
    city: str
    state_code: str = Field(max_length=3)
    postal_code: str = Field(max_length=5)

    # Payment / fulfilment
    payment_method: str | None = None
    paid_at: datetime | None = None
    tracking_number: str | None = None
    notes: str | None = None

    cancellation_reason: str | None = None
    cancelled_at: datetime | None = None

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
    updated_at: datetime | None = None


class OrderItem(SQLModel, table=True):
    """
    Frozen line item inside an order.

    Price, name and brand are copied from the product at checkout and
    never change afterwards.
    """

    __tablename__ = "order_items"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    order_id: uuid.UUID = Field(
        foreign_key="orders.id",
        index=True,
    )

    product_id: uuid.UUID = Field(
        foreign_key="products.id",
        index=True,
    )

    quantity: int = Field(
        gt=0,
        description="Quantity ordered (>=1)",
    )

    price: float = Field(
        description="Unit price at time of order",
    )

    product_name: str | None = None
    product_brand: str | None = None
